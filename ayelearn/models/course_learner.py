# ayelearn/models/course_learner.py
from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.sql import func

from ayelearn.core.database import Base


class CourseLearner(Base):
    """
    Assignment of a learner to a course, with progress tracking.
    """

    __tablename__ = "course_learners"
    __table_args__ = (
        UniqueConstraint("course_id", "learner_id", name="unique_course_learner"),
    )

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    learner_id = Column(
        Integer, ForeignKey("learners.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Progress tracking
    status = Column(
        String(20), nullable=False, default="not_started"
    )  # 'not_started', 'in_progress', 'completed'
    completed_modules = Column(Integer, nullable=False, default=0)
    progress_percentage = Column(Integer, nullable=False, default=0)
    score = Column(Numeric(5, 2), nullable=True)

    assigned_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    completed_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<CourseLearner(course_id={self.course_id}, learner_id={self.learner_id}, status={self.status})>"
