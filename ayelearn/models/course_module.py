# ayelearn/models/course_module.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from ayelearn.core.database import Base


class CourseModule(Base):
    __tablename__ = "course_modules"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )

    heading = Column(String(255), nullable=False)
    video_heading = Column(String(255), nullable=True)
    assessment_name = Column(String(255), nullable=True)
    assessment_link = Column(String(500), nullable=True)
    module_order = Column(Integer, nullable=False, default=0)

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self):
        return f"<CourseModule(id={self.id}, course_id={self.course_id}, order={self.module_order})>"
