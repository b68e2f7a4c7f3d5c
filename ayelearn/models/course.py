# ayelearn/models/course.py
from sqlalchemy import Column, Date, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from ayelearn.core.database import Base
from ayelearn.models.json_list import JSONList


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)

    # Basic Info
    title = Column(String(255), nullable=False, index=True)
    department = Column(String(100), nullable=False, index=True)
    level = Column(String(50), nullable=False, index=True)
    estimated_duration = Column(String(100), nullable=True)
    deadline = Column(Date, nullable=True)
    overview = Column(Text, nullable=True)

    # JSON arrays of strings
    learning_objectives = Column(JSONList, nullable=True)
    assessment_criteria = Column(JSONList, nullable=True)
    key_skills = Column(JSONList, nullable=True)

    # Timestamps
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self):
        return f"<Course(id={self.id}, title='{self.title}')>"
