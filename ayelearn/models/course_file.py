# ayelearn/models/course_file.py
from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from ayelearn.core.database import Base


class CourseFile(Base):
    """
    Uploaded course material.
    Documents and videos belong to a module, practice files only to the course.
    """

    __tablename__ = "course_files"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    module_id = Column(
        Integer,
        ForeignKey("course_modules.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    file_name = Column(String(255), nullable=False)  # Stored UUID name
    original_name = Column(String(255), nullable=True)
    file_path = Column(String(500), nullable=False)  # Relative to upload dir
    file_type = Column(String(20), nullable=False)  # 'document', 'video', 'practice'
    file_size = Column(BigInteger, nullable=True)

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self):
        return f"<CourseFile(id={self.id}, type='{self.file_type}', path='{self.file_path}')>"
