# ayelearn/models/experience_level.py
from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from ayelearn.core.database import Base


class ExperienceLevel(Base):
    __tablename__ = "experience_levels"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    level_order = Column(Integer, nullable=False, unique=True)  # Rank 1..100
    status = Column(String(20), nullable=False, default="active")

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
        return f"<ExperienceLevel(id={self.id}, name='{self.name}', order={self.level_order})>"
