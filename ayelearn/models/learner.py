# ayelearn/models/learner.py
from sqlalchemy import Column, Date, DateTime, Integer, String
from sqlalchemy.sql import func

from ayelearn.core.database import Base


class Learner(Base):
    __tablename__ = "learners"

    id = Column(Integer, primary_key=True, index=True)

    # Personal Info
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=True)  # Set by admin or via reset link
    phone = Column(String(20), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(10), nullable=True)  # 'Male', 'Female', 'Other'

    # Organisation, referenced by name
    department = Column(String(100), nullable=True, index=True)
    experience_level = Column(String(50), nullable=True, index=True)

    status = Column(String(20), nullable=False, default="active", index=True)
    avatar_url = Column(String(500), nullable=True)

    # Password reset
    reset_token = Column(String(255), nullable=True, index=True)
    reset_token_expires = Column(DateTime(timezone=True), nullable=True)

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

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Learner(id={self.id}, email='{self.email}', status='{self.status}')>"
