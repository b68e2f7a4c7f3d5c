# ayelearn/schemas/course_learner.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class CourseLearnerRow(BaseModel):
    id: int
    course_id: int
    learner_id: int
    course_title: str
    course_department: str
    course_level: str
    learner_first_name: str
    learner_last_name: str
    learner_email: str
    learner_department: Optional[str] = None
    learner_experience_level: Optional[str] = None
    status: str
    completed_modules: int
    progress_percentage: int
    score: Optional[float] = None
    completed_at: Optional[datetime] = None
    assigned_at: datetime


class OffsetPagination(BaseModel):
    total: int
    limit: int
    offset: int


class CourseLearnerListResponse(BaseModel):
    success: bool = True
    data: List[CourseLearnerRow]
    pagination: OffsetPagination
