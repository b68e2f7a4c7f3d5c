# ayelearn/schemas/admin.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ayelearn.schemas.common import PHONE_PATTERN


class AdminBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class AdminResponse(AdminBrief):
    phone_number: Optional[str] = None
    profile_image: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class AdminProfileUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone_number: Optional[str] = Field(None, pattern=PHONE_PATTERN)


class DashboardStats(BaseModel):
    activeLearners: int
    totalCourses: int
    learnerGrowth: str
    courseGrowth: str
    completedAssessments: int
    assessmentRate: int
    avgScore: float
    scoreGrowth: str
    reportsExported: int
    reportGrowth: str


class RecentLearner(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    department: Optional[str] = None
    status: str
    created_at: datetime


class RecentCourse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    department: str
    level: str
    created_at: datetime


class DashboardSummary(BaseModel):
    total_learners: int
    active_learners: int
    total_courses: int
    total_departments: int
    total_experience_levels: int
    total_assignments: int
    recent_learners: List[RecentLearner]
    recent_courses: List[RecentCourse]
