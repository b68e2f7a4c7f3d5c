# ayelearn/schemas/learner.py
import re
from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ayelearn.schemas.common import PHONE_PATTERN, StatusValue

NAME_RE = re.compile(r"^[A-Za-z\s]+$")
PHONE_RE = re.compile(PHONE_PATTERN)
MIN_BIRTH_DATE = date(1900, 1, 1)

Gender = Literal["Male", "Female", "Other"]


def _check_name(value: Optional[str], label: str) -> Optional[str]:
    if value is None:
        return value
    if not NAME_RE.match(value):
        raise ValueError(f"{label} can only contain letters and spaces")
    return value


def _check_phone(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    if not PHONE_RE.match(value):
        raise ValueError(
            "Please enter a valid phone number (e.g., +1234567890 or 1234567890)"
        )
    if len(value) < 10:
        raise ValueError("Phone number must be at least 10 digits long")
    if len(value) > 15:
        raise ValueError("Phone number must be less than 15 digits")
    return value


def _check_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    if len(value) > 255:
        raise ValueError("Email must be less than 255 characters")
    return value.lower()


def _check_avatar_path(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    value = value.lstrip("/")
    if value.startswith("storage/"):
        value = value[len("storage/") :]
    if ".." in value.split("/") or not value.startswith("learners/"):
        raise ValueError("Avatar must be an image uploaded for learners")
    return value


def _check_birth_date(value: Optional[date]) -> Optional[date]:
    if value is None:
        return value
    if value > date.today():
        raise ValueError("Date of birth cannot be in the future")
    if value < MIN_BIRTH_DATE:
        raise ValueError("Date of birth cannot be before 1900")
    return value


# ==================== Learner Schemas ====================


class LearnerCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Gender
    department: str = Field(..., min_length=1, max_length=100)
    experience_level: str = Field(..., min_length=1, max_length=50)
    status: StatusValue = "active"
    password: Optional[str] = Field(None, min_length=6, max_length=128)
    avatar_url: Optional[str] = Field(None, max_length=500)

    @field_validator("first_name")
    def validate_first_name(cls, v):
        return _check_name(v, "First name")

    @field_validator("last_name")
    def validate_last_name(cls, v):
        return _check_name(v, "Last name")

    @field_validator("email")
    def validate_email(cls, v):
        return _check_email(v)

    @field_validator("phone")
    def validate_phone(cls, v):
        return _check_phone(v)

    @field_validator("date_of_birth", mode="before")
    def empty_date(cls, v):
        return None if v == "" else v

    @field_validator("date_of_birth")
    def validate_birth_date(cls, v):
        return _check_birth_date(v)

    @field_validator("avatar_url")
    def validate_avatar_url(cls, v):
        return _check_avatar_path(v)


class LearnerUpdate(BaseModel):
    """Every field optional, only provided non-null values are applied."""

    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    department: Optional[str] = Field(None, min_length=1, max_length=100)
    experience_level: Optional[str] = Field(None, min_length=1, max_length=50)
    status: Optional[StatusValue] = None
    password: Optional[str] = Field(None, min_length=6, max_length=128)
    avatar_url: Optional[str] = Field(None, max_length=500)

    @field_validator("first_name")
    def validate_first_name(cls, v):
        return _check_name(v, "First name")

    @field_validator("last_name")
    def validate_last_name(cls, v):
        return _check_name(v, "Last name")

    @field_validator("email")
    def validate_email(cls, v):
        return _check_email(v)

    @field_validator("phone")
    def validate_phone(cls, v):
        return _check_phone(v)

    @field_validator("date_of_birth", mode="before")
    def empty_date(cls, v):
        return None if v == "" else v

    @field_validator("date_of_birth")
    def validate_birth_date(cls, v):
        return _check_birth_date(v)

    @field_validator("avatar_url")
    def validate_avatar_url(cls, v):
        return _check_avatar_path(v)


class LearnerStatusUpdate(BaseModel):
    status: Optional[StatusValue] = None


class LearnerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    department: Optional[str] = None
    experience_level: Optional[str] = None
    status: str
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class LearnerListResponse(BaseModel):
    success: bool = True
    data: List[LearnerResponse]
    total: int


class ProgressUpdate(BaseModel):
    completed_modules: int = Field(..., ge=0)
    score: Optional[float] = Field(None, ge=0, le=100)


class LearnerCourse(BaseModel):
    """A course as seen from a learner's assignment list."""

    id: int
    title: str
    department: str
    level: str
    estimated_duration: Optional[str] = None
    deadline: Optional[date] = None
    overview: Optional[str] = None
    learning_objectives: List[str] = []
    assessment_criteria: List[str] = []
    key_skills: List[str] = []
    total_modules: int
    assigned_at: datetime
    status: str
    completed_modules: int
    progress_percentage: int
    score: Optional[float] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
