# ayelearn/schemas/course.py
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ==================== Uploaded File Descriptors ====================


class CourseFileIn(BaseModel):
    """File descriptor returned by the upload endpoint and posted back with the course."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    file_name: str = Field(..., min_length=1, max_length=255, alias="fileName")
    original_name: Optional[str] = Field(None, max_length=255, alias="originalName")
    file_path: str = Field(..., min_length=1, max_length=500, alias="filePath")
    file_type: Optional[str] = Field(None, alias="fileType")
    file_size: Optional[int] = Field(None, ge=0, alias="fileSize")

    @field_validator("file_path")
    def validate_file_path(cls, v: str) -> str:
        v = v.lstrip("/")
        if v.startswith("storage/"):
            v = v[len("storage/") :]
        if ".." in v.split("/") or not v.startswith("courses/"):
            raise ValueError("File path must point to an uploaded course file")
        return v


class ModuleIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    heading: str = Field(..., min_length=1, max_length=255)
    video_heading: Optional[str] = Field(None, max_length=255, alias="videoHeading")
    assessment_name: Optional[str] = Field(None, max_length=255, alias="assessmentName")
    assessment_link: Optional[str] = Field(None, max_length=500, alias="assessmentLink")
    documents: List[CourseFileIn] = []
    videos: List[CourseFileIn] = []


def _clean_string_list(value):
    if value is None:
        return []
    if isinstance(value, list):
        return [item.strip() for item in value if isinstance(item, str) and item.strip()]
    return value


# ==================== Course Schemas ====================


class CourseCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=255)
    department: str = Field(..., min_length=1, max_length=100)
    level: str = Field(..., min_length=1, max_length=50)
    estimated_duration: Optional[str] = Field(
        None, max_length=100, alias="estimatedDuration"
    )
    deadline: Optional[date] = None
    overview: Optional[str] = None
    learning_objectives: List[str] = Field([], alias="learningObjectives")
    assessment_criteria: List[str] = Field([], alias="assessmentCriteria")
    key_skills: List[str] = Field([], alias="keySkills")
    modules: List[ModuleIn] = []
    practice_files: List[CourseFileIn] = Field([], alias="practiceFiles")
    learner_ids: List[int] = Field([], alias="learnerIds")

    @field_validator(
        "learning_objectives", "assessment_criteria", "key_skills", mode="before"
    )
    def drop_blank_entries(cls, v):
        return _clean_string_list(v)

    @field_validator("deadline", mode="before")
    def empty_deadline(cls, v):
        return None if v == "" else v


class CourseUpdate(BaseModel):
    """Partial update. Array fields and modules are replaced when given."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    department: Optional[str] = Field(None, min_length=1, max_length=100)
    level: Optional[str] = Field(None, min_length=1, max_length=50)
    estimated_duration: Optional[str] = Field(
        None, max_length=100, alias="estimatedDuration"
    )
    deadline: Optional[date] = None
    overview: Optional[str] = None
    learning_objectives: Optional[List[str]] = Field(None, alias="learningObjectives")
    assessment_criteria: Optional[List[str]] = Field(None, alias="assessmentCriteria")
    key_skills: Optional[List[str]] = Field(None, alias="keySkills")
    modules: Optional[List[ModuleIn]] = None
    practice_files: Optional[List[CourseFileIn]] = Field(None, alias="practiceFiles")

    @field_validator(
        "learning_objectives", "assessment_criteria", "key_skills", mode="before"
    )
    def drop_blank_entries(cls, v):
        return None if v is None else _clean_string_list(v)

    @field_validator("deadline", mode="before")
    def empty_deadline(cls, v):
        return None if v == "" else v


class AssignLearnersRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    learner_ids: List[int] = Field(..., alias="learnerIds")


# ==================== Responses ====================


class CourseFileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    module_id: Optional[int] = None
    file_name: str
    original_name: Optional[str] = None
    file_path: str
    file_type: str
    file_size: Optional[int] = None
    created_at: datetime


class ModuleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    heading: str
    video_heading: Optional[str] = None
    assessment_name: Optional[str] = None
    assessment_link: Optional[str] = None
    module_order: int
    documents: List[CourseFileResponse] = []
    videos: List[CourseFileResponse] = []


class AssignedLearner(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    department: Optional[str] = None
    experience_level: Optional[str] = None
    status: str
    assigned_at: datetime
    progress_status: str
    completed_modules: int
    progress_percentage: int
    score: Optional[float] = None
    completed_at: Optional[datetime] = None


class CourseBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

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
    created_at: datetime
    updated_at: datetime


class CourseListItem(CourseBase):
    assigned_learners_count: int = 0
    modules_count: int = 0
    files_count: int = 0


class CourseDetail(CourseBase):
    modules: List[ModuleResponse] = []
    practice_files: List[CourseFileResponse] = []
    assigned_learners: Optional[List[AssignedLearner]] = None


class CourseListResponse(BaseModel):
    success: bool = True
    data: List[CourseListItem]
    total: int


class CourseCreateResponse(BaseModel):
    success: bool = True
    message: str
    courseId: int
    data: CourseDetail


class AssignLearnersResult(BaseModel):
    assigned: int
    added: List[int]
    removed: List[int]
    kept: List[int]


class UploadedCourseFile(BaseModel):
    success: bool = True
    message: str
    fileName: str
    originalName: Optional[str] = None
    filePath: str
    fileType: str
    fileSize: int
