# ayelearn/schemas/department.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ayelearn.schemas.common import StatusValue

# ==================== Department Schemas ====================

DEPARTMENT_NAME_PATTERN = r"^[A-Za-z0-9\s\-&]+$"


class DepartmentBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100, pattern=DEPARTMENT_NAME_PATTERN)
    description: Optional[str] = Field(None, max_length=1000)
    status: StatusValue = "active"


class DepartmentCreate(DepartmentBase):
    pass


class DepartmentUpdate(DepartmentBase):
    pass


class DepartmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime
