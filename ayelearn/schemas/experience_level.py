# ayelearn/schemas/experience_level.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ayelearn.schemas.common import StatusValue

LEVEL_NAME_PATTERN = r"^[A-Za-z0-9\s]+$"


class ExperienceLevelBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=50, pattern=LEVEL_NAME_PATTERN)
    description: Optional[str] = Field(None, max_length=1000)
    level_order: int = Field(..., ge=1, le=100)
    status: StatusValue = "active"


class ExperienceLevelCreate(ExperienceLevelBase):
    pass


class ExperienceLevelUpdate(ExperienceLevelBase):
    pass


class ExperienceLevelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    level_order: int
    status: str
    created_at: datetime
    updated_at: datetime
