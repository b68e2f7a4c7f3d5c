# ayelearn/routers/experience_level.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ayelearn.core.database import get_db
from ayelearn.core.dependencies import get_current_admin
from ayelearn.models.admin import Admin
from ayelearn.schemas.common import ApiResponse, MessageResponse, StatusValue
from ayelearn.schemas.experience_level import (
    ExperienceLevelCreate,
    ExperienceLevelResponse,
    ExperienceLevelUpdate,
)
from ayelearn.services.experience_level import ExperienceLevelService

router = APIRouter(
    prefix="/api/experience-levels",
    tags=["Experience Levels"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=ApiResponse[List[ExperienceLevelResponse]])
def list_experience_levels(
    status: Optional[StatusValue] = Query(None),
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """Experience levels ordered by rank."""
    return {"success": True, "data": ExperienceLevelService(db).list_levels(status)}


@router.get("/{level_id}", response_model=ApiResponse[ExperienceLevelResponse])
def get_experience_level(
    level_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    return {"success": True, "data": ExperienceLevelService(db).get_level(level_id)}


@router.post("", response_model=ApiResponse[ExperienceLevelResponse], status_code=201)
def create_experience_level(
    level_in: ExperienceLevelCreate,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    level = ExperienceLevelService(db).create_level(level_in)
    return {
        "success": True,
        "message": "Experience level created successfully",
        "data": level,
    }


@router.put("/{level_id}", response_model=ApiResponse[ExperienceLevelResponse])
def update_experience_level(
    level_id: int,
    level_in: ExperienceLevelUpdate,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    level = ExperienceLevelService(db).update_level(level_id, level_in)
    return {
        "success": True,
        "message": "Experience level updated successfully",
        "data": level,
    }


@router.delete("/{level_id}", response_model=MessageResponse)
def delete_experience_level(
    level_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    ExperienceLevelService(db).delete_level(level_id)
    return {"success": True, "message": "Experience level deleted successfully"}
