# ayelearn/routers/learner.py
from typing import List, Literal, Optional, Union

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from sqlalchemy.orm import Session

from ayelearn.core.config import settings
from ayelearn.core.database import get_db
from ayelearn.core.dependencies import (
    ensure_self_or_admin,
    get_current_admin,
    get_current_learner,
    get_current_principal,
)
from ayelearn.core.limiter import limiter
from ayelearn.models.admin import Admin
from ayelearn.models.learner import Learner
from ayelearn.schemas.auth import (
    ForgotPasswordRequest,
    LearnerLoginResponse,
    LoginRequest,
    ResetPasswordRequest,
)
from ayelearn.schemas.common import (
    ApiResponse,
    ImageUploadResponse,
    MessageResponse,
    StatusValue,
)
from ayelearn.schemas.learner import (
    LearnerCourse,
    LearnerCreate,
    LearnerListResponse,
    LearnerResponse,
    LearnerStatusUpdate,
    LearnerUpdate,
    ProgressUpdate,
)
from ayelearn.services.auth import AuthService
from ayelearn.services.learner import LearnerService
from ayelearn.utils.file_upload import file_upload_service

router = APIRouter(
    prefix="/api/learners",
    tags=["Learners"],
    responses={404: {"description": "Not found"}},
)


# ==================== Learner Authentication ====================


@router.post("/login", response_model=LearnerLoginResponse)
@limiter.limit(settings.rate_limit_login)
def learner_login(
    request: Request,
    credentials: LoginRequest,
    db: Session = Depends(get_db),
):
    learner, token = AuthService(db).learner_login(
        credentials.email, credentials.password
    )
    return {
        "success": True,
        "message": "Login successful",
        "token": token,
        "data": LearnerResponse.model_validate(learner),
    }


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit(settings.rate_limit_login)
def learner_forgot_password(
    request: Request,
    payload: ForgotPasswordRequest,
    db: Session = Depends(get_db),
):
    AuthService(db).forgot_password(Learner, payload.email)
    return {"success": True, "message": "Password reset email sent successfully"}


@router.post("/reset-password/{token}", response_model=MessageResponse)
def learner_reset_password(
    token: str,
    payload: ResetPasswordRequest,
    db: Session = Depends(get_db),
):
    AuthService(db).reset_password(Learner, token, payload.password)
    return {"success": True, "message": "Password reset successfully"}


@router.get("/me", response_model=ApiResponse[LearnerResponse])
def get_me(current_learner: Learner = Depends(get_current_learner)):
    return {"success": True, "data": current_learner}


# ==================== Learner Management ====================


@router.get("", response_model=LearnerListResponse)
def list_learners(
    limit: Optional[int] = Query(None, ge=1, le=1000),
    sort: str = Query("created_at"),
    order: Literal["asc", "desc"] = Query("desc"),
    status: Optional[StatusValue] = Query(None),
    search: Optional[str] = Query(None, description="Search by name or email"),
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    List learners.
    Unknown sort columns fall back to created_at.
    """
    learners, total = LearnerService(db).list_learners(limit, sort, order, status, search)
    return {"success": True, "data": learners, "total": total}


@router.post("/upload-image", response_model=ImageUploadResponse)
async def upload_learner_image(
    avatar: UploadFile = File(..., description="JPG or PNG, up to 5MB"),
    current_admin: Admin = Depends(get_current_admin),
):
    """Store an avatar before the learner exists; the path is sent back in avatar_url."""
    _, image_path = await file_upload_service.save_image(avatar, "learners")
    return {
        "success": True,
        "message": "Image uploaded successfully",
        "imagePath": image_path,
    }


@router.post("", response_model=ApiResponse[LearnerResponse], status_code=201)
def create_learner(
    learner_in: LearnerCreate,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    learner = LearnerService(db).create_learner(learner_in)
    return {"success": True, "message": "Learner created successfully", "data": learner}


@router.get("/{learner_id}", response_model=ApiResponse[LearnerResponse])
def get_learner(
    learner_id: int,
    db: Session = Depends(get_db),
    principal: Union[Admin, Learner] = Depends(get_current_principal),
):
    ensure_self_or_admin(principal, learner_id)
    return {"success": True, "data": LearnerService(db).get_learner(learner_id)}


@router.put("/{learner_id}", response_model=ApiResponse[LearnerResponse])
def update_learner(
    learner_id: int,
    learner_in: LearnerUpdate,
    db: Session = Depends(get_db),
    principal: Union[Admin, Learner] = Depends(get_current_principal),
):
    ensure_self_or_admin(principal, learner_id)
    learner = LearnerService(db).update_learner(
        learner_id, learner_in, by_admin=isinstance(principal, Admin)
    )
    return {"success": True, "message": "Learner updated successfully", "data": learner}


@router.patch("/{learner_id}/status", response_model=ApiResponse[LearnerResponse])
def update_learner_status(
    learner_id: int,
    status_in: Optional[LearnerStatusUpdate] = None,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """Set the status, or toggle it when the body carries none."""
    new_status = status_in.status if status_in else None
    learner = LearnerService(db).set_status(learner_id, new_status)
    return {
        "success": True,
        "message": f"Learner status updated to {learner.status}",
        "data": learner,
    }


@router.delete("/{learner_id}", response_model=MessageResponse)
def delete_learner(
    learner_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    LearnerService(db).delete_learner(learner_id)
    return {"success": True, "message": "Learner deleted successfully"}


@router.post("/{learner_id}/avatar", response_model=ApiResponse[LearnerResponse])
async def upload_learner_avatar(
    learner_id: int,
    avatar: UploadFile = File(...),
    db: Session = Depends(get_db),
    principal: Union[Admin, Learner] = Depends(get_current_principal),
):
    ensure_self_or_admin(principal, learner_id)
    learner = await LearnerService(db).upload_avatar(learner_id, avatar)
    return {"success": True, "message": "Avatar uploaded successfully", "data": learner}


# ==================== Assigned Courses ====================


@router.get("/{learner_id}/courses", response_model=ApiResponse[List[LearnerCourse]])
def get_learner_courses(
    learner_id: int,
    db: Session = Depends(get_db),
    principal: Union[Admin, Learner] = Depends(get_current_principal),
):
    ensure_self_or_admin(principal, learner_id)
    return {"success": True, "data": LearnerService(db).get_learner_courses(learner_id)}


@router.put(
    "/{learner_id}/courses/{course_id}/progress",
    response_model=ApiResponse[LearnerCourse],
)
def update_course_progress(
    learner_id: int,
    course_id: int,
    progress_in: ProgressUpdate,
    db: Session = Depends(get_db),
    principal: Union[Admin, Learner] = Depends(get_current_principal),
):
    ensure_self_or_admin(principal, learner_id)
    service = LearnerService(db)
    service.update_progress(learner_id, course_id, progress_in)
    course = next(c for c in service.get_learner_courses(learner_id) if c["id"] == course_id)
    return {"success": True, "message": "Progress updated successfully", "data": course}
