# ayelearn/routers/admin.py
from fastapi import APIRouter, Depends, File, Request, UploadFile
from sqlalchemy.orm import Session

from ayelearn.core.config import settings
from ayelearn.core.database import get_db
from ayelearn.core.dependencies import get_current_admin
from ayelearn.core.limiter import limiter
from ayelearn.models.admin import Admin
from ayelearn.schemas.admin import (
    AdminBrief,
    AdminProfileUpdate,
    AdminResponse,
    DashboardStats,
    DashboardSummary,
)
from ayelearn.schemas.auth import (
    AdminLoginResponse,
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
)
from ayelearn.schemas.common import ApiResponse, ImageUploadResponse, MessageResponse
from ayelearn.services.admin import AdminService
from ayelearn.services.auth import AuthService

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    responses={404: {"description": "Not found"}},
)


# ==================== Authentication ====================


@router.post("/login", response_model=AdminLoginResponse)
@limiter.limit(settings.rate_limit_login)
def admin_login(
    request: Request,
    credentials: LoginRequest,
    db: Session = Depends(get_db),
):
    """Admin login with email and password."""
    admin, token = AuthService(db).admin_login(credentials.email, credentials.password)
    return {
        "success": True,
        "message": "Login successful",
        "token": token,
        "data": AdminBrief.model_validate(admin),
    }


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit(settings.rate_limit_login)
def admin_forgot_password(
    request: Request,
    payload: ForgotPasswordRequest,
    db: Session = Depends(get_db),
):
    AuthService(db).forgot_password(Admin, payload.email)
    return {"success": True, "message": "Password reset email sent successfully"}


@router.post("/reset-password/{token}", response_model=MessageResponse)
def admin_reset_password(
    token: str,
    payload: ResetPasswordRequest,
    db: Session = Depends(get_db),
):
    AuthService(db).reset_password(Admin, token, payload.password)
    return {"success": True, "message": "Password reset successfully"}


# ==================== Profile ====================


@router.get("/profile", response_model=ApiResponse[AdminResponse])
def get_profile(current_admin: Admin = Depends(get_current_admin)):
    return {"success": True, "data": current_admin}


@router.put("/profile", response_model=ApiResponse[AdminResponse])
def update_profile(
    profile_in: AdminProfileUpdate,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    admin = AdminService(db).update_profile(current_admin, profile_in)
    return {"success": True, "message": "Profile updated successfully", "data": admin}


@router.post("/profile/upload-image", response_model=ImageUploadResponse)
async def upload_profile_image(
    profile_image: UploadFile = File(..., description="JPG or PNG, up to 5MB"),
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    image_path = await AdminService(db).upload_profile_image(current_admin, profile_image)
    return {
        "success": True,
        "message": "Profile image uploaded successfully",
        "imagePath": image_path,
    }


# ==================== Dashboard ====================


@router.get("/dashboard-stats", response_model=ApiResponse[DashboardStats])
def dashboard_stats(
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    return {"success": True, "data": AdminService(db).get_dashboard_stats()}


@router.get("/dashboard", response_model=ApiResponse[DashboardSummary])
def dashboard(
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    return {"success": True, "data": AdminService(db).get_dashboard()}
