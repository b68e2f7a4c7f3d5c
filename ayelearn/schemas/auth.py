# ayelearn/schemas/auth.py
from pydantic import BaseModel, EmailStr, Field, field_validator

from ayelearn.schemas.admin import AdminBrief
from ayelearn.schemas.learner import LearnerResponse


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class ForgotPasswordRequest(BaseModel):
    email: EmailStr

    @field_validator("email")
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class ResetPasswordRequest(BaseModel):
    password: str = Field(..., min_length=6, max_length=128)


class AdminLoginResponse(BaseModel):
    success: bool = True
    message: str
    token: str
    data: AdminBrief


class LearnerLoginResponse(BaseModel):
    success: bool = True
    message: str
    token: str
    data: LearnerResponse
