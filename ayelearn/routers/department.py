# ayelearn/routers/department.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ayelearn.core.database import get_db
from ayelearn.core.dependencies import get_current_admin
from ayelearn.models.admin import Admin
from ayelearn.schemas.common import ApiResponse, MessageResponse, StatusValue
from ayelearn.schemas.department import (
    DepartmentCreate,
    DepartmentResponse,
    DepartmentUpdate,
)
from ayelearn.services.department import DepartmentService

router = APIRouter(
    prefix="/api/departments",
    tags=["Departments"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=ApiResponse[List[DepartmentResponse]])
def list_departments(
    status: Optional[StatusValue] = Query(None, description="Only active/inactive"),
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """Departments ordered by name."""
    return {"success": True, "data": DepartmentService(db).list_departments(status)}


@router.get("/{department_id}", response_model=ApiResponse[DepartmentResponse])
def get_department(
    department_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    return {"success": True, "data": DepartmentService(db).get_department(department_id)}


@router.post("", response_model=ApiResponse[DepartmentResponse], status_code=201)
def create_department(
    department_in: DepartmentCreate,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    department = DepartmentService(db).create_department(department_in)
    return {
        "success": True,
        "message": "Department created successfully",
        "data": department,
    }


@router.put("/{department_id}", response_model=ApiResponse[DepartmentResponse])
def update_department(
    department_id: int,
    department_in: DepartmentUpdate,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    department = DepartmentService(db).update_department(department_id, department_in)
    return {
        "success": True,
        "message": "Department updated successfully",
        "data": department,
    }


@router.delete("/{department_id}", response_model=MessageResponse)
def delete_department(
    department_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    DepartmentService(db).delete_department(department_id)
    return {"success": True, "message": "Department deleted successfully"}
