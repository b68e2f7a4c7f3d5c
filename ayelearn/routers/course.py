# ayelearn/routers/course.py
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from ayelearn.core.database import get_db
from ayelearn.core.dependencies import get_current_admin, get_current_principal
from ayelearn.models.admin import Admin
from ayelearn.models.learner import Learner
from ayelearn.schemas.common import ApiResponse, MessageResponse
from ayelearn.schemas.course import (
    AssignedLearner,
    AssignLearnersRequest,
    AssignLearnersResult,
    CourseCreate,
    CourseCreateResponse,
    CourseDetail,
    CourseListResponse,
    CourseUpdate,
    UploadedCourseFile,
)
from ayelearn.services.course import CourseService

router = APIRouter(
    prefix="/api/courses",
    tags=["Courses"],
    responses={404: {"description": "Not found"}},
)


# ==================== Course Endpoints ====================


@router.get("", response_model=CourseListResponse)
def list_courses(
    department: Optional[str] = Query(None),
    level: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Search by title or overview"),
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """Courses newest first, each with learner/module/file counts."""
    courses = CourseService(db).list_courses(department, level, search)
    return {"success": True, "data": courses, "total": len(courses)}


@router.post("/upload-course-file", response_model=UploadedCourseFile)
async def upload_course_file(
    file: UploadFile = File(...),
    type: str = Form(..., description="documents, videos or practiceFiles"),
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    Upload a course document, video or practice file.
    The returned descriptor is posted back inside the course payload.
    """
    descriptor = await CourseService(db).upload_course_file(file, type)
    return {"success": True, "message": "File uploaded successfully", **descriptor}


@router.get("/{course_id}", response_model=ApiResponse[CourseDetail])
def get_course(
    course_id: int,
    db: Session = Depends(get_db),
    principal: Union[Admin, Learner] = Depends(get_current_principal),
):
    """
    Course with modules, files and assigned learners.
    Learners only see courses assigned to them, without the learner list.
    """
    service = CourseService(db)
    course = service.get_course(course_id)

    is_admin = isinstance(principal, Admin)
    if not is_admin:
        service.ensure_learner_assigned(course_id, principal.id)

    return {
        "success": True,
        "data": service.get_course_detail(course, include_learners=is_admin),
    }


@router.get("/{course_id}/learners", response_model=ApiResponse[List[AssignedLearner]])
def get_course_learners(
    course_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    service = CourseService(db)
    service.get_course(course_id)
    return {"success": True, "data": service.get_course_learners(course_id)}


@router.post("", response_model=CourseCreateResponse, status_code=201)
def create_course(
    course_in: CourseCreate,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    service = CourseService(db)
    course = service.create_course(course_in)
    return {
        "success": True,
        "message": "Course created successfully",
        "courseId": course.id,
        "data": service.get_course_detail(course),
    }


@router.put("/{course_id}", response_model=ApiResponse[CourseDetail])
def update_course(
    course_id: int,
    course_in: CourseUpdate,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    service = CourseService(db)
    course = service.update_course(course_id, course_in)
    return {
        "success": True,
        "message": "Course updated successfully",
        "data": service.get_course_detail(course),
    }


@router.delete("/{course_id}", response_model=MessageResponse)
def delete_course(
    course_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    CourseService(db).delete_course(course_id)
    return {"success": True, "message": "Course deleted successfully"}


# ==================== Assignments ====================


@router.post(
    "/{course_id}/assign-learners", response_model=ApiResponse[AssignLearnersResult]
)
def assign_learners(
    course_id: int,
    assignment_in: AssignLearnersRequest,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """Replace the course's assigned learners with the given ids."""
    result = CourseService(db).assign_learners(course_id, assignment_in.learner_ids)
    return {
        "success": True,
        "message": f"{result['assigned']} learner(s) assigned to course",
        "data": result,
    }


@router.delete("/{course_id}/learners/{learner_id}", response_model=MessageResponse)
def unassign_learner(
    course_id: int,
    learner_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    CourseService(db).unassign_learner(course_id, learner_id)
    return {"success": True, "message": "Learner removed from course"}
