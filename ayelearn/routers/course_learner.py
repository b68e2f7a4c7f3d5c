# ayelearn/routers/course_learner.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ayelearn.core.config import settings
from ayelearn.core.database import get_db
from ayelearn.core.dependencies import get_current_admin
from ayelearn.models.admin import Admin
from ayelearn.schemas.course_learner import CourseLearnerListResponse
from ayelearn.services.course_learner import CourseLearnerService

router = APIRouter(
    prefix="/api/course-learners",
    tags=["Course Assignments"],
)


@router.get("", response_model=CourseLearnerListResponse)
def list_course_learners(
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0),
    course_id: Optional[int] = Query(None),
    learner_id: Optional[int] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """All course assignments, newest first."""
    rows, total = CourseLearnerService(db).list_assignments(
        limit, offset, course_id, learner_id, search
    )
    return {
        "success": True,
        "data": rows,
        "pagination": {"total": total, "limit": limit, "offset": offset},
    }
