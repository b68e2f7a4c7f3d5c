# ayelearn/services/learner.py
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ayelearn.core.decorator import db_exception
from ayelearn.core.hasher import PasswordHelper
from ayelearn.models.course import Course
from ayelearn.models.course_learner import CourseLearner
from ayelearn.models.course_module import CourseModule
from ayelearn.models.learner import Learner
from ayelearn.schemas.learner import LearnerCreate, LearnerUpdate, ProgressUpdate
from ayelearn.services.department import DepartmentService
from ayelearn.services.experience_level import ExperienceLevelService
from ayelearn.utils.file_upload import file_upload_service

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = {
    "id": Learner.id,
    "first_name": Learner.first_name,
    "last_name": Learner.last_name,
    "email": Learner.email,
    "department": Learner.department,
    "experience_level": Learner.experience_level,
    "status": Learner.status,
    "created_at": Learner.created_at,
    "updated_at": Learner.updated_at,
}


def progress_state(completed: int, total: int) -> Tuple[int, int, str]:
    """Clamp completed modules to the course size and derive percentage and status."""
    completed = max(0, min(completed, total))
    percentage = round(completed * 100 / total) if total else 0
    if completed == 0:
        state = "not_started"
    elif completed < total:
        state = "in_progress"
    else:
        state = "completed"
    return completed, percentage, state


class LearnerService:
    def __init__(self, db: Session):
        self.db = db

    # ---------- Lookups ----------

    def get_learner(self, learner_id: int) -> Learner:
        learner = self.db.query(Learner).filter(Learner.id == learner_id).first()
        if not learner:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Learner not found"
            )
        return learner

    def list_learners(
        self,
        limit: Optional[int] = None,
        sort: str = "created_at",
        order: str = "desc",
        status_filter: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Learner], int]:
        query = self.db.query(Learner)

        if status_filter:
            query = query.filter(Learner.status == status_filter)

        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    Learner.first_name.ilike(pattern),
                    Learner.last_name.ilike(pattern),
                    Learner.email.ilike(pattern),
                )
            )

        total = query.count()

        column = SORTABLE_COLUMNS.get(sort, Learner.created_at)
        direction = column.asc() if order == "asc" else column.desc()
        query = query.order_by(direction, Learner.id.desc())

        if limit:
            query = query.limit(limit)

        return query.all(), total

    def _ensure_unique_email(self, email: str, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(Learner.id).filter(Learner.email == email)
        if exclude_id is not None:
            query = query.filter(Learner.id != exclude_id)
        if query.first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Email already exists"
            )

    def _validate_references(self, data: dict) -> None:
        if data.get("department") is not None:
            DepartmentService(self.db).require_name(data["department"])
        if data.get("experience_level") is not None:
            ExperienceLevelService(self.db).require_name(data["experience_level"])

    # ---------- Writes ----------

    @db_exception
    def create_learner(self, learner_in: LearnerCreate) -> Learner:
        data = learner_in.model_dump()
        self._validate_references(data)
        self._ensure_unique_email(data["email"])

        password = data.pop("password", None)
        learner = Learner(
            **data,
            password=PasswordHelper.hash_password(password) if password else None,
        )
        self.db.add(learner)
        self.db.commit()
        self.db.refresh(learner)

        logger.info(f"Learner created: {learner.email} (ID: {learner.id})")
        return learner

    @db_exception
    def update_learner(
        self, learner_id: int, learner_in: LearnerUpdate, by_admin: bool = True
    ) -> Learner:
        """Apply only the non-null fields of the update."""
        learner = self.get_learner(learner_id)
        data = learner_in.model_dump(exclude_none=True)

        if not by_admin and "status" in data:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Learners cannot change their own status",
            )
        if not by_admin and "avatar_url" in data:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Use the avatar upload to change your picture",
            )

        if not data:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No valid fields to update",
            )

        self._validate_references(data)
        if "email" in data and data["email"] != learner.email:
            self._ensure_unique_email(data["email"], exclude_id=learner_id)

        if "password" in data:
            data["password"] = PasswordHelper.hash_password(data["password"])

        for field, value in data.items():
            setattr(learner, field, value)

        self.db.commit()
        self.db.refresh(learner)

        logger.info(f"Learner updated: {learner.email} fields={sorted(data)}")
        return learner

    @db_exception
    def set_status(self, learner_id: int, new_status: Optional[str] = None) -> Learner:
        """Set the status, or flip active/inactive when none is given."""
        learner = self.get_learner(learner_id)
        if new_status is None:
            new_status = "inactive" if learner.status == "active" else "active"

        learner.status = new_status
        self.db.commit()
        self.db.refresh(learner)

        logger.info(f"Learner {learner.id} status set to {learner.status}")
        return learner

    @db_exception
    def delete_learner(self, learner_id: int) -> None:
        learner = self.get_learner(learner_id)
        avatar = learner.avatar_url

        self.db.delete(learner)
        self.db.commit()

        file_upload_service.delete_file(avatar)
        logger.info(f"Learner deleted: {learner_id}")

    async def upload_avatar(self, learner_id: int, avatar: UploadFile) -> Learner:
        learner = self.get_learner(learner_id)

        _, relative_path = await file_upload_service.save_image(avatar, "learners")
        old_avatar = learner.avatar_url

        learner.avatar_url = relative_path
        self.db.commit()
        self.db.refresh(learner)

        if old_avatar and old_avatar != relative_path:
            file_upload_service.delete_file(old_avatar)

        logger.info(f"Avatar uploaded for learner {learner_id}: {relative_path}")
        return learner

    # ---------- Assigned courses ----------

    def _module_counts(self):
        return (
            self.db.query(
                CourseModule.course_id.label("course_id"),
                func.count(CourseModule.id).label("total_modules"),
            )
            .group_by(CourseModule.course_id)
            .subquery()
        )

    def get_learner_courses(self, learner_id: int) -> List[dict]:
        self.get_learner(learner_id)
        counts = self._module_counts()

        rows = (
            self.db.query(Course, CourseLearner, counts.c.total_modules)
            .join(CourseLearner, CourseLearner.course_id == Course.id)
            .outerjoin(counts, counts.c.course_id == Course.id)
            .filter(CourseLearner.learner_id == learner_id)
            .order_by(CourseLearner.assigned_at.desc(), CourseLearner.id.desc())
            .all()
        )

        return [
            {
                "id": course.id,
                "title": course.title,
                "department": course.department,
                "level": course.level,
                "estimated_duration": course.estimated_duration,
                "deadline": course.deadline,
                "overview": course.overview,
                "learning_objectives": course.learning_objectives or [],
                "assessment_criteria": course.assessment_criteria or [],
                "key_skills": course.key_skills or [],
                "total_modules": total_modules or 0,
                "assigned_at": link.assigned_at,
                "status": link.status,
                "completed_modules": link.completed_modules,
                "progress_percentage": link.progress_percentage,
                "score": float(link.score) if link.score is not None else None,
                "completed_at": link.completed_at,
                "created_at": course.created_at,
                "updated_at": course.updated_at,
            }
            for course, link, total_modules in rows
        ]

    @db_exception
    def update_progress(
        self, learner_id: int, course_id: int, progress_in: ProgressUpdate
    ) -> CourseLearner:
        link = (
            self.db.query(CourseLearner)
            .filter(
                CourseLearner.learner_id == learner_id,
                CourseLearner.course_id == course_id,
            )
            .first()
        )
        if not link:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Course is not assigned to this learner",
            )

        total = (
            self.db.query(func.count(CourseModule.id))
            .filter(CourseModule.course_id == course_id)
            .scalar()
        )
        completed, percentage, state = progress_state(progress_in.completed_modules, total)

        link.completed_modules = completed
        link.progress_percentage = percentage
        if state == "completed" and link.status != "completed":
            link.completed_at = datetime.now(timezone.utc)
        elif state != "completed":
            link.completed_at = None
        link.status = state
        if progress_in.score is not None:
            link.score = progress_in.score

        self.db.commit()
        self.db.refresh(link)

        logger.info(
            f"Progress for learner {learner_id} in course {course_id}: "
            f"{completed}/{total} ({state})"
        )
        return link


