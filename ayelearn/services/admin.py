# ayelearn/services/admin.py
import logging
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from ayelearn.core.decorator import db_exception
from ayelearn.models.admin import Admin
from ayelearn.models.course import Course
from ayelearn.models.course_learner import CourseLearner
from ayelearn.models.department import Department
from ayelearn.models.experience_level import ExperienceLevel
from ayelearn.models.learner import Learner
from ayelearn.schemas.admin import AdminProfileUpdate
from ayelearn.utils.file_upload import file_upload_service

logger = logging.getLogger(__name__)

GROWTH_WINDOW_DAYS = 30


class AdminService:
    def __init__(self, db: Session):
        self.db = db

    # ---------- Profile ----------

    @db_exception
    def update_profile(self, admin: Admin, profile_in: AdminProfileUpdate) -> Admin:
        data = profile_in.model_dump(exclude_none=True)
        if not data:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No valid fields to update",
            )

        for field, value in data.items():
            setattr(admin, field, value)

        self.db.commit()
        self.db.refresh(admin)
        logger.info(f"Admin profile updated: {admin.email} fields={sorted(data)}")
        return admin

    async def upload_profile_image(self, admin: Admin, image: UploadFile) -> str:
        """Store a new profile image and remove the previous one."""
        _, relative_path = await file_upload_service.save_image(image, "admin")
        old_image = admin.profile_image

        admin.profile_image = relative_path
        self.db.commit()

        if old_image and old_image != relative_path:
            file_upload_service.delete_file(old_image)

        logger.info(f"Profile image updated for admin {admin.email}")
        return relative_path

    # ---------- Dashboard ----------

    def _growth(self, model) -> str:
        since = datetime.now(timezone.utc) - timedelta(days=GROWTH_WINDOW_DAYS)
        recent = self.db.query(func.count(model.id)).filter(model.created_at >= since).scalar()
        return f"+{recent or 0}"

    def get_dashboard_stats(self) -> dict:
        active_learners = (
            self.db.query(func.count(Learner.id)).filter(Learner.status == "active").scalar()
        )
        total_courses = self.db.query(func.count(Course.id)).scalar()

        total_assignments = self.db.query(func.count(CourseLearner.id)).scalar() or 0
        completed = (
            self.db.query(func.count(CourseLearner.id))
            .filter(CourseLearner.status == "completed")
            .scalar()
            or 0
        )
        avg_score = (
            self.db.query(func.avg(CourseLearner.score))
            .filter(CourseLearner.score.isnot(None))
            .scalar()
        )

        return {
            "activeLearners": active_learners or 0,
            "totalCourses": total_courses or 0,
            "learnerGrowth": self._growth(Learner),
            "courseGrowth": self._growth(Course),
            "completedAssessments": completed,
            "assessmentRate": round(completed * 100 / total_assignments)
            if total_assignments
            else 0,
            "avgScore": round(float(avg_score), 1) if avg_score is not None else 0,
            "scoreGrowth": "+0",
            "reportsExported": 0,
            "reportGrowth": "+0",
        }

    def get_dashboard(self) -> dict:
        recent_learners = (
            self.db.query(Learner)
            .order_by(Learner.created_at.desc(), Learner.id.desc())
            .limit(5)
            .all()
        )
        recent_courses = (
            self.db.query(Course)
            .order_by(Course.created_at.desc(), Course.id.desc())
            .limit(5)
            .all()
        )

        return {
            "total_learners": self.db.query(func.count(Learner.id)).scalar() or 0,
            "active_learners": self.db.query(func.count(Learner.id))
            .filter(Learner.status == "active")
            .scalar()
            or 0,
            "total_courses": self.db.query(func.count(Course.id)).scalar() or 0,
            "total_departments": self.db.query(func.count(Department.id)).scalar() or 0,
            "total_experience_levels": self.db.query(func.count(ExperienceLevel.id)).scalar()
            or 0,
            "total_assignments": self.db.query(func.count(CourseLearner.id)).scalar() or 0,
            "recent_learners": recent_learners,
            "recent_courses": recent_courses,
        }
