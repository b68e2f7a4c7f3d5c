# ayelearn/services/course_learner.py
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ayelearn.models.course import Course
from ayelearn.models.course_learner import CourseLearner
from ayelearn.models.learner import Learner


class CourseLearnerService:
    def __init__(self, db: Session):
        self.db = db

    def list_assignments(
        self,
        limit: int = 20,
        offset: int = 0,
        course_id: Optional[int] = None,
        learner_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[dict], int]:
        """Assignments newest first, flattened with course and learner columns."""
        query = (
            self.db.query(CourseLearner, Course, Learner)
            .join(Course, Course.id == CourseLearner.course_id)
            .join(Learner, Learner.id == CourseLearner.learner_id)
        )

        if course_id:
            query = query.filter(CourseLearner.course_id == course_id)
        if learner_id:
            query = query.filter(CourseLearner.learner_id == learner_id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    Course.title.ilike(pattern),
                    Learner.first_name.ilike(pattern),
                    Learner.last_name.ilike(pattern),
                    Learner.email.ilike(pattern),
                )
            )

        total = query.count()
        rows = (
            query.order_by(CourseLearner.assigned_at.desc(), CourseLearner.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

        data = [
            {
                "id": link.id,
                "course_id": course.id,
                "learner_id": learner.id,
                "course_title": course.title,
                "course_department": course.department,
                "course_level": course.level,
                "learner_first_name": learner.first_name,
                "learner_last_name": learner.last_name,
                "learner_email": learner.email,
                "learner_department": learner.department,
                "learner_experience_level": learner.experience_level,
                "status": link.status,
                "completed_modules": link.completed_modules,
                "progress_percentage": link.progress_percentage,
                "score": float(link.score) if link.score is not None else None,
                "completed_at": link.completed_at,
                "assigned_at": link.assigned_at,
            }
            for link, course, learner in rows
        ]
        return data, total
