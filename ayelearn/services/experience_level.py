# ayelearn/services/experience_level.py
import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from ayelearn.core.decorator import FieldValidationError, db_exception
from ayelearn.models.course import Course
from ayelearn.models.experience_level import ExperienceLevel
from ayelearn.models.learner import Learner
from ayelearn.schemas.experience_level import (
    ExperienceLevelCreate,
    ExperienceLevelUpdate,
)

logger = logging.getLogger(__name__)


class ExperienceLevelService:
    def __init__(self, db: Session):
        self.db = db

    def _ensure_unique(
        self, level_in: ExperienceLevelCreate, exclude_id: Optional[int] = None
    ) -> None:
        query = self.db.query(ExperienceLevel)
        if exclude_id is not None:
            query = query.filter(ExperienceLevel.id != exclude_id)

        if query.filter(ExperienceLevel.name == level_in.name).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Experience level with this name already exists",
            )
        if query.filter(ExperienceLevel.level_order == level_in.level_order).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Experience level with this order already exists",
            )

    def list_levels(self, status_filter: Optional[str] = None) -> List[ExperienceLevel]:
        query = self.db.query(ExperienceLevel)
        if status_filter:
            query = query.filter(ExperienceLevel.status == status_filter)
        return query.order_by(ExperienceLevel.level_order.asc()).all()

    def get_level(self, level_id: int) -> ExperienceLevel:
        level = self.db.query(ExperienceLevel).filter(ExperienceLevel.id == level_id).first()
        if not level:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Experience level not found",
            )
        return level

    def require_name(self, name: str, field: str = "experience_level") -> str:
        """Validate that a learner/course level reference names an ExperienceLevel."""
        exists = (
            self.db.query(ExperienceLevel.id).filter(ExperienceLevel.name == name).first()
        )
        if not exists:
            raise FieldValidationError(field, "Please select a valid Experience Level")
        return name

    @db_exception
    def create_level(self, level_in: ExperienceLevelCreate) -> ExperienceLevel:
        self._ensure_unique(level_in)

        level = ExperienceLevel(**level_in.model_dump())
        self.db.add(level)
        self.db.commit()
        self.db.refresh(level)

        logger.info(f"Experience level created: {level.name} (order {level.level_order})")
        return level

    @db_exception
    def update_level(
        self, level_id: int, level_in: ExperienceLevelUpdate
    ) -> ExperienceLevel:
        level = self.get_level(level_id)
        old_name = level.name

        self._ensure_unique(level_in, exclude_id=level_id)

        for field, value in level_in.model_dump().items():
            setattr(level, field, value)

        if level.name != old_name:
            learners = (
                self.db.query(Learner)
                .filter(Learner.experience_level == old_name)
                .update(
                    {Learner.experience_level: level.name}, synchronize_session=False
                )
            )
            courses = (
                self.db.query(Course)
                .filter(Course.level == old_name)
                .update({Course.level: level.name}, synchronize_session=False)
            )
            logger.info(
                f"Experience level renamed '{old_name}' -> '{level.name}' "
                f"({learners} learners, {courses} courses updated)"
            )

        self.db.commit()
        self.db.refresh(level)
        return level

    @db_exception
    def delete_level(self, level_id: int) -> None:
        level = self.get_level(level_id)

        in_use = (
            self.db.query(Learner)
            .filter(Learner.experience_level == level.name)
            .count()
        )
        if in_use:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Cannot delete experience level. It is assigned to {in_use} learner(s)",
            )

        self.db.delete(level)
        self.db.commit()
        logger.info(f"Experience level deleted: {level.name} (ID: {level_id})")
