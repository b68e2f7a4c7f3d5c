# ayelearn/services/department.py
import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from ayelearn.core.decorator import FieldValidationError, db_exception
from ayelearn.models.course import Course
from ayelearn.models.department import Department
from ayelearn.models.learner import Learner
from ayelearn.schemas.department import DepartmentCreate, DepartmentUpdate

logger = logging.getLogger(__name__)


class DepartmentService:
    def __init__(self, db: Session):
        self.db = db

    def _ensure_unique_name(self, name: str, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(Department).filter(Department.name == name)
        if exclude_id is not None:
            query = query.filter(Department.id != exclude_id)
        if query.first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Department with this name already exists",
            )

    def list_departments(self, status_filter: Optional[str] = None) -> List[Department]:
        query = self.db.query(Department)
        if status_filter:
            query = query.filter(Department.status == status_filter)
        return query.order_by(Department.name.asc()).all()

    def get_department(self, department_id: int) -> Department:
        department = (
            self.db.query(Department).filter(Department.id == department_id).first()
        )
        if not department:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Department not found"
            )
        return department

    def require_name(self, name: str, field: str = "department") -> str:
        """Validate that a learner/course department reference names a Department."""
        if not self.db.query(Department.id).filter(Department.name == name).first():
            raise FieldValidationError(field, "Please select a valid Department")
        return name

    @db_exception
    def create_department(self, department_in: DepartmentCreate) -> Department:
        self._ensure_unique_name(department_in.name)

        department = Department(**department_in.model_dump())
        self.db.add(department)
        self.db.commit()
        self.db.refresh(department)

        logger.info(f"Department created: {department.name} (ID: {department.id})")
        return department

    @db_exception
    def update_department(
        self, department_id: int, department_in: DepartmentUpdate
    ) -> Department:
        """
        Update a department. A rename is carried over to the learners and
        courses that reference the old name.
        """
        department = self.get_department(department_id)
        old_name = department.name

        if department_in.name != old_name:
            self._ensure_unique_name(department_in.name, exclude_id=department_id)

        for field, value in department_in.model_dump().items():
            setattr(department, field, value)

        if department.name != old_name:
            learners = (
                self.db.query(Learner)
                .filter(Learner.department == old_name)
                .update({Learner.department: department.name}, synchronize_session=False)
            )
            courses = (
                self.db.query(Course)
                .filter(Course.department == old_name)
                .update({Course.department: department.name}, synchronize_session=False)
            )
            logger.info(
                f"Department renamed '{old_name}' -> '{department.name}' "
                f"({learners} learners, {courses} courses updated)"
            )

        self.db.commit()
        self.db.refresh(department)
        return department

    @db_exception
    def delete_department(self, department_id: int) -> None:
        department = self.get_department(department_id)

        in_use = (
            self.db.query(Learner).filter(Learner.department == department.name).count()
        )
        if in_use:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Cannot delete department. It is assigned to {in_use} learner(s)",
            )

        self.db.delete(department)
        self.db.commit()
        logger.info(f"Department deleted: {department.name} (ID: {department_id})")
