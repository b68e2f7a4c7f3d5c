# ayelearn/services/course.py
import logging
from typing import Dict, Iterable, List, Optional, Set

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ayelearn.core.decorator import FieldValidationError, db_exception
from ayelearn.models.course import Course
from ayelearn.models.course_file import CourseFile
from ayelearn.models.course_learner import CourseLearner
from ayelearn.models.course_module import CourseModule
from ayelearn.models.learner import Learner
from ayelearn.schemas.course import (
    CourseCreate,
    CourseFileIn,
    CourseFileResponse,
    CourseUpdate,
    ModuleIn,
)
from ayelearn.services.department import DepartmentService
from ayelearn.services.experience_level import ExperienceLevelService
from ayelearn.utils.file_upload import file_upload_service

logger = logging.getLogger(__name__)

ARRAY_FIELDS = ("learning_objectives", "assessment_criteria", "key_skills")
REQUIRED_FIELDS = ("title", "department", "level")


class CourseService:
    def __init__(self, db: Session):
        self.db = db

    # ==================== Reads ====================

    def get_course(self, course_id: int) -> Course:
        course = self.db.query(Course).filter(Course.id == course_id).first()
        if not course:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Course not found"
            )
        return course

    def _count_by_course(self, column, key):
        return (
            self.db.query(key.label("course_id"), func.count(column).label("total"))
            .group_by(key)
            .subquery()
        )

    def list_courses(
        self,
        department: Optional[str] = None,
        level: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[dict]:
        """Courses newest first, with assignment/module/file counts."""
        learners = self._count_by_course(CourseLearner.id, CourseLearner.course_id)
        modules = self._count_by_course(CourseModule.id, CourseModule.course_id)
        files = self._count_by_course(CourseFile.id, CourseFile.course_id)

        query = (
            self.db.query(Course, learners.c.total, modules.c.total, files.c.total)
            .outerjoin(learners, learners.c.course_id == Course.id)
            .outerjoin(modules, modules.c.course_id == Course.id)
            .outerjoin(files, files.c.course_id == Course.id)
        )

        if department:
            query = query.filter(Course.department == department)
        if level:
            query = query.filter(Course.level == level)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(Course.title.ilike(pattern), Course.overview.ilike(pattern))
            )

        rows = query.order_by(Course.created_at.desc(), Course.id.desc()).all()

        return [
            {
                **self._course_fields(course),
                "assigned_learners_count": learner_count or 0,
                "modules_count": module_count or 0,
                "files_count": file_count or 0,
            }
            for course, learner_count, module_count, file_count in rows
        ]

    @staticmethod
    def _course_fields(course: Course) -> dict:
        return {
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
            "created_at": course.created_at,
            "updated_at": course.updated_at,
        }

    @staticmethod
    def _file_dict(course_file: CourseFile) -> dict:
        return CourseFileResponse.model_validate(course_file).model_dump()

    def get_course_detail(self, course: Course, include_learners: bool = True) -> dict:
        """
        Course with ordered modules (documents and videos split out),
        practice files and, for admins, the assigned learners.
        """
        modules = []
        for module in course.modules:
            modules.append(
                {
                    "id": module.id,
                    "heading": module.heading,
                    "video_heading": module.video_heading,
                    "assessment_name": module.assessment_name,
                    "assessment_link": module.assessment_link,
                    "module_order": module.module_order,
                    "documents": [
                        self._file_dict(f) for f in module.files if f.file_type == "document"
                    ],
                    "videos": [
                        self._file_dict(f) for f in module.files if f.file_type == "video"
                    ],
                }
            )

        detail = {
            **self._course_fields(course),
            "modules": modules,
            "practice_files": [
                self._file_dict(f) for f in course.files if f.module_id is None
            ],
            "assigned_learners": None,
        }
        if include_learners:
            detail["assigned_learners"] = self.get_course_learners(course.id)
        return detail

    def get_course_learners(self, course_id: int) -> List[dict]:
        rows = (
            self.db.query(Learner, CourseLearner)
            .join(CourseLearner, CourseLearner.learner_id == Learner.id)
            .filter(CourseLearner.course_id == course_id)
            .order_by(Learner.first_name.asc(), Learner.last_name.asc())
            .all()
        )
        return [
            {
                "id": learner.id,
                "first_name": learner.first_name,
                "last_name": learner.last_name,
                "email": learner.email,
                "department": learner.department,
                "experience_level": learner.experience_level,
                "status": learner.status,
                "assigned_at": link.assigned_at,
                "progress_status": link.status,
                "completed_modules": link.completed_modules,
                "progress_percentage": link.progress_percentage,
                "score": float(link.score) if link.score is not None else None,
                "completed_at": link.completed_at,
            }
            for learner, link in rows
        ]

    def ensure_learner_assigned(self, course_id: int, learner_id: int) -> None:
        assigned = (
            self.db.query(CourseLearner.id)
            .filter(
                CourseLearner.course_id == course_id,
                CourseLearner.learner_id == learner_id,
            )
            .first()
        )
        if not assigned:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You are not assigned to this course",
            )

    # ==================== Writes ====================

    def _validate_references(self, department: Optional[str], level: Optional[str]):
        if department is not None:
            DepartmentService(self.db).require_name(department, field="department")
        if level is not None:
            ExperienceLevelService(self.db).require_name(level, field="level")

    def _course_file_paths(self, course_id: int) -> Set[str]:
        return {
            path
            for (path,) in self.db.query(CourseFile.file_path)
            .filter(CourseFile.course_id == course_id)
            .all()
        }

    def _unreferenced(self, paths: Set[str]) -> Set[str]:
        """Paths no CourseFile row points at any more (flushed state)."""
        if not paths:
            return set()
        still_used = {
            path
            for (path,) in self.db.query(CourseFile.file_path)
            .filter(CourseFile.file_path.in_(list(paths)))
            .all()
        }
        return paths - still_used

    def _add_file(
        self,
        course_id: int,
        module_id: Optional[int],
        file_in: CourseFileIn,
        file_type: str,
    ) -> CourseFile:
        course_file = CourseFile(
            course_id=course_id,
            module_id=module_id,
            file_name=file_in.file_name,
            original_name=file_in.original_name or file_in.file_name,
            file_path=file_in.file_path,
            file_type=file_type,
            file_size=file_in.file_size,
        )
        self.db.add(course_file)
        return course_file

    def _add_modules(self, course_id: int, modules: List[ModuleIn]) -> None:
        for position, module_in in enumerate(modules, start=1):
            module = CourseModule(
                course_id=course_id,
                heading=module_in.heading,
                video_heading=module_in.video_heading,
                assessment_name=module_in.assessment_name,
                assessment_link=module_in.assessment_link,
                module_order=position,
            )
            self.db.add(module)
            self.db.flush()

            for document in module_in.documents:
                self._add_file(course_id, module.id, document, "document")
            for video in module_in.videos:
                self._add_file(course_id, module.id, video, "video")

    def _add_practice_files(self, course_id: int, files: List[CourseFileIn]) -> None:
        for practice_file in files:
            self._add_file(course_id, None, practice_file, "practice")

    def _replace_assignments(
        self, course_id: int, learner_ids: Iterable[int]
    ) -> Dict[str, List[int]]:
        """
        Make the course's assignment set equal to `learner_ids`.
        Rows already present keep their progress, duplicates collapse.
        """
        wanted = list(dict.fromkeys(learner_ids))

        if wanted:
            found = {
                learner_id
                for (learner_id,) in self.db.query(Learner.id)
                .filter(Learner.id.in_(wanted))
                .all()
            }
            missing = [learner_id for learner_id in wanted if learner_id not in found]
            if missing:
                raise FieldValidationError(
                    "learner_ids",
                    f"Learner(s) not found: {', '.join(map(str, missing))}",
                )

        existing = {
            link.learner_id: link
            for link in self.db.query(CourseLearner)
            .filter(CourseLearner.course_id == course_id)
            .all()
        }

        removed = [learner_id for learner_id in existing if learner_id not in wanted]
        for learner_id in removed:
            self.db.delete(existing[learner_id])

        added = [learner_id for learner_id in wanted if learner_id not in existing]
        for learner_id in added:
            self.db.add(CourseLearner(course_id=course_id, learner_id=learner_id))

        kept = [learner_id for learner_id in wanted if learner_id in existing]
        return {"added": added, "removed": removed, "kept": kept}

    @db_exception
    def create_course(self, course_in: CourseCreate) -> Course:
        self._validate_references(course_in.department, course_in.level)

        course = Course(
            title=course_in.title,
            department=course_in.department,
            level=course_in.level,
            estimated_duration=course_in.estimated_duration,
            deadline=course_in.deadline,
            overview=course_in.overview,
            learning_objectives=course_in.learning_objectives,
            assessment_criteria=course_in.assessment_criteria,
            key_skills=course_in.key_skills,
        )
        self.db.add(course)
        self.db.flush()

        self._add_modules(course.id, course_in.modules)
        self._add_practice_files(course.id, course_in.practice_files)
        if course_in.learner_ids:
            self._replace_assignments(course.id, course_in.learner_ids)

        self.db.commit()
        self.db.refresh(course)

        logger.info(
            f"Course created: {course.title} (ID: {course.id}, "
            f"{len(course_in.modules)} modules, {len(course_in.practice_files)} practice files)"
        )
        return course

    @db_exception
    def update_course(self, course_id: int, course_in: CourseUpdate) -> Course:
        course = self.get_course(course_id)
        data = course_in.model_dump(exclude_unset=True)
        modules = data.pop("modules", None)
        practice_files = data.pop("practice_files", None)

        for field in REQUIRED_FIELDS:
            if field in data and data[field] is None:
                data.pop(field)
        self._validate_references(data.get("department"), data.get("level"))

        for field, value in data.items():
            if field in ARRAY_FIELDS and value is None:
                value = []
            setattr(course, field, value)

        old_paths = self._course_file_paths(course_id)

        if course_in.modules is not None:
            old_modules = (
                self.db.query(CourseModule).filter(CourseModule.course_id == course_id).all()
            )
            for module in old_modules:
                self.db.delete(module)
            self.db.flush()

            self._add_modules(course_id, course_in.modules)

        if course_in.practice_files is not None:
            old_files = (
                self.db.query(CourseFile)
                .filter(CourseFile.course_id == course_id, CourseFile.module_id.is_(None))
                .all()
            )
            for practice_file in old_files:
                self.db.delete(practice_file)
            self.db.flush()

            self._add_practice_files(course_id, course_in.practice_files)

        self.db.flush()
        stale_paths = self._unreferenced(old_paths)

        self.db.commit()
        self.db.refresh(course)

        removed = file_upload_service.delete_files(sorted(stale_paths))
        logger.info(f"Course updated: {course.title} (ID: {course.id}), {removed} stale files removed")
        return course

    @db_exception
    def delete_course(self, course_id: int) -> None:
        """Delete the course with its modules, files and assignments, then unlink files."""
        course = self.get_course(course_id)
        file_paths = self._course_file_paths(course_id)

        self.db.delete(course)
        self.db.flush()
        file_paths = self._unreferenced(file_paths)
        self.db.commit()

        removed = file_upload_service.delete_files(file_paths)
        logger.info(f"Course deleted: {course_id} ({removed} files removed from storage)")

    @db_exception
    def assign_learners(self, course_id: int, learner_ids: List[int]) -> dict:
        self.get_course(course_id)
        result = self._replace_assignments(course_id, learner_ids)
        self.db.commit()

        assigned = len(result["added"]) + len(result["kept"])
        logger.info(
            f"Course {course_id} assignments: +{len(result['added'])} "
            f"-{len(result['removed'])} ={len(result['kept'])}"
        )
        return {"assigned": assigned, **result}

    @db_exception
    def unassign_learner(self, course_id: int, learner_id: int) -> None:
        self.get_course(course_id)
        link = (
            self.db.query(CourseLearner)
            .filter(
                CourseLearner.course_id == course_id,
                CourseLearner.learner_id == learner_id,
            )
            .first()
        )
        if not link:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Learner is not assigned to this course",
            )

        self.db.delete(link)
        self.db.commit()
        logger.info(f"Learner {learner_id} unassigned from course {course_id}")

    async def upload_course_file(self, file: UploadFile, upload_type: str) -> dict:
        return await file_upload_service.save_course_file(file, upload_type)
