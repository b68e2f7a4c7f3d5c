# ayelearn/models/relations.py

from sqlalchemy.orm import relationship

from .course import Course
from .course_file import CourseFile
from .course_learner import CourseLearner
from .course_module import CourseModule
from .learner import Learner


def setup_relationships():
    """
    Configure all SQLAlchemy relationships between models.
    """

    # 1. Course to Modules (One-to-Many)
    Course.modules = relationship(
        "CourseModule",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="CourseModule.module_order",
    )
    CourseModule.course = relationship("Course", back_populates="modules")

    # 2. Course to Files (One-to-Many), practice files included
    Course.files = relationship(
        "CourseFile",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="CourseFile.id",
    )
    CourseFile.course = relationship("Course", back_populates="files")

    # 3. Module to Files (One-to-Many)
    CourseModule.files = relationship(
        "CourseFile",
        back_populates="module",
        cascade="all, delete-orphan",
        order_by="CourseFile.id",
    )
    CourseFile.module = relationship("CourseModule", back_populates="files")

    # 4. Course to Assignments (One-to-Many)
    Course.learner_links = relationship(
        "CourseLearner",
        back_populates="course",
        cascade="all, delete-orphan",
    )
    CourseLearner.course = relationship("Course", back_populates="learner_links")

    # 5. Learner to Assignments (One-to-Many)
    Learner.course_links = relationship(
        "CourseLearner",
        back_populates="learner",
        cascade="all, delete-orphan",
    )
    CourseLearner.learner = relationship("Learner", back_populates="course_links")
