"""
Models package initialization
Import all models and setup relationships
"""

from .admin import Admin
from .course import Course
from .course_file import CourseFile
from .course_learner import CourseLearner
from .course_module import CourseModule
from .department import Department
from .experience_level import ExperienceLevel
from .learner import Learner

# Import and setup relationships
from .relations import setup_relationships

# Setup all relationships after models are imported
setup_relationships()

# Make models available at package level
__all__ = [
    "Admin",
    "Course",
    "CourseFile",
    "CourseLearner",
    "CourseModule",
    "Department",
    "ExperienceLevel",
    "Learner",
]
