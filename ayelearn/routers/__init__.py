from .admin import router as admin_router
from .course import router as course_router
from .course_learner import router as course_learner_router
from .department import router as department_router
from .experience_level import router as experience_level_router
from .learner import router as learner_router

routes = [
    admin_router,
    learner_router,
    department_router,
    experience_level_router,
    course_router,
    course_learner_router,
]
