# Import all the models, so that Base has them before being
# imported by init_db / alembic
from coursetrack.db.base_class import Base  # noqa: F401
from coursetrack.models import (  # noqa: F401
    attachment,
    course,
    course_class,
    enrollment,
    point,
    submission,
    user,
)
