import logging

from coursetrack.db.base import Base
from coursetrack.db.session import engine

logger = logging.getLogger(__name__)


def init_db(bind=None) -> None:
    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    logger.info("database schema ready (%d tables)", len(Base.metadata.tables))
