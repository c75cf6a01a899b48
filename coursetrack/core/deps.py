from fastapi import Depends
from sqlalchemy.orm import Session

from coursetrack.db.session import SessionLocal
from coursetrack.repositories.progress_queries import SqlAlchemyProgressQueries
from coursetrack.services.progress import ProgressAggregator


# every request that needs DB will get a fresh session, and it will always close.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_progress_aggregator(db: Session = Depends(get_db)) -> ProgressAggregator:
    return ProgressAggregator(SqlAlchemyProgressQueries(db))
