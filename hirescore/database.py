"""
Database schema and connection management.

Uses SQLite with SQLAlchemy as an optional backing store for jobs and
applications. Each entity is kept as its JSON document alongside a few
indexed columns.
"""

from datetime import datetime
from pathlib import Path
from typing import Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import Column, DateTime, Float, Integer, String, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import declarative_base, sessionmaker

from .models import Application, Job
from .storage import DuplicateIdError, Store

Base = declarative_base()

M = TypeVar("M", bound=BaseModel)


class JobRecord(Base):
    """Job posting with its questions."""

    __tablename__ = "jobs"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, nullable=False, unique=True, index=True)
    title = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    document = Column(Text, nullable=False)


class ApplicationRecord(Base):
    """Scored candidate application."""

    __tablename__ = "applications"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, nullable=False, unique=True, index=True)
    job_id = Column(String, nullable=False, index=True)
    total_score = Column(Float, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    document = Column(Text, nullable=False)


def get_engine(db_path: Path) -> Engine:
    return create_engine(f"sqlite:///{db_path}")


def init_database(db_path: Path) -> Engine:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file

    Returns:
        Engine bound to the database
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = get_engine(db_path)
    Base.metadata.create_all(engine)
    return engine


class SqlRepository(Generic[M]):
    """Repository storing one entity type in one table."""

    def __init__(self, engine: Engine, record_cls, model_cls: Type[M]):
        self._session_factory = sessionmaker(bind=engine)
        self._record_cls = record_cls
        self._model_cls = model_cls

    def _columns(self, entity: M) -> dict:
        if isinstance(entity, Job):
            return {"title": entity.title}
        if isinstance(entity, Application):
            return {"job_id": entity.job_id, "total_score": entity.total_score}
        return {}

    def get(self, entity_id: str) -> Optional[M]:
        with self._session_factory() as session:
            record = session.query(self._record_cls).filter_by(id=entity_id).one_or_none()
            if record is None:
                return None
            return self._model_cls.model_validate_json(record.document)

    def list(self) -> List[M]:
        with self._session_factory() as session:
            records = session.query(self._record_cls).order_by(self._record_cls.seq).all()
            return [self._model_cls.model_validate_json(r.document) for r in records]

    def insert(self, entity: M) -> M:
        record = self._record_cls(
            id=entity.id,
            document=entity.model_dump_json(),
            **self._columns(entity),
        )
        with self._session_factory() as session:
            session.add(record)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise DuplicateIdError(f"Entity already stored: {entity.id}") from e
        return entity


def sql_store(db_path: Path) -> Store:
    engine = init_database(db_path)
    return Store(
        jobs=SqlRepository(engine, JobRecord, Job),
        applications=SqlRepository(engine, ApplicationRecord, Application),
    )
