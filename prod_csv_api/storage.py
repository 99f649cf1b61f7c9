from __future__ import annotations

from functools import lru_cache
from typing import Dict, Optional, Type, Union

from loguru import logger
from sqlalchemy import Float
from sqlalchemy import Integer
from sqlalchemy import Text
from sqlalchemy import create_engine
from sqlalchemy import func
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import mapped_column

from .errors import ConfigError, StorageError
from .models import DatasetKind, ProductionRecord, StatusRecord, UpsertOutcome


class Base(DeclarativeBase):
    pass


class TrdProduction(Base):
    __tablename__ = "trd_production"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    partnumber: Mapped[str] = mapped_column(Text, nullable=False)
    shot_current_part: Mapped[int] = mapped_column(Integer, nullable=False)
    shot_ok: Mapped[int] = mapped_column(Integer, nullable=False)
    shot_ng: Mapped[int] = mapped_column(Integer, nullable=False)
    shot_total: Mapped[int] = mapped_column(Integer, nullable=False)
    ct: Mapped[float] = mapped_column(Float, nullable=False)
    timestamp: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    file_used: Mapped[str] = mapped_column(Text, nullable=False)


class StsStatus(Base):
    __tablename__ = "sts_status"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    timestamp: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    status: Mapped[int] = mapped_column(Integer, nullable=False)
    partnumber: Mapped[str] = mapped_column(Text, nullable=False)
    file_used: Mapped[str] = mapped_column(Text, nullable=False)


TABLES: Dict[DatasetKind, Type[Base]] = {
    DatasetKind.DAILY: TrdProduction,
    DatasetKind.MONTHLY: StsStatus,
}


@lru_cache(maxsize=8)
def get_engine(url: str) -> Engine:
    return create_engine(url, pool_pre_ping=True)


def create_tables(engine: Engine) -> None:
    try:
        Base.metadata.create_all(engine)
    except SQLAlchemyError as exc:
        raise StorageError(f"Cannot create tables: {exc}") from exc


def _on_conflict_insert(dialect: str, model: Type[Base]):
    if dialect == "postgresql":
        return pg_insert(model)
    if dialect == "sqlite":
        return sqlite_insert(model)
    raise ConfigError(f"Unsupported database backend: {dialect}")


def upsert(
    engine: Engine,
    kind: DatasetKind,
    record: Union[ProductionRecord, StatusRecord],
) -> UpsertOutcome:
    """
    Insert ``record`` unless its timestamp is already stored.

    The unique constraint on ``timestamp`` decides; the first write for a
    timestamp wins and later ones report SKIPPED_DUPLICATE.
    """
    model = TABLES[kind]
    values = record.model_dump()
    stmt = _on_conflict_insert(engine.dialect.name, model).values(**values)
    stmt = stmt.on_conflict_do_nothing(index_elements=[model.timestamp])

    try:
        with engine.begin() as conn:
            inserted = conn.execute(stmt).rowcount == 1
    except SQLAlchemyError as exc:
        raise StorageError(f"Cannot write {model.__tablename__}: {exc}") from exc

    outcome = UpsertOutcome.INSERTED if inserted else UpsertOutcome.SKIPPED_DUPLICATE
    logger.debug("{} {} timestamp={}", model.__tablename__, outcome.value, values["timestamp"])
    return outcome


def count_rows(engine: Engine, kind: DatasetKind, timestamp: Optional[str] = None) -> int:
    model = TABLES[kind]
    query = select(func.count()).select_from(model)
    if timestamp is not None:
        query = query.where(model.timestamp == timestamp)
    with engine.connect() as conn:
        return conn.execute(query).scalar_one()
