"""
SQLAlchemy-backed record store.

Maps the abstract collections onto the job and candidate tables and turns
database exceptions into StoreError kinds.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Mapping, Optional, Sequence, Type

from sqlalchemy import select, func
from sqlalchemy.exc import (
    DataError,
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import AsyncSession

from talentflow.db.base import Base
from talentflow.models.candidate import Candidate
from talentflow.models.job import Job
from talentflow.repositories.record_store import (
    CANDIDATES,
    JOBS,
    OrderBy,
    Record,
    RecordStore,
    StoreError,
    StoreErrorKind,
)


logger = logging.getLogger(__name__)

MODELS: Dict[str, Type[Base]] = {
    JOBS: Job,
    CANDIDATES: Candidate,
}

# Set once on insert; an update touching these is rejected.
IMMUTABLE_FIELDS = frozenset({"id", "owner_id", "created_at"})


def to_record(obj: Base) -> Record:
    """Convert an ORM row into a plain dict of its column values."""
    return {attr.key: getattr(obj, attr.key) for attr in obj.__mapper__.column_attrs}


def _coerce_id(value: Any) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


class SqlRecordStore(RecordStore):
    """Record store over an AsyncSession. Each write commits before returning."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _model(self, collection: str) -> Type[Base]:
        return MODELS[collection]

    def _column(self, model: Type[Base], field: str):
        if field not in model.__table__.columns:
            raise KeyError(f"{model.__tablename__} has no column {field!r}")
        return getattr(model, field)

    @asynccontextmanager
    async def _translate_errors(self, collection: str, write: bool = False):
        try:
            yield
        except IntegrityError as exc:
            await self.db.rollback()
            raise StoreError(StoreErrorKind.CONSTRAINT_VIOLATION, str(exc.orig or exc), collection) from exc
        except DataError as exc:
            await self.db.rollback()
            raise StoreError(StoreErrorKind.CONSTRAINT_VIOLATION, str(exc.orig or exc), collection) from exc
        except (OperationalError, InterfaceError, DisconnectionError, OSError) as exc:
            if write:
                await self._safe_rollback()
            raise StoreError(StoreErrorKind.UNREACHABLE, str(exc), collection) from exc
        except SQLAlchemyError as exc:
            await self._safe_rollback()
            raise StoreError(StoreErrorKind.UNREACHABLE, str(exc), collection) from exc

    async def _safe_rollback(self) -> None:
        try:
            await self.db.rollback()
        except (SQLAlchemyError, OSError):
            logger.warning("Rollback failed after store error", exc_info=True)

    def _apply_filters(self, query, model, filters: Optional[Mapping[str, Any]]):
        for field, value in (filters or {}).items():
            column = self._column(model, field)
            if isinstance(value, (list, tuple, set, frozenset)):
                query = query.where(column.in_(list(value)))
            elif value is None:
                query = query.where(column.is_(None))
            else:
                query = query.where(column == value)
        return query

    async def list(
        self,
        collection: str,
        filters: Optional[Mapping[str, Any]] = None,
        order: Optional[Sequence[OrderBy]] = None,
    ) -> List[Record]:
        model = self._model(collection)
        query = self._apply_filters(select(model), model, filters)
        for field, descending in order or ():
            column = self._column(model, field)
            query = query.order_by(column.desc() if descending else column.asc())

        async with self._translate_errors(collection):
            result = await self.db.execute(query)
            rows = result.scalars().all()
        return [to_record(row) for row in rows]

    async def count(self, collection: str, filters: Optional[Mapping[str, Any]] = None) -> int:
        model = self._model(collection)
        query = self._apply_filters(select(func.count()).select_from(model), model, filters)
        async with self._translate_errors(collection):
            result = await self.db.execute(query)
            return int(result.scalar_one())

    async def _get_row(self, collection: str, record_id: Any) -> Base:
        model = self._model(collection)
        key = _coerce_id(record_id)
        if key is None:
            raise StoreError(StoreErrorKind.NOT_FOUND, f"{collection} {record_id!r} not found", collection)
        async with self._translate_errors(collection):
            row = await self.db.get(model, key)
        if row is None:
            raise StoreError(StoreErrorKind.NOT_FOUND, f"{collection} {record_id} not found", collection)
        return row

    async def get(self, collection: str, record_id: Any) -> Record:
        return to_record(await self._get_row(collection, record_id))

    async def insert(self, collection: str, record: Mapping[str, Any]) -> Record:
        model = self._model(collection)
        for field in record:
            self._column(model, field)
        row = model(**dict(record))
        async with self._translate_errors(collection, write=True):
            self.db.add(row)
            await self.db.flush()
            await self.db.commit()
            await self.db.refresh(row)
        logger.debug("Inserted %s %s", collection, row.id)
        return to_record(row)

    async def update(self, collection: str, record_id: Any, changes: Mapping[str, Any]) -> Record:
        model = self._model(collection)
        locked = IMMUTABLE_FIELDS.intersection(changes)
        if locked:
            raise StoreError(
                StoreErrorKind.CONSTRAINT_VIOLATION,
                f"Cannot change {', '.join(sorted(locked))} on {collection}",
                collection,
            )
        for field in changes:
            self._column(model, field)

        row = await self._get_row(collection, record_id)
        async with self._translate_errors(collection, write=True):
            for field, value in changes.items():
                setattr(row, field, value)
            await self.db.flush()
            await self.db.commit()
            await self.db.refresh(row)
        return to_record(row)
