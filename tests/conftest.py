"""
Pytest configuration and shared fixtures.

Unit tests run against InMemoryRecordStore, a RecordStore double with hooks
for injecting failures and for running code in the middle of a list call.
"""

import asyncio
import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

from talentflow.core.dependencies import get_record_store
from talentflow.main import create_app
from talentflow.pipeline.access import Operator
from talentflow.pipeline.transitions import CandidateWriteLocks
from talentflow.repositories.record_store import (
    CANDIDATES,
    JOBS,
    OrderBy,
    Record,
    RecordStore,
    StoreError,
    StoreErrorKind,
)
from talentflow.ui.session import session_manager


OWNER_A = uuid.UUID("00000000-0000-0000-0000-00000000000a")
OWNER_B = uuid.UUID("00000000-0000-0000-0000-00000000000b")
ADMIN_ID = uuid.UUID("00000000-0000-0000-0000-0000000000ad")

_EPOCH = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _norm(value: Any) -> Any:
    return str(value) if isinstance(value, uuid.UUID) else value


def _matches(record: Record, filters: Optional[Mapping[str, Any]]) -> bool:
    for field, expected in (filters or {}).items():
        actual = _norm(record.get(field))
        if isinstance(expected, (list, tuple, set)):
            if actual not in {_norm(value) for value in expected}:
                return False
        elif actual != _norm(expected):
            return False
    return True


class InMemoryRecordStore(RecordStore):
    """
    Dict-backed RecordStore.

    fail(operation, collection, kind) makes every later call of that
    operation on that collection raise StoreError(kind) until heal() is
    called. before_list, when set, is awaited once at the start of the next
    list call.
    """

    def __init__(self):
        self.tables: Dict[str, Dict[str, Record]] = {JOBS: {}, CANDIDATES: {}}
        self.failures: Dict[tuple, StoreErrorKind] = {}
        self.before_list: Optional[Callable[[], Any]] = None
        self.calls: List[tuple] = []
        self._clock = 0

    # test hooks

    def fail(self, operation: str, collection: str, kind: StoreErrorKind = StoreErrorKind.UNREACHABLE) -> None:
        self.failures[(operation, collection)] = kind

    def heal(self) -> None:
        self.failures.clear()

    def _check(self, operation: str, collection: str) -> None:
        self.calls.append((operation, collection))
        kind = self.failures.get((operation, collection))
        if kind is not None:
            raise StoreError(kind, f"{operation} on {collection} failed", collection)

    def _tick(self) -> datetime:
        self._clock += 1
        return _EPOCH + timedelta(minutes=self._clock)

    # seeding helpers

    def add_job(self, owner_id: uuid.UUID, title: str, **fields: Any) -> Record:
        record = {
            "id": uuid.uuid4(),
            "owner_id": owner_id,
            "title": title,
            "department": None,
            "location": None,
            "description": None,
            "status": "open",
            **fields,
        }
        record["created_at"] = record["updated_at"] = self._tick()
        self.tables[JOBS][str(record["id"])] = record
        return dict(record)

    def add_candidate(self, job: Record, name: str, email: str, stage: str = "applied", **fields: Any) -> Record:
        record = {
            "id": uuid.uuid4(),
            "owner_id": job["owner_id"],
            "job_id": job["id"],
            "name": name,
            "email": email,
            "phone": None,
            "linkedin_url": None,
            "resume_url": None,
            "notes": None,
            "stage": stage,
            **fields,
        }
        record["created_at"] = record["updated_at"] = self._tick()
        self.tables[CANDIDATES][str(record["id"])] = record
        return dict(record)

    def stored(self, collection: str, record_id: Any) -> Record:
        return dict(self.tables[collection][str(record_id)])

    # RecordStore

    async def list(
        self,
        collection: str,
        filters: Optional[Mapping[str, Any]] = None,
        order: Optional[Sequence[OrderBy]] = None,
    ) -> List[Record]:
        hook, self.before_list = self.before_list, None
        if hook is not None:
            await hook()
        self._check("list", collection)
        rows = [dict(r) for r in self.tables[collection].values() if _matches(r, filters)]
        # Apply the keys right to left so the first key wins (sorted is stable).
        for field, descending in reversed(list(order or [])):
            rows.sort(key=lambda r: (r.get(field) is None, r.get(field)), reverse=descending)
        return rows

    async def get(self, collection: str, record_id: Any) -> Record:
        self._check("get", collection)
        record = self.tables[collection].get(str(record_id))
        if record is None:
            raise StoreError(StoreErrorKind.NOT_FOUND, f"{collection} {record_id} not found", collection)
        return dict(record)

    async def insert(self, collection: str, record: Mapping[str, Any]) -> Record:
        self._check("insert", collection)
        if collection == CANDIDATES and str(record.get("job_id")) not in self.tables[JOBS]:
            raise StoreError(StoreErrorKind.CONSTRAINT_VIOLATION, "job does not exist", collection)
        stored = {"id": uuid.uuid4(), **record}
        stored["created_at"] = stored["updated_at"] = self._tick()
        self.tables[collection][str(stored["id"])] = stored
        return dict(stored)

    async def update(self, collection: str, record_id: Any, changes: Mapping[str, Any]) -> Record:
        # Yield so concurrent writers interleave the way they would over a network.
        await asyncio.sleep(0)
        self._check("update", collection)
        record = self.tables[collection].get(str(record_id))
        if record is None:
            raise StoreError(StoreErrorKind.NOT_FOUND, f"{collection} {record_id} not found", collection)
        record.update(changes)
        record["updated_at"] = self._tick()
        return dict(record)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "db: requires database")
    config.addinivalue_line("markers", "server: requires running HTTP server")


def pytest_collection_modifyitems(config, items):
    run_db = os.environ.get("RUN_DB_TESTS") == "1"
    run_server = os.environ.get("RUN_SERVER_TESTS") == "1"

    skip_db = pytest.mark.skip(reason="db tests skipped by default; set RUN_DB_TESTS=1 to enable")
    skip_server = pytest.mark.skip(reason="server tests skipped by default; set RUN_SERVER_TESTS=1 to enable")

    for item in items:
        if "db" in item.keywords and not run_db:
            item.add_marker(skip_db)
        if "server" in item.keywords and not run_server:
            item.add_marker(skip_server)


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def owner_a() -> Operator:
    return Operator(operator_id=OWNER_A, role="customer")


@pytest.fixture
def owner_b() -> Operator:
    return Operator(operator_id=OWNER_B, role="customer")


@pytest.fixture
def admin() -> Operator:
    return Operator(operator_id=ADMIN_ID, role="admin")


@pytest.fixture
def seeded(store):
    """
    Two owners with one job each.

    A's job has Ann (applied) and Bob (screening); B's job has Cara (applied).
    Bob is newer than Ann.
    """
    job_a = store.add_job(OWNER_A, "Backend Engineer")
    job_b = store.add_job(OWNER_B, "Designer")
    ann = store.add_candidate(job_a, "Ann Smith", "ann@example.com")
    bob = store.add_candidate(job_a, "Bob Jones", "bob@example.com", stage="screening")
    cara = store.add_candidate(job_b, "Cara Diaz", "cara@example.com")
    return {"job_a": job_a, "job_b": job_b, "ann": ann, "bob": bob, "cara": cara}


@pytest.fixture
def app(store):
    application = create_app()
    application.state.write_locks = CandidateWriteLocks()
    application.dependency_overrides[get_record_store] = lambda: store
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    """Bearer headers carrying a signed session token for an operator."""

    def _headers(operator: Operator) -> Dict[str, str]:
        token = session_manager.create_session_token(operator.operator_id, operator.role)
        return {"Authorization": f"Bearer {token}"}

    return _headers
