"""
SqlRecordStore against a migrated PostgreSQL database.

Run `alembic upgrade head` first. Each test writes under a fresh owner id
so runs never see each other.
"""

import uuid

import pytest

from talentflow.db.session import get_async_session_context
from talentflow.repositories.record_store import CANDIDATES, JOBS, StoreError, StoreErrorKind
from talentflow.repositories.sql_record_store import SqlRecordStore


@pytest.mark.db
@pytest.mark.asyncio
async def test_insert_list_and_update_candidate():
    owner_id = uuid.uuid4()
    async with get_async_session_context() as db:
        store = SqlRecordStore(db)
        job = await store.insert(JOBS, {"owner_id": owner_id, "title": "DB test job", "status": "open"})
        candidate = await store.insert(
            CANDIDATES,
            {
                "owner_id": owner_id,
                "job_id": job["id"],
                "name": "Db Tester",
                "email": "db@example.com",
                "stage": "applied",
            },
        )

        listed = await store.list(CANDIDATES, {"owner_id": owner_id}, [("created_at", True)])
        assert [row["id"] for row in listed] == [candidate["id"]]
        assert await store.count(JOBS, {"owner_id": owner_id, "status": "open"}) == 1

        moved = await store.update(CANDIDATES, candidate["id"], {"stage": "interview"})
        assert moved["stage"] == "interview"


@pytest.mark.db
@pytest.mark.asyncio
async def test_stage_outside_check_constraint_is_rejected():
    owner_id = uuid.uuid4()
    async with get_async_session_context() as db:
        store = SqlRecordStore(db)
        job = await store.insert(JOBS, {"owner_id": owner_id, "title": "Constraint job", "status": "open"})
        candidate = await store.insert(
            CANDIDATES,
            {"owner_id": owner_id, "job_id": job["id"], "name": "C", "email": "c@example.com", "stage": "applied"},
        )

        with pytest.raises(StoreError) as excinfo:
            await store.update(CANDIDATES, candidate["id"], {"stage": "archived"})
        assert excinfo.value.kind is StoreErrorKind.CONSTRAINT_VIOLATION

        with pytest.raises(StoreError) as excinfo:
            await store.update(CANDIDATES, candidate["id"], {"owner_id": uuid.uuid4()})
        assert excinfo.value.kind is StoreErrorKind.CONSTRAINT_VIOLATION

        unchanged = await store.get(CANDIDATES, candidate["id"])
        assert unchanged["stage"] == "applied"


@pytest.mark.db
@pytest.mark.asyncio
async def test_missing_record_is_not_found():
    async with get_async_session_context() as db:
        store = SqlRecordStore(db)
        with pytest.raises(StoreError) as excinfo:
            await store.get(JOBS, uuid.uuid4())
        assert excinfo.value.kind is StoreErrorKind.NOT_FOUND

        with pytest.raises(StoreError) as excinfo:
            await store.get(JOBS, "not-a-uuid")
        assert excinfo.value.kind is StoreErrorKind.NOT_FOUND
