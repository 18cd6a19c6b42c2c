"""Health endpoint tests with the database session replaced by a stub."""

import pytest
from alembic.util import CommandError
from sqlalchemy.exc import OperationalError

from talentflow.db.session import get_db
from talentflow.repositories.record_store import CANDIDATES, StoreErrorKind
from talentflow.routers import health


pytestmark = pytest.mark.unit


class _Result:
    def __init__(self, value):
        self.value = value

    def scalar_one_or_none(self):
        return self.value


class _StubSession:
    """Answers SELECT 1 and the alembic_version lookup, or fails every query."""

    def __init__(self, version=None, down=False):
        self.version = version
        self.down = down
        self.statements = []

    async def execute(self, statement):
        self.statements.append(str(statement))
        if self.down:
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))
        return _Result(self.version)


@pytest.fixture
def use_db(app):
    def install(session):
        async def _get_db():
            yield session

        app.dependency_overrides[get_db] = _get_db
        return session

    return install


def test_health_reports_everything_up(client, use_db, monkeypatch):
    use_db(_StubSession(version="001_pipeline_initial"))
    monkeypatch.setattr(health, "_load_alembic_head", lambda: "001_pipeline_initial")

    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["api_ok"] is True
    assert body["db_ok"] is True
    assert body["stores"] == {"jobs": True, "candidates": True}
    assert body["stores_ok"] is True
    assert body["alembic_head_ok"] is True


def test_health_survives_unreadable_migration_scripts(client, use_db, monkeypatch):
    use_db(_StubSession(version="001_pipeline_initial"))

    def broken_head():
        raise CommandError("No such revision")

    monkeypatch.setattr(health, "_load_alembic_head", broken_head)

    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["alembic_head"] is None
    assert body["alembic_head_ok"] is False
    assert body["db_ok"] is True


def test_health_reports_database_down(client, use_db, monkeypatch):
    session = use_db(_StubSession(down=True))
    monkeypatch.setattr(health, "_load_alembic_head", lambda: "001_pipeline_initial")

    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["db_ok"] is False
    assert body["alembic_current"] is None
    assert body["alembic_head_ok"] is False
    # No version lookup once SELECT 1 has failed
    assert session.statements == ["SELECT 1"]


def test_health_reports_unreadable_candidates(client, use_db, store, monkeypatch):
    use_db(_StubSession(version="001_pipeline_initial"))
    monkeypatch.setattr(health, "_load_alembic_head", lambda: "001_pipeline_initial")
    store.fail("list", CANDIDATES, StoreErrorKind.UNREACHABLE)

    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["stores"] == {"jobs": True, "candidates": False}
    assert body["stores_ok"] is False
