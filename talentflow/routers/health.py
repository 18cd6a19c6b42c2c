"""
Health router.

Reports whether the database answers, whether the job and candidate
collections are readable through the record store, and whether the schema
is at the latest migration.
"""

import configparser
import logging
from pathlib import Path
from typing import Dict, Optional

from alembic.config import Config
from alembic.script import ScriptDirectory
from alembic.util import CommandError
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from talentflow.core.dependencies import get_record_store
from talentflow.db.session import get_db
from talentflow.repositories.record_store import CANDIDATES, JOBS, RecordStore, StoreError


logger = logging.getLogger(__name__)

router = APIRouter()

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _load_alembic_head() -> Optional[str]:
    """Newest revision in alembic/versions, or None when the scripts are not shipped."""
    cfg_path = PROJECT_ROOT / "alembic.ini"
    script_location = PROJECT_ROOT / "alembic"
    if not cfg_path.exists() or not script_location.exists():
        return None

    config = Config(str(cfg_path))
    config.set_main_option("script_location", str(script_location))
    return ScriptDirectory.from_config(config).get_current_head()


async def _collections_readable(store: RecordStore) -> Dict[str, bool]:
    readable = {}
    for collection in (JOBS, CANDIDATES):
        try:
            await store.count(collection)
            readable[collection] = True
        except StoreError as exc:
            logger.warning("Health check: %s unreadable (%s)", collection, exc.kind.value)
            readable[collection] = False
    return readable


@router.get("/health")
async def health_check(
    db: AsyncSession = Depends(get_db),
    store: RecordStore = Depends(get_record_store),
):
    """Lightweight health endpoint with DB, record store and migration checks."""

    db_ok = False
    alembic_current: Optional[str] = None

    try:
        await db.execute(text("SELECT 1"))
        db_ok = True
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Health check: database unreachable (%s)", exc)

    if db_ok:
        try:
            version_result = await db.execute(text("SELECT version_num FROM alembic_version"))
            alembic_current = version_result.scalar_one_or_none()
        except SQLAlchemyError:
            alembic_current = None

    try:
        alembic_head = _load_alembic_head()
    except (CommandError, configparser.Error, OSError) as exc:
        logger.warning("Health check: could not resolve migration head (%s)", exc)
        alembic_head = None

    stores = await _collections_readable(store)

    return {
        "api_ok": True,
        "db_ok": db_ok,
        "stores": stores,
        "stores_ok": all(stores.values()),
        "alembic_head_ok": bool(alembic_current and alembic_head and alembic_current == alembic_head),
        "alembic_current": alembic_current,
        "alembic_head": alembic_head,
    }
