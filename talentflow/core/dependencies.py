"""
FastAPI dependencies for the application.
"""

from typing import Optional

from fastapi import Cookie, Depends, Header, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from talentflow.db.session import get_db
from talentflow.errors import AppError
from talentflow.pipeline.access import Operator, operator_from_claims
from talentflow.pipeline.transitions import CandidateWriteLocks
from talentflow.repositories.record_store import RecordStore
from talentflow.repositories.sql_record_store import SqlRecordStore
from talentflow.ui.session import session_manager


async def get_record_store(db: AsyncSession = Depends(get_db)) -> RecordStore:
    """Dependency to get the record store for this request."""
    return SqlRecordStore(db)


def get_write_locks(request: Request) -> CandidateWriteLocks:
    """The application-wide per-candidate write locks (created at startup)."""
    return request.app.state.write_locks


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_optional_operator(
    session_token: Optional[str] = Cookie(None, alias="session"),
    authorization: Optional[str] = Header(None),
) -> Optional[Operator]:
    """Operator from the session cookie or a bearer token, or None."""
    token = _bearer_token(authorization) or session_token
    if not token:
        return None

    claims = session_manager.verify_session_token(token)
    if not claims:
        return None

    try:
        return operator_from_claims(claims)
    except (KeyError, ValueError):
        return None


async def get_current_operator(operator: Optional[Operator] = Depends(get_optional_operator)) -> Operator:
    """
    Get the current operator.

    Raises:
        401: If the session token is missing, expired or malformed
    """
    if operator is None:
        raise AppError(
            status.HTTP_401_UNAUTHORIZED,
            "NOT_AUTHENTICATED",
            "Sign in to view the pipeline",
        )
    return operator
