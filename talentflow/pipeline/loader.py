"""
Pipeline data loader.

Fetches the access-scoped candidates joined with their job titles and the
job options for the filter control. Every load takes a request token; a
response whose token is no longer the latest is discarded so a slow, stale
load can never overwrite a newer one.
"""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from talentflow.pipeline.access import AccessScope, owner_filter
from talentflow.pipeline.errors import LoadFailure, NotFound
from talentflow.pipeline.working_set import WorkingSet
from talentflow.repositories.record_store import (
    CANDIDATES,
    JOBS,
    Record,
    RecordStore,
    StoreError,
    StoreErrorKind,
)
from talentflow.schemas.candidate import PipelineCandidate
from talentflow.schemas.job import JobOption


logger = logging.getLogger(__name__)

NEWEST_FIRST = [("created_at", True)]
BY_TITLE = [("title", False)]


class PipelineLoader:
    """Loads working sets for one interaction, discarding superseded responses."""

    def __init__(self, store: RecordStore):
        self.store = store
        self._latest_token = 0

    @property
    def latest_token(self) -> int:
        return self._latest_token

    def _issue_token(self) -> int:
        self._latest_token += 1
        return self._latest_token

    def _is_stale(self, token: int) -> bool:
        return token != self._latest_token

    async def load(
        self,
        operator_id: UUID,
        scope: AccessScope,
        job_id: Optional[Any] = None,
    ) -> Optional[WorkingSet]:
        """
        Build a fresh working set for the operator.

        Returns None when a newer load was started while this one was in
        flight. Store failures raise LoadFailure; a job_id that is missing or
        outside the operator's scope raises NotFound.
        """
        token = self._issue_token()
        try:
            result = await self._fetch(token, operator_id, scope, job_id)
        except StoreError as exc:
            if self._is_stale(token):
                logger.debug("Discarding failed load %s, superseded by %s", token, self._latest_token)
                return None
            logger.warning("Pipeline load failed for operator %s: %s", operator_id, exc.message)
            raise LoadFailure(exc) from exc

        if result is None or self._is_stale(token):
            logger.debug("Discarding load %s, superseded by %s", token, self._latest_token)
            return None

        logger.info(
            "Loaded %d candidates (%s scope) for operator %s",
            len(result),
            scope.value,
            operator_id,
        )
        return result

    async def _fetch(self, token: int, operator_id: UUID, scope: AccessScope, job_id: Optional[Any]) -> Optional[WorkingSet]:
        candidate_filters: Dict[str, Any] = owner_filter(operator_id, scope)
        if job_id is not None:
            job = await self._visible_job(operator_id, scope, job_id)
            candidate_filters["job_id"] = job["id"]
            if self._is_stale(token):
                return None

        candidate_records = await self.store.list(CANDIDATES, candidate_filters, NEWEST_FIRST)
        if self._is_stale(token):
            return None

        if scope.restrict_to_owner:
            # Options are the jobs present among the loaded candidates.
            job_ids = _distinct(record["job_id"] for record in candidate_records)
            job_records = await self.store.list(JOBS, {"id": job_ids}, BY_TITLE) if job_ids else []
        else:
            # Every job, so jobs without applicants are still filterable.
            job_records = await self.store.list(JOBS, None, BY_TITLE)
        if self._is_stale(token):
            return None

        titles = {str(job["id"]): job["title"] for job in job_records}
        candidates = [
            PipelineCandidate.model_validate({**record, "job_title": titles.get(str(record["job_id"]))})
            for record in candidate_records
        ]
        options = [JobOption(id=job["id"], title=job["title"]) for job in job_records]
        return WorkingSet(candidates, options)

    async def _visible_job(self, operator_id: UUID, scope: AccessScope, job_id: Any) -> Record:
        try:
            job = await self.store.get(JOBS, job_id)
        except StoreError as exc:
            if exc.kind is StoreErrorKind.NOT_FOUND:
                raise NotFound("job", job_id) from exc
            raise
        if scope.restrict_to_owner and str(job["owner_id"]) != str(operator_id):
            raise NotFound("job", job_id)
        return job


def _distinct(values) -> List[Any]:
    seen = {}
    for value in values:
        seen.setdefault(str(value), value)
    return list(seen.values())
