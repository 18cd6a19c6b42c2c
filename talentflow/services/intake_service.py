"""
Public application intake.

The only write path that does not require an authenticated operator. An
application lands in the initial stage and is owned by the job's owner, after
which the pipeline treats it like any operator-created candidate.
"""

import logging
from typing import Any, Dict

from talentflow.pipeline.errors import LoadFailure, NotFound, WriteFailure
from talentflow.pipeline.stages import INITIAL_STAGE
from talentflow.repositories.record_store import (
    CANDIDATES,
    JOBS,
    Record,
    RecordStore,
    StoreError,
    StoreErrorKind,
)
from talentflow.schemas.base import parse_form
from talentflow.schemas.candidate import ApplicationForm, CandidateRead
from talentflow.schemas.job import PublicJobRead


logger = logging.getLogger(__name__)


async def fetch_job(store: RecordStore, job_id: Any) -> Record:
    """Get a job record, turning a missing row into NotFound."""
    try:
        return await store.get(JOBS, job_id)
    except StoreError as exc:
        if exc.kind is StoreErrorKind.NOT_FOUND:
            raise NotFound("job", job_id) from exc
        raise


class IntakeService:
    """Service for public job applications."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def public_job(self, job_id: Any) -> PublicJobRead:
        try:
            job = await fetch_job(self.store, job_id)
        except StoreError as exc:
            raise LoadFailure(exc) from exc
        return PublicJobRead.model_validate(job)

    async def submit(self, job_id: Any, data: Dict[str, Any]) -> CandidateRead:
        """
        Insert one application for job_id.

        Raises ValidationFailure for missing/malformed fields, NotFound for a
        stale link, WriteFailure when the insert is rejected.
        """
        form = parse_form(ApplicationForm, data)
        try:
            job = await fetch_job(self.store, job_id)
            record = await self.store.insert(
                CANDIDATES,
                {
                    **form.to_changes(),
                    "job_id": job["id"],
                    "owner_id": job["owner_id"],
                    "stage": INITIAL_STAGE.value,
                },
            )
        except StoreError as exc:
            logger.warning("Application for job %s failed: %s", job_id, exc.kind.value)
            raise WriteFailure("Could not submit the application", exc) from exc

        logger.info("Application %s received for job %s", record["id"], job_id)
        return CandidateRead.model_validate(record)
