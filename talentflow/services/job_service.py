"""
Job board business logic.

Job create/edit, the job list with candidate counts, manual candidate add
and the dashboard statistics. Every read is restricted by the caller's
access scope.
"""

import logging
from collections import Counter
from typing import Any, Dict, List

from talentflow.core.config import settings
from talentflow.pipeline.access import AccessScope, Operator, owner_filter
from talentflow.pipeline.errors import LoadFailure, NotFound, WriteFailure
from talentflow.pipeline.stages import INITIAL_STAGE, PipelineStage
from talentflow.repositories.record_store import CANDIDATES, JOBS, Record, RecordStore, StoreError
from talentflow.schemas.base import parse_form
from talentflow.schemas.candidate import CandidateCreate, CandidateRead
from talentflow.schemas.job import JobCreate, JobRead, JobUpdate, JobWithCount
from talentflow.schemas.pipeline import DashboardStats
from talentflow.services.intake_service import fetch_job


logger = logging.getLogger(__name__)


def apply_url(job_id: Any) -> str:
    """Public application link for a job."""
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/apply/{job_id}"


class JobService:
    """Service for job business logic."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def _visible_job(self, operator: Operator, scope: AccessScope, job_id: Any) -> Record:
        job = await fetch_job(self.store, job_id)
        if scope.restrict_to_owner and str(job["owner_id"]) != str(operator.operator_id):
            raise NotFound("job", job_id)
        return job

    async def list_jobs(self, operator: Operator, scope: AccessScope) -> List[JobWithCount]:
        """Jobs newest first, each with its candidate count."""
        try:
            jobs = await self.store.list(JOBS, owner_filter(operator.operator_id, scope), [("created_at", True)])
            counts: Counter = Counter()
            if jobs:
                candidates = await self.store.list(CANDIDATES, {"job_id": [job["id"] for job in jobs]})
                counts.update(str(candidate["job_id"]) for candidate in candidates)
        except StoreError as exc:
            raise LoadFailure(exc) from exc

        return [
            JobWithCount.model_validate(
                {**job, "candidate_count": counts[str(job["id"])], "apply_url": apply_url(job["id"])}
            )
            for job in jobs
        ]

    async def get_job(self, operator: Operator, scope: AccessScope, job_id: Any) -> JobRead:
        try:
            job = await self._visible_job(operator, scope, job_id)
        except StoreError as exc:
            raise LoadFailure(exc) from exc
        return JobRead.model_validate(job)

    async def create_job(self, operator: Operator, data: Dict[str, Any]) -> JobRead:
        form = parse_form(JobCreate, data)
        try:
            record = await self.store.insert(
                JOBS,
                {**form.model_dump(), "owner_id": operator.operator_id, "status": "open"},
            )
        except StoreError as exc:
            raise WriteFailure("Failed to create job", exc) from exc
        logger.info("Job %s created by %s", record["id"], operator.operator_id)
        return JobRead.model_validate(record)

    async def update_job(self, operator: Operator, scope: AccessScope, job_id: Any, data: Dict[str, Any]) -> JobRead:
        form = parse_form(JobUpdate, data)
        changes = form.model_dump(exclude_unset=True)
        if changes.get("title") is None:
            changes.pop("title", None)
        if changes.get("status") is None:
            changes.pop("status", None)
        try:
            job = await self._visible_job(operator, scope, job_id)
            if changes:
                job = await self.store.update(JOBS, job["id"], changes)
        except StoreError as exc:
            raise WriteFailure("Failed to update job", exc) from exc
        logger.info("Job %s updated by %s", job["id"], operator.operator_id)
        return JobRead.model_validate(job)

    async def add_candidate(self, operator: Operator, scope: AccessScope, job_id: Any, data: Dict[str, Any]) -> CandidateRead:
        """Manually add a candidate to a visible job, in the initial stage."""
        form = parse_form(CandidateCreate, data)
        try:
            job = await self._visible_job(operator, scope, job_id)
            record = await self.store.insert(
                CANDIDATES,
                {
                    **form.to_changes(),
                    "job_id": job["id"],
                    # Owned by the job's owner, whoever adds it.
                    "owner_id": job["owner_id"],
                    "stage": INITIAL_STAGE.value,
                },
            )
        except StoreError as exc:
            raise WriteFailure("Failed to add candidate", exc) from exc
        logger.info("Candidate %s added to job %s by %s", record["id"], job_id, operator.operator_id)
        return CandidateRead.model_validate(record)

    async def dashboard_stats(self, operator: Operator, scope: AccessScope) -> DashboardStats:
        scoped = owner_filter(operator.operator_id, scope)
        try:
            return DashboardStats(
                total_jobs=await self.store.count(JOBS, scoped),
                open_jobs=await self.store.count(JOBS, {**scoped, "status": "open"}),
                total_candidates=await self.store.count(CANDIDATES, scoped),
                hired_candidates=await self.store.count(
                    CANDIDATES, {**scoped, "stage": PipelineStage.HIRED.value}
                ),
            )
        except StoreError as exc:
            raise LoadFailure(exc) from exc
