"""
Jobs router - job postings, manual candidate add and dashboard stats.
"""

from typing import Any, Dict, List
from uuid import UUID

from fastapi import APIRouter, Body, Depends, status

from talentflow.core.dependencies import get_current_operator, get_record_store
from talentflow.pipeline.access import Operator
from talentflow.repositories.record_store import RecordStore
from talentflow.schemas.candidate import CandidatePayload, CandidateRead
from talentflow.schemas.job import JobRead, JobWithCount
from talentflow.schemas.pipeline import DashboardStats
from talentflow.services.job_service import JobService

router = APIRouter(tags=["jobs"])


@router.get("/jobs", response_model=List[JobWithCount])
async def list_jobs(
    operator: Operator = Depends(get_current_operator),
    store: RecordStore = Depends(get_record_store),
):
    """List visible jobs, newest first, with candidate counts and apply links."""
    service = JobService(store)
    return await service.list_jobs(operator, operator.scope)


@router.post("/jobs", response_model=JobRead, status_code=status.HTTP_201_CREATED)
async def create_job(
    data: Dict[str, Any] = Body(...),
    operator: Operator = Depends(get_current_operator),
    store: RecordStore = Depends(get_record_store),
):
    """Create an open job owned by the current operator."""
    service = JobService(store)
    return await service.create_job(operator, data)


@router.get("/jobs/{job_id}", response_model=JobRead)
async def get_job(
    job_id: UUID,
    operator: Operator = Depends(get_current_operator),
    store: RecordStore = Depends(get_record_store),
):
    """Get a job by ID."""
    service = JobService(store)
    return await service.get_job(operator, operator.scope, job_id)


@router.patch("/jobs/{job_id}", response_model=JobRead)
async def update_job(
    job_id: UUID,
    data: Dict[str, Any] = Body(...),
    operator: Operator = Depends(get_current_operator),
    store: RecordStore = Depends(get_record_store),
):
    """Update title, department, location, description or status of a visible job."""
    service = JobService(store)
    return await service.update_job(operator, operator.scope, job_id, data)


@router.post("/jobs/{job_id}/candidates", response_model=CandidateRead, status_code=status.HTTP_201_CREATED)
async def add_candidate(
    job_id: UUID,
    body: CandidatePayload,
    operator: Operator = Depends(get_current_operator),
    store: RecordStore = Depends(get_record_store),
):
    """Manually add a candidate to a job. New candidates always start in Applied."""
    service = JobService(store)
    return await service.add_candidate(operator, operator.scope, job_id, body.model_dump())


@router.get("/dashboard/stats", response_model=DashboardStats)
async def dashboard_stats(
    operator: Operator = Depends(get_current_operator),
    store: RecordStore = Depends(get_record_store),
):
    """Job and candidate totals for the operator's scope."""
    service = JobService(store)
    return await service.dashboard_stats(operator, operator.scope)
