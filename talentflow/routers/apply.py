"""
Public application router. No authentication.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from talentflow.core.dependencies import get_record_store
from talentflow.repositories.record_store import RecordStore
from talentflow.schemas.candidate import CandidatePayload, CandidateRead
from talentflow.schemas.job import PublicJobRead
from talentflow.services.intake_service import IntakeService

router = APIRouter(prefix="/public/jobs", tags=["apply"])


@router.get("/{job_id}", response_model=PublicJobRead)
async def public_job(job_id: UUID, store: RecordStore = Depends(get_record_store)):
    """Public details of a job for the application form."""
    return await IntakeService(store).public_job(job_id)


@router.post("/{job_id}/applications", response_model=CandidateRead, status_code=status.HTTP_201_CREATED)
async def submit_application(
    job_id: UUID,
    body: CandidatePayload,
    store: RecordStore = Depends(get_record_store),
):
    """Submit an application. It lands in Applied, owned by the job's owner."""
    return await IntakeService(store).submit(job_id, body.model_dump())
