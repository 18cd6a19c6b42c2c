"""
Pipeline router - the candidate board and table, stage transitions and edits.
"""

from dataclasses import asdict
from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from talentflow.core.config import settings
from talentflow.core.dependencies import get_current_operator, get_record_store, get_write_locks
from talentflow.pipeline.access import Operator
from talentflow.pipeline.filters import ALL_JOBS
from talentflow.pipeline.presenter import ViewMode
from talentflow.pipeline.session import PipelineSession
from talentflow.pipeline.transitions import CandidateWriteLocks
from talentflow.repositories.record_store import RecordStore
from talentflow.schemas.candidate import CandidatePayload, CandidateRead
from talentflow.schemas.pipeline import (
    BoardColumnRead,
    DropRequest,
    DropResult,
    MoveResult,
    NotificationRead,
    PipelineSnapshot,
    StageMoveRequest,
    TableRowRead,
)

router = APIRouter(tags=["pipeline"])

SortKey = Literal["name", "email", "job_title", "stage", "created_at"]


async def open_pipeline_session(
    store: RecordStore,
    operator: Operator,
    locks: CandidateWriteLocks,
    job_id: Optional[UUID] = None,
) -> PipelineSession:
    """Create a session for this request and load its working set (LoadFailure propagates)."""
    session = PipelineSession(
        store,
        operator,
        locks=locks,
        optimistic=settings.OPTIMISTIC_TRANSITIONS,
        job_id=job_id,
    )
    await session.reload()
    if session.load_error is not None:
        raise session.load_error
    return session


def _notifications(session: PipelineSession):
    return [NotificationRead(**n.to_dict()) for n in session.notifier.drain()]


def _counts(session: PipelineSession):
    return {stage.value: count for stage, count in session.view.counts().items()}


def build_snapshot(session: PipelineSession, sort_by: Optional[str] = None, descending: bool = False) -> PipelineSnapshot:
    view = session.view
    return PipelineSnapshot(
        scope=session.scope.value,
        view=session.view_mode.value,
        query=session.criteria.query,
        job_id=session.criteria.job_id,
        total=len(session.working_set),
        filtered_total=len(view.filtered),
        job_options=session.working_set.job_options,
        counts={stage.value: count for stage, count in view.counts().items()},
        table=[TableRowRead(**asdict(row)) for row in view.table_rows(sort_by, descending)],
        board=[
            BoardColumnRead(stage=column.stage, label=column.label, count=column.count, candidates=list(column.candidates))
            for column in view.board_columns()
        ],
        notifications=_notifications(session),
    )


@router.get("/pipeline", response_model=PipelineSnapshot)
async def get_pipeline(
    q: Optional[str] = Query(None, description="Case-insensitive name or email search"),
    job_id: str = Query(ALL_JOBS, description="Job id, or 'all'"),
    view: ViewMode = Query(ViewMode.BOARD),
    sort: Optional[SortKey] = Query(None),
    descending: bool = Query(False),
    operator: Operator = Depends(get_current_operator),
    store: RecordStore = Depends(get_record_store),
    locks: CandidateWriteLocks = Depends(get_write_locks),
):
    """
    Load the access-scoped pipeline and render both views from one filtered set.
    """
    session = await open_pipeline_session(store, operator, locks)
    session.set_query(q)
    session.set_job_filter(job_id)
    session.set_view(view)
    return build_snapshot(session, sort, descending)


@router.get("/jobs/{job_id}/pipeline", response_model=PipelineSnapshot)
async def get_job_pipeline(
    job_id: UUID,
    q: Optional[str] = Query(None),
    view: ViewMode = Query(ViewMode.BOARD),
    sort: Optional[SortKey] = Query(None),
    descending: bool = Query(False),
    operator: Operator = Depends(get_current_operator),
    store: RecordStore = Depends(get_record_store),
    locks: CandidateWriteLocks = Depends(get_write_locks),
):
    """Board/table for a single job. 404 when the job is not visible to the operator."""
    session = await open_pipeline_session(store, operator, locks, job_id=job_id)
    session.set_query(q)
    session.set_view(view)
    return build_snapshot(session, sort, descending)


@router.post("/pipeline/candidates/{candidate_id}/stage", response_model=MoveResult)
async def move_candidate(
    candidate_id: UUID,
    body: StageMoveRequest,
    operator: Operator = Depends(get_current_operator),
    store: RecordStore = Depends(get_record_store),
    locks: CandidateWriteLocks = Depends(get_write_locks),
):
    """
    Move a visible candidate to another stage.

    Unknown stages are rejected before anything is written; a failed write
    leaves the candidate in its previous stage.
    """
    session = await open_pipeline_session(store, operator, locks)
    moved = await session.move_to_stage(candidate_id, body.stage)
    return MoveResult(candidate=moved, counts=_counts(session), notifications=_notifications(session))


@router.post("/pipeline/drop", response_model=DropResult)
async def drop_candidate(
    body: DropRequest,
    operator: Operator = Depends(get_current_operator),
    store: RecordStore = Depends(get_record_store),
    locks: CandidateWriteLocks = Depends(get_write_locks),
):
    """
    Complete a board drag. A drop without a stage is a cancel.

    Failures are reported in notifications rather than as an error status,
    so the board can show a toast and keep the card where it was.
    """
    session = await open_pipeline_session(store, operator, locks)
    session.begin_drag(body.candidate_id)
    if body.stage is None:
        session.cancel_drag()
        return DropResult(moved=False, notifications=_notifications(session))

    moved = await session.drop_on_stage(body.stage)
    return DropResult(
        moved=moved,
        candidate=session.working_set.get(body.candidate_id),
        notifications=_notifications(session),
    )


@router.put("/pipeline/candidates/{candidate_id}", response_model=CandidateRead)
async def edit_candidate(
    candidate_id: UUID,
    body: CandidatePayload,
    operator: Operator = Depends(get_current_operator),
    store: RecordStore = Depends(get_record_store),
    locks: CandidateWriteLocks = Depends(get_write_locks),
):
    """Save the contact fields of a visible candidate in one update. Stage is not editable here."""
    session = await open_pipeline_session(store, operator, locks)
    session.open_edit(candidate_id)
    return await session.submit_edit(**body.model_dump())
