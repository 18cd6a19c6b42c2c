"""
Pipeline pages for UI.

Board and table render from the same filtered set. Drag-and-drop on the
board posts to /pipeline/drop; edits post back here as forms.
"""

from typing import Optional
from urllib.parse import urlencode
from uuid import UUID

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from talentflow.core.config import settings
from talentflow.core.dependencies import get_current_operator, get_record_store, get_write_locks
from talentflow.pipeline.access import Operator
from talentflow.pipeline.errors import NotFound, ValidationFailure, WriteFailure
from talentflow.pipeline.filters import ALL_JOBS
from talentflow.pipeline.presenter import ViewMode
from talentflow.pipeline.session import LoadState, PipelineSession
from talentflow.pipeline.stages import STAGE_ORDER
from talentflow.pipeline.transitions import CandidateWriteLocks
from talentflow.repositories.record_store import RecordStore
from talentflow.services.job_service import JobService
from talentflow.ui.rendering import templates


router = APIRouter()

SORT_KEYS = ("name", "email", "job_title", "stage", "created_at")


def _render(
    request: Request,
    session: PipelineSession,
    sort: Optional[str] = None,
    descending: bool = False,
    success_message: Optional[str] = None,
    status_code: int = 200,
    add_form: Optional[dict] = None,
    add_errors: Optional[dict] = None,
):
    view = session.view
    if sort not in SORT_KEYS:
        sort = None
    return templates.TemplateResponse(
        request,
        "pipeline.html",
        {
            "operator": session.operator,
            "active_page": "pipeline",
            "session": session,
            "state": session.state.value,
            "load_error": session.load_error,
            "stages": STAGE_ORDER,
            "view_mode": session.view_mode.value,
            "criteria": session.criteria,
            "job_options": session.working_set.job_options,
            "columns": view.board_columns(),
            "rows": view.table_rows(sort, descending),
            "counts": {stage.value: count for stage, count in view.counts().items()},
            "sort": sort,
            "descending": descending,
            "edit": session.edit,
            "job_id": session.job_id,
            "notifications": [n.to_dict() for n in session.notifier.drain()],
            "success_message": success_message,
            "add_form": add_form or {},
            "add_errors": add_errors or {},
        },
        status_code=status_code,
    )


async def _load(store, operator, locks, job_id=None) -> PipelineSession:
    session = PipelineSession(
        store,
        operator,
        locks=locks,
        optimistic=settings.OPTIMISTIC_TRANSITIONS,
        job_id=job_id,
    )
    await session.reload()
    return session


def _not_found(request: Request, exc: NotFound):
    return templates.TemplateResponse(
        request,
        "not_found.html",
        {"entity": exc.entity, "message": exc.message},
        status_code=404,
    )


@router.get("/ui/pipeline", response_class=HTMLResponse)
async def pipeline_page(
    request: Request,
    q: Optional[str] = Query(None),
    job_id: str = Query(ALL_JOBS),
    view: ViewMode = Query(ViewMode.BOARD),
    sort: Optional[str] = Query(None),
    descending: bool = Query(False),
    success_message: Optional[str] = Query(None),
    operator: Operator = Depends(get_current_operator),
    store: RecordStore = Depends(get_record_store),
    locks: CandidateWriteLocks = Depends(get_write_locks),
):
    """
    Candidate pipeline across all visible jobs.

    A failed load renders an explicit error state with a retry link, never an
    empty board.
    """
    session = await _load(store, operator, locks)
    session.set_query(q)
    session.set_job_filter(job_id)
    session.set_view(view)
    status_code = 503 if session.state is LoadState.ERROR else 200
    return _render(request, session, sort, descending, success_message, status_code)


@router.get("/ui/jobs/{job_id}/pipeline", response_class=HTMLResponse)
async def job_pipeline_page(
    request: Request,
    job_id: UUID,
    q: Optional[str] = Query(None),
    view: ViewMode = Query(ViewMode.BOARD),
    sort: Optional[str] = Query(None),
    descending: bool = Query(False),
    success_message: Optional[str] = Query(None),
    operator: Operator = Depends(get_current_operator),
    store: RecordStore = Depends(get_record_store),
    locks: CandidateWriteLocks = Depends(get_write_locks),
):
    """Board for a single job, with the manual add form."""
    try:
        session = await _load(store, operator, locks, job_id=job_id)
    except NotFound as exc:
        return _not_found(request, exc)
    session.set_query(q)
    session.set_view(view)
    status_code = 503 if session.state is LoadState.ERROR else 200
    return _render(request, session, sort, descending, success_message, status_code)


@router.post("/ui/jobs/{job_id}/candidates")
async def add_candidate_submit(
    request: Request,
    job_id: UUID,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    linkedin_url: Optional[str] = Form(None),
    resume_url: Optional[str] = Form(None),
    notes: Optional[str] = Form(None),
    operator: Operator = Depends(get_current_operator),
    store: RecordStore = Depends(get_record_store),
    locks: CandidateWriteLocks = Depends(get_write_locks),
):
    """
    Manually add a candidate to one job.

    Failures re-render the job board with the add form filled in.
    """
    form = {
        "name": name,
        "email": email,
        "phone": phone,
        "linkedin_url": linkedin_url,
        "resume_url": resume_url,
        "notes": notes,
    }
    try:
        await JobService(store).add_candidate(operator, operator.scope, job_id, form)
    except NotFound as exc:
        return _not_found(request, exc)
    except (ValidationFailure, WriteFailure) as exc:
        try:
            session = await _load(store, operator, locks, job_id=job_id)
        except NotFound as missing:
            return _not_found(request, missing)
        session.notifier.error(exc.message, exc.code)
        errors = exc.field_errors if isinstance(exc, ValidationFailure) else {}
        return _render(request, session, status_code=exc.status_code, add_form=form, add_errors=errors)

    query = urlencode({"success_message": "Candidate added"})
    return RedirectResponse(url=f"/ui/jobs/{job_id}/pipeline?{query}", status_code=303)


async def _load_for_edit(request, store, operator, locks, candidate_id, job_id):
    """Session with the edit dialog open, or the response to return instead."""
    try:
        session = await _load(store, operator, locks, job_id=job_id)
    except NotFound as exc:
        return None, _not_found(request, exc)
    if session.state is LoadState.ERROR:
        return None, _render(request, session, status_code=503)
    try:
        session.open_edit(candidate_id)
    except NotFound as exc:
        return None, _not_found(request, exc)
    return session, None


@router.get("/ui/pipeline/candidates/{candidate_id}/edit", response_class=HTMLResponse)
async def edit_candidate_page(
    request: Request,
    candidate_id: UUID,
    job_id: Optional[UUID] = Query(None),
    operator: Operator = Depends(get_current_operator),
    store: RecordStore = Depends(get_record_store),
    locks: CandidateWriteLocks = Depends(get_write_locks),
):
    """Pipeline page with the edit dialog open for one candidate."""
    session, response = await _load_for_edit(request, store, operator, locks, candidate_id, job_id)
    if response is not None:
        return response
    return _render(request, session)


@router.post("/ui/pipeline/candidates/{candidate_id}/edit")
async def edit_candidate_submit(
    request: Request,
    candidate_id: UUID,
    job_id: Optional[UUID] = Query(None),
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    linkedin_url: Optional[str] = Form(None),
    resume_url: Optional[str] = Form(None),
    notes: Optional[str] = Form(None),
    operator: Operator = Depends(get_current_operator),
    store: RecordStore = Depends(get_record_store),
    locks: CandidateWriteLocks = Depends(get_write_locks),
):
    """
    Handle the edit dialog submission.

    On success redirect back to the board it was opened from; on failure
    re-render with the dialog still open and the submitted values intact.
    """
    session, response = await _load_for_edit(request, store, operator, locks, candidate_id, job_id)
    if response is not None:
        return response

    try:
        await session.submit_edit(
            name=name,
            email=email,
            phone=phone,
            linkedin_url=linkedin_url,
            resume_url=resume_url,
            notes=notes,
        )
    except ValidationFailure:
        return _render(request, session, status_code=422)
    except WriteFailure as exc:
        return _render(request, session, status_code=exc.status_code)

    base_path = f"/ui/jobs/{job_id}/pipeline" if job_id else "/ui/pipeline"
    query = urlencode({"success_message": "Candidate updated"})
    return RedirectResponse(url=f"{base_path}?{query}", status_code=303)
