"""
Job pages for UI.
"""

from typing import Optional
from urllib.parse import urlencode
from uuid import UUID

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from talentflow.core.dependencies import get_current_operator, get_record_store
from talentflow.pipeline.access import Operator
from talentflow.pipeline.errors import LoadFailure, NotFound, ValidationFailure, WriteFailure
from talentflow.repositories.record_store import RecordStore
from talentflow.services.job_service import JobService
from talentflow.ui.rendering import templates


router = APIRouter()


async def _jobs_page(request, operator, store, form=None, errors=None, error_message=None,
                     success_message=None, status_code=200, edit_form=None, edit_errors=None):
    service = JobService(store)
    jobs, stats, load_error = [], None, None
    try:
        jobs = await service.list_jobs(operator, operator.scope)
        stats = await service.dashboard_stats(operator, operator.scope)
    except LoadFailure as exc:
        load_error = exc
        status_code = 503
    return templates.TemplateResponse(
        request,
        "jobs.html",
        {
            "operator": operator,
            "active_page": "jobs",
            "jobs": jobs,
            "stats": stats,
            "load_error": load_error,
            "form": form or {},
            "errors": errors or {},
            "error_message": error_message,
            "success_message": success_message,
            "edit_form": edit_form,
            "edit_errors": edit_errors or {},
        },
        status_code=status_code,
    )


def _not_found(request: Request, exc: NotFound):
    return templates.TemplateResponse(
        request,
        "not_found.html",
        {"entity": exc.entity, "message": exc.message},
        status_code=404,
    )


@router.get("/ui/jobs", response_class=HTMLResponse)
async def jobs_page(
    request: Request,
    success_message: Optional[str] = Query(None),
    operator: Operator = Depends(get_current_operator),
    store: RecordStore = Depends(get_record_store),
):
    """Job list with candidate counts, dashboard totals and the create form."""
    return await _jobs_page(request, operator, store, success_message=success_message)


@router.post("/ui/jobs/new")
async def job_create(
    request: Request,
    title: Optional[str] = Form(None),
    department: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    operator: Operator = Depends(get_current_operator),
    store: RecordStore = Depends(get_record_store),
):
    """Handle job create form submission."""
    form = {"title": title, "department": department, "location": location, "description": description}
    try:
        await JobService(store).create_job(operator, form)
    except ValidationFailure as exc:
        return await _jobs_page(request, operator, store, form, exc.field_errors, status_code=422)
    except WriteFailure as exc:
        return await _jobs_page(request, operator, store, form, error_message=exc.message,
                                status_code=exc.status_code)

    query = urlencode({"success_message": "Job created successfully"})
    return RedirectResponse(url=f"/ui/jobs?{query}", status_code=303)


@router.get("/ui/jobs/{job_id}/edit", response_class=HTMLResponse)
async def job_edit_page(
    request: Request,
    job_id: UUID,
    operator: Operator = Depends(get_current_operator),
    store: RecordStore = Depends(get_record_store),
):
    """Job list with the edit form open for one job."""
    try:
        job = await JobService(store).get_job(operator, operator.scope, job_id)
    except NotFound as exc:
        return _not_found(request, exc)
    except LoadFailure as exc:
        return await _jobs_page(request, operator, store, error_message=exc.message, status_code=exc.status_code)
    return await _jobs_page(request, operator, store, edit_form=job.model_dump(mode="json"))


@router.post("/ui/jobs/{job_id}/edit")
async def job_edit_submit(
    request: Request,
    job_id: UUID,
    title: Optional[str] = Form(None),
    department: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
    operator: Operator = Depends(get_current_operator),
    store: RecordStore = Depends(get_record_store),
):
    """Handle job edit form submission."""
    form = {
        "title": title,
        "department": department,
        "location": location,
        "description": description,
        "status": status,
    }
    try:
        await JobService(store).update_job(operator, operator.scope, job_id, form)
    except NotFound as exc:
        return _not_found(request, exc)
    except ValidationFailure as exc:
        return await _jobs_page(request, operator, store, edit_form={**form, "id": str(job_id)},
                                edit_errors=exc.field_errors, status_code=422)
    except WriteFailure as exc:
        return await _jobs_page(request, operator, store, edit_form={**form, "id": str(job_id)},
                                error_message=exc.message, status_code=exc.status_code)

    query = urlencode({"success_message": "Job updated"})
    return RedirectResponse(url=f"/ui/jobs?{query}", status_code=303)
