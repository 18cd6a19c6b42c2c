"""
Public application pages. No authentication.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from talentflow.core.dependencies import get_record_store
from talentflow.pipeline.errors import LoadFailure, NotFound, ValidationFailure, WriteFailure
from talentflow.repositories.record_store import RecordStore
from talentflow.services.intake_service import IntakeService
from talentflow.ui.rendering import templates


router = APIRouter()


def _not_found(request: Request):
    return templates.TemplateResponse(
        request,
        "not_found.html",
        {"entity": "job", "message": "This job posting could not be found."},
        status_code=404,
    )


@router.get("/apply/{job_id}", response_class=HTMLResponse)
async def apply_page(request: Request, job_id: UUID, store: RecordStore = Depends(get_record_store)):
    """Show the public application form for a job."""
    try:
        job = await IntakeService(store).public_job(job_id)
    except NotFound:
        return _not_found(request)
    except LoadFailure as exc:
        return templates.TemplateResponse(
            request, "apply.html", {"job": None, "form": {}, "errors": {}, "error_message": exc.message},
            status_code=503,
        )
    return templates.TemplateResponse(request, "apply.html", {"job": job, "form": {}, "errors": {}})


@router.post("/apply/{job_id}", response_class=HTMLResponse)
async def apply_submit(
    request: Request,
    job_id: UUID,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    linkedin_url: Optional[str] = Form(None),
    resume_url: Optional[str] = Form(None),
    notes: Optional[str] = Form(None),
    store: RecordStore = Depends(get_record_store),
):
    """Handle the public application form."""
    service = IntakeService(store)
    form = {
        "name": name,
        "email": email,
        "phone": phone,
        "linkedin_url": linkedin_url,
        "resume_url": resume_url,
        "notes": notes,
    }
    try:
        job = await service.public_job(job_id)
        await service.submit(job_id, form)
    except NotFound:
        return _not_found(request)
    except ValidationFailure as exc:
        return templates.TemplateResponse(
            request, "apply.html", {"job": job, "form": form, "errors": exc.field_errors}, status_code=422,
        )
    except (LoadFailure, WriteFailure) as exc:
        return templates.TemplateResponse(
            request,
            "apply.html",
            {"job": None, "form": form, "errors": {}, "error_message": exc.message},
            status_code=exc.status_code,
        )
    return templates.TemplateResponse(request, "apply_done.html", {"job": job})
