"""
Candidate Pydantic schemas.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from talentflow.pipeline.stages import PipelineStage
from talentflow.schemas.base import OwnerScopedRead, blank_to_none


class CandidateFields(BaseModel):
    """
    Editable candidate fields, validated.

    Shared by manual add, public intake and the edit session. Stage is never
    part of this schema; it only changes through a transition.
    """

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=50)
    linkedin_url: Optional[str] = Field(default=None, max_length=500)
    resume_url: Optional[str] = Field(default=None, max_length=500)
    notes: Optional[str] = None

    @field_validator("name", "email", "phone", "linkedin_url", "resume_url", "notes", mode="before")
    @classmethod
    def _strip(cls, value):
        return blank_to_none(value)

    def to_changes(self) -> dict:
        """Full field set for a single all-or-nothing write."""
        return self.model_dump(mode="json")


class CandidateCreate(CandidateFields):
    """Schema for manually adding a candidate to a job."""


class ApplicationForm(CandidateFields):
    """Public application submitted through the apply link."""


class CandidatePayload(BaseModel):
    """Unvalidated candidate form body, checked by the service layer."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    resume_url: Optional[str] = None
    notes: Optional[str] = None


class CandidateRead(OwnerScopedRead):
    """Schema for reading candidate data (API response)."""

    job_id: UUID
    name: str
    email: str
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    resume_url: Optional[str] = None
    notes: Optional[str] = None
    stage: PipelineStage


class PipelineCandidate(CandidateRead):
    """Working set entry: a candidate annotated with its job title."""

    job_title: Optional[str] = None
