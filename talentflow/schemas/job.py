"""
Job Pydantic schemas.
"""

from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from talentflow.schemas.base import OwnerScopedRead, blank_to_none


JobStatus = Literal["open", "closed"]


class JobCreate(BaseModel):
    """Schema for creating a new job. Title is required."""

    title: str = Field(min_length=1, max_length=255)
    department: Optional[str] = Field(default=None, max_length=255)
    location: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None

    @field_validator("title", "department", "location", "description", mode="before")
    @classmethod
    def _strip(cls, value):
        return blank_to_none(value)


class JobUpdate(BaseModel):
    """Schema for updating a job. All fields optional."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    department: Optional[str] = Field(default=None, max_length=255)
    location: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    status: Optional[JobStatus] = None

    @field_validator("department", "location", "description", mode="before")
    @classmethod
    def _strip(cls, value):
        return blank_to_none(value)

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("Title is required")
        return value


class JobRead(OwnerScopedRead):
    """Schema for reading job data (API response)."""

    title: str
    department: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    status: str


class JobWithCount(JobRead):
    """Job list entry with its candidate count and public apply link."""

    candidate_count: int = 0
    apply_url: Optional[str] = None


class PublicJobRead(BaseModel):
    """What an unauthenticated applicant may see about a job."""

    id: UUID
    title: str
    department: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    status: str

    model_config = ConfigDict(from_attributes=True)


class JobOption(BaseModel):
    """One entry of the job filter control."""

    id: UUID
    title: str
