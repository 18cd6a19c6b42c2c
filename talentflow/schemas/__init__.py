"""
Schemas package.

Pydantic models for request validation and API responses.
"""

from talentflow.schemas.candidate import (
    ApplicationForm,
    CandidateCreate,
    CandidateFields,
    CandidatePayload,
    CandidateRead,
    PipelineCandidate,
)
from talentflow.schemas.job import JobCreate, JobOption, JobRead, JobUpdate, JobWithCount, PublicJobRead
from talentflow.schemas.pipeline import DashboardStats, PipelineSnapshot

__all__ = [
    "ApplicationForm",
    "CandidateCreate",
    "CandidateFields",
    "CandidatePayload",
    "CandidateRead",
    "PipelineCandidate",
    "JobCreate",
    "JobOption",
    "JobRead",
    "JobUpdate",
    "JobWithCount",
    "PublicJobRead",
    "DashboardStats",
    "PipelineSnapshot",
]
