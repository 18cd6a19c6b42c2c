"""
Pipeline API schemas.
"""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel

from talentflow.pipeline.stages import PipelineStage
from talentflow.schemas.candidate import PipelineCandidate
from talentflow.schemas.job import JobOption


class StageMoveRequest(BaseModel):
    """Body for a stage transition. Validated against the stage set by the engine."""

    stage: str


class DropRequest(BaseModel):
    """A completed drag: which card was dragged and where it was released."""

    candidate_id: UUID
    stage: Optional[str] = None  # None means released outside any column


class NotificationRead(BaseModel):
    level: str
    message: str
    code: Optional[str] = None


class TableRowRead(BaseModel):
    candidate_id: UUID
    name: str
    email: str
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    resume_url: Optional[str] = None
    job_id: UUID
    job_title: Optional[str] = None
    stage: PipelineStage
    stage_label: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class BoardColumnRead(BaseModel):
    stage: PipelineStage
    label: str
    count: int
    candidates: List[PipelineCandidate]


class PipelineSnapshot(BaseModel):
    """Everything a client needs to render either view of the pipeline."""

    scope: str
    view: str
    query: str
    job_id: str
    total: int
    filtered_total: int
    job_options: List[JobOption]
    counts: Dict[str, int]
    table: List[TableRowRead]
    board: List[BoardColumnRead]
    notifications: List[NotificationRead] = []


class MoveResult(BaseModel):
    candidate: PipelineCandidate
    counts: Dict[str, int]
    notifications: List[NotificationRead] = []


class DropResult(BaseModel):
    moved: bool
    candidate: Optional[PipelineCandidate] = None
    notifications: List[NotificationRead] = []


class DashboardStats(BaseModel):
    total_jobs: int
    open_jobs: int
    total_candidates: int
    hired_candidates: int
