"""
Dual view presenter.

The table and the board both read the same filtered list, so switching
between them never refetches or refilters and the board counts always equal
the per-stage sizes of that list.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from talentflow.pipeline.stages import STAGE_ORDER, PipelineStage, parse_stage
from talentflow.schemas.candidate import PipelineCandidate


class ViewMode(str, Enum):
    TABLE = "table"
    BOARD = "board"


@dataclass(frozen=True)
class TableRow:
    candidate_id: UUID
    name: str
    email: str
    phone: Optional[str]
    linkedin_url: Optional[str]
    resume_url: Optional[str]
    job_id: UUID
    job_title: Optional[str]
    stage: PipelineStage
    stage_label: str
    created_at: datetime
    updated_at: Optional[datetime]


@dataclass(frozen=True)
class BoardColumn:
    stage: PipelineStage
    label: str
    candidates: Tuple[PipelineCandidate, ...]

    @property
    def count(self) -> int:
        return len(self.candidates)


_STAGE_RANK = {stage: index for index, stage in enumerate(STAGE_ORDER)}

SORT_KEYS: Dict[str, Callable[[PipelineCandidate], object]] = {
    "name": lambda c: (c.name or "").lower(),
    "email": lambda c: (c.email or "").lower(),
    "job_title": lambda c: (c.job_title or "").lower(),
    "stage": lambda c: _STAGE_RANK[c.stage],
    "created_at": lambda c: c.created_at,
}


class PipelineView:
    """Renders one filtered candidate list as table rows or board columns."""

    def __init__(self, filtered: Sequence[PipelineCandidate]):
        self.filtered: List[PipelineCandidate] = list(filtered)

    def table_rows(self, sort_by: Optional[str] = None, descending: bool = False) -> List[TableRow]:
        """One row per candidate; unsorted rows keep the working set order."""
        candidates = self.filtered
        if sort_by:
            if sort_by not in SORT_KEYS:
                raise ValueError(f"Cannot sort by {sort_by!r}")
            # sorted() is stable, so ties keep working set order
            candidates = sorted(candidates, key=SORT_KEYS[sort_by], reverse=descending)
        return [_row(candidate) for candidate in candidates]

    def column(self, stage) -> BoardColumn:
        stage = parse_stage(stage)
        members = tuple(candidate for candidate in self.filtered if candidate.stage == stage)
        return BoardColumn(stage=stage, label=stage.label, candidates=members)

    def board_columns(self) -> List[BoardColumn]:
        """All six columns in display order, empty ones included."""
        return [self.column(stage) for stage in STAGE_ORDER]

    def counts(self) -> Dict[PipelineStage, int]:
        counts = {stage: 0 for stage in STAGE_ORDER}
        for candidate in self.filtered:
            counts[candidate.stage] += 1
        return counts


def _row(candidate: PipelineCandidate) -> TableRow:
    return TableRow(
        candidate_id=candidate.id,
        name=candidate.name,
        email=candidate.email,
        phone=candidate.phone,
        linkedin_url=candidate.linkedin_url,
        resume_url=candidate.resume_url,
        job_id=candidate.job_id,
        job_title=candidate.job_title,
        stage=candidate.stage,
        stage_label=candidate.stage.label,
        created_at=candidate.created_at,
        updated_at=candidate.updated_at,
    )
