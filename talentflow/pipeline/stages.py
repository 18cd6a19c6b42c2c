"""
Pipeline stages.

The stage set is fixed and totally ordered for display. Order carries no
transition rules: every stage is reachable from every other stage.
"""

from enum import Enum
from typing import Any, Dict, Tuple

from talentflow.pipeline.errors import InvalidStage


class PipelineStage(str, Enum):
    """A discrete step in a candidate's hiring progress."""

    APPLIED = "applied"
    SCREENING = "screening"
    INTERVIEW = "interview"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"

    @property
    def label(self) -> str:
        return STAGE_LABELS[self]


# Display order. REJECTED is a side branch rendered as the trailing column.
STAGE_ORDER: Tuple[PipelineStage, ...] = (
    PipelineStage.APPLIED,
    PipelineStage.SCREENING,
    PipelineStage.INTERVIEW,
    PipelineStage.OFFER,
    PipelineStage.HIRED,
    PipelineStage.REJECTED,
)

STAGE_LABELS: Dict[PipelineStage, str] = {
    PipelineStage.APPLIED: "Applied",
    PipelineStage.SCREENING: "Screening",
    PipelineStage.INTERVIEW: "Interview",
    PipelineStage.OFFER: "Offer",
    PipelineStage.HIRED: "Hired",
    PipelineStage.REJECTED: "Rejected",
}

INITIAL_STAGE = PipelineStage.APPLIED


def parse_stage(value: Any) -> PipelineStage:
    """
    Coerce a raw value into a PipelineStage.

    Accepts a PipelineStage or its string value (surrounding whitespace and
    case are ignored). Anything else raises InvalidStage.
    """
    if isinstance(value, PipelineStage):
        return value
    if isinstance(value, str):
        try:
            return PipelineStage(value.strip().lower())
        except ValueError:
            pass
    raise InvalidStage(value)
