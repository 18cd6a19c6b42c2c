"""
Candidate model.

Represents one applicant against exactly one job.
"""

import uuid
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, Text, ForeignKey, CheckConstraint, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from talentflow.models.base_model import OwnerScopedModel
from talentflow.pipeline.stages import STAGE_ORDER, INITIAL_STAGE

if TYPE_CHECKING:
    from talentflow.models.job import Job


_STAGE_VALUES = ", ".join(f"'{stage.value}'" for stage in STAGE_ORDER)


class Candidate(OwnerScopedModel):
    """
    Candidate table - an application moving through the hiring stages.

    owner_id is copied from the job on insert so owner-scoped queries
    never need to join through the job table.
    """

    __tablename__ = "candidate"
    __table_args__ = (
        CheckConstraint(f"stage IN ({_STAGE_VALUES})", name="ck_candidate_stage"),
        Index("ix_candidate_owner_created", "owner_id", "created_at"),
    )

    job_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("job.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    phone: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    linkedin_url: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )

    resume_url: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    stage: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=INITIAL_STAGE.value,
        server_default=INITIAL_STAGE.value,
        index=True,
    )

    job: Mapped["Job"] = relationship(
        back_populates="candidates",
        lazy="noload",
    )
