"""
Job model.

A hiring requisition owned by one operator.
"""

from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import String, Text, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from talentflow.models.base_model import OwnerScopedModel

if TYPE_CHECKING:
    from talentflow.models.candidate import Candidate


JOB_STATUSES = ("open", "closed")


class Job(OwnerScopedModel):
    """
    Job table - one hiring requisition.

    Candidates reference their job by id; a job never contains them.
    """

    __tablename__ = "job"
    __table_args__ = (
        CheckConstraint("status IN ('open', 'closed')", name="ck_job_status"),
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    department: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    location: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="open",
        server_default="open",
    )

    candidates: Mapped[List["Candidate"]] = relationship(
        back_populates="job",
        lazy="noload",
    )
