"""
Candidate edit session.

Holds an editable copy of one candidate's contact fields. Submitting
validates, writes every field in a single update, then closes and asks for a
full reload. On any failure the session stays open with the fields intact.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from talentflow.pipeline.errors import ValidationFailure, WriteFailure
from talentflow.repositories.record_store import CANDIDATES, RecordStore, StoreError
from talentflow.schemas.base import parse_form
from talentflow.schemas.candidate import CandidateFields, CandidateRead, PipelineCandidate


logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "email", "phone", "linkedin_url", "resume_url", "notes")


class CandidateEditSession:

    def __init__(
        self,
        store: RecordStore,
        candidate: PipelineCandidate,
        on_saved: Optional[Callable[[], Awaitable[Any]]] = None,
    ):
        self.store = store
        self.candidate_id = candidate.id
        self.fields: Dict[str, str] = {name: getattr(candidate, name) or "" for name in EDITABLE_FIELDS}
        self.errors: Dict[str, str] = {}
        self.is_open = True
        self._on_saved = on_saved

    def update(self, **changes: Any) -> None:
        """Change field values in the snapshot. Stage is not editable here."""
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Not editable: {', '.join(sorted(unknown))}")
        for name, value in changes.items():
            self.fields[name] = "" if value is None else value

    def validate(self) -> CandidateFields:
        try:
            form = parse_form(CandidateFields, self.fields)
        except ValidationFailure as exc:
            self.errors = exc.field_errors
            raise
        self.errors = {}
        return form

    async def submit(self) -> CandidateRead:
        """
        Persist the snapshot.

        Raises ValidationFailure (nothing written) or WriteFailure (the single
        update was rejected). Both leave the session open.
        """
        if not self.is_open:
            raise RuntimeError("Edit session is closed")

        form = self.validate()
        try:
            record = await self.store.update(CANDIDATES, self.candidate_id, form.to_changes())
        except StoreError as exc:
            logger.warning("Edit of candidate %s failed: %s", self.candidate_id, exc.kind.value)
            raise WriteFailure("Failed to update candidate", exc) from exc

        self.is_open = False
        logger.info("Candidate %s updated", self.candidate_id)
        if self._on_saved is not None:
            await self._on_saved()
        return CandidateRead.model_validate(record)

    def close(self) -> None:
        self.is_open = False
