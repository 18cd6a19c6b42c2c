"""
Pipeline session.

One object per board/table interaction. It owns the working set, the filter
inputs, the view mode, the drag slot, the open edit session and the pending
notifications, and derives the filtered set and both views on demand from
those inputs.
"""

import logging
from enum import Enum
from typing import Any, Optional

from talentflow.pipeline.access import AccessScope, Operator, resolve_access_scope
from talentflow.pipeline.drag import DragSession
from talentflow.pipeline.edit_session import CandidateEditSession
from talentflow.pipeline.errors import LoadFailure, NotFound, PipelineError
from talentflow.pipeline.filters import CandidateFilter, filter_candidates
from talentflow.pipeline.loader import PipelineLoader
from talentflow.pipeline.notifications import Notifier
from talentflow.pipeline.presenter import PipelineView, ViewMode
from talentflow.pipeline.transitions import CandidateWriteLocks, StageTransitioner
from talentflow.pipeline.working_set import WorkingSet
from talentflow.repositories.record_store import RecordStore
from talentflow.schemas.candidate import CandidateRead, PipelineCandidate


logger = logging.getLogger(__name__)


class LoadState(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    READY = "ready"


class PipelineSession:

    def __init__(
        self,
        store: RecordStore,
        operator: Operator,
        locks: Optional[CandidateWriteLocks] = None,
        optimistic: bool = False,
        job_id: Optional[Any] = None,
    ):
        self.store = store
        self.operator = operator
        self.scope: AccessScope = resolve_access_scope(operator.role)
        self.job_id = job_id

        self.loader = PipelineLoader(store)
        self.transitioner = StageTransitioner(store, locks, optimistic)
        self.notifier = Notifier()
        self.drag = DragSession(self.transitioner, self.notifier)

        self.working_set = WorkingSet()
        self.criteria = CandidateFilter()
        self.view_mode = ViewMode.BOARD
        self.edit: Optional[CandidateEditSession] = None
        self.load_error: Optional[LoadFailure] = None
        self._loaded = False

    # Loading

    def switch_operator(self, operator: Operator) -> None:
        """Identity changed; the next reload resolves the scope again."""
        self.operator = operator

    async def reload(self) -> bool:
        """
        Refresh the working set.

        Returns False when the load failed (see load_error) or was superseded
        by a newer one. NotFound for an invisible job_id propagates.
        """
        self.scope = resolve_access_scope(self.operator.role)
        try:
            working_set = await self.loader.load(self.operator.operator_id, self.scope, self.job_id)
        except LoadFailure as exc:
            self.load_error = exc
            return False
        if working_set is None:
            return False

        self.working_set = working_set
        self.load_error = None
        self._loaded = True
        return True

    @property
    def state(self) -> LoadState:
        if self.load_error is not None:
            return LoadState.ERROR
        if not self._loaded:
            return LoadState.LOADING
        if not len(self.working_set):
            return LoadState.EMPTY
        return LoadState.READY

    # Filtering and views

    def set_query(self, query: Optional[str]) -> None:
        self.criteria = CandidateFilter(query=query or "", job_id=self.criteria.job_id)

    def set_job_filter(self, job_id: Optional[Any]) -> None:
        self.criteria = CandidateFilter.build(self.criteria.query, job_id)

    def set_view(self, mode) -> None:
        self.view_mode = ViewMode(mode)

    @property
    def filtered(self) -> list:
        return filter_candidates(self.working_set, self.criteria)

    @property
    def view(self) -> PipelineView:
        return PipelineView(self.filtered)

    # Transitions

    async def move_to_stage(self, candidate_id: Any, target_stage: Any) -> PipelineCandidate:
        """Move a candidate; failures are queued as notifications and re-raised."""
        try:
            return await self.transitioner.move_to_stage(self.working_set, candidate_id, target_stage)
        except PipelineError as exc:
            self.notifier.error(exc.message, exc.code)
            raise

    def begin_drag(self, candidate_id: Any) -> None:
        self.drag.begin_drag(candidate_id)

    def cancel_drag(self) -> None:
        self.drag.cancel()

    async def drop_on_stage(self, target_stage: Any) -> bool:
        return await self.drag.drop_on_stage(self.working_set, target_stage)

    # Editing

    def open_edit(self, candidate_id: Any) -> CandidateEditSession:
        candidate = self.working_set.get(candidate_id)
        if candidate is None:
            raise NotFound("candidate", candidate_id)
        self.edit = CandidateEditSession(self.store, candidate, on_saved=self.reload)
        return self.edit

    async def submit_edit(self, **changes: Any) -> CandidateRead:
        """Apply changes to the open edit session and save it."""
        if self.edit is None or not self.edit.is_open:
            raise RuntimeError("No candidate is being edited")
        if changes:
            self.edit.update(**changes)
        try:
            saved = await self.edit.submit()
        except PipelineError as exc:
            self.notifier.error(exc.message, exc.code)
            raise
        self.edit = None
        self.notifier.success("Candidate updated")
        return saved

    def close_edit(self) -> None:
        if self.edit is not None:
            self.edit.close()
        self.edit = None
