"""
Drag transfer session.

Holds at most one "being dragged" candidate id for a single pointer. A drop
commits a transition; a cancel (released outside any column) just clears.
"""

import logging
from typing import Any, Optional

from talentflow.pipeline.errors import PipelineError
from talentflow.pipeline.notifications import Notifier
from talentflow.pipeline.transitions import StageTransitioner
from talentflow.pipeline.working_set import WorkingSet


logger = logging.getLogger(__name__)


class DragSession:

    def __init__(self, transitioner: StageTransitioner, notifier: Notifier):
        self.transitioner = transitioner
        self.notifier = notifier
        self._slot: Optional[Any] = None

    @property
    def dragging(self) -> Optional[Any]:
        return self._slot

    def begin_drag(self, candidate_id: Any) -> None:
        # A new drag replaces any previous one.
        self._slot = candidate_id

    def cancel(self) -> None:
        self._slot = None

    async def drop_on_stage(self, working_set: WorkingSet, target_stage: Any) -> bool:
        """
        Move the dragged candidate to target_stage.

        The slot is cleared whatever the outcome. Failures are reported as
        error notifications; returns True only when the move was persisted.
        """
        candidate_id, self._slot = self._slot, None
        if candidate_id is None:
            return False

        try:
            await self.transitioner.move_to_stage(working_set, candidate_id, target_stage)
        except PipelineError as exc:
            self.notifier.error(exc.message, exc.code)
            return False
        return True
