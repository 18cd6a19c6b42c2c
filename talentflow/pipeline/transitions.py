"""
Stage state machine.

Moving a candidate is a two-phase protocol: write the new stage through the
record store, then either patch the working set (write succeeded) or leave /
restore the previous stage (write failed). Any stage may follow any stage;
hired and rejected are trailing columns, not locked states.

Writes for the same candidate are serialized, so two rapid drops resolve to
the stage of the last one issued.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional
from uuid import UUID

from talentflow.pipeline.errors import NotFound, TransitionFailure
from talentflow.pipeline.stages import PipelineStage, parse_stage
from talentflow.pipeline.working_set import WorkingSet
from talentflow.repositories.record_store import CANDIDATES, RecordStore, StoreError
from talentflow.schemas.candidate import PipelineCandidate


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageTransition:
    """One requested stage change and the stage it replaces."""

    candidate_id: UUID
    from_stage: PipelineStage
    to_stage: PipelineStage

    def apply(self, working_set: WorkingSet) -> PipelineCandidate:
        return working_set.patch_stage(self.candidate_id, self.to_stage)

    def revert(self, working_set: WorkingSet) -> PipelineCandidate:
        return working_set.patch_stage(self.candidate_id, self.from_stage)


class CandidateWriteLocks:
    """
    Per-candidate asyncio locks.

    One registry is created per application and shared by every transitioner
    so writes to the same candidate from different requests queue up. Entries
    are dropped once nobody holds or waits on them.
    """

    def __init__(self):
        self._entries: Dict[str, List[Any]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    @asynccontextmanager
    async def hold(self, candidate_id) -> AsyncIterator[None]:
        key = str(candidate_id)
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = [asyncio.Lock(), 0]
        entry[1] += 1
        try:
            async with entry[0]:
                yield
        finally:
            entry[1] -= 1
            if entry[1] == 0:
                del self._entries[key]


class StageTransitioner:
    """
    Executes move_to_stage against a working set.

    With optimistic=False (default) the working set is patched only after the
    write succeeds. With optimistic=True it is patched first and reverted if
    the write fails. Either way the displayed stage equals the persisted one
    once the call returns.
    """

    def __init__(self, store: RecordStore, locks: Optional[CandidateWriteLocks] = None, optimistic: bool = False):
        self.store = store
        self.locks = locks if locks is not None else CandidateWriteLocks()
        self.optimistic = optimistic

    async def move_to_stage(self, working_set: WorkingSet, candidate_id: Any, target_stage: Any) -> PipelineCandidate:
        """
        Move one candidate of the working set to target_stage.

        Raises InvalidStage for unknown stages (nothing is written), NotFound
        when the candidate is not in the working set, and TransitionFailure
        when the store rejects the write.
        """
        stage = parse_stage(target_stage)
        if candidate_id not in working_set:
            raise NotFound("candidate", candidate_id)

        async with self.locks.hold(candidate_id):
            current = working_set.get(candidate_id)
            if current is None:
                raise NotFound("candidate", candidate_id)
            transition = StageTransition(current.id, current.stage, stage)
            return await self._commit(working_set, transition)

    async def _commit(self, working_set: WorkingSet, transition: StageTransition) -> PipelineCandidate:
        if self.optimistic:
            transition.apply(working_set)

        try:
            await self.store.update(CANDIDATES, transition.candidate_id, {"stage": transition.to_stage.value})
        except StoreError as exc:
            if self.optimistic:
                transition.revert(working_set)
            logger.warning(
                "Stage write failed for candidate %s (%s -> %s): %s",
                transition.candidate_id,
                transition.from_stage.value,
                transition.to_stage.value,
                exc.kind.value,
            )
            raise TransitionFailure(transition, exc) from exc

        moved = working_set.get(transition.candidate_id) if self.optimistic else transition.apply(working_set)
        logger.info(
            "Candidate %s moved %s -> %s",
            transition.candidate_id,
            transition.from_stage.value,
            transition.to_stage.value,
        )
        return moved
