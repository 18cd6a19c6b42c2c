"""
In-memory working set.

The access-scoped, currently loaded candidates in load order (newest first),
plus the job options for the filter control. Rebuilt on every load and
patched in place by stage transitions.
"""

from typing import Dict, Iterator, List, Optional, Sequence
from uuid import UUID

from talentflow.pipeline.stages import PipelineStage
from talentflow.schemas.candidate import PipelineCandidate
from talentflow.schemas.job import JobOption


class WorkingSet:

    def __init__(self, candidates: Sequence[PipelineCandidate] = (), job_options: Sequence[JobOption] = ()):
        self._candidates: List[PipelineCandidate] = list(candidates)
        self.job_options: List[JobOption] = list(job_options)
        self._index: Dict[str, int] = {str(c.id): i for i, c in enumerate(self._candidates)}

    def __len__(self) -> int:
        return len(self._candidates)

    def __iter__(self) -> Iterator[PipelineCandidate]:
        return iter(self._candidates)

    def __contains__(self, candidate_id) -> bool:
        return str(candidate_id) in self._index

    @property
    def candidates(self) -> List[PipelineCandidate]:
        return list(self._candidates)

    def get(self, candidate_id) -> Optional[PipelineCandidate]:
        position = self._index.get(str(candidate_id))
        if position is None:
            return None
        return self._candidates[position]

    def patch_stage(self, candidate_id, stage: PipelineStage) -> PipelineCandidate:
        """Replace one entry's stage, keeping its position. KeyError if absent."""
        position = self._index[str(candidate_id)]
        patched = self._candidates[position].model_copy(update={"stage": stage})
        self._candidates[position] = patched
        return patched

    def job_ids(self) -> List[UUID]:
        return [option.id for option in self.job_options]
