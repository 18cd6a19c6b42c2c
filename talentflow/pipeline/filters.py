"""
Filter/search compositor.

Pure and order-preserving: recomputed from the working set every time the
set or either filter input changes.
"""

from dataclasses import dataclass
from typing import Iterable, List

from talentflow.schemas.candidate import PipelineCandidate


ALL_JOBS = "all"


@dataclass(frozen=True)
class CandidateFilter:
    """Free-text name/email query AND job identity filter."""

    query: str = ""
    job_id: str = ALL_JOBS

    @classmethod
    def build(cls, query=None, job_id=None) -> "CandidateFilter":
        job = str(job_id).strip() if job_id is not None else ""
        return cls(query=query or "", job_id=job or ALL_JOBS)

    @property
    def is_noop(self) -> bool:
        return not self.query.strip() and self.job_id == ALL_JOBS


def matches_query(candidate: PipelineCandidate, query: str) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    return needle in (candidate.name or "").lower() or needle in (candidate.email or "").lower()


def matches_job(candidate: PipelineCandidate, job_id: str) -> bool:
    if job_id == ALL_JOBS:
        return True
    return str(candidate.job_id) == job_id


def filter_candidates(candidates: Iterable[PipelineCandidate], criteria: CandidateFilter) -> List[PipelineCandidate]:
    """Candidates matching both the query and the job filter, in input order."""
    return [
        candidate
        for candidate in candidates
        if matches_job(candidate, criteria.job_id) and matches_query(candidate, criteria.query)
    ]
