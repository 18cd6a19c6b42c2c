import uuid
from datetime import datetime, timedelta, timezone

import pytest

from talentflow.pipeline.filters import ALL_JOBS, CandidateFilter, filter_candidates
from talentflow.pipeline.presenter import PipelineView
from talentflow.pipeline.stages import STAGE_ORDER, PipelineStage
from talentflow.schemas.candidate import PipelineCandidate


pytestmark = pytest.mark.unit

JOB_1 = uuid.uuid4()
JOB_2 = uuid.uuid4()
OWNER = uuid.uuid4()
T0 = datetime(2026, 3, 1, tzinfo=timezone.utc)


def make_candidate(name, email, job_id=JOB_1, stage="applied", minutes=0, job_title="Engineer"):
    return PipelineCandidate(
        id=uuid.uuid4(),
        owner_id=OWNER,
        job_id=job_id,
        name=name,
        email=email,
        stage=stage,
        created_at=T0 + timedelta(minutes=minutes),
        job_title=job_title,
    )


@pytest.fixture
def candidates():
    # Newest first, as loaded
    return [
        make_candidate("Dana Lee", "dana@corp.io", JOB_2, "offer", 3, "Designer"),
        make_candidate("Ann Smith", "ann@example.com", JOB_1, "applied", 2),
        make_candidate("Bob Jones", "bob@example.com", JOB_1, "screening", 1),
        make_candidate("Anna Berg", "berg@corp.io", JOB_2, "applied", 0, "Designer"),
    ]


def test_noop_filter_returns_everything_in_order(candidates):
    criteria = CandidateFilter()
    assert criteria.is_noop
    assert filter_candidates(candidates, criteria) == candidates


def test_query_matches_name_or_email_case_insensitively(candidates):
    by_name = filter_candidates(candidates, CandidateFilter(query="ANN"))
    assert [c.name for c in by_name] == ["Ann Smith", "Anna Berg"]

    by_email = filter_candidates(candidates, CandidateFilter(query="corp.io"))
    assert [c.name for c in by_email] == ["Dana Lee", "Anna Berg"]


def test_blank_query_is_ignored(candidates):
    assert filter_candidates(candidates, CandidateFilter(query="   ")) == candidates


def test_query_and_job_filter_compose_with_and(candidates):
    criteria = CandidateFilter.build("ann", JOB_1)
    assert [c.name for c in filter_candidates(candidates, criteria)] == ["Ann Smith"]


def test_filter_is_a_subset_and_idempotent(candidates):
    criteria = CandidateFilter.build("a", JOB_2)
    once = filter_candidates(candidates, criteria)
    assert all(c in candidates for c in once)
    assert filter_candidates(once, criteria) == once


def test_build_defaults_blank_job_to_all():
    assert CandidateFilter.build(None, "").job_id == ALL_JOBS
    assert CandidateFilter.build(None, None).job_id == ALL_JOBS


def test_unknown_job_filter_matches_nothing(candidates):
    criteria = CandidateFilter.build("", uuid.uuid4())
    assert filter_candidates(candidates, criteria) == []


def test_board_counts_equal_stage_sizes_of_filtered_set(candidates):
    view = PipelineView(filter_candidates(candidates, CandidateFilter(query="a")))
    columns = view.board_columns()

    assert [c.stage for c in columns] == list(STAGE_ORDER)
    assert sum(c.count for c in columns) == len(view.filtered)
    counts = view.counts()
    for column in columns:
        assert column.count == counts[column.stage]
        assert all(c.stage == column.stage for c in column.candidates)


def test_empty_columns_are_still_rendered():
    columns = PipelineView([]).board_columns()
    assert len(columns) == 6
    assert all(column.count == 0 for column in columns)


def test_search_then_board_shows_only_matches(candidates):
    """Typing a query narrows both views to the same rows."""
    view = PipelineView(filter_candidates(candidates, CandidateFilter(query="bob")))
    assert [row.name for row in view.table_rows()] == ["Bob Jones"]
    assert view.column(PipelineStage.SCREENING).count == 1
    assert view.column(PipelineStage.APPLIED).count == 0


def test_table_rows_default_to_working_set_order(candidates):
    rows = PipelineView(candidates).table_rows()
    assert [r.name for r in rows] == [c.name for c in candidates]
    assert rows[0].stage_label == "Offer"
    assert rows[0].job_title == "Designer"


def test_table_rows_sort_by_stage_rank_and_name(candidates):
    view = PipelineView(candidates)
    assert [r.stage.value for r in view.table_rows("stage")] == ["applied", "applied", "screening", "offer"]
    assert [r.name for r in view.table_rows("name", descending=True)][0] == "Dana Lee"


def test_table_rows_reject_unknown_sort_key(candidates):
    with pytest.raises(ValueError):
        PipelineView(candidates).table_rows("salary")
