"""HTTP-level tests against the app with the in-memory store."""

import uuid

import pytest

from talentflow.repositories.record_store import CANDIDATES

from conftest import OWNER_A


pytestmark = pytest.mark.unit


def test_pipeline_requires_session(client):
    response = client.get("/pipeline")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "NOT_AUTHENTICATED"


def test_tampered_token_is_rejected(client):
    response = client.get("/pipeline", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_pipeline_snapshot_for_owner(client, seeded, owner_a, auth_headers):
    response = client.get("/pipeline", headers=auth_headers(owner_a))

    assert response.status_code == 200
    body = response.json()
    assert body["scope"] == "owned"
    assert body["total"] == 2
    assert [row["name"] for row in body["table"]] == ["Bob Jones", "Ann Smith"]
    assert [column["stage"] for column in body["board"]][-1] == "rejected"
    assert body["counts"]["applied"] == 1 and body["counts"]["screening"] == 1


def test_pipeline_search_and_sort(client, seeded, admin, auth_headers):
    response = client.get(
        "/pipeline",
        params={"q": "s", "sort": "name", "view": "table"},
        headers=auth_headers(admin),
    )

    body = response.json()
    assert body["view"] == "table"
    assert body["total"] == 3
    assert [row["name"] for row in body["table"]] == ["Ann Smith", "Bob Jones"]
    assert body["filtered_total"] == 2


def test_pipeline_load_failure_is_503(client, store, seeded, owner_a, auth_headers):
    store.fail("list", CANDIDATES)

    response = client.get("/pipeline", headers=auth_headers(owner_a))

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "LOAD_FAILED"


def test_job_pipeline_of_other_owner_is_404(client, seeded, owner_a, auth_headers):
    response = client.get(f"/jobs/{seeded['job_b']['id']}/pipeline", headers=auth_headers(owner_a))
    assert response.status_code == 404


def test_move_candidate(client, store, seeded, owner_a, auth_headers):
    ann_id = seeded["ann"]["id"]

    response = client.post(
        f"/pipeline/candidates/{ann_id}/stage",
        json={"stage": "interview"},
        headers=auth_headers(owner_a),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["candidate"]["stage"] == "interview"
    assert body["counts"]["interview"] == 1
    assert store.stored(CANDIDATES, ann_id)["stage"] == "interview"


def test_move_to_unknown_stage_is_422(client, seeded, owner_a, auth_headers):
    response = client.post(
        f"/pipeline/candidates/{seeded['ann']['id']}/stage",
        json={"stage": "archived"},
        headers=auth_headers(owner_a),
    )
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "INVALID_STAGE"


def test_move_failure_is_reported(client, store, seeded, owner_a, auth_headers):
    store.fail("update", CANDIDATES)

    response = client.post(
        f"/pipeline/candidates/{seeded['ann']['id']}/stage",
        json={"stage": "offer"},
        headers=auth_headers(owner_a),
    )

    assert response.status_code == 503
    error = response.json()["error"]
    assert error["code"] == "TRANSITION_FAILED"
    assert error["message"] == "Failed to update stage"


def test_move_other_owners_candidate_is_404(client, seeded, owner_a, auth_headers):
    response = client.post(
        f"/pipeline/candidates/{seeded['cara']['id']}/stage",
        json={"stage": "offer"},
        headers=auth_headers(owner_a),
    )
    assert response.status_code == 404


def test_drop_success_and_failure(client, store, seeded, owner_a, auth_headers):
    headers = auth_headers(owner_a)
    bob_id = str(seeded["bob"]["id"])

    ok = client.post("/pipeline/drop", json={"candidate_id": bob_id, "stage": "offer"}, headers=headers).json()
    assert ok["moved"] is True
    assert ok["candidate"]["stage"] == "offer"

    store.fail("update", CANDIDATES)
    failed = client.post("/pipeline/drop", json={"candidate_id": bob_id, "stage": "hired"}, headers=headers).json()
    assert failed["moved"] is False
    assert failed["candidate"]["stage"] == "offer"
    assert failed["notifications"] == [
        {"level": "error", "message": "Failed to update stage", "code": "TRANSITION_FAILED"}
    ]


def test_drop_without_stage_is_cancel(client, store, seeded, owner_a, auth_headers):
    store.calls.clear()
    response = client.post(
        "/pipeline/drop",
        json={"candidate_id": str(seeded["ann"]["id"])},
        headers=auth_headers(owner_a),
    )
    assert response.json()["moved"] is False
    assert ("update", CANDIDATES) not in store.calls


def test_edit_candidate(client, store, seeded, owner_a, auth_headers):
    ann_id = seeded["ann"]["id"]
    payload = {"name": "Ann Smythe", "email": "ann@example.com", "phone": "555-0100"}

    response = client.put(f"/pipeline/candidates/{ann_id}", json=payload, headers=auth_headers(owner_a))

    assert response.status_code == 200
    assert response.json()["name"] == "Ann Smythe"
    assert store.stored(CANDIDATES, ann_id)["phone"] == "555-0100"


def test_edit_candidate_validation(client, seeded, owner_a, auth_headers):
    response = client.put(
        f"/pipeline/candidates/{seeded['ann']['id']}",
        json={"name": "", "email": "ann@example.com"},
        headers=auth_headers(owner_a),
    )
    assert response.status_code == 422
    assert response.json()["error"]["details"]["fields"] == {"name": "Name is required"}


def test_jobs_endpoints(client, seeded, owner_b, auth_headers):
    headers = auth_headers(owner_b)

    created = client.post("/jobs", json={"title": "Analyst"}, headers=headers)
    assert created.status_code == 201
    job_id = created.json()["id"]

    listed = client.get("/jobs", headers=headers).json()
    assert [job["title"] for job in listed] == ["Analyst", "Designer"]

    patched = client.patch(f"/jobs/{job_id}", json={"status": "closed"}, headers=headers)
    assert patched.json()["status"] == "closed"

    added = client.post(
        f"/jobs/{job_id}/candidates",
        json={"name": "Hal", "email": "hal@example.com"},
        headers=headers,
    )
    assert added.status_code == 201
    assert added.json()["stage"] == "applied"

    stats = client.get("/dashboard/stats", headers=headers).json()
    assert stats == {"total_jobs": 2, "open_jobs": 1, "total_candidates": 2, "hired_candidates": 0}


def test_public_application(client, store, seeded):
    job_id = seeded["job_a"]["id"]

    job = client.get(f"/public/jobs/{job_id}")
    assert job.json()["title"] == "Backend Engineer"

    response = client.post(
        f"/public/jobs/{job_id}/applications",
        json={"name": "Ivy", "email": "ivy@example.com"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["stage"] == "applied"
    assert body["owner_id"] == str(OWNER_A)


def test_public_application_stale_link(client):
    response = client.post(
        f"/public/jobs/{uuid.uuid4()}/applications",
        json={"name": "Ivy", "email": "ivy@example.com"},
    )
    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Job not found"
