from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from printdesk.auth.auth_models import Actor
from printdesk.auth.auth_service import AuthService
from printdesk.jobs.jobs_api import router

from tests.helpers.print_jobs import OTHER_STUDENT, STAFF, STUDENT, build_service

SIGNING_KEY = "test-signing-key"


def auth_headers(actor: Actor) -> dict[str, str]:
    token = AuthService(signing_key=SIGNING_KEY).issue_token(
        user_id=actor.id, email=actor.email, role=actor.role
    )
    return {"Authorization": f"Bearer {token}"}


def build_client(session_factory, storage_root, **kwargs) -> TestClient:
    app = FastAPI()
    app.state.job_service = build_service(session_factory, storage_root, **kwargs)
    app.state.auth_service = AuthService(signing_key=SIGNING_KEY)
    app.include_router(router)
    return TestClient(app)


def submit(client: TestClient, actor: Actor = STUDENT, **data):
    form = {"copies": "1", "color_mode": "BW", "sided": "Single", "stapled": "false"}
    form.update(data)
    return client.post(
        "/api/print-jobs",
        files=[("files", ("essay.pdf", b"%PDF-1.4", "application/pdf"))],
        data=form,
        headers=auth_headers(actor),
    )


def test_submit_returns_created_job(session_factory, storage_root) -> None:
    client = build_client(session_factory, storage_root)

    response = client.post(
        "/api/print-jobs",
        files=[
            ("files", ("essay.pdf", b"%PDF-1.4", "application/pdf")),
            ("files", ("chart.png", b"\x89PNG", "image/png")),
        ],
        data={
            "copies": "3",
            "color_mode": "Color",
            "sided": "Double",
            "stapled": "true",
            "instructions": " landscape please ",
        },
        headers=auth_headers(STUDENT),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["slot_id"] == "A-01"
    assert body["job_id"] != body["slot_id"]
    assert body["status"] == "InProgress"
    assert body["preferences"] == {
        "copies": 3,
        "color_mode": "Color",
        "sided": "Double",
        "stapled": True,
        "instructions": "landscape please",
    }
    assert [item["file_name"] for item in body["files"]] == ["essay.pdf", "chart.png"]
    assert body["files"][0]["file_url"].startswith("/files/print-jobs/")


def test_submit_requires_token(session_factory, storage_root) -> None:
    client = build_client(session_factory, storage_root)

    response = client.post(
        "/api/print-jobs",
        files=[("files", ("essay.pdf", b"%PDF", "application/pdf"))],
    )

    assert response.status_code == 401
    assert response.json()["detail"]["failure_reason"] == "missing_token"


def test_invalid_token_is_rejected(session_factory, storage_root) -> None:
    client = build_client(session_factory, storage_root)

    response = client.get("/api/print-jobs/mine", headers={"Authorization": "Bearer nope"})

    assert response.status_code == 401
    assert response.json()["detail"]["failure_reason"] == "invalid_token"


def test_submit_without_files_is_bad_request(session_factory, storage_root) -> None:
    client = build_client(session_factory, storage_root)

    response = client.post(
        "/api/print-jobs", data={"copies": "1"}, headers=auth_headers(STUDENT)
    )

    assert response.status_code == 400
    assert response.json()["detail"]["failure_reason"] == "invalid_request"


def test_submit_zero_copies_is_bad_request(session_factory, storage_root) -> None:
    client = build_client(session_factory, storage_root)

    response = submit(client, copies="0")

    assert response.status_code == 400


def test_unsupported_file_type(session_factory, storage_root) -> None:
    client = build_client(session_factory, storage_root)

    response = client.post(
        "/api/print-jobs",
        files=[("files", ("tool.exe", b"MZ", "application/x-msdownload"))],
        headers=auth_headers(STUDENT),
    )

    assert response.status_code == 415
    assert response.json()["detail"]["failure_reason"] == "unsupported_file_type"


def test_staff_cannot_submit(session_factory, storage_root) -> None:
    client = build_client(session_factory, storage_root)

    response = submit(client, STAFF)

    assert response.status_code == 403
    assert response.json()["detail"]["failure_reason"] == "forbidden"


def test_saturated_pool_returns_conflict(session_factory, storage_root) -> None:
    client = build_client(session_factory, storage_root, max_slots=1)
    assert submit(client).status_code == 201

    response = submit(client)

    assert response.status_code == 409
    assert response.json()["detail"]["failure_reason"] == "pool_saturated"


def test_status_flow_over_http(session_factory, storage_root) -> None:
    client = build_client(session_factory, storage_root)
    job_id = submit(client).json()["job_id"]

    outsider = client.post(
        f"/api/print-jobs/{job_id}/collected", headers=auth_headers(OTHER_STUDENT)
    )
    assert outsider.status_code == 403
    assert outsider.json()["detail"]["failure_reason"] == "forbidden"

    early = client.post(f"/api/print-jobs/{job_id}/collected", headers=auth_headers(STUDENT))
    assert early.status_code == 409
    assert early.json()["detail"]["failure_reason"] == "invalid_transition"

    denied = client.post(f"/api/print-jobs/{job_id}/ready", headers=auth_headers(STUDENT))
    assert denied.status_code == 403

    ready = client.post(f"/api/print-jobs/{job_id}/ready", headers=auth_headers(STAFF))
    assert ready.status_code == 200
    assert ready.json()["status"] == "Ready"

    stranger = client.post(
        f"/api/print-jobs/{job_id}/collected", headers=auth_headers(OTHER_STUDENT)
    )
    assert stranger.status_code == 403

    collected = client.post(f"/api/print-jobs/{job_id}/collected", headers=auth_headers(STUDENT))
    assert collected.status_code == 200
    assert collected.json()["status"] == "Collected"


def test_queue_and_status_listing_are_staff_only(session_factory, storage_root) -> None:
    client = build_client(session_factory, storage_root)
    job_id = submit(client).json()["job_id"]

    assert client.get("/api/print-jobs/queue", headers=auth_headers(STUDENT)).status_code == 403

    queue = client.get("/api/print-jobs/queue", headers=auth_headers(STAFF))
    assert queue.status_code == 200
    assert [item["job_id"] for item in queue.json()] == [job_id]

    ready = client.get("/api/print-jobs", params={"status": "Ready"}, headers=auth_headers(STAFF))
    assert ready.status_code == 200
    assert ready.json() == []

    bad = client.get("/api/print-jobs", params={"status": "Lost"}, headers=auth_headers(STAFF))
    assert bad.status_code == 422


def test_mine_lists_only_own_jobs(session_factory, storage_root) -> None:
    client = build_client(session_factory, storage_root)
    mine = submit(client, STUDENT).json()["job_id"]
    submit(client, OTHER_STUDENT)

    response = client.get("/api/print-jobs/mine", headers=auth_headers(STUDENT))

    assert response.status_code == 200
    assert [item["job_id"] for item in response.json()] == [mine]


def test_fetch_job_checks_ownership(session_factory, storage_root) -> None:
    client = build_client(session_factory, storage_root)
    job_id = submit(client).json()["job_id"]

    assert client.get(f"/api/print-jobs/{job_id}", headers=auth_headers(STUDENT)).status_code == 200
    assert client.get(f"/api/print-jobs/{job_id}", headers=auth_headers(OTHER_STUDENT)).status_code == 403

    missing = client.get("/api/print-jobs/missing", headers=auth_headers(STAFF))
    assert missing.status_code == 404
    assert missing.json()["detail"]["failure_reason"] == "job_not_found"


def test_delete_job(session_factory, storage_root) -> None:
    client = build_client(session_factory, storage_root)
    job_id = submit(client).json()["job_id"]

    assert client.delete(f"/api/print-jobs/{job_id}", headers=auth_headers(STUDENT)).status_code == 403

    response = client.delete(f"/api/print-jobs/{job_id}", headers=auth_headers(STAFF))

    assert response.status_code == 200
    assert response.json() == {"job_id": job_id, "files_removed": 1, "files_failed": []}
    assert client.get(f"/api/print-jobs/{job_id}", headers=auth_headers(STAFF)).status_code == 404


def test_sweep_endpoint(session_factory, storage_root) -> None:
    client = build_client(session_factory, storage_root)

    assert client.post("/api/print-jobs/sweep", headers=auth_headers(STUDENT)).status_code == 403

    response = client.post("/api/print-jobs/sweep", headers=auth_headers(STAFF))

    assert response.status_code == 200
    assert response.json() == {"removed": 0}
