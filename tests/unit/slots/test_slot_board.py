from fastapi import FastAPI
from fastapi.testclient import TestClient

import pytest

from printdesk.auth.auth_service import AuthService
from printdesk.jobs.jobs_errors import Forbidden
from printdesk.jobs.jobs_models import PrintPreferences
from printdesk.slots.slot_board import SlotBoardService
from printdesk.slots.slots_api import router
from printdesk.slots.slots_models import SlotPool, SlotState

from tests.helpers.print_jobs import STAFF, STUDENT, build_service, pdf


def test_board_maps_active_jobs_to_slots(job_repo, session_factory, storage_root) -> None:
    service = build_service(session_factory, storage_root, jobs=job_repo, max_slots=5)
    waiting = service.submit(STUDENT, [pdf("a.pdf")], PrintPreferences())
    ready = service.submit(STUDENT, [pdf("b.pdf")], PrintPreferences())
    done = service.submit(STUDENT, [pdf("c.pdf")], PrintPreferences())
    service.mark_ready(ready.id, STAFF)
    service.mark_ready(done.id, STAFF)
    service.mark_collected(done.id, STUDENT)

    board = SlotBoardService(jobs=job_repo, pool=SlotPool(max_slots=5)).build_board(STAFF)

    states = {entry.slot_id: entry.state for entry in board.slots}
    assert states == {
        "A-01": SlotState.IN_PROGRESS,
        "A-02": SlotState.READY,
        "A-03": SlotState.EMPTY,
        "A-04": SlotState.EMPTY,
        "A-05": SlotState.EMPTY,
    }
    assert board.slots[0].job_id == waiting.id
    assert board.slots[0].submitter_email == STUDENT.email
    assert board.active_count == 2
    assert board.empty_count == 3


def test_board_is_staff_only(job_repo) -> None:
    with pytest.raises(Forbidden):
        SlotBoardService(jobs=job_repo).build_board(STUDENT)


def test_slots_endpoint(job_repo, session_factory, storage_root) -> None:
    service = build_service(session_factory, storage_root, jobs=job_repo)
    service.submit(STUDENT, [pdf()], PrintPreferences())
    auth = AuthService(signing_key="k")
    app = FastAPI()
    app.state.slot_board_service = SlotBoardService(jobs=job_repo)
    app.state.auth_service = auth
    app.include_router(router)
    client = TestClient(app)
    staff_token = auth.issue_token(user_id=STAFF.id, email=STAFF.email, role=STAFF.role)
    student_token = auth.issue_token(user_id=STUDENT.id, email=STUDENT.email, role=STUDENT.role)

    response = client.get("/api/slots", headers={"Authorization": f"Bearer {staff_token}"})
    denied = client.get("/api/slots", headers={"Authorization": f"Bearer {student_token}"})

    assert response.status_code == 200
    body = response.json()
    assert (body["total"], body["active"], body["empty"]) == (50, 1, 49)
    assert body["slots"][0]["state"] == "InProgress"
    assert denied.status_code == 403
