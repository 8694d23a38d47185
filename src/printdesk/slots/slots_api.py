"""Staff route exposing pickup slot occupancy."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ..auth.auth_dependencies import get_current_actor
from ..auth.auth_models import Actor
from ..exceptions import PrintDeskError
from ..jobs.jobs_api import raise_http_error
from .slot_board import SlotBoardService
from .slots_schemas import SlotBoardResponse

router = APIRouter(prefix="/api/slots", tags=["slots"])


def get_slot_board_service(request: Request) -> SlotBoardService:
    try:
        return request.app.state.slot_board_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover
        raise RuntimeError("SlotBoardService is not configured") from exc


@router.get("")
def fetch_slot_board(
    actor: Actor = Depends(get_current_actor),
    service: SlotBoardService = Depends(get_slot_board_service),
) -> SlotBoardResponse:
    try:
        board = service.build_board(actor)
    except PrintDeskError as exc:
        raise_http_error(exc)
    return SlotBoardResponse.from_board(board)
