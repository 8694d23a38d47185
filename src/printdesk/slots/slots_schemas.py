"""Pydantic schemas for the slot occupancy board."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from .slots_models import SlotBoard, SlotState


class SlotOccupancyPayload(BaseModel):
    slot_id: str
    state: SlotState
    job_id: str | None = None
    submitter_email: str | None = None
    submitted_at: datetime | None = None


class SlotBoardResponse(BaseModel):
    total: int
    active: int
    empty: int
    slots: list[SlotOccupancyPayload]

    @classmethod
    def from_board(cls, board: SlotBoard) -> "SlotBoardResponse":
        return cls(
            total=len(board.slots),
            active=board.active_count,
            empty=board.empty_count,
            slots=[
                SlotOccupancyPayload(
                    slot_id=entry.slot_id,
                    state=entry.state,
                    job_id=entry.job_id,
                    submitter_email=entry.submitter_email,
                    submitted_at=entry.submitted_at,
                )
                for entry in board.slots
            ],
        )
