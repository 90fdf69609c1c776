"""Pydantic models for the HTTP JSON protocol."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from power4.game import GameStatus


# ---------------------------------------------------------------------------
# Client → Server
# ---------------------------------------------------------------------------

class MoveRequest(BaseModel):
    column: int = Field(ge=0)


class StartGameRequest(BaseModel):
    player1: str | None = Field(default=None, max_length=32)
    player2: str | None = Field(default=None, max_length=32)
    rows: int | None = None
    columns: int | None = None


# ---------------------------------------------------------------------------
# Server → Client
# ---------------------------------------------------------------------------

class GameSnapshot(BaseModel):
    variant: Literal["classic", "bonus"]
    board: list[list[int]]  # 0 = empty, 1 = player 1, 2 = player 2
    rows: int
    columns: int
    current_player: int
    current_player_name: str
    player1_name: str
    player2_name: str
    player1_score: int
    player2_score: int
    status: GameStatus
    game_over: bool
    winner: int | None
    winner_name: str | None
    show_result: bool = False
    message: str = ""
    turn_count: int
    inverse_gravity: bool


class MoveResult(BaseModel):
    accepted: bool
    reason: str | None = None
    row: int | None = None
    column: int
    snapshot: GameSnapshot


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"


class ErrorResponse(BaseModel):
    type: Literal["error"] = "error"
    message: str
