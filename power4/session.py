"""Session management: per-browser matches, scoring, and cleanup."""

from __future__ import annotations

import asyncio
import logging
import secrets
import time
from dataclasses import dataclass, field

from power4 import config
from power4.game import (
    DEFAULT_COLUMNS,
    DEFAULT_ROWS,
    GRAVITY_FLIP_INTERVAL,
    MAX_SIZE,
    MIN_SIZE,
    Game,
    GameStatus,
    Player,
)
from power4.models import GameSnapshot, MoveResult, StartGameRequest

logger = logging.getLogger(__name__)

CLASSIC = "classic"
BONUS = "bonus"

DEFAULT_NAMES = ("Player 1", "Player 2")
DRAW_MESSAGE = "It's a draw!"
INVERSE_GRAVITY_MESSAGE = "Inverse gravity active! Pieces fall from bottom to top!"


class Power4Error(Exception):
    """Base class for errors reported to the client with an HTTP status."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidColumnError(Power4Error):
    status_code = 400


class NoActiveGameError(Power4Error):
    status_code = 404


def clamp_dimension(value: int | None, default: int) -> int:
    if value is None:
        return default
    return max(MIN_SIZE, min(MAX_SIZE, value))


def display_name(name: str | None, default: str) -> str:
    name = (name or "").strip()
    return name or default


@dataclass
class Match:
    """A game plus everything that outlives it: names and cumulative scores."""

    variant: str
    game: Game
    player1_name: str = DEFAULT_NAMES[0]
    player2_name: str = DEFAULT_NAMES[1]
    player1_score: int = 0
    player2_score: int = 0

    @classmethod
    def classic(cls) -> Match:
        return cls(variant=CLASSIC, game=Game())

    @classmethod
    def bonus(cls, settings: StartGameRequest) -> Match:
        game = Game(
            rows=clamp_dimension(settings.rows, DEFAULT_ROWS),
            columns=clamp_dimension(settings.columns, DEFAULT_COLUMNS),
            gravity_flip_interval=GRAVITY_FLIP_INTERVAL,
        )
        return cls(
            variant=BONUS,
            game=game,
            player1_name=display_name(settings.player1, DEFAULT_NAMES[0]),
            player2_name=display_name(settings.player2, DEFAULT_NAMES[1]),
        )

    def player_name(self, player: Player) -> str:
        return self.player1_name if player is Player.BLUE else self.player2_name

    def record_result(self) -> None:
        """Credit the winner of a game that just ended."""
        winner = self.game.winner
        if winner is Player.BLUE:
            self.player1_score += 1
        elif winner is Player.RED:
            self.player2_score += 1

    def reset_scores(self) -> None:
        self.player1_score = 0
        self.player2_score = 0

    def status_message(self) -> str:
        game = self.game
        winner = game.winner
        if winner is not None:
            return f"{self.player_name(winner)} wins!"
        if game.status is GameStatus.DRAW:
            return DRAW_MESSAGE
        if game.inverse_gravity:
            return INVERSE_GRAVITY_MESSAGE
        return ""

    def snapshot(self, message: str | None = None, show_result: bool = False) -> GameSnapshot:
        game = self.game
        winner = game.winner
        current = game.get_current_player()
        return GameSnapshot(
            variant=self.variant,
            board=[[cell.number if cell else 0 for cell in row] for row in game.board],
            rows=game.rows,
            columns=game.columns,
            current_player=current.number,
            current_player_name=self.player_name(current),
            player1_name=self.player1_name,
            player2_name=self.player2_name,
            player1_score=self.player1_score,
            player2_score=self.player2_score,
            status=game.get_state(),
            game_over=game.is_game_over(),
            winner=winner.number if winner else None,
            winner_name=self.player_name(winner) if winner else None,
            show_result=show_result,
            message=self.status_message() if message is None else message,
            turn_count=game.turn_count,
            inverse_gravity=game.inverse_gravity,
        )


@dataclass
class Session:
    session_id: str
    classic: Match = field(default_factory=Match.classic)
    bonus: Match | None = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)
    last_seen: float = field(default_factory=time.monotonic)

    def touch(self) -> None:
        self.last_seen = time.monotonic()

    def match(self, variant: str) -> Match:
        if variant == CLASSIC:
            return self.classic
        if self.bonus is None:
            raise NoActiveGameError("No bonus game in progress, start one first")
        return self.bonus


class SessionManager:
    def __init__(self, ttl: float = config.SESSION_TTL):
        self.sessions: dict[str, Session] = {}
        self.ttl = ttl

    def _generate_session_id(self) -> str:
        while True:
            session_id = secrets.token_urlsafe(16)
            if session_id not in self.sessions:
                return session_id

    def get_or_create(self, session_id: str | None) -> Session:
        session = self.sessions.get(session_id) if session_id else None
        if session is None:
            self.purge_expired()
            session = Session(session_id=self._generate_session_id())
            self.sessions[session.session_id] = session
            logger.info("Session %s created (%d active)", session.session_id[:8], len(self.sessions))
        session.touch()
        return session

    def end_session(self, session_id: str | None) -> bool:
        session = self.sessions.pop(session_id, None) if session_id else None
        if session is None:
            return False
        logger.info("Session %s ended", session_id[:8])
        return True

    def purge_expired(self) -> int:
        cutoff = time.monotonic() - self.ttl
        expired = [sid for sid, s in self.sessions.items() if s.last_seen < cutoff]
        for sid in expired:
            del self.sessions[sid]
        if expired:
            logger.info("Purged %d idle session(s)", len(expired))
        return len(expired)

    async def snapshot(self, session: Session, variant: str) -> GameSnapshot:
        async with session.lock:
            return session.match(variant).snapshot()

    async def start_bonus_game(self, session: Session, settings: StartGameRequest) -> GameSnapshot:
        async with session.lock:
            match = Match.bonus(settings)
            session.bonus = match
            logger.info(
                "Session %s started a %dx%d bonus game: %s vs %s",
                session.session_id[:8],
                match.game.rows,
                match.game.columns,
                match.player1_name,
                match.player2_name,
            )
            return match.snapshot()

    async def play_move(self, session: Session, variant: str, column: int) -> MoveResult:
        async with session.lock:
            match = session.match(variant)
            game = match.game
            if column < 0 or column >= game.columns:
                raise InvalidColumnError(f"Invalid column number: {column}")

            reason = game.validate_move(column)
            if reason:
                return MoveResult(
                    accepted=False,
                    reason=reason,
                    column=column,
                    snapshot=match.snapshot(message=reason),
                )

            row = game.make_move(column)
            game_ended = game.is_game_over()
            if game_ended:
                match.record_result()
                logger.info(
                    "Session %s %s game finished: %s after %d moves",
                    session.session_id[:8],
                    variant,
                    game.get_state().value,
                    game.turn_count,
                )
            return MoveResult(
                accepted=True,
                row=row,
                column=column,
                snapshot=match.snapshot(show_result=game_ended),
            )

    async def new_game(self, session: Session, variant: str) -> GameSnapshot:
        async with session.lock:
            match = session.match(variant)
            match.game.reset_game()
            return match.snapshot()

    async def reset_scores(self, session: Session, variant: str) -> GameSnapshot:
        async with session.lock:
            match = session.match(variant)
            match.reset_scores()
            return match.snapshot()


session_manager = SessionManager()
