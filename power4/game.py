"""Game logic: board state, move validation, gravity, and win/draw detection."""

from __future__ import annotations

from enum import Enum

DEFAULT_ROWS = 6
DEFAULT_COLUMNS = 7
MIN_SIZE = 4
MAX_SIZE = 15
CONNECT = 4

# Moves between gravity flips in the bonus variant
GRAVITY_FLIP_INTERVAL = 5

# Four directions: horizontal, vertical, diagonal ↘, diagonal ↙
DIRECTIONS = [
    (0, 1),
    (1, 0),
    (1, 1),
    (1, -1),
]

GAME_OVER_REASON = "Game is already over!"
OUT_OF_RANGE_REASON = "Column is out of range."
COLUMN_FULL_REASON = "Column is full! Try another column."


class Player(str, Enum):
    BLUE = "blue"
    RED = "red"

    @property
    def number(self) -> int:
        """1-based player number used on the wire."""
        return 1 if self is Player.BLUE else 2

    @property
    def opponent(self) -> Player:
        return Player.RED if self is Player.BLUE else Player.BLUE


class GameStatus(str, Enum):
    ONGOING = "ongoing"
    BLUE_WINS = "blue_wins"
    RED_WINS = "red_wins"
    DRAW = "draw"


WIN_STATUS = {
    Player.BLUE: GameStatus.BLUE_WINS,
    Player.RED: GameStatus.RED_WINS,
}


class Game:
    """A single Connect-4 game.

    Row 0 is the top of the board whichever way pieces fall. With normal
    gravity pieces settle on the lowest empty cell of a column; with inverse
    gravity they stick to the highest one. ``gravity_flip_interval`` turns on
    the bonus rule: gravity toggles every time that many moves have been
    played and the game is still going.
    """

    def __init__(
        self,
        rows: int = DEFAULT_ROWS,
        columns: int = DEFAULT_COLUMNS,
        gravity_flip_interval: int | None = None,
    ):
        if not (MIN_SIZE <= rows <= MAX_SIZE and MIN_SIZE <= columns <= MAX_SIZE):
            raise ValueError(
                f"Board must be between {MIN_SIZE} and {MAX_SIZE} in each axis, "
                f"got {rows}x{columns}"
            )
        self.rows = rows
        self.columns = columns
        self.gravity_flip_interval = gravity_flip_interval
        self.reset_game()

    def reset_game(self) -> None:
        self.board: list[list[Player | None]] = [
            [None] * self.columns for _ in range(self.rows)
        ]
        self.current_turn: Player = Player.BLUE
        self.status: GameStatus = GameStatus.ONGOING
        self.turn_count: int = 0
        self.inverse_gravity: bool = False

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_state(self) -> GameStatus:
        return self.status

    def get_current_player(self) -> Player:
        return self.current_turn

    def is_game_over(self) -> bool:
        return self.status is not GameStatus.ONGOING

    @property
    def winner(self) -> Player | None:
        for player, status in WIN_STATUS.items():
            if self.status is status:
                return player
        return None

    @property
    def entry_row(self) -> int:
        """Row pieces enter from: the top, or the bottom under inverse gravity."""
        return self.rows - 1 if self.inverse_gravity else 0

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------

    def validate_move(self, column: int) -> str | None:
        """Return an error message if the move is invalid, or None if valid."""
        if self.is_game_over():
            return GAME_OVER_REASON
        if column < 0 or column >= self.columns:
            return OUT_OF_RANGE_REASON
        if self.landing_row(column) is None:
            return COLUMN_FULL_REASON
        return None

    def is_valid_move(self, column: int) -> bool:
        return self.validate_move(column) is None

    def landing_row(self, column: int) -> int | None:
        """Row the next piece dropped into ``column`` would occupy."""
        if self.inverse_gravity:
            scan = range(self.rows)
        else:
            scan = range(self.rows - 1, -1, -1)
        for row in scan:
            if self.board[row][column] is None:
                return row
        return None

    def make_move(self, column: int) -> int | None:
        """Drop the current player's piece into ``column``.

        Invalid moves are ignored; callers report the reason through
        :meth:`validate_move`. Returns the landing row, or None when nothing
        was placed.
        """
        if not self.is_valid_move(column):
            return None

        row = self.landing_row(column)
        color = self.current_turn
        self.board[row][column] = color
        self.turn_count += 1

        if self.check_win(row, column):
            self.status = WIN_STATUS[color]
        elif self.is_board_full():
            self.status = GameStatus.DRAW
        else:
            self.current_turn = color.opponent
            if self.gravity_flip_interval and self.turn_count % self.gravity_flip_interval == 0:
                self.inverse_gravity = not self.inverse_gravity

        return row

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    def count_line(self, row: int, column: int, dr: int, dc: int) -> int:
        """Count same-colour cells through (row, column) along one axis."""
        color = self.board[row][column]
        if color is None:
            return 0

        count = 1
        for sign in (1, -1):
            r, c = row + dr * sign, column + dc * sign
            while 0 <= r < self.rows and 0 <= c < self.columns:
                if self.board[r][c] != color:
                    break
                count += 1
                r += dr * sign
                c += dc * sign
        return count

    def check_win(self, row: int, column: int) -> bool:
        """Check if the piece at (row, column) completes four-in-a-row."""
        return any(
            self.count_line(row, column, dr, dc) >= CONNECT for dr, dc in DIRECTIONS
        )

    def is_board_full(self) -> bool:
        return self.turn_count >= self.rows * self.columns
