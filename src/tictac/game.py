"""
Console turn driver: a small state machine around the board and engine.

    Startup -> AiTurn | PlayerTurn -> ... -> OutcomeCheck -> Startup | end

Prompting and validation live here; the core only ever sees in-range
positions.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from .board import Board, Mark
from .search import SearchEngine

logger = logging.getLogger(__name__)


class InvalidInput(ValueError):
    """User typed something the current prompt cannot accept."""


@dataclass
class GameConfig:
    """Driver configuration."""

    # Largest accepted side length
    max_size: int = 50

    # Pause before the machine moves (seconds)
    ai_delay: float = 0.0


class ConsoleIO:
    """Reads answers from stdin and writes messages to stdout."""

    def say(self, text: str):
        print(text)

    def ask(self, prompt: str) -> str:
        print(prompt)
        return input()


@dataclass
class Round:
    board: Board
    engine: SearchEngine

    @property
    def player_side(self) -> Mark:
        return self.engine.get_machine_side().other


class GameState:
    """Base state. next_state() returns the following state or None to stop."""

    def __init__(self, io, config: GameConfig, round_: Optional[Round] = None):
        self.io = io
        self.config = config
        self.round = round_

    def _to(self, cls) -> "GameState":
        return cls(self.io, self.config, self.round)

    def next_state(self) -> Optional["GameState"]:
        raise NotImplementedError


class Startup(GameState):
    def next_state(self):
        try:
            self.round = create_new_round(self.io, self.config)
        except InvalidInput as e:
            self.io.say(f"{e}!")
            return Startup(self.io, self.config)

        self.io.say(str(self.round.board))
        if self.round.engine.get_machine_side() is Mark.CROSS:
            return self._to(AiTurn)
        return self._to(PlayerTurn)


class PlayerTurn(GameState):
    def next_state(self):
        self.io.say("Make your move!")
        try:
            make_player_move(self.io, self.round.board, self.round.player_side)
        except InvalidInput as e:
            self.io.say(f"{e}!")
            return self._to(PlayerTurn)

        self.io.say(str(self.round.board))
        return self._to(AiTurn)


class AiTurn(GameState):
    def next_state(self):
        if self.config.ai_delay > 0:
            time.sleep(self.config.ai_delay)
        if self.round.engine.select_and_apply_move(self.round.board):
            self.io.say(str(self.round.board))
        return self._to(OutcomeCheck)


class OutcomeCheck(GameState):
    def next_state(self):
        if not check_finished(self.io, self.round.board, self.round.engine.get_machine_side()):
            return self._to(PlayerTurn)
        if should_continue(self.io):
            return Startup(self.io, self.config)
        return None


def parse_size(text: str, max_size: int) -> int:
    """Leading digits of the answer, accepted in 2..max_size."""
    digits = ""
    for ch in text.strip():
        if ch not in "0123456789":
            break
        digits += ch
    if digits and 2 <= int(digits) <= max_size:
        return int(digits)
    raise InvalidInput("Invalid grid size")


def parse_index(text: str, size: int, name: str) -> int:
    try:
        index = int(text.strip())
    except ValueError:
        raise InvalidInput(f"Invalid {name} index") from None
    if not 0 <= index < size:
        raise InvalidInput(f"Invalid {name} index {index}")
    return index


def create_new_round(io, config: GameConfig) -> Round:
    io.say("\nWelcome to Tic-Tac-Toe")

    size = parse_size(io.ask("Enter grid side length (e.g 3 for 3x3 grid):"), config.max_size)
    io.say(f"Grid size is {size}")

    try:
        player_side = Mark.parse(io.ask("Choose side [X/O]:"))
    except ValueError:
        raise InvalidInput("Invalid side") from None
    machine_side = player_side.other
    io.say(f"AI side is {machine_side}")

    logger.info("New %dx%d round, machine plays %s", size, size, machine_side)
    return Round(Board(size), SearchEngine(machine_side))


def make_player_move(io, board: Board, player_side: Mark):
    row = parse_index(io.ask("Enter row index for your next move:"), board.size, "row")
    col = parse_index(io.ask("Enter column index for your next move:"), board.size, "column")

    existing = board.set(board.index(row, col), player_side)
    if existing is not None:
        raise InvalidInput(f"Square already contains {existing}")


def check_finished(io, board: Board, machine_side: Mark) -> bool:
    """Announce the result if the round is over."""
    winner = board.winner()
    if winner is not None:
        if winner is machine_side:
            io.say("Condolences, you lost")
        else:
            io.say("Congratulations, you won!")
        return True
    if board.is_full():
        io.say("It's a draw!")
        return True
    return False


def should_continue(io) -> bool:
    while True:
        answer = io.ask("One more game? [Y/N]:").strip()
        if answer in ("Y", "y"):
            return True
        if answer in ("N", "n"):
            return False
        io.say("Inappropriate answer!")


def run(io=None, config: Optional[GameConfig] = None):
    """Play rounds until the user declines another one or input ends."""
    io = io if io is not None else ConsoleIO()
    config = config if config is not None else GameConfig()

    state: Optional[GameState] = Startup(io, config)
    try:
        while state is not None:
            state = state.next_state()
    except (EOFError, KeyboardInterrupt):
        io.say("\nGame aborted")
