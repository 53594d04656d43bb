"""Cube facade: the engine surface consumed by servers, CLIs and renderers."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Callable

from .config import CubeConfig
from .geometry import FACE_INDEX, FACE_ORDER
from .history import MoveHistory
from .moves import FaceTurn, Move, SliceTurn, WholeRotation, format_sequence, inverse_sequence, parse_sequence, validate_move
from .rotation import apply_move
from .scramble import Scrambler
from .solved_check import is_solved, unsolved_faces
from .state import CubeState
from .state_codec import StateValidationError, decode_state, encode_state, payload_theme


class BusyError(RuntimeError):
    """Raised when a mutating call arrives while another one is in progress."""


class CubeFacade:
    """Thread-safe NxNxN cube with history, scramble and solve-by-replay.

    Mutating calls are serialised by a busy flag: a call that arrives while
    another is running raises ``BusyError`` and changes nothing. ``on_move``
    is called with each applied move and ``on_solve_complete`` once after any
    operation that applies moves and leaves the cube solved. Both fire after
    the busy flag is cleared.
    """

    def __init__(
        self,
        config: CubeConfig | None = None,
        *,
        on_move: Callable[[Move], Any] | None = None,
        on_solve_complete: Callable[[], Any] | None = None,
    ):
        self.config = config if config is not None else CubeConfig()
        self.size = self.config.size
        self.on_move = on_move
        self.on_solve_complete = on_solve_complete

        self._lock = threading.Lock()
        self._busy = False
        self._state = CubeState.solved(self.size)
        self._history = MoveHistory(limit=self.config.history_limit)
        self._scrambler = Scrambler(self.size, seed=self.config.seed)

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._busy

    @contextmanager
    def transition(self):
        """Hold the busy flag, e.g. while a renderer animates a move."""
        with self._lock:
            if self._busy:
                raise BusyError("Another cube operation is in progress")
            self._busy = True
        try:
            yield
        finally:
            with self._lock:
                self._busy = False

    def _step(self, move: Move, record: bool = True) -> None:
        with self._lock:
            apply_move(self._state, move)
            if record:
                self._history.append(move)

    def _solved_now(self) -> bool:
        with self._lock:
            return is_solved(self._state.grids)

    def _notify(self, moves: list[Move], solved: bool) -> None:
        if self.on_move is not None:
            for move in moves:
                self.on_move(move)
        if moves and solved and self.on_solve_complete is not None:
            self.on_solve_complete()

    def _run(self, moves: list[Move], record: bool = True) -> list[Move]:
        for move in moves:
            validate_move(move, self.size)
        with self.transition():
            for move in moves:
                self._step(move, record=record)
            solved = self._solved_now()
        self._notify(moves, solved)
        return moves

    def apply(self, move: Move) -> None:
        self._run([move])

    def apply_sequence(self, notation: str) -> list[Move]:
        """Parse and apply a space-separated move sequence; nothing applies if any token is bad."""
        return self._run(parse_sequence(notation))

    def rotate_face(self, face: str, clockwise: bool = True) -> None:
        self.apply(FaceTurn(face, clockwise))

    def rotate_slice(self, axis: str, layer: int, clockwise: bool = True) -> None:
        self.apply(SliceTurn(axis, layer, clockwise))

    def rotate_whole_cube(self, axis: str, clockwise: bool = True) -> None:
        self.apply(WholeRotation(axis, clockwise))

    def scramble(self, count: int | None = None, seed: int | None = None) -> list[Move]:
        count = self.config.scramble_moves if count is None else count
        with self.transition():
            moves = self._scrambler.draw(count, seed=seed)
            for move in moves:
                self._step(move)
            solved = self._solved_now()
        self._notify(moves, solved)
        return moves

    def solve(self) -> list[Move]:
        """Replay the applied history backwards with flipped directions, then clear it."""
        with self.transition():
            with self._lock:
                moves = inverse_sequence(self._history.applied())
            for move in moves:
                self._step(move, record=False)
            with self._lock:
                self._history.clear()
            solved = self._solved_now()
        self._notify(moves, solved)
        return moves

    def undo(self) -> bool:
        with self.transition():
            with self._lock:
                move = self._history.undo()
            if move is None:
                return False
            move = move.inverse()
            self._step(move, record=False)
            solved = self._solved_now()
        self._notify([move], solved)
        return True

    def redo(self) -> bool:
        with self.transition():
            with self._lock:
                move = self._history.redo()
            if move is None:
                return False
            self._step(move, record=False)
            solved = self._solved_now()
        self._notify([move], solved)
        return True

    def reset(self) -> None:
        with self.transition():
            with self._lock:
                self._state = CubeState.solved(self.size)
                self._history.clear()

    def set_color_theme(self, name: str) -> None:
        self.config = replace(self.config, color_theme=name)

    def load_state(self, payload: dict) -> None:
        """Replace the cube with a persisted state; a bad payload leaves the cube untouched."""
        state = decode_state(payload)
        if state.size != self.size:
            raise StateValidationError(f"State is for a {state.size}x{state.size} cube, engine size is {self.size}")
        theme = payload_theme(payload)
        with self.transition():
            with self._lock:
                self._state = state
                self._history.clear()
        if theme is not None:
            self.set_color_theme(theme)

    def save_state(self) -> dict:
        with self._lock:
            return encode_state(self._state, color_theme=self.config.color_theme)

    def get_state(self) -> CubeState:
        with self._lock:
            return self._state.copy()

    def is_solved(self) -> bool:
        return self._solved_now()

    @property
    def history(self) -> tuple[Move, ...]:
        with self._lock:
            return self._history.applied()

    @property
    def move_count(self) -> int:
        with self._lock:
            return self._history.pointer + 1

    @property
    def can_undo(self) -> bool:
        with self._lock:
            return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        with self._lock:
            return self._history.can_redo

    @property
    def orientation(self) -> dict[str, str]:
        with self._lock:
            return dict(self._state.orientation)

    def face_colors(self, label: str) -> list[list[str]]:
        colors = self.config.colors
        with self._lock:
            grid = self._state.grids[FACE_INDEX[label]]
            return [[colors[FACE_ORDER[token]] for token in row] for row in grid.tolist()]

    def label_color(self, label: str) -> str:
        """Colour of the face identity currently shown under ``label``."""
        with self._lock:
            return self.config.colors[self._state.orientation[label]]

    def state_payload(self) -> dict[str, Any]:
        with self._lock:
            return {
                "state": encode_state(self._state),
                "move_count": self._history.pointer + 1,
                "history": format_sequence(self._history.applied()),
                "solved": is_solved(self._state.grids),
                "unsolved_faces": unsolved_faces(self._state.grids, FACE_ORDER),
            }
