"""Move descriptors, validation and notation."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Union

from .geometry import AXES, FACE_ORDER, check_size


class InvalidMoveError(ValueError):
    """Raised when a move descriptor cannot be applied to a cube of the given size."""


@dataclass(frozen=True)
class FaceTurn:
    face: str
    clockwise: bool = True

    def inverse(self) -> "FaceTurn":
        return replace(self, clockwise=not self.clockwise)

    @property
    def notation(self) -> str:
        return f"{self.face}{'' if self.clockwise else _PRIME}"


@dataclass(frozen=True)
class SliceTurn:
    axis: str
    layer: int
    clockwise: bool = True

    def inverse(self) -> "SliceTurn":
        return replace(self, clockwise=not self.clockwise)

    @property
    def notation(self) -> str:
        return f"{self.axis.upper()}{self.layer}{'' if self.clockwise else _PRIME}"


@dataclass(frozen=True)
class WholeRotation:
    axis: str
    clockwise: bool = True

    def inverse(self) -> "WholeRotation":
        return replace(self, clockwise=not self.clockwise)

    @property
    def notation(self) -> str:
        return f"{self.axis}{'' if self.clockwise else _PRIME}"


Move = Union[FaceTurn, SliceTurn, WholeRotation]

_PRIME = "'"
_TOKEN_RE = re.compile(r"^(?:(?P<face>[URFDLB])|(?P<slice>[XYZ])(?P<layer>\d+)|(?P<whole>[xyz]))(?P<prime>')?$")


def _check_clockwise(move: Move) -> None:
    if not isinstance(move.clockwise, bool):
        raise InvalidMoveError(f"clockwise must be a bool, got {move.clockwise!r}")


def _check_axis(axis) -> None:
    if axis not in AXES:
        raise InvalidMoveError(f"Unknown axis {axis!r}; expected one of {', '.join(AXES)}")


def validate_move(move: Move, size: int) -> Move:
    """Check a move against a cube size without touching any state."""
    check_size(size)
    if isinstance(move, FaceTurn):
        if move.face not in FACE_ORDER:
            raise InvalidMoveError(f"Unknown face {move.face!r}; expected one of {', '.join(FACE_ORDER)}")
        _check_clockwise(move)
        return move

    if isinstance(move, SliceTurn):
        _check_axis(move.axis)
        _check_clockwise(move)
        if not isinstance(move.layer, int) or isinstance(move.layer, bool):
            raise InvalidMoveError(f"Slice layer must be an integer, got {move.layer!r}")
        if size < 3:
            raise InvalidMoveError(f"A {size}x{size} cube has no inner slices")
        if not 1 <= move.layer <= size - 2:
            raise InvalidMoveError(
                f"Slice layer must be in range 1..{size - 2} for a {size}x{size} cube, got {move.layer}"
            )
        return move

    if isinstance(move, WholeRotation):
        _check_axis(move.axis)
        _check_clockwise(move)
        return move

    raise InvalidMoveError(f"Not a move descriptor: {move!r}")


def parse_move(token: str) -> Move:
    """Parse one move token: ``R``, ``U'``, ``X1`` (slice), ``y'`` (whole cube)."""
    m = _TOKEN_RE.match(token.strip())
    if m is None:
        raise InvalidMoveError(f"Cannot parse move {token!r}")
    clockwise = m.group("prime") is None
    if m.group("face"):
        return FaceTurn(m.group("face"), clockwise)
    if m.group("slice"):
        return SliceTurn(m.group("slice").lower(), int(m.group("layer")), clockwise)
    return WholeRotation(m.group("whole"), clockwise)


def parse_sequence(text: str) -> list[Move]:
    return [parse_move(token) for token in text.split()]


def format_sequence(moves) -> str:
    return " ".join(move.notation for move in moves)


def inverse_sequence(moves) -> list[Move]:
    return [move.inverse() for move in reversed(list(moves))]
