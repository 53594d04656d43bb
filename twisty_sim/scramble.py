"""Random scramble generation."""

from __future__ import annotations

import numpy as np

from .geometry import AXES, FACE_ORDER, check_size
from .moves import FaceTurn, Move, SliceTurn


class Scrambler:
    """Draws random legal moves for a cube of ``size``.

    Each move is a face turn or a slice turn with equal probability; a 2x2
    has no inner layers and only gets face turns. Immediately cancelling
    pairs are not filtered out.
    """

    def __init__(self, size: int, seed: int | None = None):
        self.size = check_size(size)
        self._rng = np.random.default_rng(seed)

    @property
    def has_slices(self) -> bool:
        return self.size >= 3

    def _face_turn(self, rng: np.random.Generator) -> FaceTurn:
        face = FACE_ORDER[int(rng.integers(len(FACE_ORDER)))]
        return FaceTurn(face, bool(rng.integers(2)))

    def _slice_turn(self, rng: np.random.Generator) -> SliceTurn:
        axis = AXES[int(rng.integers(len(AXES)))]
        layer = int(rng.integers(1, self.size - 1))
        return SliceTurn(axis, layer, bool(rng.integers(2)))

    def draw(self, count: int, seed: int | None = None) -> list[Move]:
        if not isinstance(count, int) or isinstance(count, bool) or count < 0:
            raise ValueError("Scramble count must be a non-negative integer")

        rng = np.random.default_rng(seed) if seed is not None else self._rng
        moves: list[Move] = []
        for _ in range(count):
            if self.has_slices and rng.random() < 0.5:
                moves.append(self._slice_turn(rng))
            else:
                moves.append(self._face_turn(rng))
        return moves
