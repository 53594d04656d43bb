"""Cube state: six face grids plus the label orientation map."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .geometry import FACE_INDEX, FACE_ORDER, check_size, solved_grids


def identity_orientation() -> dict[str, str]:
    return {label: label for label in FACE_ORDER}


@dataclass(eq=False)
class CubeState:
    """Face grids of shape (6, size, size) in ``FACE_ORDER`` and the orientation map.

    ``orientation[label]`` is the physical face currently shown under ``label``.
    """

    size: int
    grids: np.ndarray
    orientation: dict[str, str] = field(default_factory=identity_orientation)

    @classmethod
    def solved(cls, size: int) -> "CubeState":
        return cls(size=check_size(size), grids=solved_grids(size))

    @property
    def flat(self) -> np.ndarray:
        return self.grids.reshape(-1)

    def face(self, label: str) -> np.ndarray:
        """Read-only view of one face grid."""
        view = self.grids[FACE_INDEX[label]]
        view.flags.writeable = False
        return view

    def copy(self) -> "CubeState":
        return CubeState(size=self.size, grids=self.grids.copy(), orientation=dict(self.orientation))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CubeState):
            return NotImplemented
        return (
            self.size == other.size
            and self.orientation == other.orientation
            and np.array_equal(self.grids, other.grids)
        )

    __hash__ = None
