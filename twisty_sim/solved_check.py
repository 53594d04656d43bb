"""Solved-state checks for the cube simulator."""

from __future__ import annotations

import numpy as np


def is_solved(grids: np.ndarray) -> bool:
    """True when every face grid is uniform; orientation does not matter."""
    reference = grids[:, :1, :1]
    return bool(np.all(grids == reference))


def unsolved_faces(grids: np.ndarray, labels) -> list[str]:
    return [label for label, grid in zip(labels, grids) if not np.all(grid == grid[0, 0])]
