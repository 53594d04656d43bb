"""Apply moves to a CubeState.

Every move is a gather over the flat sticker array: all source cells are
read into a fresh buffer before the grids are replaced, so bands that share
source and target faces cannot alias.
"""

from __future__ import annotations

import numpy as np

from .geometry import face_turn_permutation, slice_turn_permutation, whole_cube_permutation, whole_cube_relabel
from .moves import FaceTurn, Move, SliceTurn, WholeRotation, validate_move
from .state import CubeState


def _permute(state: CubeState, perm: np.ndarray) -> None:
    state.grids = state.flat[perm].reshape(state.grids.shape)


def rotate_face(state: CubeState, face: str, clockwise: bool = True) -> None:
    validate_move(FaceTurn(face, clockwise), state.size)
    _permute(state, face_turn_permutation(state.size, face, clockwise))


def rotate_slice(state: CubeState, axis: str, layer: int, clockwise: bool = True) -> None:
    validate_move(SliceTurn(axis, layer, clockwise), state.size)
    _permute(state, slice_turn_permutation(state.size, axis, layer, clockwise))


def rotate_whole_cube(state: CubeState, axis: str, clockwise: bool = True) -> None:
    validate_move(WholeRotation(axis, clockwise), state.size)
    perm = whole_cube_permutation(state.size, axis, clockwise)
    relabelled = {target: state.orientation[source] for target, source in whole_cube_relabel(axis, clockwise)}
    _permute(state, perm)
    state.orientation = relabelled


def apply_move(state: CubeState, move: Move) -> None:
    validate_move(move, state.size)
    if isinstance(move, FaceTurn):
        rotate_face(state, move.face, move.clockwise)
    elif isinstance(move, SliceTurn):
        rotate_slice(state, move.axis, move.layer, move.clockwise)
    else:
        rotate_whole_cube(state, move.axis, move.clockwise)


def apply_moves(state: CubeState, moves) -> None:
    """Validate every move first, then apply them in order."""
    moves = list(moves)
    for move in moves:
        validate_move(move, state.size)
    for move in moves:
        apply_move(state, move)
