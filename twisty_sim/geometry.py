"""Sticker geometry and move permutations for NxNxN cubes."""

from __future__ import annotations

from collections import deque
from functools import lru_cache

import numpy as np

FACE_ORDER = ("U", "R", "F", "D", "L", "B")
FACE_INDEX = {face: i for i, face in enumerate(FACE_ORDER)}
N_FACES = 6
AXES = ("x", "y", "z")
AXIS_INDEX = {axis: i for i, axis in enumerate(AXES)}
MIN_SIZE = 2

# Face specification from outside view.
FACE_SPECS = {
    "U": {"normal": (0, 1, 0), "right": (1, 0, 0), "up": (0, 0, -1)},
    "R": {"normal": (1, 0, 0), "right": (0, 0, -1), "up": (0, 1, 0)},
    "F": {"normal": (0, 0, 1), "right": (1, 0, 0), "up": (0, 1, 0)},
    "D": {"normal": (0, -1, 0), "right": (1, 0, 0), "up": (0, 0, 1)},
    "L": {"normal": (-1, 0, 0), "right": (0, 0, 1), "up": (0, 1, 0)},
    "B": {"normal": (0, 0, -1), "right": (-1, 0, 0), "up": (0, 1, 0)},
}

# Face -> (axis, pole). Pole +1 is the outermost layer N-1, pole -1 is layer 0.
FACE_AXIS_LAYER = {
    "U": ("y", +1),
    "D": ("y", -1),
    "L": ("x", -1),
    "R": ("x", +1),
    "F": ("z", +1),
    "B": ("z", -1),
}

# Clockwise as seen from the positive end of an axis is a -90 degree turn.
CLOCKWISE_ANGLE_DEG = -90


def state_size(size: int) -> int:
    return N_FACES * size * size


def check_size(size: int) -> int:
    if not isinstance(size, int) or isinstance(size, bool) or size < MIN_SIZE:
        raise ValueError(f"Cube size must be an integer >= {MIN_SIZE}, got {size!r}")
    return size


def solved_grids(size: int) -> np.ndarray:
    """Return solved face grids of shape (6, size, size)."""
    check_size(size)
    return np.repeat(np.arange(N_FACES, dtype=np.int8), size * size).reshape(N_FACES, size, size)


def face_turn_angle(face: str, clockwise: bool) -> int:
    """World-axis angle of a face turn; faces on the negative pole turn the other way."""
    _, pole = FACE_AXIS_LAYER[face]
    angle = CLOCKWISE_ANGLE_DEG * pole
    return angle if clockwise else -angle


def _rotation_matrix(axis: str, angle_deg: int) -> np.ndarray:
    """Return integer rotation matrix for +-90 around x/y/z axes."""
    if axis == "x" and angle_deg == +90:
        return np.array([[1, 0, 0], [0, 0, -1], [0, 1, 0]], dtype=np.int32)
    if axis == "x" and angle_deg == -90:
        return np.array([[1, 0, 0], [0, 0, 1], [0, -1, 0]], dtype=np.int32)
    if axis == "y" and angle_deg == +90:
        return np.array([[0, 0, 1], [0, 1, 0], [-1, 0, 0]], dtype=np.int32)
    if axis == "y" and angle_deg == -90:
        return np.array([[0, 0, -1], [0, 1, 0], [1, 0, 0]], dtype=np.int32)
    if axis == "z" and angle_deg == +90:
        return np.array([[0, -1, 0], [1, 0, 0], [0, 0, 1]], dtype=np.int32)
    if axis == "z" and angle_deg == -90:
        return np.array([[0, 1, 0], [-1, 0, 0], [0, 0, 1]], dtype=np.int32)
    raise ValueError(f"Unsupported rotation: axis={axis}, angle={angle_deg}")


def _face_vectors(face: str) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    spec = FACE_SPECS[face]
    return (
        np.array(spec["normal"], dtype=np.int32),
        np.array(spec["right"], dtype=np.int32),
        np.array(spec["up"], dtype=np.int32),
    )


_NORMAL_TO_FACE = {FACE_SPECS[face]["normal"]: face for face in FACE_ORDER}


def _face_for_normal(normal: np.ndarray) -> str:
    return _NORMAL_TO_FACE[tuple(int(v) for v in normal)]


@lru_cache(maxsize=None)
def _sticker_arrays(size: int) -> tuple[np.ndarray, np.ndarray]:
    """Centres and normals of every sticker, indexed like the flat state.

    Coordinates are doubled so that they stay integral for every size: a
    sticker centre is ``size * normal + u * right + v * up`` with ``u`` and
    ``v`` in ``-(size-1), -(size-3), ..., size-1``.
    """
    check_size(size)
    centers = np.empty((state_size(size), 3), dtype=np.int32)
    normals = np.empty((state_size(size), 3), dtype=np.int32)

    for face in FACE_ORDER:
        n, r, up = _face_vectors(face)
        base = FACE_INDEX[face] * size * size
        for row in range(size):
            for col in range(size):
                u = 2 * col - (size - 1)
                v = (size - 1) - 2 * row
                idx = base + row * size + col
                centers[idx] = size * n + u * r + v * up
                normals[idx] = n

    return centers, normals


def _flat_index(size: int, face: str, center: np.ndarray) -> int:
    n, r, up = _face_vectors(face)
    offset = center - size * n
    u = int(np.dot(offset, r))
    v = int(np.dot(offset, up))
    col, rem_c = divmod(u + size - 1, 2)
    row, rem_r = divmod(size - 1 - v, 2)
    if rem_c or rem_r or not (0 <= row < size and 0 <= col < size):
        raise ValueError(f"Invalid center for face {face}: {center}")
    return FACE_INDEX[face] * size * size + row * size + col


def layer_coordinates(size: int, axis: str) -> np.ndarray:
    """Layer index (0..size-1) of every sticker along ``axis``."""
    centers, normals = _sticker_arrays(size)
    # Step back from the sticker into its cubie so face stickers sit on layer 0 or size-1.
    cubies = centers - normals
    return (cubies[:, AXIS_INDEX[axis]] + size - 1) // 2


def _generate_layer_permutation(size: int, axis: str, layers: frozenset[int], angle: int) -> np.ndarray:
    centers, normals = _sticker_arrays(size)
    rot = _rotation_matrix(axis, angle)
    in_layer = np.isin(layer_coordinates(size, axis), list(layers))

    perm = np.arange(state_size(size), dtype=np.intp)
    for old_idx in np.flatnonzero(in_layer):
        new_center = rot @ centers[old_idx]
        new_normal = rot @ normals[old_idx]
        new_idx = _flat_index(size, _face_for_normal(new_normal), new_center)
        perm[new_idx] = old_idx

    return perm


def inverse_permutation(perm: np.ndarray) -> np.ndarray:
    inv = np.empty_like(perm)
    inv[perm] = np.arange(perm.size, dtype=perm.dtype)
    return inv


def _freeze(perm: np.ndarray) -> np.ndarray:
    perm.setflags(write=False)
    return perm


@lru_cache(maxsize=None)
def face_turn_permutation(size: int, face: str, clockwise: bool) -> np.ndarray:
    """Gather permutation for a face turn: ``new_flat = old_flat[perm]``."""
    axis, pole = FACE_AXIS_LAYER[face]
    layer = size - 1 if pole > 0 else 0
    if not clockwise:
        return _freeze(inverse_permutation(face_turn_permutation(size, face, True)))
    return _freeze(_generate_layer_permutation(size, axis, frozenset((layer,)), face_turn_angle(face, True)))


@lru_cache(maxsize=None)
def slice_turn_permutation(size: int, axis: str, layer: int, clockwise: bool) -> np.ndarray:
    if not clockwise:
        return _freeze(inverse_permutation(slice_turn_permutation(size, axis, layer, True)))
    return _freeze(_generate_layer_permutation(size, axis, frozenset((layer,)), CLOCKWISE_ANGLE_DEG))


@lru_cache(maxsize=None)
def whole_cube_permutation(size: int, axis: str, clockwise: bool) -> np.ndarray:
    if not clockwise:
        return _freeze(inverse_permutation(whole_cube_permutation(size, axis, True)))
    return _freeze(_generate_layer_permutation(size, axis, frozenset(range(size)), CLOCKWISE_ANGLE_DEG))


@lru_cache(maxsize=None)
def whole_cube_relabel(axis: str, clockwise: bool) -> tuple[tuple[str, str], ...]:
    """Pairs ``(target_label, source_label)`` for a whole-cube rotation.

    After the rotation the stickers that sat under ``source_label`` are shown
    under ``target_label``.
    """
    angle = CLOCKWISE_ANGLE_DEG if clockwise else -CLOCKWISE_ANGLE_DEG
    rot = _rotation_matrix(axis, angle)
    pairs = []
    for face in FACE_ORDER:
        n, _, _ = _face_vectors(face)
        pairs.append((_face_for_normal(rot @ n), face))
    return tuple(pairs)


def _matrix_key(mat: np.ndarray) -> tuple[int, ...]:
    return tuple(int(v) for v in mat.reshape(-1))


def global_orientation_matrices() -> list[np.ndarray]:
    """All 24 rotations of the cube, generated from quarter turns."""
    gens = [_rotation_matrix("x", +90), _rotation_matrix("y", +90), _rotation_matrix("z", +90)]
    identity = np.eye(3, dtype=np.int32)

    mats: list[np.ndarray] = []
    seen: set[tuple[int, ...]] = set()
    q: deque[np.ndarray] = deque([identity])

    while q:
        mat = q.popleft()
        key = _matrix_key(mat)
        if key in seen:
            continue
        seen.add(key)
        mats.append(mat)
        for g in gens:
            q.append(g @ mat)

    if len(mats) != 24:
        raise RuntimeError(f"Expected 24 orientation matrices, got {len(mats)}")
    return mats


@lru_cache(maxsize=None)
def sticker_model(size: int) -> tuple[dict, ...]:
    """Read-only sticker metadata for rendering collaborators.

    Each entry names the flat index, face, row/col, doubled-coordinate centre
    and normal, and the layer index of the sticker along every axis.
    """
    centers, normals = _sticker_arrays(size)
    layers = {axis: layer_coordinates(size, axis) for axis in AXES}
    model = []
    for idx in range(state_size(size)):
        face_idx, rest = divmod(idx, size * size)
        row, col = divmod(rest, size)
        model.append(
            {
                "idx": idx,
                "face": FACE_ORDER[face_idx],
                "row": row,
                "col": col,
                "center": tuple(int(v) for v in centers[idx]),
                "normal": tuple(int(v) for v in normals[idx]),
                "layers": {axis: int(layers[axis][idx]) for axis in AXES},
            }
        )
    return tuple(model)


@lru_cache(maxsize=None)
def reachable_orientations() -> frozenset[tuple[str, ...]]:
    """Orientation maps reachable by whole-cube rotations.

    Each map is given as the physical faces shown under the labels in
    ``FACE_ORDER``.
    """
    out = set()
    for mat in global_orientation_matrices():
        shown = {}
        for face in FACE_ORDER:
            n, _, _ = _face_vectors(face)
            shown[_face_for_normal(mat @ n)] = face
        out.add(tuple(shown[label] for label in FACE_ORDER))
    return frozenset(out)
