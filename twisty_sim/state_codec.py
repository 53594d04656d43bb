"""Persisted-state validation and codec helpers."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

import numpy as np

from .config import COLOR_THEMES
from .geometry import FACE_INDEX, FACE_ORDER, N_FACES, check_size, reachable_orientations
from .state import CubeState

STATE_FORMAT = "twisty-sim/cube-state"
STATE_VERSION = 1


class StateValidationError(ValueError):
    """Raised when a persisted state is invalid."""


def _validate_grid(label: str, grid: Any, size: int) -> np.ndarray:
    if not isinstance(grid, (list, tuple)) or len(grid) != size:
        raise StateValidationError(f"Face {label} must have {size} rows")
    for row in grid:
        if not isinstance(row, (list, tuple)) or len(row) != size:
            raise StateValidationError(f"Face {label} must be a {size}x{size} grid")
        for token in row:
            if not isinstance(token, int) or isinstance(token, bool) or not 0 <= token < N_FACES:
                raise StateValidationError(
                    f"Face {label} contains invalid token {token!r}; allowed values are 0..{N_FACES - 1}"
                )
    return np.asarray(grid, dtype=np.int8)


def _validate_label_set(obj: Any, what: str) -> None:
    if not isinstance(obj, dict):
        raise StateValidationError(f"{what} must be an object keyed by face label")
    if set(obj) != set(FACE_ORDER):
        raise StateValidationError(f"{what} must have exactly the labels {', '.join(FACE_ORDER)}")


def _validate_orientation(orientation: Any) -> dict[str, str]:
    _validate_label_set(orientation, "orientation")
    values = [orientation[label] for label in FACE_ORDER]
    if sorted(map(str, values)) != sorted(FACE_ORDER) or not all(isinstance(v, str) for v in values):
        raise StateValidationError("orientation must be a permutation of the face labels")
    if tuple(values) not in reachable_orientations():
        raise StateValidationError("orientation is not reachable by whole-cube rotations")
    return {label: orientation[label] for label in FACE_ORDER}


def _check_version(version: Any) -> None:
    if not isinstance(version, int) or isinstance(version, bool) or version != STATE_VERSION:
        raise StateValidationError(f"Unsupported state version {version!r}")


def decode_state(payload: Any) -> CubeState:
    """Validate a persisted payload and rebuild the CubeState it describes."""
    if not isinstance(payload, dict):
        raise StateValidationError("State payload must be an object")
    if payload.get("format") != STATE_FORMAT:
        raise StateValidationError(f"Unknown state format {payload.get('format')!r}")
    _check_version(payload.get("version"))

    size = payload.get("size")
    try:
        check_size(size)
    except ValueError as exc:
        raise StateValidationError(str(exc)) from exc

    faces = payload.get("faces")
    _validate_label_set(faces, "faces")
    # Every grid is checked against size before anything is allocated from it.
    grids = np.stack([_validate_grid(label, faces[label], size) for label in FACE_ORDER])

    counts = np.bincount(grids.reshape(-1).astype(np.int64), minlength=N_FACES)
    if not np.all(counts == size * size):
        raise StateValidationError(
            f"Invalid token counts; each token 0..{N_FACES - 1} must appear exactly {size * size} times"
        )

    orientation = _validate_orientation(payload.get("orientation"))
    payload_theme(payload)
    saved_at = payload.get("saved_at")
    if saved_at is not None and not isinstance(saved_at, str):
        raise StateValidationError("saved_at must be an ISO timestamp string")
    return CubeState(size=size, grids=grids, orientation=orientation)


def payload_theme(payload: dict[str, Any]) -> str | None:
    """Colour theme stored alongside the state, if any."""
    theme = payload.get("color_theme")
    if theme is not None and (not isinstance(theme, str) or theme not in COLOR_THEMES):
        raise StateValidationError(f"color_theme must be one of: {', '.join(COLOR_THEMES)}")
    return theme


def encode_state(state: CubeState, color_theme: str | None = None) -> dict[str, Any]:
    payload = {
        "format": STATE_FORMAT,
        "version": STATE_VERSION,
        "size": int(state.size),
        "faces": {label: state.grids[FACE_INDEX[label]].astype(int).tolist() for label in FACE_ORDER},
        "orientation": {label: state.orientation[label] for label in FACE_ORDER},
    }
    if color_theme is not None:
        payload["color_theme"] = color_theme
        payload["saved_at"] = datetime.now(timezone.utc).isoformat()
    return payload


def dumps(state: CubeState, **kwargs) -> str:
    return json.dumps(encode_state(state), **kwargs)


def loads(text: str) -> CubeState:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise StateValidationError(f"Invalid JSON: {exc}") from exc
    return decode_state(payload)
