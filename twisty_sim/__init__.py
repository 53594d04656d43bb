"""NxNxN cube state engine package."""

from .config import CubeConfig, load_config
from .facade import BusyError, CubeFacade
from .moves import FaceTurn, InvalidMoveError, SliceTurn, WholeRotation
from .state import CubeState
from .state_codec import StateValidationError

__all__ = [
    "BusyError",
    "CubeConfig",
    "CubeFacade",
    "CubeState",
    "FaceTurn",
    "InvalidMoveError",
    "SliceTurn",
    "StateValidationError",
    "WholeRotation",
    "load_config",
]
