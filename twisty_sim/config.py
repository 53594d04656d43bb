"""Engine configuration and colour themes."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path

import yaml

from .geometry import MIN_SIZE

# Face identity -> display colour. Labelling only; the engine never reads these.
COLOR_THEMES = {
    "classic": {"F": "#3366ff", "B": "#33cc33", "R": "#ff3333", "L": "#ff9900", "U": "#ffff33", "D": "#ffffff"},
    "neon": {"F": "#00ffff", "B": "#ff00ff", "R": "#ff0080", "L": "#80ff00", "U": "#ffff00", "D": "#ffffff"},
    "pastel": {"F": "#a8d5e2", "B": "#b8e6b8", "R": "#f5b5b5", "L": "#f5d5a8", "U": "#f5f5a8", "D": "#ffffff"},
    "vibrant": {"F": "#ff6b35", "B": "#004e89", "R": "#1a659e", "L": "#f7931e", "U": "#ffd23f", "D": "#ffffff"},
    "sunset": {"F": "#ff9a56", "B": "#ffad56", "R": "#ff6b6b", "L": "#4ecdc4", "U": "#ffe66d", "D": "#ffffff"},
    "ocean": {"F": "#006994", "B": "#228b22", "R": "#4169e1", "L": "#00ced1", "U": "#0000ff", "D": "#8b00ff"},
    "monochrome": {"F": "#2c2c2c", "B": "#404040", "R": "#595959", "L": "#737373", "U": "#8c8c8c", "D": "#a6a6a6"},
}


class ConfigError(ValueError):
    """Raised when a configuration value is invalid."""


@dataclass(frozen=True)
class CubeConfig:
    size: int = 3
    scramble_moves: int = 25
    history_limit: int | None = None
    seed: int | None = None
    color_theme: str = "classic"

    def __post_init__(self):
        if not isinstance(self.size, int) or isinstance(self.size, bool) or self.size < MIN_SIZE:
            raise ConfigError(f"size must be an integer >= {MIN_SIZE}")
        if not isinstance(self.scramble_moves, int) or self.scramble_moves < 0:
            raise ConfigError("scramble_moves must be a non-negative integer")
        if self.history_limit is not None and (not isinstance(self.history_limit, int) or self.history_limit < 1):
            raise ConfigError("history_limit must be a positive integer or null")
        if self.seed is not None and not isinstance(self.seed, int):
            raise ConfigError("seed must be an integer or null")
        if self.color_theme not in COLOR_THEMES:
            raise ConfigError(f"color_theme must be one of: {', '.join(COLOR_THEMES)}")

    @property
    def colors(self) -> dict[str, str]:
        return dict(COLOR_THEMES[self.color_theme])

    @classmethod
    def from_dict(cls, data: dict) -> "CubeConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> dict:
        return asdict(self)


def load_config(path: str | Path) -> CubeConfig:
    """Load a YAML mapping of CubeConfig fields."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return CubeConfig.from_dict(data)
