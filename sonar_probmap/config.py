from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from sonar_probmap.board.models import Strategy
from sonar_probmap.errors import ConfigError


@dataclass(frozen=True)
class EngineConfig:
    """Tunable constants of the scoring strategies."""

    search_discount: float = 0.8
    sampler_alpha: float = 1.0
    scorer_alpha: float = 0.0
    sample_cap_base: int = 1200
    sample_cap_per_cell: int = 4
    sample_cap_max: int = 8000
    max_backtrack_steps: Optional[int] = None
    default_strategy: Strategy = Strategy.RULE_BASED
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not 0.0 < self.search_discount <= 1.0:
            raise ConfigError("search_discount must be in (0, 1]")
        # alpha above 1 would push an all-zero board outside [0, 1]
        for name in ("sampler_alpha", "scorer_alpha"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must be in [0, 1], got {value}")
        if self.sample_cap_base < 1 or self.sample_cap_max < 1:
            raise ConfigError("sample cap values must be positive")
        if self.sample_cap_per_cell < 0:
            raise ConfigError("sample_cap_per_cell must be non-negative")
        if self.max_backtrack_steps is not None and self.max_backtrack_steps < 1:
            raise ConfigError("max_backtrack_steps must be positive or null")

    def sample_cap(self, rows: int, cols: int) -> int:
        """Number of accepted configurations after which sampling stops."""
        return min(self.sample_cap_max, self.sample_cap_base + rows * cols * self.sample_cap_per_cell)


DEFAULT_CONFIG = EngineConfig()


def _load_yaml(path: str | Path | None) -> dict:
    if path is None:
        return {}
    data = Path(path)
    if not data.exists():
        return {}
    with data.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{data} must contain a mapping, got {type(loaded).__name__}")
    return loaded


def config_from_dict(raw: Dict[str, Any]) -> EngineConfig:
    known = {f.name for f in fields(EngineConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown engine config keys: {', '.join(unknown)}")

    values: Dict[str, Any] = {}
    try:
        for key in ("search_discount", "sampler_alpha", "scorer_alpha"):
            if key in raw:
                values[key] = float(raw[key])
        for key in ("sample_cap_base", "sample_cap_per_cell", "sample_cap_max"):
            if key in raw:
                values[key] = int(raw[key])
        if raw.get("max_backtrack_steps") is not None:
            values["max_backtrack_steps"] = int(raw["max_backtrack_steps"])
        if "default_strategy" in raw:
            values["default_strategy"] = Strategy.coerce(raw["default_strategy"])
        if "log_level" in raw:
            values["log_level"] = str(raw["log_level"]).upper()
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid engine config value: {exc}") from exc

    return replace(DEFAULT_CONFIG, **values)


def load_config(path: str | Path | None = None) -> EngineConfig:
    """Read an EngineConfig from YAML; missing files fall back to defaults."""
    return config_from_dict(_load_yaml(path))
