from __future__ import annotations

import logging
from typing import Optional, Union

import numpy as np

from sonar_probmap.board.models import CellStatus, Mode, Strategy
from sonar_probmap.board.state import BoardState
from sonar_probmap.config import DEFAULT_CONFIG, EngineConfig
from sonar_probmap.heatmaps.monte_carlo import PlacementSampler, sample_heatmap
from sonar_probmap.heatmaps.normalize import normalize_counts
from sonar_probmap.heatmaps.rule_based import resolve_hunt_anchor, rule_based_heatmap

logger = logging.getLogger(__name__)


def compute_heatmap(
    board: BoardState,
    strategy: Optional[Union[Strategy, int, str]] = None,
    mode: Optional[Union[Mode, int, str]] = None,
    x: Optional[int] = None,
    y: Optional[int] = None,
    config: Optional[EngineConfig] = None,
) -> np.ndarray:
    """Recompute the probability matrix for the board's current evidence.

    Omitted arguments come from the board (mode, anchor) or the config
    (strategy). The result is a fresh (rows, cols) float array in [0, 1].
    """
    cfg = config or DEFAULT_CONFIG
    strategy = Strategy.coerce(strategy) if strategy is not None else cfg.default_strategy
    mode = Mode.coerce(mode) if mode is not None else board.mode
    anchor_x, anchor_y = board.anchor if mode != Mode.SEARCH else (0, 0)
    x = anchor_x if x is None else x
    y = anchor_y if y is None else y
    lengths = board.remaining_lengths()

    logger.debug(
        "Computing %s heatmap in %s mode at (%d, %d) for fleet %s",
        strategy.name, mode.name, x, y, lengths,
    )
    if strategy == Strategy.MONTE_CARLO:
        excluded, must_include = board.sampler_inputs()
        return sample_heatmap(board.dimensions, lengths, excluded, must_include, cfg)
    return rule_based_heatmap(board.status, lengths, mode, x, y, cfg)


def overlay_resolved(status: np.ndarray, probs: np.ndarray) -> np.ndarray:
    """Display copy of `probs` with hits forced to 1.0 and misses to 0.0."""
    status = np.asarray(status)
    shown = np.array(probs, dtype=np.float64, copy=True)
    shown[status == CellStatus.HIT] = 1.0
    shown[status == CellStatus.MISS] = 0.0
    return shown


__all__ = [
    "PlacementSampler",
    "compute_heatmap",
    "normalize_counts",
    "overlay_resolved",
    "resolve_hunt_anchor",
    "rule_based_heatmap",
    "sample_heatmap",
]
