"""Mode-aware counting heuristic.

Search mode counts every miss-free placement of every ship, discounting
one checkerboard colour after each ship length. Target and Hunt modes only
count placements through an anchor cell, doubling a placement's weight for
each confirmed hit it runs through, so known hit chains get extended.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from sonar_probmap.board.models import Cell, CellStatus, Mode
from sonar_probmap.board.placement import _valid_mask_h, _valid_mask_v
from sonar_probmap.config import DEFAULT_CONFIG, EngineConfig
from sonar_probmap.errors import NoValidPlacement, OutOfRange
from sonar_probmap.heatmaps.normalize import normalize_counts

logger = logging.getLogger(__name__)

# Fixed probing priority: up, down, left, right.
_DIRECTIONS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


def check_anchor(shape: Tuple[int, int], x: int, y: int) -> None:
    rows, cols = shape
    # Dimension check as callers know it: compared against sizes, not indices.
    if x > rows or y > cols:
        raise OutOfRange("Drop point exceeds defined rows/cols")
    if not (0 <= x < rows and 0 <= y < cols):
        raise OutOfRange(f"Drop point ({x}, {y}) is not a cell of the {rows}x{cols} board")


def _checkerboard(shape: Tuple[int, int]) -> np.ndarray:
    rows, cols = shape
    return (np.add.outer(np.arange(rows), np.arange(cols)) % 2) == 0


def search_counts(status: np.ndarray, lengths: Sequence[int], discount: float = 0.8) -> np.ndarray:
    counts = np.zeros(status.shape, dtype=np.int64)
    misses = status == CellStatus.MISS
    parity = _checkerboard(status.shape)

    for length in lengths:
        valid_h = _valid_mask_h(misses, length)
        for k in range(length):
            counts[:, k : k + valid_h.shape[1]] += valid_h
        valid_v = _valid_mask_v(misses, length)
        for k in range(length):
            counts[k : k + valid_v.shape[0], :] += valid_v
        # Compounds across ship lengths.
        counts[parity] = np.floor(counts[parity] * discount).astype(np.int64)
    return counts


def add_anchor_counts(
    counts: np.ndarray, status: np.ndarray, lengths: Sequence[int], x: int, y: int
) -> None:
    """Add chain-weighted counts for every miss-free placement covering (x, y)."""
    rows, cols = status.shape
    for length in lengths:
        for c in range(max(0, y - length + 1), min(y, cols - length) + 1):
            window = status[x, c : c + length]
            if np.any(window == CellStatus.MISS):
                continue
            counts[x, c : c + length] += 2 ** int(np.count_nonzero(window == CellStatus.HIT))
        for r in range(max(0, x - length + 1), min(x, rows - length) + 1):
            window = status[r : r + length, y]
            if np.any(window == CellStatus.MISS):
                continue
            counts[r : r + length, y] += 2 ** int(np.count_nonzero(window == CellStatus.HIT))


def _beyond_run(status: np.ndarray, x: int, y: int, dr: int, dc: int) -> Optional[Cell]:
    """First cell past the hit run starting at (x, y) in direction (dr, dc)."""
    rows, cols = status.shape
    r, c = x, y
    while 0 <= r + dr < rows and 0 <= c + dc < cols and status[r + dr, c + dc] == CellStatus.HIT:
        r += dr
        c += dc
    r += dr
    c += dc
    if 0 <= r < rows and 0 <= c < cols:
        return r, c
    return None


def resolve_hunt_anchor(status: np.ndarray, x: int, y: int) -> Cell:
    """Pick the cell to probe next after a miss ended a line of hits.

    Follows the first adjacent hit (up, down, left, right) to the end of the
    run and steps one further. If that cell is a miss, the line is reversed
    and the cell past the opposite end is used instead, unless it is a miss
    (or off the grid) as well.
    """
    status = np.asarray(status)
    rows, cols = status.shape
    if status[x, y] != CellStatus.HIT:
        return x, y

    direction = None
    for dr, dc in _DIRECTIONS:
        nr, nc = x + dr, y + dc
        if 0 <= nr < rows and 0 <= nc < cols and status[nr, nc] == CellStatus.HIT:
            direction = (dr, dc)
            break
    if direction is None:
        return x, y

    dr, dc = direction
    beyond = _beyond_run(status, x, y, dr, dc)
    if beyond is None:
        raise NoValidPlacement("No valid placement found for the hit point", anchor=(x, y))
    if status[beyond] != CellStatus.MISS:
        return beyond

    opposite = _beyond_run(status, x, y, -dr, -dc)
    if opposite is not None and status[opposite] != CellStatus.MISS:
        return opposite
    return beyond


def score_counts(
    status: np.ndarray,
    lengths: Sequence[int],
    mode: Mode = Mode.SEARCH,
    x: int = 0,
    y: int = 0,
    config: Optional[EngineConfig] = None,
) -> np.ndarray:
    cfg = config or DEFAULT_CONFIG
    status = np.asarray(status, dtype=np.int8)
    mode = Mode.coerce(mode)
    check_anchor(status.shape, x, y)

    if mode == Mode.SEARCH:
        counts = search_counts(status, lengths, cfg.search_discount)
    else:
        counts = np.zeros(status.shape, dtype=np.int64)
        if mode == Mode.HUNT:
            x, y = resolve_hunt_anchor(status, x, y)
        add_anchor_counts(counts, status, lengths, x, y)

    counts[status == CellStatus.HIT] = 0
    logger.debug("Rule-based counts for mode %s anchored at (%d, %d), max %d", mode.name, x, y, counts.max())
    return counts


def rule_based_heatmap(
    status: np.ndarray,
    lengths: Sequence[int],
    mode: Mode = Mode.SEARCH,
    x: int = 0,
    y: int = 0,
    config: Optional[EngineConfig] = None,
) -> np.ndarray:
    cfg = config or DEFAULT_CONFIG
    counts = score_counts(status, lengths, mode, x, y, cfg)
    return normalize_counts(counts, alpha=cfg.scorer_alpha)
