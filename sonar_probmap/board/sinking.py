"""Hit-run geometry behind sunk-ship detection."""

from __future__ import annotations

import logging
from typing import List, Tuple

import numpy as np

from sonar_probmap.board.models import Cell, CellStatus
from sonar_probmap.errors import InternalInconsistency

logger = logging.getLogger(__name__)

_NEIGHBOURS = [(-1, 0), (1, 0), (0, -1), (0, 1), (-1, -1), (-1, 1), (1, -1), (1, 1)]


def _is_hit(status: np.ndarray, r: int, c: int) -> bool:
    return status[r, c] == CellStatus.HIT


def hit_run_lengths(status: np.ndarray, r: int, c: int) -> Tuple[int, int]:
    """(horizontal, vertical) lengths of the hit runs through (r, c).

    The cell itself always counts as one; each direction is extended
    independently while the neighbouring cells are hits.
    """
    rows, cols = status.shape
    h = v = 1
    cc = c - 1
    while cc >= 0 and _is_hit(status, r, cc):
        h += 1
        cc -= 1
    cc = c + 1
    while cc < cols and _is_hit(status, r, cc):
        h += 1
        cc += 1
    rr = r - 1
    while rr >= 0 and _is_hit(status, rr, c):
        v += 1
        rr -= 1
    rr = r + 1
    while rr < rows and _is_hit(status, rr, c):
        v += 1
        rr += 1
    return h, v


def longest_hit_run(status: np.ndarray, r: int, c: int) -> int:
    return max(hit_run_lengths(status, r, c))


def vertical_run_cells(status: np.ndarray, r: int, c: int) -> List[Cell]:
    rows = status.shape[0]
    cells: List[Cell] = []
    rr = r
    while rr < rows and _is_hit(status, rr, c):
        cells.append((rr, c))
        rr += 1
    rr = r - 1
    while rr >= 0 and _is_hit(status, rr, c):
        cells.append((rr, c))
        rr -= 1
    return sorted(cells)


def horizontal_run_cells(status: np.ndarray, r: int, c: int) -> List[Cell]:
    cols = status.shape[1]
    cells: List[Cell] = []
    cc = c
    while cc < cols and _is_hit(status, r, cc):
        cells.append((r, cc))
        cc += 1
    cc = c - 1
    while cc >= 0 and _is_hit(status, r, cc):
        cells.append((r, cc))
        cc -= 1
    return sorted(cells)


def resolve_ship_cells(status: np.ndarray, r: int, c: int, length: int) -> List[Cell]:
    """Recover the cells of a ship of `length` whose last hit was (r, c).

    The vertical run is tried first and the horizontal run only when the
    vertical length differs, so a vertical partial run of the same length
    wins over a horizontal ship.
    """
    vertical = vertical_run_cells(status, r, c)
    if len(vertical) == length:
        return vertical
    horizontal = horizontal_run_cells(status, r, c)
    if len(horizontal) == length:
        return horizontal

    logger.error(
        "Sunk ship at (%d, %d) expected length %d, vertical run %d, horizontal run %d",
        r, c, length, len(vertical), len(horizontal),
    )
    raise InternalInconsistency(
        "Internal error: hit count does not match boat length.",
        cell=(r, c),
        expected_length=length,
        vertical_run=len(vertical),
        horizontal_run=len(horizontal),
    )


def perimeter_cells(status: np.ndarray, cells: List[Cell]) -> List[Cell]:
    """Unknown cells 8-adjacent to `cells`, in first-seen order."""
    rows, cols = status.shape
    seen = set(cells)
    found: List[Cell] = []
    for r, c in cells:
        for dr, dc in _NEIGHBOURS:
            nr, nc = r + dr, c + dc
            if not (0 <= nr < rows and 0 <= nc < cols) or (nr, nc) in seen:
                continue
            seen.add((nr, nc))
            if status[nr, nc] == CellStatus.UNKNOWN:
                found.append((nr, nc))
    return found
