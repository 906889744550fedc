"""
sonar_probmap/heatmaps/monte_carlo.py
=====================================
Capped backtracking sampler over full-fleet configurations.

Every ship instance gets its candidate placements up front (cells on the
excluded set are never used). Ships are then placed depth-first,
most-constrained first, with the rule that ships never touch, not even
diagonally. Each complete configuration that covers all must-include
cells adds one to the occupancy count of every ship cell, and the search
stops once `EngineConfig.sample_cap(rows, cols)` configurations have
been accepted.

This is NOT a uniform sample over layouts. Candidates are tried in a
fixed order (nearest to the must-include cells first, when there are
any), so whichever prefix of the search space is explored before the
cap dominates the estimate. The cap is the only latency control.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

import numpy as np

from sonar_probmap.board.models import BoardDimensions, Cell, Placement
from sonar_probmap.board.placement import (
    _normalize_board_size,
    _normalize_ships,
    enumerate_all_placements,
    placement_window,
)
from sonar_probmap.config import DEFAULT_CONFIG, EngineConfig
from sonar_probmap.heatmaps.normalize import normalize_counts

logger = logging.getLogger(__name__)


class PlacementSampler:
    """Accumulates per-cell occupancy counts over accepted configurations.

    Parameters
    ----------
    board_size          : int, (rows, cols) or BoardDimensions
    ships               : lengths of the ship instances still afloat
    excluded            : cells no ship may cover
    must_include        : cells every accepted configuration must cover
    max_samples         : accepted-configuration cap (default from config)
    max_backtrack_steps : optional node budget; None searches until the cap
    """

    def __init__(
        self,
        board_size: int | Sequence[int] | BoardDimensions,
        ships: Sequence[int],
        excluded: Iterable[Cell] = (),
        must_include: Iterable[Cell] = (),
        max_samples: Optional[int] = None,
        max_backtrack_steps: Optional[int] = None,
    ) -> None:
        self.dims = _normalize_board_size(board_size)
        self.height, self.width = self.dims.shape
        self.ships = _normalize_ships(ships, self.dims, check_fit=False)
        self.max_samples = max_samples if max_samples is not None else DEFAULT_CONFIG.sample_cap(
            self.height, self.width
        )
        self.max_backtrack_steps = max_backtrack_steps

        self.excluded_grid = self._cell_mask(excluded)
        self.must_grid = self._cell_mask(must_include)
        self.must_cells: List[Cell] = [(int(r), int(c)) for r, c in np.argwhere(self.must_grid)]

        self.counts = np.zeros((self.height, self.width), dtype=np.int64)
        self.accepted = 0
        self.steps = 0
        self.budget_exhausted = False

        self._occupied = np.zeros((self.height, self.width), dtype=bool)
        # Number of placed ships whose 3x3 neighbourhood covers each cell.
        self._halo = np.zeros((self.height, self.width), dtype=np.int32)

        self.candidates: List[List[Placement]] = self._build_candidates()
        # Stable sort: equal candidate counts keep fleet order.
        self.order: List[int] = sorted(range(len(self.ships)), key=lambda i: len(self.candidates[i]))
        self._suffix_lengths = self._remaining_lengths()

    def _cell_mask(self, cells: Iterable[Cell]) -> np.ndarray:
        mask = np.zeros((self.height, self.width), dtype=bool)
        for r, c in cells:
            if not self.dims.contains(int(r), int(c)):
                raise ValueError(f"cell ({r}, {c}) is outside the board")
            mask[int(r), int(c)] = True
        return mask

    def _distance_grid(self) -> np.ndarray:
        """Manhattan distance from every cell to the nearest must-include cell."""
        rr, cc = np.indices((self.height, self.width))
        dist = np.full((self.height, self.width), np.iinfo(np.int64).max, dtype=np.int64)
        for r, c in self.must_cells:
            dist = np.minimum(dist, np.abs(rr - r) + np.abs(cc - c))
        return dist

    def _build_candidates(self) -> List[List[Placement]]:
        per_length = {}
        dist = self._distance_grid() if self.must_cells else None
        candidates: List[List[Placement]] = []
        for length in self.ships:
            if length not in per_length:
                placements = enumerate_all_placements(self.dims, length, self.excluded_grid)
                if dist is not None:
                    placements = sorted(
                        placements, key=lambda p: int(dist[placement_window(p)].min())
                    )
                per_length[length] = placements
            candidates.append(per_length[length])
        return candidates

    def _remaining_lengths(self) -> List[int]:
        """suffix[i] = total length of ships order[i:]."""
        suffix = [0] * (len(self.order) + 1)
        for idx in range(len(self.order) - 1, -1, -1):
            suffix[idx] = suffix[idx + 1] + self.ships[self.order[idx]]
        return suffix

    # ------------------------------------------------------------------
    def _is_legal(self, placement: Placement) -> bool:
        return not self._halo[placement_window(placement)].any()

    def _halo_window(self, placement: Placement):
        rows, cols = placement_window(placement)
        return (
            slice(max(rows.start - 1, 0), rows.stop + 1),
            slice(max(cols.start - 1, 0), cols.stop + 1),
        )

    def _place(self, placement: Placement) -> None:
        self._occupied[placement_window(placement)] = True
        self._halo[self._halo_window(placement)] += 1

    def _unplace(self, placement: Placement) -> None:
        self._occupied[placement_window(placement)] = False
        self._halo[self._halo_window(placement)] -= 1

    def _dead_end(self, idx: int) -> bool:
        """True when no completion of this partial configuration can be accepted.

        An uncovered must-include cell inside another ship's halo can never
        be covered later, and the remaining ships must have enough cells
        left to cover the rest. Pruning never changes which configurations
        are accepted, only how fast the search gets there.
        """
        if not self.must_cells:
            return False
        uncovered = self.must_grid & ~self._occupied
        if np.any(uncovered & (self._halo > 0)):
            return True
        return int(np.count_nonzero(uncovered)) > self._suffix_lengths[idx]

    def _accept(self) -> None:
        if self.must_cells and not np.all(self._occupied[self.must_grid]):
            return
        self.counts += self._occupied
        self.accepted += 1

    def _backtrack(self, idx: int) -> None:
        if self.accepted >= self.max_samples or self.budget_exhausted:
            return
        self.steps += 1
        if self.max_backtrack_steps is not None and self.steps > self.max_backtrack_steps:
            self.budget_exhausted = True
            return
        if self._dead_end(idx):
            return
        if idx == len(self.order):
            self._accept()
            return

        for placement in self.candidates[self.order[idx]]:
            if not self._is_legal(placement):
                continue
            self._place(placement)
            self._backtrack(idx + 1)
            self._unplace(placement)
            if self.accepted >= self.max_samples or self.budget_exhausted:
                break

    def run(self) -> np.ndarray:
        """Run the search once and return the raw occupancy counts."""
        if self.steps == 0:
            if np.any(self.must_grid & self.excluded_grid):
                logger.debug("Must-include cell is also excluded; nothing to sample")
            else:
                self._backtrack(0)
            logger.debug(
                "Sampler accepted %d/%d configurations in %d steps%s",
                self.accepted,
                self.max_samples,
                self.steps,
                " (budget exhausted)" if self.budget_exhausted else "",
            )
        return self.counts


def sample_counts(
    board_size: int | Sequence[int] | BoardDimensions,
    ships: Sequence[int],
    excluded: Iterable[Cell] = (),
    must_include: Iterable[Cell] = (),
    config: Optional[EngineConfig] = None,
) -> np.ndarray:
    cfg = config or DEFAULT_CONFIG
    dims = _normalize_board_size(board_size)
    sampler = PlacementSampler(
        dims,
        ships,
        excluded=excluded,
        must_include=must_include,
        max_samples=cfg.sample_cap(dims.rows, dims.cols),
        max_backtrack_steps=cfg.max_backtrack_steps,
    )
    return sampler.run()


def sample_heatmap(
    board_size: int | Sequence[int] | BoardDimensions,
    ships: Sequence[int],
    excluded: Iterable[Cell] = (),
    must_include: Iterable[Cell] = (),
    config: Optional[EngineConfig] = None,
) -> np.ndarray:
    """Occupancy probability per cell, normalised with the sampler's alpha."""
    cfg = config or DEFAULT_CONFIG
    counts = sample_counts(board_size, ships, excluded, must_include, cfg)
    return normalize_counts(counts, alpha=cfg.sampler_alpha)
