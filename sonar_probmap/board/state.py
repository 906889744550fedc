from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Set, Tuple

import numpy as np

from sonar_probmap.board.models import BoardDimensions, Cell, CellStatus, Mode, Ship
from sonar_probmap.board.placement import _normalize_board_size, _normalize_ships
from sonar_probmap.board.sinking import longest_hit_run, perimeter_cells, resolve_ship_cells
from sonar_probmap.errors import CellAlreadyResolved, OutOfRange, StaleSinkCandidate

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[int], bool]


@dataclass(frozen=True)
class SinkCandidate:
    """An unsunk ship length matching the hit run through ``cell``."""

    length: int
    cell: Cell


@dataclass(frozen=True)
class HitOutcome:
    mode: Mode
    sunk_candidate_length: Optional[int] = None
    sunk_confirmed: bool = False
    candidate: Optional[SinkCandidate] = None
    sunk_cells: Tuple[Cell, ...] = ()


@dataclass(frozen=True)
class MissOutcome:
    mode: Mode
    anchor: Optional[Cell] = None


@dataclass(frozen=True)
class SinkOutcome:
    length: int
    sunk_confirmed: bool
    mode: Mode
    cells: Tuple[Cell, ...] = ()
    perimeter: Tuple[Cell, ...] = ()


class BoardState:
    """Canonical shot history and fleet bookkeeping for one game.

    The status grid is the only record of revealed cells; ``Fleet.sunk``
    and the status grid are mutated only through the shot-recording
    methods below. Not safe for concurrent use.
    """

    def __init__(self, dimensions: int | Sequence[int] | BoardDimensions, fleet: Sequence[int]) -> None:
        self.dimensions = _normalize_board_size(dimensions)
        # Kept sorted ascending: Search-mode discounting depends on length order.
        self.fleet: List[Ship] = [
            Ship(length) for length in sorted(_normalize_ships(fleet, self.dimensions))
        ]
        self.status = np.zeros(self.dimensions.shape, dtype=np.int8)
        self.mode = Mode.SEARCH
        self.last_hit: Optional[Cell] = None
        self.pending_sink: Optional[SinkCandidate] = None

    @property
    def rows(self) -> int:
        return self.dimensions.rows

    @property
    def cols(self) -> int:
        return self.dimensions.cols

    @property
    def anchor(self) -> Cell:
        """Target/Hunt coordinate: the last hit, or (0, 0) before any hit."""
        if self.mode == Mode.SEARCH or self.last_hit is None:
            return (0, 0)
        return self.last_hit

    def cell_status(self, r: int, c: int) -> CellStatus:
        self._check_cell(r, c)
        return CellStatus(int(self.status[r, c]))

    def remaining_lengths(self) -> List[int]:
        return [ship.length for ship in self.fleet if not ship.sunk]

    def sunk_cells(self) -> Set[Cell]:
        return {cell for ship in self.fleet if ship.sunk for cell in ship.cells}

    def sampler_inputs(self) -> Tuple[Set[Cell], Set[Cell]]:
        """(excluded, must_include) cell sets for the Monte-Carlo sampler.

        Cells of confirmed-sunk ships are excluded rather than required,
        since their ships are no longer part of the searched fleet.
        """
        sunk = self.sunk_cells()
        misses = {(int(r), int(c)) for r, c in np.argwhere(self.status == CellStatus.MISS)}
        hits = {(int(r), int(c)) for r, c in np.argwhere(self.status == CellStatus.HIT)}
        return misses | sunk, hits - sunk

    def _check_cell(self, r: int, c: int) -> None:
        if not self.dimensions.contains(r, c):
            raise OutOfRange(f"cell ({r}, {c}) is outside the {self.rows}x{self.cols} board")

    def _check_unresolved(self, r: int, c: int) -> None:
        self._check_cell(r, c)
        if self.status[r, c] != CellStatus.UNKNOWN:
            raise CellAlreadyResolved(
                f"cell ({r}, {c}) is already {CellStatus(int(self.status[r, c])).name}"
            )

    # ------------------------------------------------------------------
    # Shot recording
    # ------------------------------------------------------------------
    def record_miss(self, r: int, c: int) -> MissOutcome:
        self._check_unresolved(r, c)
        self.pending_sink = None
        self.status[r, c] = CellStatus.MISS
        if self.mode in (Mode.TARGET, Mode.HUNT):
            # Hunt keeps probing around the previous hit, not the miss.
            self.mode = Mode.HUNT
            logger.debug("Miss at (%d, %d); hunting from %s", r, c, self.last_hit)
            return MissOutcome(mode=self.mode, anchor=self.last_hit)
        logger.debug("Miss at (%d, %d) while searching", r, c)
        return MissOutcome(mode=self.mode)

    def record_hit(self, r: int, c: int, confirm: Optional[ConfirmCallback] = None) -> HitOutcome:
        """Mark (r, c) as a hit and look for a ship the hit run could complete.

        Without `confirm` a matching candidate is left pending for
        :meth:`confirm_sink` / :meth:`decline_sink`; with it the caller's
        decision is applied immediately.
        """
        self._check_unresolved(r, c)
        self.pending_sink = None
        self.status[r, c] = CellStatus.HIT
        self.last_hit = (r, c)
        self.mode = Mode.TARGET

        run = longest_hit_run(self.status, r, c)
        logger.debug("Hit at (%d, %d); longest run %d", r, c, run)
        if run not in self.remaining_lengths():
            return HitOutcome(mode=self.mode)

        candidate = SinkCandidate(length=run, cell=(r, c))
        self.pending_sink = candidate
        if confirm is None:
            return HitOutcome(mode=self.mode, sunk_candidate_length=run, candidate=candidate)

        if not confirm(run):
            self.decline_sink()
            return HitOutcome(mode=self.mode, sunk_candidate_length=run)

        sunk = self.confirm_sink(candidate)
        return HitOutcome(
            mode=sunk.mode,
            sunk_candidate_length=run,
            sunk_confirmed=sunk.sunk_confirmed,
            sunk_cells=sunk.cells,
        )

    def confirm_sink(self, candidate: Optional[SinkCandidate] = None) -> SinkOutcome:
        """Apply a pending sink: mark the ship sunk and its perimeter as misses.

        Raises InternalInconsistency (leaving the board untouched) when
        neither hit run through the candidate cell has the ship's length.
        """
        pending = self.pending_sink
        if pending is None or (candidate is not None and candidate != pending):
            raise StaleSinkCandidate(f"no pending sink matches {candidate}")

        ship = next((s for s in self.fleet if not s.sunk and s.length == pending.length), None)
        if ship is None:
            logger.warning("Sink confirmed for length %d but no such ship remains", pending.length)
            self.pending_sink = None
            return SinkOutcome(length=pending.length, sunk_confirmed=False, mode=self.mode)

        r, c = pending.cell
        cells = resolve_ship_cells(self.status, r, c, pending.length)
        perimeter = perimeter_cells(self.status, cells)

        ship.sunk = True
        ship.cells = list(cells)
        for pr, pc in perimeter:
            self.status[pr, pc] = CellStatus.MISS
        self.mode = Mode.SEARCH
        self.pending_sink = None
        logger.info("Ship of length %d sunk at %s", pending.length, cells)
        return SinkOutcome(
            length=pending.length,
            sunk_confirmed=True,
            mode=self.mode,
            cells=tuple(cells),
            perimeter=tuple(perimeter),
        )

    def decline_sink(self) -> None:
        self.pending_sink = None

    # ------------------------------------------------------------------
    # Fleet edits
    # ------------------------------------------------------------------
    def add_ship(self, length: int) -> Ship:
        (checked,) = _normalize_ships([length], self.dimensions)
        ship = Ship(checked)
        index = bisect.bisect_right([s.length for s in self.fleet], checked)
        self.fleet.insert(index, ship)
        return ship

    def remove_ship(self, index: int) -> Ship:
        if not 0 <= index < len(self.fleet):
            raise OutOfRange(f"fleet has no ship at index {index}")
        return self.fleet.pop(index)


def build(dimensions: int | Sequence[int] | BoardDimensions, fleet_lengths: Sequence[int]) -> BoardState:
    return BoardState(dimensions, fleet_lengths)


def record_hit(board: BoardState, r: int, c: int, confirm: Optional[ConfirmCallback] = None) -> HitOutcome:
    return board.record_hit(r, c, confirm=confirm)


def record_miss(board: BoardState, r: int, c: int) -> MissOutcome:
    return board.record_miss(r, c)


def confirm_sink(board: BoardState, candidate: Optional[SinkCandidate] = None) -> SinkOutcome:
    return board.confirm_sink(candidate)


def decline_sink(board: BoardState) -> None:
    board.decline_sink()


def add_ship(board: BoardState, length: int) -> Ship:
    return board.add_ship(length)


def remove_ship(board: BoardState, index: int) -> Ship:
    return board.remove_ship(index)


def sampler_inputs(board: BoardState) -> Tuple[Set[Cell], Set[Cell]]:
    return board.sampler_inputs()
