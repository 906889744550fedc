"""Value types shared by the board model and the scoring strategies."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Tuple, Union

Cell = Tuple[int, int]


class CellStatus(IntEnum):
    """Per-cell shot history. Codes match the status grid dtype values."""

    UNKNOWN = 0
    MISS = 1
    HIT = 2


class Mode(IntEnum):
    """Targeting phase of the caller."""

    SEARCH = 0
    TARGET = 1
    HUNT = 3

    @classmethod
    def coerce(cls, value: Union["Mode", int, str]) -> "Mode":
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"Unknown mode: {value!r}") from None
        return cls(int(value))


class Strategy(IntEnum):
    """Scoring algorithm; orthogonal to Mode."""

    RULE_BASED = 0
    MONTE_CARLO = 1

    @classmethod
    def coerce(cls, value: Union["Strategy", int, str]) -> "Strategy":
        if isinstance(value, str):
            try:
                return cls[value.strip().upper().replace("-", "_")]
            except KeyError:
                raise ValueError(f"Unknown strategy: {value!r}") from None
        return cls(int(value))


class Orientation(IntEnum):
    HORIZONTAL = 0
    VERTICAL = 1


@dataclass(frozen=True)
class BoardDimensions:
    rows: int
    cols: int

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.cols

    def contains(self, r: int, c: int) -> bool:
        return 0 <= r < self.rows and 0 <= c < self.cols


@dataclass(frozen=True)
class Placement:
    """A hypothetical ship occupying ``length`` consecutive cells."""

    row: int
    col: int
    length: int
    orientation: Orientation

    @property
    def origin(self) -> Cell:
        return self.row, self.col

    def cells(self) -> List[Cell]:
        if self.orientation == Orientation.HORIZONTAL:
            return [(self.row, self.col + i) for i in range(self.length)]
        return [(self.row + i, self.col) for i in range(self.length)]


@dataclass
class Ship:
    """One fleet instance. ``cells`` is filled in once the ship is sunk."""

    length: int
    sunk: bool = False
    cells: List[Cell] = field(default_factory=list)
