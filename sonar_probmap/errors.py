from __future__ import annotations

from typing import Optional, Tuple


class SonarError(Exception):
    """Base class for every error raised by the heatmap engine."""


class InvalidDimensions(SonarError, ValueError):
    """Board or fleet sizes that cannot form a playable board."""


class OutOfRange(SonarError, IndexError):
    """Coordinates (or a fleet index) outside the board."""


class NoValidPlacement(SonarError):
    """Hunt-mode line following ran off the grid.

    Recoverable: callers are expected to fall back to Search mode.
    """

    def __init__(self, message: str, anchor: Optional[Tuple[int, int]] = None) -> None:
        super().__init__(message)
        self.anchor = anchor


class InternalInconsistency(SonarError, RuntimeError):
    """The status grid disagrees with the fleet bookkeeping.

    Raised when a sunk ship's cells cannot be recovered from the hit runs
    through the final shot. The board update is aborted.
    """

    def __init__(
        self,
        message: str,
        cell: Tuple[int, int],
        expected_length: int,
        vertical_run: int,
        horizontal_run: int,
    ) -> None:
        super().__init__(message)
        self.cell = cell
        self.expected_length = expected_length
        self.vertical_run = vertical_run
        self.horizontal_run = horizontal_run


class CellAlreadyResolved(SonarError, ValueError):
    """A shot was recorded on a cell that is already a hit or a miss."""


class StaleSinkCandidate(SonarError, ValueError):
    """A sink confirmation does not match the board's pending candidate."""


class ConfigError(SonarError, ValueError):
    """Invalid engine configuration."""
