from __future__ import annotations

from typing import Callable, List, Sequence, Tuple, Union

import numpy as np

from sonar_probmap.board.models import BoardDimensions, Orientation, Placement
from sonar_probmap.errors import InvalidDimensions

BlockedPredicate = Union[np.ndarray, Callable[[int, int], bool]]


def _normalize_board_size(board_size: int | Sequence[int] | BoardDimensions) -> BoardDimensions:
    if isinstance(board_size, BoardDimensions):
        rows, cols = board_size.rows, board_size.cols
    elif isinstance(board_size, (int, np.integer)):
        rows, cols = int(board_size), int(board_size)
    else:
        if len(board_size) != 2:
            raise InvalidDimensions("board_size must be int or length-2 sequence")
        rows, cols = int(board_size[0]), int(board_size[1])
    if rows < 1 or cols < 1:
        raise InvalidDimensions(f"board must be at least 1x1, got {rows}x{cols}")
    return BoardDimensions(rows, cols)


def _normalize_ships(
    ships: Sequence[int], dims: BoardDimensions, check_fit: bool = True
) -> List[int]:
    """Validate fleet lengths against the board. An empty fleet is allowed."""
    lengths = [int(length) for length in ships]
    limit = min(dims.rows, dims.cols)
    for length in lengths:
        if length < 1:
            raise InvalidDimensions("ship lengths must be positive")
        if check_fit and length > limit:
            raise InvalidDimensions(
                f"ship length {length} exceeds min(rows, cols) = {limit}"
            )
    return lengths


def _blocked_mask(blocked: BlockedPredicate | None, dims: BoardDimensions) -> np.ndarray:
    if blocked is None:
        return np.zeros(dims.shape, dtype=bool)
    if callable(blocked):
        return np.array(
            [[bool(blocked(r, c)) for c in range(dims.cols)] for r in range(dims.rows)],
            dtype=bool,
        ).reshape(dims.shape)
    mask = np.asarray(blocked, dtype=bool)
    if mask.shape != dims.shape:
        raise ValueError(f"blocked mask shape {mask.shape} does not match board {dims.shape}")
    return mask


def _valid_mask_h(blocked: np.ndarray, length: int) -> np.ndarray:
    """(H, W-L+1) bool, True where a horizontal ship of `length` is unblocked."""
    H, W = blocked.shape
    if W < length:
        return np.zeros((H, 0), dtype=bool)
    windows = np.lib.stride_tricks.sliding_window_view(blocked, length, axis=1)
    return ~windows.any(axis=2)


def _valid_mask_v(blocked: np.ndarray, length: int) -> np.ndarray:
    """(H-L+1, W) bool, True where a vertical ship of `length` is unblocked."""
    H, W = blocked.shape
    if H < length:
        return np.zeros((0, W), dtype=bool)
    windows = np.lib.stride_tricks.sliding_window_view(blocked, length, axis=0)
    return ~windows.any(axis=2)


def enumerate_placements(
    board_size: int | Sequence[int] | BoardDimensions,
    length: int,
    orientation: Orientation,
    blocked: BlockedPredicate | None = None,
) -> List[Placement]:
    """List every placement of `length` / `orientation` whose cells are all unblocked.

    Horizontal placements are listed row by row, vertical ones column by
    column. The sampler's search order depends on this ordering.
    """
    dims = _normalize_board_size(board_size)
    mask = _blocked_mask(blocked, dims)
    placements: List[Placement] = []

    if orientation == Orientation.HORIZONTAL:
        valid = _valid_mask_h(mask, length)
        for r, c in np.argwhere(valid):
            placements.append(Placement(int(r), int(c), length, Orientation.HORIZONTAL))
    else:
        valid = _valid_mask_v(mask, length)
        # argwhere walks row-major; transpose so columns are the outer loop.
        for c, r in np.argwhere(valid.T):
            placements.append(Placement(int(r), int(c), length, Orientation.VERTICAL))
    return placements


def enumerate_all_placements(
    board_size: int | Sequence[int] | BoardDimensions,
    length: int,
    blocked: BlockedPredicate | None = None,
) -> List[Placement]:
    """Horizontal placements followed by vertical placements."""
    return enumerate_placements(
        board_size, length, Orientation.HORIZONTAL, blocked
    ) + enumerate_placements(board_size, length, Orientation.VERTICAL, blocked)


def placement_window(placement: Placement) -> Tuple[slice, slice]:
    """Index pair selecting the placement's cells from a (H, W) array."""
    if placement.orientation == Orientation.HORIZONTAL:
        return (
            slice(placement.row, placement.row + 1),
            slice(placement.col, placement.col + placement.length),
        )
    return (
        slice(placement.row, placement.row + placement.length),
        slice(placement.col, placement.col + 1),
    )
