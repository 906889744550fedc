import numpy as np
import pytest

from sonar_probmap import add_ship, build, compute_heatmap, remove_ship
from sonar_probmap.board.models import Mode
from sonar_probmap.errors import InvalidDimensions, OutOfRange


def test_remove_ship_by_index():
    board = build(6, [4, 3, 2])
    removed = remove_ship(board, 1)
    assert removed.length == 3
    assert board.remaining_lengths() == [2, 4]


def test_remove_ship_bad_index():
    board = build(6, [4])
    with pytest.raises(OutOfRange):
        remove_ship(board, 1)
    with pytest.raises(OutOfRange):
        remove_ship(board, -1)


def test_add_ship_keeps_fleet_sorted():
    board = build(4, [4, 2])
    add_ship(board, 3)
    add_ship(board, 1)
    assert board.remaining_lengths() == [1, 2, 3, 4]
    with pytest.raises(InvalidDimensions):
        add_ship(board, 5)
    assert board.remaining_lengths() == [1, 2, 3, 4]


def test_heatmap_sees_fleet_edits():
    board = build((1, 1), [1])
    assert compute_heatmap(board, mode=Mode.SEARCH).max() > 0.0
    remove_ship(board, 0)
    assert compute_heatmap(board, mode=Mode.SEARCH).max() == 0.0


def test_sunk_ships_drop_out_of_remaining():
    board = build(5, [3, 2])
    board.record_hit(0, 0)
    board.record_hit(0, 1, confirm=lambda length: True)
    assert board.remaining_lengths() == [3]
    assert len(board.fleet) == 2


def test_build_sorts_fleet_ascending():
    board = build(5, [3, 2, 3, 1])
    assert board.remaining_lengths() == [1, 2, 3, 3]


def test_search_heatmap_independent_of_fleet_order():
    np.testing.assert_array_equal(
        compute_heatmap(build(5, [3, 2]), mode=Mode.SEARCH),
        compute_heatmap(build(5, [2, 3]), mode=Mode.SEARCH),
    )


def test_added_ship_scores_like_built_fleet():
    board = build(5, [3])
    add_ship(board, 2)
    np.testing.assert_array_equal(
        compute_heatmap(board, mode=Mode.SEARCH),
        compute_heatmap(build(5, [2, 3]), mode=Mode.SEARCH),
    )
