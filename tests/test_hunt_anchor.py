import numpy as np
import pytest

from sonar_probmap.board.models import CellStatus, Mode
from sonar_probmap.errors import NoValidPlacement
from sonar_probmap.heatmaps.rule_based import resolve_hunt_anchor, rule_based_heatmap


def _line_with_miss():
    # 1x6: hits at columns 2 and 3, miss at column 4.
    status = np.zeros((1, 6), dtype=np.int8)
    status[0, 2] = CellStatus.HIT
    status[0, 3] = CellStatus.HIT
    status[0, 4] = CellStatus.MISS
    return status


def test_follows_run_to_open_end():
    assert resolve_hunt_anchor(_line_with_miss(), 0, 3) == (0, 1)


def test_reverses_when_run_ends_in_miss():
    # From column 2 the first adjacent hit is to the right, where the line
    # ends in the miss at column 4; the far side of the run is column 1.
    assert resolve_hunt_anchor(_line_with_miss(), 0, 2) == (0, 1)


def test_hunt_heatmap_probes_far_side():
    probs = rule_based_heatmap(_line_with_miss(), [3], Mode.HUNT, 0, 3)
    np.testing.assert_allclose(probs, [[1 / 3, 1.0, 0.0, 0.0, 0.0, 0.0]])
    assert probs[0, 5] == 0.0


def test_vertical_run_checked_before_horizontal():
    status = np.zeros((5, 5), dtype=np.int8)
    for cell in [(2, 2), (1, 2), (2, 3)]:
        status[cell] = CellStatus.HIT
    # Up is the first direction with a hit neighbour.
    assert resolve_hunt_anchor(status, 2, 2) == (0, 2)


def test_both_ends_blocked_keeps_primary_cell():
    status = np.zeros((1, 5), dtype=np.int8)
    status[0, 1] = CellStatus.MISS
    status[0, 2] = CellStatus.HIT
    status[0, 3] = CellStatus.HIT
    status[0, 4] = CellStatus.MISS
    assert resolve_hunt_anchor(status, 0, 2) == (0, 4)


def test_isolated_hit_is_its_own_anchor():
    status = np.zeros((3, 3), dtype=np.int8)
    status[1, 1] = CellStatus.HIT
    assert resolve_hunt_anchor(status, 1, 1) == (1, 1)


def test_non_hit_anchor_unchanged():
    status = np.zeros((3, 3), dtype=np.int8)
    status[1, 1] = CellStatus.MISS
    assert resolve_hunt_anchor(status, 1, 1) == (1, 1)


def test_hunt_anchored_on_the_miss_scores_nothing():
    # An anchor on the miss itself is not followed along the run, and every
    # placement through it covers the miss.
    status = _line_with_miss()
    assert resolve_hunt_anchor(status, 0, 4) == (0, 4)
    probs = rule_based_heatmap(status, [3], Mode.HUNT, 0, 4)
    np.testing.assert_array_equal(probs, np.zeros((1, 6)))


def test_run_into_edge_raises_no_valid_placement():
    status = np.zeros((1, 5), dtype=np.int8)
    status[0, 0] = CellStatus.HIT
    status[0, 1] = CellStatus.HIT
    status[0, 2] = CellStatus.MISS
    with pytest.raises(NoValidPlacement) as excinfo:
        resolve_hunt_anchor(status, 0, 1)
    assert excinfo.value.anchor == (0, 1)


def test_no_valid_placement_surfaces_from_heatmap():
    status = np.zeros((1, 5), dtype=np.int8)
    status[0, 0] = CellStatus.HIT
    status[0, 1] = CellStatus.HIT
    status[0, 2] = CellStatus.MISS
    with pytest.raises(NoValidPlacement):
        rule_based_heatmap(status, [3], Mode.HUNT, 0, 1)
    # Target mode does not follow the line and never raises.
    rule_based_heatmap(status, [3], Mode.TARGET, 0, 1)
