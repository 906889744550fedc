"""
test_monte_carlo_sampler.py — occupancy counts of the backtracking sampler
on boards small enough to enumerate by hand.
"""
import numpy as np
import pytest

from sonar_probmap.config import EngineConfig
from sonar_probmap.heatmaps.monte_carlo import PlacementSampler, sample_counts, sample_heatmap


def test_single_ship_counts_every_placement():
    counts = sample_counts((1, 5), [3])
    assert counts.tolist() == [[1, 2, 3, 2, 1]]


def test_single_ship_heatmap_uses_additive_smoothing():
    probs = sample_heatmap((1, 5), [3])
    np.testing.assert_allclose(probs, [[0.5, 0.75, 1.0, 0.75, 0.5]])


def test_ships_never_touch():
    # Two 1-cell ships on a 1x3 strip can only sit at the two ends; each
    # length-1 ship is counted once per orientation.
    counts = sample_counts((1, 3), [1, 1])
    assert counts.tolist() == [[8, 0, 8]]


def test_must_include_cell_is_always_covered():
    probs = sample_heatmap((1, 5), [2], must_include=[(0, 4)])
    np.testing.assert_allclose(probs, [[0.5, 0.5, 0.5, 1.0, 1.0]])


def test_excluded_cell_is_never_covered():
    counts = sample_counts((1, 5), [2], excluded=[(0, 2)])
    assert counts.tolist() == [[1, 1, 0, 1, 1]]
    probs = sample_heatmap((1, 5), [2], excluded=[(0, 2)])
    np.testing.assert_allclose(probs, [[1.0, 1.0, 0.5, 1.0, 1.0]])


def test_hit_in_open_water_spreads_to_neighbours():
    probs = sample_heatmap((5, 5), [2], must_include=[(2, 2)])
    assert probs[2, 2] == pytest.approx(1.0)
    for r, c in [(1, 2), (3, 2), (2, 1), (2, 3)]:
        assert probs[r, c] == pytest.approx(0.4)
    assert probs[0, 0] == pytest.approx(0.2)
    assert probs[1, 1] == pytest.approx(0.2)


def test_cap_stops_after_first_configuration():
    sampler = PlacementSampler((1, 5), [2], max_samples=1)
    counts = sampler.run()
    assert sampler.accepted == 1
    assert counts.tolist() == [[1, 1, 0, 0, 0]]


def test_candidates_nearest_forced_cell_tried_first():
    sampler = PlacementSampler((1, 8), [2], must_include=[(0, 7)], max_samples=1)
    assert sampler.run().tolist() == [[0, 0, 0, 0, 0, 0, 1, 1]]


def test_most_constrained_ship_placed_first():
    sampler = PlacementSampler((3, 8), [1, 3], max_samples=1)
    assert [len(c) for c in sampler.candidates] == [48, 26]
    assert sampler.order == [1, 0]
    expected = np.zeros((3, 8), dtype=np.int64)
    # The 3-ship takes the first slot; the 1-ship the first cell clear of its halo.
    expected[0, 0:3] = 1
    expected[0, 4] = 1
    np.testing.assert_array_equal(sampler.run(), expected)


def test_backtrack_budget_can_exhaust_before_any_accept():
    sampler = PlacementSampler((1, 5), [2], max_backtrack_steps=1)
    counts = sampler.run()
    assert sampler.budget_exhausted
    assert sampler.accepted == 0
    assert counts.sum() == 0


def test_run_is_not_repeated():
    sampler = PlacementSampler((1, 5), [3])
    first = sampler.run().copy()
    second = sampler.run()
    np.testing.assert_array_equal(first, second)


def test_default_cap_follows_board_area():
    assert PlacementSampler((10, 10), [2]).max_samples == 1600
    assert PlacementSampler((50, 50), [2]).max_samples == 8000


def test_empty_fleet_gives_uniform_ones():
    probs = sample_heatmap((3, 4), [])
    np.testing.assert_array_equal(probs, np.ones((3, 4)))


def test_impossible_evidence_gives_uniform_ones():
    # A forced cell that is also excluded admits no configuration.
    probs = sample_heatmap((1, 5), [2], excluded=[(0, 1)], must_include=[(0, 1)])
    np.testing.assert_array_equal(probs, np.ones((1, 5)))


def test_unreachable_must_include_yields_no_accepts():
    sampler = PlacementSampler((1, 5), [2], must_include=[(0, 0), (0, 4)])
    assert sampler.run().sum() == 0
    assert sampler.accepted == 0


def test_forced_cell_is_covered_by_every_accept():
    counts = sample_counts((4, 4), [2, 2], must_include=[(3, 3)])
    assert counts[3, 3] == counts.max()
    assert counts[3, 3] > 0


def test_configured_alpha_is_applied():
    cfg = EngineConfig(sampler_alpha=0.0)
    probs = sample_heatmap((1, 5), [3], config=cfg)
    np.testing.assert_allclose(probs, [[1 / 3, 2 / 3, 1.0, 2 / 3, 1 / 3]])


def test_configured_cap_is_applied():
    cfg = EngineConfig(sample_cap_base=1, sample_cap_per_cell=0)
    counts = sample_counts((1, 5), [2], config=cfg)
    assert counts.tolist() == [[1, 1, 0, 0, 0]]


def test_off_board_cells_rejected():
    with pytest.raises(ValueError):
        PlacementSampler((3, 3), [2], excluded=[(3, 0)])
