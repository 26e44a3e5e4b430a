"""
Tests for the tap tempo estimator.
"""

import numpy as np
import pytest

from rhythmkey.core.estimator import (
    MAX_BPM,
    MAX_HISTORY_SIZE,
    MAX_VALID_INTERVAL,
    MIN_BPM,
    MIN_VALID_INTERVAL,
    IntervalCluster,
    TempoEstimator,
    clamp,
    cluster_intervals,
    dominant_cluster,
    lerp,
    smoothing_factor,
)


def tap_all(estimator: TempoEstimator, times: list[float]) -> list[float]:
    """Register every tap and return the BPM after each one."""
    bpms = []
    for t in times:
        estimator.register_tap(t)
        bpms.append(estimator.current_bpm)
    return bpms


class TestHelpers:
    """Test the pure numeric helpers."""

    def test_lerp(self):
        assert lerp(0.8, 0.2, 0.0) == 0.8
        assert lerp(0.8, 0.2, 1.0) == pytest.approx(0.2)
        assert lerp(100.0, 120.0, 0.5) == 110.0

    def test_clamp(self):
        assert clamp(500.0) == MAX_BPM
        assert clamp(10.0) == MIN_BPM
        assert clamp(128.0) == 128.0

    def test_smoothing_factor_bounds(self):
        """Sparse or unsure history follows the target; full and sure history is sticky."""
        assert smoothing_factor(0, 1.0) == pytest.approx(0.8)
        assert smoothing_factor(12, 0.0) == pytest.approx(0.8)
        assert smoothing_factor(12, 1.0) == pytest.approx(0.2)
        assert smoothing_factor(6, 0.5) == pytest.approx(0.65)


class TestClustering:
    """Test interval clustering and dominant cluster selection."""

    def test_similar_intervals_merge(self):
        clusters = cluster_intervals([0.5, 0.52, 0.5, 0.52])
        assert len(clusters) == 1
        assert clusters[0].representative_interval == 0.5
        assert clusters[0].weight == pytest.approx(1.0)

    def test_representative_is_fixed_at_creation(self):
        """0.58 is within tolerance of 0.54 but not of the 0.5 representative."""
        clusters = cluster_intervals([0.5, 0.54, 0.58])
        assert [c.representative_interval for c in clusters] == [0.5, 0.58]
        assert clusters[0].weight == pytest.approx(2 / 3)
        assert clusters[1].weight == pytest.approx(1 / 3)

    def test_clustering_depends_on_order(self):
        clusters = cluster_intervals([0.54, 0.5, 0.58])
        assert len(clusters) == 1
        assert clusters[0].representative_interval == 0.54

    def test_distinct_intervals_split(self):
        clusters = cluster_intervals([0.5, 0.5625, 0.53125])
        assert [c.representative_interval for c in clusters] == [0.5, 0.5625]
        assert clusters[0].weight == pytest.approx(2 / 3)

    def test_weights_sum_to_one(self):
        rng = np.random.default_rng(7)
        intervals = list(rng.uniform(MIN_VALID_INTERVAL, MAX_VALID_INTERVAL, size=12))
        clusters = cluster_intervals(intervals)
        assert sum(c.weight for c in clusters) == pytest.approx(1.0)

    def test_tie_keeps_first_cluster(self):
        assert dominant_cluster(cluster_intervals([0.5, 0.8])).representative_interval == 0.5
        assert dominant_cluster(cluster_intervals([0.8, 0.5])).representative_interval == 0.8

    def test_dominant_of_empty(self):
        assert dominant_cluster([]) is None

    def test_cluster_bpm(self):
        assert IntervalCluster(representative_interval=0.5, weight=1.0).bpm == 120.0


class TestRegisterTap:
    """Test tap validation, history and BPM updates."""

    def test_initial_state(self):
        estimator = TempoEstimator()
        assert estimator.current_bpm == 125.0
        assert estimator.confidence == 0.0
        assert estimator.last_tap_time is None
        assert estimator.history == ()

    def test_first_tap_only_sets_time(self):
        estimator = TempoEstimator()
        assert estimator.register_tap(10.0) is False
        assert estimator.last_tap_time == 10.0
        assert estimator.history == ()

    def test_single_interval_does_not_update(self):
        """Fewer than two samples leaves the estimate untouched."""
        estimator = TempoEstimator()
        assert tap_all(estimator, [0.0, 0.5]) == [125.0, 125.0]
        assert len(estimator.history) == 1
        assert estimator.confidence == 0.0

    def test_first_update_value(self):
        estimator = TempoEstimator()
        tap_all(estimator, [0.0, 0.5, 1.0])
        # smoothing = lerp(0.8, 0.2, 2/12 * 1.0) = 0.7
        assert estimator.current_bpm == pytest.approx(125.0 + (120.0 - 125.0) * 0.7)
        assert estimator.confidence == 1.0

    def test_interval_bounds_are_inclusive(self):
        estimator = TempoEstimator()
        assert tap_all(estimator, [0.0, 0.2]) == [125.0, 125.0]
        assert estimator.history[-1].interval == 0.2

        estimator = TempoEstimator()
        estimator.register_tap(0.0)
        assert estimator.register_tap(2.0) is True
        assert len(estimator.history) == 1

    def test_backwards_timestamp_is_discarded(self):
        estimator = TempoEstimator()
        tap_all(estimator, [5.0, 4.0])
        assert estimator.history == ()
        assert estimator.last_tap_time == 4.0

    def test_history_is_fifo(self):
        estimator = TempoEstimator()
        times = [k * 0.5 for k in range(MAX_HISTORY_SIZE + 2)]
        tap_all(estimator, times)

        history = estimator.history
        assert len(history) == MAX_HISTORY_SIZE
        # The sample of the tap at 0.5s was evicted by the 13th sample
        assert history[0].timestamp == 1.0
        assert history[-1].timestamp == times[-1]

    def test_samples_are_immutable(self):
        estimator = TempoEstimator()
        tap_all(estimator, [0.0, 0.5])
        with pytest.raises(AttributeError):
            estimator.history[0].interval = 1.0


class TestScenarios:
    """End-to-end tapping scenarios."""

    def test_convergence(self):
        """Taps every 0.5s converge monotonically toward 120 BPM."""
        estimator = TempoEstimator()
        bpms = tap_all(estimator, [0.0, 0.5, 1.0, 1.5, 2.0, 2.5])

        updating = bpms[2:]
        assert all(b >= 120.0 for b in updating)
        assert all(a > b for a, b in zip(updating, updating[1:]))
        assert bpms[-1] == pytest.approx(120.0945)
        assert estimator.confidence == 1.0

    def test_noise_rejection(self):
        """A tap 0.05s after the previous one changes nothing but the last tap time."""
        estimator = TempoEstimator()
        tap_all(estimator, [0.0, 0.5, 1.0, 1.5])
        bpm, confidence, size = estimator.current_bpm, estimator.confidence, len(estimator.history)

        assert estimator.register_tap(1.55) is False

        assert estimator.current_bpm == bpm
        assert estimator.confidence == confidence
        assert len(estimator.history) == size
        assert estimator.last_tap_time == 1.55

    def test_idle_reset_keeps_bpm(self):
        estimator = TempoEstimator()
        tap_all(estimator, [0.0, 0.5, 1.0, 1.5, 2.0, 2.5])
        bpm = estimator.current_bpm

        estimator.register_tap(5.0)

        assert estimator.history == ()
        assert estimator.confidence == 0.0
        assert estimator.current_bpm == bpm
        assert estimator.last_tap_time == 5.0

    def test_tapping_resumes_after_reset(self):
        estimator = TempoEstimator()
        tap_all(estimator, [0.0, 0.5, 1.0, 1.5, 5.0, 5.75, 6.5])
        assert len(estimator.history) == 2
        assert estimator.confidence == 1.0
        assert estimator.current_bpm < 120.0

    def test_direct_write_is_clamped(self):
        estimator = TempoEstimator()
        estimator.current_bpm = 500
        assert estimator.current_bpm == MAX_BPM
        estimator.current_bpm = 5
        assert estimator.current_bpm == MIN_BPM

    def test_blend_respects_ceiling(self):
        estimator = TempoEstimator()
        estimator.current_bpm = 500
        bpms = tap_all(estimator, [k * 0.2 for k in range(8)])
        assert all(b <= MAX_BPM for b in bpms)

    def test_blend_starts_from_written_value(self):
        estimator = TempoEstimator()
        tap_all(estimator, [0.0, 0.5, 1.0])
        estimator.current_bpm = 100.0
        history, confidence = estimator.history, estimator.confidence

        assert estimator.history == history
        assert estimator.confidence == confidence

        estimator.register_tap(1.5)
        # smoothing = lerp(0.8, 0.2, 3/12 * 1.0) = 0.65
        assert estimator.current_bpm == pytest.approx(100.0 + 20.0 * 0.65)

    def test_mixed_tempo(self):
        """0.5s and 0.52s merge; a single 0.7s interval stays a minority."""
        intervals = [0.5, 0.52, 0.5, 0.52, 0.5, 0.52, 0.7, 0.5]
        times = list(np.concatenate([[0.0], np.cumsum(intervals)]))

        estimator = TempoEstimator()
        tap_all(estimator, times)

        clusters = estimator.clusters()
        assert len(clusters) == 2
        assert clusters[0].representative_interval == pytest.approx(0.5)
        assert clusters[0].weight == pytest.approx(7 / 8)
        assert clusters[1].representative_interval == pytest.approx(0.7)
        assert estimator.confidence == pytest.approx(7 / 8)
        assert abs(estimator.current_bpm - 120.0) < 2.0


class TestInvariants:
    """Random tap sequences never break the estimator's invariants."""

    @pytest.mark.parametrize("seed", range(10))
    def test_random_sequences(self, seed):
        rng = np.random.default_rng(seed)
        estimator = TempoEstimator(initial_bpm=float(rng.uniform(0, 600)))
        t = 0.0

        for delta in rng.uniform(-0.5, 3.0, size=200):
            t += float(delta)
            estimator.register_tap(t)

            assert MIN_BPM <= estimator.current_bpm <= MAX_BPM
            assert 0.0 <= estimator.confidence <= 1.0
            assert len(estimator.history) <= MAX_HISTORY_SIZE
            for sample in estimator.history:
                assert MIN_VALID_INTERVAL <= sample.interval <= MAX_VALID_INTERVAL

            clusters = estimator.clusters()
            if clusters:
                assert sum(c.weight for c in clusters) == pytest.approx(1.0)
