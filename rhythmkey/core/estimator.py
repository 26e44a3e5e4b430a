"""
Tap Tempo Estimator

This module turns a stream of manual tap timestamps into a smoothed BPM
estimate. Valid inter-tap intervals are kept in a bounded window, grouped
into clusters of similar intervals, and the best supported cluster is
blended into the running estimate with confidence-adaptive smoothing.
"""

from collections import deque
from dataclasses import dataclass

from loguru import logger

MIN_BPM = 30.0
MAX_BPM = 300.0
MIN_VALID_INTERVAL = 0.2  # 300 BPM
MAX_VALID_INTERVAL = 2.0  # 30 BPM
MAX_HISTORY_SIZE = 12
CLUSTER_TOLERANCE = 0.05
DEFAULT_BPM = 125.0


@dataclass(frozen=True)
class TapSample:
    """An accepted tap and the interval since the previous tap."""

    timestamp: float
    interval: float


@dataclass
class IntervalCluster:
    """A group of similar intervals keyed by the first interval that opened it."""

    representative_interval: float
    weight: float

    @property
    def bpm(self) -> float:
        return 60.0 / self.representative_interval


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def clamp(value: float, low: float = MIN_BPM, high: float = MAX_BPM) -> float:
    return min(max(value, low), high)


def cluster_intervals(
    intervals: list[float], tolerance: float = CLUSTER_TOLERANCE
) -> list[IntervalCluster]:
    """
    Group intervals into clusters and normalize their weights.

    Each interval joins the first cluster whose representative lies closer
    than ``tolerance``; otherwise it opens a new cluster. Representatives
    never move, so the result depends on the order of the intervals.

    Args:
        intervals: Interval values in seconds, oldest first
        tolerance: Maximum absolute difference (exclusive) in seconds

    Returns:
        Clusters in creation order, weights summing to 1.0
    """
    clusters: list[IntervalCluster] = []

    for interval in intervals:
        for cluster in clusters:
            if abs(cluster.representative_interval - interval) < tolerance:
                cluster.weight += 1
                break
        else:
            clusters.append(IntervalCluster(representative_interval=interval, weight=1))

    total = sum(c.weight for c in clusters)
    for cluster in clusters:
        cluster.weight /= total

    return clusters


def dominant_cluster(clusters: list[IntervalCluster]) -> IntervalCluster | None:
    """Return the heaviest cluster, keeping the first one on ties."""
    best = None
    for cluster in clusters:
        if best is None or cluster.weight > best.weight:
            best = cluster
    return best


def smoothing_factor(history_size: int, confidence: float) -> float:
    """Blend weight toward the new target: 0.8 when sparse, 0.2 when full and sure."""
    history_weight = history_size / MAX_HISTORY_SIZE
    return lerp(0.8, 0.2, history_weight * confidence)


class TempoEstimator:
    """
    Real-time BPM estimator fed by tap timestamps.

    Not thread-safe; wrap it in a ``TapSession`` when several callers
    share one instance.
    """

    def __init__(self, initial_bpm: float = DEFAULT_BPM):
        self._current_bpm = clamp(initial_bpm)
        self._confidence = 0.0
        self._last_tap_time: float | None = None
        self._history: deque[TapSample] = deque(maxlen=MAX_HISTORY_SIZE)

    @property
    def current_bpm(self) -> float:
        return self._current_bpm

    @current_bpm.setter
    def current_bpm(self, bpm: float) -> None:
        self._current_bpm = clamp(bpm)

    @property
    def confidence(self) -> float:
        return self._confidence

    @property
    def last_tap_time(self) -> float | None:
        return self._last_tap_time

    @property
    def history(self) -> tuple[TapSample, ...]:
        return tuple(self._history)

    def register_tap(self, now: float) -> bool:
        """
        Register a tap at ``now`` (seconds on a monotonic clock).

        Returns:
            True if the interval to the previous tap entered the history
        """
        previous = self._last_tap_time
        accepted = False

        if previous is not None:
            interval = now - previous
            if MIN_VALID_INTERVAL <= interval <= MAX_VALID_INTERVAL:
                self._history.append(TapSample(timestamp=now, interval=interval))
                accepted = True
                self._update_bpm()
            else:
                logger.debug(f"Discarded tap with interval {interval:.3f}s")

        self._last_tap_time = now

        if previous is not None and now - previous > MAX_VALID_INTERVAL:
            self.reset()

        return accepted

    def reset(self) -> None:
        """Clear history and confidence. The BPM and last tap time are kept."""
        if self._history:
            logger.debug(f"Resetting tap history ({len(self._history)} samples)")
        self._history.clear()
        self._confidence = 0.0

    def clusters(self) -> list[IntervalCluster]:
        """Clusters for the current history window."""
        return cluster_intervals([sample.interval for sample in self._history])

    def _update_bpm(self) -> None:
        if len(self._history) < 2:
            return

        dominant = dominant_cluster(self.clusters())
        if dominant is None:
            return

        self._confidence = dominant.weight
        factor = smoothing_factor(len(self._history), self._confidence)
        self._current_bpm = clamp(lerp(self._current_bpm, dominant.bpm, factor))
