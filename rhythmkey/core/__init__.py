"""Core tempo estimation and session functionality."""

from .estimator import (
    IntervalCluster,
    TapSample,
    TempoEstimator,
    cluster_intervals,
    dominant_cluster,
)
from .evaluation import Evaluator, TempoMetrics, TracePoint, replay
from .keys import MusicKey, key_grid
from .metronome import MetronomeScheduler
from .session import TapSession, TempoReading

__all__ = [
    # Estimator
    "TempoEstimator",
    "TapSample",
    "IntervalCluster",
    "cluster_intervals",
    "dominant_cluster",
    # Session
    "TapSession",
    "TempoReading",
    "MetronomeScheduler",
    # Keys
    "MusicKey",
    "key_grid",
    # Evaluation
    "Evaluator",
    "TempoMetrics",
    "TracePoint",
    "replay",
]
