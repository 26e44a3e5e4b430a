"""
Evaluation module for replaying tap sequences and scoring the estimate
against a known tempo.
"""

from typing import Iterable

import numpy as np
from pydantic import BaseModel, Field

from rhythmkey.core.estimator import DEFAULT_BPM, TempoEstimator
from rhythmkey.core.ground_truth import TapSequenceDefinition


class TracePoint(BaseModel):
    """Estimator state right after one tap."""

    time: float = Field(description="Tap time in seconds")
    bpm: float = Field(description="Estimated BPM after the tap")
    confidence: float = Field(ge=0, le=1, description="Confidence after the tap")
    accepted: bool = Field(description="Whether the tap interval entered the history")


class TempoMetrics(BaseModel):
    """Metrics for evaluating tempo tracking accuracy."""

    final_bpm: float = Field(default=0.0, description="Estimate after the last tap")
    absolute_error_bpm: float = Field(
        default=0.0, ge=0, description="Distance of the final estimate from truth"
    )
    mean_absolute_error_bpm: float = Field(
        default=0.0, ge=0, description="Mean distance over the second half of the trace"
    )
    final_confidence: float = Field(default=0.0, ge=0, le=1)
    accepted_taps: int = Field(default=0, ge=0)
    rejected_taps: int = Field(default=0, ge=0)
    settled_after_taps: int | None = Field(
        default=None, description="1-based tap from which the estimate stays in tolerance"
    )
    passed: bool = False


def replay(taps: Iterable[float], initial_bpm: float = DEFAULT_BPM) -> list[TracePoint]:
    """Feed ``taps`` through a fresh estimator and record its state after each one."""
    estimator = TempoEstimator(initial_bpm=initial_bpm)
    trace = []

    for t in taps:
        accepted = estimator.register_tap(float(t))
        trace.append(
            TracePoint(
                time=float(t),
                bpm=estimator.current_bpm,
                confidence=estimator.confidence,
                accepted=accepted,
            )
        )

    return trace


class Evaluator:
    """Evaluates estimator traces against ground truth."""

    @staticmethod
    def evaluate_trace(
        trace: list[TracePoint],
        expected_bpm: float,
        tolerance_bpm: float = 2.0,
        min_confidence: float = 0.5,
    ) -> TempoMetrics:
        """
        Evaluate an estimator trace against the expected tempo.

        Args:
            trace: Output of ``replay``
            expected_bpm: Ground truth tempo
            tolerance_bpm: Allowed final error in BPM
            min_confidence: Minimum final confidence to pass

        Returns:
            TempoMetrics object
        """
        if not trace:
            return TempoMetrics()

        bpms = np.array([p.bpm for p in trace])
        errors = np.abs(bpms - expected_bpm)
        within = errors <= tolerance_bpm

        # The first tap has no interval, so it is neither accepted nor rejected.
        accepted = sum(1 for p in trace if p.accepted)
        rejected = len(trace) - 1 - accepted

        if not within[-1]:
            settled = None
        elif within.all():
            settled = 1
        else:
            last_miss = int(np.flatnonzero(~within)[-1])
            settled = last_miss + 2

        final = trace[-1]
        tail = errors[len(errors) // 2 :]

        return TempoMetrics(
            final_bpm=final.bpm,
            absolute_error_bpm=float(errors[-1]),
            mean_absolute_error_bpm=float(np.mean(tail)),
            final_confidence=final.confidence,
            accepted_taps=accepted,
            rejected_taps=max(rejected, 0),
            settled_after_taps=settled,
            passed=bool(within[-1] and final.confidence >= min_confidence),
        )

    @staticmethod
    def evaluate_sequence(
        sequence: TapSequenceDefinition, initial_bpm: float | None = None
    ) -> tuple[list[TracePoint], TempoMetrics]:
        """Replay a sequence definition and score it against its own criteria."""
        if initial_bpm is None:
            initial_bpm = sequence.metadata.start_bpm or DEFAULT_BPM

        trace = replay(sequence.taps, initial_bpm=initial_bpm)
        metrics = Evaluator.evaluate_trace(
            trace,
            expected_bpm=sequence.metadata.bpm,
            tolerance_bpm=sequence.test_criteria.tempo_tolerance_bpm,
            min_confidence=sequence.test_criteria.min_confidence,
        )
        return trace, metrics
