"""
Tests for tap sequence generation, suites and evaluation.
"""

import json

import numpy as np
import pytest

from rhythmkey.core.evaluation import Evaluator, TempoMetrics, TracePoint, replay
from rhythmkey.core.ground_truth import (
    SequenceMetadata,
    TapSequenceDefinition,
)
from rhythmkey.core.tap_gen import (
    generate_human_taps,
    generate_idle_resume,
    generate_noisy_taps,
    generate_steady_taps,
    generate_tempo_change,
    insert_ghost_taps,
    insert_idle_gap,
)
from rhythmkey.suites.standard import StandardSuites


class TestPydanticModels:
    """Test Pydantic model validation."""

    def test_sequence_definition_serialization(self):
        seq_def = TapSequenceDefinition(
            sequence_type="steady",
            metadata=SequenceMetadata(bpm=120.0, description="Test", tap_count=2),
            taps=[0.0, 0.5],
        )
        json_str = seq_def.model_dump_json()
        assert "steady" in json_str
        assert "120.0" in json_str

    def test_sequence_definition_forbids_extra(self):
        with pytest.raises(ValueError):
            TapSequenceDefinition(
                sequence_type="steady",
                metadata=SequenceMetadata(bpm=120.0, description="Test", tap_count=0),
                unexpected=True,
            )

    def test_metrics_model_dump(self):
        metrics = TempoMetrics(final_bpm=119.5, absolute_error_bpm=0.5, passed=True)
        data = json.loads(metrics.model_dump_json())
        assert data["final_bpm"] == 119.5
        assert data["settled_after_taps"] is None


class TestGenerators:
    """Test synthetic tap sequence generators."""

    def test_steady_taps(self):
        taps, seq_def = generate_steady_taps(bpm=120, n_taps=8)
        assert len(taps) == 8
        assert np.allclose(np.diff(taps), 0.5)
        assert seq_def.metadata.bpm == 120
        assert seq_def.metadata.tap_count == 8

    def test_human_taps_are_reproducible(self):
        taps_a, def_a = generate_human_taps(bpm=100, n_taps=12, jitter_std_ms=10, rng_seed=1)
        taps_b, _ = generate_human_taps(bpm=100, n_taps=12, jitter_std_ms=10, rng_seed=1)
        assert np.array_equal(taps_a, taps_b)
        assert taps_a[0] == 0.0
        assert np.all(np.diff(taps_a) > 0)
        assert def_a.test_criteria.tempo_tolerance_bpm >= 2.0

    def test_ghost_taps(self):
        steady, _ = generate_steady_taps(bpm=120, n_taps=8)
        taps = insert_ghost_taps(steady, every=4, offset_s=0.05)
        assert len(taps) == 10
        assert np.all(np.diff(taps) >= 0)
        assert np.array_equal(insert_ghost_taps(steady, every=0), steady)

    def test_tempo_change(self):
        taps, seq_def = generate_tempo_change(120, 100, n_each=6)
        intervals = np.diff(taps)
        assert np.allclose(intervals[:5], 0.5)
        assert np.allclose(intervals[5:], 0.6)
        assert seq_def.metadata.bpm == 100
        assert seq_def.metadata.start_bpm == 120

    def test_idle_gap(self):
        steady, _ = generate_steady_taps(bpm=120, n_taps=6)
        taps = insert_idle_gap(steady, after_index=2, gap_s=3.0)
        assert np.diff(taps)[2] == pytest.approx(3.5)
        assert np.array_equal(steady[:3], taps[:3])


class TestEvaluator:
    """Test replay and trace evaluation."""

    def test_replay_records_every_tap(self):
        trace = replay([0.0, 0.5, 0.55, 1.0])
        assert [p.accepted for p in trace] == [False, True, False, True]
        assert trace[0].bpm == 125.0

    def test_steady_sequence_passes(self):
        _, seq_def = generate_steady_taps(bpm=120, n_taps=16)
        trace, metrics = Evaluator.evaluate_sequence(seq_def)

        assert len(trace) == 16
        assert metrics.passed
        assert metrics.final_confidence == 1.0
        assert metrics.accepted_taps == 15
        assert metrics.rejected_taps == 0
        assert metrics.absolute_error_bpm < 1.0
        assert metrics.settled_after_taps is not None

    def test_ghost_taps_are_rejected(self):
        _, seq_def = generate_noisy_taps(bpm=100, n_taps=16, ghost_every=4, offset_s=0.05)
        trace, metrics = Evaluator.evaluate_sequence(seq_def)

        assert len(trace) == 20
        assert metrics.rejected_taps == 4
        assert metrics.accepted_taps == 15

    def test_pause_resets_confidence_then_recovers(self):
        _, seq_def = generate_idle_resume(bpm=110, n_taps=16, gap_s=3.0)
        trace, metrics = Evaluator.evaluate_sequence(seq_def)

        assert trace[8].confidence == 0.0
        assert metrics.passed

    def test_settled_index(self):
        trace = [
            TracePoint(time=float(i), bpm=bpm, confidence=1.0, accepted=i > 0)
            for i, bpm in enumerate([125.0, 125.0, 121.5, 120.5, 120.2])
        ]
        metrics = Evaluator.evaluate_trace(trace, expected_bpm=120.0, tolerance_bpm=1.0)
        assert metrics.settled_after_taps == 4
        assert metrics.passed

        metrics = Evaluator.evaluate_trace(trace, expected_bpm=100.0, tolerance_bpm=1.0)
        assert metrics.settled_after_taps is None
        assert not metrics.passed

    def test_low_confidence_fails(self):
        trace = [TracePoint(time=0.0, bpm=120.0, confidence=0.3, accepted=False)]
        metrics = Evaluator.evaluate_trace(trace, expected_bpm=120.0, min_confidence=0.5)
        assert metrics.settled_after_taps == 1
        assert not metrics.passed

    def test_empty_trace(self):
        metrics = Evaluator.evaluate_trace([], expected_bpm=120.0)
        assert metrics == TempoMetrics()


class TestSuites:
    """Test the standard evaluation suites."""

    def test_suite_sizes(self):
        assert len(StandardSuites.get_suite("steady")) == 7
        assert len(StandardSuites.get_suite("human")) == 6
        assert len(StandardSuites.get_suite("noise")) == 3
        assert len(StandardSuites.get_suite("transition")) == 3
        assert len(StandardSuites.get_suite("all")) == 19

    def test_unknown_suite(self):
        with pytest.raises(ValueError):
            StandardSuites.get_suite("polka")

    def test_names_are_unique(self):
        names = [s.name for s in StandardSuites.get_suite("all")]
        assert len(names) == len(set(names))

    def test_steady_suite_passes(self):
        for sequence in StandardSuites.get_suite("steady"):
            _, metrics = Evaluator.evaluate_sequence(sequence.sequence_def)
            assert metrics.passed, sequence.name
