"""
Synthetic tap sequence generators.

Each generator returns the tap times as a numpy array together with a
TapSequenceDefinition that records the tempo the sequence is built on,
so the estimator can be checked against a known answer.
"""

import numpy as np
from loguru import logger

from rhythmkey.core.ground_truth import (
    SequenceMetadata,
    TapSequenceDefinition,
    TestCriteria,
)


def _definition(
    sequence_type: str,
    taps: np.ndarray,
    bpm: float,
    description: str,
    criteria: TestCriteria,
    start_bpm: float | None = None,
) -> TapSequenceDefinition:
    return TapSequenceDefinition(
        sequence_type=sequence_type,
        metadata=SequenceMetadata(
            bpm=bpm,
            description=description,
            tap_count=len(taps),
            start_bpm=start_bpm,
        ),
        taps=[float(t) for t in taps],
        test_criteria=criteria,
    )


def generate_steady_taps(
    bpm: float, n_taps: int, start: float = 0.0
) -> tuple[np.ndarray, TapSequenceDefinition]:
    """Perfectly isochronous taps at ``bpm``."""
    ioi = 60.0 / bpm
    taps = start + np.arange(n_taps) * ioi

    return taps, _definition(
        "steady",
        taps,
        bpm,
        f"{n_taps} isochronous taps at {bpm:g} BPM",
        TestCriteria(tempo_tolerance_bpm=1.0, min_confidence=0.9),
    )


def generate_human_taps(
    bpm: float,
    n_taps: int,
    jitter_std_ms: float = 10.0,
    rng_seed: int | None = None,
) -> tuple[np.ndarray, TapSequenceDefinition]:
    """
    Taps at ``bpm`` with gaussian timing jitter on every tap.

    The tolerance grows with the jitter: the estimator reports the tempo of
    a single representative interval, whose error is the difference of two
    jittered taps.

    Args:
        bpm: Underlying tempo
        n_taps: Number of taps
        jitter_std_ms: Standard deviation of the per-tap timing error
        rng_seed: Seed for reproducible jitter

    Returns:
        Tuple of (taps, sequence definition)
    """
    ioi = 60.0 / bpm
    rng = np.random.default_rng(rng_seed)
    jitter = rng.normal(0.0, jitter_std_ms / 1000.0, size=n_taps)
    taps = np.sort(np.arange(n_taps) * ioi + jitter)
    taps -= taps[0]

    interval_std = np.sqrt(2.0) * jitter_std_ms / 1000.0
    tolerance = max(2.0, bpm * 2.0 * interval_std / ioi)

    logger.debug(
        f"BPM={bpm}, IOI={ioi:.3f}s, jitter={jitter_std_ms}ms, tolerance={tolerance:.2f} BPM"
    )

    return taps, _definition(
        "human",
        taps,
        bpm,
        f"{n_taps} taps at {bpm:g} BPM with {jitter_std_ms:g}ms jitter",
        TestCriteria(tempo_tolerance_bpm=tolerance, min_confidence=0.5),
    )


def insert_ghost_taps(taps: np.ndarray, every: int, offset_s: float = 0.05) -> np.ndarray:
    """Add an accidental extra tap ``offset_s`` after every ``every``-th tap."""
    taps = np.asarray(taps, dtype=float)
    if every <= 0:
        return taps.copy()
    ghosts = taps[every - 1 :: every] + offset_s
    return np.sort(np.concatenate([taps, ghosts]))


def generate_noisy_taps(
    bpm: float, n_taps: int, ghost_every: int = 4, offset_s: float = 0.05
) -> tuple[np.ndarray, TapSequenceDefinition]:
    """Steady taps polluted with ghost taps too close to be a beat."""
    steady, _ = generate_steady_taps(bpm, n_taps)
    taps = insert_ghost_taps(steady, ghost_every, offset_s)

    return taps, _definition(
        "noise",
        taps,
        bpm,
        f"{bpm:g} BPM with a ghost tap every {ghost_every} beats (+{offset_s * 1000:g}ms)",
        TestCriteria(tempo_tolerance_bpm=2.0, min_confidence=0.5),
    )


def generate_tempo_change(
    bpm_from: float, bpm_to: float, n_each: int
) -> tuple[np.ndarray, TapSequenceDefinition]:
    """``n_each`` taps at ``bpm_from`` followed by ``n_each`` taps at ``bpm_to``."""
    first, _ = generate_steady_taps(bpm_from, n_each)
    second, _ = generate_steady_taps(bpm_to, n_each, start=first[-1] + 60.0 / bpm_to)
    taps = np.concatenate([first, second])

    return taps, _definition(
        "transition",
        taps,
        bpm_to,
        f"Tempo change from {bpm_from:g} to {bpm_to:g} BPM after {n_each} taps",
        TestCriteria(tempo_tolerance_bpm=2.0, min_confidence=0.5),
        start_bpm=bpm_from,
    )


def insert_idle_gap(taps: np.ndarray, after_index: int, gap_s: float) -> np.ndarray:
    """Delay every tap after ``after_index`` by ``gap_s`` seconds."""
    taps = np.asarray(taps, dtype=float).copy()
    taps[after_index + 1 :] += gap_s
    return taps


def generate_idle_resume(
    bpm: float, n_taps: int, gap_s: float = 3.0
) -> tuple[np.ndarray, TapSequenceDefinition]:
    """Steady taps interrupted halfway by a pause longer than the reset threshold."""
    steady, _ = generate_steady_taps(bpm, n_taps)
    taps = insert_idle_gap(steady, n_taps // 2 - 1, gap_s)

    return taps, _definition(
        "transition",
        taps,
        bpm,
        f"{bpm:g} BPM with a {gap_s:g}s pause halfway",
        TestCriteria(tempo_tolerance_bpm=2.0, min_confidence=0.5),
        start_bpm=bpm,
    )
