"""
Standard Evaluation Suites for the Tap Tempo Estimator

This module defines suites of synthetic tap sequences with known tempo,
covering clean input, human timing jitter, accidental ghost taps, tempo
changes and pauses.
"""

from dataclasses import dataclass

import numpy as np

from rhythmkey.core.ground_truth import TapSequenceDefinition
from rhythmkey.core.tap_gen import (
    generate_human_taps,
    generate_idle_resume,
    generate_noisy_taps,
    generate_steady_taps,
    generate_tempo_change,
)

SUITE_DESCRIPTIONS: dict[str, tuple[str, str]] = {
    "steady": ("Steady Tapping", "Isochronous taps across the tempo range"),
    "human": ("Human Timing", "Taps with gaussian timing jitter"),
    "noise": ("Ghost Taps", "Accidental double taps that must be rejected"),
    "transition": ("Tempo Changes", "Tempo changes and pauses longer than the reset gap"),
    "all": ("All Suites", "Run all evaluation suites"),
}


@dataclass
class TapSequence:
    """A single tap sequence with ground truth."""

    name: str
    description: str
    taps: np.ndarray
    sequence_def: TapSequenceDefinition
    category: str  # 'steady', 'human', 'noise', 'transition'


class StandardSuites:
    """
    Pre-defined evaluation suites for the tap tempo estimator.

    Each suite contains several sequences designed to exercise one
    aspect of the estimator's behavior.
    """

    @staticmethod
    def steady_suite(n_taps: int = 16) -> list[TapSequence]:
        """Clean taps from slow to fast tempos."""
        sequences = []

        for bpm in [40, 60, 90, 120, 150, 180, 240]:
            taps, seq_def = generate_steady_taps(bpm=bpm, n_taps=n_taps)
            sequences.append(
                TapSequence(
                    name=f"steady_{bpm}bpm",
                    description=seq_def.metadata.description,
                    taps=taps,
                    sequence_def=seq_def,
                    category="steady",
                )
            )

        return sequences

    @staticmethod
    def human_suite(n_taps: int = 16) -> list[TapSequence]:
        """Human-like timing variation at common tempos."""
        sequences = []

        for bpm in [90, 120]:
            for jitter_ms in [5, 10, 20]:
                taps, seq_def = generate_human_taps(
                    bpm=bpm, n_taps=n_taps, jitter_std_ms=jitter_ms, rng_seed=42
                )
                sequences.append(
                    TapSequence(
                        name=f"human_{bpm}bpm_jitter_{jitter_ms}ms",
                        description=seq_def.metadata.description,
                        taps=taps,
                        sequence_def=seq_def,
                        category="human",
                    )
                )

        return sequences

    @staticmethod
    def noise_suite(n_taps: int = 16) -> list[TapSequence]:
        """Ghost taps at different rates and distances."""
        sequences = []

        for bpm, every, offset_s in [(100, 4, 0.05), (120, 3, 0.08), (90, 2, 0.1)]:
            taps, seq_def = generate_noisy_taps(
                bpm=bpm, n_taps=n_taps, ghost_every=every, offset_s=offset_s
            )
            sequences.append(
                TapSequence(
                    name=f"ghost_{bpm}bpm_every_{every}",
                    description=seq_def.metadata.description,
                    taps=taps,
                    sequence_def=seq_def,
                    category="noise",
                )
            )

        return sequences

    @staticmethod
    def transition_suite(n_taps: int = 16) -> list[TapSequence]:
        """Tempo changes and long pauses."""
        sequences = []

        for bpm_from, bpm_to in [(120, 100), (90, 140)]:
            taps, seq_def = generate_tempo_change(bpm_from, bpm_to, n_each=n_taps)
            sequences.append(
                TapSequence(
                    name=f"change_{bpm_from}_to_{bpm_to}bpm",
                    description=seq_def.metadata.description,
                    taps=taps,
                    sequence_def=seq_def,
                    category="transition",
                )
            )

        taps, seq_def = generate_idle_resume(bpm=110, n_taps=n_taps, gap_s=3.0)
        sequences.append(
            TapSequence(
                name="pause_110bpm",
                description=seq_def.metadata.description,
                taps=taps,
                sequence_def=seq_def,
                category="transition",
            )
        )

        return sequences

    @classmethod
    def get_suite(cls, suite_name: str, n_taps: int = 16) -> list[TapSequence]:
        """
        Get a specific suite by name.

        Args:
            suite_name: Name of suite ('steady', 'human', 'noise', 'transition', 'all')
            n_taps: Taps per sequence (per tempo segment for transitions)

        Returns:
            List of TapSequence objects

        Raises:
            ValueError: If suite_name is not recognized
        """
        suite_map = {
            "steady": cls.steady_suite,
            "human": cls.human_suite,
            "noise": cls.noise_suite,
            "transition": cls.transition_suite,
        }

        if suite_name == "all":
            sequences = []
            for suite_func in suite_map.values():
                sequences.extend(suite_func(n_taps))
            return sequences

        if suite_name not in suite_map:
            raise ValueError(
                f"Unknown suite: {suite_name}. "
                f"Available: {', '.join(suite_map.keys())}, 'all'"
            )

        return suite_map[suite_name](n_taps)
