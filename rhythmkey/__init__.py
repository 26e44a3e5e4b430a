"""RhythmKey - Tap Tempo Estimation.

Turns manual taps into a smoothed, confidence-weighted BPM estimate, with
a metronome, music key tables, and an evaluation harness built on
synthetic tap sequences with known tempo.
"""

__version__ = "0.1.0"
