"""
RhythmKey - Main Entry Point

Tap tempo estimation with a metronome, music key tables and an
evaluation harness for the estimator.
"""

import sys

from rhythmkey.cli import main

if __name__ == "__main__":
    sys.exit(main())
