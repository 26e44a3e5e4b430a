"""Standard evaluation suites for the tap tempo estimator."""

from .standard import SUITE_DESCRIPTIONS, StandardSuites, TapSequence

__all__ = ["StandardSuites", "TapSequence", "SUITE_DESCRIPTIONS"]
