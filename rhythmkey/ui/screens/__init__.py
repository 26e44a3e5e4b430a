"""UI screens for the tap tempo application."""

from .evaluation import EvaluationScreen
from .tap import TapScreen

__all__ = ["TapScreen", "EvaluationScreen"]
