"""Ground Truth Schema for Tap Tempo Testing.

This module defines Pydantic models for synthetic tap sequences with a
known tempo, used to validate how well the estimator tracks it.
"""

from typing import Literal

from pydantic import BaseModel, Field

SEQUENCE_TYPES = Literal["steady", "human", "noise", "transition"]


class SequenceMetadata(BaseModel):
    """Metadata describing a tap sequence."""

    bpm: float = Field(gt=0, le=600, description="Tempo the sequence settles on")
    description: str = Field(description="Human-readable description")
    tap_count: int = Field(ge=0, description="Number of taps in the sequence")
    start_bpm: float | None = Field(
        default=None, gt=0, le=600, description="Initial tempo for tempo changes"
    )


class TestCriteria(BaseModel):
    """Success criteria for test validation."""

    tempo_tolerance_bpm: float = Field(
        default=2.0, ge=0, description="Allowed final tempo error in BPM"
    )
    min_confidence: float = Field(
        default=0.5, ge=0, le=1, description="Minimum final confidence"
    )


class TapSequenceDefinition(BaseModel):
    """Complete definition of a tap sequence with ground truth."""

    sequence_type: SEQUENCE_TYPES = Field(description="Type of sequence")
    metadata: SequenceMetadata = Field(description="Sequence metadata")
    taps: list[float] = Field(default_factory=list, description="Tap times in seconds")
    test_criteria: TestCriteria = Field(
        default_factory=TestCriteria, description="Test success criteria"
    )

    model_config = {"extra": "forbid"}
