"""
Tap Session

Owns a single TempoEstimator for one tapping session, reads the steady
clock, serializes access from several callers, and notifies listeners
when the tempo changes.
"""

import threading
import time
from typing import Callable

from loguru import logger
from pydantic import BaseModel, Field

from rhythmkey.core.estimator import MAX_BPM, MIN_BPM, TempoEstimator
from rhythmkey.presets import SessionConfig

BpmListener = Callable[[float], None]


class TempoReading(BaseModel):
    """Snapshot of the estimator output for display and scheduling."""

    bpm: float = Field(ge=MIN_BPM, le=MAX_BPM, description="Current tempo in BPM")
    half_time_bpm: float = Field(description="Half-time tempo (bpm / 2)")
    double_time_bpm: float = Field(description="Double-time tempo (bpm * 2)")
    confidence: float = Field(ge=0, le=1, description="Dominant cluster weight")
    history_size: int = Field(ge=0, description="Intervals in the history window")
    metronome_period_s: float = Field(gt=0, description="Pulse period (60 / bpm)")
    accepted: bool | None = Field(
        default=None, description="Whether the last tap entered the history"
    )

    @classmethod
    def from_estimator(
        cls, estimator: TempoEstimator, accepted: bool | None = None
    ) -> "TempoReading":
        bpm = estimator.current_bpm
        return cls(
            bpm=bpm,
            half_time_bpm=bpm / 2,
            double_time_bpm=bpm * 2,
            confidence=estimator.confidence,
            history_size=len(estimator.history),
            metronome_period_s=60.0 / bpm,
            accepted=accepted,
        )


class TapSession:
    """Thread-safe owner of one tempo estimator."""

    def __init__(
        self,
        config: SessionConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or SessionConfig()
        self._clock = clock
        self._lock = threading.Lock()
        self._estimator = TempoEstimator(initial_bpm=self.config.initial_bpm)
        self._listeners: list[BpmListener] = []

    @property
    def bpm(self) -> float:
        with self._lock:
            return self._estimator.current_bpm

    def add_listener(self, listener: BpmListener) -> None:
        """Call ``listener(bpm)`` whenever the tempo changes."""
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: BpmListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def tap(self, now: float | None = None) -> TempoReading:
        """Register a tap at ``now`` or at the current clock time."""
        with self._lock:
            if now is None:
                now = self._clock()
            before = self._estimator.current_bpm
            accepted = self._estimator.register_tap(now)
            reading = TempoReading.from_estimator(self._estimator, accepted=accepted)

        if reading.bpm != before:
            self._notify(reading.bpm)
        return reading

    def reading(self) -> TempoReading:
        with self._lock:
            return TempoReading.from_estimator(self._estimator)

    def set_bpm(self, bpm: float) -> TempoReading:
        """Overwrite the tempo directly; the value is clamped to the valid range."""
        return self._write(lambda current: bpm)

    def nudge(self, delta: float) -> TempoReading:
        """Shift the tempo by ``delta`` BPM, read and written under one lock."""
        return self._write(lambda current: current + delta)

    def drag(self, pixels: float) -> TempoReading:
        """Fine-tune from a vertical drag; upward (positive) drags speed up."""
        return self.nudge(pixels * self.config.drag_sensitivity)

    def restart(self) -> TempoReading:
        """Start a fresh session seeded at the configured initial tempo."""
        with self._lock:
            self._estimator = TempoEstimator(initial_bpm=self.config.initial_bpm)
            reading = TempoReading.from_estimator(self._estimator)

        logger.info(f"Tap session restarted at {reading.bpm:.1f} BPM")
        self._notify(reading.bpm)
        return reading

    def _write(self, compute: Callable[[float], float]) -> TempoReading:
        with self._lock:
            before = self._estimator.current_bpm
            self._estimator.current_bpm = compute(before)
            reading = TempoReading.from_estimator(self._estimator)

        if reading.bpm != before:
            self._notify(reading.bpm)
        return reading

    def _notify(self, bpm: float) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(bpm)
