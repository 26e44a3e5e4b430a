"""
Metronome Scheduler

Fires a pulse callback once per beat of the current tempo. The period is
derived as 60 / bpm; whenever the tempo changes the periodic task is
cancelled and started again rather than adjusted in place.
"""

import asyncio
from typing import Callable

from loguru import logger

from rhythmkey.core.estimator import clamp


def period_for(bpm: float) -> float:
    """Seconds between pulses at ``bpm`` (clamped to the valid tempo range)."""
    return 60.0 / clamp(bpm)


class MetronomeScheduler:
    """asyncio-driven pulse generator."""

    def __init__(self, on_pulse: Callable[[], None]):
        self._on_pulse = on_pulse
        self._task: asyncio.Task | None = None
        self._period: float | None = None
        self.pulse_count = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def period(self) -> float | None:
        return self._period

    def start(self, bpm: float) -> None:
        """Start pulsing at ``bpm``. Must be called with a running event loop."""
        self.stop()
        self._period = period_for(bpm)
        self._task = asyncio.get_running_loop().create_task(self._run(self._period))
        logger.debug(f"Metronome started: period={self._period:.4f}s")

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def retune(self, bpm: float) -> None:
        """Restart the running metronome at a new tempo; no-op while stopped."""
        if not self.running:
            return
        self.start(bpm)

    async def _run(self, period: float) -> None:
        while True:
            await asyncio.sleep(period)
            self.pulse_count += 1
            try:
                self._on_pulse()
            except Exception as e:
                logger.exception(f"Metronome pulse callback failed: {e}")
