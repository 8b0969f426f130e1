# AnimationDriver.py

from abc import ABC, abstractmethod
import math
import time
from typing import Callable, Optional, Sequence, Tuple

from PyQt5 import QtCore
from PyQt5.QtCore import QObject, pyqtSignal

from BasisGraph.CoefficientSource import CoefficientSource

PLAYING = "playing"
PAUSED = "paused"

NEUTRAL = 0.5
SWING = 0.3
DEFAULT_OSCILLATORS = ((0.5, 0.0), (0.7, 2.0), (0.3, 4.0))
DEFAULT_TICK_MS = 16


class TickScheduler(ABC):
    """Periodic tick source with explicit start / stop / cancel."""

    def __init__(self) -> None:
        self._callback: Optional[Callable[[], None]] = None

    def set_callback(self, callback: Optional[Callable[[], None]]) -> None:
        self._callback = callback

    @abstractmethod
    def start(self) -> None:
        ...

    @abstractmethod
    def stop(self) -> None:
        ...

    @abstractmethod
    def is_active(self) -> bool:
        ...

    def cancel(self) -> None:
        self.stop()
        self._callback = None

    def _fire(self) -> None:
        if self._callback is not None:
            self._callback()


class QtTickScheduler(TickScheduler):
    def __init__(self, interval_ms: int = DEFAULT_TICK_MS) -> None:
        super().__init__()
        self._timer = QtCore.QTimer()
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._fire)

    def start(self) -> None:
        if not self._timer.isActive():
            self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def is_active(self) -> bool:
        return self._timer.isActive()

    def interval(self) -> int:
        return self._timer.interval()


class ManualTickScheduler(TickScheduler):
    """Ticks only when `tick` is called. Used headless and in tests."""

    def __init__(self) -> None:
        super().__init__()
        self._active = False

    def start(self) -> None:
        self._active = True

    def stop(self) -> None:
        self._active = False

    def is_active(self) -> bool:
        return self._active

    def tick(self, count: int = 1) -> None:
        for _ in range(count):
            if not self._active:
                return
            self._fire()


def oscillate(elapsed: float, oscillators: Sequence[Tuple[float, float]]) -> Tuple[float, ...]:
    return tuple(NEUTRAL + SWING * math.sin(freq * elapsed + phase) for freq, phase in oscillators)


class AnimationDriver(QObject):
    """
    Playing/Paused state machine that turns wall-clock time into coefficients.

    - Starts Playing; the epoch is captured at construction.
    - pause(): stops ticking, keeps the last coefficients and elapsed time.
    - play(): re-bases the epoch so elapsed resumes from the paused value,
      so the curve continues smoothly instead of jumping by the pause length.
    - reset(): epoch = now, coefficients = 0.5 each, elapsed = 0. Keeps state.
    - Every tick while Playing publishes (coefficients, elapsed) through
      `source` (a CoefficientSource).
    """
    state_changed = pyqtSignal(str)

    def __init__(
        self,
        count: Optional[int] = None,
        *,
        oscillators: Sequence[Tuple[float, float]] = DEFAULT_OSCILLATORS,
        scheduler: Optional[TickScheduler] = None,
        clock: Callable[[], float] = time.perf_counter,
        source: Optional[CoefficientSource] = None,
    ) -> None:
        super().__init__()
        self.oscillators: Tuple[Tuple[float, float], ...] = tuple((float(f), float(p)) for f, p in oscillators)
        if count is None:
            count = len(self.oscillators)
        if count != len(self.oscillators):
            raise ValueError(
                f"need one (frequency, phase) pair per basis: {count} bases, {len(self.oscillators)} pairs"
            )

        self.source: CoefficientSource = source if source is not None else CoefficientSource(count)
        if self.source.size() != count:
            raise ValueError(f"coefficient source holds {self.source.size()} values, expected {count}")

        self._clock = clock
        self._scheduler: TickScheduler = scheduler if scheduler is not None else QtTickScheduler()
        self._scheduler.set_callback(self.tick)

        self._epoch: float = self._clock()
        self._elapsed: float = 0.0
        self._coefficients: Tuple[float, ...] = tuple([NEUTRAL] * count)
        self._state: str = PLAYING
        self._closed: bool = False

        self._scheduler.start()

    # --- state ------------------------------------------------------------

    @property
    def state(self) -> str:
        return self._state

    def is_playing(self) -> bool:
        return self._state == PLAYING

    @property
    def elapsed(self) -> float:
        return self._elapsed

    @property
    def coefficients(self) -> Tuple[float, ...]:
        return self._coefficients

    def coefficients_at(self, elapsed: float) -> Tuple[float, ...]:
        return oscillate(elapsed, self.oscillators)

    # --- transitions ------------------------------------------------------

    def tick(self) -> None:
        if self._closed or self._state != PLAYING:
            return
        elapsed = self._clock() - self._epoch
        self._publish(self.coefficients_at(elapsed), elapsed)

    def pause(self) -> None:
        if self._closed or self._state == PAUSED:
            return
        self._scheduler.stop()
        self._state = PAUSED
        print(f"[AnimationDriver] Paused at t={self._elapsed:.2f}s")
        self.state_changed.emit(self._state)

    def play(self) -> None:
        if self._closed or self._state == PLAYING:
            return
        self._epoch = self._clock() - self._elapsed
        self._state = PLAYING
        self._scheduler.start()
        print(f"[AnimationDriver] Resumed at t={self._elapsed:.2f}s")
        self.state_changed.emit(self._state)

    def toggle(self) -> None:
        if self._state == PLAYING:
            self.pause()
        else:
            self.play()

    def reset(self) -> None:
        if self._closed:
            return
        self._epoch = self._clock()
        print("[AnimationDriver] Reset")
        self._publish(tuple([NEUTRAL] * len(self.oscillators)), 0.0)

    def close(self) -> None:
        """Cancel any pending tick; the driver is inert afterwards."""
        if self._closed:
            return
        self._scheduler.cancel()
        self._closed = True

    def _publish(self, coeffs: Tuple[float, ...], elapsed: float) -> None:
        self._coefficients = coeffs
        self._elapsed = elapsed
        self.source.set(coeffs, elapsed)
