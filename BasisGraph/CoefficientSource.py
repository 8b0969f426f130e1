# CoefficientSource.py

from PyQt5.QtCore import QObject, pyqtSignal
import numpy as np
from typing import Any, Optional, Sequence


class CoefficientSource(QObject):
    """
    Holds the current coefficient vector and the elapsed time it belongs to.
    One writer (the AnimationDriver, or a manual caller when not animating)
    calls `set`; readers connect to `coefficients_updated`.
    """
    coefficients_updated = pyqtSignal(object, float)

    def __init__(self, count: int, initial: Optional[Sequence[float]] = None) -> None:
        super().__init__()
        self._count: int = int(count)
        if initial is None:
            initial = [0.5] * self._count
        self._coeffs: tuple = self._normalize(initial)
        self._elapsed: float = 0.0

    def set(self, coeffs: Sequence[float], elapsed: Optional[float] = None) -> None:
        self._coeffs = self._normalize(coeffs)
        if elapsed is not None:
            self._elapsed = float(elapsed)
        self.coefficients_updated.emit(self._coeffs, self._elapsed)

    def _normalize(self, coeffs: Any) -> tuple:
        arr = np.asarray(coeffs, dtype=float).reshape(-1)
        if arr.size != self._count:
            raise ValueError(
                f"expected {self._count} coefficients, got {arr.size}"
            )
        return tuple(float(c) for c in arr)

    def get(self) -> tuple:
        return self._coeffs

    def elapsed(self) -> float:
        return self._elapsed

    def size(self) -> int:
        return self._count
