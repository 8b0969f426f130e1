# BasisSpec.py

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union
import numpy as np

from BasisGraph.DomainSampler import DomainGrid

ArrayLike = Union[float, np.ndarray]

SIGNAL_FREQUENCY = 0.2


@dataclass(frozen=True)
class BasisSpec:
    amplitude: float
    color: str
    label: str
    opacity: float = 0.6
    offset: float = 0.0
    label_shift: Optional[float] = None


DEFAULT_BASIS = (
    BasisSpec(amplitude=2.0, color="#3b82f6", label="1", opacity=0.6, offset=2.5),
    BasisSpec(amplitude=10.0, color="#a855f7", label="2", opacity=0.6, offset=-3.8),
    BasisSpec(amplitude=15.0, color="#0d9488", label="3", opacity=0.6, offset=1.2),
)


def evaluate(x: ArrayLike, spec: BasisSpec) -> ArrayLike:
    """
    Shared signal shape: a*sin(0.2x) + x + offset.
    Accepts a scalar or a numpy array. Non-finite input yields NaN, never raises.
    """
    with np.errstate(invalid="ignore", over="ignore"):
        y = spec.amplitude * np.sin(SIGNAL_FREQUENCY * np.asarray(x, dtype=float)) + x + spec.offset
    if np.ndim(y) == 0:
        return float(y)
    return y


def check_lengths(specs: Sequence[Any], coeffs: Sequence[float]) -> None:
    if len(coeffs) != len(specs):
        raise ValueError(
            f"coefficient count ({len(coeffs)}) does not match basis count ({len(specs)})"
        )


def evaluate_result(x: ArrayLike, specs: Sequence[BasisSpec], coeffs: Sequence[float]) -> ArrayLike:
    check_lengths(specs, coeffs)
    total: ArrayLike = 0.0
    for spec, c in zip(specs, coeffs):
        total = total + c * evaluate(x, spec)
    return total


class BasisEvaluator:
    """
    Evaluates a fixed basis set over a fixed DomainGrid.
    The basis matrix (one row per spec) is computed once; the result curve for
    a coefficient vector is then a single matrix-vector product.
    """

    def __init__(self, specs: Sequence[BasisSpec], grid: DomainGrid) -> None:
        self.specs: tuple = tuple(specs)
        self.grid: DomainGrid = grid

        if self.specs:
            matrix = np.vstack([evaluate(grid.values, s) for s in self.specs])
        else:
            matrix = np.empty((0, len(grid)))
        matrix.setflags(write=False)
        self._matrix: np.ndarray = matrix

    @property
    def basis_values(self) -> np.ndarray:
        return self._matrix

    def basis_curve(self, index: int) -> np.ndarray:
        return self._matrix[index]

    def result_curve(self, coeffs: Sequence[float]) -> np.ndarray:
        check_lengths(self.specs, coeffs)
        c = np.asarray(coeffs, dtype=float)
        if c.size == 0:
            return np.zeros(len(self.grid))
        with np.errstate(invalid="ignore", over="ignore"):
            return c @ self._matrix

    def neutral_coefficients(self) -> List[float]:
        return [0.5] * len(self.specs)
