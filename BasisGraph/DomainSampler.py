# DomainSampler.py

import functools
import math
from typing import Iterator, Union
import numpy as np

X_MIN = -4 * math.pi
X_MAX = 4 * math.pi
STEPS = 300


class DomainGrid:
    """
    Immutable, evenly spaced x samples over [x_min, x_max], endpoints included.
    Holds steps + 1 values. Iterating restarts from x_min every time.
    """

    def __init__(self, x_min: float, x_max: float, steps: int) -> None:
        if steps < 1:
            raise ValueError(f"steps must be >= 1, got {steps}")
        if not (math.isfinite(x_min) and math.isfinite(x_max)) or x_max <= x_min:
            raise ValueError(f"invalid domain [{x_min}, {x_max}]")

        self.x_min: float = float(x_min)
        self.x_max: float = float(x_max)
        self.steps: int = int(steps)

        values = self.x_min + (np.arange(self.steps + 1) / self.steps) * (self.x_max - self.x_min)
        values.setflags(write=False)
        self._values: np.ndarray = values

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def span(self) -> float:
        return self.x_max - self.x_min

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[float]:
        return (float(x) for x in self._values)

    def __getitem__(self, index: Union[int, slice]) -> Union[float, np.ndarray]:
        if isinstance(index, slice):
            return self._values[index]
        return float(self._values[index])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DomainGrid):
            return NotImplemented
        return (self.x_min, self.x_max, self.steps) == (other.x_min, other.x_max, other.steps)

    def __hash__(self) -> int:
        return hash((self.x_min, self.x_max, self.steps))

    def __repr__(self) -> str:
        return f"DomainGrid({self.x_min:.4f}, {self.x_max:.4f}, steps={self.steps})"


GRID_CACHE_SIZE = 8


@functools.lru_cache(maxsize=GRID_CACHE_SIZE)
def _cached_grid(x_min: float, x_max: float, steps: int) -> DomainGrid:
    return DomainGrid(x_min, x_max, steps)


def sample_domain(x_min: float = X_MIN, x_max: float = X_MAX, steps: int = STEPS) -> DomainGrid:
    # Grids are immutable, so equal parameters share one instance while cached.
    return _cached_grid(float(x_min), float(x_max), int(steps))
