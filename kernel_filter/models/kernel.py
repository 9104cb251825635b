from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple
import math
import numpy as np

from ..exceptions import InvalidKernel

KERNEL_SIZE = 3


def _as_weight(value, position: int) -> float:
    if isinstance(value, bool):
        raise InvalidKernel(f"Invalid kernel value at position {position + 1}: {value!r}")
    try:
        weight = float(value)
    except (TypeError, ValueError):
        raise InvalidKernel(f"Invalid kernel value at position {position + 1}: {value!r}") from None
    if not math.isfinite(weight):
        raise InvalidKernel(f"Invalid kernel value at position {position + 1}: {value!r}")
    return weight


@dataclass(frozen=True)
class Kernel:
    """
    3x3 convolution kernel as nine weights in row-major order
    (index = row * 3 + col). Weights are used as given, never normalised.
    """
    weights: Tuple[float, ...]

    def __post_init__(self):
        values = tuple(self.weights)
        if len(values) != KERNEL_SIZE * KERNEL_SIZE:
            raise InvalidKernel(f"Kernel needs {KERNEL_SIZE * KERNEL_SIZE} weights, got {len(values)}")
        object.__setattr__(self, "weights", tuple(_as_weight(v, i) for i, v in enumerate(values)))

    @classmethod
    def from_sequence(cls, values: Iterable) -> "Kernel":
        if isinstance(values, (str, bytes)):
            raise InvalidKernel("Kernel must be a sequence of numbers")
        try:
            return cls(tuple(values))
        except TypeError:
            raise InvalidKernel("Kernel must be a sequence of numbers") from None

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> "Kernel":
        rows = list(rows)
        if len(rows) != KERNEL_SIZE or any(len(row) != KERNEL_SIZE for row in rows):
            raise InvalidKernel("Kernel rows must form a 3x3 grid")
        return cls(tuple(w for row in rows for w in row))

    @classmethod
    def identity(cls) -> "Kernel":
        return cls((0.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0))

    def scaled(self, multiplier: float) -> "Kernel":
        """Multiply every weight by ``multiplier`` (e.g. 1/9 over an all-ones grid)."""
        try:
            factor = float(multiplier)
        except (TypeError, ValueError):
            factor = math.nan
        if isinstance(multiplier, bool) or not math.isfinite(factor):
            raise InvalidKernel(f"Invalid kernel multiplier: {multiplier!r}")
        return Kernel(tuple(w * factor for w in self.weights))

    def weight(self, ky: int, kx: int) -> float:
        return self.weights[ky * KERNEL_SIZE + kx]

    def as_array(self) -> np.ndarray:
        """Weights as a (3, 3) float32 matrix."""
        return np.asarray(self.weights, dtype=np.float32).reshape(KERNEL_SIZE, KERNEL_SIZE)
