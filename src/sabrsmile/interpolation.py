"""
Interpolation interface.

An interpolation is built from data points (x, y), sorted by x, and can be
queried at any x. Queries outside [x_min, x_max] are rejected unless
extrapolation is enabled on the object or allowed for the call.
"""

from abc import ABC, abstractmethod
from typing import Sequence
import numpy as np


class Interpolation(ABC):
    """Abstract base class for interpolations of (x, y) data."""

    def __init__(self, x: Sequence[float], y: Sequence[float]):
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)

        if x.ndim != 1 or x.shape != y.shape:
            raise ValueError("x and y must be one-dimensional and of the same length")
        if len(x) < 2:
            raise ValueError("Need at least 2 points for interpolation")

        # Sort by x
        idx = np.argsort(x, kind="stable")
        self._x = x[idx]
        self._y = y[idx]
        self._extrapolate = False

    @property
    def x_min(self) -> float:
        return float(self._x[0])

    @property
    def x_max(self) -> float:
        return float(self._x[-1])

    def is_in_range(self, x: float) -> bool:
        return self.x_min <= x <= self.x_max

    def enable_extrapolation(self) -> None:
        self._extrapolate = True

    def disable_extrapolation(self) -> None:
        self._extrapolate = False

    @property
    def allows_extrapolation(self) -> bool:
        return self._extrapolate

    def __call__(self, x: float, allow_extrapolation: bool = False) -> float:
        """Range-checked value at x."""
        self._check_range(x, allow_extrapolation)
        return self.value(x)

    def _check_range(self, x: float, allow_extrapolation: bool) -> None:
        if not (allow_extrapolation or self._extrapolate or self.is_in_range(x)):
            raise ValueError(
                f"interpolation range is [{self.x_min}, {self.x_max}]: "
                f"extrapolation at {x} not allowed"
            )

    @abstractmethod
    def update(self):
        """Refit after the data or market inputs changed."""
        pass

    @abstractmethod
    def value(self, x: float) -> float:
        """Value at x, without range check."""
        pass

    @abstractmethod
    def primitive(self, x: float) -> float:
        pass

    @abstractmethod
    def derivative(self, x: float) -> float:
        pass

    @abstractmethod
    def second_derivative(self, x: float) -> float:
        pass


__all__ = ["Interpolation"]
