"""
Change of variables between an unconstrained vector and SABR parameters.

The calibration minimizes over R^4 and maps every trial point into the SABR
domain, so the minimizer never needs boundary handling:

    alpha = u0^2 + eps1
    beta  = exp(-u1^2)
    nu    = u2^2 + eps1
    rho   = eps2 * sin(u3)
"""

from typing import Sequence
import numpy as np


class SabrParametersTransformation:
    """
    Bijection between R^4 and (alpha, beta, nu, rho).

    Attributes:
        eps1: Lower bound added to alpha and nu
        eps2: Bound on |rho|, strictly below one
    """

    def __init__(self, eps1: float = 1e-7, eps2: float = 0.9999):
        if eps1 <= 0:
            raise ValueError(f"eps1 must be positive, got {eps1}")
        if not 0 < eps2 < 1:
            raise ValueError(f"eps2 must be in (0, 1), got {eps2}")
        self.eps1 = eps1
        self.eps2 = eps2

    def direct(self, x: Sequence[float]) -> np.ndarray:
        """Unconstrained vector -> (alpha, beta, nu, rho)."""
        x = np.asarray(x, dtype=np.float64)
        return np.array([
            x[0] * x[0] + self.eps1,
            np.exp(-(x[1] * x[1])),
            x[2] * x[2] + self.eps1,
            self.eps2 * np.sin(x[3]),
        ])

    def clip(self, y: Sequence[float]) -> np.ndarray:
        """
        Move (alpha, beta, nu, rho) onto the closest point inverse() accepts.

        Alpha, beta and nu are floored at eps1, beta is capped at one and rho
        is bounded by eps2.
        """
        alpha, beta, nu, rho = np.asarray(y, dtype=np.float64)
        return np.array([
            max(alpha, self.eps1),
            min(max(beta, self.eps1), 1.0),
            max(nu, self.eps1),
            min(max(rho, -self.eps2), self.eps2),
        ])

    def inverse(self, y: Sequence[float]) -> np.ndarray:
        """
        (alpha, beta, nu, rho) -> unconstrained vector.

        Only defined on the image of direct().

        Raises:
            ValueError: If a parameter lies outside the range of direct()
        """
        alpha, beta, nu, rho = np.asarray(y, dtype=np.float64)

        if not alpha >= self.eps1:
            raise ValueError(f"alpha must be at least {self.eps1} to invert, got {alpha}")
        if not 0 < beta <= 1:
            raise ValueError(f"beta must be in (0, 1] to invert, got {beta}")
        if not nu >= self.eps1:
            raise ValueError(f"nu must be at least {self.eps1} to invert, got {nu}")
        if not abs(rho) <= self.eps2:
            raise ValueError(f"|rho| must be at most {self.eps2} to invert, got {rho}")

        return np.array([
            np.sqrt(alpha - self.eps1),
            np.sqrt(-np.log(beta)),
            np.sqrt(nu - self.eps1),
            np.arcsin(rho / self.eps2),
        ])


__all__ = ["SabrParametersTransformation"]
