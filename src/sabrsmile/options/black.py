"""
Black'76 formula in standard-deviation form.

Implements:
- Black price given the total standard deviation sigma * sqrt(T)
- Derivative of the price with respect to the standard deviation
  (the vega used to weight smile calibration points)

Working in standard deviation keeps expiry out of the formula; callers pass
sigma * sqrt(T).
"""

from enum import Enum
import numpy as np
from scipy.stats import norm


# Standard normal CDF and PDF
N = norm.cdf
n = norm.pdf


class OptionType(Enum):
    """Option payoff type."""
    CALL = 1
    PUT = -1


def _d1_d2(strike: float, forward: float, std_dev: float):
    d1 = np.log(forward / strike) / std_dev + 0.5 * std_dev
    d2 = d1 - std_dev
    return d1, d2


def black_formula(
    option_type: OptionType,
    strike: float,
    forward: float,
    std_dev: float,
    discount: float = 1.0
) -> float:
    """
    Black'76 option price.

    Args:
        option_type: CALL or PUT
        strike: Strike
        forward: Forward
        std_dev: Total standard deviation, sigma * sqrt(T)
        discount: Discount factor to payment

    Returns:
        Option price
    """
    if std_dev < 0:
        raise ValueError(f"std_dev must be non-negative, got {std_dev}")
    if discount <= 0:
        raise ValueError(f"discount must be positive, got {discount}")

    sign = option_type.value

    if std_dev == 0.0:
        return max((forward - strike) * sign, 0.0) * discount

    if forward <= 0 or strike <= 0:
        raise ValueError(f"Forward ({forward}) and strike ({strike}) must be positive")

    d1, d2 = _d1_d2(strike, forward, std_dev)

    return float(discount * sign * (forward * N(sign * d1) - strike * N(sign * d2)))


def black_formula_std_dev_derivative(
    strike: float,
    forward: float,
    std_dev: float,
    discount: float = 1.0
) -> float:
    """
    Sensitivity of the Black price to the total standard deviation.

    Same for calls and puts: discount * forward * phi(d1). Multiply by
    sqrt(T) to get the usual vega with respect to sigma.

    Args:
        strike: Strike
        forward: Forward
        std_dev: Total standard deviation, sigma * sqrt(T)
        discount: Discount factor to payment

    Returns:
        d(price)/d(std_dev)
    """
    if std_dev < 0:
        raise ValueError(f"std_dev must be non-negative, got {std_dev}")
    if discount <= 0:
        raise ValueError(f"discount must be positive, got {discount}")

    if std_dev == 0.0 or strike == 0.0:
        return 0.0

    if forward <= 0 or strike < 0:
        raise ValueError(f"Forward ({forward}) and strike ({strike}) must be positive")

    d1, _ = _d1_d2(strike, forward, std_dev)

    return float(discount * forward * n(d1))


__all__ = ["OptionType", "black_formula", "black_formula_std_dev_derivative"]
