"""
SABR stochastic volatility model - closed form implied volatility.

Implements:
- Hagan et al. lognormal (Black) implied volatility approximation
- Parameter validation for the SABR domain

References:
- Hagan, P.S. et al. (2002). "Managing Smile Risk." Wilmott Magazine.
"""

import numpy as np


# Below this z^2 the ratio z / x(z) is replaced by its Taylor expansion
_Z_SERIES_THRESHOLD = np.finfo(float).eps


def validate_sabr_parameters(alpha: float, beta: float, nu: float, rho: float) -> None:
    """
    Check the SABR parameters lie in the model domain.

    Raises:
        ValueError: If alpha <= 0, beta outside [0, 1], nu < 0 or rho outside (-1, 1)
    """
    if alpha <= 0:
        raise ValueError(f"alpha must be positive, got {alpha}")
    if not 0 <= beta <= 1:
        raise ValueError(f"beta must be in [0, 1], got {beta}")
    if nu < 0:
        raise ValueError(f"nu must be non-negative, got {nu}")
    if not -1 < rho < 1:
        raise ValueError(f"rho must be in (-1, 1), got {rho}")


def _hagan_atm_vol(
    forward: float,
    expiry: float,
    alpha: float,
    beta: float,
    nu: float,
    rho: float
) -> float:
    """ATM Black vol from Hagan formula."""
    f_beta = forward ** (1 - beta)

    term1 = (1 - beta)**2 * alpha**2 / (24 * forward**(2 - 2*beta))
    term2 = rho * beta * nu * alpha / (4 * f_beta)
    term3 = (2 - 3 * rho**2) * nu**2 / 24

    return alpha / f_beta * (1 + (term1 + term2 + term3) * expiry)


def unsafe_sabr_volatility(
    strike: float,
    forward: float,
    expiry: float,
    alpha: float,
    beta: float,
    nu: float,
    rho: float
) -> float:
    """
    Hagan Black implied volatility without input checks.

    Used inside calibration loops where the inputs were validated once
    up front.

    Args:
        strike: Strike (positive)
        forward: Forward (positive)
        expiry: Time to expiry in years
        alpha: SABR alpha (instantaneous vol)
        beta: CEV exponent
        nu: Vol of vol
        rho: Correlation

    Returns:
        Black implied volatility
    """
    # Handle ATM case
    if abs(forward - strike) < 1e-10:
        return float(_hagan_atm_vol(forward, expiry, alpha, beta, nu, rho))

    one_minus_beta = 1 - beta
    log_fk = np.log(forward / strike)
    fk_mid = (forward * strike) ** (one_minus_beta / 2)

    denom = fk_mid * (1 + one_minus_beta**2 / 24 * log_fk**2
                      + one_minus_beta**4 / 1920 * log_fk**4)

    # z / x(z)
    z = nu / alpha * fk_mid * log_fk
    if z * z > _Z_SERIES_THRESHOLD:
        sqrt_term = np.sqrt(1 - 2 * rho * z + z**2)
        z_over_xz = z / np.log((sqrt_term + z - rho) / (1 - rho))
    else:
        z_over_xz = 1 - 0.5 * rho * z - (3 * rho**2 - 2) * z**2 / 12

    # Time correction terms
    term1 = one_minus_beta**2 * alpha**2 / (24 * fk_mid**2)
    term2 = rho * beta * nu * alpha / (4 * fk_mid)
    term3 = (2 - 3 * rho**2) * nu**2 / 24

    time_adj = 1 + (term1 + term2 + term3) * expiry

    return float(alpha / denom * z_over_xz * time_adj)


def sabr_volatility(
    strike: float,
    forward: float,
    expiry: float,
    alpha: float,
    beta: float,
    nu: float,
    rho: float
) -> float:
    """
    Hagan Black implied volatility.

    Args:
        strike: Strike
        forward: Forward
        expiry: Time to expiry in years
        alpha, beta, nu, rho: SABR parameters

    Returns:
        Black implied volatility

    Raises:
        ValueError: On non-positive strike or forward, negative expiry or
            parameters outside the SABR domain
    """
    if strike <= 0:
        raise ValueError(f"strike must be positive, got {strike}")
    if forward <= 0:
        raise ValueError(f"forward must be positive, got {forward}")
    if expiry < 0:
        raise ValueError(f"expiry must be non-negative, got {expiry}")
    validate_sabr_parameters(alpha, beta, nu, rho)

    return unsafe_sabr_volatility(strike, forward, expiry, alpha, beta, nu, rho)


__all__ = ["validate_sabr_parameters", "unsafe_sabr_volatility", "sabr_volatility"]
