"""
Volatility module - SABR smile model and calibration.

Provides:
- Hagan closed-form SABR implied volatility
- Unconstrained parameterization of the SABR domain
- SABR smile interpolation calibrated to market vols
- Market quote inputs (live forward, smile quote loading)
"""

from .sabr import sabr_volatility, unsafe_sabr_volatility, validate_sabr_parameters
from .transformation import SabrParametersTransformation
from .quotes import SimpleQuote, load_smile_quotes
from .sabr_interpolation import (
    SabrCoefficients,
    SabrCalibrationResult,
    SabrError,
    SabrInterpolation,
    Sabr,
)

__all__ = [
    "sabr_volatility",
    "unsafe_sabr_volatility",
    "validate_sabr_parameters",
    "SabrParametersTransformation",
    "SimpleQuote",
    "load_smile_quotes",
    "SabrCoefficients",
    "SabrCalibrationResult",
    "SabrError",
    "SabrInterpolation",
    "Sabr",
]
