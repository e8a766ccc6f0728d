"""
SabrSmile: SABR volatility smile calibration

A small library for:
- Calibrating the SABR model (alpha, beta, nu, rho) to the market smile of
  one expiry, with any subset of the parameters held fixed
- Uniform or Black-vega weighting of the market points
- Evaluating the calibrated smile at arbitrary strikes

Scope: single expiry smiles only; no surface construction.
"""

__version__ = "0.1.0"

# Interpolation interface
from .interpolation import Interpolation

# Optimization
from .optimization import (
    EndCriteria,
    EndCriteriaType,
    CostFunction,
    Constraint,
    NoConstraint,
    BoundaryConstraint,
    Problem,
    Projection,
    ProjectedCostFunction,
    OptimizationMethod,
    Simplex,
    LevenbergMarquardt,
)

# Options
from .options import OptionType, black_formula, black_formula_std_dev_derivative

# Volatility (SABR)
from .vol import (
    sabr_volatility,
    unsafe_sabr_volatility,
    validate_sabr_parameters,
    SabrParametersTransformation,
    SimpleQuote,
    load_smile_quotes,
    SabrCoefficients,
    SabrCalibrationResult,
    SabrInterpolation,
    Sabr,
)

__all__ = [
    # Version
    "__version__",
    # Interpolation
    "Interpolation",
    # Optimization
    "EndCriteria",
    "EndCriteriaType",
    "CostFunction",
    "Constraint",
    "NoConstraint",
    "BoundaryConstraint",
    "Problem",
    "Projection",
    "ProjectedCostFunction",
    "OptimizationMethod",
    "Simplex",
    "LevenbergMarquardt",
    # Options
    "OptionType",
    "black_formula",
    "black_formula_std_dev_derivative",
    # Volatility (SABR)
    "sabr_volatility",
    "unsafe_sabr_volatility",
    "validate_sabr_parameters",
    "SabrParametersTransformation",
    "SimpleQuote",
    "load_smile_quotes",
    "SabrCoefficients",
    "SabrCalibrationResult",
    "SabrInterpolation",
    "Sabr",
]
