"""
SABR smile interpolation.

Calibrates the SABR parameters (alpha, beta, nu, rho) for a single expiry to
market (strike, vol) points and then evaluates the Hagan closed form at any
strike:
- Any subset of the parameters can be held fixed
- Calibration runs unconstrained through SabrParametersTransformation
- Points are weighted uniformly or by Black vega
- The forward is read live from a quote, so update() recalibrates against
  the current market level
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Union
import logging
import numpy as np
import pandas as pd

from ..interpolation import Interpolation
from ..optimization import (
    CostFunction,
    EndCriteria,
    EndCriteriaType,
    LevenbergMarquardt,
    NoConstraint,
    OptimizationMethod,
    Problem,
    ProjectedCostFunction,
)
from ..options.black import black_formula_std_dev_derivative
from .quotes import SimpleQuote, as_quote
from .sabr import unsafe_sabr_volatility, validate_sabr_parameters
from .transformation import SabrParametersTransformation

logger = logging.getLogger(__name__)


# Starting points for parameters the caller leaves unspecified
DEFAULT_ALPHA = np.sqrt(0.2)
DEFAULT_BETA = 0.5
DEFAULT_NU = np.sqrt(0.4)
DEFAULT_RHO = 0.0

PARAMETER_NAMES = ("alpha", "beta", "nu", "rho")


@dataclass
class SabrCoefficients:
    """
    SABR parameters and calibration state for one smile.

    A parameter passed as None starts from its default guess and is always
    calibrated, whatever its fixed flag says.

    Attributes:
        t: Option expiry in years
        forward: Quote holding the forward, read live
        alpha, beta, nu, rho: Current SABR parameters
        alpha_is_fixed, beta_is_fixed, nu_is_fixed, rho_is_fixed: Fixed flags
        weights: Calibration weight per data point
        error: Weighted RMS error of the last update (None before)
        max_error: Max absolute vol error of the last update (None before)
        end_criteria: Termination reason of the last minimization
    """
    t: float
    forward: SimpleQuote
    alpha: Optional[float] = None
    beta: Optional[float] = None
    nu: Optional[float] = None
    rho: Optional[float] = None
    alpha_is_fixed: bool = False
    beta_is_fixed: bool = False
    nu_is_fixed: bool = False
    rho_is_fixed: bool = False
    weights: np.ndarray = field(default_factory=lambda: np.array([]))
    error: Optional[float] = None
    max_error: Optional[float] = None
    end_criteria: EndCriteriaType = EndCriteriaType.NONE

    def __post_init__(self):
        """Apply default guesses and validate."""
        if not self.t > 0:
            raise ValueError(f"expiry time must be positive: {self.t} not allowed")

        if self.alpha is None:
            self.alpha, self.alpha_is_fixed = DEFAULT_ALPHA, False
        if self.beta is None:
            self.beta, self.beta_is_fixed = DEFAULT_BETA, False
        if self.nu is None:
            self.nu, self.nu_is_fixed = DEFAULT_NU, False
        if self.rho is None:
            self.rho, self.rho_is_fixed = DEFAULT_RHO, False

        self.alpha = float(self.alpha)
        self.beta = float(self.beta)
        self.nu = float(self.nu)
        self.rho = float(self.rho)
        validate_sabr_parameters(self.alpha, self.beta, self.nu, self.rho)

    def parameters(self) -> np.ndarray:
        """Current (alpha, beta, nu, rho)."""
        return np.array([self.alpha, self.beta, self.nu, self.rho])

    def fixed_flags(self) -> np.ndarray:
        return np.array([
            self.alpha_is_fixed,
            self.beta_is_fixed,
            self.nu_is_fixed,
            self.rho_is_fixed,
        ])

    @property
    def all_fixed(self) -> bool:
        return bool(self.fixed_flags().all())

    def set_free_parameters(self, values: Sequence[float]) -> None:
        """Overwrite the free parameters; fixed ones are left untouched."""
        for name, is_fixed, value in zip(PARAMETER_NAMES, self.fixed_flags(), values):
            if not is_fixed:
                setattr(self, name, float(value))

    def to_dict(self) -> Dict[str, float]:
        """Convert parameters to dictionary."""
        return {
            "alpha": self.alpha,
            "beta": self.beta,
            "nu": self.nu,
            "rho": self.rho,
        }


@dataclass
class SabrCalibrationResult:
    """Snapshot of a smile after update()."""
    params: Dict[str, float]
    error: float
    max_error: float
    end_criteria: EndCriteriaType
    weights: np.ndarray

    @property
    def converged(self) -> bool:
        return EndCriteria.succeeded(self.end_criteria)


class SabrError(CostFunction):
    """
    Calibration cost of a SABR smile in unconstrained coordinates.

    Every evaluation maps its argument through the transformation and
    writes the free parameters into the smile's coefficients, so after the
    minimizer returns the coefficients hold the last evaluated point.
    """

    def __init__(
        self,
        smile: "SabrInterpolation",
        transformation: SabrParametersTransformation
    ):
        self.smile = smile
        self.transformation = transformation

    def _set_parameters(self, x: np.ndarray) -> None:
        self.smile.coefficients.set_free_parameters(self.transformation.direct(x))

    def value(self, x: np.ndarray) -> float:
        self._set_parameters(x)
        return self.smile.interpolation_squared_error()

    def values(self, x: np.ndarray) -> np.ndarray:
        self._set_parameters(x)
        return self.smile.interpolation_errors()


class SabrInterpolation(Interpolation):
    """
    SABR smile between discrete volatility points.

    Args:
        strikes: Market strikes
        vols: Market Black vols, aligned with strikes
        expiry: Option expiry in years
        forward: Forward level, as a quote (read live) or a number
        alpha, beta, nu, rho: Initial guesses, None for the defaults
        alpha_is_fixed, beta_is_fixed, nu_is_fixed, rho_is_fixed: Hold the
            parameter at its guess during calibration
        vega_weighted: Weight points by Black vega instead of uniformly
        end_criteria: Stopping rules (default: EndCriteria())
        opt_method: Minimizer (default: LevenbergMarquardt())

    The smile is not calibrated on construction; call update().
    """

    def __init__(
        self,
        strikes: Sequence[float],
        vols: Sequence[float],
        expiry: float,
        forward: Union[SimpleQuote, float],
        alpha: Optional[float] = None,
        beta: Optional[float] = None,
        nu: Optional[float] = None,
        rho: Optional[float] = None,
        alpha_is_fixed: bool = False,
        beta_is_fixed: bool = False,
        nu_is_fixed: bool = False,
        rho_is_fixed: bool = False,
        vega_weighted: bool = False,
        end_criteria: Optional[EndCriteria] = None,
        opt_method: Optional[OptimizationMethod] = None
    ):
        super().__init__(strikes, vols)
        if not np.all(self._x > 0):
            bad = self._x[~(self._x > 0)]
            raise ValueError(f"strike must be positive: {bad[0]} not allowed")

        self.coefficients = SabrCoefficients(
            t=expiry,
            forward=as_quote(forward),
            alpha=alpha,
            beta=beta,
            nu=nu,
            rho=rho,
            alpha_is_fixed=alpha_is_fixed,
            beta_is_fixed=beta_is_fixed,
            nu_is_fixed=nu_is_fixed,
            rho_is_fixed=rho_is_fixed,
        )
        n = len(self._x)
        self.coefficients.weights = np.full(n, 1.0 / n)

        self.vega_weighted = vega_weighted
        self.end_criteria_rules = end_criteria if end_criteria is not None else EndCriteria()
        self.opt_method = opt_method if opt_method is not None else LevenbergMarquardt(1e-8, 1e-8, 1e-8)

    @classmethod
    def from_quotes(
        cls,
        quotes_df: pd.DataFrame,
        expiry: float,
        forward: Union[SimpleQuote, float],
        **kwargs
    ) -> "SabrInterpolation":
        """
        Build from a DataFrame with columns [strike, vol].

        Remaining keyword arguments are passed to the constructor.
        """
        missing = {"strike", "vol"} - set(quotes_df.columns)
        if missing:
            raise ValueError(f"Missing required columns for smile quotes: {missing}")

        return cls(
            quotes_df["strike"].values,
            quotes_df["vol"].values,
            expiry,
            forward,
            **kwargs
        )

    # Accessors

    @property
    def strikes(self) -> np.ndarray:
        return self._x.copy()

    @property
    def vols(self) -> np.ndarray:
        return self._y.copy()

    @property
    def expiry(self) -> float:
        return self.coefficients.t

    @property
    def forward(self) -> float:
        return self.coefficients.forward.value()

    @property
    def alpha(self) -> float:
        return self.coefficients.alpha

    @property
    def beta(self) -> float:
        return self.coefficients.beta

    @property
    def nu(self) -> float:
        return self.coefficients.nu

    @property
    def rho(self) -> float:
        return self.coefficients.rho

    @property
    def interpolation_error(self) -> Optional[float]:
        return self.coefficients.error

    @property
    def interpolation_max_error(self) -> Optional[float]:
        return self.coefficients.max_error

    @property
    def weights(self) -> np.ndarray:
        return self.coefficients.weights.copy()

    @property
    def end_criteria(self) -> EndCriteriaType:
        return self.coefficients.end_criteria

    # Calibration

    def update(self) -> SabrCalibrationResult:
        """
        Calibrate the free parameters to the market vols.

        Starts from the parameters currently stored, i.e. the result of the
        previous update() or the initial guesses. Non-convergence is not
        raised; check end_criteria and the errors.

        Returns:
            SabrCalibrationResult snapshot

        Raises:
            ValueError: If the forward is not positive
        """
        forward = self.forward
        if not forward > 0:
            raise ValueError(f"forward must be positive: {forward} not allowed")

        coeffs = self.coefficients

        if self.vega_weighted:
            self._update_vega_weights(forward)

        if coeffs.all_fixed:
            coeffs.error = self._rms_error()
            coeffs.max_error = self._max_error()
            coeffs.end_criteria = EndCriteriaType.NONE
            logger.debug("All SABR parameters fixed, rms error %.3e", coeffs.error)
            return self._result()

        transformation = SabrParametersTransformation()
        fixed = coeffs.fixed_flags()

        # Fixed components only need some point in the range of direct()
        previous = coeffs.parameters()
        seed = np.where(fixed, transformation.direct(np.zeros(4)), transformation.clip(previous))
        guess = transformation.inverse(seed)

        cost_function = ProjectedCostFunction(SabrError(self, transformation), guess, fixed)
        problem = Problem(cost_function, NoConstraint(), cost_function.project(guess))

        logger.debug(
            "Calibrating SABR smile: t=%s, forward=%s, %d points, %d free parameters",
            coeffs.t, forward, len(self._x), cost_function.number_of_free
        )
        try:
            end_type = self.opt_method.minimize(problem, self.end_criteria_rules)
        except Exception:
            # The cost function has written trial points into the coefficients
            coeffs.set_free_parameters(previous)
            raise

        result = transformation.direct(cost_function.include(problem.current_value))
        coeffs.set_free_parameters(result)
        coeffs.end_criteria = end_type
        coeffs.error = self._rms_error()
        coeffs.max_error = self._max_error()

        if not EndCriteria.succeeded(end_type):
            logger.warning(
                "SABR calibration did not converge (%s): rms error %.3e, max error %.3e",
                end_type.value, coeffs.error, coeffs.max_error
            )
        else:
            logger.debug(
                "SABR calibration finished (%s): %s, rms error %.3e",
                end_type.value, coeffs.to_dict(), coeffs.error
            )

        return self._result()

    def calibrate(self) -> SabrCalibrationResult:
        """Alias of update()."""
        return self.update()

    def _update_vega_weights(self, forward: float) -> None:
        """Reweight points by d(Black price)/d(std dev), normalized to one."""
        t = self.coefficients.t
        weights = np.array([
            black_formula_std_dev_derivative(k, forward, np.sqrt(v * v * t))
            for k, v in zip(self._x, self._y)
        ])

        total = weights.sum()
        if not total > 0:
            raise ValueError("vega weights sum to zero: cannot normalize")

        self.coefficients.weights = weights / total

    def _result(self) -> SabrCalibrationResult:
        coeffs = self.coefficients
        return SabrCalibrationResult(
            params=coeffs.to_dict(),
            error=coeffs.error,
            max_error=coeffs.max_error,
            end_criteria=coeffs.end_criteria,
            weights=coeffs.weights.copy(),
        )

    # Evaluation

    def value(self, x: float) -> float:
        """
        SABR vol at strike x with the stored parameters.

        Raises:
            ValueError: If the strike or the forward is not positive
        """
        if not x > 0:
            raise ValueError(f"strike must be positive: {x} not allowed")
        forward = self.forward
        if not forward > 0:
            raise ValueError(f"forward must be positive: {forward} not allowed")

        c = self.coefficients
        return unsafe_sabr_volatility(x, forward, c.t, c.alpha, c.beta, c.nu, c.rho)

    def primitive(self, x: float) -> float:
        raise NotImplementedError("SABR primitive not implemented")

    def derivative(self, x: float) -> float:
        raise NotImplementedError("SABR derivative not implemented")

    def second_derivative(self, x: float) -> float:
        raise NotImplementedError("SABR secondDerivative not implemented")

    # Error metrics

    def _model_vols(self) -> np.ndarray:
        c = self.coefficients
        forward = c.forward.value()
        return np.array([
            unsafe_sabr_volatility(k, forward, c.t, c.alpha, c.beta, c.nu, c.rho)
            for k in self._x
        ])

    def interpolation_squared_error(self) -> float:
        """Weighted sum of squared vol errors."""
        diff = self._model_vols() - self._y
        return float(np.sum(self.coefficients.weights * diff * diff))

    def interpolation_errors(self) -> np.ndarray:
        """Vol errors scaled by sqrt(weight), one per point."""
        diff = self._model_vols() - self._y
        return diff * np.sqrt(self.coefficients.weights)

    def _rms_error(self) -> float:
        # n >= 2 is guaranteed by the constructor
        n = len(self._x)
        return float(np.sqrt(n * self.interpolation_squared_error() / (n - 1)))

    def _max_error(self) -> float:
        return float(np.max(np.abs(self._model_vols() - self._y)))


@dataclass
class Sabr:
    """
    SABR interpolation factory.

    Holds the calibration settings for one expiry and builds smiles from
    (strike, vol) data.
    """
    expiry: float
    forward: Union[SimpleQuote, float]
    alpha: Optional[float] = None
    beta: Optional[float] = None
    nu: Optional[float] = None
    rho: Optional[float] = None
    alpha_is_fixed: bool = False
    beta_is_fixed: bool = False
    nu_is_fixed: bool = False
    rho_is_fixed: bool = False
    vega_weighted: bool = False
    end_criteria: Optional[EndCriteria] = None
    opt_method: Optional[OptimizationMethod] = None

    def interpolate(self, strikes: Sequence[float], vols: Sequence[float]) -> SabrInterpolation:
        """Un-calibrated smile through the given points."""
        return SabrInterpolation(
            strikes,
            vols,
            self.expiry,
            self.forward,
            alpha=self.alpha,
            beta=self.beta,
            nu=self.nu,
            rho=self.rho,
            alpha_is_fixed=self.alpha_is_fixed,
            beta_is_fixed=self.beta_is_fixed,
            nu_is_fixed=self.nu_is_fixed,
            rho_is_fixed=self.rho_is_fixed,
            vega_weighted=self.vega_weighted,
            end_criteria=self.end_criteria,
            opt_method=self.opt_method,
        )


__all__ = [
    "SabrCoefficients",
    "SabrCalibrationResult",
    "SabrError",
    "SabrInterpolation",
    "Sabr",
    "DEFAULT_ALPHA",
    "DEFAULT_BETA",
    "DEFAULT_NU",
    "DEFAULT_RHO",
]
