"""
Minimization methods.

Implements:
- Simplex: Nelder-Mead downhill simplex on the scalar cost
- LevenbergMarquardt: MINPACK Levenberg-Marquardt on the residual vector

Both delegate the iteration to scipy.optimize and translate the solver's
exit status into an EndCriteriaType.
"""

from abc import ABC, abstractmethod
import logging
import numpy as np
from scipy.optimize import minimize, least_squares

from .end_criteria import EndCriteria, EndCriteriaType
from .problem import Problem

logger = logging.getLogger(__name__)


class OptimizationMethod(ABC):
    """Interface of a minimizer."""

    @abstractmethod
    def minimize(self, problem: Problem, end_criteria: EndCriteria) -> EndCriteriaType:
        """
        Minimize the problem's cost function starting from its current value.

        The final point and cost are written back into problem.current_value
        and problem.function_value.

        Args:
            problem: Cost function, constraint and starting point
            end_criteria: Iteration caps and tolerances

        Returns:
            Reason the minimization stopped
        """
        pass

    @staticmethod
    def _check_dimension(problem: Problem) -> None:
        if len(problem.current_value) == 0:
            raise ValueError("Cannot minimize over an empty parameter vector")


class Simplex(OptimizationMethod):
    """
    Nelder-Mead downhill simplex.

    The initial simplex is the starting point plus one vertex per axis at
    distance lambda_. Infeasible points are given an infinite cost.
    """

    # scipy Nelder-Mead exit status
    _STATUS = {
        0: EndCriteriaType.STATIONARY_POINT,
        1: EndCriteriaType.MAX_ITERATIONS,
        2: EndCriteriaType.MAX_ITERATIONS,
    }

    def __init__(self, lambda_: float = 0.01):
        if lambda_ <= 0:
            raise ValueError(f"lambda_ must be positive, got {lambda_}")
        self.lambda_ = lambda_

    def minimize(self, problem: Problem, end_criteria: EndCriteria) -> EndCriteriaType:
        self._check_dimension(problem)
        problem.reset()

        x0 = problem.current_value
        n = len(x0)
        initial_simplex = np.vstack([x0, x0 + self.lambda_ * np.eye(n)])

        def objective(x):
            if not problem.constraint.test(x):
                return np.inf
            return problem.value(x)

        result = minimize(
            objective,
            x0,
            method="Nelder-Mead",
            options={
                "maxiter": end_criteria.max_iterations,
                "xatol": end_criteria.root_epsilon,
                "fatol": end_criteria.function_epsilon,
                "initial_simplex": initial_simplex,
            }
        )

        problem.current_value = np.array(result.x, dtype=np.float64)
        problem.function_value = float(result.fun)

        end_type = self._STATUS.get(result.status, EndCriteriaType.UNKNOWN)
        logger.debug(
            "Simplex stopped after %d iterations (%s): %s",
            result.nit, end_type.value, result.message
        )
        return end_type


class LevenbergMarquardt(OptimizationMethod):
    """
    Levenberg-Marquardt least squares on the cost function's residuals.

    Args:
        epsfcn: Relative error of the residuals, sets the finite difference step
        xtol: Relative tolerance on the parameter vector
        gtol: Orthogonality tolerance between residuals and Jacobian columns
    """

    # MINPACK exit status as reported by scipy.optimize.least_squares
    _STATUS = {
        0: EndCriteriaType.MAX_ITERATIONS,
        1: EndCriteriaType.ZERO_GRADIENT_NORM,
        2: EndCriteriaType.STATIONARY_FUNCTION_VALUE,
        3: EndCriteriaType.STATIONARY_POINT,
        4: EndCriteriaType.STATIONARY_FUNCTION_VALUE,
    }

    def __init__(self, epsfcn: float = 1e-8, xtol: float = 1e-8, gtol: float = 1e-8):
        if epsfcn <= 0:
            raise ValueError(f"epsfcn must be positive, got {epsfcn}")
        self.epsfcn = epsfcn
        self.xtol = xtol
        self.gtol = gtol

    def minimize(self, problem: Problem, end_criteria: EndCriteria) -> EndCriteriaType:
        self._check_dimension(problem)
        problem.reset()

        x0 = problem.current_value
        n = len(x0)

        def residuals(x):
            r = problem.values(x)
            # MINPACK needs at least as many residuals as variables
            if len(r) < n:
                r = np.concatenate([r, np.zeros(n - len(r))])
            return r

        result = least_squares(
            residuals,
            x0,
            method="lm",
            ftol=end_criteria.function_epsilon,
            xtol=self.xtol,
            gtol=self.gtol,
            max_nfev=end_criteria.max_iterations,
            diff_step=np.sqrt(self.epsfcn),
        )

        problem.current_value = np.array(result.x, dtype=np.float64)
        problem.function_value = problem.value(problem.current_value)

        end_type = self._STATUS.get(result.status, EndCriteriaType.UNKNOWN)
        logger.debug(
            "Levenberg-Marquardt stopped after %d evaluations (%s): %s",
            result.nfev, end_type.value, result.message
        )
        return end_type


__all__ = ["OptimizationMethod", "Simplex", "LevenbergMarquardt"]
