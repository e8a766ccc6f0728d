"""
Optimization module - minimizers used by the smile calibration.

Provides:
- Cost functions, constraints and problems
- Projection of a cost function onto its free parameters
- Simplex and Levenberg-Marquardt minimizers
- End criteria and termination reasons
"""

from .end_criteria import EndCriteria, EndCriteriaType
from .problem import (
    CostFunction,
    Constraint,
    NoConstraint,
    BoundaryConstraint,
    Problem,
)
from .projection import Projection, ProjectedCostFunction
from .methods import OptimizationMethod, Simplex, LevenbergMarquardt

__all__ = [
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
]
