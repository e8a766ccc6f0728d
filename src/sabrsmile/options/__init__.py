"""
Options module - Black'76 pricing in standard-deviation form.
"""

from .black import OptionType, black_formula, black_formula_std_dev_derivative

__all__ = [
    "OptionType",
    "black_formula",
    "black_formula_std_dev_derivative",
]
