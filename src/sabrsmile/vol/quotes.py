"""
Market inputs for smile calibration.

Provides:
- SimpleQuote: a mutable market value (e.g. the forward) shared by reference
- load_smile_quotes: loading (strike, vol) quotes for one expiry from CSV
"""

from typing import Optional, Union
import pandas as pd
import numpy as np


class SimpleQuote:
    """
    Market value owned by the caller and read live by its consumers.

    A smile holds the quote itself, not its value, so moving the forward
    and calling update() recalibrates against the new level.
    """

    def __init__(self, value: Optional[float] = None):
        self._value = None if value is None else float(value)

    def value(self) -> float:
        """Current value; raises if the quote was never set."""
        if self._value is None:
            raise ValueError("invalid SimpleQuote: no value set")
        return self._value

    def set_value(self, value: Optional[float]) -> float:
        """
        Set a new value.

        Returns:
            Change from the previous value (0 if either is unset)
        """
        new_value = None if value is None else float(value)
        if self._value is None or new_value is None:
            diff = 0.0
        else:
            diff = new_value - self._value
        self._value = new_value
        return diff

    def is_valid(self) -> bool:
        return self._value is not None

    def __repr__(self) -> str:
        return f"SimpleQuote({self._value!r})"


def as_quote(value: Union[SimpleQuote, float]) -> SimpleQuote:
    """Wrap a plain number in a SimpleQuote; pass quote objects through."""
    if hasattr(value, "value") and callable(value.value):
        return value
    return SimpleQuote(value)


def load_smile_quotes(
    filepath: str,
    expiry: Optional[str] = None
) -> pd.DataFrame:
    """
    Load smile quotes from CSV file.

    Expected CSV format:
    strike, vol[, expiry]

    Args:
        filepath: Path to CSV file
        expiry: Optional filter on the expiry column

    Returns:
        DataFrame with columns [strike, vol], sorted by strike
    """
    df = pd.read_csv(filepath)

    # Standardize column names
    df.columns = [c.strip().lower() for c in df.columns]

    missing = {"strike", "vol"} - set(df.columns)
    if missing:
        raise ValueError(f"Missing required columns for smile quotes: {missing}")

    if expiry is not None:
        if "expiry" not in df.columns:
            raise ValueError("Cannot filter by expiry: no expiry column")
        df = df[df["expiry"].astype(str).str.strip().str.upper() == str(expiry).strip().upper()]

    df = df[["strike", "vol"]].astype(np.float64)
    df = df[df["strike"] > 0]

    return df.sort_values("strike").reset_index(drop=True)


__all__ = ["SimpleQuote", "as_quote", "load_smile_quotes"]
