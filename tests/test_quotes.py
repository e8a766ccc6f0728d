"""
Tests for market quote inputs.
"""

import pytest
import numpy as np

from sabrsmile.vol.quotes import SimpleQuote, as_quote, load_smile_quotes
from sabrsmile.vol.sabr_interpolation import SabrInterpolation


class TestSimpleQuote:
    """Tests for SimpleQuote."""

    def test_value(self):
        quote = SimpleQuote(0.03)
        assert quote.is_valid()
        assert quote.value() == 0.03

    def test_unset_quote(self):
        """Test reading an unset quote fails."""
        quote = SimpleQuote()
        assert not quote.is_valid()
        with pytest.raises(ValueError):
            quote.value()

    def test_set_value_returns_change(self):
        """Test set_value reports the move."""
        quote = SimpleQuote(0.03)
        np.testing.assert_allclose(quote.set_value(0.035), 0.005)
        assert quote.value() == 0.035

        assert quote.set_value(None) == 0.0
        assert not quote.is_valid()

    def test_as_quote(self):
        """Test numbers are wrapped and quotes passed through."""
        quote = SimpleQuote(0.02)
        assert as_quote(quote) is quote
        assert as_quote(0.02).value() == 0.02


class TestLoadSmileQuotes:
    """Tests for CSV loading."""

    @pytest.fixture
    def quotes_csv(self, tmp_path):
        path = tmp_path / "smile.csv"
        path.write_text(
            " Strike , Vol ,Expiry\n"
            "0.035,0.42,1Y\n"
            "0.02,0.55,1Y\n"
            "0.03,0.45,1Y\n"
            "0.0,0.90,1Y\n"
            "0.025,0.60,2Y\n"
        )
        return path

    def test_load_all(self, quotes_csv):
        """Test columns are normalized, bad strikes dropped and rows sorted."""
        df = load_smile_quotes(str(quotes_csv))

        assert list(df.columns) == ["strike", "vol"]
        np.testing.assert_array_equal(df["strike"].values, [0.02, 0.025, 0.03, 0.035])

    def test_filter_by_expiry(self, quotes_csv):
        """Test filtering a single expiry."""
        df = load_smile_quotes(str(quotes_csv), expiry="1y")

        np.testing.assert_array_equal(df["strike"].values, [0.02, 0.03, 0.035])
        np.testing.assert_array_equal(df["vol"].values, [0.55, 0.45, 0.42])

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("strike,price\n0.03,0.01\n")
        with pytest.raises(ValueError):
            load_smile_quotes(str(path))

    def test_expiry_filter_without_column(self, tmp_path):
        path = tmp_path / "no_expiry.csv"
        path.write_text("strike,vol\n0.03,0.4\n0.04,0.35\n")
        with pytest.raises(ValueError):
            load_smile_quotes(str(path), expiry="1Y")

    def test_feeds_interpolation(self, quotes_csv):
        """Test loaded quotes build a smile."""
        df = load_smile_quotes(str(quotes_csv), expiry="1Y")
        smile = SabrInterpolation.from_quotes(df, expiry=1.0, forward=0.03)

        assert smile.x_min == 0.02
        assert smile.x_max == 0.035
        assert len(smile.weights) == 3
