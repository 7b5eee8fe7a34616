# ==============================================
# Tests for ValueKey
# ==============================================

from decimal import Decimal

import pytest

from field_insights.aggregation import UnstringifiableValue, ValueKey


class TestCanonical:

    def test_strings_unchanged(self):
        assert ValueKey.canonical("Open") == "Open"
        assert ValueKey.canonical("") == ""
        assert ValueKey.canonical(" padded ") == " padded "

    def test_null(self):
        assert ValueKey.canonical(None) == "null"

    def test_booleans_lowercase(self):
        assert ValueKey.canonical(True) == "true"
        assert ValueKey.canonical(False) == "false"

    def test_int_and_numeric_string_share_key(self):
        assert ValueKey.canonical(1) == ValueKey.canonical("1") == "1"

    def test_integral_float_drops_fraction(self):
        assert ValueKey.canonical(1.0) == "1"
        assert ValueKey.canonical(-0.0) == "0"

    def test_fractional_float(self):
        assert ValueKey.canonical(75.5) == "75.5"
        assert ValueKey.canonical(0.1) == "0.1"

    def test_special_floats(self):
        assert ValueKey.canonical(float("nan")) == "NaN"
        assert ValueKey.canonical(float("inf")) == "Infinity"
        assert ValueKey.canonical(float("-inf")) == "-Infinity"

    def test_decimal_goes_through_float(self):
        assert ValueKey.canonical(Decimal("2.50")) == "2.5"

    @pytest.mark.parametrize("value", [{"a": 1}, [1, 2], (1,), {1}, b"raw"])
    def test_non_scalars_rejected(self, value):
        with pytest.raises(UnstringifiableValue):
            ValueKey.canonical(value)

    def test_broken_str_rejected(self):
        class Broken:
            def __str__(self):
                raise RuntimeError("nope")

        with pytest.raises(UnstringifiableValue):
            ValueKey.canonical(Broken())


class TestNumberFormatting:

    @pytest.mark.parametrize("value,expected", [
        (1e-7, "1e-7"),
        (2.5e-8, "2.5e-8"),
        (0.000001, "0.000001"),
        (0.00001, "0.00001"),
        (-0.0005, "-0.0005"),
        (1e21, "1e+21"),
        (1.5e300, "1.5e+300"),
        (1e20, "100000000000000000000"),
        (123456.789, "123456.789"),
    ])
    def test_matches_javascript_number_strings(self, value, expected):
        assert ValueKey.canonical(value) == expected

    def test_tiny_float_buckets_with_its_string_form(self):
        assert ValueKey.canonical(1e-7) == ValueKey.canonical("1e-7")
