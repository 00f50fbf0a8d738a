import pytest
from decimal import Decimal

from apps.offenses.money import MAX_CENTS, cents_to_decimal, format_cents, to_cents


class TestToCents:
    """Tests for to_cents."""

    @pytest.mark.parametrize('value, expected', [
        ('12.34', 1234),
        ('0.5', 50),
        ('5', 500),
        (5, 500),
        (Decimal('0.01'), 1),
        (' 7.10 ', 710),
        ('0', 0),
    ])
    def test_valid_amounts(self, value, expected):
        assert to_cents(value) == expected

    def test_sums_exactly(self):
        """0.10 + 0.20 is 30 cents, not 30.000000000000004."""
        assert to_cents('0.10') + to_cents('0.20') == to_cents('0.30')

    @pytest.mark.parametrize('value', [
        '-1', '-0.01', 'abc', '', '1.234', 'NaN', 'Infinity', '1e30', '21474836.48',
    ])
    def test_invalid_amounts(self, value):
        with pytest.raises(ValueError):
            to_cents(value)

    def test_upper_bound(self):
        assert to_cents('21474836.47') == MAX_CENTS

    def test_exponent_form(self):
        assert to_cents('1E+2') == 10000

    def test_rejects_floats(self):
        with pytest.raises(ValueError):
            to_cents(0.1)


class TestFormatting:
    """Tests for cents_to_decimal and format_cents."""

    def test_cents_to_decimal(self):
        assert cents_to_decimal(1234) == Decimal('12.34')
        assert str(cents_to_decimal(500)) == '5.00'
        assert cents_to_decimal(None) is None

    @pytest.mark.parametrize('cents, unit, expected', [
        (500, 'USD', '$5.00'),
        (1999, 'EUR', '€19.99'),
        (200, 'beers', '2.00 beers'),
        (0, None, '0.00'),
    ])
    def test_format_cents(self, cents, unit, expected):
        assert format_cents(cents, unit) == expected
