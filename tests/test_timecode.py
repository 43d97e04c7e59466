"""Tests for timecode module."""

import pytest

from ytpglitch.errors import NegativeResult
from ytpglitch.timecode import TICKS_PER_MS, Timecode, ZERO, ms


class TestConversions:
    def test_from_milliseconds(self):
        assert Timecode.from_milliseconds(1.25).ticks == 12500
        assert ms(1000).ticks == 1000 * TICKS_PER_MS

    def test_truncates(self):
        # 1.9 ticks -> 1 tick, never rounded up
        assert Timecode.from_milliseconds(0.00019).ticks == 1

    @pytest.mark.parametrize("value", [0.57, 0.69, 1.13, 1.14, 1.38, 33.33, 999.99])
    def test_two_decimal_inputs_exact(self, value):
        assert ms(value).ticks == round(value * 100) * 100

    def test_every_hundredth(self):
        bad = [v for v in range(1, 100_000) if ms(v / 100).ticks != v * 100]
        assert bad == []

    def test_to_milliseconds(self):
        assert Timecode(12500).to_milliseconds() == pytest.approx(1.25)

    def test_negative_ms(self):
        with pytest.raises(NegativeResult):
            Timecode.from_milliseconds(-1)

    def test_negative_ticks(self):
        with pytest.raises(NegativeResult):
            Timecode(-5)

    def test_float_ticks_coerced(self):
        assert Timecode(10.0).ticks == 10
        assert isinstance(Timecode(10.0).ticks, int)


class TestArithmetic:
    def test_add(self):
        assert ms(100) + ms(50) == ms(150)
        assert ms(100).add(ms(50)) == ms(150)

    def test_subtract(self):
        assert ms(100) - ms(40) == ms(60)

    def test_subtract_below_zero(self):
        with pytest.raises(NegativeResult):
            ms(40) - ms(100)

    def test_subtract_clamped(self):
        assert ms(40).subtract(ms(100), clamp=True) == ZERO

    def test_negative_result_is_value_error(self):
        with pytest.raises(ValueError):
            ms(1).subtract(ms(2))

    def test_scale(self):
        assert ms(100).scale(0.5) == ms(50)
        assert ms(100) * 3 == ms(300)
        assert 2 * ms(100) == ms(200)

    def test_scale_truncates(self):
        assert Timecode(10).scale(1 / 3).ticks == 3

    def test_scale_negative(self):
        with pytest.raises(NegativeResult):
            ms(10).scale(-1)

    def test_floordiv(self):
        assert ms(1000) // ms(300) == 3
        assert ms(50) // ms(100) == 0

    def test_floordiv_zero(self):
        with pytest.raises(ZeroDivisionError):
            ms(100) // ZERO

    def test_ordering(self):
        assert ms(10) < ms(20)
        assert max(ms(5), ms(7)) == ms(7)

    def test_str(self):
        assert str(ms(61_001.5)) == "00:01:01.001"
