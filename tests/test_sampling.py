"""Tests for width adaptation, Lemire bounded sampling, and unit doubles."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest
from hypothesis import given
from hypothesis import strategies as st
from threadrand import ConfigError, WidthPair
from threadrand.sampling import lemire_bounded, rejection_threshold, to_unit_double
from threadrand.widths import MASK32, MASK64, rotl

from tests.strategies import words32, words64


def _scripted(values: list[int]) -> tuple[Callable[[], int], Iterator[int]]:
    it = iter(values)
    return lambda: next(it), it


class TestWidthPair:
    """Tests for the result/state width pairing."""

    def test_defaults(self) -> None:
        widths = WidthPair()
        assert (widths.result_bits, widths.state_bits) == (64, 64)
        assert widths.shift == 0

    def test_narrowing_keeps_high_bits(self) -> None:
        widths = WidthPair(32, 64)
        assert widths.shift == 32
        assert widths.convert(0xDEADBEEF_00000001) == 0xDEADBEEF

    def test_result_wider_than_state_rejected(self) -> None:
        with pytest.raises(ConfigError, match='exceeds state width') as exc_info:
            WidthPair(64, 32)
        assert exc_info.value.field == 'result_bits'

    @pytest.mark.parametrize('bits', [8, 16, 24, 48, 128])
    def test_unsupported_widths_rejected(self, bits: int) -> None:
        with pytest.raises(ConfigError, match='unsupported width'):
            WidthPair(bits, 64)

    def test_mantissa_bits(self) -> None:
        assert WidthPair(64, 64).mantissa_bits == 53
        assert WidthPair(32, 64).mantissa_bits == 23
        assert WidthPair(32, 32).mantissa_bits == 23

    def test_result_mask(self) -> None:
        assert WidthPair(32, 32).result_mask == MASK32
        assert WidthPair(64, 64).result_mask == MASK64

    @given(words64, st.integers(min_value=1, max_value=63))
    def test_rotl_round_trip(self, word: int, k: int) -> None:
        assert rotl(rotl(word, k, 64), 64 - k, 64) == word


class TestRejectionThreshold:
    """Tests for the negate-and-reduce threshold."""

    @given(st.integers(min_value=1, max_value=2**64))
    def test_equals_two_pow_w_mod_span_64(self, span: int) -> None:
        assert rejection_threshold(span, 64) == 2**64 % span

    @given(st.integers(min_value=1, max_value=2**32))
    def test_equals_two_pow_w_mod_span_32(self, span: int) -> None:
        assert rejection_threshold(span, 32) == 2**32 % span

    def test_powers_of_two_never_reject(self) -> None:
        assert rejection_threshold(1 << 20, 64) == 0
        assert rejection_threshold(1, 32) == 0


class TestLemireBounded:
    """Tests for lemire_bounded()."""

    def test_span_one_always_zero(self) -> None:
        draw, _ = _scripted([0, MASK32, 12345])
        assert [lemire_bounded(draw, 1, 32) for _ in range(3)] == [0, 0, 0]

    def test_full_span_returns_word(self) -> None:
        draw, _ = _scripted([MASK64, 0, 42])
        assert [lemire_bounded(draw, 2**64, 64) for _ in range(3)] == [MASK64, 0, 42]

    def test_rejected_draw_is_resampled(self) -> None:
        # span 3 at 32 bits: threshold is 2^32 mod 3 == 1, so x == 0 is rejected
        draw, remaining = _scripted([0, 5, 999])
        assert lemire_bounded(draw, 3, 32) == 0
        assert next(remaining) == 999

    def test_high_half_is_result(self) -> None:
        draw, _ = _scripted([MASK32])
        assert lemire_bounded(draw, 10, 32) == 9

    @given(words64, st.integers(min_value=1, max_value=2**64))
    def test_result_in_range(self, word: int, span: int) -> None:
        # an all-ones word is never rejected, so resampling terminates
        draws = iter([word])
        result = lemire_bounded(lambda: next(draws, MASK64), span, 64)
        assert 0 <= result < span


class TestUnitDouble:
    """Tests for to_unit_double()."""

    def test_all_ones_64_below_one(self) -> None:
        value = to_unit_double(MASK64, 64, 53)
        assert value < 1.0
        assert value == 1.0 - 2.0**-53

    def test_all_ones_32_below_one(self) -> None:
        value = to_unit_double(MASK32, 32, 23)
        assert value < 1.0
        assert value == 1.0 - 2.0**-23

    def test_zero(self) -> None:
        assert to_unit_double(0, 64, 53) == 0.0

    @given(words64)
    def test_64_bit_in_unit_interval(self, word: int) -> None:
        assert 0.0 <= to_unit_double(word, 64, 53) < 1.0

    @given(words32)
    def test_32_bit_in_unit_interval(self, word: int) -> None:
        assert 0.0 <= to_unit_double(word, 32, 23) < 1.0
