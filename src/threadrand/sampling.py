"""Bounded integers and unit doubles derived from raw result words."""

from __future__ import annotations

from collections.abc import Callable

__all__ = [
    'lemire_bounded',
    'rejection_threshold',
    'to_unit_double',
]


def rejection_threshold(span: int, bits: int) -> int:
    """2^bits mod span, computed as (-span) mod 2^bits and reduced cheaply.

    The subtract-subtract-modulo order avoids the division for spans above
    a third of the word range.
    """
    threshold = (-span) & ((1 << bits) - 1)
    if threshold >= span:
        threshold -= span
        if threshold >= span:
            threshold %= span
    return threshold


def lemire_bounded(draw: Callable[[], int], span: int, bits: int) -> int:
    """Unbiased integer in [0, span) from `bits`-wide uniform words (Lemire's method).

    The high half of `x * span` is the candidate; products whose low half
    falls under the rejection threshold are resampled, which removes modulo
    bias. The threshold is only computed when the low half is below `span`.

    Args:
        draw: Returns the next uniform word in [0, 2^bits).
        span: Size of the target range, 1 <= span <= 2^bits.
        bits: Width of the words produced by `draw`.
    """
    low_mask = (1 << bits) - 1
    m = draw() * span
    low = m & low_mask
    if low < span:
        threshold = rejection_threshold(span, bits)
        while low < threshold:
            m = draw() * span
            low = m & low_mask
    return m >> bits


def to_unit_double(word: int, bits: int, mantissa_bits: int) -> float:
    """Map a `bits`-wide word to [0, 1) using its top `mantissa_bits` bits.

    The largest result is 1 - 2^-mantissa_bits, so 1.0 is never reached.
    """
    return (word >> (bits - mantissa_bits)) * (2.0**-mantissa_bits)
