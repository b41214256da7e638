"""Result/state bit-width pairing and the single width conversion."""

from __future__ import annotations

from dataclasses import dataclass

from threadrand.errors import ConfigError

__all__ = [
    'MASK32',
    'MASK64',
    'MASK128',
    'SUPPORTED_WIDTHS',
    'WidthPair',
    'mask',
    'rotl',
]

SUPPORTED_WIDTHS = (32, 64)

MASK32 = (1 << 32) - 1
MASK64 = (1 << 64) - 1
MASK128 = (1 << 128) - 1


def mask(bits: int) -> int:
    """All-ones word of the given width."""
    return (1 << bits) - 1


def rotl(x: int, k: int, bits: int) -> int:
    """Rotate a `bits`-wide word left by k."""
    return ((x << k) | (x >> (bits - k))) & ((1 << bits) - 1)


@dataclass(frozen=True, slots=True)
class WidthPair:
    """Validated pairing of the caller-visible result width and the engine state width.

    Only narrowing is supported: engines produce `state_bits`-wide words and the
    high-order `result_bits` of each word are kept, since the low bits of the
    LCG family are the statistically weakest.

    Attributes:
        result_bits: Width of values handed to callers.
        state_bits: Width of the words an engine produces.
    """

    result_bits: int = 64
    state_bits: int = 64

    def __post_init__(self) -> None:
        for name, bits in (('result_bits', self.result_bits), ('state_bits', self.state_bits)):
            if bits not in SUPPORTED_WIDTHS:
                msg = f'unsupported width {bits}; expected one of {SUPPORTED_WIDTHS}'
                raise ConfigError(msg, name)
        if self.result_bits > self.state_bits:
            msg = f'result width {self.result_bits} exceeds state width {self.state_bits}'
            raise ConfigError(msg, 'result_bits')

    @property
    def shift(self) -> int:
        """Right shift applied to every engine word."""
        return self.state_bits - self.result_bits

    @property
    def result_mask(self) -> int:
        return (1 << self.result_bits) - 1

    @property
    def mantissa_bits(self) -> int:
        """Bits of a result used for a [0, 1) double."""
        return 53 if self.result_bits == 64 else 23

    def convert(self, word: int) -> int:
        """Narrow an engine word to the result width, keeping its high bits."""
        return word >> self.shift
