"""xoroshiro128+ (64-bit words) and xoshiro128+ (32-bit words) by Blackman and Vigna.

Streams are decorrelated with the jump polynomial: one jump is equivalent to
2^64 calls of `next_word`, and stream t starts 2·t jumps into the sequence of
its seed.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from threadrand.engines.splitmix import GOLDEN_GAMMA, SeedExpander
from threadrand.widths import MASK32, MASK64, mask, rotl

__all__ = [
    'JUMP_32',
    'JUMP_64',
    'XoroshiroEngine',
    'jump',
    'next_word',
    'seed_engine',
]

JUMP_64 = (0xDF900294D8F554A5, 0x170865DF4B3201FC)
JUMP_32 = (0x8764000B, 0xF542D2D3, 0x6FA035C3, 0x77F2DB5B)

# rotation/shift constants
_A64, _B64, _C64 = 24, 16, 37
_B32, _C32 = 9, 11

JUMPS_PER_STREAM = 2


@dataclass(slots=True, eq=False)
class XoroshiroEngine:
    """Two 64-bit or four 32-bit state words."""

    words: list[int]
    bits: int


def _next64(engine: XoroshiroEngine) -> int:
    s = engine.words
    s0, s1 = s[0], s[1]
    result = (s0 + s1) & MASK64
    s1 ^= s0
    s[0] = rotl(s0, _A64, 64) ^ s1 ^ ((s1 << _B64) & MASK64)
    s[1] = rotl(s1, _C64, 64)
    return result


def _next32(engine: XoroshiroEngine) -> int:
    s = engine.words
    result = (s[0] + s[3]) & MASK32
    t = (s[1] << _B32) & MASK32
    s[2] ^= s[0]
    s[3] ^= s[1]
    s[1] ^= s[2]
    s[0] ^= s[3]
    s[2] ^= t
    s[3] = rotl(s[3], _C32, 32)
    return result


def next_word(engine: XoroshiroEngine) -> int:
    if engine.bits == 64:
        return _next64(engine)
    return _next32(engine)


def jump(engine: XoroshiroEngine, polynomial: Sequence[int] | None = None) -> None:
    """Advance the engine by the step count encoded in a jump polynomial.

    Bit b of word i is the coefficient of x^(i·bits + b). The default
    polynomial is the 2^64-step jump for the engine's width; a monomial x^k
    advances the engine by exactly k steps.
    """
    if polynomial is None:
        polynomial = JUMP_64 if engine.bits == 64 else JUMP_32
    acc = [0] * len(engine.words)
    for word in polynomial:
        for b in range(engine.bits):
            if (word >> b) & 1:
                acc = [a ^ s for a, s in zip(acc, engine.words, strict=True)]
            next_word(engine)
    engine.words[:] = acc


def seed_engine(raw_seed: int, bits: int, stream_index: int) -> XoroshiroEngine:
    expander = SeedExpander(raw_seed)
    n_words = 2 if bits == 64 else 4
    words = [w & mask(bits) for w in expander.take(n_words)]
    if not any(words):
        # all-zero is the one fixed point
        words[-1] = GOLDEN_GAMMA & mask(bits)

    engine = XoroshiroEngine(words, bits)
    for _ in range(JUMPS_PER_STREAM * stream_index):
        jump(engine)
    return engine
