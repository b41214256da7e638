"""PCG with per-instance streams (M. E. O'Neill).

Independence comes from the increment: every instance draws its own odd
increment from the entropy source, selecting one of 2^(n-1) distinct LCG
sequences. 32-bit words use XSH-RR over a 64-bit LCG, 64-bit words use
XSL-RR over a 128-bit LCG.
"""

from __future__ import annotations

from dataclasses import dataclass

from threadrand.widths import MASK32, MASK64, MASK128

__all__ = [
    'PCG32_MULTIPLIER',
    'PCG64_MULTIPLIER',
    'PcgEngine',
    'entropy_words',
    'next_word',
    'seed_engine',
]

PCG32_MULTIPLIER = 6364136223846793005
PCG64_MULTIPLIER = (2549297995355413924 << 64) + 4865540595714422341


@dataclass(slots=True, eq=False)
class PcgEngine:
    """LCG register, its odd increment, and the output width."""

    state: int
    inc: int
    bits: int


def _next32(engine: PcgEngine) -> int:
    old = engine.state
    engine.state = (old * PCG32_MULTIPLIER + engine.inc) & MASK64
    xorshifted = (((old >> 18) ^ old) >> 27) & MASK32
    rot = old >> 59
    return ((xorshifted >> rot) | (xorshifted << ((-rot) & 31))) & MASK32


def _next64(engine: PcgEngine) -> int:
    state = (engine.state * PCG64_MULTIPLIER + engine.inc) & MASK128
    engine.state = state
    value = ((state >> 64) ^ state) & MASK64
    rot = state >> 122
    return ((value >> rot) | (value << ((-rot) & 63))) & MASK64


def next_word(engine: PcgEngine) -> int:
    if engine.bits == 64:
        return _next64(engine)
    return _next32(engine)


def entropy_words(bits: int) -> int:
    """Raw 64-bit entropy words consumed when seeding."""
    return 4 if bits == 64 else 2


def seed_engine(words: list[int], bits: int) -> PcgEngine:
    """Seed from raw entropy words: the initial state, then the stream selector."""
    if bits == 64:
        register_mask = MASK128
        seed = (words[0] << 64) | words[1]
        initseq = (words[2] << 64) | words[3]
    else:
        register_mask = MASK64
        seed, initseq = words[0], words[1]

    engine = PcgEngine(state=0, inc=((initseq << 1) | 1) & register_mask, bits=bits)
    next_word(engine)
    engine.state = (engine.state + seed) & register_mask
    next_word(engine)
    return engine
