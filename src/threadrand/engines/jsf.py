"""Bob Jenkins' small fast generator.

There is no jump function; at 32 bits, statistically distinct streams come
from giving each stream its own rotation triple.
"""

from __future__ import annotations

from dataclasses import dataclass

from threadrand.engines.splitmix import SeedExpander
from threadrand.widths import mask, rotl

__all__ = [
    'JSF32_TRIPLES',
    'JSF64_TRIPLE',
    'JsfEngine',
    'next_word',
    'seed_engine',
    'triple_for',
]

JSF64_TRIPLE = (7, 13, 37)

JSF32_TRIPLES = (
    (3, 14, 24),
    (3, 25, 15),
    (4, 15, 24),
    (6, 16, 28),
    (7, 16, 27),
    (8, 14, 3),
    (11, 16, 23),
    (12, 16, 22),
    (12, 17, 23),
    (13, 16, 22),
    (15, 25, 3),
    (16, 9, 3),
    (17, 9, 3),
    (17, 27, 7),
    (19, 7, 3),
    (23, 15, 11),
    (23, 16, 11),
    (23, 17, 11),
    (24, 3, 16),
    (24, 4, 16),
    (25, 14, 3),
    (27, 16, 6),
    (27, 16, 7),
)

SEED_A = 0xF1EA5EED
WARMUP_ROUNDS = 20


@dataclass(slots=True, eq=False)
class JsfEngine:
    a: int
    b: int
    c: int
    d: int
    p: int
    q: int
    r: int
    bits: int


def next_word(engine: JsfEngine) -> int:
    bits = engine.bits
    m = mask(bits)
    e = (engine.a - rotl(engine.b, engine.p, bits)) & m
    engine.a = engine.b ^ rotl(engine.c, engine.q, bits)
    engine.b = (engine.c + (rotl(engine.d, engine.r, bits) if engine.r else engine.d)) & m
    engine.c = (engine.d + e) & m
    engine.d = (e + engine.a) & m
    return engine.d


def triple_for(bits: int, stream_index: int) -> tuple[int, int, int]:
    """Rotation constants for a stream; round-robin over the 32-bit table."""
    if bits == 64:
        return JSF64_TRIPLE
    return JSF32_TRIPLES[stream_index % len(JSF32_TRIPLES)]


def seed_engine(raw_seed: int, bits: int, stream_index: int) -> JsfEngine:
    seed = SeedExpander(raw_seed).next() & mask(bits)
    p, q, r = triple_for(bits, stream_index)
    engine = JsfEngine(a=SEED_A, b=seed, c=seed, d=seed, p=p, q=q, r=r, bits=bits)
    # early outputs are under-mixed
    for _ in range(WARMUP_ROUNDS):
        next_word(engine)
    return engine
