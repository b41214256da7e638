"""Lehmer64: a 128-bit multiplicative congruential generator."""

from __future__ import annotations

from dataclasses import dataclass

from threadrand.engines.splitmix import SeedExpander
from threadrand.widths import MASK128

__all__ = [
    'LEHMER64_MULTIPLIER',
    'Lehmer64Engine',
    'next_word',
    'seed_engine',
]

LEHMER64_MULTIPLIER = 0xDA942042E4DD58B5


@dataclass(slots=True, eq=False)
class Lehmer64Engine:
    state: int


def next_word(engine: Lehmer64Engine) -> int:
    engine.state = (engine.state * LEHMER64_MULTIPLIER) & MASK128
    return engine.state >> 64


def seed_engine(raw_seed: int) -> Lehmer64Engine:
    high, low = SeedExpander(raw_seed).take(2)
    # odd states reach the full period
    return Lehmer64Engine(((high << 64) | low) | 1)
