"""SplitMix64: the seed expander, and the same mixer used as a stream."""

from __future__ import annotations

from dataclasses import dataclass

from threadrand.widths import MASK64

__all__ = [
    'GOLDEN_GAMMA',
    'SeedExpander',
    'SplitMix64Engine',
    'next_word',
    'seed_engine',
    'splitmix64_step',
]

GOLDEN_GAMMA = 0x9E3779B97F4A7C15
_MIX1 = 0xBF58476D1CE4E5B9
_MIX2 = 0x94D049BB133111EB


def splitmix64_step(state: int) -> tuple[int, int]:
    """Advance a SplitMix64 state. Returns (next_state, output)."""
    state = (state + GOLDEN_GAMMA) & MASK64
    z = state
    z = ((z ^ (z >> 30)) * _MIX1) & MASK64
    z = ((z ^ (z >> 27)) * _MIX2) & MASK64
    return state, z ^ (z >> 31)


class SeedExpander:
    """Turns one raw seed word into as many well-mixed 64-bit seed words as needed."""

    __slots__ = ('_state',)

    def __init__(self, seed: int) -> None:
        self._state = seed & MASK64

    def next(self) -> int:
        self._state, out = splitmix64_step(self._state)
        return out

    def take(self, n: int) -> list[int]:
        return [self.next() for _ in range(n)]


@dataclass(slots=True, eq=False)
class SplitMix64Engine:
    """SplitMix64 as an end-user stream: one word of state, 64-bit output only."""

    state: int


def next_word(engine: SplitMix64Engine) -> int:
    engine.state, out = splitmix64_step(engine.state)
    return out


def seed_engine(raw_seed: int) -> SplitMix64Engine:
    return SplitMix64Engine(raw_seed & MASK64)
