"""Generator engines: a closed set of PRNG states with a single `advance` dispatch.

Every engine is a plain mutable record owned by exactly one stream. `advance`
matches on the record type, so adding an algorithm means adding a case here
and to `create_engine`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, assert_never

from threadrand._config import Algorithm
from threadrand.engines import jsf, lehmer, pcg, splitmix, xoroshiro
from threadrand.engines.jsf import JsfEngine
from threadrand.engines.lehmer import Lehmer64Engine
from threadrand.engines.pcg import PcgEngine
from threadrand.engines.splitmix import SeedExpander, SplitMix64Engine
from threadrand.engines.xoroshiro import XoroshiroEngine

if TYPE_CHECKING:
    from threadrand.entropy import EntropySource

__all__ = [
    'Engine',
    'JsfEngine',
    'Lehmer64Engine',
    'PcgEngine',
    'SeedExpander',
    'SplitMix64Engine',
    'XoroshiroEngine',
    'advance',
    'create_engine',
]

type Engine = XoroshiroEngine | PcgEngine | JsfEngine | Lehmer64Engine | SplitMix64Engine


def advance(engine: Engine) -> int:
    """Step an engine once and return its state-width output word."""
    match engine:
        case XoroshiroEngine():
            return xoroshiro.next_word(engine)
        case PcgEngine():
            return pcg.next_word(engine)
        case JsfEngine():
            return jsf.next_word(engine)
        case Lehmer64Engine():
            return lehmer.next_word(engine)
        case SplitMix64Engine():
            return splitmix.next_word(engine)
        case _:
            msg = f'not a generator engine: {type(engine).__name__}'
            raise TypeError(msg)


def create_engine(
    algorithm: Algorithm,
    state_bits: int,
    stream_index: int,
    entropy: EntropySource,
) -> Engine:
    """Seed a fresh engine for one stream.

    Args:
        algorithm: Which generator to build.
        state_bits: Width of the engine's output words (32 or 64).
        stream_index: Stream the engine will serve; selects the xoroshiro
            jump count and the JSF rotation triple.
        entropy: Source of raw seed words.

    Raises:
        EntropyUnavailableError: If the entropy source fails.
    """
    match algorithm:
        case Algorithm.XOROSHIRO128_PLUS:
            (raw,) = entropy.fetch(1)
            return xoroshiro.seed_engine(raw, state_bits, stream_index)
        case Algorithm.PCG:
            return pcg.seed_engine(entropy.fetch(pcg.entropy_words(state_bits)), state_bits)
        case Algorithm.JSF:
            (raw,) = entropy.fetch(1)
            return jsf.seed_engine(raw, state_bits, stream_index)
        case Algorithm.LEHMER64:
            (raw,) = entropy.fetch(1)
            return lehmer.seed_engine(raw)
        case Algorithm.SPLITMIX64:
            (raw,) = entropy.fetch(1)
            return splitmix.seed_engine(raw)
        case _:
            assert_never(algorithm)
