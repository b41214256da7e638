"""Entropy sources: where every stream's raw seed words come from."""

from __future__ import annotations

import os
import threading
from typing import Protocol, runtime_checkable

from threadrand.engines.splitmix import SeedExpander
from threadrand.errors import EntropyUnavailableError

__all__ = [
    'DeterministicEntropy',
    'EntropySource',
    'SystemEntropy',
]

WORD_BYTES = 8


@runtime_checkable
class EntropySource(Protocol):
    """Protocol for seed providers.

    Sources are consulted only while a registry is being constructed.

    Implementations:
        - SystemEntropy: operating system randomness
        - DeterministicEntropy: reproducible words expanded from a fixed seed
    """

    def fetch(self, n_words: int) -> list[int]:
        """Return `n_words` uniformly random 64-bit words.

        Raises:
            EntropyUnavailableError: If the words cannot be supplied.
        """
        ...


class SystemEntropy:
    """Seed words from the operating system's randomness facility."""

    __slots__ = ()

    def fetch(self, n_words: int) -> list[int]:
        try:
            raw = os.urandom(n_words * WORD_BYTES)
        except (OSError, NotImplementedError) as e:
            raise EntropyUnavailableError(n_words, str(e)) from e
        if len(raw) != n_words * WORD_BYTES:
            raise EntropyUnavailableError(n_words, f'short read of {len(raw)} bytes')
        return [int.from_bytes(raw[i : i + WORD_BYTES], 'little') for i in range(0, len(raw), WORD_BYTES)]

    def __repr__(self) -> str:
        return 'SystemEntropy()'


class DeterministicEntropy:
    """Reproducible seed words expanded from a caller-chosen seed.

    Two registries built with equal seeds and configurations produce identical
    streams. The seed is chosen explicitly; nothing falls back to it.
    """

    __slots__ = ('_expander', '_lock', 'seed')

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._expander = SeedExpander(seed)
        self._lock = threading.Lock()

    def fetch(self, n_words: int) -> list[int]:
        with self._lock:
            return self._expander.take(n_words)

    def __repr__(self) -> str:
        return f'DeterministicEntropy(seed={self.seed})'
