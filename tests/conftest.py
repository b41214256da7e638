"""Pytest configuration and shared fixtures for threadrand tests."""

from __future__ import annotations

from collections.abc import Callable, Generator

import pytest
from hypothesis import HealthCheck, settings
from threadrand import DeterministicEntropy, StreamConfig, StreamRegistry
from threadrand import _config as config_module
from threadrand._logging import clear_log_hooks, reset_logging
from threadrand.errors import EntropyUnavailableError

# Function-scoped fixtures here only reset process-wide state.
settings.register_profile(
    'threadrand',
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
settings.load_profile('threadrand')


class FailingEntropy:
    """Entropy source that serves a fixed number of words, then fails."""

    def __init__(self, words_before_failure: int = 0) -> None:
        self._remaining = words_before_failure
        self.calls = 0

    def fetch(self, n_words: int) -> list[int]:
        self.calls += 1
        if n_words > self._remaining:
            raise EntropyUnavailableError(n_words, 'device unplugged')
        self._remaining -= n_words
        return [0x0123456789ABCDEF + i for i in range(n_words)]


@pytest.fixture(autouse=True)
def reset_global_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Each test starts without a process-wide config."""
    monkeypatch.setattr(config_module, '_config', None)


@pytest.fixture(autouse=True)
def reset_package_logging() -> Generator[None]:
    """Undo any configure_logging() a test performs."""
    yield
    reset_logging()


@pytest.fixture
def cleanup_hooks() -> Generator[None]:
    """Clear log hooks before and after a test."""
    clear_log_hooks()
    yield
    clear_log_hooks()


@pytest.fixture
def make_registry() -> Callable[..., StreamRegistry]:
    """Build a reproducibly seeded registry: make_registry(seed=..., **config_fields)."""

    def _make(seed: int = 2024, **fields: object) -> StreamRegistry:
        return StreamRegistry(StreamConfig(**fields), entropy=DeterministicEntropy(seed))  # type: ignore[arg-type]

    return _make


@pytest.fixture
def failing_entropy() -> type[FailingEntropy]:
    """The FailingEntropy class, for tests that build their own."""
    return FailingEntropy


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return 'asyncio'
