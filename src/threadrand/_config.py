"""Stream configuration: Algorithm enum, StreamConfig, and initialization."""

from __future__ import annotations

import logging
import os
import pathlib
from dataclasses import dataclass
from enum import Enum

import psutil

from threadrand._logging import configure_logging
from threadrand.errors import ConfigError
from threadrand.widths import WidthPair

__all__ = [
    'Algorithm',
    'StreamConfig',
    'get_config',
    'init',
]

ALGORITHM_ENV = 'THREADRAND_ALGORITHM'
THREADS_ENV = 'THREADRAND_THREADS'

_log = logging.getLogger(__name__)


class Algorithm(Enum):
    """PRNG algorithm backing every stream of a registry."""

    XOROSHIRO128_PLUS = 'xoroshiro128+'
    PCG = 'pcg'
    JSF = 'jsf'
    LEHMER64 = 'lehmer64'
    SPLITMIX64 = 'splitmix64'

    @property
    def state_widths(self) -> tuple[int, ...]:
        """State widths the algorithm is implemented for."""
        if self in (Algorithm.LEHMER64, Algorithm.SPLITMIX64):
            return (64,)
        return (32, 64)


@dataclass(frozen=True)
class StreamConfig:
    """Configuration for a stream registry.

    Attributes:
        algorithm: PRNG algorithm for every stream (Algorithm or its string value).
        n_threads: Number of independent streams.
        result_bits: Width of values returned to callers (32 or 64).
        state_bits: Width of engine words (32 or 64), at least result_bits.
        max_workers: Worker threads used by parallel fills. None = one per stream.
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = leave logging alone.
    """

    algorithm: Algorithm = Algorithm.PCG
    n_threads: int = 1
    result_bits: int = 64
    state_bits: int = 64
    max_workers: int | None = None
    log_level: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.algorithm, str):
            object.__setattr__(self, 'algorithm', _parse_algorithm(self.algorithm))
        if not isinstance(self.n_threads, int) or self.n_threads < 1:
            msg = f'thread count must be a positive integer, got {self.n_threads!r}'
            raise ConfigError(msg, 'n_threads')
        if self.max_workers is not None and self.max_workers < 1:
            msg = f'max_workers must be at least 1, got {self.max_workers}'
            raise ConfigError(msg, 'max_workers')

        widths = WidthPair(self.result_bits, self.state_bits)
        if widths.state_bits not in self.algorithm.state_widths:
            msg = f'{self.algorithm.value} has no {widths.state_bits}-bit state variant'
            raise ConfigError(msg, 'state_bits')

    @property
    def widths(self) -> WidthPair:
        return WidthPair(self.result_bits, self.state_bits)

    @property
    def workers(self) -> int:
        """Worker threads to use for parallel fills."""
        return self.max_workers if self.max_workers is not None else self.n_threads


# Global stream configuration (set by init())
_config: StreamConfig | None = None


def _parse_algorithm(value: str) -> Algorithm:
    try:
        return Algorithm(value.lower())
    except ValueError:
        choices = ', '.join(a.value for a in Algorithm)
        msg = f"unknown algorithm '{value}'; expected one of {choices}"
        raise ConfigError(msg, 'algorithm') from None


def _detect_algorithm() -> Algorithm:
    """Detect the algorithm from the environment.

    Priority:
    1. THREADRAND_ALGORITHM environment variable
    2. Default to PCG
    """
    env_algorithm = os.environ.get(ALGORITHM_ENV, '').lower()
    if not env_algorithm:
        return Algorithm.PCG
    try:
        return Algorithm(env_algorithm)
    except ValueError:
        _log.warning("Unknown %s value '%s', defaulting to pcg", ALGORITHM_ENV, env_algorithm)
        return Algorithm.PCG


def _detect_thread_count() -> int:
    """Detect the stream count from THREADRAND_THREADS or local resources."""
    env_threads = os.environ.get(THREADS_ENV, '')
    if env_threads:
        try:
            return max(1, int(env_threads))
        except ValueError:
            _log.warning("Invalid %s value '%s', detecting from hardware", THREADS_ENV, env_threads)
    return _detect_local_concurrency()


def _detect_local_concurrency() -> int:
    """Detect concurrency from local system resources.

    Uses physical CPU cores with awareness of container CPU limits (cgroups).
    """
    try:
        # Physical cores preferred over logical for CPU-bound work
        physical_cores = psutil.cpu_count(logical=False)
        if physical_cores is None:
            physical_cores = psutil.cpu_count(logical=True) or 4

        container_limit = _detect_container_cpu_limit()
        if container_limit is not None:
            physical_cores = min(physical_cores, container_limit)

        return max(1, min(256, physical_cores))
    except Exception:
        return 4  # Safe default


def _detect_container_cpu_limit() -> int | None:
    """Detect CPU limit in containerized environments."""
    # cgroups v2
    try:
        with pathlib.Path('/sys/fs/cgroup/cpu.max').open() as f:
            content = f.read().strip()
            if content != 'max':
                quota, period = content.split()
                if quota != 'max':
                    return max(1, int(int(quota) / int(period)))
    except (FileNotFoundError, ValueError, PermissionError):
        pass

    # cgroups v1
    try:
        with pathlib.Path('/sys/fs/cgroup/cpu/cpu.cfs_quota_us').open() as quota_f:
            quota_v1 = int(quota_f.read().strip())
        with pathlib.Path('/sys/fs/cgroup/cpu/cpu.cfs_period_us').open() as period_f:
            period_v1 = int(period_f.read().strip())
        if quota_v1 > 0:
            return max(1, quota_v1 // period_v1)
    except (FileNotFoundError, ValueError, PermissionError):
        pass

    return None


def _warn_if_oversubscribed(n_threads: int) -> None:
    """Warn when more streams are requested than the hardware runs at once.

    The stream count is never clamped: a different count would change which
    values a given seed produces.
    """
    hardware = psutil.cpu_count(logical=True)
    if hardware and n_threads > hardware:
        _log.warning(
            'Requested %d streams but only %d hardware threads are available; parallel fills will time-share',
            n_threads,
            hardware,
        )


def init(
    algorithm: Algorithm | str | None = None,
    n_threads: int | None = None,
    result_bits: int = 64,
    state_bits: int = 64,
    max_workers: int | None = None,
    log_level: str | None = None,
) -> StreamConfig:
    """Initialize the process-wide stream configuration.

    Args:
        algorithm: PRNG algorithm. Read from THREADRAND_ALGORITHM if None.
        n_threads: Stream count. Read from THREADRAND_THREADS or detected if None.
        result_bits: Width of returned values.
        state_bits: Width of engine words.
        max_workers: Worker threads for parallel fills. Detected if None.
        log_level: Logging level ("DEBUG", "INFO", etc.). None = leave logging alone.

    Returns:
        The StreamConfig that was set.

    Raises:
        ConfigError: If the resolved configuration is invalid.

    Example:
        ```python
        from threadrand import StreamRegistry, init

        init(algorithm='xoroshiro128+', n_threads=4, log_level='INFO')
        registry = StreamRegistry()
        ```
    """
    global _config  # noqa: PLW0603

    resolved_algorithm = _detect_algorithm() if algorithm is None else algorithm
    resolved_threads = _detect_thread_count() if n_threads is None else n_threads
    if max_workers is None:
        resolved_workers = max(1, min(resolved_threads, _detect_local_concurrency()))
    else:
        resolved_workers = max(1, min(256, max_workers))

    config = StreamConfig(
        algorithm=resolved_algorithm,  # type: ignore[arg-type]
        n_threads=resolved_threads,
        result_bits=result_bits,
        state_bits=state_bits,
        max_workers=resolved_workers,
        log_level=log_level,
    )

    if log_level is not None:
        configure_logging(log_level)

    _warn_if_oversubscribed(config.n_threads)

    _config = config
    return _config


def get_config() -> StreamConfig:
    """Get the current process-wide stream configuration.

    Raises:
        RuntimeError: If init() has not been called.
    """
    if _config is None:
        msg = 'threadrand not initialized. Call threadrand.init() first.'
        raise RuntimeError(msg)
    return _config


def _current_config() -> StreamConfig:
    """The configuration set by init(), or the defaults."""
    return _config if _config is not None else StreamConfig()
