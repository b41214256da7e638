"""
threadrand: independent pseudo-random streams for concurrent consumers.

A StreamRegistry owns one generator engine per stream index (xoroshiro128+,
PCG, JSF, Lehmer64 or SplitMix64) and exposes raw draws, unbiased bounded
integers, unit doubles, and sequential or parallel bulk fills over them.
"""

from threadrand._config import Algorithm, StreamConfig, get_config, init
from threadrand._logging import (
    add_log_hook,
    clear_log_hooks,
    configure_logging,
    get_logger,
    remove_log_hook,
    reset_logging,
)
from threadrand.entropy import DeterministicEntropy, EntropySource, SystemEntropy
from threadrand.errors import (
    ConfigError,
    EntropyUnavailable,
    EntropyUnavailableError,
    InvalidConfig,
    InvalidRange,
    InvalidRangeError,
    StreamIndexError,
    StreamIndexOutOfRange,
)
from threadrand.registry import StreamRegistry
from threadrand.widths import WidthPair

__all__ = [
    'Algorithm',
    'ConfigError',
    'DeterministicEntropy',
    'EntropySource',
    'EntropyUnavailable',
    'EntropyUnavailableError',
    'InvalidConfig',
    'InvalidRange',
    'InvalidRangeError',
    'StreamConfig',
    'StreamIndexError',
    'StreamIndexOutOfRange',
    'StreamRegistry',
    'SystemEntropy',
    'WidthPair',
    'add_log_hook',
    'clear_log_hooks',
    'configure_logging',
    'get_config',
    'get_logger',
    'init',
    'remove_log_hook',
    'reset_logging',
]
