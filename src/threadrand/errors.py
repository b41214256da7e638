"""Error types: dual struct+exception for structured logs and raise-based code."""

from __future__ import annotations

import msgspec

__all__ = [
    'ConfigError',
    'EntropyUnavailable',
    'EntropyUnavailableError',
    'InvalidConfig',
    'InvalidRange',
    'InvalidRangeError',
    'StreamIndexError',
    'StreamIndexOutOfRange',
]


# --- Entropy Errors ---


class EntropyUnavailable(msgspec.Struct, frozen=True, gc=False):
    """Entropy source could not supply seed words - struct variant."""

    requested: int
    reason: str | None = None

    def to_exception(self) -> EntropyUnavailableError:
        """Convert to exception for raise-based code."""
        return EntropyUnavailableError(self.requested, self.reason)


class EntropyUnavailableError(Exception):
    """Entropy source could not supply seed words - exception variant."""

    def __init__(self, requested: int, reason: str | None = None) -> None:
        self.requested = requested
        self.reason = reason
        msg = f'Entropy unavailable ({requested} words requested)'
        if reason:
            msg = f'{msg}: {reason}'
        super().__init__(msg)

    def to_struct(self) -> EntropyUnavailable:
        """Convert to struct for structured handling."""
        return EntropyUnavailable(self.requested, self.reason)


# --- Dispatch Errors ---


class StreamIndexOutOfRange(msgspec.Struct, frozen=True, gc=False):
    """Stream index outside [0, n_streams) - struct variant."""

    index: int
    n_streams: int

    def to_exception(self) -> StreamIndexError:
        """Convert to exception for raise-based code."""
        return StreamIndexError(self.index, self.n_streams)


class StreamIndexError(IndexError):
    """Stream index outside [0, n_streams) - exception variant."""

    def __init__(self, index: int, n_streams: int) -> None:
        self.index = index
        self.n_streams = n_streams
        super().__init__(f'Stream index {index} out of range [0, {n_streams})')

    def to_struct(self) -> StreamIndexOutOfRange:
        """Convert to struct for structured handling."""
        return StreamIndexOutOfRange(self.index, self.n_streams)


class InvalidRange(msgspec.Struct, frozen=True, gc=False):
    """Bounded draw requested over an empty or unrepresentable range - struct variant."""

    lower: int
    upper: int
    bits: int

    def to_exception(self) -> InvalidRangeError:
        """Convert to exception for raise-based code."""
        return InvalidRangeError(self.lower, self.upper, self.bits)


class InvalidRangeError(ValueError):
    """Bounded draw requested over an empty or unrepresentable range - exception variant."""

    def __init__(self, lower: int, upper: int, bits: int) -> None:
        self.lower = lower
        self.upper = upper
        self.bits = bits
        if upper <= lower:
            msg = f'Empty range [{lower}, {upper}): upper must be greater than lower'
        else:
            msg = f'Range [{lower}, {upper}) is not representable with {bits}-bit results'
        super().__init__(msg)

    def to_struct(self) -> InvalidRange:
        """Convert to struct for structured handling."""
        return InvalidRange(self.lower, self.upper, self.bits)


# --- Configuration Errors ---


class InvalidConfig(msgspec.Struct, frozen=True, gc=False):
    """Rejected stream configuration - struct variant."""

    message: str
    field: str | None = None

    def to_exception(self) -> ConfigError:
        """Convert to exception for raise-based code."""
        return ConfigError(self.message, self.field)


class ConfigError(ValueError):
    """Rejected stream configuration - exception variant."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(f'{field}: {message}' if field else message)

    def to_struct(self) -> InvalidConfig:
        """Convert to struct for structured handling."""
        return InvalidConfig(self.message, self.field)
