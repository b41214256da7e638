"""StreamRegistry: one exclusively owned engine per stream, and the dispatch API over them."""

from __future__ import annotations

import functools
from collections.abc import Callable, MutableSequence, Sequence
from typing import Any, NoReturn

import msgspec

from threadrand._config import Algorithm, StreamConfig, _current_config
from threadrand._logging import get_logger
from threadrand._parallel import fan_out, run_fan_out
from threadrand.engines import Engine, advance, create_engine
from threadrand.entropy import EntropySource, SystemEntropy
from threadrand.errors import EntropyUnavailableError, InvalidRangeError, StreamIndexError
from threadrand.sampling import lemire_bounded, to_unit_double
from threadrand.widths import WidthPair

__all__ = ['StreamRegistry']

log = get_logger(__name__)


def _seed_streams(config: StreamConfig, entropy: EntropySource, logger: Any) -> tuple[Engine, ...]:
    """Build every stream's engine, or fail as a whole."""
    engines: list[Engine] = []
    for stream_index in range(config.n_threads):
        try:
            engine = create_engine(config.algorithm, config.state_bits, stream_index, entropy)
        except EntropyUnavailableError as e:
            logger.error(
                'registry.construct_failed',
                stream_index=stream_index,
                **msgspec.to_builtins(e.to_struct()),
            )
            raise
        logger.debug('stream.seeded', stream_index=stream_index)
        engines.append(engine)
    return tuple(engines)


class StreamRegistry:
    """Independent pseudo-random streams, addressed by stream index.

    Each stream index owns one engine for the registry's whole lifetime.
    Calls on different indices may run on different threads at the same
    time; calls on one index must not overlap.

    Example:
        ```python
        from threadrand import DeterministicEntropy, StreamConfig, StreamRegistry

        config = StreamConfig(algorithm='xoroshiro128+', n_threads=4)
        registry = StreamRegistry(config, entropy=DeterministicEntropy(2024))

        die = registry.bounded(0, 1, 7)
        rows = [[0] * 1000 for _ in range(4)]
        registry.fill_parallel(rows)
        ```
    """

    __slots__ = ('_config', '_engines', '_log', '_widths')

    def __init__(
        self,
        config: StreamConfig | None = None,
        *,
        entropy: EntropySource | None = None,
    ) -> None:
        """Seed one engine per stream.

        Args:
            config: Stream configuration. Uses the config set by `init()`, or
                the defaults, if None.
            entropy: Source of seed words. Uses SystemEntropy if None.

        Raises:
            EntropyUnavailableError: If any stream cannot be seeded. No
                registry is created.
        """
        self._config = config if config is not None else _current_config()
        self._widths: WidthPair = self._config.widths
        self._log = log.bind(algorithm=self._config.algorithm.value, n_threads=self._config.n_threads)
        self._engines = _seed_streams(
            self._config,
            entropy if entropy is not None else SystemEntropy(),
            self._log,
        )
        self._log.info(
            'registry.constructed',
            result_bits=self._widths.result_bits,
            state_bits=self._widths.state_bits,
        )

    @classmethod
    def construct(
        cls,
        config: StreamConfig | None = None,
        *,
        entropy: EntropySource | None = None,
    ) -> StreamRegistry:
        """Alias for the constructor."""
        return cls(config, entropy=entropy)

    # --- Introspection ---

    @property
    def config(self) -> StreamConfig:
        return self._config

    @property
    def algorithm(self) -> Algorithm:
        return self._config.algorithm

    @property
    def n_threads(self) -> int:
        return len(self._engines)

    @property
    def widths(self) -> WidthPair:
        return self._widths

    @property
    def min(self) -> int:
        """Smallest value `raw` can return."""
        return 0

    @property
    def max(self) -> int:
        """Largest value `raw` can return."""
        return self._widths.result_mask

    def __len__(self) -> int:
        return len(self._engines)

    def __repr__(self) -> str:
        return (
            f'StreamRegistry(algorithm={self._config.algorithm.value!r}, n_threads={len(self._engines)}, '
            f'result_bits={self._widths.result_bits}, state_bits={self._widths.state_bits})'
        )

    # Copies would replay the same streams.
    def __copy__(self) -> NoReturn:
        msg = 'StreamRegistry cannot be copied'
        raise TypeError(msg)

    def __deepcopy__(self, memo: dict[int, Any]) -> NoReturn:
        msg = 'StreamRegistry cannot be copied'
        raise TypeError(msg)

    def __reduce__(self) -> NoReturn:
        msg = 'StreamRegistry cannot be pickled'
        raise TypeError(msg)

    # --- Validation ---

    def _engine(self, stream_index: int) -> Engine:
        if not 0 <= stream_index < len(self._engines):
            raise StreamIndexError(stream_index, len(self._engines))
        return self._engines[stream_index]

    def _span(self, lower: int, upper: int) -> int:
        bits = self._widths.result_bits
        if upper <= lower or lower < 0 or upper > 1 << bits:
            raise InvalidRangeError(lower, upper, bits)
        return upper - lower

    @staticmethod
    def _bounds(lower: int, upper: int | None) -> tuple[int, int]:
        """Resolve `(upper)` / `(lower, upper)` call forms, like `range()`."""
        if upper is None:
            return 0, lower
        return lower, upper

    def _check_rows(self, rows: Sequence[MutableSequence[Any]]) -> None:
        if len(rows) > len(self._engines):
            raise StreamIndexError(len(rows) - 1, len(self._engines))

    # --- Single draws ---

    def _draw(self, engine: Engine) -> int:
        return self._widths.convert(advance(engine))

    def raw(self, stream_index: int = 0) -> int:
        """Next result-width word from a stream.

        Raises:
            StreamIndexError: If stream_index is outside [0, n_threads).
        """
        return self._draw(self._engine(stream_index))

    def __call__(self) -> int:
        return self.raw(0)

    def bounded(self, stream_index: int, lower: int, upper: int | None = None) -> int:
        """Uniform integer in [0, upper) or [lower, upper), free of modulo bias.

        Call as `bounded(stream, upper)` or `bounded(stream, lower, upper)`.

        Raises:
            StreamIndexError: If stream_index is outside [0, n_threads).
            InvalidRangeError: If upper <= lower, lower is negative, or upper
                exceeds 2^result_bits. The stream is not advanced.
        """
        engine = self._engine(stream_index)
        lower, upper = self._bounds(lower, upper)
        span = self._span(lower, upper)
        return lower + lemire_bounded(functools.partial(self._draw, engine), span, self._widths.result_bits)

    def uniform_double(self, stream_index: int = 0) -> float:
        """Uniform float in [0, 1); never returns 1.0.

        Raises:
            StreamIndexError: If stream_index is outside [0, n_threads).
        """
        word = self.raw(stream_index)
        return to_unit_double(word, self._widths.result_bits, self._widths.mantissa_bits)

    # --- Row fills (one stream, sequential) ---

    def _fill_raw(self, engine: Engine, row: MutableSequence[int]) -> None:
        convert = self._widths.convert
        for i in range(len(row)):
            row[i] = convert(advance(engine))

    def _fill_bounded(self, engine: Engine, row: MutableSequence[int], lower: int, span: int) -> None:
        draw = functools.partial(self._draw, engine)
        bits = self._widths.result_bits
        for i in range(len(row)):
            row[i] = lower + lemire_bounded(draw, span, bits)

    def _fill_doubles(self, engine: Engine, row: MutableSequence[float]) -> None:
        bits = self._widths.result_bits
        mantissa_bits = self._widths.mantissa_bits
        for i in range(len(row)):
            row[i] = to_unit_double(self._draw(engine), bits, mantissa_bits)

    def fill(self, container: MutableSequence[int], stream_index: int = 0) -> None:
        """Overwrite every element of a 1-D sequence with raw draws from one stream."""
        self._fill_raw(self._engine(stream_index), container)

    def fill_bounded(
        self,
        container: MutableSequence[int],
        stream_index: int,
        lower: int,
        upper: int | None = None,
    ) -> None:
        """Overwrite every element with bounded draws; bounds as in `bounded`."""
        engine = self._engine(stream_index)
        lower, upper = self._bounds(lower, upper)
        self._fill_bounded(engine, container, lower, self._span(lower, upper))

    def fill_doubles(self, container: MutableSequence[float], stream_index: int = 0) -> None:
        """Overwrite every element with doubles in [0, 1)."""
        self._fill_doubles(self._engine(stream_index), container)

    # --- Parallel fills (row i <- stream i) ---

    def _raw_tasks(self, rows: Sequence[MutableSequence[int]]) -> list[Callable[[], None]]:
        self._check_rows(rows)
        return [functools.partial(self._fill_raw, self._engines[i], row) for i, row in enumerate(rows)]

    def _bounded_tasks(
        self,
        rows: Sequence[MutableSequence[int]],
        lower: int,
        upper: int | None,
    ) -> list[Callable[[], None]]:
        self._check_rows(rows)
        lower, upper = self._bounds(lower, upper)
        span = self._span(lower, upper)
        return [
            functools.partial(self._fill_bounded, self._engines[i], row, lower, span) for i, row in enumerate(rows)
        ]

    def _double_tasks(self, rows: Sequence[MutableSequence[float]]) -> list[Callable[[], None]]:
        self._check_rows(rows)
        return [functools.partial(self._fill_doubles, self._engines[i], row) for i, row in enumerate(rows)]

    def _run(self, tasks: list[Callable[[], None]], kind: str) -> None:
        run_fan_out(tasks, self._config.workers)
        self._log.debug('fill_parallel.completed', kind=kind, rows=len(tasks))

    async def _arun(self, tasks: list[Callable[[], None]], kind: str) -> None:
        await fan_out(tasks, self._config.workers)
        self._log.debug('fill_parallel.completed', kind=kind, rows=len(tasks))

    def fill_parallel(self, rows: Sequence[MutableSequence[int]]) -> None:
        """Fill row i with raw draws from stream i, all rows concurrently.

        Returns once every row is complete. The values are identical to
        calling `fill(rows[i], i)` for each row in turn. Must be called
        outside a running event loop; use `afill_parallel` inside one.

        Raises:
            StreamIndexError: If there are more rows than streams. No row is
                touched.
        """
        self._run(self._raw_tasks(rows), 'raw')

    def fill_bounded_parallel(
        self,
        rows: Sequence[MutableSequence[int]],
        lower: int,
        upper: int | None = None,
    ) -> None:
        """Fill row i with bounded draws from stream i; bounds as in `bounded`."""
        self._run(self._bounded_tasks(rows, lower, upper), 'bounded')

    def fill_doubles_parallel(self, rows: Sequence[MutableSequence[float]]) -> None:
        """Fill row i with doubles in [0, 1) from stream i."""
        self._run(self._double_tasks(rows), 'doubles')

    async def afill_parallel(self, rows: Sequence[MutableSequence[int]]) -> None:
        """Async form of `fill_parallel`."""
        await self._arun(self._raw_tasks(rows), 'raw')

    async def afill_bounded_parallel(
        self,
        rows: Sequence[MutableSequence[int]],
        lower: int,
        upper: int | None = None,
    ) -> None:
        """Async form of `fill_bounded_parallel`."""
        await self._arun(self._bounded_tasks(rows, lower, upper), 'bounded')

    async def afill_doubles_parallel(self, rows: Sequence[MutableSequence[float]]) -> None:
        """Async form of `fill_doubles_parallel`."""
        await self._arun(self._double_tasks(rows), 'doubles')
