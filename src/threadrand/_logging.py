"""Structured logging for threadrand.

Registry events are structlog event dicts delivered as stdlib records on the
``threadrand`` logger. Until `configure_logging` runs, that logger only has a
NullHandler: nothing is written anywhere unless the host application has its
own handlers and opts in by level. `configure_logging` renders the records
(JSON or console) on stderr through structlog's ProcessorFormatter, and runs
the registered log hooks on every record it handles.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    'LOGGER_NAME',
    'add_log_hook',
    'clear_log_hooks',
    'configure_logging',
    'get_logger',
    'remove_log_hook',
    'reset_logging',
]

LOGGER_NAME = 'threadrand'

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())

# Handler installed by configure_logging(), if any
_handler: logging.Handler | None = None


def _stdlib_name(name: str | None) -> str:
    if not name or name == LOGGER_NAME:
        return LOGGER_NAME
    if name.startswith(f'{LOGGER_NAME}.'):
        return name
    return f'{LOGGER_NAME}.{name}'


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Get a structlog logger that emits through the ``threadrand`` stdlib hierarchy.

    The processor chain is fixed here, so a host's `structlog.configure()` does
    not redirect threadrand's events, and events below the stdlib level are
    dropped before any work is done.

    Args:
        name: Logger name, nested under ``threadrand`` if it is not already.
        **initial_values: Context bound to every event from this logger.

    Returns:
        A structlog stdlib BoundLogger.
    """
    return structlog.wrap_logger(
        logging.getLogger(_stdlib_name(name)),
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.stdlib.render_to_log_kwargs,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        **initial_values,
    )


def _get_pre_chain() -> list[Any]:
    """Processors that rebuild an event dict from a threadrand stdlib record."""
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.stdlib.ExtraAdder(),
        _create_hook_processor(),
    ]


def _get_renderer(json_output: bool = True) -> Any:
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    level: str = 'INFO',
    *,
    json_output: bool = True,
) -> None:
    """Render threadrand's events on stderr.

    Only the ``threadrand`` logger is touched: handlers on the root logger or
    any other logger are left as they are. Calling this again replaces the
    handler installed by the previous call. While configured, threadrand
    records do not propagate to the root logger, so they are not printed twice.

    Args:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL").
        json_output: If True, emit JSON lines. If False, use console output.
    """
    global _handler  # noqa: PLW0603

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_get_pre_chain(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _get_renderer(json_output),
        ],
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    package_logger = logging.getLogger(LOGGER_NAME)
    if _handler is not None:
        package_logger.removeHandler(_handler)
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    package_logger.propagate = False
    _handler = handler


def reset_logging() -> None:
    """Undo `configure_logging`: remove its handler and hand records back to the host."""
    global _handler  # noqa: PLW0603

    package_logger = logging.getLogger(LOGGER_NAME)
    if _handler is not None:
        package_logger.removeHandler(_handler)
        _handler = None
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


# --- Logging Hooks ---

_log_hooks: list[Callable[[dict[str, Any]], None]] = []


def add_log_hook(hook: Callable[[dict[str, Any]], None]) -> None:
    """Register a hook called with a copy of every event `configure_logging`'s handler renders.

    Useful to count registry constructions or to capture seeding failures.
    """
    _log_hooks.append(hook)


def remove_log_hook(hook: Callable[[dict[str, Any]], None]) -> None:
    """Remove a previously registered log hook."""
    if hook in _log_hooks:
        _log_hooks.remove(hook)


def clear_log_hooks() -> None:
    """Remove all registered log hooks."""
    _log_hooks.clear()


def _create_hook_processor() -> Callable[[Any, str, dict[str, Any]], dict[str, Any]]:
    def hook_processor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        for hook in _log_hooks:
            try:
                hook(event_dict.copy())
            except Exception:  # noqa: BLE001, S110
                pass  # a failing hook never blocks the record or later hooks
        return event_dict

    return hook_processor
