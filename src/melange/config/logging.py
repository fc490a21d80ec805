"""structlog setup for melange's stderr log stream.

stdout carries response bodies and JSON output, so every log line goes to
stderr.  ``--log-json`` swaps the console renderer for JSON lines.

Library modules log through stdlib ``logging.getLogger(__name__)``; those
records pass through the same processor chain as structlog loggers.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

# logger name -> (quiet level, verbose level)
LOGGER_LEVELS: dict[str, tuple[int, int]] = {
    "melange": (logging.WARNING, logging.DEBUG),
    # Child stderr is noise on a login screen unless debugging.
    "melange.infrastructure.process": (logging.ERROR, logging.DEBUG),
    "melange.telemetry": (logging.WARNING, logging.DEBUG),
}


def _bytes_to_text(
    _logger: Any, _method: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Decode bytes values (command output) so both renderers can emit them."""
    for key, value in event_dict.items():
        if isinstance(value, (bytes, bytearray)):
            event_dict[key] = bytes(value).decode("utf-8", errors="replace")
    return event_dict


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install one stderr handler and set melange logger levels.

    Safe to call repeatedly: the root handler is replaced, never stacked.
    The CLI calls it once from its flags before settings resolve, then
    again once ``INFORMANT_VERBOSE``/``INFORMANT_LOG_JSON`` are known.
    """
    shared: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _bytes_to_text,
    ]

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(logging.WARNING)

    for name, (quiet, loud) in LOGGER_LEVELS.items():
        logging.getLogger(name).setLevel(loud if verbose else quiet)
