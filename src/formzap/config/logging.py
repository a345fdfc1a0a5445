"""structlog setup for the formzap CLI.

stdout carries decode outcomes, so every log line goes to stderr: colored
console lines by default, one JSON object per event with ``--log-json``.
stdlib loggers (plugin loading, config discovery) share the same renderer.

Each ``decode`` binds the schema target and body type with
:func:`bind_decode_context`; every event logged during that decode carries
them.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

# Libraries whose DEBUG chatter would drown a --verbose decode.
QUIET_LOGGERS = ("pluggy", "python_multipart")


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog and stdlib logging to one stderr handler.

    ``formzap.*`` loggers emit DEBUG when *verbose*, WARNING otherwise.
    Calling again replaces the previous handler.
    """
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_render(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("formzap").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _render(log_json: bool) -> list[structlog.types.Processor]:
    if log_json:
        # exc_info becomes a structured "exception" list.
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def bind_decode_context(**fields: Any) -> None:
    """Replace the per-decode log context with *fields*."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**fields)
