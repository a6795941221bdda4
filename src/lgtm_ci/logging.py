"""Structured logging for lgtm-ci.

Diagnostics go through `structlog <https://www.structlog.org/>`_ on top
of the stdlib ``logging`` module. The CLI's own ``[INFO]``/``[ERROR]``
lines are printed by rich; structlog events carry the detail behind
them and mostly live at debug level.

Two renderers are available:

- console (default): ``[info     ] event key=value``, colored on a TTY.
- JSON (``--json-log``): one object per line with an ISO timestamp.

Everything is written to stderr; stdout belongs to the ``key=value``
step outputs. Values of token env vars are replaced with ``[REDACTED]``
in every event field.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

# Env vars whose values must never reach a log line.
_SENSITIVE_ENV_VARS: tuple[str, ...] = (
    "GITHUB_TOKEN",
    "GH_TOKEN",
    "PYPI_TOKEN",
    "NPM_TOKEN",
)

# Shorter values are too likely to match ordinary text.
_MIN_SECRET_LENGTH = 8

_REDACTED = "[REDACTED]"

_secret_values: frozenset[str] = frozenset()


class _StderrHandler(logging.StreamHandler):
    """Stream handler bound to whatever ``sys.stderr`` is at emit time."""

    @property
    def stream(self) -> Any:  # noqa: ANN401
        return sys.stderr

    @stream.setter
    def stream(self, value: Any) -> None:  # noqa: ANN401
        pass


def redact_sensitive_values(
    logger: Any,  # noqa: ANN401
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Structlog processor replacing token values found in string fields."""
    if not _secret_values:
        return event_dict
    redacted = {}
    for key, value in event_dict.items():
        if isinstance(value, str):
            for secret in _secret_values:
                value = value.replace(secret, _REDACTED)
        redacted[key] = value
    return redacted


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    json_log: bool = False,
) -> None:
    """Configure structlog and the root logger.

    Safe to call more than once; each call replaces the previous setup.

    Args:
        verbose: Log debug events. ``VERBOSE=1`` or ``VERBOSE=true`` has
            the same effect.
        quiet: Only log warnings and errors. Wins over ``verbose``.
        json_log: Render events as JSON lines.
    """
    global _secret_values  # noqa: PLW0603
    _secret_values = frozenset(
        value
        for name in _SENSITIVE_ENV_VARS
        if len(value := os.environ.get(name, "")) >= _MIN_SECRET_LENGTH
    )

    verbose = verbose or os.environ.get("VERBOSE", "").lower() in ("1", "true")
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        redact_sensitive_values,
    ]
    if json_log:
        processors.insert(1, structlog.processors.TimeStamper(fmt="iso", utc=True))
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler = _StderrHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    logging.basicConfig(handlers=[handler], level=level, force=True)

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # CliRunner swaps the streams between invocations.
        cache_logger_on_first_use=False,
    )


def get_logger(name: str = "lgtm_ci") -> structlog.stdlib.BoundLogger:
    """Return a structlog logger for ``name``."""
    return structlog.get_logger(name)


__all__ = [
    "configure_logging",
    "get_logger",
    "redact_sensitive_values",
]
