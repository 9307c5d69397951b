"""Structured logging for the depcheck CLI — structlog rendered through stdlib logging."""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

# Third-party loggers that are only interesting when they complain.
_QUIET_LOGGERS = ("httpx", "httpcore")


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(level: str | None = None) -> None:
    """Route structlog and stdlib records to stderr.

    *level* wins over ``DEPCHECK_LOG_LEVEL`` (default WARNING);
    ``DEPCHECK_LOG_FORMAT`` picks ``console`` or ``json``. Report output on
    stdout is never mixed with log lines.
    """
    log_level = (level or os.environ.get("DEPCHECK_LOG_LEVEL", "WARNING")).upper()
    log_format = os.environ.get("DEPCHECK_LOG_FORMAT", "console").lower()

    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "depcheck": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": pre_chain,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _renderer(log_format),
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "depcheck",
                },
            },
            "root": {"handlers": ["stderr"], "level": log_level},
            "loggers": {
                "depcheck": {"level": log_level},
                **{name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
            },
        }
    )
