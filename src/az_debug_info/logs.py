"""Logging setup for the ``az_debug_info`` logger tree.

Log calls attach structured data through ``extra={"fields": {...}}``.  The
human-readable formatter appends those as ``key=value`` pairs, the JSON
formatter merges them into the emitted object.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog
from uvicorn.logging import DefaultFormatter

from az_debug_info.settings import DebugInfoSettings

_TEXT_FORMAT = "%(levelprefix)s %(name)s - %(message)s"
_DEBUG_TEXT_FORMAT = "%(levelprefix)s %(name)s %(funcName)s (%(filename)s:%(lineno)d) - %(message)s"


class FieldsFormatter(DefaultFormatter):
    """uvicorn-style formatter that renders ``record.fields`` after the message."""

    def formatMessage(self, record: logging.LogRecord) -> str:  # noqa: N802
        message = super().formatMessage(record)
        fields = getattr(record, "fields", None)
        if fields:
            message += " " + " ".join(f"{k}={v}" for k, v in sorted(fields.items()))
        return message


def _add_record_fields(
    _logger: Any, _method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Merge the stdlib record's ``fields`` extra into the event dict."""
    record = event_dict.get("_record")
    fields = getattr(record, "fields", None)
    if fields:
        event_dict.update(fields)
    return event_dict


def _json_formatter() -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            _add_record_fields,
            structlog.processors.format_exc_info,
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
    )


def setup_logging(settings: DebugInfoSettings) -> None:
    """Configure the root ``az_debug_info`` logger from *settings*."""
    level = logging.DEBUG if settings.verbose or settings.debug else logging.INFO

    handler = logging.StreamHandler()
    if settings.log_json:
        handler.setFormatter(_json_formatter())
    else:
        fmt = _DEBUG_TEXT_FORMAT if settings.debug else _TEXT_FORMAT
        handler.setFormatter(FieldsFormatter(fmt=fmt, use_colors=None))

    app_logger = logging.getLogger("az_debug_info")
    app_logger.handlers = [handler]
    app_logger.setLevel(level)
    app_logger.propagate = False

    # Silence noisy third-party loggers
    logging.getLogger("azure").setLevel(logging.INFO if settings.debug else logging.WARNING)
