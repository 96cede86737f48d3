"""Observability – JsonLoggerFactory."""
from __future__ import annotations

import logging
import re
from typing import Any

import structlog

_REDACTED = "***"


def _render_patterns(logger: Any, method: Any, event_dict: dict[str, Any]) -> dict[str, Any]:  # noqa: ARG001
    """Replace compiled regexes (found in logged filters) with their source."""

    def _walk(value: Any) -> Any:
        if isinstance(value, re.Pattern):
            return value.pattern
        if isinstance(value, dict):
            return {k: _walk(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [_walk(v) for v in value]
        return value

    return {k: _walk(v) for k, v in event_dict.items()}


class JsonLoggerFactory:
    """Configure structlog for JSON output on the root logger."""

    @staticmethod
    def configure(level: int = logging.INFO, sensitive_fields: frozenset[str] | None = None) -> None:
        shared_processors: list[Any] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            _render_patterns,
        ]
        if sensitive_fields:
            lowered = frozenset(f.lower() for f in sensitive_fields)

            def _redact(logger: Any, method: Any, event_dict: dict[str, Any]) -> dict[str, Any]:  # noqa: ARG001
                return {
                    k: (_REDACTED if k.lower() in lowered else v)
                    for k, v in event_dict.items()
                }

            shared_processors.insert(0, _redact)

        structlog.configure(
            processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        formatter = structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(default=str),
            ],
            foreign_pre_chain=shared_processors,
        )
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        root = logging.getLogger()
        root.handlers.clear()
        root.addHandler(handler)
        root.setLevel(level)


__all__ = ["JsonLoggerFactory"]
