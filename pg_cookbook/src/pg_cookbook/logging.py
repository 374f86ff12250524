"""structlog wiring for the helpers and the CLI.

Records go to stderr, leaving stdout to the PEM text the CLI prints. JSON lines
carry ``ts``, ``level``, ``msg`` and ``component``; ``json_output=False``
switches to structlog's console renderer for interactive use.
"""
from __future__ import annotations

import logging
import sys
from typing import Any, MutableMapping

import structlog

_FALLBACK_COMPONENT = "pg_cookbook"


def configure_logging(level: str | None = None, *, json_output: bool = True) -> None:
    numeric_level = parse_level(level)
    logging.basicConfig(
        level=numeric_level,
        handlers=[logging.StreamHandler(sys.stderr)],
        format="%(message)s",
        force=True,
    )

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="ts"),
        _add_component,
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors += [_event_to_msg, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(component)


def parse_level(level: str | None) -> int:
    """Map a level name to its ``logging`` constant; unknown names mean WARNING."""
    if not level:
        return logging.WARNING
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.WARNING


def _add_component(
    logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    event_dict.setdefault("component", getattr(logger, "name", None) or _FALLBACK_COMPONENT)
    return event_dict


def _event_to_msg(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    if "msg" not in event_dict:
        event_dict["msg"] = event_dict.pop("event", "")
    return event_dict


__all__ = ["configure_logging", "get_logger", "parse_level"]
