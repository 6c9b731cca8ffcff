"""Observability – structlog processors and get_logger helper."""
from __future__ import annotations

import os
from typing import Any

import structlog


class ProcessIdProcessor:
    """structlog processor that stamps each event with the OS process id.

    Cache storage is shared by many request-handling processes, so the pid is
    what tells two interleaved writers apart in the logs.
    """

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        event_dict.setdefault("pid", os.getpid())
        return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["ProcessIdProcessor", "get_logger"]
