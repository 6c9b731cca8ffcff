"""Application-layer errors – misuse of the library by its caller."""

from __future__ import annotations

from chms_cache.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Programmer or configuration error; raised, never swallowed."""

    default_code = "application_error"


__all__ = ["ApplicationError"]
