from __future__ import annotations

from typing import Any, Dict, Optional

CATALOG_FAILURE_MESSAGE = (
    "An unexpected error occurred. Something may be wrong with WordPress.org or this "
    "server's configuration. If you continue to have problems, please try the support "
    "forums at https://wordpress.org/support/."
)


class CatalogError(Exception):
    """Base error for catalog lookups and record validation."""

    def __init__(self, message: str, *, detail: str = "", payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail or ""
        self.payload = payload or {}

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message


class TransportError(CatalogError):
    """Network or timeout failure on every attempted endpoint."""


class MalformedResponseError(CatalogError):
    """Catalog answered with something that is not a JSON object or array."""


class RecordValidationError(CatalogError):
    """Record lacks the slug or icons a card needs."""
