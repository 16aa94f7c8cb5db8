"""Turns unexpected failures on the /cards surface into a safe JSON payload."""
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

CARDS_FAILURE_MESSAGE = "Plugin cards could not be rendered right now. Please try again later."


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        context = dict(context or {})
        slugs = context.get("slugs") or ""
        author = context.get("author") or ""
        logger.error(
            "Unhandled %s while rendering cards (slugs=%r, author=%r): %s",
            type(exc).__name__, slugs, author, exc, exc_info=True,
        )
        return {
            "message": CARDS_FAILURE_MESSAGE,
            "fallback": True,
            "metadata": {
                "error": str(exc),
                "error_type": type(exc).__name__,
                "request": {"slugs": slugs, "author": author},
                "context": context,
            },
        }
