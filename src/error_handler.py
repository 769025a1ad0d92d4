"""Error handling helpers for the quote wizard."""
from typing import Any, Dict
import logging

logger = logging.getLogger(__name__)


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        """Turn an unexpected error into a non-blocking response; the user's progress is kept."""
        logger.error("Unhandled exception in quote wizard: %s", exc, exc_info=True)
        return {
            "message": "Something went wrong while preparing your quote. Your progress has been saved; please try again.",
            "fallback": True,
            "metadata": {"error": str(exc), "context": context or {}},
        }
