"""Error handling helpers for the products API."""
from typing import Any, Dict
import logging

from src.catalog.errors import CatalogError, ProductValidationError

logger = logging.getLogger(__name__)


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        if isinstance(exc, CatalogError):
            logger.info("Request rejected (%s): %s", type(exc).__name__, exc.message)
            payload: Dict[str, Any] = {
                "message": exc.message,
                "status_code": exc.status_code,
                "error": type(exc).__name__,
            }
            if isinstance(exc, ProductValidationError):
                payload["field_errors"] = exc.field_errors
            return payload

        logger.error("Unhandled exception in products API: %s", exc, exc_info=True)
        return {
            "message": "An internal error occurred while processing your request. Please try again later.",
            "status_code": 500,
            "error": "InternalError",
            "metadata": {"context": context or {}},
        }
