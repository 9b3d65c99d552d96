"""
Shared exception-to-HTTP mapping for API routes.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from loadplan.core import InvalidProfile

logger = logging.getLogger(__name__)


def http_exception(action: str, e: Exception) -> HTTPException:
    """
    Convert an exception raised while handling a request into an HTTPException.

    Args:
        action: Short description of what failed, e.g. "compile profile"
        e: The exception that was raised

    Returns:
        400 for profiles the runtime can't express, 500 for anything else
    """
    if isinstance(e, InvalidProfile):
        logger.warning("Rejected profile (%s): %s", action, e)
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    logger.error("Failed to %s: %s", action, e, exc_info=e)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}: {e}",
    )
