"""Error logging helpers that attach record and request context."""

import logging
import traceback
from typing import Any, Mapping, Optional

from app.config import DEBUG

ROOT_LOGGER = "Omifem"


def format_context(context: Optional[Mapping[str, Any]]) -> str:
    """``{"id": 1, "user": "a@b"}`` -> ``"id=1, user=a@b"``."""
    if not context:
        return ""
    return ", ".join(f"{key}={value}" for key, value in context.items())


def error_log(
    message: str,
    exc: Optional[BaseException] = None,
    context: Optional[Mapping[str, Any]] = None,
    area: Optional[str] = None,
) -> None:
    """
    Log a failed operation on the ``Omifem`` logger (or ``Omifem.<area>``).

    Args:
        message: What failed, e.g. "Failed to update like"
        exc: The exception that caused it, if any
        context: Record ids, user and similar details
        area: Sub-logger name ("admin", "catalog"...)
    """
    logger = logging.getLogger(f"{ROOT_LOGGER}.{area}" if area else ROOT_LOGGER)
    parts = [message]

    details = format_context(context)
    if details:
        parts.append(f"Context: {details}")

    if exc is not None:
        parts.append(f"Exception: {type(exc).__name__}: {exc}")
        if DEBUG:
            parts.append("Traceback:\n" + "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
        logger.error(" | ".join(parts), exc_info=exc)
    else:
        logger.error(" | ".join(parts))


def request_context(request: Any) -> dict:
    """Method, path and signed-in user of a request, where available."""
    context = {}
    url = getattr(request, "url", None)
    if url is not None:
        context["path"] = getattr(url, "path", str(url))
    method = getattr(request, "method", None)
    if method:
        context["method"] = method

    # Set by resolve_current_user when the request got that far
    state = getattr(request, "state", None)
    user = state.get("current_user") if state is not None and hasattr(state, "get") else None
    context["user"] = getattr(user, "email", None) or "anonymous"
    return context


def log_request_error(
    request: Any,
    exc: BaseException,
    message: Optional[str] = None
) -> None:
    """Log an unhandled exception with the request it came from."""
    error_log(
        message or f"Unhandled exception: {type(exc).__name__}",
        exc=exc,
        context=request_context(request),
        area="http",
    )
