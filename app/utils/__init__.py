"""Utility functions for the Omifem application."""

from litestar.connection import ASGIConnection


def get_base_path(connection: ASGIConnection) -> str:
    """
    Extract the base path the app is mounted under (e.g. '/shop').
    
    Uses the ASGI ``root_path`` (set by uvicorn --root-path) when present,
    otherwise falls back to an empty prefix.
    """
    try:
        scope = getattr(connection, "scope", None)
        if scope:
            root_path = scope.get("root_path", "")
            if root_path:
                return root_path.rstrip("/")
    except (AttributeError, KeyError, TypeError):
        pass
    return ""


def safe_next_path(value: str | None, default: str = "/") -> str:
    """Only allow local redirect targets."""
    # "/\host" is read as "//host" by browsers
    if not value or not value.startswith("/") or value[1:2] in ("/", "\\"):
        return default
    return value
