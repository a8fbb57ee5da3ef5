"""
src/shared.py
Shared environment-driven settings for the BoardSync proxy.
Exports: build_api_version, build_azure_base_url, build_http_timeout_seconds,
         build_cors_origins, build_area_path_depth
"""

import os

DEFAULT_API_VERSION = "6.0"
DEFAULT_AZURE_BASE_URL = "https://dev.azure.com"
DEFAULT_HTTP_TIMEOUT_SECONDS = 20
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://frontend:3000"
DEFAULT_AREA_PATH_DEPTH = 10


def _positive_int_env(name: str, default: int) -> int:
    """Read a positive integer env var or raise RuntimeError when malformed."""
    raw_value = os.getenv(name, str(default)).strip()
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid {name}: expected a positive integer.") from exc
    if value <= 0:
        raise RuntimeError(f"Invalid {name}: expected a positive integer.")
    return value


def build_api_version() -> str:
    """Return Azure DevOps REST api-version."""
    return os.getenv("BOARDSYNC_API_VERSION", DEFAULT_API_VERSION).strip() or DEFAULT_API_VERSION


def build_azure_base_url() -> str:
    """Return Azure DevOps host URL without trailing slash."""
    value = os.getenv("BOARDSYNC_AZURE_BASE_URL", DEFAULT_AZURE_BASE_URL).strip()
    return (value or DEFAULT_AZURE_BASE_URL).rstrip("/")


def build_http_timeout_seconds() -> int:
    """Return outbound HTTP timeout (positive integer seconds)."""
    return _positive_int_env("BOARDSYNC_HTTP_TIMEOUT_SECONDS", DEFAULT_HTTP_TIMEOUT_SECONDS)


def build_area_path_depth() -> int:
    """Return classification node depth requested for area paths."""
    return _positive_int_env("BOARDSYNC_AREA_PATH_DEPTH", DEFAULT_AREA_PATH_DEPTH)


def build_cors_origins() -> list[str]:
    """Return allowed CORS origins from a comma-separated env var."""
    raw_value = os.getenv("BOARDSYNC_CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw_value.split(",") if origin.strip()]
