"""HTTP client factory that identifies the plugin through its User-Agent."""

from typing import Any

import httpx

from .telemetry.initializer import TelemetryContextInitializer


def default_user_agent() -> str:
    """User-Agent httpx sends on its own."""
    return f"python-httpx/{httpx.__version__}"


def create_http_client(
    initializer: TelemetryContextInitializer,
    user_agent: str | None = None,
    **kwargs: Any,
) -> httpx.Client:
    """
    Create an httpx client whose User-Agent describes this plugin and its host.

    Args:
        initializer: Builds the User-Agent from platform and host facts
        user_agent: Agent string appended at the end (httpx's own by default)
        **kwargs: Passed through to httpx.Client

    Returns:
        Configured client; the caller owns and closes it
    """
    headers = dict(kwargs.pop("headers", None) or {})
    headers["User-Agent"] = initializer.get_user_agent(user_agent or default_user_agent())
    return httpx.Client(headers=headers, **kwargs)
