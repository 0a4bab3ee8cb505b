"""Transport selection for upstream requests."""

from .config import BackendConfig


def scheme(config: BackendConfig) -> str:
    """Return "https" when both credentials are configured, "http" otherwise.

    Credentials upgrade the connection to TLS. A username alone does not, and
    the request then goes out over plain http without authentication.
    """
    return "https" if config.has_credentials else "http"


def basic_auth(config: BackendConfig) -> tuple[str, str] | None:
    """Return the basic auth pair, or None unless both values are set."""
    if not config.has_credentials:
        return None
    return (config.username, config.password)


def base_url(config: BackendConfig) -> str:
    return f"{scheme(config)}://{config.host}"
