"""
Connection settings for the Gigapipe host.

The settings come from the environment and are resolved again on every tool
call unless the server was started with an explicit configuration.
"""

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_HOST = "localhost:3100"

# Upper bound for a single upstream request, in seconds
REQUEST_TIMEOUT = 30.0

HOST_ENV = "GIGAPIPE_HOST"
USERNAME_ENV = "GIGAPIPE_USERNAME"
PASSWORD_ENV = "GIGAPIPE_PASSWORD"


class BackendConfig(BaseModel):
    """Connection settings for the Gigapipe query APIs."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(default=DEFAULT_HOST, description="Host and optional port, without scheme")
    username: str = Field(default="", description="Basic auth username")
    password: str = Field(default="", description="Basic auth password", repr=False)

    @property
    def has_credentials(self) -> bool:
        """True only when both username and password are set.

        A username without a password (or the reverse) counts as no
        credentials at all: no auth header and plain http.
        """
        return bool(self.username) and bool(self.password)


def resolve_config(environ: Mapping[str, str] | None = None) -> BackendConfig:
    """Build a BackendConfig from environment variables.

    Args:
        environ: Mapping to read from. Defaults to os.environ.

    Returns:
        The resolved configuration. An unset or empty host falls back to
        DEFAULT_HOST; missing credentials become empty strings.
    """
    env = os.environ if environ is None else environ

    return BackendConfig(
        host=env.get(HOST_ENV) or DEFAULT_HOST,
        username=env.get(USERNAME_ENV, ""),
        password=env.get(PASSWORD_ENV, ""),
    )


def pinned_config(
    host: str | None = None,
    username: str | None = None,
    password: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> BackendConfig:
    """Resolve the environment once and overlay explicit values on top.

    Used when the process is started with connection flags, so every call
    shares one configuration instead of re-reading the environment.
    """
    base = resolve_config(environ)
    overrides = {
        key: value
        for key, value in (("host", host), ("username", username), ("password", password))
        if value is not None
    }
    return base.model_copy(update=overrides)
