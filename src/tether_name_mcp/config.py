"""
Credential configuration for the Tether.name MCP server.

Configuration is read from the environment once per tool call and frozen
into a ``CredentialConfig`` that is passed down to the client, key store and
verifier. Nothing below the tool shell reads ``os.environ`` itself.

Environment Variables:
    TETHER_CREDENTIAL_ID: Credential ID issued by tether.name (required)
    TETHER_PRIVATE_KEY_PATH: Path to the RSA private key, PEM or DER (required)
    TETHER_BASE_URL: API base URL (default: https://api.tether.name)
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import ConfigError

CREDENTIAL_ID_ENV = "TETHER_CREDENTIAL_ID"
PRIVATE_KEY_PATH_ENV = "TETHER_PRIVATE_KEY_PATH"
BASE_URL_ENV = "TETHER_BASE_URL"

DEFAULT_BASE_URL = "https://api.tether.name"


@dataclass(frozen=True)
class CredentialConfig:
    """Identity of the calling agent."""

    credential_id: Optional[str] = None
    private_key_path: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CredentialConfig":
        """
        Build a config from environment variables.

        Empty values are treated as unset. This never raises; call
        ``require()`` before using the config for an API call.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)
        """
        if environ is None:
            environ = os.environ

        base_url = environ.get(BASE_URL_ENV) or DEFAULT_BASE_URL
        return cls(
            credential_id=environ.get(CREDENTIAL_ID_ENV) or None,
            private_key_path=environ.get(PRIVATE_KEY_PATH_ENV) or None,
            base_url=base_url.rstrip("/"),
        )

    @property
    def configured(self) -> bool:
        return bool(self.credential_id and self.private_key_path)

    def missing(self) -> tuple[str, ...]:
        """Names of the required environment variables that are not set."""
        names = []
        if not self.credential_id:
            names.append(CREDENTIAL_ID_ENV)
        if not self.private_key_path:
            names.append(PRIVATE_KEY_PATH_ENV)
        return tuple(names)

    def require(self) -> "CredentialConfig":
        """
        Ensure the credential is fully configured.

        Returns:
            CredentialConfig: ``self``, for chaining

        Raises:
            ConfigError: Naming every missing environment variable
        """
        missing = self.missing()
        if missing:
            if len(missing) == 1:
                message = f"{missing[0]} environment variable is required"
            else:
                message = f"{' and '.join(missing)} environment variables are required"
            raise ConfigError(message, missing=missing)
        return self
