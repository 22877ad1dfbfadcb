"""
Challenge/response client for the Tether.name API.
"""
from __future__ import annotations


import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from .config import CredentialConfig
from .exceptions import ServiceError
from .transport import DEFAULT_TIMEOUT, HttpTransport

logger = logging.getLogger(__name__)


@dataclass
class VerificationResult:
    """Result of a Tether.name verification attempt."""

    verified: bool
    agent_name: Optional[str] = None
    verify_url: Optional[str] = None
    email: Optional[str] = None
    registered_since: Optional[datetime] = None
    error: Optional[str] = None
    challenge: Optional[str] = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready view of the result; unset fields and ``raw`` are left out."""
        data: dict[str, Any] = {
            "verified": self.verified,
            "agentName": self.agent_name,
            "verifyUrl": self.verify_url,
            "email": self.email,
            "registeredSince": (
                self.registered_since.isoformat() if self.registered_since else None
            ),
            "error": self.error,
            "challenge": self.challenge,
        }
        return {key: value for key, value in data.items() if value is not None}


def _parse_registered_since(raw: Any) -> Optional[datetime]:
    # epoch ms or ISO string
    try:
        if isinstance(raw, bool):
            return None
        if isinstance(raw, (int, float)):
            return datetime.fromtimestamp(raw / 1000.0, tz=timezone.utc)
        if isinstance(raw, str):
            return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except (ValueError, TypeError, OSError, OverflowError):
        logger.debug("Ignoring unparseable registeredSince value: %r", raw)
    return None


class ChallengeClient:
    """
    Client for the Tether.name challenge endpoints.

    The client holds no credential state; every call takes the
    ``CredentialConfig`` it acts for.

    Example:
        >>> config = CredentialConfig.from_env().require()
        >>> with ChallengeClient() as client:
        ...     challenge = client.request_challenge(config)
        ...     result = client.submit_proof(config, challenge, proof)
    """

    def __init__(
        self,
        transport: Optional[Any] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """
        Initialize the challenge client.

        Args:
            transport: Object with a ``post_json(url, payload, timeout=...)``
                method, e.g. ``HttpTransport`` or ``RetryingTransport``
            timeout: Default request timeout in seconds
        """
        self.timeout = timeout
        self._transport = transport or HttpTransport(timeout=timeout)

    def __enter__(self) -> "ChallengeClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying transport."""
        self._transport.close()

    def request_challenge(
        self, config: CredentialConfig, timeout: Optional[float] = None
    ) -> str:
        """
        Request a verification challenge from the Tether API.

        Returns:
            str: The challenge code to sign

        Raises:
            ConfigError: If the credential is not configured
            NetworkError: If the API cannot be reached
            ServiceError: If the API request fails
        """
        config.require()
        url = f"{config.base_url}/challenge"
        data = self._transport.post_json(
            url,
            {"credentialId": config.credential_id},
            timeout=self.timeout if timeout is None else timeout,
        )

        code = data.get("code")
        if not isinstance(code, str) or not code:
            raise ServiceError("Invalid challenge response: missing 'code' field")

        logger.debug("Received challenge for credential %s", config.credential_id)
        return code

    def submit_proof(
        self,
        config: CredentialConfig,
        challenge: str,
        proof: str,
        timeout: Optional[float] = None,
    ) -> VerificationResult:
        """
        Submit a signed challenge for verification.

        A rejected proof is a normal result with ``verified=False``.

        Args:
            config: The credential the proof was made with
            challenge: The original challenge string
            proof: The signature of the challenge

        Returns:
            VerificationResult: The verification result

        Raises:
            ConfigError: If the credential is not configured
            NetworkError: If the API cannot be reached
            ServiceError: If the API request fails
        """
        config.require()
        payload = {
            "challenge": challenge,
            "proof": proof,
            "credentialId": config.credential_id,
        }
        data = self._transport.post_json(
            f"{config.base_url}/challenge/verify",
            payload,
            timeout=self.timeout if timeout is None else timeout,
        )

        if data.get("valid") is not True:
            error_msg = data.get("error") or "Verification failed"
            logger.info("Proof rejected for credential %s: %s", config.credential_id, error_msg)
            return VerificationResult(
                verified=False,
                error=error_msg,
                challenge=challenge,
                raw=data,
            )

        return VerificationResult(
            verified=True,
            agent_name=data.get("agentName"),
            verify_url=data.get("verifyUrl"),
            email=data.get("email"),
            registered_since=_parse_registered_since(data.get("registeredSince")),
            challenge=challenge,
            raw=data,
        )
