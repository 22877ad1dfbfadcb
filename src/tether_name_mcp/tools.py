"""
Tool dispatch shell for the Tether.name MCP server.

Maps the five tool names onto the configuration, client, signer and
verifier, and turns every outcome into a ``ToolResponse`` envelope. This is
the only place exceptions are converted into user-facing text.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from .client import ChallengeClient, VerificationResult
from .config import CredentialConfig
from .crypto import load_private_key, sign_challenge
from .exceptions import InvalidArgumentsError, TetherError
from .transport import DEFAULT_TIMEOUT
from .verification import Verifier

logger = logging.getLogger(__name__)

NOT_SET = "(not set)"


@dataclass(frozen=True)
class ToolSpec:
    """A tool as advertised to the calling runtime."""

    name: str
    description: str
    input_schema: dict[str, Any] = field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    @property
    def required(self) -> list[str]:
        return list(self.input_schema.get("required", []))


@dataclass
class ToolResponse:
    """Uniform response envelope returned by every tool call."""

    text: str
    is_error: bool = False

    @property
    def content(self) -> list[dict[str, str]]:
        return [{"type": "text", "text": self.text}]

    def to_dict(self) -> dict[str, Any]:
        return {"content": self.content, "isError": self.is_error}

    @classmethod
    def success(cls, payload: dict[str, Any]) -> "ToolResponse":
        return cls(json.dumps(payload, indent=2))

    @classmethod
    def failure(cls, message: str) -> "ToolResponse":
        return cls(message, is_error=True)


@dataclass
class ChallengeResult:
    challenge: str

    def to_dict(self) -> dict[str, Any]:
        return {"challenge": self.challenge}


@dataclass
class ProofResult:
    proof: str

    def to_dict(self) -> dict[str, Any]:
        return {"proof": self.proof}


@dataclass
class CredentialInfo:
    """Secrets-safe view of the configured credential."""

    credential_id: str
    private_key_path: str
    base_url: str
    configured: bool

    @classmethod
    def from_config(cls, config: CredentialConfig) -> "CredentialInfo":
        return cls(
            credential_id=config.credential_id or NOT_SET,
            private_key_path=config.private_key_path or NOT_SET,
            base_url=config.base_url,
            configured=config.configured,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "credentialId": self.credential_id,
            "privateKeyPath": self.private_key_path,
            "baseUrl": self.base_url,
            "configured": self.configured,
        }


def _string_param(description: str) -> dict[str, str]:
    return {"type": "string", "description": description}


TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="verify_identity",
        description=(
            "Perform complete identity verification in one call. Requests a "
            "challenge, signs it with the configured private key, and submits "
            "the proof to tether.name for verification."
        ),
    ),
    ToolSpec(
        name="request_challenge",
        description=(
            "Request a new challenge string from the tether.name API. This "
            "challenge must be signed and submitted back for verification."
        ),
    ),
    ToolSpec(
        name="sign_challenge",
        description=(
            "Sign a challenge string using the configured RSA private key. "
            "Returns a URL-safe base64 encoded signature."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "challenge": _string_param("The challenge string to sign"),
            },
            "required": ["challenge"],
        },
    ),
    ToolSpec(
        name="submit_proof",
        description=(
            "Submit a signed proof for a challenge to the tether.name API for "
            "verification."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "challenge": _string_param(
                    "The original challenge string from request_challenge"
                ),
                "proof": _string_param("The signed proof from sign_challenge"),
            },
            "required": ["challenge", "proof"],
        },
    ),
    ToolSpec(
        name="get_credential_info",
        description=(
            "Get information about the currently configured tether.name "
            "credential. Returns the credential ID, key path and API base URL."
        ),
    ),
)

ERROR_PREFIXES = {
    "verify_identity": "Verification failed",
    "request_challenge": "Failed to request challenge",
    "sign_challenge": "Failed to sign challenge",
    "submit_proof": "Failed to submit proof",
}


MAX_DETAIL_LENGTH = 200


def _describe(error: TetherError) -> str:
    if not error.details:
        return error.message
    details = error.details.strip()
    if len(details) > MAX_DETAIL_LENGTH:
        details = details[:MAX_DETAIL_LENGTH] + "..."
    return f"{error.message} ({details})"


def _require_string(arguments: Mapping[str, Any], name: str) -> str:
    value = arguments.get(name)
    if not isinstance(value, str) or not value:
        raise InvalidArgumentsError(f"'{name}' must be a non-empty string")
    return value


class ToolShell:
    """
    Stateless dispatcher for the five Tether.name tools.

    Configuration is read from ``environ`` at the start of every call, and a
    fresh ``ChallengeClient`` is created (and closed) for every call that
    talks to the API.

    Example:
        >>> shell = ToolShell()
        >>> response = shell.call_tool("verify_identity")
        >>> print(response.text)
    """

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        client_factory: Optional[Callable[[], ChallengeClient]] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """
        Args:
            environ: Configuration source (defaults to ``os.environ``)
            client_factory: Builds the ``ChallengeClient`` for a call
            timeout: Request timeout for the default client factory
        """
        self._environ = environ
        self._client_factory = client_factory or (lambda: ChallengeClient(timeout=timeout))
        self._handlers: dict[str, Callable[[CredentialConfig, Mapping[str, Any]], dict[str, Any]]] = {
            "verify_identity": self._verify_identity,
            "request_challenge": self._request_challenge,
            "sign_challenge": self._sign_challenge,
            "submit_proof": self._submit_proof,
        }

    def list_tools(self) -> list[ToolSpec]:
        return list(TOOLS)

    def call_tool(
        self, name: str, arguments: Optional[Mapping[str, Any]] = None
    ) -> ToolResponse:
        """
        Run a tool and wrap its outcome in a ``ToolResponse``.

        Never raises for tool failures; only ``BaseException`` subclasses
        such as cancellation escape.
        """
        arguments = arguments or {}
        config = CredentialConfig.from_env(self._environ)

        if name == "get_credential_info":
            return ToolResponse.success(CredentialInfo.from_config(config).to_dict())

        handler = self._handlers.get(name)
        if handler is None:
            return ToolResponse.failure(f"Unknown tool: {name}")

        prefix = ERROR_PREFIXES[name]
        try:
            config.require()
            payload = handler(config, arguments)
        except TetherError as e:
            logger.warning("%s failed: %s", name, e.message)
            return ToolResponse.failure(f"{prefix}: {_describe(e)}")
        except Exception as e:
            logger.exception("Unexpected error in %s", name)
            return ToolResponse.failure(f"{prefix}: {e}")
        return ToolResponse.success(payload)

    def get_credential_info(self) -> ToolResponse:
        return self.call_tool("get_credential_info")

    def verify_identity(self) -> ToolResponse:
        return self.call_tool("verify_identity")

    def request_challenge(self) -> ToolResponse:
        return self.call_tool("request_challenge")

    def sign_challenge(self, challenge: str) -> ToolResponse:
        return self.call_tool("sign_challenge", {"challenge": challenge})

    def submit_proof(self, challenge: str, proof: str) -> ToolResponse:
        return self.call_tool("submit_proof", {"challenge": challenge, "proof": proof})

    def _verify_identity(self, config: CredentialConfig, arguments: Mapping[str, Any]) -> dict[str, Any]:
        with self._client_factory() as client:
            result: VerificationResult = Verifier(client).verify(config)
        return result.to_dict()

    def _request_challenge(self, config: CredentialConfig, arguments: Mapping[str, Any]) -> dict[str, Any]:
        with self._client_factory() as client:
            challenge = client.request_challenge(config)
        return ChallengeResult(challenge).to_dict()

    def _sign_challenge(self, config: CredentialConfig, arguments: Mapping[str, Any]) -> dict[str, Any]:
        challenge = _require_string(arguments, "challenge")
        private_key = load_private_key(key_path=config.private_key_path)
        return ProofResult(sign_challenge(private_key, challenge)).to_dict()

    def _submit_proof(self, config: CredentialConfig, arguments: Mapping[str, Any]) -> dict[str, Any]:
        challenge = _require_string(arguments, "challenge")
        proof = _require_string(arguments, "proof")
        with self._client_factory() as client:
            result = client.submit_proof(config, challenge, proof)
        return result.to_dict()
