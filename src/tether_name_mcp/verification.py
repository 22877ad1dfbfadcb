"""
One-call identity verification: request, sign, submit.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from .client import ChallengeClient, VerificationResult
from .config import CredentialConfig
from .crypto import load_private_key, sign_challenge

logger = logging.getLogger(__name__)


class Verifier:
    """
    Composes the challenge client and signer into a single ``verify()``.

    Errors from any step propagate unchanged; a failed step stops the
    sequence, so nothing is signed or submitted after a failed challenge
    request.
    """

    def __init__(
        self,
        client: ChallengeClient,
        key_loader: Callable[..., RSAPrivateKey] = load_private_key,
        signer: Callable[[RSAPrivateKey, str], str] = sign_challenge,
    ) -> None:
        self.client = client
        self._load_key = key_loader
        self._sign = signer

    def verify(self, config: CredentialConfig) -> VerificationResult:
        """
        Perform complete verification in one call.

        Returns:
            VerificationResult: The verification result

        Raises:
            ConfigError: If the credential is not configured
            TetherKeyError: If the key cannot be loaded or used
            NetworkError: If the API cannot be reached
            ServiceError: If any API request fails
        """
        config.require()

        challenge = self.client.request_challenge(config)
        private_key = self._load_key(key_path=config.private_key_path)
        proof = self._sign(private_key, challenge)
        result = self.client.submit_proof(config, challenge, proof)

        logger.info(
            "Verification for credential %s finished: verified=%s",
            config.credential_id, result.verified
        )
        return result


def verify(
    config: CredentialConfig, client: Optional[ChallengeClient] = None
) -> VerificationResult:
    """Verify ``config``'s credential, creating a short-lived client if none is given."""
    if client is not None:
        return Verifier(client).verify(config)
    with ChallengeClient() as owned:
        return Verifier(owned).verify(config)
