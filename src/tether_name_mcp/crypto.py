"""
Key loading and challenge signing for the Tether.name MCP server.
"""

import base64
import logging
from pathlib import Path
from typing import Union

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from .exceptions import KeyFormatError, KeyNotFoundError, SigningError, TetherKeyError

logger = logging.getLogger(__name__)

PEM_MARKER = b"-----BEGIN"
REQUIRED_KEY_SIZE = 2048


def _parse_key_bytes(key_data: bytes) -> RSAPrivateKey:
    if PEM_MARKER in key_data:
        private_key = serialization.load_pem_private_key(key_data, password=None)
    else:
        private_key = serialization.load_der_private_key(key_data, password=None)

    if not isinstance(private_key, RSAPrivateKey):
        raise KeyFormatError("Private key must be an RSA key")
    return private_key


def load_private_key(
    key_path: Union[str, Path, None] = None,
    key_pem: Union[str, bytes, None] = None,
    key_der: Union[bytes, None] = None,
) -> RSAPrivateKey:
    """
    Load an RSA private key from file path, PEM string/bytes, or DER bytes.

    Files are sniffed: content containing a ``-----BEGIN`` armor line is
    parsed as PEM, anything else as DER.

    Args:
        key_path: Path to the private key file (PEM or DER format)
        key_pem: PEM-formatted private key as string or bytes
        key_der: DER-formatted private key as bytes

    Returns:
        RSAPrivateKey: The loaded private key

    Raises:
        KeyNotFoundError: If ``key_path`` does not exist
        KeyFormatError: If the bytes are not a valid RSA private key
    """
    if sum(x is not None for x in [key_path, key_pem, key_der]) != 1:
        raise TetherKeyError(
            "Exactly one of key_path, key_pem, or key_der must be provided"
        )

    if key_path is not None:
        key_path = Path(key_path)
        if not key_path.is_file():
            raise KeyNotFoundError(str(key_path))
        try:
            key_data = key_path.read_bytes()
        except OSError as e:
            raise KeyNotFoundError(str(key_path)) from e
    elif key_pem is not None:
        key_data = key_pem.encode("utf-8") if isinstance(key_pem, str) else key_pem
        if PEM_MARKER not in key_data:
            raise KeyFormatError("Failed to load private key: not PEM data")
    else:
        key_data = key_der

    try:
        private_key = _parse_key_bytes(key_data)
    except KeyFormatError:
        raise
    except Exception as e:
        # ValueError for bad bytes, UnsupportedAlgorithm for unknown key types
        raise KeyFormatError(f"Failed to load private key: {e}") from e

    if key_path is not None:
        logger.debug("Loaded %d-bit RSA key from %s", private_key.key_size, key_path)
    return private_key


def sign_challenge(private_key: RSAPrivateKey, challenge: str) -> str:
    """
    Sign a challenge string with the private key using SHA256withRSA.

    PKCS#1 v1.5 padding is deterministic, so the same key and challenge
    always produce the same proof.

    Args:
        private_key: The RSA private key to sign with
        challenge: The challenge string to sign (must be non-empty)

    Returns:
        str: Base64-encoded signature (URL-safe, no padding)

    Raises:
        SigningError: If the challenge is empty or the key is unusable
    """
    if not isinstance(challenge, str) or not challenge:
        raise SigningError("Challenge must be a non-empty string")
    if not isinstance(private_key, RSAPrivateKey):
        raise SigningError("Private key must be an RSA key")
    if private_key.key_size != REQUIRED_KEY_SIZE:
        raise SigningError(
            f"Private key must be {REQUIRED_KEY_SIZE} bits, got {private_key.key_size} bits"
        )

    try:
        signature = private_key.sign(
            challenge.encode("utf-8"),
            padding.PKCS1v15(),
            hashes.SHA256()
        )
    except Exception as e:
        raise SigningError(f"Failed to sign challenge: {e}") from e

    return base64.urlsafe_b64encode(signature).decode("ascii").rstrip("=")


def generate_test_keypair(key_size: int = REQUIRED_KEY_SIZE) -> tuple[RSAPrivateKey, str]:
    """
    Generate a test RSA keypair for testing purposes.

    Returns:
        tuple: (private_key, public_key_pem)
    """
    private_key = rsa.generate_private_key(
        public_exponent=65537,
        key_size=key_size
    )

    public_key_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    ).decode("utf-8")

    return private_key, public_key_pem
