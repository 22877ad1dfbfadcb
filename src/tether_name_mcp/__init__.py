"""
Tether.name MCP server - agent identity verification tools for MCP runtimes.

Exposes five tools (``verify_identity``, ``request_challenge``,
``sign_challenge``, ``submit_proof``, ``get_credential_info``) backed by a
local RSA key and the tether.name challenge API. Configure it with
TETHER_CREDENTIAL_ID and TETHER_PRIVATE_KEY_PATH.

Example:
    >>> from tether_name_mcp import ToolShell
    >>> shell = ToolShell()
    >>> response = shell.call_tool("get_credential_info")
    >>> print(response.text)
"""

from .client import ChallengeClient, VerificationResult
from .config import CredentialConfig, DEFAULT_BASE_URL
from .crypto import load_private_key, sign_challenge, generate_test_keypair
from .exceptions import (
    TetherError,
    ConfigError,
    TetherKeyError,
    KeyNotFoundError,
    KeyFormatError,
    SigningError,
    NetworkError,
    ServiceError,
    InvalidArgumentsError,
)
from .tools import (
    TOOLS,
    ChallengeResult,
    CredentialInfo,
    ProofResult,
    ToolResponse,
    ToolShell,
    ToolSpec,
)
from .transport import HttpTransport, RetryingTransport
from .verification import Verifier, verify

__version__ = "1.0.2"
__homepage__ = "https://tether.name"

__all__ = [
    # Configuration
    "CredentialConfig",
    "DEFAULT_BASE_URL",

    # Core
    "ChallengeClient",
    "VerificationResult",
    "Verifier",
    "verify",
    "HttpTransport",
    "RetryingTransport",

    # Crypto functions
    "load_private_key",
    "sign_challenge",
    "generate_test_keypair",

    # Tool shell
    "ToolShell",
    "ToolSpec",
    "ToolResponse",
    "ChallengeResult",
    "ProofResult",
    "CredentialInfo",
    "TOOLS",

    # Exceptions
    "TetherError",
    "ConfigError",
    "TetherKeyError",
    "KeyNotFoundError",
    "KeyFormatError",
    "SigningError",
    "NetworkError",
    "ServiceError",
    "InvalidArgumentsError",

    # Metadata
    "__version__",
    "__homepage__",
]
