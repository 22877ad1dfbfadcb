"""Shared fixtures for the Tether.name MCP server tests."""

import json

import httpx
import pytest
from cryptography.hazmat.primitives import serialization

from tether_name_mcp.config import CredentialConfig
from tether_name_mcp.crypto import generate_test_keypair


@pytest.fixture(scope="session")
def keypair():
    """A 2048-bit RSA key pair, generated once per test session."""
    return generate_test_keypair()


@pytest.fixture
def private_key(keypair):
    return keypair[0]


@pytest.fixture
def pem_key_file(tmp_path, private_key):
    """Private key written to disk as PKCS8 PEM."""
    key_file = tmp_path / "test-key.pem"
    key_file.write_bytes(private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ))
    return key_file


@pytest.fixture
def der_key_file(tmp_path, private_key):
    """Private key written to disk as PKCS8 DER."""
    key_file = tmp_path / "test-key.der"
    key_file.write_bytes(private_key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ))
    return key_file


@pytest.fixture
def config(der_key_file):
    return CredentialConfig(
        credential_id="test-credential-id",
        private_key_path=str(der_key_file),
    )


def mock_response(data, status_code=200):
    """Create a real httpx.Response carrying a JSON body."""
    return httpx.Response(
        status_code=status_code,
        content=json.dumps(data).encode(),
        headers={"content-type": "application/json"},
        request=httpx.Request("POST", "http://test"),
    )
