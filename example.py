#!/usr/bin/env python3
"""
Example usage of the Tether.name MCP tool shell.

This demonstrates the tools without hitting the live service.
"""

import tempfile
from pathlib import Path

from cryptography.hazmat.primitives import serialization

from tether_name_mcp import ToolShell, generate_test_keypair


def main():
    print("Tether.name MCP tools example")
    print("=" * 40)

    print("\n1. Generating test RSA-2048 keypair...")
    private_key, _ = generate_test_keypair()

    with tempfile.NamedTemporaryFile(mode='wb', suffix='.der', delete=False) as f:
        f.write(private_key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption()
        ))
        temp_key_path = f.name
    print(f"   Saved key to: {temp_key_path}")

    print("\n2. Unconfigured shell...")
    shell = ToolShell(environ={})
    print(shell.get_credential_info().text)
    response = shell.verify_identity()
    print(f"   isError={response.is_error}: {response.text}")

    print("\n3. Configured shell, offline signing...")
    shell = ToolShell(environ={
        "TETHER_CREDENTIAL_ID": "test-credential-id",
        "TETHER_PRIVATE_KEY_PATH": temp_key_path,
    })
    print(shell.get_credential_info().text)
    print(shell.sign_challenge("example-challenge-uuid-12345").text)

    Path(temp_key_path).unlink()

    print("\nTo verify with real tether.name credentials:")
    print("   1. Register at https://tether.name")
    print("   2. Download your private key")
    print("   3. Set TETHER_CREDENTIAL_ID and TETHER_PRIVATE_KEY_PATH")
    print("   4. Run `tether-name-mcp` from your MCP client configuration")


if __name__ == "__main__":
    main()
