"""Unit tests for SSH credentials."""

import io

import paramiko
import pytest
from dulwich.contrib.paramiko_vendor import ParamikoSSHVendor

from gitjsondb.exceptions import CredentialError
from gitjsondb.sync import SSHCredential


def _pem(key: paramiko.PKey, password: str | None = None) -> bytes:
    buffer = io.StringIO()
    key.write_private_key(buffer, password=password)
    return buffer.getvalue().encode()


class TestSSHCredential:
    def test_parses_rsa_key(self, rsa_key: paramiko.RSAKey) -> None:
        credential = SSHCredential.from_private_key("git", _pem(rsa_key))

        assert credential.username == "git"
        assert credential.pkey.get_fingerprint() == rsa_key.get_fingerprint()

    def test_parses_encrypted_key(self, rsa_key: paramiko.RSAKey) -> None:
        credential = SSHCredential.from_private_key(
            "git", _pem(rsa_key, password="pw"), passphrase="pw"
        )

        assert credential.pkey.get_fingerprint() == rsa_key.get_fingerprint()

    def test_wrong_passphrase_raises(self, rsa_key: paramiko.RSAKey) -> None:
        with pytest.raises(CredentialError):
            _ = SSHCredential.from_private_key(
                "git", _pem(rsa_key, password="pw"), passphrase="wrong"
            )

    def test_garbage_raises(self) -> None:
        with pytest.raises(CredentialError, match="Unable to load private key"):
            _ = SSHCredential.from_private_key("git", b"not a key")

    def test_binary_raises(self) -> None:
        with pytest.raises(CredentialError, match="not a text key file"):
            _ = SSHCredential.from_private_key("git", b"\xff\xfe\x00")

    def test_credential_error_is_value_error(self) -> None:
        with pytest.raises(ValueError, match="Unable to load"):
            _ = SSHCredential.from_private_key("git", b"")

    def test_vendor_authenticates_with_key(self, rsa_key: paramiko.RSAKey) -> None:
        credential = SSHCredential(username="git", pkey=rsa_key)

        vendor = credential.vendor()

        assert isinstance(vendor, ParamikoSSHVendor)
        assert vendor.kwargs == {"username": "git", "pkey": rsa_key}
