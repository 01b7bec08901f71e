"""SSH credentials for remote transport."""

import io
from dataclasses import dataclass
from typing import Final, Self

import paramiko
from dulwich.contrib.paramiko_vendor import ParamikoSSHVendor

from gitjsondb.exceptions import CredentialError

# Key types tried in order when parsing a PEM/OpenSSH private key
_KEY_CLASSES: Final = (paramiko.Ed25519Key, paramiko.ECDSAKey, paramiko.RSAKey)


@dataclass(frozen=True, slots=True)
class SSHCredential:
    """An SSH keypair used to authenticate clone, fetch and push.

    Host keys are not verified: the paramiko vendor accepts any host key.

    Attributes:
        username: SSH user name, used when the remote URL names none.
        pkey: The parsed private key.
    """

    username: str
    pkey: paramiko.PKey

    @classmethod
    def from_private_key(
        cls, username: str, private_key: bytes, passphrase: str | None = None
    ) -> Self:
        """Parse a private key into a credential.

        Args:
            username: SSH user name.
            private_key: Private key file contents (PEM or OpenSSH format).
            passphrase: Passphrase for an encrypted key.

        Returns:
            The credential.

        Raises:
            CredentialError: If the key cannot be parsed with any supported
                key type or the passphrase is wrong.
        """
        try:
            text = private_key.decode("ascii")
        except UnicodeDecodeError as e:
            msg = "Private key is not a text key file"
            raise CredentialError(msg) from e

        errors: list[str] = []
        for key_class in _KEY_CLASSES:
            try:
                pkey = key_class.from_private_key(
                    io.StringIO(text), password=passphrase or None
                )
            except (paramiko.SSHException, ValueError) as e:
                errors.append(f"{key_class.__name__}: {e}")
                continue
            return cls(username=username, pkey=pkey)

        msg = f"Unable to load private key ({'; '.join(errors)})"
        raise CredentialError(msg)

    def vendor(self) -> ParamikoSSHVendor:
        """Build a dulwich SSH vendor that authenticates with this key.

        Returns:
            A vendor to assign to an SSH client.
        """
        return ParamikoSSHVendor(username=self.username, pkey=self.pkey)
