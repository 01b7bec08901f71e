"""Author information resolution utilities."""

import os
from dataclasses import dataclass
from typing import Final

# Identity used when neither configuration nor environment provides one
DEFAULT_AUTHOR_NAME: Final = "gitjsondb"
DEFAULT_AUTHOR_EMAIL: Final = "gitjsondb@localhost"


@dataclass(slots=True, frozen=True)
class AuthorInfo:
    """Resolved author information.

    Attributes:
        name: Author name, or None if not found.
        email: Author email, or None if not found.
    """

    name: str | None
    email: str | None

    def format_signature(self) -> bytes:
        """Format the identity as a git signature line.

        Missing parts fall back to the gitjsondb defaults.

        Returns:
            Author identity as bytes in "Name <email>" format.
        """
        name = self.name or DEFAULT_AUTHOR_NAME
        email = self.email or DEFAULT_AUTHOR_EMAIL
        return f"{name} <{email}>".encode()


def get_author_info() -> AuthorInfo:
    """Resolve author info from environment variables.

    Reads GITJSONDB_AUTHOR_NAME and GITJSONDB_AUTHOR_EMAIL.

    Returns:
        AuthorInfo with resolved name and email (either may be None).
    """
    name = os.environ.get("GITJSONDB_AUTHOR_NAME") or None
    email = os.environ.get("GITJSONDB_AUTHOR_EMAIL") or None

    return AuthorInfo(name=name, email=email)
