"""Synchronization engine.

Classes:
    Database: Repository handle owning the init/update/commit/push lifecycle.
    DulwichBackend: Default VcsBackend on top of dulwich.
    VcsBackend: Protocol of the git primitives Database consumes.
    SSHCredential: SSH key used for remote transport.
    CommitResult: Result of Database.commit.
"""

from gitjsondb.sync._backend import DulwichBackend
from gitjsondb.sync._credential import SSHCredential
from gitjsondb.sync._database import DEFAULT_COMMIT_MESSAGE, Database
from gitjsondb.sync._models import CommitResult
from gitjsondb.sync._protocol import VcsBackend

__all__ = [
    "DEFAULT_COMMIT_MESSAGE",
    "CommitResult",
    "Database",
    "DulwichBackend",
    "SSHCredential",
    "VcsBackend",
]
