"""gitjsondb: a JSON document database stored in a git repository."""

from gitjsondb.codec import OMIT, Marshaler, Transform
from gitjsondb.config import DatabaseConfiguration
from gitjsondb.store import Collection, Object
from gitjsondb.sync import CommitResult, Database, DulwichBackend, VcsBackend
from gitjsondb.utils import create_logger

__all__ = [
    "OMIT",
    "Collection",
    "CommitResult",
    "Database",
    "DatabaseConfiguration",
    "DulwichBackend",
    "Marshaler",
    "Object",
    "Transform",
    "VcsBackend",
    "create_logger",
]
