"""Document handles.

Classes:
    Document: Base class with path addressing and the write boundary.
    Object: Single-record document.
    Collection: Array-shaped document with write-time transforms.
"""

from gitjsondb.store._collection import Collection
from gitjsondb.store._document import Document
from gitjsondb.store._object import Object

__all__ = ["Collection", "Document", "Object"]
