"""Shared utilities for gitjsondb."""

from gitjsondb.utils._author import (
    DEFAULT_AUTHOR_EMAIL,
    DEFAULT_AUTHOR_NAME,
    AuthorInfo,
    get_author_info,
)
from gitjsondb.utils._logging import LogFormatType, create_logger

__all__ = [
    "DEFAULT_AUTHOR_EMAIL",
    "DEFAULT_AUTHOR_NAME",
    "AuthorInfo",
    "LogFormatType",
    "create_logger",
    "get_author_info",
]
