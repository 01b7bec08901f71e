"""Configuration for gitjsondb repository handles."""

from gitjsondb.config._models import (
    DEFAULT_BRANCH_NAME,
    DEFAULT_REMOTE_NAME,
    DatabaseConfiguration,
)

__all__ = [
    "DEFAULT_BRANCH_NAME",
    "DEFAULT_REMOTE_NAME",
    "DatabaseConfiguration",
]
