# ruff: noqa: TC003  # Path needed at runtime for pydantic field types
"""Database configuration model.

This module provides the DatabaseConfiguration Pydantic model holding the
connection and identity settings of a repository handle.
"""

from pathlib import Path
from typing import ClassVar, Final, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gitjsondb.utils._author import AuthorInfo, get_author_info

DEFAULT_REMOTE_NAME: Final = "origin"
DEFAULT_BRANCH_NAME: Final = "master"


class DatabaseConfiguration(BaseModel):
    """Repository handle configuration.

    Empty remote and branch names are resolved to their defaults when the
    model is validated, so they are never stored empty.

    Attributes:
        remote: URL or path of the remote repository.
        local: Path of the local working tree.
        remote_name: Name the remote is registered under.
        branch_name: Branch that is fetched, reset to and pushed.
        author_name: Commit author name.
        author_email: Commit author email.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    remote: str = Field(description="URL or path of the remote repository.")
    local: Path = Field(description="Path of the local working tree.")
    remote_name: str = Field(
        default=DEFAULT_REMOTE_NAME,
        description="Name the remote is registered under.",
    )
    branch_name: str = Field(
        default=DEFAULT_BRANCH_NAME,
        description="Branch that is fetched, reset to and pushed.",
    )
    author_name: str | None = Field(default=None, description="Commit author name.")
    author_email: str | None = Field(default=None, description="Commit author email.")

    @field_validator("remote_name", mode="before")
    @classmethod
    def _default_remote_name(cls, value: str | None) -> str:
        return value or DEFAULT_REMOTE_NAME

    @field_validator("branch_name", mode="before")
    @classmethod
    def _default_branch_name(cls, value: str | None) -> str:
        return value or DEFAULT_BRANCH_NAME

    @classmethod
    def from_env(cls, remote: str, local: Path | str) -> Self:
        """Build a configuration with the author identity taken from the environment.

        Args:
            remote: URL or path of the remote repository.
            local: Path of the local working tree.

        Returns:
            A validated configuration.
        """
        author = get_author_info()
        return cls(
            remote=remote,
            local=Path(local),
            author_name=author.name,
            author_email=author.email,
        )

    def replace(self, **changes: object) -> Self:
        """Return a validated copy with the given fields changed.

        Unlike ``model_copy(update=...)`` the result is validated, so empty
        remote and branch names are defaulted here too.

        Args:
            **changes: Field values to override.

        Returns:
            A new configuration instance.
        """
        return self.model_validate(self.model_dump() | changes)

    @property
    def author(self) -> AuthorInfo:
        """Commit author identity."""
        return AuthorInfo(name=self.author_name, email=self.author_email)
