"""
Exception types raised by paths, the sandbox guard and file handles.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover - hints only
    from .paths import Path


class MalformedPathError(ValueError):
    """Raised when a string or component list cannot denote the requested kind of path."""


def describe_location(path: Path) -> str:
    """Render ``path`` with its base, e.g. ``"dir/file in /home/user"``."""

    base = path.base
    return path.string if base is None else f"{path.string} in {base.string}"


def describe_kind(path: Path) -> str:
    return {"directory": "Directory ", "file": "File "}.get(path.kind.value, "")


class FileSystemError(Exception):
    """Base class for failures of file system operations on a path."""

    def __init__(self, path: Path, detail: Optional[str] = None) -> None:
        self.path = path
        self.detail = detail or self.describe()
        super().__init__(self.detail)

    def describe(self) -> str:
        return f"{describe_location(self.path)} could not be used."


class AlreadyExistsError(FileSystemError):
    """Raised when creating an item that already exists."""

    def describe(self) -> str:
        return f"{describe_location(self.path)} already exists."


class NotFoundError(FileSystemError):
    """Raised when an item does not exist."""

    def describe(self) -> str:
        return f"{describe_kind(self.path)}{describe_location(self.path)} does not exist."


class IsDirectoryError(FileSystemError):
    """Raised when a file was expected but a directory was found."""

    def describe(self) -> str:
        return f"{describe_location(self.path)} is a directory. Expected a file."


class NotDirectoryError(FileSystemError):
    """Raised when a directory was expected but something else was found."""

    def describe(self) -> str:
        return f"{describe_location(self.path)} is not a directory."


class InvalidAccessError(FileSystemError):
    """Raised when an existing item cannot be opened for reading or writing."""

    def __init__(self, path: Path, writing: bool = False) -> None:
        self.writing = writing
        super().__init__(path)

    def describe(self) -> str:
        suffix = " for writing." if self.writing else "."
        return f"Could not access {describe_location(self.path)}{suffix}"


class CouldNotCreateError(FileSystemError):
    """Raised when the OS refuses to create an item."""

    def describe(self) -> str:
        return f"Could not create {describe_kind(self.path)}in {describe_location(self.path)}."


class OutsideSandboxError(FileSystemError):
    """Raised when a change to the file system is attempted outside the working directory."""

    def __init__(self, path: Path, current_directory: str) -> None:
        self.current_directory = current_directory
        super().__init__(path)

    def describe(self) -> str:
        return (
            f"{self.path.absolute_string} is not in the current working directory "
            f"{self.current_directory}. Set the sandbox to false (TYPEDPATHS_SANDBOX=false, "
            "or PathContext.sandbox) to change the file system outside of it."
        )
