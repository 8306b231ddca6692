"""Operating system queries used by paths, the sandbox guard and handles."""

from __future__ import annotations

import enum
import os
import stat
from typing import Optional


class FileType(enum.Enum):
    """The type of an item in the local file system."""

    REGULAR = "regular"
    DIRECTORY = "directory"
    CHARACTER_SPECIAL = "character_special"
    BLOCK_SPECIAL = "block_special"
    SOCKET = "socket"
    FIFO = "fifo"
    UNKNOWN = "unknown"

    @classmethod
    def from_mode(cls, mode: int) -> FileType:
        if stat.S_ISREG(mode):
            return cls.REGULAR
        if stat.S_ISDIR(mode):
            return cls.DIRECTORY
        if stat.S_ISCHR(mode):
            return cls.CHARACTER_SPECIAL
        if stat.S_ISBLK(mode):
            return cls.BLOCK_SPECIAL
        if stat.S_ISSOCK(mode):
            return cls.SOCKET
        if stat.S_ISFIFO(mode):
            return cls.FIFO
        return cls.UNKNOWN

    @classmethod
    def of(cls, path: str | os.PathLike[str]) -> Optional[FileType]:
        """
        Return the type of the item at ``path``.

        Symbolic links are followed, so the result is never a link. Returns
        ``None`` if nothing exists there, or the link target is missing.
        """
        try:
            info = os.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            return None
        return cls.from_mode(info.st_mode)


def is_symbolic_link(path: str | os.PathLike[str]) -> Optional[bool]:
    """Whether ``path`` is a symbolic link, or ``None`` if nothing is there."""

    try:
        info = os.lstat(path)
    except (FileNotFoundError, NotADirectoryError):
        return None
    return stat.S_ISLNK(info.st_mode)


def current_directory() -> str:
    return os.getcwd()


def change_directory(path: str | os.PathLike[str]) -> None:
    os.chdir(path)


def home_directory() -> str:
    return os.path.expanduser("~")


def resolve_symlinks(path: str | os.PathLike[str]) -> str:
    """Resolve every symbolic link in ``path``; missing parts are kept as they are."""

    return os.path.realpath(path, strict=False)


def read_link(path: str | os.PathLike[str]) -> str:
    return os.readlink(path)


def is_readable(path: str | os.PathLike[str]) -> bool:
    return os.access(path, os.R_OK)
