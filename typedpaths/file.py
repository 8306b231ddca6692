"""File handles: reading, editing, creating and linking files."""

from __future__ import annotations

import enum
import logging
import os
import shutil
from typing import IO, Iterator, Optional, Protocol, Type, TypeVar, Union

from .components import SEPARATOR, split_components
from .config import get_settings
from .context import PathContext, get_context
from .errors import (
    AlreadyExistsError,
    CouldNotCreateError,
    FileSystemError,
    InvalidAccessError,
    IsDirectoryError,
    NotFoundError,
)
from .paths import AnyPath, FilePath, Path, StringPath
from .sandbox import verify_is_in_sandbox
from .system import FileType, is_symbolic_link, read_link

logger = logging.getLogger(__name__)

_F = TypeVar("_F", bound="File")

CHUNK_SIZE = 64 * 1024


class IfExists(enum.Enum):
    """What to do when creating an item that already exists."""

    OPEN = "open"
    THROW_ERROR = "throw_error"
    REPLACE = "replace"


class TextSink(Protocol):
    def write(self, text: str) -> object: ...


def as_file_path(path: Union[StringPath, Path], context: Optional[PathContext] = None) -> FilePath:
    if isinstance(path, FilePath):
        return path
    return FilePath(path, context=context)


def error_for_file(path: FilePath, writing: bool) -> FileSystemError:
    """Explain why the file at ``path`` could not be opened."""

    file_type = FileType.of(path.absolute_string)
    if file_type is None:
        return NotFoundError(path)
    if file_type is FileType.DIRECTORY:
        return IsDirectoryError(path)
    return InvalidAccessError(path, writing=writing)


def existing_link_target(link: Path) -> AnyPath:
    """
    Where the symbolic link at ``link`` currently points.

    A relative target is taken relative to the directory containing the
    link, which is how the OS follows it.
    """
    target = read_link(link.absolute_string)
    if target.startswith(SEPARATOR):
        return AnyPath.from_components(split_components(target))
    return AnyPath.from_base(link.parent().components, split_components(target))


def remove_item(path: Path) -> None:
    """Delete a file, a symbolic link, or a directory with everything in it."""

    location = path.absolute_string
    if os.path.islink(location) or not os.path.isdir(location):
        os.remove(location)
    else:
        shutil.rmtree(location)


def create_file(path: FilePath, if_exists: IfExists, context: Optional[PathContext] = None) -> None:
    """
    Create an empty file, and any missing parent directories.

    Raises:
        IsDirectoryError: If there is a directory at ``path``.
        AlreadyExistsError: If the file exists and ``if_exists`` is ``THROW_ERROR``.
        OutsideSandboxError: If the file would be created outside the sandbox.
        CouldNotCreateError: If the OS refuses to create the file.
    """
    from .directory import WritableDirectory

    ctx = context or get_context()
    file_type = FileType.of(path.absolute_string)
    if file_type is not None:
        if file_type is FileType.DIRECTORY:
            raise IsDirectoryError(path)
        if if_exists is IfExists.THROW_ERROR:
            raise AlreadyExistsError(path)
        if if_exists is IfExists.OPEN:
            return
    else:
        verify_is_in_sandbox(path, context=ctx)
        WritableDirectory.create(path.parent(), IfExists.OPEN, context=ctx)

    verify_is_in_sandbox(path, context=ctx)
    try:
        with open(path.absolute_string, "w", encoding=get_settings().encoding):
            pass
    except OSError as exc:
        raise CouldNotCreateError(path) from exc
    logger.info("file_created", extra={"path": path.absolute_string, "operation": "create"})


class File:
    """A file opened for reading."""

    _mode = "r"
    _writing = False

    def __init__(self, path: FilePath, handle: IO[str], encoding: str) -> None:
        self.path = path
        self.encoding = encoding
        self._handle = handle

    @classmethod
    def _before_open(cls, path: FilePath, context: PathContext) -> None:
        """Hook for checks that must pass before the file is opened."""

    @classmethod
    def open(
        cls: Type[_F],
        path: Union[StringPath, Path],
        *,
        encoding: Optional[str] = None,
        context: Optional[PathContext] = None,
    ) -> _F:
        """
        Open an existing file.

        Raises:
            NotFoundError: If there is nothing at ``path``.
            IsDirectoryError: If ``path`` is a directory.
            InvalidAccessError: If the file cannot be opened.
        """
        ctx = context or get_context()
        filepath = as_file_path(path, ctx)
        cls._before_open(filepath, ctx)

        encoding = encoding or get_settings().encoding
        try:
            handle = open(filepath.absolute_string, cls._mode, encoding=encoding)
        except OSError as exc:
            raise error_for_file(filepath, cls._writing) from exc
        logger.debug("file_opened", extra={"path": filepath.absolute_string, "operation": cls._mode})
        return cls(filepath, handle, encoding)

    @classmethod
    def create(
        cls: Type[_F],
        path: Union[StringPath, Path],
        if_exists: IfExists,
        *,
        encoding: Optional[str] = None,
        context: Optional[PathContext] = None,
    ) -> _F:
        """Create a new file, then open it. See ``create_file``."""

        ctx = context or get_context()
        filepath = as_file_path(path, ctx)
        create_file(filepath, if_exists, ctx)
        return cls.open(filepath, encoding=encoding, context=ctx)

    @classmethod
    def create_symbolic_link(
        cls: Type[_F],
        link: Union[StringPath, Path],
        target: Union[File, FilePath],
        if_exists: IfExists,
        *,
        context: Optional[PathContext] = None,
    ) -> _F:
        """
        Create a symbolic link at ``link`` to the file ``target``, then open it.

        With ``IfExists.OPEN`` an existing link is opened only if it already
        points to ``target``.

        Raises:
            IsDirectoryError: If there is a directory at ``link``.
            AlreadyExistsError: If ``link`` exists and ``if_exists`` is ``THROW_ERROR``.
            InvalidAccessError: If ``link`` exists but does not point to ``target``.
            OutsideSandboxError: If ``link`` is outside the sandbox.
        """
        ctx = context or get_context()
        linkpath = as_file_path(link, ctx)
        targetpath = target.path if isinstance(target, File) else target

        if is_symbolic_link(linkpath.absolute_string) is not None:
            if FileType.of(linkpath.absolute_string) is FileType.DIRECTORY:
                raise IsDirectoryError(linkpath)
            if if_exists is IfExists.THROW_ERROR:
                raise AlreadyExistsError(linkpath)
            if if_exists is IfExists.OPEN:
                if not is_symbolic_link(linkpath.absolute_string):
                    raise InvalidAccessError(linkpath, writing=True)
                if existing_link_target(linkpath).components != targetpath.components:
                    raise InvalidAccessError(linkpath, writing=True)
                return cls.open(linkpath, context=ctx)
            verify_is_in_sandbox(linkpath, context=ctx)
            remove_item(linkpath)

        verify_is_in_sandbox(linkpath, context=ctx)
        os.symlink(targetpath.absolute_string, linkpath.absolute_string)
        logger.info(
            "symbolic_link_created",
            extra={"path": linkpath.absolute_string, "target": targetpath.absolute_string},
        )
        return cls.open(linkpath, context=ctx)

    def __enter__(self: _F) -> _F:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path.string!r})"

    @property
    def closed(self) -> bool:
        return self._handle.closed

    def close(self) -> None:
        self._handle.close()

    def read(self) -> str:
        """Read everything from the current position to the end of the file."""

        return self._handle.read()

    def read_some(self) -> Optional[str]:
        """Read the next chunk of text, or ``None`` at the end of the file."""

        chunk = self._handle.read(CHUNK_SIZE)
        return chunk or None

    def lines(self) -> Iterator[str]:
        """Lazily split the rest of the file into lines, without line endings."""

        for line in self._handle:
            yield line[:-1] if line.endswith("\n") else line

    def write_to(self, target: TextSink) -> None:
        """Write the rest of the text in this file to ``target``."""

        while True:
            text = self.read_some()
            if text is None:
                break
            target.write(text)


class EditableFile(File):
    """A file opened for reading and writing."""

    _mode = "r+"
    _writing = True

    @classmethod
    def _before_open(cls, path: FilePath, context: PathContext) -> None:
        verify_is_in_sandbox(path, context=context)

    @property
    def _is_regular_file(self) -> bool:
        return FileType.of(self.path.absolute_string) is FileType.REGULAR

    def write(self, text: str) -> None:
        """Append ``text`` to the end of the file. Nothing is overwritten."""

        if self._is_regular_file:
            self._handle.seek(0, os.SEEK_END)
        self._handle.write(text)
        self._handle.flush()

    def print(self, *items: object, sep: str = " ", end: str = "\n") -> None:
        """Append the ``str()`` of each item, like the built-in ``print``."""

        self.write(sep.join(str(item) for item in items) + end)

    def overwrite(self, text: str) -> None:
        """Replace the entire contents of the file with ``text``."""

        self._handle.seek(0)
        self._handle.write(text)
        self._handle.truncate()
        self._handle.flush()

    def delete(self, *, context: Optional[PathContext] = None) -> None:
        """Close and delete this file."""

        ctx = context or get_context()
        verify_is_in_sandbox(self.path, context=ctx)
        self.close()
        os.remove(self.path.absolute_string)
        logger.info("file_deleted", extra={"path": self.path.absolute_string, "operation": "delete"})
