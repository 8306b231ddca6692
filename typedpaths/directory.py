"""Directory handles: opening, listing, creating, linking and deleting directories."""

from __future__ import annotations

import glob
import logging
import os
import tempfile
from typing import List, Optional, Type, TypeVar, Union

from .components import SEPARATOR
from .config import get_settings
from .context import PathContext, get_context
from .errors import (
    AlreadyExistsError,
    InvalidAccessError,
    NotDirectoryError,
    NotFoundError,
)
from .file import EditableFile, File, IfExists, existing_link_target, remove_item
from .paths import AnyPath, DirectoryPath, FilePath, Path, PathKind, StringPath, path_detect_type
from .sandbox import verify_is_in_sandbox
from .system import FileType, is_readable, is_symbolic_link

logger = logging.getLogger(__name__)

_D = TypeVar("_D", bound="Directory")
_P = TypeVar("_P", bound=Path)


def as_directory_path(path: Union[StringPath, Path], context: Optional[PathContext] = None) -> DirectoryPath:
    if isinstance(path, DirectoryPath):
        return path
    return DirectoryPath(path, context=context)


class Directory:
    """A directory which existed in the local file system when it was opened."""

    def __init__(self, path: DirectoryPath) -> None:
        self.path = path

    @classmethod
    def open(cls: Type[_D], path: Union[StringPath, Path], *, context: Optional[PathContext] = None) -> _D:
        """
        Open an existing directory.

        Raises:
            NotFoundError: If there is nothing at ``path``.
            NotDirectoryError: If ``path`` is not a directory.
            InvalidAccessError: If the directory cannot be read.
        """
        dirpath = as_directory_path(path, context)
        location = dirpath.absolute_string

        file_type = FileType.of(location)
        if file_type is None:
            raise NotFoundError(dirpath)
        if file_type is not FileType.DIRECTORY:
            raise NotDirectoryError(dirpath)
        if not is_readable(location):
            raise InvalidAccessError(dirpath, writing=False)
        return cls(dirpath)

    @classmethod
    def current(cls: Type[_D], *, context: Optional[PathContext] = None) -> _D:
        return cls.open(DirectoryPath.current(context=context), context=context)

    @classmethod
    def home(cls: Type[_D], *, context: Optional[PathContext] = None) -> _D:
        return cls.open(DirectoryPath.home(context=context), context=context)

    @classmethod
    def root(cls: Type[_D]) -> _D:
        return cls.open(DirectoryPath.root())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path.string!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Directory):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def contains(self, stringpath: StringPath) -> bool:
        """Whether there is a file or directory at ``stringpath`` relative to this directory."""

        return FileType.of(self.path.absolute_string + SEPARATOR + os.fspath(stringpath)) is not None

    def verify_contains(self, stringpath: StringPath) -> None:
        """
        Raises:
            NotFoundError: If there is nothing at ``stringpath`` relative to this directory.
        """
        if not self.contains(stringpath):
            raise NotFoundError(AnyPath.based(self.path.absolute_string, stringpath))

    def open_file(self, stringpath: StringPath, *, context: Optional[PathContext] = None) -> File:
        """Open the file at ``stringpath``, relative to this directory, for reading."""

        return File.open(self.path.append_file(stringpath), context=context)

    def open_directory(self: _D, stringpath: StringPath, *, context: Optional[PathContext] = None) -> _D:
        return type(self).open(self.path.append_directory(stringpath), context=context)

    def files(self, pattern: str = "*", recursive: bool = False) -> List[FilePath]:
        """
        List the files under this directory matching ``pattern``.

        Args:
            pattern: A glob pattern, supporting wildcards ``*`` and ``?``. The
                default matches everything except hidden files.
            recursive: If true, search all subdirectories too.

        Returns:
            Sorted paths, with this directory as their base.
        """
        return self._filter(FilePath, pattern, recursive)

    def directories(self, pattern: str = "*", recursive: bool = False) -> List[DirectoryPath]:
        """List the directories under this directory matching ``pattern``. See ``files``."""

        return self._filter(DirectoryPath, pattern, recursive)

    def _filter(self, cls: Type[_P], pattern: str, recursive: bool) -> List[_P]:
        root = self.path.absolute_string
        folders = [root]
        if recursive:
            for top, names, _ in os.walk(root):
                folders.extend(
                    os.path.join(top, name) for name in names if not os.path.islink(os.path.join(top, name))
                )

        base = self.path.components
        found: List[_P] = []
        for folder in folders:
            for match in glob.glob(os.path.join(glob.escape(folder), pattern)):
                item = path_detect_type(match)
                if item is None or item.kind is not cls.kind:
                    continue
                found.append(cls.from_base(base, item.components[len(base) :]))
        return sorted(set(found))


class ReadableDirectory(Directory):
    """A directory opened for reading."""


class WritableDirectory(Directory):
    """A directory whose contents can be changed."""

    @classmethod
    def create(
        cls,
        path: Union[StringPath, Path],
        if_exists: IfExists,
        *,
        context: Optional[PathContext] = None,
    ) -> WritableDirectory:
        """
        Create a new directory, and any missing parent directories.

        Raises:
            NotDirectoryError: If something other than a directory is in the way.
            AlreadyExistsError: If the directory exists and ``if_exists`` is ``THROW_ERROR``.
            OutsideSandboxError: If the directory would be created outside the sandbox.
        """
        ctx = context or get_context()
        dirpath = as_directory_path(path, ctx)
        location = dirpath.absolute_string

        file_type = FileType.of(location)
        if file_type is not None:
            if file_type is not FileType.DIRECTORY:
                raise NotDirectoryError(dirpath)
            if if_exists is IfExists.THROW_ERROR:
                raise AlreadyExistsError(dirpath)
            if if_exists is IfExists.OPEN:
                return cls(dirpath)
            verify_is_in_sandbox(dirpath, context=ctx)
            remove_item(dirpath)

        verify_is_in_sandbox(dirpath, context=ctx)
        os.makedirs(location, exist_ok=True)
        logger.info("directory_created", extra={"path": location, "operation": "create"})
        return cls(dirpath)

    @classmethod
    def create_temp_directory(cls) -> WritableDirectory:
        """Create a new empty temporary directory, unique every time."""

        location = tempfile.mkdtemp(prefix=f"{get_settings().temp_prefix}-")
        logger.debug("temp_directory_created", extra={"path": location})
        return cls.open(DirectoryPath(location))

    @classmethod
    def create_symbolic_link(
        cls,
        link: Union[StringPath, Path],
        target: Union[Directory, DirectoryPath],
        if_exists: IfExists,
        *,
        context: Optional[PathContext] = None,
    ) -> WritableDirectory:
        """
        Create a symbolic link at ``link`` to the directory ``target``, then open it.

        With ``IfExists.OPEN`` an existing link is opened only if it already
        points to ``target``.

        Raises:
            NotDirectoryError: If something other than a directory is at ``link``.
            AlreadyExistsError: If ``link`` exists and ``if_exists`` is ``THROW_ERROR``.
            InvalidAccessError: If ``link`` exists but does not point to ``target``.
            OutsideSandboxError: If ``link`` is outside the sandbox.
        """
        ctx = context or get_context()
        linkpath = as_directory_path(link, ctx)
        targetpath = target.path if isinstance(target, Directory) else target
        location = linkpath.absolute_string

        if is_symbolic_link(location) is not None:
            if FileType.of(location) is not FileType.DIRECTORY:
                raise NotDirectoryError(linkpath)
            if if_exists is IfExists.THROW_ERROR:
                raise AlreadyExistsError(linkpath)
            if if_exists is IfExists.OPEN:
                if not is_symbolic_link(location):
                    raise InvalidAccessError(linkpath, writing=True)
                if existing_link_target(linkpath).components != targetpath.components:
                    raise InvalidAccessError(linkpath, writing=True)
                return cls.open(linkpath, context=ctx)
            verify_is_in_sandbox(linkpath, context=ctx)
            remove_item(linkpath)

        verify_is_in_sandbox(linkpath, context=ctx)
        os.symlink(targetpath.absolute_string, location, target_is_directory=True)
        logger.info("symbolic_link_created", extra={"path": location, "target": targetpath.absolute_string})
        return cls.open(linkpath, context=ctx)

    def edit_file(self, stringpath: StringPath, *, context: Optional[PathContext] = None) -> EditableFile:
        """Open the file at ``stringpath``, relative to this directory, for writing."""

        return EditableFile.open(self.path.append_file(stringpath), context=context)

    def create_file(
        self, stringpath: StringPath, if_exists: IfExists, *, context: Optional[PathContext] = None
    ) -> EditableFile:
        return EditableFile.create(self.path.append_file(stringpath), if_exists, context=context)

    def create_directory(
        self, stringpath: StringPath, if_exists: IfExists, *, context: Optional[PathContext] = None
    ) -> WritableDirectory:
        return WritableDirectory.create(self.path.append_directory(stringpath), if_exists, context=context)

    def create_link(
        self,
        stringpath: StringPath,
        target: Union[Directory, File, Path],
        if_exists: IfExists,
        *,
        context: Optional[PathContext] = None,
    ) -> Union[WritableDirectory, EditableFile]:
        """
        Create a symbolic link named ``stringpath`` in this directory, pointing to ``target``.

        An ``AnyPath`` target must exist, so the kind of link can be decided
        from what is there.

        Raises:
            NotFoundError: If ``target`` is an ``AnyPath`` to nothing.
        """
        targetpath = target.path if isinstance(target, (Directory, File)) else target
        if targetpath.kind is PathKind.ANY:
            file_type = FileType.of(targetpath.absolute_string)
            if file_type is None:
                raise NotFoundError(targetpath)
            targetpath = DirectoryPath(targetpath) if file_type is FileType.DIRECTORY else FilePath(targetpath)

        if isinstance(targetpath, DirectoryPath):
            return WritableDirectory.create_symbolic_link(
                self.path.append_directory(stringpath), targetpath, if_exists, context=context
            )
        return EditableFile.create_symbolic_link(
            self.path.append_file(stringpath), FilePath(targetpath), if_exists, context=context
        )

    def delete(self, *, context: Optional[PathContext] = None) -> None:
        """Delete this directory and everything in it."""

        ctx = context or get_context()
        verify_is_in_sandbox(self.path, context=ctx)
        remove_item(self.path)
        logger.info("directory_deleted", extra={"path": self.path.absolute_string, "operation": "delete"})
