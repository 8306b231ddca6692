"""Typed, immutable paths to items which may or may not exist in the local file system."""

from __future__ import annotations

import enum
import functools
import os
from typing import TYPE_CHECKING, ClassVar, Iterable, Optional, Sequence, Tuple, Type, TypeVar, Union
from urllib.parse import quote, unquote, urlsplit

from .components import (
    PARENT,
    SEPARATOR,
    first_difference,
    fix_dot_dots,
    normalize,
    parse_components,
    split_components,
)
from .context import PathContext, get_context
from .errors import MalformedPathError
from .system import FileType

if TYPE_CHECKING:  # pragma: no cover - hints only
    from .directory import ReadableDirectory, WritableDirectory
    from .file import EditableFile, File, IfExists

_P = TypeVar("_P", bound="Path")

StringPath = Union[str, "os.PathLike[str]"]


class PathKind(enum.Enum):
    """What a path is allowed to point to."""

    DIRECTORY = "directory"
    FILE = "file"
    ANY = "any"


@functools.total_ordering
class Path:
    """
    The location of an item in the local file system.

    A path is either purely absolute, or remembers that it was built as a
    base directory plus a relative part. ``components`` always gives the
    absolute form, from (but not including) the root directory.

    Use the subclasses: ``DirectoryPath``, ``FilePath`` or ``AnyPath``.
    """

    __slots__ = ("_components", "_relative_start")

    kind: ClassVar[PathKind] = PathKind.ANY

    _components: Tuple[str, ...]
    _relative_start: Optional[int]

    def __init__(self, stringpath: Union[StringPath, Path] = ".", *, context: Optional[PathContext] = None) -> None:
        """
        Create a path from a string, or convert a path of another kind.

        A string beginning with ``/`` is absolute, one beginning with ``~`` is
        in the home directory, anything else is relative to the current
        working directory at the time of the call.

        Raises:
            MalformedPathError: If a file path is created from a string ending in ``/``.
        """
        if isinstance(stringpath, Path):
            self._assign(stringpath._components, stringpath._relative_start)
            return

        text = os.fspath(stringpath)
        if self.kind is PathKind.FILE and text.endswith(SEPARATOR):
            raise MalformedPathError(
                f"Trying to create a FilePath from {text!r} (ending in {SEPARATOR!r}). "
                "If this is a directory, use DirectoryPath instead. If it is a file, remove the "
                f"trailing {SEPARATOR!r}. If it is unknown, use AnyPath."
            )

        ctx = context or get_context()
        components, is_relative = parse_components(text, ctx.home_directory())
        if is_relative:
            base = normalize(split_components(ctx.current_directory()))
            self._assign(tuple(base + components), len(base))
        else:
            self._assign(tuple(components), None)

    def _assign(self, components: Tuple[str, ...], relative_start: Optional[int]) -> None:
        object.__setattr__(self, "_components", components)
        object.__setattr__(self, "_relative_start", relative_start)
        if self.kind is PathKind.FILE and not self.components:
            raise MalformedPathError("The root directory cannot be a file path. Use DirectoryPath instead.")

    @classmethod
    def _make(cls: Type[_P], components: Sequence[str], relative_start: Optional[int]) -> _P:
        path = object.__new__(cls)
        path._assign(tuple(components), relative_start)
        return path

    @classmethod
    def from_components(cls: Type[_P], components: Iterable[str]) -> _P:
        """Create an absolute path from the names of the directories in it, ending with the item name."""

        if isinstance(components, str):
            raise TypeError("Expected a sequence of path components, not a string")
        return cls._make(normalize(components), None)

    @classmethod
    def from_base(cls: Type[_P], base: Iterable[str], relative: Iterable[str]) -> _P:
        """
        Create a path relative to a base directory.

        Both parts are normalized separately, so ``..`` at the start of
        ``relative`` is only resolved against ``base`` by ``components``.
        """
        if isinstance(base, str) or isinstance(relative, str):
            raise TypeError("Expected sequences of path components, not strings")
        base_components = normalize(base)
        return cls._make(base_components + normalize(relative), len(base_components))

    @classmethod
    def based(cls: Type[_P], base: StringPath, relative: StringPath, *, context: Optional[PathContext] = None) -> _P:
        """
        Create a relative path from two strings.

        Args:
            base: The directory the path is relative to. If it does not begin
                with ``/`` it is taken relative to the current working directory.
            relative: The relative part. A leading ``/`` makes no difference.
        """
        relative_text = os.fspath(relative)
        if cls.kind is PathKind.FILE and relative_text.endswith(SEPARATOR):
            raise MalformedPathError(f"File path {relative_text!r} cannot end in {SEPARATOR!r}")
        base_path = DirectoryPath(base, context=context)
        return cls.from_base(base_path.components, split_components(relative_text))

    @classmethod
    def from_url(cls: Type[_P], url: str) -> Optional[_P]:
        """
        Create a path from a ``file:`` URL.

        Returns ``None`` if the URL is not a local file URL, or if it does not
        fit this kind of path: directory URLs end in ``/``, file URLs do not.
        """
        parts = urlsplit(url)
        if parts.scheme != "file" or parts.netloc not in ("", "localhost"):
            return None
        if not parts.path.startswith(SEPARATOR):
            return None

        is_directory = parts.path.endswith(SEPARATOR)
        if cls.kind is PathKind.DIRECTORY and not is_directory:
            return None
        if cls.kind is PathKind.FILE and is_directory:
            return None
        try:
            return cls.from_components(split_components(unquote(parts.path)))
        except MalformedPathError:
            return None

    # Immutability

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable: cannot set '{name}'")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable: cannot delete '{name}'")

    def __reduce__(self):
        return (type(self)._make, (self._components, self._relative_start))

    # Components

    @property
    def components(self) -> Tuple[str, ...]:
        """
        The parts of the absolute version of this path.

        Any ``..`` not at the beginning has been resolved, also across the
        boundary between the base and the relative part.
        """
        start = self._relative_start
        if start is not None and start < len(self._components) and self._components[start] == PARENT:
            return tuple(fix_dot_dots(self._components))
        return self._components

    @property
    def relative_components(self) -> Optional[Tuple[str, ...]]:
        """The parts of the relative part of this path, if any. Present iff ``base_components`` is."""

        if self._relative_start is None:
            return None
        return self._components[self._relative_start :]

    @property
    def base_components(self) -> Optional[Tuple[str, ...]]:
        if self._relative_start is None:
            return None
        return self._components[: self._relative_start]

    # Strings

    @property
    def string(self) -> str:
        """The relative string if this path has a base, otherwise the absolute string."""

        relative = self.relative_string
        return relative if relative is not None else self.absolute_string

    @property
    def relative_string(self) -> Optional[str]:
        relative = self.relative_components
        if relative is None:
            return None
        return SEPARATOR.join(relative) or "."

    @property
    def absolute_string(self) -> str:
        return SEPARATOR + SEPARATOR.join(self.components)

    def __str__(self) -> str:
        return self.string

    def __repr__(self) -> str:
        name = type(self).__name__
        base = self.base
        if base is None:
            return f"{name}({self.absolute_string!r})"
        return f"{name}.based({base.absolute_string!r}, {self.relative_string!r})"

    def __fspath__(self) -> str:
        return self.absolute_string

    @property
    def url(self) -> str:
        """A ``file:`` URL for the absolute version of this path. Directory URLs end in ``/``."""

        path = self.absolute_string
        if self.kind is PathKind.DIRECTORY and not path.endswith(SEPARATOR):
            path += SEPARATOR
        return "file://" + quote(path)

    @property
    def relative_url(self) -> Optional[str]:
        """The relative part as a relative URL reference, or ``None`` if this path has no base."""

        relative = self.relative_string
        if relative is None:
            return None
        if self.kind is PathKind.DIRECTORY:
            relative += SEPARATOR
        return quote(relative)

    # Names

    @property
    def name(self) -> str:
        """The last component, or ``/`` for the root directory."""

        components = self.components
        return components[-1] if components else SEPARATOR

    @property
    def extension(self) -> Optional[str]:
        """The extension of the name (as in ``name.extension``)."""

        name = self.name
        lastdot = name.rfind(".")
        if lastdot <= 0 or lastdot == len(name) - 1:
            return None
        return name[lastdot + 1 :]

    @property
    def name_without_extension(self) -> str:
        name = self.name
        lastdot = name.rfind(".")
        return name[:lastdot] if lastdot > 0 else name

    # Derived paths

    @property
    def base(self) -> Optional[DirectoryPath]:
        """The base of this path if it is relative, otherwise ``None``."""

        base = self.base_components
        return None if base is None else DirectoryPath._make(base, None)

    @property
    def absolute(self: _P) -> _P:
        """This path without its base."""

        return type(self)._make(self.components, None)

    def parent(self, levels: int = 1) -> DirectoryPath:
        """
        Go up ``levels`` directories.

        Stays relative to the same base when only the relative part is
        shortened; going up into ``..`` gives an absolute path.
        """
        if levels <= 0:
            raise ValueError("Cannot go up less than one level of parent directories")

        relative = self.relative_components
        if relative is not None and levels <= len(relative) and relative[-levels] != PARENT:
            return DirectoryPath._make(self._components[: len(self._components) - levels], self._relative_start)

        components = self.components
        return DirectoryPath._make(components[: max(0, len(components) - levels)], None)

    def relative_to(self: _P, base: DirectoryPath) -> _P:
        """A path to the same item as this one, with ``base`` as its base."""

        components = self.components
        base_components = base.components
        index = first_difference(components, base_components)
        dotdots = [PARENT] * (len(base_components) - index)
        return type(self).from_base(base_components, dotdots + list(components[index:]))

    # File system

    def exists(self) -> bool:
        """
        Whether something exists at this path.

        Does not check if it is the right kind of item. A symbolic link to a
        missing item does not exist.
        """
        return FileType.of(self.absolute_string) is not None

    def resolving_symlinks(self: _P, *, context: Optional[PathContext] = None) -> _P:
        """
        A path to the same item where all symbolic links have been resolved.

        Components which do not exist are returned unchanged.
        """
        ctx = context or get_context()
        resolved = ctx.resolve_symlinks(self.absolute_string)
        return type(self).from_components(split_components(resolved))

    # Comparison

    def __eq__(self, other: object) -> bool:
        """
        Paths are equal when they are of the same kind and have the same shape.

        A path with a base never equals a purely absolute path, even when both
        point to the same item. Compare ``absolute`` versions for that.
        """
        if not isinstance(other, Path):
            return NotImplemented
        if self.kind is not other.kind:
            return False

        left, right = self.relative_components, other.relative_components
        if (left is None) != (right is None):
            return False
        if left is not None:
            return left == right and self.base_components == other.base_components
        return self.components == other.components

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def _sort_key(self) -> Tuple[str, Tuple[str, ...], bool, int]:
        start = self._relative_start
        return (self.kind.value, self._components, start is not None, start or 0)

    def __hash__(self) -> int:
        return hash((self.kind, self.string))


class AnyPath(Path):
    """The path to a file system item of unknown type."""

    __slots__ = ()

    kind = PathKind.ANY


class FilePath(Path):
    """The path to an item which is not a directory or a symbolic link to a directory."""

    __slots__ = ()

    kind = PathKind.FILE

    def open(self, *, context: Optional[PathContext] = None) -> File:
        """Open the file at this path for reading. See ``File.open``."""

        from .file import File

        return File.open(self, context=context)

    def edit(self, *, context: Optional[PathContext] = None) -> EditableFile:
        """Open the file at this path for reading and writing. See ``EditableFile.open``."""

        from .file import EditableFile

        return EditableFile.open(self, context=context)

    def create(self, if_exists: IfExists, *, context: Optional[PathContext] = None) -> EditableFile:
        """Create a file at this path and open it for editing. See ``create_file``."""

        from .file import EditableFile

        return EditableFile.create(self, if_exists, context=context)


class DirectoryPath(Path):
    """The path to a directory or a symbolic link to a directory."""

    __slots__ = ()

    kind = PathKind.DIRECTORY

    @classmethod
    def current(cls, *, context: Optional[PathContext] = None) -> DirectoryPath:
        """The current working directory, as an absolute path."""

        ctx = context or get_context()
        return cls(ctx.current_directory(), context=ctx)

    @classmethod
    def set_current(cls, path: Union[StringPath, DirectoryPath], *, context: Optional[PathContext] = None) -> None:
        ctx = context or get_context()
        target = path if isinstance(path, DirectoryPath) else cls(path, context=ctx)
        ctx.change_directory(target.absolute_string)

    @classmethod
    def home(cls, *, context: Optional[PathContext] = None) -> DirectoryPath:
        ctx = context or get_context()
        return cls(ctx.home_directory(), context=ctx)

    @classmethod
    def root(cls) -> DirectoryPath:
        return cls._make((), None)

    def open(self, *, context: Optional[PathContext] = None) -> ReadableDirectory:
        """Open the directory at this path. See ``Directory.open``."""

        from .directory import ReadableDirectory

        return ReadableDirectory.open(self, context=context)

    def create(self, if_exists: IfExists, *, context: Optional[PathContext] = None) -> WritableDirectory:
        """Create a directory at this path, and any missing parents. See ``WritableDirectory.create``."""

        from .directory import WritableDirectory

        return WritableDirectory.create(self, if_exists, context=context)

    def _append(self, cls: Type[_P], components: Sequence[str], relative: bool = False) -> _P:
        if relative:
            return cls.from_base(self.components, components)

        start = self._relative_start
        if start is not None:
            relative_components = self._components[start:] + tuple(components)
            return cls.from_base(self._components[:start], fix_dot_dots(relative_components))
        return cls.from_components(fix_dot_dots(self.components + tuple(components)))

    def append_file(self, stringpath: StringPath, relative: bool = False) -> FilePath:
        """
        Add a file path to the end of this directory path.

        Args:
            stringpath: The path to add. A leading ``/`` makes no difference.
            relative: If true, this directory becomes the base of the new path
                and ``stringpath`` its relative part. Otherwise the new path
                is relative only if this one is.

        Raises:
            MalformedPathError: If ``stringpath`` ends in ``/``.
        """
        text = os.fspath(stringpath)
        if text.endswith(SEPARATOR):
            raise MalformedPathError(f"File path {text!r} cannot end in {SEPARATOR!r}. Use append_directory instead.")
        return self._append(FilePath, normalize(split_components(text)), relative)

    def append_directory(self, stringpath: StringPath, relative: bool = False) -> DirectoryPath:
        """Add a directory path to the end of this directory path. See ``append_file``."""

        text = os.fspath(stringpath)
        return self._append(DirectoryPath, normalize(split_components(text)), relative)

    def __add__(self, other: _P) -> _P:
        """
        Place ``other`` under this directory.

        The result has the absolute form of this directory as its base, and
        the relative part of ``other`` (or all of it, if it is absolute) as
        its relative part. Any base ``other`` has is discarded.
        """
        if not isinstance(other, Path):
            return NotImplemented
        right = other.relative_components
        return type(other).from_base(self.components, right if right is not None else other.components)

    def is_a_parent_of(self, other: Path) -> bool:
        """Whether the absolute version of ``other`` lies under, but is not, this directory."""

        own = self.components
        theirs = other.components
        return len(theirs) != len(own) and theirs[: len(own)] == own


def path_detect_type(stringpath: StringPath, *, context: Optional[PathContext] = None) -> Optional[Path]:
    """
    Create a path of the right kind by looking at the string and the file system.

    A path ending in ``/`` is a directory. Otherwise the kind of the existing
    item decides, and ``None`` is returned if nothing exists there.
    """
    text = os.fspath(stringpath)
    if text.endswith(SEPARATOR):
        return DirectoryPath(text, context=context)

    path = AnyPath(text, context=context)
    file_type = FileType.of(path.absolute_string)
    if file_type is None:
        return None
    if file_type is FileType.DIRECTORY:
        return DirectoryPath(path)
    return FilePath(path)
