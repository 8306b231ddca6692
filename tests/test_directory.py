"""Directory handle tests."""

from __future__ import annotations

import os
from pathlib import Path as FsPath

import pytest

from typedpaths.context import PathContext, get_context
from typedpaths.directory import Directory, ReadableDirectory, WritableDirectory
from typedpaths.errors import (
    AlreadyExistsError,
    NotDirectoryError,
    NotFoundError,
    OutsideSandboxError,
)
from typedpaths.file import IfExists
from typedpaths.paths import DirectoryPath, FilePath


@pytest.fixture
def tree(workspace: FsPath) -> FsPath:
    """
    workspace/
        a.txt
        b.md
        .hidden
        dir1/
            c.txt
            dir2/
                d.txt
    """
    (workspace / "a.txt").write_text("a", encoding="utf-8")
    (workspace / "b.md").write_text("b", encoding="utf-8")
    (workspace / ".hidden").write_text("h", encoding="utf-8")
    (workspace / "dir1" / "dir2").mkdir(parents=True)
    (workspace / "dir1" / "c.txt").write_text("c", encoding="utf-8")
    (workspace / "dir1" / "dir2" / "d.txt").write_text("d", encoding="utf-8")
    return workspace


def test_open_existing_directory(workspace: FsPath) -> None:
    directory = ReadableDirectory.open(".")

    assert directory.path == DirectoryPath(".")
    assert isinstance(directory, ReadableDirectory)
    assert Directory.current().path.string == str(workspace)


def test_open_missing_directory() -> None:
    with pytest.raises(NotFoundError) as excinfo:
        Directory.open("missing")

    assert "does not exist" in str(excinfo.value)


def test_open_file_as_directory(workspace: FsPath) -> None:
    (workspace / "file.txt").write_text("x", encoding="utf-8")

    with pytest.raises(NotDirectoryError):
        Directory.open("file.txt")


def test_home_and_root(home: FsPath) -> None:
    assert Directory.home().path.string == str(home)
    assert Directory.root().path == DirectoryPath.root()


def test_directories_compare_by_path() -> None:
    assert Directory.open(".") == Directory.open(".")
    assert len({Directory.open("."), ReadableDirectory.open(".")}) == 1


def test_create_directory_with_parents(workspace: FsPath) -> None:
    directory = WritableDirectory.create("one/two/three", IfExists.THROW_ERROR)

    assert (workspace / "one" / "two" / "three").is_dir()
    assert directory.path.string == "one/two/three"


@pytest.mark.parametrize("if_exists", [IfExists.OPEN, IfExists.REPLACE, IfExists.THROW_ERROR])
def test_create_existing_directory(workspace: FsPath, if_exists: IfExists) -> None:
    (workspace / "dir").mkdir()
    (workspace / "dir" / "keep.txt").write_text("x", encoding="utf-8")

    if if_exists is IfExists.THROW_ERROR:
        with pytest.raises(AlreadyExistsError):
            WritableDirectory.create("dir", if_exists)
        return

    WritableDirectory.create("dir", if_exists)
    assert (workspace / "dir").is_dir()
    assert (workspace / "dir" / "keep.txt").exists() is (if_exists is IfExists.OPEN)


def test_create_directory_where_file_is(workspace: FsPath) -> None:
    (workspace / "file").write_text("x", encoding="utf-8")

    with pytest.raises(NotDirectoryError):
        WritableDirectory.create("file", IfExists.REPLACE)


def test_create_outside_sandbox(outside: FsPath) -> None:
    with pytest.raises(OutsideSandboxError):
        WritableDirectory.create(f"{outside}/new", IfExists.THROW_ERROR)
    assert not (outside / "new").exists()

    get_context().sandbox = False
    WritableDirectory.create(f"{outside}/new", IfExists.THROW_ERROR)
    assert (outside / "new").is_dir()


def test_sandbox_applies_to_working_directory(workspace: FsPath) -> None:
    with pytest.raises(OutsideSandboxError):
        WritableDirectory.create(".", IfExists.REPLACE)
    with pytest.raises(OutsideSandboxError):
        WritableDirectory.open(".").delete()
    assert workspace.is_dir()


def test_contains(tree: FsPath) -> None:
    directory = Directory.open(".")

    assert directory.contains("a.txt")
    assert directory.contains("dir1/dir2")
    assert not directory.contains("nothing")
    directory.verify_contains("dir1/c.txt")

    with pytest.raises(NotFoundError) as excinfo:
        directory.verify_contains("dir1/nothing")
    assert "dir1/nothing" in str(excinfo.value)


def test_open_file_and_subdirectory(tree: FsPath) -> None:
    directory = Directory.open("dir1")

    with directory.open_file("c.txt") as handle:
        assert handle.read() == "c"
    assert directory.open_directory("dir2").path.string == "dir1/dir2"


def test_files(tree: FsPath) -> None:
    directory = Directory.open(".")

    assert [path.string for path in directory.files()] == ["a.txt", "b.md"]
    assert [path.string for path in directory.files("*.txt")] == ["a.txt"]
    assert [path.string for path in directory.files(".*")] == [".hidden"]


def test_files_have_the_directory_as_base(tree: FsPath) -> None:
    directory = Directory.open(f"{tree}/dir1")

    (found,) = directory.files()
    assert found == FilePath.based(f"{tree}/dir1", "c.txt")
    assert found.base == directory.path


def test_files_recursive(tree: FsPath) -> None:
    directory = Directory.open(".")

    found = [path.string for path in directory.files("*.txt", recursive=True)]
    assert found == ["a.txt", "dir1/c.txt", "dir1/dir2/d.txt"]


def test_directories(tree: FsPath) -> None:
    directory = Directory.open(".")

    assert [path.string for path in directory.directories()] == ["dir1"]
    assert [path.string for path in directory.directories(recursive=True)] == ["dir1", "dir1/dir2"]
    assert all(isinstance(path, DirectoryPath) for path in directory.directories(recursive=True))


def test_recursive_listing_does_not_follow_links(tree: FsPath, outside: FsPath) -> None:
    (outside / "far.txt").write_text("x", encoding="utf-8")
    os.symlink(outside, tree / "link", target_is_directory=True)

    directory = Directory.open(".")
    assert "link" in [path.string for path in directory.directories()]
    assert "link/far.txt" not in [path.string for path in directory.files(recursive=True)]


def test_create_file_and_directory_inside(workspace: FsPath) -> None:
    directory = WritableDirectory.create("dir", IfExists.THROW_ERROR)

    with directory.create_file("sub/file.txt", IfExists.THROW_ERROR) as handle:
        handle.write("hello")
    child = directory.create_directory("child", IfExists.THROW_ERROR)

    assert (workspace / "dir" / "sub" / "file.txt").read_text(encoding="utf-8") == "hello"
    assert child.path.string == "dir/child"

    with directory.edit_file("sub/file.txt") as handle:
        handle.write(" world")
    assert (workspace / "dir" / "sub" / "file.txt").read_text(encoding="utf-8") == "hello world"


def test_delete(workspace: FsPath) -> None:
    directory = WritableDirectory.create("dir/sub", IfExists.THROW_ERROR)
    (workspace / "dir" / "sub" / "file").write_text("x", encoding="utf-8")

    WritableDirectory.open("dir").delete()

    assert not (workspace / "dir").exists()
    assert not directory.path.exists()


def test_temp_directory(monkeypatch: pytest.MonkeyPatch) -> None:
    from typedpaths import config as paths_config

    monkeypatch.setenv("TYPEDPATHS_TEMP_PREFIX", "pathtest")
    paths_config.get_settings.cache_clear()

    first = WritableDirectory.create_temp_directory()
    second = WritableDirectory.create_temp_directory()
    try:
        assert first.path != second.path
        assert first.path.exists()
        assert first.path.name.startswith("pathtest-")
        assert first.files() == [] and first.directories() == []
    finally:
        get_context().sandbox = False
        first.delete()
        second.delete()


def test_contains_keeps_absolute_strings_under_directory(tree: FsPath) -> None:
    directory = Directory.open("dir1")

    assert directory.contains("/c.txt")
    assert not directory.contains(f"{tree}/a.txt")


def test_handle_methods_pass_context_on(outside: FsPath) -> None:
    directory = WritableDirectory.open(str(outside))
    unguarded = PathContext(sandbox=False)

    with pytest.raises(OutsideSandboxError):
        directory.create_file("file.txt", IfExists.THROW_ERROR)

    directory.create_file("file.txt", IfExists.THROW_ERROR, context=unguarded).close()
    directory.create_directory("sub", IfExists.THROW_ERROR, context=unguarded)
    with directory.edit_file("file.txt", context=unguarded) as handle:
        handle.write("x")
    with directory.open_file("file.txt", context=unguarded) as handle:
        assert handle.read() == "x"
    assert directory.open_directory("sub", context=unguarded).path.name == "sub"


def test_directory_path_shortcuts(workspace: FsPath) -> None:
    path = DirectoryPath("made/here")

    created = path.create(IfExists.THROW_ERROR)
    opened = path.open()

    assert isinstance(created, WritableDirectory)
    assert isinstance(opened, ReadableDirectory)
    assert created.path == opened.path == path
    assert (workspace / "made" / "here").is_dir()
    with pytest.raises(AlreadyExistsError):
        path.create(IfExists.THROW_ERROR)
    with pytest.raises(NotFoundError):
        DirectoryPath("missing").open()
