from pathlib import Path, PurePosixPath

import pytest

from codelink.core.filesystem import (
    DirectoryAccessor,
    FileSystemDirectoryAccessor,
    InMemoryDirectoryAccessor,
)


def test_in_memory_accessor_resolves_relative_paths() -> None:
    accessor = InMemoryDirectoryAccessor("/sample", {"src/Program.cs": "code"})

    assert accessor.root == PurePosixPath("/sample")
    assert accessor.resolve_path("../src/Program.cs", "docs") == PurePosixPath(
        "/sample/src/Program.cs"
    )
    assert accessor.resolve_path("/elsewhere/file.cs", "docs") == PurePosixPath(
        "/elsewhere/file.cs"
    )
    assert accessor.exists(PurePosixPath("/sample/src/Program.cs"))
    assert not accessor.exists(PurePosixPath("/sample/src"))
    assert accessor.read_text(PurePosixPath("/sample/src/Program.cs")) == "code"
    assert len(accessor) == 1


def test_in_memory_accessor_lists_direct_children_only() -> None:
    accessor = InMemoryDirectoryAccessor(
        "/",
        [("a/one.csproj", ""), ("a/Program.cs", ""), ("a/nested/two.csproj", "")],
    )

    assert accessor.list_files(PurePosixPath("/a")) == [
        PurePosixPath("/a/Program.cs"),
        PurePosixPath("/a/one.csproj"),
    ]
    assert accessor.list_files(PurePosixPath("/missing")) == []


def test_in_memory_accessor_rejects_unknown_files() -> None:
    accessor = InMemoryDirectoryAccessor()

    path = accessor.add("notes.txt", "hello")

    assert path == PurePosixPath("/notes.txt")
    with pytest.raises(FileNotFoundError):
        accessor.read_text(PurePosixPath("/other.txt"))


def test_file_system_accessor(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "Program.cs").write_text("class P {}\n", encoding="utf-8")
    (tmp_path / "src" / "app.csproj").write_text("<Project />", encoding="utf-8")
    (tmp_path / "src" / "obj").mkdir()

    accessor = FileSystemDirectoryAccessor(tmp_path)
    program = accessor.resolve_path("../src/Program.cs", "docs")

    assert program == tmp_path / "src" / "Program.cs"
    assert accessor.exists(program)
    assert not accessor.exists(tmp_path / "src")
    assert accessor.read_text(program) == "class P {}\n"
    assert accessor.list_files(tmp_path / "src") == [
        tmp_path / "src" / "Program.cs",
        tmp_path / "src" / "app.csproj",
    ]
    assert accessor.list_files(tmp_path / "missing") == []


def test_accessors_satisfy_the_protocol(tmp_path: Path) -> None:
    assert isinstance(InMemoryDirectoryAccessor(), DirectoryAccessor)
    assert isinstance(FileSystemDirectoryAccessor(tmp_path), DirectoryAccessor)


def test_file_system_accessor_keeps_line_endings(tmp_path: Path) -> None:
    (tmp_path / "Program.cs").write_bytes(b"class A\r\n{\r\n}\r\n")

    accessor = FileSystemDirectoryAccessor(tmp_path)

    assert accessor.read_text(tmp_path / "Program.cs") == "class A\r\n{\r\n}\r\n"
