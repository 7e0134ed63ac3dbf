"""Tests for workspace/scope.py — PathScope, CreateScope, ReplaceScope."""

import os
from pathlib import Path

import pytest

from bazelws.errors import AlreadyExists, ContainmentViolation, InvalidOperation
from bazelws.workspace.scope import CreateScope, ReplaceScope


class TestResolve:
    def test_stays_under_root(self, tmp_path: Path) -> None:
        scope = CreateScope(tmp_path)
        for path in ["a", "a/b/c.txt", "a/../b", "./x", "a/b/../../c"]:
            assert str(scope.resolve(path)).startswith(str(tmp_path))

    def test_root_itself(self, tmp_path: Path) -> None:
        scope = CreateScope(tmp_path)
        assert scope.resolve("") == tmp_path
        assert scope.resolve(".") == tmp_path
        assert scope.resolve("a/..") == tmp_path

    def test_creates_parent_dirs(self, tmp_path: Path) -> None:
        scope = CreateScope(tmp_path)
        target = scope.resolve("a/b/c.txt")
        assert target == tmp_path / "a" / "b" / "c.txt"
        assert (tmp_path / "a" / "b").is_dir()
        assert not target.exists()

    @pytest.mark.parametrize("path", ["../x", "a/../../x", "..", "/etc/passwd"])
    def test_escape_rejected(self, tmp_path: Path, path: str) -> None:
        root = tmp_path / "ws"
        root.mkdir()
        scope = CreateScope(root)
        with pytest.raises(ContainmentViolation, match="Only paths under"):
            scope.resolve(path)
        assert sorted(tmp_path.iterdir()) == [root]

    def test_sibling_prefix_rejected(self, tmp_path: Path) -> None:
        scope = CreateScope(tmp_path / "ws")
        with pytest.raises(ContainmentViolation):
            scope.resolve("../ws-other/file")

    def test_forbidden_path(self, tmp_path: Path) -> None:
        scope = ReplaceScope(tmp_path, forbidden=frozenset({tmp_path / "WORKSPACE"}))
        with pytest.raises(InvalidOperation):
            scope.resolve("WORKSPACE")
        with pytest.raises(InvalidOperation):
            scope.resolve("sub/../WORKSPACE")
        assert scope.resolve("sub/WORKSPACE") == tmp_path / "sub" / "WORKSPACE"


class TestChild:
    def test_child_keeps_workspace(self, tmp_path: Path) -> None:
        child = CreateScope(tmp_path).child("a").child("b")
        assert isinstance(child, CreateScope)
        assert child.workspace == tmp_path
        assert child.root == tmp_path / "a" / "b"
        assert child.relative_root() == "a/b"

    def test_child_is_confined(self, tmp_path: Path) -> None:
        child = CreateScope(tmp_path).child("a")
        with pytest.raises(ContainmentViolation):
            child.resolve("../b")

    def test_child_shares_forbidden(self, tmp_path: Path) -> None:
        marker = tmp_path / "WORKSPACE"
        child = ReplaceScope(tmp_path, forbidden=frozenset({marker})).child("a")
        assert isinstance(child, ReplaceScope)
        assert child.forbidden == frozenset({marker})

    def test_relative_root_at_top(self, tmp_path: Path) -> None:
        assert CreateScope(tmp_path).relative_root() == ""


class TestCreateScopeWrite:
    def test_writes_with_fixed_mtime(self, tmp_path: Path) -> None:
        target = CreateScope(tmp_path).write("a/f.txt", b"hello", 0.0)
        assert target.read_bytes() == b"hello"
        assert target.stat().st_mtime == 0.0

    def test_existing_file_fails(self, tmp_path: Path) -> None:
        scope = CreateScope(tmp_path)
        scope.write("f.txt", b"first", 0.0)
        with pytest.raises(AlreadyExists):
            scope.write("f.txt", b"second", 0.0)
        assert (tmp_path / "f.txt").read_bytes() == b"first"

    def test_already_exists_is_file_exists_error(self, tmp_path: Path) -> None:
        scope = CreateScope(tmp_path)
        scope.write("f.txt", b"x", 0.0)
        with pytest.raises(FileExistsError):
            scope.write("f.txt", b"y", 0.0)


class TestReplaceScopeWrite:
    def test_overwrites(self, tmp_path: Path) -> None:
        scope = ReplaceScope(tmp_path)
        scope.write("f.txt", b"first, longer", 0.0)
        target = scope.write("f.txt", b"second", 0.0)
        assert target.read_bytes() == b"second"

    def test_custom_mtime(self, tmp_path: Path) -> None:
        target = ReplaceScope(tmp_path).write("f.txt", b"x", 86400.0)
        assert os.stat(target).st_mtime == 86400.0
