# VMSYNC Path Utility Tests

import os
from pathlib import Path

import pytest

from vmsync.utils.paths import normalize_path, parent_dir, unique_parents


class TestNormalizePath:
    """Tests for normalize_path()."""

    def test_relative_path_made_absolute(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch):
        (temp_dir / "src").mkdir()
        monkeypatch.chdir(temp_dir)
        result = normalize_path("src")
        assert os.path.isabs(result)
        assert result == str((temp_dir / "src").resolve())

    def test_dot_segments_collapsed(self, temp_dir: Path):
        (temp_dir / "a" / "b").mkdir(parents=True)
        result = normalize_path(temp_dir / "a" / "b" / ".." / "b" / ".")
        assert result == str((temp_dir / "a" / "b").resolve())

    def test_symlink_resolved(self, temp_dir: Path):
        target = temp_dir / "real"
        target.mkdir()
        link = temp_dir / "link"
        link.symlink_to(target)
        assert normalize_path(link) == str(target.resolve())

    def test_home_expanded(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("HOME", str(temp_dir))
        assert normalize_path("~/code") == str((temp_dir / "code").resolve())

    def test_missing_path_still_normalized(self, temp_dir: Path):
        result = normalize_path(temp_dir / "gone" / "file.txt")
        assert result == str(temp_dir.resolve() / "gone" / "file.txt")

    def test_no_trailing_separator(self, temp_dir: Path):
        result = normalize_path(f"{temp_dir}/")
        assert not result.endswith("/")

    def test_symlink_loop_does_not_raise(self, temp_dir: Path):
        root = Path(normalize_path(temp_dir))
        loop = root / "loop"
        loop.symlink_to(loop)
        result = normalize_path(loop / "x.txt")
        assert os.path.isabs(result)
        assert result.startswith(str(root))


class TestParentDir:
    """Tests for parent_dir() and unique_parents()."""

    def test_parent(self):
        assert parent_dir("/home/user/project") == "/home/user"

    def test_parent_of_root(self):
        assert parent_dir("/") == "/"

    def test_unique_parents_keeps_order(self):
        paths = ["/srv/b/one", "/srv/a/two", "/srv/b/three"]
        assert unique_parents(paths) == ["/srv/b", "/srv/a"]

    def test_unique_parents_empty(self):
        assert unique_parents([]) == []
