# VMSYNC Root Mapper Tests

from pathlib import Path

import pytest

from vmsync.sync.mapper import find_owning_root


class TestFindOwningRoot:
    """Tests for find_owning_root()."""

    def test_nested_path(self):
        assert find_owning_root("/a/b/c/d.txt", ["/a/b"]) == "/a/b"

    def test_no_match(self):
        assert find_owning_root("/z", ["/a/b"]) is None

    def test_no_roots(self):
        assert find_owning_root("/a/b", []) is None

    def test_root_itself(self):
        assert find_owning_root("/a/b", ["/a/b"]) == "/a/b"

    def test_first_configured_wins(self):
        roots = ["/srv", "/srv/app"]
        assert find_owning_root("/srv/app/main.py", roots) == "/srv"
        assert find_owning_root("/srv/app/main.py", list(reversed(roots))) == "/srv/app"

    def test_prefix_match_is_not_segment_aware(self):
        assert find_owning_root("/foobar/file", ["/foo"]) == "/foo"

    def test_event_path_normalized(self, sync_roots: tuple[str, str]):
        app, lib = sync_roots
        event = f"{lib}/../lib/deep/./file.txt"
        assert find_owning_root(event, [app, lib]) == lib

    def test_relative_event_path(self, sync_roots: tuple[str, str], monkeypatch: pytest.MonkeyPatch):
        app, lib = sync_roots
        monkeypatch.chdir(app)
        assert find_owning_root("models/user.py", [lib, app]) == app

    def test_symlinked_event_path(self, temp_dir: Path, sync_roots: tuple[str, str]):
        app, lib = sync_roots
        link = temp_dir / "shortcut"
        link.symlink_to(app)
        assert find_owning_root(str(link / "index.html"), [lib, app]) == app
