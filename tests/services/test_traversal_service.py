# tests/services/test_traversal_service.py
import os
from pathlib import Path
from typing import List, Optional

import pytest

from pathsieve.adapters.local_fs import LocalDirectoryHandle, LocalFS
from pathsieve.domain import Entry, InvalidArgumentError, TraversalError
from pathsieve.domain.predicates import (
    ALWAYS_FALSE,
    ALWAYS_TRUE,
    IS_FILE,
    MaxDepth,
    extension,
    name_equals,
    not_,
    prefix,
)
from pathsieve.ports.filesystem import FilesystemPort
from pathsieve.services import TraversalService


class RecordingFS(FilesystemPort):
    """LocalFS wrapper recording every stat and directory open."""

    def __init__(self, fail: Optional[dict] = None) -> None:
        self._local = LocalFS()
        self._fail = fail or {}
        self.stats: List[Path] = []
        self.opened: List[Path] = []
        self.handles: List[LocalDirectoryHandle] = []

    def entry(self, path: Path, depth: int = 0) -> Entry:
        self.stats.append(Path(path))
        return self._local.entry(path, depth)

    def scandir(self, path: Path, depth: int) -> LocalDirectoryHandle:
        path = Path(path)
        if path.name in self._fail:
            raise self._fail[path.name]
        handle = self._local.scandir(path, depth)
        self.opened.append(path)
        self.handles.append(handle)
        return handle

    @property
    def open_handles(self) -> List[LocalDirectoryHandle]:
        return [h for h in self.handles if not h.closed]


def make_tree(root: Path, spec: dict) -> Path:
    """Create files (str values) and directories (dict values) under root."""
    root.mkdir(parents=True, exist_ok=True)
    for name, value in spec.items():
        if isinstance(value, dict):
            make_tree(root / name, value)
        else:
            (root / name).write_text(value)
    return root


TREE = {
    "a.txt": "a",
    "b.xml": "b",
    "keep": {"c.txt": "c", "inner": {"d.txt": "d"}},
    "skip": {"e.txt": "e", "deep": {"deeper": {"f.txt": "f"}}},
}


def names(paths):
    return sorted(p.name for p in paths)


def test_unrestricted_walk_lists_every_file(tmp_path: Path):
    root = make_tree(tmp_path / "root", TREE)
    files = TraversalService().list_files(root, ALWAYS_TRUE)
    assert names(files) == ["a.txt", "b.xml", "c.txt", "d.txt", "e.txt", "f.txt"]
    assert all(isinstance(p, Path) for p in files)


def test_directory_rejection_prunes_whole_subtree(tmp_path: Path):
    root = make_tree(tmp_path / "root", TREE)
    fs = RecordingFS()
    files = TraversalService(fs).list_files(root, ALWAYS_TRUE, not_(name_equals("skip")))

    assert names(files) == ["a.txt", "b.xml", "c.txt", "d.txt"]
    # nothing at or below the rejected directory was ever opened
    assert not any("skip" in p.parts for p in fs.opened)
    assert fs.open_handles == []


def test_rejected_root_reads_nothing(tmp_path: Path):
    root = make_tree(tmp_path / "root", TREE)
    fs = RecordingFS()
    assert TraversalService(fs).list_files(root, ALWAYS_TRUE, ALWAYS_FALSE) == []
    assert fs.opened == []


def test_file_predicate_never_sees_directories(tmp_path: Path):
    root = make_tree(tmp_path / "root", {"dir.txt": {"x.bin": "x"}, "y.txt": "y"})
    files = TraversalService().list_files(root, extension("txt"))
    assert names(files) == ["y.txt"]


def test_max_depth_zero_reads_only_the_root(tmp_path: Path):
    root = make_tree(tmp_path / "root", TREE)
    fs = RecordingFS()
    files = TraversalService(fs).list_files(root, ALWAYS_TRUE, MaxDepth(0))
    assert names(files) == ["a.txt", "b.xml"]
    assert fs.opened == [root]


def test_max_depth_one(tmp_path: Path):
    root = make_tree(tmp_path / "root", TREE)
    files = TraversalService().list_files(root, ALWAYS_TRUE, MaxDepth(1))
    assert names(files) == ["a.txt", "b.xml", "c.txt", "e.txt"]


def test_recursive_listing_is_union_of_flat_listings(tmp_path: Path):
    root = make_tree(tmp_path / "root", TREE)
    svc = TraversalService()
    recursive = svc.list_files(root, ALWAYS_TRUE)

    flat = []
    for dirpath, _dirnames, _filenames in os.walk(root):
        flat.extend(svc.list_files(dirpath, ALWAYS_TRUE, MaxDepth(0)))

    assert sorted(recursive) == sorted(flat)
    assert len(recursive) == len(set(recursive))


def test_files_of_a_directory_come_before_its_descendants(tmp_path: Path):
    root = make_tree(tmp_path / "root", {"top.txt": "t", "sub": {"low.txt": "l"}})
    files = TraversalService().list_files(root, ALWAYS_TRUE)
    assert [p.name for p in files] == ["top.txt", "low.txt"]


def test_walk_accepts_a_file_root(tmp_path: Path):
    f = tmp_path / "only.txt"
    f.write_text("x")
    svc = TraversalService()
    with svc.walk(f, extension("txt")) as seq:
        assert list(seq) == [f]
    with svc.walk(f, extension("xml")) as seq:
        assert list(seq) == []


def test_walk_of_a_directory_behaves_like_iterate_files(tmp_path: Path):
    root = make_tree(tmp_path / "root", TREE)
    with TraversalService().walk(root, ALWAYS_TRUE, MaxDepth(0)) as seq:
        assert names(seq) == ["a.txt", "b.xml"]


def test_excluding_composes_a_name_rejection(tmp_path: Path):
    root = make_tree(tmp_path / "root", TREE)
    svc = TraversalService()
    assert names(svc.list_files_excluding(root, ALWAYS_TRUE, excluded_name="skip")) == [
        "a.txt",
        "b.xml",
        "c.txt",
        "d.txt",
    ]
    pred = svc.excluding(prefix("r", "k"), "inner")
    assert names(svc.list_files(root, ALWAYS_TRUE, pred)) == ["a.txt", "b.xml", "c.txt"]
    with svc.iterate_files_excluding(root, extension("txt"), None, "keep") as seq:
        assert names(seq) == ["a.txt", "e.txt", "f.txt"]


def test_excluding_requires_a_name():
    with pytest.raises(InvalidArgumentError):
        TraversalService.excluding(None, "")


# --- argument validation -----------------------------------------------------


def test_missing_file_predicate_fails_before_any_io(tmp_path: Path):
    fs = RecordingFS()
    with pytest.raises(InvalidArgumentError):
        TraversalService(fs).list_files(tmp_path, None)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError):
        TraversalService(fs).iterate_files(tmp_path, None)  # type: ignore[arg-type]
    assert fs.stats == []
    assert fs.opened == []


def test_non_predicate_arguments_are_rejected(tmp_path: Path):
    svc = TraversalService()
    with pytest.raises(InvalidArgumentError):
        svc.list_files(tmp_path, lambda e: True)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError):
        svc.list_files(tmp_path, ALWAYS_TRUE, "CVS")  # type: ignore[arg-type]


def test_missing_root_is_invalid(tmp_path: Path):
    fs = RecordingFS()
    with pytest.raises(InvalidArgumentError):
        TraversalService(fs).list_files(tmp_path / "missing", ALWAYS_TRUE)
    assert fs.opened == []


def test_file_root_is_invalid_for_directory_entry_points(tmp_path: Path):
    f = tmp_path / "file.txt"
    f.write_text("x")
    svc = TraversalService()
    with pytest.raises(InvalidArgumentError):
        svc.list_files(f, ALWAYS_TRUE)
    with pytest.raises(InvalidArgumentError):
        svc.iterate_files(f, ALWAYS_TRUE)
    with pytest.raises(InvalidArgumentError):
        svc.stream_files(f, True)


# --- I/O failures ------------------------------------------------------------


def test_unreadable_subdirectory_aborts_the_listing(tmp_path: Path):
    root = make_tree(tmp_path / "root", TREE)
    fs = RecordingFS(fail={"inner": PermissionError(13, "Permission denied")})
    with pytest.raises(TraversalError) as exc:
        TraversalService(fs).list_files(root, ALWAYS_TRUE)
    assert exc.value.path == root / "keep" / "inner"
    assert isinstance(exc.value.__cause__, PermissionError)
    assert fs.open_handles == []


def test_pruned_unreadable_directory_is_harmless(tmp_path: Path):
    root = make_tree(tmp_path / "root", TREE)
    fs = RecordingFS(fail={"inner": PermissionError(13, "Permission denied")})
    files = TraversalService(fs).list_files(root, ALWAYS_TRUE, not_(name_equals("inner")))
    assert "d.txt" not in names(files)


def test_directory_vanishing_before_it_is_read_is_skipped(tmp_path: Path):
    root = make_tree(tmp_path / "root", TREE)
    fs = RecordingFS(fail={"skip": FileNotFoundError(2, "No such file or directory")})
    files = TraversalService(fs).list_files(root, ALWAYS_TRUE)
    assert names(files) == ["a.txt", "b.xml", "c.txt", "d.txt"]


def test_traversals_are_independent(tmp_path: Path):
    root = make_tree(tmp_path / "root", TREE)
    svc = TraversalService()
    pred = extension("txt")
    with svc.iterate_files(root, pred) as first, svc.iterate_files(root, pred) as second:
        a = [next(first)]
        b = list(second)
        a.extend(first)
    assert sorted(a) == sorted(b)


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_symlinked_directory_is_neither_a_file_nor_descended(tmp_path: Path):
    root = make_tree(tmp_path / "root", {"real": {"x.txt": "x"}})
    (root / "link").symlink_to(root / "real", target_is_directory=True)
    (root / "x-link.txt").symlink_to(root / "real" / "x.txt")

    svc = TraversalService()
    assert names(svc.list_files(root, IS_FILE)) == ["x-link.txt", "x.txt"]
    assert svc.list_files(root, name_equals("link")) == []
    files = svc.list_files(root, ALWAYS_TRUE)
    assert [p.name for p in files].count("x.txt") == 1
    assert all(p.parent.name != "link" for p in files)
