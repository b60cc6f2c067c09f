"""Test module for building trees from directories."""

import os
import pytest
from ritstore.objectcodec import BLOB, TREE, EntryMode, TreeEntry
from ritstore.treebuilder import TreeBuilder


def _write(path, content):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)


def test_build_tree_composition(store, oids, tmp_path):
    """Check a file and an empty directory give exactly two entries."""
    snapshot = tmp_path / "snapshot"
    _write(snapshot / "a.txt", b"hello")
    (snapshot / "b").mkdir()

    oid = store.build_tree(snapshot)
    entries = store.list_tree(oid)
    assert entries == [
        TreeEntry(EntryMode.REGULAR_FILE, "a.txt", oids["blobs"][b"hello"]),
        TreeEntry(EntryMode.DIRECTORY, "b", oids["trees"]["empty"]),
    ]
    expected_tree = store.write_tree(entries)
    assert oid == expected_tree


def test_build_tree_empty_directory(store, oids, tmp_path):
    """Check an empty directory always gives the empty tree."""
    snapshot = tmp_path / "empty"
    snapshot.mkdir()
    assert store.build_tree(snapshot) == oids["trees"]["empty"]
    assert store.build_tree(str(snapshot)) == oids["trees"]["empty"]
    assert store.exists(oids["trees"]["empty"])


def test_build_tree_known_ids(store, oids, tmp_path):
    """Check nested directories hash to the ids git computes."""
    snapshot = tmp_path / "project"
    _write(snapshot / "test.txt", b"version 2\n")
    _write(snapshot / "new.txt", b"new file\n")
    _write(snapshot / "bak" / "test.txt", b"version 1\n")
    assert store.build_tree(snapshot) == oids["trees"]["third"]


def test_build_tree_children_persisted(store, oids, tmp_path):
    """Check every blob and subtree is stored along with the root."""
    snapshot = tmp_path / "project"
    _write(snapshot / "test.txt", b"version 2\n")
    _write(snapshot / "new.txt", b"new file\n")
    _write(snapshot / "bak" / "test.txt", b"version 1\n")
    store.build_tree(snapshot)
    for content in (b"version 1\n", b"version 2\n", b"new file\n"):
        assert store.exists(oids["blobs"][content])
    assert store.exists(oids["trees"]["first"])
    assert store.exists(oids["trees"]["third"])
    assert store._count("objects") == 5  # pylint: disable=W0212


def test_build_tree_canonical_order(store, tmp_path):
    """Check a directory sorts as if its name ended in '/'."""
    snapshot = tmp_path / "ordering"
    _write(snapshot / "foo" / "inner.txt", b"inner")
    _write(snapshot / "foo.txt", b"file")
    _write(snapshot / "foo-bar", b"file")
    oid = store.build_tree(snapshot)
    assert store.list_tree(oid, name_only=True) == ["foo-bar", "foo.txt", "foo"]


def test_build_tree_deterministic(store, tmp_path):
    """Check the same directory content gives the same id in another location."""
    for name in ("one", "two"):
        _write(tmp_path / name / "a.txt", b"hello")
        _write(tmp_path / name / "sub" / "b.txt", b"hello\n")
    assert store.build_tree(tmp_path / "one") == store.build_tree(tmp_path / "two")


def test_build_tree_skips_store_directory(store, worktree, oids):
    """Check the reserved store directory is never part of a snapshot."""
    _write(worktree / "a.txt", b"hello")
    store.hash_object(b"hello\n", write=True)
    oid = store.build_tree(worktree)
    assert store.list_tree(oid, name_only=True) == ["a.txt"]
    assert oids["blobs"][b"hello"] == store.list_tree(oid)[0].oid


def test_build_tree_skips_nested_store_directory(store, tmp_path):
    """Check a nested reserved directory is skipped too."""
    snapshot = tmp_path / "outer"
    _write(snapshot / "inner" / ".rit" / "HEAD", b"ref: refs/heads/main\n")
    _write(snapshot / "inner" / "a.txt", b"hello")
    oid = store.build_tree(snapshot)
    names = [path for path, _ in store.walk_tree(oid)]
    assert names == ["inner", "inner/a.txt"]


def test_build_tree_keeps_file_named_like_store(store, oids, tmp_path):
    """Check only a directory with the reserved name is skipped, not a file."""
    snapshot = tmp_path / "files"
    _write(snapshot / ".rit", b"hello")
    _write(snapshot / "a.txt", b"hello\n")
    oid = store.build_tree(snapshot)
    assert store.list_tree(oid) == [
        TreeEntry(EntryMode.REGULAR_FILE, ".rit", oids["blobs"][b"hello"]),
        TreeEntry(EntryMode.REGULAR_FILE, "a.txt", oids["blobs"][b"hello\n"]),
    ]


def test_build_tree_ignore_names(store, oids, tmp_path):
    """Check extra names can be ignored."""
    snapshot = tmp_path / "ignored"
    _write(snapshot / "a.txt", b"hello")
    _write(snapshot / "__pycache__" / "a.pyc", b"cache")
    oid = TreeBuilder(store, ignore_names=["__pycache__"]).build(snapshot)
    assert store.list_tree(oid) == [
        TreeEntry(EntryMode.REGULAR_FILE, "a.txt", oids["blobs"][b"hello"])
    ]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_build_tree_skips_symlinks(store, oids, tmp_path):
    """Check symbolic links are not followed."""
    snapshot = tmp_path / "links"
    _write(snapshot / "a.txt", b"hello")
    os.symlink(snapshot / "a.txt", snapshot / "link.txt")
    oid = store.build_tree(snapshot)
    assert store.list_tree(oid, name_only=True) == ["a.txt"]


def test_build_tree_not_a_directory(store, tmp_path):
    """Check building from a file throws NotADirectoryError."""
    file_path = tmp_path / "a.txt"
    file_path.write_bytes(b"hello")
    with pytest.raises(NotADirectoryError):
        store.build_tree(file_path)


def test_build_tree_missing_directory(store, tmp_path):
    """Check building from a missing path throws an OSError."""
    with pytest.raises(OSError):
        store.build_tree(tmp_path / "missing")


@pytest.mark.skipif(
    hasattr(os, "geteuid") and os.geteuid() == 0, reason="root can read anything"
)
def test_build_tree_unreadable_file(store, tmp_path):
    """Check a read failure propagates and no root tree is written."""
    snapshot = tmp_path / "unreadable"
    _write(snapshot / "secret.txt", b"secret")
    os.chmod(snapshot / "secret.txt", 0)
    try:
        with pytest.raises(PermissionError):
            store.build_tree(snapshot)
    finally:
        os.chmod(snapshot / "secret.txt", 0o644)
    assert store._count("objects") == 0  # pylint: disable=W0212


def test_build_tree_kinds(store, tmp_path):
    """Check entry kinds follow file and directory modes."""
    snapshot = tmp_path / "kinds"
    _write(snapshot / "file", b"")
    (snapshot / "dir").mkdir()
    oid = store.build_tree(snapshot)
    assert [entry.kind for entry in store.list_tree(oid)] == [TREE, BLOB]
