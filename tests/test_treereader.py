"""Test module for reading trees back from the store."""

import pytest
from ritstore.objectcodec import EntryMode, TreeEntry
from ritstore.objectstore_exceptions import ObjectNotFound, WrongObjectKind
from ritstore.treereader import TreeReader


@pytest.fixture(name="third_tree")
def init_third_tree(store, oids):
    """Store the nested tree of three blobs and one subtree."""
    blobs = oids["blobs"]
    for content in (b"version 1\n", b"version 2\n", b"new file\n"):
        store.hash_object(content, write=True)
    first = store.write_tree(
        [TreeEntry(EntryMode.REGULAR_FILE, "test.txt", blobs[b"version 1\n"])]
    )
    return store.write_tree(
        [
            TreeEntry(EntryMode.DIRECTORY, "bak", first),
            TreeEntry(EntryMode.REGULAR_FILE, "new.txt", blobs[b"new file\n"]),
            TreeEntry(EntryMode.REGULAR_FILE, "test.txt", blobs[b"version 2\n"]),
        ]
    )


def test_list_tree(store, oids, third_tree):
    """Check full entries are listed in stored order."""
    assert third_tree == oids["trees"]["third"]
    assert store.list_tree(third_tree) == [
        TreeEntry(EntryMode.DIRECTORY, "bak", oids["trees"]["first"]),
        TreeEntry(EntryMode.REGULAR_FILE, "new.txt", oids["blobs"][b"new file\n"]),
        TreeEntry(EntryMode.REGULAR_FILE, "test.txt", oids["blobs"][b"version 2\n"]),
    ]


def test_list_tree_name_only(store, third_tree):
    """Check only names are listed when requested."""
    assert store.list_tree(third_tree, name_only=True) == ["bak", "new.txt", "test.txt"]


def test_list_tree_empty(store, oids):
    """Check the empty tree lists no entries."""
    store.write_tree([])
    assert store.list_tree(oids["trees"]["empty"]) == []


def test_list_tree_blob_wrong_kind(store):
    """Check listing a blob throws WrongObjectKind."""
    oid = store.hash_object(b"hello", write=True).oid
    with pytest.raises(WrongObjectKind):
        store.list_tree(oid)


def test_list_tree_not_found(store):
    """Check listing an unknown id throws ObjectNotFound."""
    with pytest.raises(ObjectNotFound):
        store.list_tree("0" * 40)


def test_walk_tree(store, oids, third_tree):
    """Check walking yields every path depth-first."""
    walked = [(path, entry.oid) for path, entry in store.walk_tree(third_tree)]
    assert walked == [
        ("bak", oids["trees"]["first"]),
        ("bak/test.txt", oids["blobs"][b"version 1\n"]),
        ("new.txt", oids["blobs"][b"new file\n"]),
        ("test.txt", oids["blobs"][b"version 2\n"]),
    ]


def test_walk_tree_missing_subtree(store, oids):
    """Check a tree referencing a subtree that is not stored fails while walking."""
    oid = store.write_tree(
        [TreeEntry(EntryMode.DIRECTORY, "gone", oids["trees"]["first"])]
    )
    with pytest.raises(ObjectNotFound):
        list(TreeReader(store).walk_tree(oid))


def test_read_tree(store, oids, third_tree):
    """Check the reader returns the decoded entries."""
    entries = TreeReader(store).read_tree(third_tree)
    assert [entry.kind for entry in entries] == ["tree", "blob", "blob"]
