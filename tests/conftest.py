"""Pytest overall configuration file for fixtures"""

import pytest
from ritstore.fileobjectstore import FileObjectStore


@pytest.fixture(name="worktree")
def init_worktree(tmp_path):
    """Working tree directory that holds the store."""
    directory = tmp_path / "worktree"
    directory.mkdir(parents=True)
    return directory


@pytest.fixture(name="props")
def init_props(worktree):
    """Properties to initialize ObjectStore."""
    # Note, objects generated via tests are placed in a temporary folder
    # under the reserved store directory of the working tree
    properties = {
        "store_path": (worktree / ".rit").as_posix(),
        "store_depth": 1,
        "store_width": 2,
        "store_compression": "zlib",
    }
    return properties


@pytest.fixture(name="store")
def init_store(props):
    """Create FileObjectStore instance for all tests."""
    store = FileObjectStore(props)
    return store


@pytest.fixture(name="oids")
def init_oids():
    """Shared test harness data, object ids as computed by git.
    - blobs: content -> blob oid
    - trees: description -> tree oid
    """
    test_oids = {
        "blobs": {
            b"": "e69de29bb2d1d6434b8b29ae775ad8c2e48c5391",
            b"hello": "b6fc4c620b67d95f953a5c1c1230aaab5db5a1b0",
            b"hello\n": "ce013625030ba8dba906f756967f9e9ca394464a",
            b"test content\n": "d670460b4b4aece5915caf5c68d12f560a9fe3e4",
            b"what is up, doc?\n": "bd9dbf5aae1a3862dd1526723246b20206e5fc37",
            b"version 1\n": "83baae61804e65cc73a7201a7252750c76066a30",
            b"version 2\n": "1f7a7a472abf3dd9643fd615f6da379c4acb3e3a",
            b"new file\n": "fa49b077972391ad58037050f2a75f74e3671e92",
        },
        "trees": {
            "empty": "4b825dc642cb6eb9a060e54bf8d69288fbad4904",
            # test.txt -> "version 1\n"
            "first": "d8329fc1cc938780ffdd9f94e0d364e0ea74f579",
            # new.txt -> "new file\n", test.txt -> "version 2\n"
            "second": "0155eb4229851634a0f03eb265b69f5a2d56f341",
            # bak/ -> first, new.txt -> "new file\n", test.txt -> "version 2\n"
            "third": "3c4e9cd789d88d8d89c1073707c3585e41b0e614",
        },
    }
    return test_oids
