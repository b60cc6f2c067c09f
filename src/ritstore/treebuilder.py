"""Snapshot a directory into tree objects"""
import logging
import os
import stat
from ritstore import objectstore_config
from ritstore.objectcodec import EntryMode, TreeEntry


class TreeBuilder:
    """Walk a directory and persist its contents to an `ObjectStore`. Every regular
    file becomes a blob, every subdirectory a tree, and children are always stored
    before the tree that references them. The store's own metadata directory is
    never part of a snapshot.

    :param ObjectStore store: Store to write blobs and trees into.
    :param iterable ignore_names: Extra entry names to skip at every level, whatever
        their kind.
    """

    def __init__(self, store, ignore_names=None):
        self.store = store
        self.ignore_names = set(ignore_names or ())
        store_root = getattr(store, "root", None)
        self.store_root = os.path.realpath(store_root) if store_root else None

    def build(self, path):
        """Build the tree for `path` and return its object id.

        :param str path: Directory to snapshot.

        :raises NotADirectoryError: If `path` is not a directory.
        :raises OSError: If a file or directory cannot be read.

        :return: str - Object id of the tree.
        """
        path = os.fspath(path)
        if not os.path.isdir(path):
            exception_string = f"TreeBuilder - build: Not a directory: {path}"
            logging.error(exception_string)
            raise NotADirectoryError(exception_string)

        entries = []
        try:
            with os.scandir(path) as dir_entries:
                children = sorted(dir_entries, key=lambda dir_entry: dir_entry.name)
            for child in children:
                entry = self._build_entry(child)
                if entry is not None:
                    entries.append(entry)
        except OSError as err:
            logging.error(
                "TreeBuilder - build: Unable to snapshot %s. Error: %s", path, err
            )
            raise

        oid = self.store.write_tree(entries)
        logging.debug(
            "TreeBuilder - build: Tree %s written for %s (%s entries)",
            oid,
            path,
            len(entries),
        )
        return oid

    def _build_entry(self, child):
        """Store one directory child and return its `TreeEntry`, or None if the
        child is not part of snapshots."""
        if child.name in self.ignore_names:
            logging.debug("TreeBuilder - _build_entry: Skipping %s", child.path)
            return None

        # Symlinks are not followed
        mode = child.stat(follow_symlinks=False).st_mode
        if stat.S_ISDIR(mode):
            if self._is_store_dir(child):
                logging.debug(
                    "TreeBuilder - _build_entry: Skipping store directory %s", child.path
                )
                return None
            return TreeEntry(EntryMode.DIRECTORY, child.name, self.build(child.path))
        if stat.S_ISREG(mode):
            object_info = self.store.hash_object(child.path, write=True)
            return TreeEntry(EntryMode.REGULAR_FILE, child.name, object_info.oid)

        logging.warning(
            "TreeBuilder - _build_entry: %s is neither a regular file nor a directory,"
            + " skipping.",
            child.path,
        )
        return None

    def _is_store_dir(self, child):
        """True for the reserved metadata directory name and for the store root."""
        if child.name == objectstore_config.STORE_DIR_NAME:
            return True
        return (
            self.store_root is not None
            and os.path.realpath(child.path) == self.store_root
        )
