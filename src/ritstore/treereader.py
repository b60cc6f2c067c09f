"""Read back tree objects"""
import logging
from ritstore.objectcodec import TREE
from ritstore.objectstore_exceptions import WrongObjectKind


class TreeReader:
    """List the entries of stored trees.

    :param ObjectStore store: Store holding the trees.
    """

    def __init__(self, store):
        self.store = store

    def read_tree(self, oid):
        """Load a tree and return its entries in stored order.

        :param str oid: Object id of a tree.

        :raises ObjectNotFound: If no object exists at `oid`.
        :raises WrongObjectKind: If `oid` references a blob.

        :return: list - TreeEntry objects.
        """
        kind, content = self.store.retrieve_object(oid)
        if kind != TREE:
            exception_string = (
                f"TreeReader - read_tree: Object {oid} is a {kind}, not a tree."
            )
            logging.error(exception_string)
            raise WrongObjectKind(exception_string)
        return content

    def list_tree(self, oid, name_only=False):
        """List the entries of a tree, or only their names if `name_only`."""
        entries = self.read_tree(oid)
        logging.debug(
            "TreeReader - list_tree: Tree %s has %s entries", oid, len(entries)
        )
        if name_only:
            return [entry.name for entry in entries]
        return entries

    def walk_tree(self, oid, prefix=""):
        """Yield `(path, TreeEntry)` for every entry below the tree `oid`,
        depth-first. Paths are joined with '/'."""
        for entry in self.read_tree(oid):
            path = f"{prefix}{entry.name}"
            yield path, entry
            if entry.kind == TREE:
                yield from self.walk_tree(entry.oid, prefix=f"{path}/")
