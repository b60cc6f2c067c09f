"""ObjectStore Interface"""
from abc import ABC, abstractmethod
from collections import namedtuple
import importlib.metadata
import importlib.util


class ObjectStore(ABC):
    """ObjectStore is a content-addressable object database modeled on git's plumbing
    layer. Blobs (file contents) and trees (ordered, named lists of child objects) are
    framed as ``<kind> <size>\\0<payload>`` and addressed by the SHA-1 hex digest of
    that framing (the object id)."""

    @staticmethod
    def version():
        """Return the version number"""
        __version__ = importlib.metadata.version("ritstore")
        return __version__

    @abstractmethod
    def hash_object(self, data, write=False):
        """Compute the object id of `data` framed as a blob and, if `write` is True,
        persist the blob. The content is streamed: a file path or stream is never
        loaded into memory as a whole.

        Writing is idempotent. If the blob is already stored, nothing is written and
        the returned `ObjectInfo` has `is_duplicate` set to True.

        :param mixed data: Bytes of the file content, or a path (str or Path) to a
            file, or a binary stream.
        :param bool write: Persist the blob when True.

        :return: ObjectInfo - object id, kind ('blob'), payload size and duplicate
            status.
        """
        raise NotImplementedError()

    @abstractmethod
    def write_object(self, oid, framed):
        """Persist framed object bytes under the given object id. The location of the
        object is derived from `oid` (first characters select a shard directory, the
        remainder the file name). If an object already exists at `oid` the call is a
        no-op: content addressing guarantees that existing content is identical.

        The object is written to a temporary file and verified against `oid` before
        being moved into place, so a reader never observes a partially written
        object.

        :param str oid: Object id (hex SHA-1 of `framed`).
        :param bytes framed: Framed object bytes.

        :raises NonMatchingObjectId: If `framed` does not hash to `oid`.

        :return: bool - True if the object was written, False if it already existed.
        """
        raise NotImplementedError()

    @abstractmethod
    def read_object(self, oid, verify=False):
        """Load the framed bytes of an object, decompressing them if the store
        compresses objects.

        :param str oid: Object id.
        :param bool verify: Re-hash the loaded bytes and compare with `oid`.

        :raises ObjectNotFound: If no object exists at `oid`.
        :raises CorruptObject: If the object cannot be decompressed, or does not
            hash back to `oid` when `verify` is True.

        :return: bytes - Framed object bytes.
        """
        raise NotImplementedError()

    @abstractmethod
    def retrieve_object(self, oid):
        """Load and decode an object.

        :param str oid: Object id.

        :return: tuple - ('blob', bytes) or ('tree', list of TreeEntry).
        """
        raise NotImplementedError()

    @abstractmethod
    def retrieve_blob(self, oid):
        """Load a blob and return its payload.

        :param str oid: Object id of a blob.

        :raises ObjectNotFound: If no object exists at `oid`.
        :raises WrongObjectKind: If `oid` references a tree.

        :return: bytes - File content stored in the blob.
        """
        raise NotImplementedError()

    @abstractmethod
    def get_object_info(self, oid):
        """Read the header of a stored object.

        :param str oid: Object id.

        :return: ObjectInfo - object id, kind and payload size.
        """
        raise NotImplementedError()

    @abstractmethod
    def write_tree(self, entries):
        """Encode and persist a tree object from a sequence of `TreeEntry`. Entries are
        stored in canonical order, so the same set of entries always produces the
        same object id.

        :param iterable entries: Tree entries, in any order.

        :return: str - Object id of the tree.
        """
        raise NotImplementedError()

    @abstractmethod
    def build_tree(self, path):
        """Snapshot a directory: store every regular file as a blob and every
        subdirectory as a tree, bottom-up, and return the id of the root tree.

        :param str path: Directory to snapshot.

        :return: str - Object id of the root tree.
        """
        raise NotImplementedError()

    @abstractmethod
    def list_tree(self, oid, name_only=False):
        """List the entries of a tree in stored order.

        :param str oid: Object id of a tree.
        :param bool name_only: Return only the entry names.

        :raises WrongObjectKind: If `oid` references a blob.

        :return: list - TreeEntry objects, or names when `name_only` is True.
        """
        raise NotImplementedError()

    @abstractmethod
    def exists(self, oid):
        """Check whether an object is stored.

        :param str oid: Object id.

        :return: bool - True if the object exists.
        """
        raise NotImplementedError()


class ObjectStoreFactory:
    """A factory class for creating `ObjectStore`-like objects.

    The `ObjectStoreFactory` class serves as a factory for creating `ObjectStore`-like
    objects, which are classes that implement the 'ObjectStore' abstract methods.

    This factory class provides a method to retrieve an `ObjectStore` object based on a
    given module (e.g., "ritstore.fileobjectstore") and class name (e.g.,
    "FileObjectStore").
    """

    @staticmethod
    def get_objectstore(module_name, class_name, properties=None):
        """Get an `ObjectStore`-like object based on the specified `module_name` and
        `class_name`.

        :param str module_name: Name of the package (e.g., "ritstore.fileobjectstore").
        :param str class_name: Name of the class in the given module (e.g.,
            "FileObjectStore").
        :param dict properties: Desired ObjectStore properties. Example Properties
            Dictionary:
            {
                "store_path": "/home/user/project/.rit",
                "store_depth": 1,
                "store_width": 2,
                "store_compression": "zlib"
            }

        :return: ObjectStore - An object store based on the given `module_name` and
            `class_name`.

        :raises ModuleNotFoundError: If the module is not found.
        :raises AttributeError: If the class does not exist within the module.
        """
        # Validate module
        if importlib.util.find_spec(module_name) is None:
            raise ModuleNotFoundError(f"No module found for '{module_name}'")

        # Get ObjectStore
        imported_module = importlib.import_module(module_name)

        # If class is not part of module, raise error
        if hasattr(imported_module, class_name):
            objectstore_class = getattr(imported_module, class_name)
            return objectstore_class(properties=properties)
        raise AttributeError(
            f"Class name '{class_name}' is not an attribute of module '{module_name}'"
        )


class ObjectInfo(namedtuple("ObjectInfo", ["oid", "kind", "size", "is_duplicate"])):
    """Represents what is known about a stored or hashed object.

    :param str oid: Object id (hex SHA-1 of the framed object).
    :param str kind: 'blob' or 'tree'.
    :param int size: Payload size in bytes (the framing header is not counted).
    :param bool is_duplicate: True if a write found the object already stored.
    """

    def __new__(cls, oid, kind, size, is_duplicate=False):
        return super(ObjectInfo, cls).__new__(cls, oid, kind, size, is_duplicate)
