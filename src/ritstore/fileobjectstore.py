"""Core module for FileObjectStore"""

import atexit
import io
import shutil
import threading
import os
import logging
import zlib
from itertools import chain
from pathlib import Path
from contextlib import closing
from tempfile import NamedTemporaryFile
import yaml
from ritstore import objectstore_config
from ritstore.objectstore import ObjectStore, ObjectInfo
from ritstore.objectcodec import BLOB, decode, encode_tree, frame_header, parse_header
from ritstore.objecthasher import check_oid, fingerprint, fingerprint_chunks, new_hash
from ritstore.objectstore_exceptions import (
    CorruptObject,
    MalformedObject,
    NonMatchingObjectId,
    ObjectNotFound,
    WrongObjectKind,
)
from ritstore.treebuilder import TreeBuilder
from ritstore.treereader import TreeReader


class FileObjectStore(ObjectStore):
    """FileObjectStore is a git-style object database on the local file system. Blobs
    and trees are framed, addressed by the SHA-1 hex digest of their framing,
    compressed according to the store's policy and written once to a sharded path
    under `<store_path>/objects`.

    FileObjectStore initializes using a given properties dictionary containing the
    required keys (see Args). Upon initialization, FileObjectStore verifies the provided
    properties and attempts to write a configuration file 'objectstore.yaml' to the
    given store path directory. Initializing twice with the same properties is safe
    and simply reopens the store, so an instance doubles as the handle threaded
    through every operation.

    :param dict properties: A Python dictionary with the following keys (and values):
        - store_path (str): Path to the store directory (ex. "<worktree>/.rit").
        - store_depth (int): Depth when sharding an object id.
        - store_width (int): Width of directories when sharding an object id.
        - store_compression (str): "zlib" or "none", applied to every object.
    """

    # Property (objectstore configuration) requirements
    property_required_keys = [
        "store_path",
        "store_depth",
        "store_width",
        "store_compression",
    ]
    # Permissions settings for writing files and creating directories
    fmode = 0o664
    dmode = 0o755
    # Bytes read per iteration when scanning an object header
    header_read_size = 256

    def __init__(self, properties=None):
        # Variables to orchestrate concurrent writes of the same object id
        self.object_lock = threading.Lock()
        self.object_condition = threading.Condition(self.object_lock)
        self.object_locked_oids = []
        # Now check properties
        if properties:
            # Validate properties against existing configuration if present
            checked_properties = self._validate_properties(properties)
            (
                prop_store_path,
                prop_store_depth,
                prop_store_width,
                prop_store_compression,
            ) = [
                checked_properties[property_name]
                for property_name in self.property_required_keys
            ]
            prop_store_path = os.fspath(prop_store_path)

            # Check to see if a configuration is present in the given store path
            self.objectstore_configuration_yaml = os.path.join(
                prop_store_path, objectstore_config.CONFIG_FILE_NAME
            )
            self._verify_objectstore_properties(properties, prop_store_path)

            # If no exceptions thrown, FileObjectStore ready for initialization
            logging.debug("FileObjectStore - Initializing, properties verified.")
            self.root = prop_store_path
            self.depth = int(prop_store_depth)
            self.width = int(prop_store_width)
            self.compression = prop_store_compression
            # Write 'objectstore.yaml' to store path
            if not os.path.exists(self.objectstore_configuration_yaml):
                logging.debug(
                    "FileObjectStore - ObjectStore does not exist & configuration file not"
                    + " found. Writing configuration file."
                )
                self._write_properties(properties)
            # Complete initialization by setting and creating store directories
            self.objects = self.root + "/objects"
            self.refs = self.root + "/refs"
            self.head = self.root + "/HEAD"
            if not os.path.exists(self.objects + "/tmp"):
                self._create_path(self.objects + "/tmp")
            refs_heads_path = self._get_store_path("refs") / "heads"
            if not os.path.exists(refs_heads_path):
                self._create_path(refs_heads_path)
            if not os.path.exists(self.head):
                with open(self.head, "w", encoding="utf-8") as head_file:
                    head_file.write(objectstore_config.HEAD_REF)
            logging.debug(
                "FileObjectStore - Initialization success. Store root: %s", self.root
            )
        else:
            # Cannot instantiate or initialize FileObjectStore without config
            exception_string = (
                "FileObjectStore - ObjectStore properties must be supplied."
                + f" Properties: {properties}"
            )
            logging.debug(exception_string)
            raise ValueError(exception_string)

    # Configuration and Related Methods

    @staticmethod
    def _load_properties(objectstore_yaml_path, objectstore_required_prop_keys):
        """Get and return the contents of the current ObjectStore configuration.

        :return: ObjectStore properties with the following keys (and values):
            - ``store_depth`` (int): Depth when sharding an object id.
            - ``store_width`` (int): Width of directories when sharding an object id.
            - ``store_compression`` (str): Compression applied to every object.
        :rtype: dict
        """
        if not os.path.exists(objectstore_yaml_path):
            exception_string = (
                "FileObjectStore - load_properties: objectstore.yaml not found"
                + " in store root path."
            )
            logging.critical(exception_string)
            raise FileNotFoundError(exception_string)

        # Open file
        with open(objectstore_yaml_path, "r", encoding="utf-8") as os_yaml_file:
            yaml_data = yaml.safe_load(os_yaml_file)

        # Get objectstore properties
        objectstore_yaml_dict = {}
        for key in objectstore_required_prop_keys:
            if key != "store_path":
                objectstore_yaml_dict[key] = yaml_data[key]
        logging.debug(
            "FileObjectStore - load_properties: Successfully retrieved 'objectstore.yaml'"
            + " properties."
        )
        return objectstore_yaml_dict

    def _write_properties(self, properties):
        """Writes 'objectstore.yaml' to FileObjectStore's root directory with the
        respective properties object supplied.

        :param properties: A Python dictionary with the following keys (and values):
            - ``store_depth`` (int): Depth when sharding an object id.
            - ``store_width`` (int): Width of directories when sharding an object id.
            - ``store_compression`` (str): Compression applied to every object.
        :type properties: dict
        """
        # If objectstore.yaml already exists, must throw exception and proceed with caution
        if os.path.exists(self.objectstore_configuration_yaml):
            exception_string = (
                "FileObjectStore - write_properties: configuration file"
                + " 'objectstore.yaml' already exists."
            )
            logging.error(exception_string)
            raise FileExistsError(exception_string)
        # Validate properties
        checked_properties = self._validate_properties(properties)

        # Collect configuration properties from validated & supplied dictionary
        (_, store_depth, store_width, store_compression) = [
            checked_properties[property_name]
            for property_name in self.property_required_keys
        ]

        if store_compression not in objectstore_config.ACCEPTED_COMPRESSION:
            exception_string = (
                f"FileObjectStore - write_properties: compression supplied ({store_compression})"
                + " cannot be used for ObjectStore. Must be one of: "
                + f"{', '.join(objectstore_config.ACCEPTED_COMPRESSION)}"
            )
            logging.error(exception_string)
            raise ValueError(exception_string)
        if int(store_width) < 1 or int(store_depth) < 0:
            exception_string = (
                "FileObjectStore - write_properties: store_width must be > 0 and"
                + f" store_depth >= 0. Width: {store_width}, depth: {store_depth}"
            )
            logging.error(exception_string)
            raise ValueError(exception_string)
        if int(store_width) * int(store_depth) >= 40:
            exception_string = (
                "FileObjectStore - write_properties: store_width * store_depth must leave"
                + " characters of the object id for the file name."
            )
            logging.error(exception_string)
            raise ValueError(exception_string)

        # If given store path doesn't exist yet, create it.
        if not os.path.exists(self.root):
            self._create_path(self.root)

        # .yaml file to write
        objectstore_configuration_yaml = self._build_objectstore_yaml_string(
            int(store_depth),
            int(store_width),
            store_compression,
        )
        # Write 'objectstore.yaml'
        with open(
            self.objectstore_configuration_yaml, "w", encoding="utf-8"
        ) as os_yaml_file:
            os_yaml_file.write(objectstore_configuration_yaml)

        logging.debug(
            "FileObjectStore - write_properties: Configuration file written to: %s",
            self.objectstore_configuration_yaml,
        )
        return

    @staticmethod
    def _build_objectstore_yaml_string(store_depth, store_width, store_compression):
        """Build a YAML string representing the configuration for an ObjectStore.

        :param int store_depth: Depth when sharding an object id.
        :param int store_width: Width of directories when sharding an object id.
        :param str store_compression: Compression applied to every object.

        :return: A YAML string representing the configuration for an ObjectStore.
        :rtype: str
        """
        objectstore_configuration_yaml = f"""
        # Configuration variables for ObjectStore

        ############### Directory Structure ###############
        # Desired amount of directories when sharding an object to form the permanent address
        store_depth: {store_depth}  # WARNING: DO NOT CHANGE UNLESS SETTING UP NEW OBJECTSTORE
        # Width of directories created when sharding an object to form the permanent address
        store_width: {store_width}  # WARNING: DO NOT CHANGE UNLESS SETTING UP NEW OBJECTSTORE
        # Example:
        # Below, objects are shown listed in directories that are 1 level deep (DIR_DEPTH=1),
        # with each directory consisting of 2 characters (DIR_WIDTH=2).
        #    .rit/objects
        #    └── b6
        #        └── fc4c620b67d95f953a5c1c1230aaab5db5a1b0

        ############### Compression ###############
        # Compression applied to every object written to and read from this store
        store_compression: "{store_compression}"  # WARNING: DO NOT CHANGE
        """
        return objectstore_configuration_yaml

    def _verify_objectstore_properties(self, properties, prop_store_path):
        """Determines whether FileObjectStore can instantiate by validating a set of
        arguments and throwing exceptions. ObjectStore will not instantiate if an
        existing configuration file's properties (`objectstore.yaml`) are different
        from what is supplied - or if an object directory exists at the given path,
        but it is missing the `objectstore.yaml` config file.

        :param dict properties: ObjectStore properties.
        :param str prop_store_path: Store path to check.
        """
        if os.path.exists(self.objectstore_configuration_yaml):
            logging.debug(
                "FileObjectStore - Config found (objectstore.yaml) at {%s}. Verifying"
                + " properties.",
                self.objectstore_configuration_yaml,
            )
            # If 'objectstore.yaml' is found, verify given properties before init
            objectstore_yaml_dict = self._load_properties(
                self.objectstore_configuration_yaml, self.property_required_keys
            )
            for key in self.property_required_keys:
                # 'store_path' is required to init ObjectStore but not saved in the yaml
                if key != "store_path":
                    supplied_key = properties[key]
                    if key == "store_depth" or key == "store_width":
                        supplied_key = int(properties[key])
                    if objectstore_yaml_dict[key] != supplied_key:
                        exception_string = (
                            f"FileObjectStore - Given properties ({key}: {properties[key]})"
                            + " does not match. ObjectStore configuration"
                            + f" ({key}: {objectstore_yaml_dict[key]})"
                            + f" found at: {self.objectstore_configuration_yaml}"
                        )
                        logging.critical(exception_string)
                        raise ValueError(exception_string)
        else:
            if os.path.isdir(os.path.join(prop_store_path, "objects")):
                exception_string = (
                    "FileObjectStore - Unable to initialize ObjectStore. `objectstore.yaml`"
                    + " is not present but an '/objects' directory exists. Please delete"
                    + " it or supply a new path."
                )
                logging.critical(exception_string)
                raise RuntimeError(exception_string)

    def _validate_properties(self, properties):
        """Validate a properties dictionary by checking if it contains all the
        required keys and non-None values.

        :param dict properties: Dictionary containing fileobjectstore properties.

        :raises KeyError: If key is missing from the required keys.
        :raises ValueError: If value is missing for a required key.

        :return: The given properties object (that has been validated).
        :rtype: dict
        """
        if not isinstance(properties, dict):
            exception_string = (
                "FileObjectStore - _validate_properties: Invalid argument -"
                + " expected a dictionary."
            )
            logging.debug(exception_string)
            raise ValueError(exception_string)

        for key in self.property_required_keys:
            if key not in properties:
                exception_string = (
                    "FileObjectStore - _validate_properties: Missing required"
                    + f" key: {key}."
                )
                logging.debug(exception_string)
                raise KeyError(exception_string)
            if properties.get(key) is None:
                exception_string = (
                    "FileObjectStore - _validate_properties: Value for key:"
                    + f" {key} is none."
                )
                logging.debug(exception_string)
                raise ValueError(exception_string)
        return properties

    # Public API / ObjectStore Interface Methods

    def hash_object(self, data, write=False):
        logging.debug(
            "FileObjectStore - hash_object: Request to hash object (write: %s).", write
        )
        self._check_arg_data(data)
        if isinstance(data, (bytes, bytearray, memoryview)):
            data = io.BytesIO(bytes(data))

        stream = Stream(data)
        with closing(stream):
            size = stream.size
            header = frame_header(BLOB, size)
            oid = fingerprint_chunks(chain([header], stream))
            is_duplicate = False
            if write:
                # Stream supports successive reads, the second pass feeds the tmp file
                written = self._write_chunks(oid, lambda: chain([header], stream))
                is_duplicate = not written

        logging.info(
            "FileObjectStore - hash_object: Hashed blob with oid: %s (size: %s, written: %s)",
            oid,
            size,
            write and not is_duplicate,
        )
        return ObjectInfo(oid, BLOB, size, is_duplicate)

    def write_object(self, oid, framed):
        logging.debug(
            "FileObjectStore - write_object: Request to write object for oid: %s", oid
        )
        self._check_oid(oid)
        if not isinstance(framed, (bytes, bytearray, memoryview)):
            exception_string = (
                "FileObjectStore - write_object: framed object must be bytes,"
                + f" type supplied: {type(framed)}"
            )
            logging.error(exception_string)
            raise TypeError(exception_string)
        framed = bytes(framed)
        calculated_oid = fingerprint(framed)
        if calculated_oid != oid:
            exception_string = (
                f"FileObjectStore - write_object: oid supplied ({oid}) does not match the"
                + f" fingerprint of the framed bytes ({calculated_oid}). Object not written."
            )
            logging.error(exception_string)
            raise NonMatchingObjectId(exception_string)

        written = self._write_chunks(oid, lambda: [framed])
        logging.debug(
            "FileObjectStore - write_object: Finished for oid: %s (written: %s)",
            oid,
            written,
        )
        return written

    def read_object(self, oid, verify=False):
        logging.debug(
            "FileObjectStore - read_object: Request to read object for oid: %s", oid
        )
        self._check_oid(oid)
        abs_file_path = self._build_path(oid)
        if not os.path.isfile(abs_file_path):
            exception_string = (
                f"FileObjectStore - read_object: No object found for oid: {oid}"
            )
            logging.error(exception_string)
            raise ObjectNotFound(exception_string)

        with open(abs_file_path, "rb") as obj_file:
            stored_bytes = obj_file.read()

        if self.compression == "zlib":
            try:
                framed = zlib.decompress(stored_bytes)
            except zlib.error as err:
                exception_string = (
                    f"FileObjectStore - read_object: Unable to decompress object: {oid}."
                    + f" Error: {err}"
                )
                logging.error(exception_string)
                raise CorruptObject(exception_string) from err
        else:
            framed = stored_bytes

        if verify:
            calculated_oid = fingerprint(framed)
            if calculated_oid != oid:
                exception_string = (
                    f"FileObjectStore - read_object: Object stored at {oid} hashes to"
                    + f" {calculated_oid}."
                )
                logging.error(exception_string)
                raise CorruptObject(exception_string)
        return framed

    def retrieve_object(self, oid):
        logging.debug(
            "FileObjectStore - retrieve_object: Request to retrieve object for oid: %s",
            oid,
        )
        framed = self.read_object(oid)
        try:
            kind, content = decode(framed)
        except (MalformedObject, CorruptObject) as err:
            exception_string = (
                f"FileObjectStore - retrieve_object: Unable to decode object: {oid}."
                + f" Error: {err}"
            )
            logging.error(exception_string)
            raise
        logging.info(
            "FileObjectStore - retrieve_object: Retrieved %s object for oid: %s",
            kind,
            oid,
        )
        return kind, content

    def retrieve_blob(self, oid):
        kind, content = self.retrieve_object(oid)
        if kind != BLOB:
            exception_string = (
                f"FileObjectStore - retrieve_blob: Object {oid} is a {kind}, not a blob."
            )
            logging.error(exception_string)
            raise WrongObjectKind(exception_string)
        return content

    def get_object_info(self, oid):
        logging.debug(
            "FileObjectStore - get_object_info: Request to read header for oid: %s", oid
        )
        self._check_oid(oid)
        abs_file_path = self._build_path(oid)
        if not os.path.isfile(abs_file_path):
            exception_string = (
                f"FileObjectStore - get_object_info: No object found for oid: {oid}"
            )
            logging.error(exception_string)
            raise ObjectNotFound(exception_string)

        # Only the header is needed, stop decompressing once its NUL has been seen
        head = b""
        decompressor = zlib.decompressobj() if self.compression == "zlib" else None
        with open(abs_file_path, "rb") as obj_file:
            while b"\x00" not in head:
                chunk = obj_file.read(self.header_read_size)
                if not chunk:
                    break
                if decompressor is not None:
                    try:
                        chunk = decompressor.decompress(chunk)
                    except zlib.error as err:
                        exception_string = (
                            "FileObjectStore - get_object_info: Unable to decompress"
                            + f" object: {oid}. Error: {err}"
                        )
                        logging.error(exception_string)
                        raise CorruptObject(exception_string) from err
                head += chunk
        if decompressor is not None and b"\x00" not in head:
            exception_string = (
                "FileObjectStore - get_object_info: Object header could not be"
                + f" decompressed, object is empty or truncated: {oid}"
            )
            logging.error(exception_string)
            raise CorruptObject(exception_string)
        kind, size, _ = parse_header(head)
        return ObjectInfo(oid, kind, size)

    def write_tree(self, entries):
        framed = encode_tree(entries)
        oid = fingerprint(framed)
        self.write_object(oid, framed)
        logging.debug("FileObjectStore - write_tree: Wrote tree with oid: %s", oid)
        return oid

    def build_tree(self, path):
        logging.debug(
            "FileObjectStore - build_tree: Request to build tree for path: %s", path
        )
        oid = TreeBuilder(self).build(path)
        logging.info(
            "FileObjectStore - build_tree: Built tree %s for path: %s", oid, path
        )
        return oid

    def list_tree(self, oid, name_only=False):
        return TreeReader(self).list_tree(oid, name_only=name_only)

    def walk_tree(self, oid):
        """Recursively iterate over a tree, yielding `(path, TreeEntry)` pairs
        depth-first in stored order.

        :param str oid: Object id of a tree.
        """
        return TreeReader(self).walk_tree(oid)

    def exists(self, oid):
        self._check_oid(oid)
        return os.path.isfile(self._build_path(oid))

    # FileObjectStore Core Methods

    def _write_chunks(self, oid, chunk_source):
        """Write the framed bytes produced by `chunk_source` to the permanent address
        of `oid` unless an object is already there. Writes of the same oid are
        serialized; the bytes go through a tmp file, are hashed while written, and
        are moved into place only when the digest equals `oid`.

        :param str oid: Object id the bytes must hash to.
        :param callable chunk_source: Returns an iterable of framed byte chunks.

        :raises NonMatchingObjectId: If the written bytes do not hash to `oid`.

        :return: True if the object was written, False if it already existed.
        :rtype: bool
        """
        sync_wait_msg = f"FileObjectStore - _write_chunks: Oid ({oid}) is locked. Waiting."
        with self.object_condition:
            while oid in self.object_locked_oids:
                logging.debug(sync_wait_msg)
                self.object_condition.wait()
            logging.debug(
                "FileObjectStore - _write_chunks: Adding oid (%s) to locked list.", oid
            )
            self.object_locked_oids.append(oid)
        try:
            abs_file_path = self._build_path(oid)
            if os.path.isfile(abs_file_path):
                logging.debug(
                    "FileObjectStore - _write_chunks: Object exists at: %s, skipping write.",
                    abs_file_path,
                )
                return False

            tmp_file_name, tmp_oid = self._write_to_tmp_file_and_get_oid(
                chunk_source()
            )
            if tmp_oid != oid:
                self._delete(tmp_file_name)
                exception_string = (
                    f"FileObjectStore - _write_chunks: Bytes written hash to {tmp_oid},"
                    + f" expected {oid}. Tmp file deleted, object not stored."
                )
                logging.error(exception_string)
                raise NonMatchingObjectId(exception_string)

            self._create_path(os.path.dirname(abs_file_path))
            try:
                logging.debug(
                    "FileObjectStore - _write_chunks: Moving tmp file to permanent"
                    + " location: %s",
                    abs_file_path,
                )
                shutil.move(tmp_file_name, abs_file_path)
            except Exception as err:
                exception_string = (
                    "FileObjectStore - _write_chunks: Unexpected error moving tmp file to:"
                    + f" {abs_file_path}. Error: {err}"
                )
                logging.error(exception_string)
                self._delete(tmp_file_name)
                raise
            return True
        finally:
            with self.object_condition:
                logging.debug(
                    "FileObjectStore - _write_chunks: Releasing oid (%s) from locked list",
                    oid,
                )
                self.object_locked_oids.remove(oid)
                self.object_condition.notify_all()

    def _write_to_tmp_file_and_get_oid(self, chunks):
        """Create a named temporary file from an iterable of framed byte chunks,
        compressing them according to the store policy, and return its filename and
        the object id calculated over the uncompressed chunks.

        :param iterable chunks: Framed object bytes.

        :return: tuple - tmp.name, oid
            - tmp.name (str): Name of the temporary file created and written into.
            - oid (str): Hex SHA-1 digest of the uncompressed bytes.
        """
        tmp_root_path = self._get_store_path("objects") / "tmp"
        tmp = self._mktmpfile(tmp_root_path)
        logging.debug(
            "FileObjectStore - _write_to_tmp_file_and_get_oid: tmp file created: %s",
            tmp.name,
        )

        tmp_file_completion_flag = False
        try:
            hashobj = new_hash()
            compressor = zlib.compressobj() if self.compression == "zlib" else None
            # tmp is a file-like object that is already opened for writing by default
            with tmp as tmp_file:
                for chunk in chunks:
                    hashobj.update(chunk)
                    if compressor is not None:
                        chunk = compressor.compress(chunk)
                    tmp_file.write(chunk)
                if compressor is not None:
                    tmp_file.write(compressor.flush())
            tmp_file_completion_flag = True
            logging.debug(
                "FileObjectStore - _write_to_tmp_file_and_get_oid: Object bytes"
                + " successfully written to tmp file: %s",
                tmp.name,
            )
            return tmp.name, hashobj.hexdigest()
        except Exception as err:
            exception_string = (
                "FileObjectStore - _write_to_tmp_file_and_get_oid:"
                + f" Unexpected {err=}, {type(err)=}"
            )
            logging.error(exception_string)
            raise
        finally:
            if not tmp_file_completion_flag and os.path.exists(tmp.name):
                os.remove(tmp.name)

    def _mktmpfile(self, path):
        """Create a temporary file at the given path ready to be written.

        :param str path: Path to the file location.

        :return: file object - object with a file-like interface.
        """
        # Physically create directory if it doesn't exist
        if os.path.exists(path) is False:
            self._create_path(path)

        tmp = NamedTemporaryFile(dir=path, delete=False)

        # Delete tmp file if python interpreter crashes or thread is interrupted
        def delete_tmp_file():
            if os.path.exists(tmp.name):
                os.remove(tmp.name)

        atexit.register(delete_tmp_file)

        # Ensure tmp file is created with desired permissions
        if self.fmode is not None:
            oldmask = os.umask(0)
            try:
                os.chmod(tmp.name, self.fmode)
            finally:
                os.umask(oldmask)
        return tmp

    # FileObjectStore Utility & Supporting Methods

    @staticmethod
    def _check_arg_data(data):
        """Checks a data argument to ensure that it is either bytes, a string path, a
        path, or a binary stream object.

        :param data: Object to validate.
        :type data: bytes, str, os.PathLike, io.BufferedIOBase

        :return: True if valid.
        :rtype: bool
        """
        if not isinstance(
            data, (bytes, bytearray, memoryview, str, Path, io.BufferedIOBase)
        ):
            exception_string = (
                "FileObjectStore - _check_arg_data: Data must be bytes, a path, string or"
                + f" buffered stream type. Data type supplied: {type(data)}"
            )
            logging.error(exception_string)
            raise TypeError(exception_string)
        if isinstance(data, str):
            if data.strip() == "":
                exception_string = (
                    "FileObjectStore - _check_arg_data: Data string cannot be empty."
                )
                logging.error(exception_string)
                raise TypeError(exception_string)
        return True

    @staticmethod
    def _check_oid(oid):
        """Check that `oid` is a well-formed object id; throws a `ValueError` if not.

        :param str oid: Value to check.
        """
        try:
            check_oid(oid)
        except ValueError as err:
            logging.error("FileObjectStore - _check_oid: %s", err)
            raise

    def _shard(self, digest):
        """Generates a list given a digest of `self.depth` number of tokens with width
        `self.width` from the first part of the digest plus the remainder.

        Example:
            ['b6', 'fc4c620b67d95f953a5c1c1230aaab5db5a1b0']

        :param str digest: The string to be divided into tokens.

        :return: A list containing the tokens of fixed width.
        :rtype: list
        """

        def compact(items):
            """Return only truthy elements of `items`."""
            return [item for item in items if item]

        # This creates a list of `depth` number of tokens with width
        # `width` from the first part of the id plus the remainder.
        hierarchical_list = compact(
            [digest[i * self.width : self.width * (i + 1)] for i in range(self.depth)]
            + [digest[self.depth * self.width :]]
        )

        return hierarchical_list

    def _delete(self, file):
        """Delete a file by path. No exception is raised if file doesn't exist.

        :param str file: Path of file.
        """
        if not os.path.exists(file):
            return None

        try:
            os.remove(file)
        except OSError as err:
            exception_string = (
                f"FileObjectStore - _delete: Unexpected {err=}, {type(err)=}"
            )
            logging.error(exception_string)
            raise err

    def _create_path(self, path):
        """Physically create the folder path (and all intermediate ones) on disk.

        :param str path: The path to create.
        :raises AssertionError: If the path already exists but is not a directory.
        """
        try:
            os.makedirs(path, self.dmode)
        except FileExistsError:
            assert os.path.isdir(path), f"expected {path} to be a directory"

    def _build_path(self, oid):
        """Build the absolute file path for a given object id.

        :param str oid: An object id to build a file path for.

        :return: An absolute file path for the specified object id.
        :rtype: str
        """
        paths = self._shard(oid)
        root_dir = self._get_store_path("objects")
        absolute_path = os.path.join(root_dir, *paths)
        return absolute_path

    def _get_store_path(self, entity):
        """Return a path object of a root directory of the store.

        :param str entity: Desired entity type: "objects" or "refs"

        :return: Path to requested store entity type
        :rtype: Path
        """
        if entity == "objects":
            return Path(self.objects)
        elif entity == "refs":
            return Path(self.refs)
        else:
            raise ValueError(
                f"entity: {entity} does not exist. Do you mean 'objects' or 'refs'?"
            )

    def _count(self, entity):
        """Return the count of the number of files stored for an entity, ignoring
        in-flight tmp files.

        :param str entity: Desired entity type (ex. "objects", "refs").

        :return: Number of files in the directory.
        :rtype: int
        """
        count = 0
        directory_to_count = self._get_store_path(entity)
        for root, dirs, files in os.walk(directory_to_count):
            if Path(root) == directory_to_count and "tmp" in dirs:
                dirs.remove("tmp")
            count += len(files)
        return count


class Stream(object):
    """Common interface for file-like objects.

    The input `obj` can be a file-like object or a path to a file. If `obj` is
    a path to a file, then it will be opened until :meth:`close` is called.
    If `obj` is a file-like object, then its original position will be
    restored when :meth:`close` is called instead of closing the object
    automatically. Closing of the stream is deferred to whatever process passed
    the stream in.

    Successive readings of the stream is supported without having to manually
    set its position back to ``0``.
    """

    def __init__(self, obj):
        if hasattr(obj, "read"):
            pos = obj.tell()
        elif isinstance(obj, (str, Path)):
            # Missing files and directories surface as OSError
            obj = io.open(obj, "rb")
            pos = None
        else:
            raise ValueError("Object must be a valid file path or a readable object")

        try:
            file_stat = os.stat(obj.name)
            buffer_size = file_stat.st_blksize
        except (AttributeError, TypeError, OSError):
            # In-memory streams have no name on disk
            buffer_size = 8192

        self._obj = obj
        self._pos = pos
        self._buffer_size = buffer_size

    @property
    def size(self):
        """Number of bytes the stream yields when iterated."""
        current = self._obj.tell()
        self._obj.seek(0, io.SEEK_END)
        size = self._obj.tell()
        self._obj.seek(current)
        return size

    def __iter__(self):
        """Read underlying IO object and yield results. Return object to
        original position if we didn't open it originally.
        """
        self._obj.seek(0)

        while True:
            data = self._obj.read(self._buffer_size)

            if not data:
                break

            yield data

        if self._pos is not None:
            self._obj.seek(self._pos)

    def close(self):
        """Close underlying IO object if we opened it, else return it to
        original position.
        """
        if self._pos is None:
            self._obj.close()
        else:
            self._obj.seek(self._pos)
