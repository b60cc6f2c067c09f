"""ObjectStore Command Line App"""
import logging
import os
import sys
from argparse import ArgumentParser
from pathlib import Path
import yaml
from ritstore import ObjectStoreFactory, objectstore_config
from ritstore.objectcodec import BLOB, TREE
from ritstore.objectstore_exceptions import (
    CorruptObject,
    MalformedObject,
    NonMatchingObjectId,
    ObjectNotFound,
    WrongObjectKind,
)

# Exit status per exception type, checked in order
EXIT_CODES = [
    (ObjectNotFound, 2),
    (MalformedObject, 3),
    (WrongObjectKind, 4),
    (CorruptObject, 5),
    (NonMatchingObjectId, 6),
    (OSError, 74),
    (ValueError, 64),
    (TypeError, 64),
]


class ObjectStoreParser:
    """Class to set up parsing arguments via argparse."""

    def __init__(self):
        """Initialize the argparse 'parser'."""

        program_name = "rit"
        description = (
            "Command line tool to hash, store and inspect blob and tree objects in a"
            + " content-addressable object store."
        )

        self.parser = ArgumentParser(
            prog=program_name,
            description=description,
        )

        self.parser.add_argument(
            "--loglevel",
            dest="logging_level",
            help="Set logging level for the client",
        )
        subparsers = self.parser.add_subparsers(dest="command", required=True)

        # Create a new store in the current directory
        init_parser = subparsers.add_parser(
            "init", help="Create an empty object store"
        )
        init_parser.add_argument(
            "--compression",
            dest="compression",
            default=objectstore_config.COMPRESSION,
            choices=objectstore_config.ACCEPTED_COMPRESSION,
            help="Compression applied to every object",
        )

        hash_object_parser = subparsers.add_parser(
            "hash-object", help="Compute the object id of a file, optionally storing it"
        )
        hash_object_parser.add_argument(
            "-w",
            dest="write",
            action="store_true",
            help="Write the blob into the object store",
        )
        hash_object_parser.add_argument("file_path", help="Path of the file to hash")

        cat_file_parser = subparsers.add_parser(
            "cat-file", help="Show the content, kind or size of an object"
        )
        cat_file_group = cat_file_parser.add_mutually_exclusive_group()
        cat_file_group.add_argument(
            "-p",
            dest="pretty_print",
            action="store_true",
            help="Pretty-print the object content",
        )
        cat_file_group.add_argument(
            "-t", dest="show_kind", action="store_true", help="Show the object kind"
        )
        cat_file_group.add_argument(
            "-s", dest="show_size", action="store_true", help="Show the object size"
        )
        cat_file_parser.add_argument("oid", help="Object id")

        write_tree_parser = subparsers.add_parser(
            "write-tree", help="Snapshot a directory as a tree object"
        )
        write_tree_parser.add_argument(
            "path",
            nargs="?",
            default=None,
            help="Directory to snapshot (default: the working tree root)",
        )

        ls_tree_parser = subparsers.add_parser(
            "ls-tree", help="List the entries of a tree object"
        )
        ls_tree_parser.add_argument(
            "--name-only",
            dest="name_only",
            action="store_true",
            help="List only entry names",
        )
        ls_tree_parser.add_argument(
            "-r",
            dest="recursive",
            action="store_true",
            help="Recurse into subtrees",
        )
        ls_tree_parser.add_argument("oid", help="Object id of a tree")

    def load_store_properties(self, objectstore_yaml):
        """Get and return the contents of the current ObjectStore config file.

        :return: ObjectStore properties with the following keys (and values):
            - store_depth (int): Depth when sharding an object id.
            - store_width (int): Width of directories when sharding an object id.
            - store_compression (str): Compression applied to every object.
        :rtype: dict
        """
        property_required_keys = [
            "store_depth",
            "store_width",
            "store_compression",
        ]

        if not os.path.exists(objectstore_yaml):
            exception_string = (
                "ObjectStoreParser - load_store_properties: objectstore.yaml not found"
                + " in store root path."
            )
            raise FileNotFoundError(exception_string)
        # Open file
        with open(objectstore_yaml, "r", encoding="utf-8") as file:
            yaml_data = yaml.safe_load(file)

        # Get objectstore properties
        objectstore_yaml_dict = {}
        for key in property_required_keys:
            if not isinstance(yaml_data, dict) or key not in yaml_data:
                exception_string = (
                    "ObjectStoreParser - load_store_properties: objectstore.yaml is"
                    + f" missing required key: {key}"
                )
                raise ValueError(exception_string)
            objectstore_yaml_dict[key] = yaml_data[key]
        return objectstore_yaml_dict

    def get_parser_args(self, args=None):
        """Get command line arguments."""
        return self.parser.parse_args(args)


class ObjectStoreClient:
    """Open an ObjectStore and run plumbing commands against it."""

    def __init__(self, properties):
        """Open (or create) the object store described by `properties`.

        :param dict properties: ObjectStore properties, including 'store_path'.
        """
        factory = ObjectStoreFactory()

        # Get ObjectStore from factory
        module_name = "ritstore.fileobjectstore"
        class_name = "FileObjectStore"

        # Instance attributes
        self.objectstore = factory.get_objectstore(module_name, class_name, properties)
        self.worktree = os.path.dirname(os.path.abspath(properties["store_path"]))
        logging.info("ObjectStoreClient - ObjectStore initialized.")

    def hash_object(self, file_path, write):
        """Print the object id of a file, storing the blob if `write`."""
        object_info = self.objectstore.hash_object(file_path, write=write)
        print(object_info.oid)

    def cat_file(self, oid, pretty_print=False, show_kind=False, show_size=False):
        """Print an object's kind, size or content. Without a flag the header line
        (`<kind> <size>`) is printed before the content."""
        if show_kind or show_size:
            object_info = self.objectstore.get_object_info(oid)
            print(object_info.kind if show_kind else object_info.size)
            return

        kind, content = self.objectstore.retrieve_object(oid)
        if not pretty_print:
            object_info = self.objectstore.get_object_info(oid)
            print(f"{object_info.kind} {object_info.size}")
        if kind == BLOB:
            sys.stdout.flush()
            sys.stdout.buffer.write(content)
            sys.stdout.buffer.flush()
        else:
            for entry in content:
                print(self.format_entry(entry))

    def write_tree(self, path=None):
        """Snapshot `path` (the working tree root by default) and print the tree id."""
        if path is None:
            path = self.worktree
        print(self.objectstore.build_tree(path))

    def ls_tree(self, oid, name_only=False, recursive=False):
        """Print the entries of a tree in stored order."""
        if recursive:
            for path, entry in self.objectstore.walk_tree(oid):
                if entry.kind == TREE:
                    continue
                print(path if name_only else self.format_entry(entry, path))
            return
        for entry in self.objectstore.list_tree(oid):
            print(entry.name if name_only else self.format_entry(entry))

    @staticmethod
    def format_entry(entry, path=None):
        """Format a tree entry as `<mode> <kind> <oid>\\t<name>`."""
        mode = entry.mode.zfill(6)
        name = entry.name if path is None else path
        return f"{mode} {entry.kind} {entry.oid}\t{name}"


def find_store_root(path="."):
    """Walk up from `path` and return the first directory holding a store directory,
    or None if there is none."""
    path = os.path.abspath(path)
    while True:
        if os.path.isdir(os.path.join(path, objectstore_config.STORE_DIR_NAME)):
            return path
        parent_path = os.path.dirname(path)
        if parent_path == path:
            return None
        path = parent_path


def default_properties(store_path, compression=objectstore_config.COMPRESSION):
    """Properties for a new store at `store_path`."""
    return {
        "store_path": store_path,
        "store_depth": objectstore_config.DIR_DEPTH,
        "store_width": objectstore_config.DIR_WIDTH,
        "store_compression": compression,
    }


def setup_logging(store_path, logging_level_arg):
    """Send client logs to the log file inside the store."""
    objectstore_py_log = os.path.join(
        store_path, objectstore_config.CLIENT_LOG_FILE_NAME
    )
    python_log_file_path = Path(objectstore_py_log)
    if not os.path.exists(python_log_file_path):
        python_log_file_path.parent.mkdir(parents=True, exist_ok=True)
        open(python_log_file_path, "w", encoding="utf-8").close()
    # Check for logging level
    if logging_level_arg is None:
        logging_level = "INFO"
    else:
        logging_level = logging_level_arg.upper()
    logging.basicConfig(
        filename=python_log_file_path,
        level=logging_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def run(parser, args):
    """Execute a parsed command."""
    command = getattr(args, "command")

    if command == "init":
        store_path = os.path.join(os.getcwd(), objectstore_config.STORE_DIR_NAME)
        ObjectStoreClient(default_properties(store_path, getattr(args, "compression")))
        setup_logging(store_path, getattr(args, "logging_level"))
        logging.info("ObjectStoreClient - Store initialized at: %s", store_path)
        print(f"Initialized rit directory in {store_path}")
        return

    # Can't use client app without first initializing ObjectStore
    worktree = find_store_root()
    if worktree is None:
        raise FileNotFoundError(
            f"Not a rit repository (or any parent up to /): {os.getcwd()}."
            + " ObjectStore must first be initialized, use `rit init`."
        )
    store_path = os.path.join(worktree, objectstore_config.STORE_DIR_NAME)
    setup_logging(store_path, getattr(args, "logging_level"))

    # Instantiate ObjectStore Client
    props = parser.load_store_properties(
        os.path.join(store_path, objectstore_config.CONFIG_FILE_NAME)
    )
    # Reminder: 'objectstore.yaml' does not contain 'store_path'
    props["store_path"] = store_path
    objectstore_c = ObjectStoreClient(props)

    if command == "hash-object":
        objectstore_c.hash_object(getattr(args, "file_path"), getattr(args, "write"))
    elif command == "cat-file":
        objectstore_c.cat_file(
            getattr(args, "oid"),
            pretty_print=getattr(args, "pretty_print"),
            show_kind=getattr(args, "show_kind"),
            show_size=getattr(args, "show_size"),
        )
    elif command == "write-tree":
        objectstore_c.write_tree(getattr(args, "path"))
    elif command == "ls-tree":
        objectstore_c.ls_tree(
            getattr(args, "oid"),
            name_only=getattr(args, "name_only"),
            recursive=getattr(args, "recursive"),
        )
    else:
        raise ValueError(f"Unknown command: {command}")


def main():
    """Entry point of the ObjectStore client."""

    parser = ObjectStoreParser()
    args = parser.get_parser_args()
    try:
        run(parser, args)
    except tuple(exception for exception, _ in EXIT_CODES) as err:
        print(f"fatal: {err}", file=sys.stderr)
        for exception, exit_code in EXIT_CODES:
            if isinstance(err, exception):
                sys.exit(exit_code)


if __name__ == "__main__":
    main()
