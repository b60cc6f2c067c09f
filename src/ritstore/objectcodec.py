"""Canonical byte framing for blob and tree objects.

Every object is framed as ``<kind> <payload length>\\0<payload>``. A blob payload
is the file content as-is. A tree payload is the concatenation of one record per
entry, ``<mode> <name>\\0<20 raw id bytes>``, in git's canonical order: entries
sorted by the bytes of their name, a directory sorting as if its name ended in
``/``. Encoding sorts, decoding returns records in stored order.
"""

from collections import namedtuple
from ritstore.objecthasher import OID_RAW_LENGTH, is_oid, oid_to_raw, raw_to_oid
from ritstore.objectstore_exceptions import CorruptObject, MalformedObject

BLOB = "blob"
TREE = "tree"
OBJECT_KINDS = (BLOB, TREE)

NAME_ENCODING = "utf-8"
NAME_ERRORS = "surrogateescape"


class EntryMode:
    """Tree entry modes, as written into tree payloads."""

    REGULAR_FILE = "100644"
    DIRECTORY = "40000"

    # Mode string -> kind of the object the entry must reference
    kinds = {REGULAR_FILE: BLOB, DIRECTORY: TREE}


class TreeEntry(namedtuple("TreeEntry", ["mode", "name", "oid"])):
    """One named child of a tree object.

    :param str mode: `EntryMode.REGULAR_FILE` or `EntryMode.DIRECTORY`.
    :param str name: Single path segment, not empty, without '/' or NUL.
    :param str oid: Hex object id of the blob or tree the entry references.
    """

    def __new__(cls, mode, name, oid):
        if mode not in EntryMode.kinds:
            raise ValueError(f"Unsupported tree entry mode: {mode}")
        if not isinstance(name, str) or name in ("", ".", ".."):
            raise ValueError(f"Tree entry name cannot be empty or relative: {name!r}")
        if "/" in name or "\x00" in name:
            raise ValueError(
                f"Tree entry name cannot contain a separator or NUL: {name!r}"
            )
        if not is_oid(oid):
            raise ValueError(f"Tree entry oid is not a valid object id: {oid}")
        return super(TreeEntry, cls).__new__(cls, mode, name, oid)

    @property
    def kind(self):
        """Kind of object ('blob' or 'tree') referenced by this entry."""
        return EntryMode.kinds[self.mode]

    def sort_key(self):
        """Canonical ordering key of this entry within its tree."""
        key = self.name.encode(NAME_ENCODING, NAME_ERRORS)
        if self.mode == EntryMode.DIRECTORY:
            key += b"/"
        return key


def frame_header(kind, size):
    """Build the ``<kind> <size>\\0`` header of an object.

    :param str kind: 'blob' or 'tree'.
    :param int size: Payload length in bytes.

    :return: Header bytes.
    :rtype: bytes
    """
    if kind not in OBJECT_KINDS:
        raise ValueError(f"Unsupported object kind: {kind}")
    return f"{kind} {size}\x00".encode("ascii")


def encode_blob(payload):
    """Frame raw file content as a blob object.

    :param bytes payload: File content.

    :return: Framed blob bytes.
    :rtype: bytes
    """
    if not isinstance(payload, (bytes, bytearray, memoryview)):
        raise TypeError(f"Blob payload must be bytes, type supplied: {type(payload)}")
    payload = bytes(payload)
    return frame_header(BLOB, len(payload)) + payload


def sort_entries(entries):
    """Return `entries` in canonical tree order."""
    return sorted(entries, key=TreeEntry.sort_key)


def encode_tree_payload(entries):
    """Concatenate the records of `entries` in canonical order.

    :raises ValueError: If two entries share a name.
    """
    entries = list(entries)
    for entry in entries:
        if not isinstance(entry, TreeEntry):
            raise TypeError(f"Tree entries must be TreeEntry, got: {type(entry)}")
    records = []
    seen_names = set()
    for entry in sort_entries(entries):
        if entry.name in seen_names:
            raise ValueError(f"Duplicate tree entry name: {entry.name}")
        seen_names.add(entry.name)
        records.append(
            entry.mode.encode("ascii")
            + b" "
            + entry.name.encode(NAME_ENCODING, NAME_ERRORS)
            + b"\x00"
            + oid_to_raw(entry.oid)
        )
    return b"".join(records)


def encode_tree(entries):
    """Frame a sequence of `TreeEntry` as a tree object.

    :param iterable entries: Entries of the tree, in any order.

    :return: Framed tree bytes.
    :rtype: bytes
    """
    payload = encode_tree_payload(entries)
    return frame_header(TREE, len(payload)) + payload


def parse_header(framed):
    """Split the header off framed object bytes.

    :param bytes framed: Framed object bytes (at least the full header).

    :raises MalformedObject: If the header is missing its NUL, is not
        ``<kind> <decimal size>``, or names an unknown kind.

    :return: tuple - kind, declared payload size, offset of the payload.
    """
    nul_index = framed.find(b"\x00")
    if nul_index == -1:
        raise MalformedObject("Object header is not terminated by a NUL byte.")
    try:
        header = framed[:nul_index].decode("ascii")
    except UnicodeDecodeError as err:
        raise MalformedObject(f"Object header is not ascii: {err}") from err
    parts = header.split(" ")
    if len(parts) != 2:
        raise MalformedObject(f"Object header must be '<kind> <size>': {header!r}")
    kind, size_string = parts
    if kind not in OBJECT_KINDS:
        raise MalformedObject(f"Unrecognized object kind: {kind!r}")
    if not size_string.isdigit():
        raise MalformedObject(f"Object size is not a decimal number: {size_string!r}")
    if len(size_string) > 1 and size_string.startswith("0"):
        raise MalformedObject(f"Object size has leading zeros: {size_string!r}")
    return kind, int(size_string), nul_index + 1


def decode_tree_payload(payload):
    """Decode the records of a tree payload into `TreeEntry` objects, in stored
    order.

    :raises MalformedObject: If a record is truncated or invalid.
    """
    entries = []
    position = 0
    while position < len(payload):
        space_index = payload.find(b" ", position)
        if space_index == -1:
            raise MalformedObject(
                f"Tree entry at offset {position} has no space after its mode."
            )
        nul_index = payload.find(b"\x00", space_index + 1)
        if nul_index == -1:
            raise MalformedObject(
                f"Tree entry at offset {position} has no NUL after its name."
            )
        raw_oid = payload[nul_index + 1 : nul_index + 1 + OID_RAW_LENGTH]
        if len(raw_oid) < OID_RAW_LENGTH:
            raise MalformedObject(
                f"Tree entry at offset {position} has a truncated object id"
                + f" ({len(raw_oid)} of {OID_RAW_LENGTH} bytes)."
            )
        try:
            mode = payload[position:space_index].decode("ascii")
            name = payload[space_index + 1 : nul_index].decode(
                NAME_ENCODING, NAME_ERRORS
            )
            entries.append(TreeEntry(mode, name, raw_to_oid(raw_oid)))
        except ValueError as err:
            # UnicodeDecodeError is a ValueError
            raise MalformedObject(
                f"Tree entry at offset {position} is invalid: {err}"
            ) from err
        position = nul_index + 1 + OID_RAW_LENGTH
    return entries


def decode(framed):
    """Decode framed object bytes.

    :param bytes framed: Framed object bytes.

    :raises MalformedObject: If the framing or a tree record is invalid.
    :raises CorruptObject: If the declared size differs from the payload length.

    :return: tuple - ('blob', payload bytes) or ('tree', list of TreeEntry).
    """
    kind, size, offset = parse_header(framed)
    payload = framed[offset:]
    if len(payload) != size:
        raise CorruptObject(
            f"Object declares {size} payload bytes but holds {len(payload)}."
        )
    if kind == BLOB:
        return BLOB, bytes(payload)
    return TREE, decode_tree_payload(payload)
