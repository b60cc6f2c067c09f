"""Fingerprints for framed objects.

An object id is the SHA-1 digest of an object's full canonical framing
(``<kind> <size>\\0<payload>``), rendered as 40 lowercase hex characters. Tree
payloads embed the same digest as 20 raw bytes.
"""

import hashlib
import string

ALGORITHM = "sha1"
OID_HEX_LENGTH = 40
OID_RAW_LENGTH = 20
NULL_OID = "0" * OID_HEX_LENGTH

_HEX_DIGITS = frozenset(string.hexdigits.lower())


def fingerprint(framed):
    """Calculate the object id of framed object bytes.

    :param bytes framed: Header and payload of an object.

    :return: 40 character hex digest.
    :rtype: str
    """
    return hashlib.new(ALGORITHM, framed).hexdigest()


def fingerprint_chunks(chunks):
    """Calculate the object id of framed object bytes supplied as an iterable of
    byte chunks, so that large files never need to be held in memory.

    :param iterable chunks: Byte strings whose concatenation is the framing.

    :return: 40 character hex digest.
    :rtype: str
    """
    hashobj = hashlib.new(ALGORITHM)
    for chunk in chunks:
        hashobj.update(chunk)
    return hashobj.hexdigest()


def new_hash():
    """Return a fresh hash object for incremental fingerprinting."""
    return hashlib.new(ALGORITHM)


def is_oid(oid):
    """Return True if `oid` is a well-formed hex object id."""
    return (
        isinstance(oid, str)
        and len(oid) == OID_HEX_LENGTH
        and all(char in _HEX_DIGITS for char in oid)
    )


def check_oid(oid):
    """Raise `ValueError` unless `oid` is 40 lowercase hex characters.

    :param str oid: Object id to validate.
    """
    if not is_oid(oid):
        raise ValueError(
            f"Object id must be {OID_HEX_LENGTH} lowercase hex characters, oid: {oid}"
        )


def oid_to_raw(oid):
    """Convert a hex object id to its 20 raw bytes."""
    check_oid(oid)
    return bytes.fromhex(oid)


def raw_to_oid(raw):
    """Convert 20 raw bytes to a hex object id."""
    if len(raw) != OID_RAW_LENGTH:
        raise ValueError(
            f"Raw object id must be {OID_RAW_LENGTH} bytes, got: {len(raw)}"
        )
    return raw.hex()
