"""Test module for object fingerprints and object id helpers."""

import pytest
from ritstore.objecthasher import (
    NULL_OID,
    check_oid,
    fingerprint,
    fingerprint_chunks,
    is_oid,
    oid_to_raw,
    raw_to_oid,
)
from ritstore.objectcodec import encode_blob


def test_fingerprint_known_blobs(oids):
    """Check fingerprints of framed blobs match the ids git computes."""
    for content, oid in oids["blobs"].items():
        assert fingerprint(encode_blob(content)) == oid


def test_fingerprint_covers_framing():
    """Check the fingerprint is not taken over the payload alone."""
    assert fingerprint(encode_blob(b"hello")) != fingerprint(b"hello")


def test_fingerprint_blob_and_tree_framing_differ(oids):
    """Check the same raw bytes framed as a blob and as a tree get different ids."""
    raw = b"100644 a.txt\x00" + oid_to_raw(oids["blobs"][b"hello"])
    blob_oid = fingerprint(encode_blob(raw))
    tree_oid = fingerprint(b"tree %d\x00" % len(raw) + raw)
    assert blob_oid != tree_oid


def test_fingerprint_equal_bytes_equal_ids():
    """Check byte-identical content always gives the same fingerprint."""
    first = bytes(bytearray(b"same content"))
    second = b"same " + b"content"
    assert fingerprint(encode_blob(first)) == fingerprint(encode_blob(second))


def test_fingerprint_chunks_matches_fingerprint(oids):
    """Check hashing in chunks gives the same id as hashing the whole framing."""
    framed = encode_blob(b"what is up, doc?\n")
    chunks = [framed[:3], framed[3:10], framed[10:]]
    assert fingerprint_chunks(chunks) == oids["blobs"][b"what is up, doc?\n"]


def test_fingerprint_format():
    """Check object ids are 40 lowercase hex characters."""
    oid = fingerprint(encode_blob(b"any"))
    assert len(oid) == 40
    assert oid == oid.lower()
    assert is_oid(oid)


def test_is_oid():
    """Check well-formed and malformed object ids."""
    assert is_oid(NULL_OID)
    assert not is_oid("0" * 39)
    assert not is_oid("0" * 41)
    assert not is_oid("E69DE29BB2D1D6434B8B29AE775AD8C2E48C5391")
    assert not is_oid("z" * 40)
    assert not is_oid(None)


def test_check_oid_raises():
    """Check `check_oid` throws a ValueError for a malformed id."""
    with pytest.raises(ValueError):
        check_oid("not-an-oid")


def test_oid_raw_conversion(oids):
    """Check conversion between hex and raw object ids."""
    oid = oids["blobs"][b"hello"]
    raw = oid_to_raw(oid)
    assert len(raw) == 20
    assert raw_to_oid(raw) == oid


def test_raw_to_oid_wrong_length():
    """Check raw ids that are not 20 bytes are rejected."""
    with pytest.raises(ValueError):
        raw_to_oid(b"\x00" * 19)
