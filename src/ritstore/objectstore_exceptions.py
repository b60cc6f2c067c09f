"""ObjectStore custom exception module."""


class ObjectNotFound(Exception):
    """Custom exception thrown when no object exists in the store for a requested
    object id."""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors


class MalformedObject(Exception):
    """Custom exception thrown when decoding framed object bytes that violate the
    header, NUL or tree entry layout."""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors


class WrongObjectKind(Exception):
    """Custom exception thrown when a blob-only or tree-only operation is called
    with the id of an object of the other kind."""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors


class CorruptObject(Exception):
    """Custom exception thrown when a stored object cannot be decompressed, its
    declared payload length does not match, or its content does not hash back to
    its object id."""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors


class NonMatchingObjectId(Exception):
    """Custom exception thrown when writing framed bytes under an object id that is
    not the fingerprint of those bytes."""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors
