"""ritstore is a content-addressable object store modeled on git's plumbing layer.

It stores file contents and directory snapshots as immutable objects addressed by
the SHA-1 digest of their canonical framing:

- Blob objects hold the raw contents of one file
- Tree objects hold an ordered list of (mode, name, object id) entries, one per
  file or subdirectory, so a whole directory is captured by a single root id
- Objects are framed as ``<kind> <size>\\0<payload>``, zlib-compressed and sharded
  on disk by the first characters of their id
- Objects are immutable and written once; writing an existing object is a no-op
"""

from ritstore.objectstore import ObjectStore, ObjectStoreFactory, ObjectInfo
from ritstore.objectcodec import EntryMode, TreeEntry

__all__ = (
    "ObjectStore",
    "ObjectStoreFactory",
    "ObjectInfo",
    "EntryMode",
    "TreeEntry",
)
__version__ = "0.1.0"
