"""Storage: blob store protocol and its local, memory and S3 backends."""

from croppy.storage.base import BlobStore, PrefixedBlobStore
from croppy.storage.local import LocalBlobStore
from croppy.storage.memory import MemoryBlobStore
from croppy.storage.mount import Storage

__all__ = [
    "BlobStore",
    "LocalBlobStore",
    "MemoryBlobStore",
    "PrefixedBlobStore",
    "Storage",
]
