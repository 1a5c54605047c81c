"""
Persistence for the event log and friend registry.

This module provides:
- KeyValueStore: Abstract interface for the persistence collaborator
- MemoryKeyValueStore: In-process storage
- FileKeyValueStore: One JSON file per key
- S3KeyValueStore: One S3 object per key (see s3_store)
- Codec: Serialization of events/friends to stored records
"""

from .store import KeyValueStore, MemoryKeyValueStore
from .file_store import FileKeyValueStore
from .codec import decode_events, decode_friends, encode_events, encode_friends

__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "FileKeyValueStore",
    "decode_events",
    "decode_friends",
    "encode_events",
    "encode_friends",
]
