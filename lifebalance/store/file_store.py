"""
File-based key-value store.

Each key is one JSON file: {directory}/{key}.json
Writes are atomic (temp file + rename) and fsynced.
"""

import os
import re
from typing import Optional

from ..core.errors import StoreError
from .store import KeyValueStore

try:
    import fcntl
except ImportError:  # Windows or unsupported platform
    fcntl = None

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileKeyValueStore(KeyValueStore):
    """
    Directory of JSON files, one per key.

    Guarantees:
    - Atomic replace (readers never see a half-written file)
    - Fsync after each write (durability)
    - Advisory lock on a sidecar file while writing, where fcntl exists
    """

    def __init__(self, directory: str) -> None:
        """
        Initialize file store.

        Args:
            directory: Directory holding the key files (created if missing)
        """
        self.directory = directory
        self.lock_path = os.path.join(directory, ".lock")
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as ex:
            raise StoreError(f"cannot create store directory {directory}: {ex}") from ex

    def _path(self, key: str) -> str:
        if not _KEY_PATTERN.match(key):
            raise StoreError(f"invalid key: {key!r}")
        return os.path.join(self.directory, f"{key}.json")

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as ex:
            raise StoreError(f"failed to read {path}: {ex}") from ex

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_path = f"{path}.tmp"
        try:
            with open(self.lock_path, "a+b") as lock:
                if fcntl:
                    fcntl.flock(lock.fileno(), fcntl.LOCK_EX)
                try:
                    with open(tmp_path, "w", encoding="utf-8") as f:
                        f.write(value)
                        f.flush()
                        os.fsync(f.fileno())
                    os.replace(tmp_path, path)
                except OSError:
                    if os.path.exists(tmp_path):
                        os.remove(tmp_path)
                    raise
                finally:
                    if fcntl:
                        fcntl.flock(lock.fileno(), fcntl.LOCK_UN)
        except OSError as ex:
            raise StoreError(f"failed to write {path}: {ex}") from ex

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            os.remove(path)
        except FileNotFoundError:
            return
        except OSError as ex:
            raise StoreError(f"failed to delete {path}: {ex}") from ex
