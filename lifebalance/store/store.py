"""
KeyValueStore abstract interface.

Defines the contract for the persistence collaborator: named slots holding
serialized collections.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional


class KeyValueStore(ABC):
    """
    Abstract key-value storage interface.

    All implementations must guarantee:
    - set() then get() returns the exact same string
    - get() of a missing key returns None (not an error)
    - delete() of a missing key is a no-op

    Backend failures raise StoreError.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read value stored under key.

        Returns:
            Stored string or None if the key is absent

        Raises:
            StoreError: If the backend read fails
        """
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store value under key, replacing any previous value.

        Raises:
            StoreError: If the backend write fails
        """
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Erase key.

        Raises:
            StoreError: If the backend delete fails
        """
        ...


class MemoryKeyValueStore(KeyValueStore):
    """
    In-process dict-backed store.

    Nothing survives the process. Used for tests and throwaway sessions.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self):
        return sorted(self._data.keys())
