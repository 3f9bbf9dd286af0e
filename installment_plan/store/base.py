"""Key-value store contract used for persistence."""

from abc import ABC, abstractmethod

from installment_plan.exceptions import StorageError

_AVAILABILITY_KEY = "__installment_plan_available__"


class KeyValueStore(ABC):
    """Byte-valued key-value store.

    Writes replace the whole value. Backends raise :class:`StorageError`
    when the underlying medium fails.
    """

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the stored bytes, or ``None`` when the key is absent."""

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def remove(self, key: str) -> bool:
        """Delete ``key``; return whether it existed."""

    def is_available(self) -> bool:
        """Whether a write/remove round trip currently succeeds."""
        try:
            self.set(_AVAILABILITY_KEY, b"1")
            self.remove(_AVAILABILITY_KEY)
        except StorageError:
            return False
        return True

    def close(self) -> None:
        """Release backend resources."""
