"""In-memory key-value store."""

from installment_plan.exceptions import StorageError
from installment_plan.store.base import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store for a single session and for tests.

    Parameters
    ----------
    fail_writes : bool
        Make every ``set`` raise :class:`StorageError`, to exercise the
        best-effort persistence path.
    """

    def __init__(self, fail_writes: bool = False) -> None:
        self.fail_writes = fail_writes
        self._data: dict[str, bytes] = {}

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        if self.fail_writes:
            raise StorageError(f"Write to {key!r} refused")
        self._data[key] = bytes(value)

    def remove(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)
