"""Persistence: key-value stores and the loan repository."""

from installment_plan.config import StorageConfig
from installment_plan.store.base import KeyValueStore
from installment_plan.store.json_file import JsonFileKeyValueStore
from installment_plan.store.memory import InMemoryKeyValueStore
from installment_plan.store.repository import LoanRepository

__all__ = [
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "LoanRepository",
    "build_store",
]


def build_store(config: StorageConfig) -> KeyValueStore:
    """Create the store selected by a :class:`~installment_plan.config.StorageConfig`."""
    if config.backend == "json":
        return JsonFileKeyValueStore(config.json_dir)
    if config.backend == "postgres":
        from installment_plan.store.postgres import PostgresKeyValueStore

        return PostgresKeyValueStore(config.postgres.connection_string, config.postgres.table)
    return InMemoryKeyValueStore()
