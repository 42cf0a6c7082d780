"""Storage module for the record store and the batch loader."""

from .loader import TransactionalLoader, create_db_engine, verify_connection
from .record_store import HarvestStore, RecordStore
from .schema import build_metadata, create_tables

__all__ = [
    "HarvestStore",
    "RecordStore",
    "TransactionalLoader",
    "build_metadata",
    "create_db_engine",
    "create_tables",
    "verify_connection",
]
