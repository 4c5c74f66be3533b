"""Ledger store implementations."""

from .store import LedgerStore, RecordKind, REFERENCE_FIELDS
from .mongo import MongoLedgerStore
from .memory import MemoryLedgerStore

__all__ = [
    "LedgerStore",
    "RecordKind",
    "REFERENCE_FIELDS",
    "MongoLedgerStore",
    "MemoryLedgerStore",
]
