# src/quoting/store.py
"""
In-memory quote store: quote_id -> QuoteRecord.

Process-lifetime only, no eviction. Records are never replaced once written.
"""

from __future__ import annotations

import threading
import uuid
from pathlib import Path
from typing import Optional, Union

from src.quoting.models import QuoteRecord
from src.utils.config import get_paths
from src.utils.io import read_json
from src.utils.log import get_logger

logger = get_logger(__name__)


class QuoteStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._quotes: dict[str, QuoteRecord] = {}

    @staticmethod
    def new_id() -> str:
        return str(uuid.uuid4())

    def put(self, record: QuoteRecord) -> None:
        with self._lock:
            if record.quote_id in self._quotes:
                raise KeyError(f"Quote already stored: {record.quote_id}")
            self._quotes[record.quote_id] = record

    def get(self, quote_id: str) -> Optional[QuoteRecord]:
        with self._lock:
            return self._quotes.get(quote_id)

    def __contains__(self, quote_id: object) -> bool:
        with self._lock:
            return quote_id in self._quotes

    def __len__(self) -> int:
        with self._lock:
            return len(self._quotes)


def load_sample_quotes(store: QuoteStore, path: Optional[Union[str, Path]] = None) -> int:
    """
    Seed the store with the bundled sample quotes. Returns how many were added.
    """
    raw = read_json(path or get_paths().sample_quotes_json)
    added = 0
    for item in raw:
        record = QuoteRecord.model_validate(item)
        if record.quote_id in store:
            continue
        store.put(record)
        added += 1
    logger.info("Seeded %d sample quote(s)", added)
    return added


# In-process store shared by the API and the Lambda handler
_STORE: Optional[QuoteStore] = None


def get_store(seed_samples: bool = True, force_new: bool = False) -> QuoteStore:
    global _STORE
    if force_new or _STORE is None:
        _STORE = QuoteStore()
        if seed_samples:
            load_sample_quotes(_STORE)
    return _STORE
