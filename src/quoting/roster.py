# src/quoting/roster.py
"""
Fixed customer roster.

Loaded once from JSON (src/data/customers.json, or CUSTOMERS_PATH) and never
mutated afterwards. Lookup by customer_id is a dict hit; matching delegates to
src.matching.matcher in roster order.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Optional, Sequence, Union

from src.matching.matcher import IdentityFragment, MatchResult, find_customer
from src.quoting.models import CustomerRecord
from src.utils.config import get_paths, get_settings
from src.utils.io import read_json
from src.utils.log import get_logger

logger = get_logger(__name__)


class Roster:
    def __init__(self, customers: Sequence[CustomerRecord]):
        self._customers: tuple[CustomerRecord, ...] = tuple(customers)
        self._by_id: dict[str, CustomerRecord] = {}
        for c in self._customers:
            if c.customer_id in self._by_id:
                raise ValueError(f"Duplicate customer_id in roster: {c.customer_id}")
            self._by_id[c.customer_id] = c

    @property
    def customers(self) -> tuple[CustomerRecord, ...]:
        return self._customers

    def get(self, customer_id: str) -> Optional[CustomerRecord]:
        return self._by_id.get(customer_id)

    def match(self, identity: IdentityFragment) -> MatchResult:
        return find_customer(identity, self._customers)

    def __len__(self) -> int:
        return len(self._customers)

    def __iter__(self) -> Iterator[CustomerRecord]:
        return iter(self._customers)


def load_roster(path: Optional[Union[str, Path]] = None) -> Roster:
    """
    Load the roster fixture.

    If path is not provided:
      - Use CUSTOMERS_PATH when set
      - Else the bundled src/data/customers.json
    """
    if path is None:
        path = get_settings().customers_path or get_paths().customers_json

    raw = read_json(path)
    if not isinstance(raw, list):
        raise ValueError(f"Roster fixture must be a JSON list, got {type(raw).__name__}: {path}")

    roster = Roster([CustomerRecord.model_validate(item) for item in raw])
    logger.info("Loaded %d customers from %s", len(roster), path)
    return roster


# In-process cache (FastAPI startup + Lambda warm invocations)
_CACHED_ROSTER: Optional[Roster] = None


def get_roster(path: Optional[Union[str, Path]] = None, force_reload: bool = False) -> Roster:
    global _CACHED_ROSTER
    if force_reload or _CACHED_ROSTER is None:
        _CACHED_ROSTER = load_roster(path)
    return _CACHED_ROSTER
