# src/matching/matcher.py
"""
Customer matching against the fixed roster.

Cascade (first tier with a hit wins, roster order within a tier):
  1) (email OR phone) AND zip   -> "email+zip" / "phone+zip"
  2) email only                 -> "email"
  3) phone only                 -> "phone"
  4) first + last name + zip    -> "name+zip"
  5) nothing                    -> "none"

Both sides of every comparison go through src.matching.normalize, and a
sub-condition only counts when both values are non-empty. Nothing here
raises or mutates the roster.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from src.matching.normalize import normalize_email, normalize_name, normalize_phone, normalize_zip
from src.quoting.models import CustomerRecord

BASIS_EMAIL_ZIP = "email+zip"
BASIS_PHONE_ZIP = "phone+zip"
BASIS_EMAIL = "email"
BASIS_PHONE = "phone"
BASIS_NAME_ZIP = "name+zip"
BASIS_NONE = "none"


@dataclass(frozen=True)
class IdentityFragment:
    email: Optional[str] = None
    phone: Optional[str] = None
    zipcode: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


@dataclass(frozen=True)
class MatchResult:
    hit: Optional[CustomerRecord]
    basis: str

    @property
    def matched(self) -> bool:
        return self.hit is not None

    @property
    def customer_id(self) -> Optional[str]:
        return self.hit.customer_id if self.hit is not None else None


@dataclass(frozen=True)
class _Keys:
    email: str
    phone: str
    zipcode: str
    first_name: str
    last_name: str


def _identity_keys(identity: IdentityFragment) -> _Keys:
    return _Keys(
        email=normalize_email(identity.email),
        phone=normalize_phone(identity.phone),
        zipcode=normalize_zip(identity.zipcode),
        first_name=normalize_name(identity.first_name),
        last_name=normalize_name(identity.last_name),
    )


def _record_keys(record: CustomerRecord) -> _Keys:
    p = record.person
    return _Keys(
        email=normalize_email(p.email),
        phone=normalize_phone(p.phone),
        zipcode=normalize_zip(p.zipcode),
        first_name=normalize_name(p.first_name),
        last_name=normalize_name(p.last_name),
    )


def _same(a: str, b: str) -> bool:
    return bool(a) and bool(b) and a == b


def find_customer(identity: IdentityFragment, customers: Iterable[CustomerRecord]) -> MatchResult:
    """
    Resolve an identity fragment to at most one roster record.
    """
    q = _identity_keys(identity)
    roster: Sequence[tuple[CustomerRecord, _Keys]] = [(c, _record_keys(c)) for c in customers]

    # 1) strong: (email OR phone) + zip
    for rec, k in roster:
        email_hit = _same(q.email, k.email)
        phone_hit = _same(q.phone, k.phone)
        if (email_hit or phone_hit) and _same(q.zipcode, k.zipcode):
            return MatchResult(rec, BASIS_EMAIL_ZIP if email_hit else BASIS_PHONE_ZIP)

    # 2) email only
    if q.email:
        for rec, k in roster:
            if _same(q.email, k.email):
                return MatchResult(rec, BASIS_EMAIL)

    # 3) phone only
    if q.phone:
        for rec, k in roster:
            if _same(q.phone, k.phone):
                return MatchResult(rec, BASIS_PHONE)

    # 4) name + zip
    if q.first_name and q.last_name and q.zipcode:
        for rec, k in roster:
            if (
                _same(q.first_name, k.first_name)
                and _same(q.last_name, k.last_name)
                and _same(q.zipcode, k.zipcode)
            ):
                return MatchResult(rec, BASIS_NAME_ZIP)

    return MatchResult(None, BASIS_NONE)
