# src/quoting/service.py
"""
End-to-end quote service.

Single source of truth for the request flow:
  raw request -> resolved identity -> roster match -> merged person
  -> prefilled drivers/vehicles -> rating engine -> stored QuoteRecord

Precedence rules:
- explicit request fields always win over prefill
- drivers/vehicles are prefilled only when the request sent none
- no vehicles after prefill -> InsufficientDataError (rating is not run)
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from src.matching.matcher import IdentityFragment, MatchResult
from src.matching.normalize import normalize_zip
from src.pricing.config import RatingConfig
from src.pricing.rate import rate_quote
from src.quoting.models import CustomerRecord, Person, Prefill, QuoteRecord, QuoteRequest
from src.quoting.roster import Roster
from src.quoting.store import QuoteStore
from src.utils.log import get_logger

logger = get_logger(__name__)

NEXT_STEPS = "Review coverages and bind. A licensed agent will contact you to finalize."

_LEADING_ZIP = re.compile(r"^(\d{5})")


class QuoteServiceError(Exception):
    """Base class for errors the API maps to client responses."""

    code = "quote_error"


class InsufficientDataError(QuoteServiceError):
    code = "insufficient_data"


class NotFoundError(QuoteServiceError):
    code = "not_found"


def _first(*values: Optional[str]) -> Optional[str]:
    for v in values:
        if v:
            return v
    return None


def resolve_identity(req: QuoteRequest) -> IdentityFragment:
    """
    Collapse nested and top-level aliases into one identity fragment.

    email   : person.email | email | user_email | q1 (only if it contains "@")
    phone   : person.phone | phone | user_phone
    zipcode : person.zipcode | person.zip | person.postal_code | person.post_code
              | zipcode | zip | postal_code | post_code | leading 5 digits of q2
    names   : person.first_name / person.last_name
    """
    p = req.person

    q1_email = req.q1 if req.q1 and "@" in req.q1 else None

    q2_zip = None
    if req.q2:
        m = _LEADING_ZIP.match(req.q2.strip())
        if m:
            q2_zip = m.group(1)

    return IdentityFragment(
        email=_first(p.email, req.email, req.user_email, q1_email),
        phone=_first(p.phone, req.phone, req.user_phone),
        zipcode=_first(
            p.zipcode, p.zip, p.postal_code, p.post_code,
            req.zipcode, req.zip, req.postal_code, req.post_code,
            q2_zip,
        ),
        first_name=p.first_name,
        last_name=p.last_name,
    )


def resolve_person(req: QuoteRequest, identity: IdentityFragment, match: MatchResult) -> Dict[str, Any]:
    """
    Matched person as defaults, explicitly supplied person fields on top,
    then resolved identity fills whatever is still missing.
    """
    person: Dict[str, Any] = {}
    if match.hit is not None:
        person.update(match.hit.person.model_dump(exclude_unset=True))
    person.update(req.person.supplied())

    if not person.get("email") and identity.email:
        person["email"] = identity.email
    if not person.get("phone") and identity.phone:
        person["phone"] = identity.phone
    if not person.get("zipcode") and identity.zipcode:
        person["zipcode"] = normalize_zip(identity.zipcode)
    return person


def create_quote(
    req: QuoteRequest,
    roster: Roster,
    store: QuoteStore,
    *,
    rating_cfg: Optional[RatingConfig] = None,
) -> QuoteRecord:
    """
    Full quote generation:
      request -> match -> prefill -> rate -> QuoteRecord (stored)
    """
    identity = resolve_identity(req)
    match = roster.match(identity)

    rated_person = resolve_person(req, identity, match)
    drivers = req.drivers or (match.hit.drivers if match.hit is not None else [])
    vehicles = req.vehicles or (match.hit.vehicles if match.hit is not None else [])

    if not vehicles:
        raise InsufficientDataError(
            "No vehicles supplied and none could be prefilled from customer history."
        )

    result = rate_quote(
        Person.model_validate(rated_person),
        drivers,
        vehicles,
        req.bundle,
        cfg=rating_cfg,
    )

    record = QuoteRecord(
        quote_id=store.new_id(),
        prefill=Prefill(matched=match.matched, basis=match.basis, customer_id=match.customer_id),
        rated_person=rated_person,
        rated_drivers=[d.model_dump(exclude_unset=True) for d in drivers],
        rated_vehicles=[v.model_dump(exclude_unset=True) for v in vehicles],
        discounts_applied=result.discounts_applied,
        premium_breakdown=result.premium_breakdown(),
        created_at=_utc_now_iso(),
        next_steps=NEXT_STEPS,
    )
    store.put(record)

    logger.info(
        "quote_created quote_id=%s basis=%s customer_id=%s vehicles=%d final_6mo=%.2f",
        record.quote_id,
        match.basis,
        match.customer_id,
        len(vehicles),
        result.final_6mo,
    )
    return record


def get_quote(store: QuoteStore, quote_id: str) -> QuoteRecord:
    record = store.get(quote_id)
    if record is None:
        raise NotFoundError(f"Quote not found: {quote_id}")
    return record


def get_customer(roster: Roster, customer_id: str) -> CustomerRecord:
    customer = roster.get(customer_id)
    if customer is None:
        raise NotFoundError(f"Customer not found: {customer_id}")
    return customer


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
