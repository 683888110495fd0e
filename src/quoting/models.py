# src/quoting/models.py
"""
Domain records for the quote service.

Inbound payloads are loose (aliases, extra fields, numbers sent as strings),
so the models here:
- keep unknown fields (extra="allow") so they are echoed back in rated_*
- coerce malformed numerics to 0 instead of failing validation
- coerce malformed flags to None ("not stated")
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

Number = Union[int, float]

_TRUE = {"1", "true", "yes", "y"}
_FALSE = {"0", "false", "no", "n"}


def coerce_number(v: Any) -> Optional[Number]:
    """None stays None; anything else that is not a finite number becomes 0."""
    if v is None:
        return None
    if isinstance(v, bool):
        return int(v)
    if isinstance(v, int):
        return v
    if isinstance(v, float):
        return v if math.isfinite(v) else 0
    if isinstance(v, str):
        s = v.strip()
        try:
            return int(s)
        except ValueError:
            pass
        try:
            f = float(s)
        except ValueError:
            return 0
        return f if math.isfinite(f) else 0
    return 0


def coerce_flag(v: Any) -> Optional[bool]:
    if v is None or isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        s = v.strip().lower()
        if s in _TRUE:
            return True
        if s in _FALSE:
            return False
    return None


def coerce_text(v: Any) -> Optional[str]:
    if v is None or isinstance(v, str):
        return v
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return None


class _Record(BaseModel):
    model_config = ConfigDict(extra="allow")


class Person(_Record):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    dob: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address1: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None

    # zip aliases accepted on input
    zip: Optional[str] = None
    postal_code: Optional[str] = None
    post_code: Optional[str] = None

    prior_insurance: Optional[bool] = None
    lapse_days: Optional[Number] = None
    home_owner: Optional[bool] = None

    @field_validator(
        "first_name", "last_name", "dob", "email", "phone", "address1", "city", "state",
        "zipcode", "zip", "postal_code", "post_code",
        mode="before",
    )
    @classmethod
    def _text(cls, v: Any) -> Optional[str]:
        return coerce_text(v)

    @field_validator("prior_insurance", "home_owner", mode="before")
    @classmethod
    def _flags(cls, v: Any) -> Optional[bool]:
        return coerce_flag(v)

    @field_validator("lapse_days", mode="before")
    @classmethod
    def _numbers(cls, v: Any) -> Optional[Number]:
        return coerce_number(v)

    def supplied(self) -> Dict[str, Any]:
        """Fields the caller actually sent (used to override prefill)."""
        return self.model_dump(exclude_unset=True)


class Driver(_Record):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    dob: Optional[str] = None
    license_state: Optional[str] = None
    years_licensed: Optional[Number] = None
    accidents_last_5y: Optional[Number] = None
    violations_last_3y: Optional[Number] = None

    @field_validator("first_name", "last_name", "dob", "license_state", mode="before")
    @classmethod
    def _text(cls, v: Any) -> Optional[str]:
        return coerce_text(v)

    @field_validator("years_licensed", "accidents_last_5y", "violations_last_3y", mode="before")
    @classmethod
    def _numbers(cls, v: Any) -> Optional[Number]:
        return coerce_number(v)


class Vehicle(_Record):
    vin: Optional[str] = None
    year: Optional[Number] = None
    make: Optional[str] = None
    model: Optional[str] = None
    ownership: Optional[str] = None
    # commute | business | pleasure | other; anything else rates like "other"
    primary_use: Optional[str] = None
    annual_miles: Optional[Number] = None
    garaging_zip: Optional[str] = None

    @field_validator("vin", "make", "model", "ownership", "primary_use", "garaging_zip", mode="before")
    @classmethod
    def _text(cls, v: Any) -> Optional[str]:
        return coerce_text(v)

    @field_validator("year", "annual_miles", mode="before")
    @classmethod
    def _numbers(cls, v: Any) -> Optional[Number]:
        return coerce_number(v)


class Bundle(_Record):
    homeowners_selected: bool = False

    @field_validator("homeowners_selected", mode="before")
    @classmethod
    def _flag(cls, v: Any) -> bool:
        return bool(coerce_flag(v))


class CustomerRecord(BaseModel):
    customer_id: str
    person: Person
    drivers: List[Driver] = Field(default_factory=list)
    vehicles: List[Vehicle] = Field(default_factory=list)


class QuoteRequest(_Record):
    """
    Inbound quote request.

    Identity may arrive nested under person or as top-level aliases
    (email/user_email/q1, phone/user_phone, zipcode/zip/postal_code/post_code/q2).
    Resolution order lives in src.quoting.service.resolve_identity.
    """

    person: Person = Field(default_factory=Person)
    drivers: List[Driver] = Field(default_factory=list)
    vehicles: List[Vehicle] = Field(default_factory=list)
    bundle: Bundle = Field(default_factory=Bundle)

    email: Optional[str] = None
    user_email: Optional[str] = None
    q1: Optional[str] = None
    phone: Optional[str] = None
    user_phone: Optional[str] = None
    zipcode: Optional[str] = None
    zip: Optional[str] = None
    postal_code: Optional[str] = None
    post_code: Optional[str] = None
    q2: Optional[str] = None

    @field_validator("person", "bundle", mode="before")
    @classmethod
    def _null_object(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("drivers", "vehicles", mode="before")
    @classmethod
    def _null_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator(
        "email", "user_email", "q1", "phone", "user_phone",
        "zipcode", "zip", "postal_code", "post_code", "q2",
        mode="before",
    )
    @classmethod
    def _text(cls, v: Any) -> Optional[str]:
        return coerce_text(v)


# -----------------------------
# Quote output
# -----------------------------
class Prefill(BaseModel):
    matched: bool
    basis: str
    customer_id: Optional[str] = None


class VehicleLine(BaseModel):
    year: Optional[Number] = None
    make: Optional[str] = None
    model: Optional[str] = None
    base: Number
    surcharges: Number
    discounts: Number
    subtotal: Number


class PremiumBreakdown(BaseModel):
    per_vehicle: List[VehicleLine]
    policy_fee: Number
    state_surcharge: Number
    final_6mo: Number
    final_12mo: Number


class QuoteRecord(BaseModel):
    quote_id: str
    prefill: Optional[Prefill] = None
    rated_person: Dict[str, Any]
    rated_drivers: List[Dict[str, Any]]
    rated_vehicles: List[Dict[str, Any]]
    discounts_applied: List[str]
    premium_breakdown: PremiumBreakdown
    created_at: str
    next_steps: str
