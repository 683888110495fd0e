# src/pricing/rate.py
"""
Deterministic rating engine.

Provides:
- zip band classification
- driver surcharge factor
- per-vehicle base/surcharge/discount lines
- policy totals (fee, state surcharge, 6 and 12 month premium)

Notes:
- Pure: same (person, drivers, vehicles, bundle, cfg) -> same RatingResult.
- Missing or malformed numbers count as 0; unknown enums take the default branch.
- Every money figure is rounded half-up to 2 dp on its own (no carried rounding).
- An empty vehicle list is the caller's problem; here it just yields fee-only totals.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from src.pricing.config import RatingConfig
from src.quoting.models import Bundle, Driver, Person, Vehicle

Number = Union[int, float]

_CENT = Decimal("0.01")


def round2(value: float) -> float:
    """
    Half-up rounding to 2 dp of the exact binary value of the float.
    """
    return float(Decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP))


def _num(value: Any) -> Number:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return value
    return 0


@dataclass(frozen=True)
class VehiclePremium:
    year: Optional[Number]
    make: Optional[str]
    model: Optional[str]
    base: Number
    surcharges: float
    discounts: float
    subtotal: float


@dataclass(frozen=True)
class RatingResult:
    per_vehicle: list[VehiclePremium]
    policy_fee: Number
    state_surcharge: float
    final_6mo: float
    final_12mo: float
    discounts_applied: list[str]

    def premium_breakdown(self) -> Dict[str, Any]:
        return {
            "per_vehicle": [asdict(v) for v in self.per_vehicle],
            "policy_fee": self.policy_fee,
            "state_surcharge": self.state_surcharge,
            "final_6mo": self.final_6mo,
            "final_12mo": self.final_12mo,
        }

    def to_dict(self) -> Dict[str, Any]:
        out = self.premium_breakdown()
        out["discounts_applied"] = list(self.discounts_applied)
        return out


def zip_band(zipcode: Optional[str], cfg: RatingConfig) -> str:
    """
    Exact string lookup:
    - low     : zip in low_risk_zips
    - high    : zip in high_risk_zips
    - neutral : anything else (including empty)
    """
    z = zipcode or ""
    if z in cfg.low_risk_zips:
        return "low"
    if z in cfg.high_risk_zips:
        return "high"
    return "neutral"


def zip_factor(band: str, cfg: RatingConfig) -> float:
    if band == "low":
        return cfg.low_zip_factor
    if band == "high":
        return cfg.high_zip_factor
    return cfg.neutral_zip_factor


def rating_zip(person: Person, vehicles: Sequence[Vehicle]) -> str:
    """Person's zip, else first vehicle's garaging zip, else empty."""
    if person.zipcode:
        return person.zipcode
    if vehicles and vehicles[0].garaging_zip:
        return vehicles[0].garaging_zip
    return ""


def vehicle_base(year: Any, cfg: RatingConfig) -> int:
    y = _num(year)
    if y >= cfg.new_year_from:
        return cfg.base_new
    if y >= cfg.mid_year_from:
        return cfg.base_mid
    return cfg.base_old


def use_factor(primary_use: Optional[str], cfg: RatingConfig) -> float:
    if primary_use == "commute":
        return cfg.commute_factor
    if primary_use == "business":
        return cfg.business_factor
    return cfg.default_use_factor


def driver_surcharge_pct(driver: Driver, cfg: RatingConfig) -> float:
    pct = 0.0
    pct += min(cfg.accident_cap, _num(driver.accidents_last_5y)) * cfg.accident_pct
    pct += min(cfg.violation_cap, _num(driver.violations_last_3y)) * cfg.violation_pct
    if _num(driver.years_licensed) < cfg.inexperienced_below_years:
        pct += cfg.inexperienced_pct
    return pct


def has_coverage_gap(person: Person, cfg: RatingConfig) -> bool:
    """No prior insurance (explicitly False) or a lapse longer than the threshold."""
    return person.prior_insurance is False or _num(person.lapse_days) > cfg.lapse_days_threshold


def driver_surcharge_factor(person: Person, drivers: Sequence[Driver], cfg: RatingConfig) -> float:
    """
    1 + worst driver's surcharge pct, with a flat lapse load on top.

    The lapse load is max(max_pct, lapse_pct + max_pct), which always equals
    lapse_pct + max_pct; kept in this form for parity with issued quotes.
    """
    max_pct = 0.0
    for d in drivers:
        max_pct = max(max_pct, driver_surcharge_pct(d, cfg))
    if has_coverage_gap(person, cfg):
        max_pct = max(max_pct, cfg.lapse_pct + max_pct)
    return 1 + max_pct


def is_clean(driver: Driver) -> bool:
    return _num(driver.accidents_last_5y) == 0 and _num(driver.violations_last_3y) == 0


def select_discounts(
    person: Person,
    drivers: Sequence[Driver],
    vehicles: Sequence[Vehicle],
    bundle: Bundle,
    cfg: RatingConfig,
) -> Tuple[float, list[str]]:
    """
    Summed (not compounded) discount pct and labels, in fixed check order.
    Safe driver and continuous insurance are mutually exclusive.
    """
    pct = 0.0
    labels: list[str] = []

    if len(vehicles) >= 2:
        pct += cfg.multi_vehicle_pct
        labels.append(cfg.multi_vehicle_label)
    if len(drivers) >= 2:
        pct += cfg.multi_driver_pct
        labels.append(cfg.multi_driver_label)
    if bundle.homeowners_selected:
        pct += cfg.home_bundle_pct
        labels.append(cfg.home_bundle_label)

    if all(is_clean(d) for d in drivers):
        pct += cfg.safe_driver_pct
        labels.append(cfg.safe_driver_label)
    elif person.prior_insurance and _num(person.lapse_days) <= cfg.lapse_days_threshold:
        pct += cfg.continuous_insurance_pct
        labels.append(cfg.continuous_insurance_label)

    return pct, labels


def rate_vehicle(
    vehicle: Vehicle,
    zip_fac: float,
    driver_fac: float,
    discount_pct: float,
    cfg: RatingConfig,
) -> VehiclePremium:
    base = vehicle_base(vehicle.year, cfg)
    surcharged = base * use_factor(vehicle.primary_use, cfg) * zip_fac * driver_fac
    subtotal = round2(surcharged)
    discount = round2(subtotal * discount_pct)
    return VehiclePremium(
        year=vehicle.year,
        make=vehicle.make,
        model=vehicle.model,
        base=base,
        surcharges=round2(surcharged - base),
        discounts=discount,
        subtotal=round2(subtotal - discount),
    )


def rate_quote(
    person: Optional[Person],
    drivers: Sequence[Driver],
    vehicles: Sequence[Vehicle],
    bundle: Optional[Bundle] = None,
    cfg: Optional[RatingConfig] = None,
) -> RatingResult:
    """
    Rate a fully resolved person/drivers/vehicles/bundle record.
    """
    cfg = cfg or RatingConfig()
    person = person or Person()
    bundle = bundle or Bundle()

    zip_fac = zip_factor(zip_band(rating_zip(person, vehicles), cfg), cfg)
    driver_fac = driver_surcharge_factor(person, drivers, cfg)
    discount_pct, discounts_applied = select_discounts(person, drivers, vehicles, bundle, cfg)

    per_vehicle = [rate_vehicle(v, zip_fac, driver_fac, discount_pct, cfg) for v in vehicles]

    subtotal = sum(v.subtotal for v in per_vehicle)
    state_surcharge = round2(subtotal * cfg.state_surcharge_rate)
    final_6mo = round2(subtotal + cfg.policy_fee + state_surcharge)
    final_12mo = round2(final_6mo * cfg.annual_multiplier)

    return RatingResult(
        per_vehicle=per_vehicle,
        policy_fee=cfg.policy_fee,
        state_surcharge=state_surcharge,
        final_6mo=final_6mo,
        final_12mo=final_12mo,
        discounts_applied=discounts_applied,
    )
