# src/pricing/config.py
"""
Rating configuration.

Every constant the rating engine uses lives here so a quote can be reproduced
from (input record, RatingConfig) alone:
- zip risk bands (exact 5-char zip lookup)
- vehicle base premium by model year
- primary-use factors
- driver surcharge weights and caps
- discount percentages and their labels
- policy fee, state surcharge and the 6 -> 12 month multiplier
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RatingConfig:
    # Zip bands
    low_risk_zips: frozenset[str] = frozenset({"20871", "75035", "75070"})
    high_risk_zips: frozenset[str] = frozenset({"10001", "94103", "60601"})
    low_zip_factor: float = 0.95
    neutral_zip_factor: float = 1.00
    high_zip_factor: float = 1.10

    # Vehicle base by model year
    base_new: int = 620  # year >= new_year_from
    base_mid: int = 560  # year >= mid_year_from
    base_old: int = 520
    new_year_from: int = 2020
    mid_year_from: int = 2010

    # Primary use
    commute_factor: float = 1.08
    business_factor: float = 1.12
    default_use_factor: float = 1.00

    # Driver surcharge (max over drivers)
    accident_pct: float = 0.12
    accident_cap: int = 2
    violation_pct: float = 0.07
    violation_cap: int = 3
    inexperienced_pct: float = 0.15
    inexperienced_below_years: int = 3
    lapse_pct: float = 0.10
    lapse_days_threshold: int = 30

    # Discounts (summed, applied once per vehicle)
    multi_vehicle_pct: float = 0.08
    multi_driver_pct: float = 0.04
    home_bundle_pct: float = 0.12
    safe_driver_pct: float = 0.05
    continuous_insurance_pct: float = 0.05

    multi_vehicle_label: str = "Multi-vehicle (8%)"
    multi_driver_label: str = "Multi-driver (4%)"
    home_bundle_label: str = "Auto + Home bundle (12%)"
    safe_driver_label: str = "Safe driver (5%)"
    continuous_insurance_label: str = "Continuous insurance (5%)"

    # Policy totals
    policy_fee: int = 25
    state_surcharge_rate: float = 0.02
    annual_multiplier: float = 1.95
