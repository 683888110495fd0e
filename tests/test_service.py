"""Tests for request resolution, prefill and quote creation."""

import pytest

from src.quoting import service
from src.quoting.models import QuoteRequest
from src.quoting.roster import Roster
from src.quoting.service import (
    NEXT_STEPS,
    InsufficientDataError,
    NotFoundError,
    create_quote,
    get_customer,
    get_quote,
    resolve_identity,
)


def _req(**payload):
    return QuoteRequest.model_validate(payload)


# --- identity aliasing ---


def test_person_fields_win_over_top_level_aliases():
    identity = resolve_identity(_req(person={"email": "a@x.com", "zipcode": "11111"}, email="b@x.com", zip="22222"))
    assert identity.email == "a@x.com"
    assert identity.zipcode == "11111"


def test_top_level_aliases_in_order():
    identity = resolve_identity(_req(user_email="u@x.com", q1="q@x.com", user_phone="555", post_code="33333", q2="44444"))
    assert identity.email == "u@x.com"
    assert identity.phone == "555"
    assert identity.zipcode == "33333"


def test_person_zip_aliases():
    assert resolve_identity(_req(person={"postal_code": "75035"})).zipcode == "75035"
    assert resolve_identity(_req(person={"zip": "10001", "post_code": "99999"})).zipcode == "10001"


def test_q1_used_as_email_only_with_at_sign():
    assert resolve_identity(_req(q1="john@example.com")).email == "john@example.com"
    assert resolve_identity(_req(q1="john")).email is None


def test_q2_used_as_zip_only_with_leading_five_digits():
    assert resolve_identity(_req(q2="20871-1234")).zipcode == "20871"
    assert resolve_identity(_req(q2=" 20871")).zipcode == "20871"
    assert resolve_identity(_req(q2="2087")).zipcode is None
    assert resolve_identity(_req(q2="MD 20871")).zipcode is None


def test_empty_strings_fall_through_to_next_alias():
    assert resolve_identity(_req(person={"email": ""}, email="e@x.com")).email == "e@x.com"


# --- quote creation ---


def test_known_customer_prefilled_from_email_and_zip(roster, store):
    quote = create_quote(_req(email="john@example.com", zipcode="20871"), roster, store)

    assert quote.prefill.model_dump() == {"matched": True, "basis": "email+zip", "customer_id": "cust-001"}
    assert quote.rated_vehicles[0]["model"] == "Camry"
    assert quote.rated_drivers[0]["last_name"] == "Sherman"
    assert quote.rated_person["city"] == "Clarksburg"
    assert quote.discounts_applied == ["Safe driver (5%)"]
    assert quote.premium_breakdown.final_6mo == 581.75
    assert quote.next_steps == NEXT_STEPS
    assert quote.created_at.endswith("Z")


def test_no_identity_and_no_vehicles_is_rejected_before_rating(roster, store, monkeypatch):
    def _fail(*args, **kwargs):
        raise AssertionError("rating must not run")

    monkeypatch.setattr(service, "rate_quote", _fail)
    with pytest.raises(InsufficientDataError):
        create_quote(_req(), roster, store)
    assert len(store) == 0


def test_match_without_vehicles_is_rejected(make_customer, store):
    roster = Roster([make_customer("empty", email="e@x.com", zipcode="11111")])
    with pytest.raises(InsufficientDataError):
        create_quote(_req(email="e@x.com"), roster, store)


def test_explicit_person_fields_override_prefill(roster, store):
    req = _req(person={"email": "rhea@example.com", "zipcode": "75035", "city": "Plano", "lapse_days": 60})
    quote = create_quote(req, roster, store)

    assert quote.prefill.customer_id == "cust-002"
    assert quote.rated_person["city"] == "Plano"
    assert quote.rated_person["last_name"] == "Patel"
    assert quote.rated_person["lapse_days"] == 60
    # lapse > 30 removes the continuous-insurance discount Rhea would otherwise get
    assert quote.discounts_applied == []


def test_supplied_vehicles_win_and_drivers_still_prefilled(roster, store):
    req = _req(
        email="john@example.com",
        zip="20871",
        vehicles=[{"year": 2022, "make": "Tesla", "model": "Model 3", "primary_use": "pleasure"}],
    )
    quote = create_quote(req, roster, store)

    assert [v["make"] for v in quote.rated_vehicles] == ["Tesla"]
    assert quote.rated_drivers[0]["first_name"] == "John"
    assert quote.premium_breakdown.per_vehicle[0].base == 620


def test_unmatched_request_rates_supplied_data(roster, store, clean_driver, camry):
    quote = create_quote(_req(person={"zipcode": "94103"}, drivers=[clean_driver], vehicles=[camry]), roster, store)

    assert quote.prefill.model_dump() == {"matched": False, "basis": "none", "customer_id": None}
    assert quote.rated_person == {"zipcode": "94103"}


def test_resolved_zip_fills_person_for_rating(roster, store, camry):
    vehicle = dict(camry, garaging_zip="10001")
    quote = create_quote(_req(q2="20871 MD", vehicles=[vehicle]), roster, store)
    assert quote.rated_person["zipcode"] == "20871"
    # low band from q2 zip, not the high-band garaging zip
    assert quote.premium_breakdown.per_vehicle[0].subtotal < 600


def test_created_quote_is_retrievable(roster, store):
    quote = create_quote(_req(phone="1.469.555.7788"), roster, store)
    assert get_quote(store, quote.quote_id) == quote


def test_quote_ids_are_unique(roster, store):
    ids = {create_quote(_req(phone="1.469.555.7788"), roster, store).quote_id for _ in range(25)}
    assert len(ids) == 25
    assert len(store) == 25


def test_lookups_raise_not_found(roster, store):
    with pytest.raises(NotFoundError):
        get_quote(store, "missing")
    with pytest.raises(NotFoundError):
        get_customer(roster, "cust-999")
    assert get_customer(roster, "cust-002").person.first_name == "Rhea"
