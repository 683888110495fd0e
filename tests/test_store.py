"""Tests for the in-memory quote store and roster loading."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from src.quoting.models import QuoteRecord
from src.quoting.roster import Roster, load_roster
from src.quoting.store import QuoteStore, load_sample_quotes

SAMPLE_ID = "89e2aefe-a42c-4f7b-80fb-3fce196bf18b"


def _record(quote_id):
    return QuoteRecord(
        quote_id=quote_id,
        rated_person={},
        rated_drivers=[],
        rated_vehicles=[],
        discounts_applied=[],
        premium_breakdown={
            "per_vehicle": [],
            "policy_fee": 25,
            "state_surcharge": 0,
            "final_6mo": 25,
            "final_12mo": 48.75,
        },
        created_at="2025-01-01T00:00:00.000Z",
        next_steps="",
    )


def test_put_then_get(store):
    store.put(_record("q-1"))
    assert "q-1" in store
    assert store.get("q-1").quote_id == "q-1"
    assert store.get("q-2") is None


def test_put_never_replaces_existing(store):
    store.put(_record("q-1"))
    with pytest.raises(KeyError):
        store.put(_record("q-1"))


def test_concurrent_inserts(store):
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda _: store.put(_record(store.new_id())), range(200)))
    assert len(store) == 200


def test_sample_quotes_seed_once(store):
    assert load_sample_quotes(store) == 1
    assert load_sample_quotes(store) == 0
    sample = store.get(SAMPLE_ID)
    assert sample.premium_breakdown.final_6mo == 581.75
    assert sample.prefill is None


def test_bundled_roster(roster):
    assert len(roster) == 2
    assert [c.customer_id for c in roster] == ["cust-001", "cust-002"]
    assert roster.get("cust-001").vehicles[0].vin == "JT4BG22K6Y0123456"
    assert roster.get("nope") is None


def test_roster_rejects_duplicate_ids(make_customer):
    with pytest.raises(ValueError):
        Roster([make_customer("dup"), make_customer("dup")])


def test_roster_fixture_must_be_a_list(tmp_path):
    path = tmp_path / "customers.json"
    path.write_text('{"customer_id": "x"}', encoding="utf-8")
    with pytest.raises(ValueError):
        load_roster(path)


def test_missing_roster_fixture(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_roster(tmp_path / "absent.json")
