"""Shared fixtures: bundled roster, fresh quote store, authorised API client."""

import pytest
from fastapi.testclient import TestClient

from src.api.app import app, store_dep
from src.auth.tokens import issue_access_token
from src.quoting.models import CustomerRecord
from src.quoting.roster import Roster, load_roster
from src.quoting.store import QuoteStore, load_sample_quotes
from src.utils.config import get_settings


@pytest.fixture
def roster():
    """The bundled two-customer roster (cust-001 John Sherman, cust-002 Rhea Patel)."""
    return load_roster()


@pytest.fixture
def store():
    return QuoteStore()


@pytest.fixture
def make_customer():
    def _make(customer_id, drivers=None, vehicles=None, **person):
        return CustomerRecord.model_validate(
            {
                "customer_id": customer_id,
                "person": person,
                "drivers": drivers or [],
                "vehicles": vehicles or [],
            }
        )

    return _make


@pytest.fixture
def clean_driver():
    return {
        "first_name": "Sam",
        "last_name": "Lee",
        "years_licensed": 10,
        "accidents_last_5y": 0,
        "violations_last_3y": 0,
    }


@pytest.fixture
def camry():
    return {"year": 2011, "make": "Toyota", "model": "Camry", "primary_use": "commute", "garaging_zip": "20871"}


@pytest.fixture
def client():
    store = QuoteStore()
    load_sample_quotes(store)
    app.dependency_overrides[store_dep] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    token = issue_access_token(get_settings().jwt_secret, "test-client")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def small_roster(make_customer):
    return Roster(
        [
            make_customer("a", email="x@example.com", zipcode="11111", first_name="Ann", last_name="Ray"),
            make_customer("b", email="x@example.com", zipcode="22222", phone="555-0100"),
        ]
    )
