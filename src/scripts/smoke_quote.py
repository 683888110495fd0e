"""
Smoke test: quote a known roster customer without going through HTTP.

Usage:
  python -m src.scripts.smoke_quote
"""

import json

from src.quoting.models import QuoteRequest
from src.quoting.roster import get_roster
from src.quoting.service import create_quote
from src.quoting.store import QuoteStore

req = QuoteRequest.model_validate({"email": "john@example.com", "zip": "20871"})

quote = create_quote(req, get_roster(), QuoteStore())

print("Prefill:", quote.prefill.model_dump() if quote.prefill else None)
print("Discounts:", quote.discounts_applied)
print(json.dumps(quote.premium_breakdown.model_dump(), indent=2))
