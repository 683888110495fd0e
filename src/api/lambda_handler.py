# src/api/lambda_handler.py
"""
AWS Lambda handler for FastAPI using Mangum (ASGI adapter).

How it works:
- API Gateway invokes Lambda
- Mangum translates the event into an ASGI request
- FastAPI handles routing (/health, /oauth/*, /quotes, /customers)
- Response is returned back to API Gateway

Warm-up:
- The roster fixture is parsed at import time (cold start).
- The quote store lives for as long as the Lambda container does; quotes are
  not shared across containers.
"""

from __future__ import annotations

import os

from mangum import Mangum

from src.api.app import app
from src.quoting.roster import get_roster


_PRELOAD_ROSTER = os.getenv("PRELOAD_ROSTER", "true").lower() in {"1", "true", "yes"}

if _PRELOAD_ROSTER:
    get_roster()


# Mangum handler
handler = Mangum(app)
