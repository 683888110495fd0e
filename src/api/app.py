# src/api/app.py
"""
FastAPI service for the Auto Quote demo (thin API wrapper).

Endpoints:
- GET  /health
- GET  /oauth/authorize        -> simulated consent redirect
- POST /oauth/token            -> bearer token (client_credentials | authorization_code | refresh_token)
- POST /quotes                 -> match + prefill + rate, returns stored quote
- GET  /quotes/{quote_id}
- GET  /customers/{customer_id}
- GET  /ai-plugin.json         -> plugin manifest

The API layer stays thin:
- parses/validates input
- checks the bearer token
- calls src.quoting.service and maps its errors to JSON bodies
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Form, Header, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from pydantic import ValidationError

from src.auth.tokens import (
    DEFAULT_SCOPE,
    InvalidTokenError,
    OAuthError,
    authorize_redirect,
    bearer_token,
    exchange_token,
    verify_access_token,
)
from src.quoting.models import CustomerRecord, QuoteRecord, QuoteRequest
from src.quoting.roster import Roster, get_roster
from src.quoting.service import (
    InsufficientDataError,
    NotFoundError,
    QuoteServiceError,
    create_quote,
    get_customer,
    get_quote,
)
from src.quoting.store import QuoteStore, get_store
from src.utils.config import Settings, get_settings
from src.utils.log import configure_logging, get_logger

configure_logging()
logger = get_logger("src.api")

app = FastAPI(title="Auto Quote Demo", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)


class InvalidRequestError(Exception):
    def __init__(self, error: str):
        super().__init__(error)
        self.error = error


# Warm the roster + store once at startup
@app.on_event("startup")
def _startup() -> None:
    get_roster()
    get_store(seed_samples=get_settings().seed_sample_quotes)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.monotonic()
    response = await call_next(request)
    elapsed_ms = (time.monotonic() - start) * 1000
    logger.info("%s %s -> %d (%.1fms)", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


# -----------------------------
# Dependencies
# -----------------------------
def settings_dep() -> Settings:
    return get_settings()


def roster_dep() -> Roster:
    return get_roster()


def store_dep(settings: Settings = Depends(settings_dep)) -> QuoteStore:
    return get_store(seed_samples=settings.seed_sample_quotes)


def require_token(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(settings_dep),
) -> Dict[str, Any]:
    token = bearer_token(authorization)
    if not token:
        raise InvalidTokenError("missing bearer token")
    return verify_access_token(settings.jwt_secret, token)


# -----------------------------
# Error mapping
# -----------------------------
@app.exception_handler(InvalidTokenError)
async def _unauthorized(request: Request, exc: InvalidTokenError) -> JSONResponse:
    return JSONResponse({"error": "unauthorized"}, status_code=401)


@app.exception_handler(OAuthError)
async def _oauth_error(request: Request, exc: OAuthError) -> JSONResponse:
    return JSONResponse({"error": exc.error}, status_code=400)


@app.exception_handler(InvalidRequestError)
async def _invalid_request(request: Request, exc: InvalidRequestError) -> JSONResponse:
    return JSONResponse({"error": exc.error}, status_code=400)


@app.exception_handler(QuoteServiceError)
async def _service_error(request: Request, exc: QuoteServiceError) -> JSONResponse:
    if isinstance(exc, NotFoundError):
        return JSONResponse({"error": exc.code}, status_code=404)
    if isinstance(exc, InsufficientDataError):
        return JSONResponse({"error": exc.code, "message": str(exc)}, status_code=422)
    return JSONResponse({"error": exc.code, "message": str(exc)}, status_code=400)


# -----------------------------
# Routes
# -----------------------------
@app.get("/health", response_class=PlainTextResponse)
def health() -> str:
    return "OK"


@app.get("/oauth/authorize")
def oauth_authorize(redirect_uri: str = "", state: str = "") -> RedirectResponse:
    return RedirectResponse(authorize_redirect(redirect_uri, state), status_code=302)


@app.post("/oauth/token")
def oauth_token(
    grant_type: str = Form(""),
    client_id: str = Form(""),
    client_secret: str = Form(""),
    code: str = Form(""),
    settings: Settings = Depends(settings_dep),
) -> Dict[str, Any]:
    return exchange_token(
        settings,
        grant_type=grant_type,
        client_id=client_id,
        client_secret=client_secret,
        code=code,
    )


@app.post("/quotes", response_model=QuoteRecord)
async def post_quote(
    request: Request,
    _claims: Dict[str, Any] = Depends(require_token),
    roster: Roster = Depends(roster_dep),
    store: QuoteStore = Depends(store_dep),
) -> Any:
    try:
        body = await request.json()
    except ValueError:
        raise InvalidRequestError("invalid_json")

    try:
        req = QuoteRequest.model_validate(body if body is not None else {})
    except ValidationError:
        raise InvalidRequestError("invalid_request")

    try:
        return create_quote(req, roster, store)
    except QuoteServiceError:
        raise
    except Exception:
        logger.exception("quote_error")
        return JSONResponse({"error": "quote_failed"}, status_code=500)


@app.get("/quotes/{quote_id}", response_model=QuoteRecord)
def read_quote(
    quote_id: str,
    _claims: Dict[str, Any] = Depends(require_token),
    store: QuoteStore = Depends(store_dep),
) -> QuoteRecord:
    return get_quote(store, quote_id)


@app.get("/customers/{customer_id}", response_model=CustomerRecord)
def read_customer(
    customer_id: str,
    _claims: Dict[str, Any] = Depends(require_token),
    roster: Roster = Depends(roster_dep),
) -> CustomerRecord:
    return get_customer(roster, customer_id)


@app.get("/ai-plugin.json")
def plugin_manifest(settings: Settings = Depends(settings_dep)) -> Dict[str, Any]:
    base = settings.public_base_url
    return {
        "schema_version": "v1",
        "name_for_human": "Auto Quote",
        "name_for_model": "auto_quote",
        "description_for_human": "Get a demo auto insurance quote.",
        "description_for_model": (
            "Create auto insurance quotes. Send person, drivers, vehicles and bundle; "
            "known customers are prefilled from history by email/phone/zip."
        ),
        "auth": {
            "type": "oauth",
            "client_url": f"{base}/oauth/authorize",
            "authorization_url": f"{base}/oauth/token",
            "scope": DEFAULT_SCOPE,
            "authorization_content_type": "application/x-www-form-urlencoded",
        },
        "api": {"type": "openapi", "url": f"{base}/openapi.json"},
        "contact_email": "support@example.com",
        "legal_info_url": f"{base}/legal",
    }
