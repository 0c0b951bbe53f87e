"""
FastAPI server — HTTP surface of the TurboAuth registry.

GET  /api/v1/status/{wallet}      record (default record for unknown/malformed)
GET  /api/v1/lookup/{wallet}      tagged lookup (400 malformed, 404 unseen)
POST /api/v1/status/batch         batch read
POST /api/v1/status               set status (admin only)
GET  /api/v1/admin                current admin
POST /api/v1/admin/transfer       transfer admin (admin only)
GET  /api/v1/contract/next        upgrade pointer
POST /api/v1/contract/next        set upgrade pointer (admin only)
GET  /metrics                     Prometheus metrics

Caller identity comes from the X-Caller-Address header. A mutation and the
snapshot save that follows it run under one registry lock. A failed save does
not undo the mutation; the response reports it with persisted=false.

Run: uvicorn backend_turboauth.api_server.server:build_app --factory
"""

from __future__ import annotations

import time
from typing import Any, Callable

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from backend_turboauth import __version__
from backend_turboauth.config import get_settings
from backend_turboauth.core.exceptions import TurboAuthError, UnauthorizedError
from backend_turboauth.database import RegistryStore
from backend_turboauth.logging import get_logger
from backend_turboauth.metrics import (
    CONTENT_TYPE_LATEST,
    observe_request,
    record_mutation,
    record_save_failure,
    render_latest,
    set_registered_wallets,
)
from backend_turboauth.registry import (
    AuthorizedRegistry,
    AuthStatus,
    LookupOutcome,
    Registry,
    WalletAuthRecord,
)

logger = get_logger(__name__)

CALLER_HEADER = "X-Caller-Address"
MAX_BATCH_SIZE = 1000


# -----------------------------------------------------------------------------
# Request / response models
# -----------------------------------------------------------------------------


class WalletStatusResponse(BaseModel):
    """Auth record for one wallet."""

    wallet_address: str = Field(..., description="Wallet address as requested")
    status: AuthStatus = Field(..., description="UNKNOWN | ACTIVE | BLOCKED | REVIEW")
    trust_score: int = Field(..., ge=0, le=100, description="Trust score (0-100)")
    updated_at: int = Field(..., description="Unix timestamp of last update; 0 if never registered")


class LookupResponse(WalletStatusResponse):
    outcome: str = Field(..., description="ok | invalid_address | not_found")


class BatchStatusRequest(BaseModel):
    wallet_addresses: list[str] = Field(..., max_length=MAX_BATCH_SIZE)


class BatchStatusResponse(BaseModel):
    statuses: list[WalletStatusResponse]


class SetStatusRequest(BaseModel):
    """POST /api/v1/status body. Score range is checked by the registry (soft rejection)."""

    wallet_address: str
    status: AuthStatus
    trust_score: int


class TransferAdminRequest(BaseModel):
    new_admin: str


class SetNextContractRequest(BaseModel):
    contract_address: str


class MutationResponse(BaseModel):
    success: bool
    persisted: bool = Field(False, description="True when the new state was saved to the store")


def _status_response(wallet: str, record: WalletAuthRecord) -> WalletStatusResponse:
    return WalletStatusResponse(
        wallet_address=wallet,
        status=record.status,
        trust_score=record.trust_score,
        updated_at=record.updated_at,
    )


# -----------------------------------------------------------------------------
# Dependencies
# -----------------------------------------------------------------------------


def get_guard(request: Request) -> AuthorizedRegistry:
    return request.app.state.guard


def get_caller(x_caller_address: str | None = Header(None, alias=CALLER_HEADER)) -> str:
    caller = (x_caller_address or "").strip()
    if not caller:
        raise HTTPException(status_code=401, detail=f"{CALLER_HEADER} header required")
    return caller


def _apply_mutation(
    request: Request,
    operation: str,
    mutate: Callable[[], bool],
) -> JSONResponse:
    """
    Run mutate and, on success, save the snapshot, all under the registry lock.

    Soft rejection maps to 400 with success=false. UnauthorizedError propagates
    to the 403 handler. A save error is logged and reported as persisted=false;
    the in-memory mutation stands.
    """
    guard: AuthorizedRegistry = request.app.state.guard
    store: RegistryStore | None = request.app.state.store
    persisted = False
    with guard.registry.locked():
        try:
            success = mutate()
        except UnauthorizedError:
            record_mutation(operation, "unauthorized")
            raise
        if success and store is not None:
            try:
                store.save(guard.registry)
                persisted = True
            except Exception as e:
                record_save_failure(operation)
                logger.exception("registry_save_failed", operation=operation, error=str(e))
        set_registered_wallets(len(guard.registry))

    if not success:
        record_mutation(operation, "rejected")
        logger.info("mutation_rejected", operation=operation)
        return JSONResponse(status_code=400, content={"success": False, "persisted": False})
    record_mutation(operation, "success")
    return JSONResponse(status_code=200, content={"success": True, "persisted": persisted})


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------

router = APIRouter(prefix="/api/v1")


@router.get("/status/{wallet}", response_model=WalletStatusResponse)
def get_status(wallet: str, guard: AuthorizedRegistry = Depends(get_guard)):
    return _status_response(wallet, guard.get_status(wallet))


@router.get("/lookup/{wallet}", response_model=LookupResponse)
def lookup(wallet: str, guard: AuthorizedRegistry = Depends(get_guard)):
    result = guard.lookup(wallet)
    if result.outcome is LookupOutcome.INVALID_ADDRESS:
        raise HTTPException(status_code=400, detail="Invalid wallet address")
    if result.outcome is LookupOutcome.NOT_FOUND:
        raise HTTPException(status_code=404, detail="Wallet not registered")
    base = _status_response(wallet, result.record)
    return LookupResponse(**base.model_dump(), outcome=result.outcome.value)


@router.post("/status/batch", response_model=BatchStatusResponse)
def batch_get_status(body: BatchStatusRequest, guard: AuthorizedRegistry = Depends(get_guard)):
    records = guard.get_statuses(body.wallet_addresses)
    return BatchStatusResponse(
        statuses=[_status_response(w, records[w]) for w in body.wallet_addresses]
    )


@router.post("/status", response_model=MutationResponse)
def set_status(
    body: SetStatusRequest,
    request: Request,
    caller: str = Depends(get_caller),
    guard: AuthorizedRegistry = Depends(get_guard),
):
    return _apply_mutation(
        request,
        "set_status",
        lambda: guard.set_status(caller, body.wallet_address, body.status, body.trust_score),
    )


@router.get("/admin")
def get_admin(guard: AuthorizedRegistry = Depends(get_guard)) -> dict[str, str]:
    return {"admin_address": guard.get_admin()}


@router.post("/admin/transfer", response_model=MutationResponse)
def transfer_admin(
    body: TransferAdminRequest,
    request: Request,
    caller: str = Depends(get_caller),
    guard: AuthorizedRegistry = Depends(get_guard),
):
    return _apply_mutation(
        request,
        "transfer_admin",
        lambda: guard.transfer_admin(caller, body.new_admin),
    )


@router.get("/contract/next")
def get_next_contract(guard: AuthorizedRegistry = Depends(get_guard)) -> dict[str, str]:
    return {"next_contract_address": guard.get_next_contract()}


@router.post("/contract/next", response_model=MutationResponse)
def set_next_contract(
    body: SetNextContractRequest,
    request: Request,
    caller: str = Depends(get_caller),
    guard: AuthorizedRegistry = Depends(get_guard),
):
    return _apply_mutation(
        request,
        "set_next_contract",
        lambda: guard.set_next_contract(caller, body.contract_address),
    )


# -----------------------------------------------------------------------------
# App factory
# -----------------------------------------------------------------------------


def create_app(registry: Registry, store: RegistryStore | None = None) -> FastAPI:
    """Build the FastAPI app around an existing registry (and optional store)."""
    app = FastAPI(
        title="Backend TurboAuth API",
        description="Wallet authorization registry: status, trust score, admin and upgrade pointer.",
        version=__version__,
    )
    app.state.guard = AuthorizedRegistry(registry)
    app.state.store = store
    set_registered_wallets(len(registry))

    @app.middleware("http")
    async def _request_metrics(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        route = request.scope.get("route")
        endpoint = getattr(route, "path", "unmatched")
        observe_request(request.method, endpoint, response.status_code, time.perf_counter() - start)
        return response

    @app.exception_handler(UnauthorizedError)
    async def _unauthorized(request: Request, exc: UnauthorizedError) -> JSONResponse:
        return JSONResponse(status_code=403, content=exc.to_dict())

    @app.exception_handler(TurboAuthError)
    async def _turboauth_error(request: Request, exc: TurboAuthError) -> JSONResponse:
        return JSONResponse(status_code=400, content=exc.to_dict())

    @app.get("/health")
    def health() -> dict[str, Any]:
        return {"status": "healthy", "wallets": len(app.state.guard.registry)}

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(content=render_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(router, tags=["Registry"])
    return app


def build_app() -> FastAPI:
    """App from settings: restore/create the registry via the store when persistence is on."""
    settings = get_settings()
    store: RegistryStore | None = None
    if settings.persist:
        store = RegistryStore(settings.database_url)
        store.init_db()
        registry = store.load_registry(settings.admin_address)
        store.save(registry)
    else:
        registry = Registry(settings.admin_address)
    logger.info("api_app_built", **settings.to_dict())
    return create_app(registry, store)
