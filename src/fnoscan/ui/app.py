"""FastAPI application exposing the scanner to the dashboard."""

from __future__ import annotations

import logging
from math import ceil
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..config import AppSettings
from ..data.indices import DEFAULT_INDEX_NAMES, display_name
from ..errors import (
    CredentialsUnavailable,
    EmptyUniverse,
    NoSymbolUniverse,
    PersistenceError,
    RateLimited,
    ScannerError,
)
from ..models import Credentials, Results
from ..scan.view import ResultsView, SortDirection, SortKey, qualified_rows, sort_rows
from ..services import ScannerServices, build_services

logger = logging.getLogger(__name__)


class SaveCredentialsRequest(BaseModel):
    """Fyers credentials as submitted from the settings form."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="forbid",
    )

    client_id: str = Field(..., min_length=1)
    secret: str = Field(..., min_length=1)
    redirect_url: str = Field(..., min_length=1)
    access_token: str = Field(..., min_length=1)
    refresh_token: str = ""
    expiry: int = Field(
        default=0,
        ge=0,
        description="Token expiry in epoch nanoseconds; 0 when the token does not expire.",
    )

    def to_credentials(self) -> Credentials:
        return Credentials(
            client_id=self.client_id,
            secret=self.secret,
            redirect_url=self.redirect_url,
            access_token=self.access_token,
            refresh_token=self.refresh_token,
            expiry=self.expiry,
        )


class SymbolListRequest(BaseModel):
    symbols: List[str] = Field(..., description="Symbols to scan, one entry per symbol.")

    model_config = ConfigDict(extra="forbid")


def _http_error(exc: ScannerError) -> HTTPException:
    if isinstance(exc, (CredentialsUnavailable, NoSymbolUniverse)):
        return HTTPException(status_code=412, detail=str(exc))
    if isinstance(exc, EmptyUniverse):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, RateLimited):
        return HTTPException(
            status_code=429,
            detail=str(exc),
            headers={"Retry-After": str(ceil(exc.retry_after_seconds))},
        )
    if isinstance(exc, PersistenceError):
        logger.error("Request failed on persistence: %s", exc)
    return HTTPException(status_code=500, detail=str(exc))


def _serialize_results(results: Results | None) -> Dict[str, Any] | None:
    if results is None:
        return None
    return results.model_dump(mode="json", by_alias=True)


def create_app(
    settings: AppSettings | None = None,
    *,
    services: ScannerServices | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(title="F&O Bull/Bear Scanner", version="0.1.0")
    app.state.services = services or build_services(settings)

    def _services() -> ScannerServices:
        return app.state.services

    @app.post("/api/credentials", response_class=JSONResponse)
    async def save_credentials(request_body: SaveCredentialsRequest) -> JSONResponse:
        try:
            status = _services().credentials.save(request_body.to_credentials())
        except ScannerError as exc:
            raise _http_error(exc) from exc
        return JSONResponse({"status": status.value})

    @app.delete("/api/credentials", response_class=JSONResponse)
    async def clear_credentials() -> JSONResponse:
        try:
            _services().credentials.clear()
        except ScannerError as exc:
            raise _http_error(exc) from exc
        return JSONResponse({"status": _services().credentials.status().value})

    @app.get("/api/status", response_class=JSONResponse)
    async def get_status() -> JSONResponse:
        return JSONResponse({"status": _services().credentials.status().value})

    @app.put("/api/symbols", response_class=JSONResponse)
    async def save_symbol_list(request_body: SymbolListRequest) -> JSONResponse:
        try:
            symbols = _services().universe.save(request_body.symbols)
        except ScannerError as exc:
            raise _http_error(exc) from exc
        return JSONResponse({"symbols": symbols, "count": len(symbols)})

    @app.get("/api/symbols", response_class=JSONResponse)
    async def get_symbol_list() -> JSONResponse:
        return JSONResponse({"symbols": _services().universe.list()})

    @app.post("/api/scan", response_class=JSONResponse)
    def run_new_scan() -> JSONResponse:
        try:
            results = _services().orchestrator.run_scan()
        except ScannerError as exc:
            raise _http_error(exc) from exc
        return JSONResponse(_serialize_results(results))

    @app.get("/api/results", response_class=JSONResponse)
    async def get_results() -> JSONResponse:
        return JSONResponse(_serialize_results(_services().results.latest()))

    @app.get("/api/results/last-scan", response_class=JSONResponse)
    async def get_last_scan_timestamp() -> JSONResponse:
        return JSONResponse({"timestamp": _services().results.last_scan_time()})

    @app.delete("/api/results", response_class=JSONResponse)
    async def clear_all_caches() -> JSONResponse:
        try:
            _services().results.clear()
        except ScannerError as exc:
            raise _http_error(exc) from exc
        return JSONResponse({"cleared": True})

    @app.get("/api/results/{view}", response_class=JSONResponse)
    async def get_side_results(
        view: ResultsView,
        sort: SortKey = Query(default=SortKey.SYMBOL, description="Column to sort by."),
        direction: SortDirection = Query(default=SortDirection.ASC),
    ) -> JSONResponse:
        rows = sort_rows(qualified_rows(_services().results.latest(), view), sort, direction)
        return JSONResponse({
            "view": view.value,
            "count": len(rows),
            "rows": [row.to_dict() for row in rows],
        })

    @app.get("/api/indices", response_class=JSONResponse)
    def get_index_performance(
        names: List[str] | None = Query(
            default=None,
            description="Index names to quote; defaults to the dashboard index set.",
        ),
    ) -> JSONResponse:
        requested = names or list(DEFAULT_INDEX_NAMES)
        entries = _services().indices.fetch(requested)
        payload = []
        for entry in entries:
            item = entry.model_dump(mode="json", by_alias=True)
            item["displayName"] = display_name(entry.name)
            payload.append(item)
        return JSONResponse({"indices": payload})

    return app


__all__ = ["SaveCredentialsRequest", "SymbolListRequest", "create_app"]
