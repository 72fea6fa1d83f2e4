from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Query, Request, Response
from fastapi.responses import JSONResponse

from cache_policy import NO_STORE, cache_control_header
from models import ErrorResponse, FuelPricesResponse
from scrapers.anp_fuel import fetch_fuel_prices
from source_config import ConfigError, SourceConfig, load_config

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

app = FastAPI(title="ANP Fuel Prices API", version="1.0.0")


def get_config() -> SourceConfig:
    return load_config()


def _error_response(err: Exception) -> JSONResponse:
    body = ErrorResponse(error=str(err))
    return JSONResponse(
        status_code=500,
        content=body.model_dump(mode="json"),
        headers={"Cache-Control": NO_STORE},
    )


@app.exception_handler(ConfigError)
async def config_error_handler(request: Request, err: ConfigError) -> JSONResponse:
    logger.error("Invalid configuration for %s: %s", request.url.path, err)
    return _error_response(err)


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in CORS_HEADERS.items():
        response.headers[name] = value
    return response


@app.options("/api/fuel-prices")
def fuel_prices_preflight() -> Response:
    return Response(status_code=200)


@app.get("/api/fuel-prices")
def fuel_prices(
    refresh: str | None = Query(default=None),
    config: SourceConfig = Depends(get_config),
) -> JSONResponse:
    force_refresh = refresh == "true"
    try:
        payload = fetch_fuel_prices(config)
        validated = FuelPricesResponse.model_validate(payload)
        cache_control = cache_control_header(config, force_refresh=force_refresh)
    except Exception as err:
        logger.error("Fuel prices request failed: %s", err, exc_info=True)
        return _error_response(err)

    return JSONResponse(
        status_code=200,
        content=validated.model_dump(mode="json", by_alias=True),
        headers={"Cache-Control": cache_control},
    )
