"""
FastAPI application exposing the business date calculation.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from ..adapters.holiday_cache import HolidayCache, HolidaySourceProtocol
from ..adapters.holiday_client import HolidayClient
from ..config import AppConfig
from ..domain.exceptions import (
    CalendarExhaustedError,
    CalendarSourceUnavailableError,
    InvalidInputError,
)
from ..services.business_date import BusinessDateService, format_utc
from .params import parse_query

logger = logging.getLogger(__name__)


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": code, "message": message})


def create_app(
    config: AppConfig | None = None,
    source: HolidaySourceProtocol | None = None,
) -> FastAPI:
    """
    Build the HTTP application.

    Args:
        config: Application configuration (defaults when omitted)
        source: Holiday source; the remote ``HolidayClient`` when omitted

    The holiday cache lives on ``app.state`` and is shared by all requests.
    """
    config = config or AppConfig()
    if source is None:
        source = HolidayClient(
            url=config.holidays.url,
            timeout=config.holidays.timeout_seconds,
        )

    cache = HolidayCache(source)
    service = BusinessDateService.from_cache(
        config.to_schedule(),
        cache,
        prefetch_years_ahead=config.holidays.prefetch_years_ahead,
    )

    app = FastAPI(
        title="Business Days API",
        description="Add business days and hours on a working calendar",
    )
    app.state.holiday_cache = cache
    app.state.service = service

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, exc: InvalidInputError):
        return _error(400, exc.code, exc.message)

    @app.exception_handler(CalendarSourceUnavailableError)
    async def source_unavailable_handler(request: Request, exc: CalendarSourceUnavailableError):
        logger.warning("Holiday source unavailable: %s", exc)
        return _error(503, "ServiceUnavailable", "Failed to fetch holidays data.")

    @app.exception_handler(CalendarExhaustedError)
    async def calendar_exhausted_handler(request: Request, exc: CalendarExhaustedError):
        logger.error("Calendar exhausted: %s", exc)
        return _error(500, "CalendarExhausted", str(exc))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unexpected error while handling %s", request.url.path)
        return _error(500, "ServerError", "An unexpected error occurred.")

    @app.get("/healthz", include_in_schema=False)
    async def healthz():
        return {"ok": True}

    @app.get("/")
    async def business_date(
        days: Optional[str] = Query(default=None),
        hours: Optional[str] = Query(default=None),
        date: Optional[str] = Query(default=None),
    ):
        query = parse_query(days=days, hours=hours, date=date)
        result = await service.compute(start=query.start, days=query.days, hours=query.hours)
        return {"date": format_utc(result)}

    return app
