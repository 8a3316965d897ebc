"""
CNVTBOT API Routes

The Telegram webhook plus health and rate inspection endpoints.
"""

import hmac
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Header, HTTPException, Request, status

from cnvtbot import __version__
from cnvtbot.api.schemas import ErrorResponse, HealthResponse, RatesResponse
from cnvtbot.providers.base import RateProviderError
from cnvtbot.storage.base import StoreError
from cnvtbot.telegram.schemas import Update

logger = logging.getLogger(__name__)

router = APIRouter(tags=["CNVTBOT"])


def _error(status_code: int, code: str, message: str, details: dict | None = None) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={
            "error": {
                "code": code,
                "message": message,
                "details": details,
                "timestamp": datetime.now(timezone.utc).isoformat()
            }
        }
    )


@router.post(
    "/telegram/webhook",
    summary="Telegram update webhook",
    responses={403: {"model": ErrorResponse, "description": "Bad secret token"}}
)
async def telegram_webhook(
    update: Update,
    request: Request,
    secret_token: str | None = Header(default=None, alias="X-Telegram-Bot-Api-Secret-Token")
) -> dict:
    """
    Receive one update pushed by Telegram.

    The dispatcher answers the user itself and never raises, so Telegram
    always gets a 200 and does not redeliver.
    """
    expected = request.app.state.settings.telegram_webhook_secret
    if expected and not hmac.compare_digest(secret_token or "", expected):
        logger.warning(f"Rejected webhook update {update.update_id}: bad secret token")
        raise _error(status.HTTP_403_FORBIDDEN, "CNVTBOT_FORBIDDEN", "Invalid secret token")

    await request.app.state.services.dispatcher.handle_update(update)
    return {"ok": True}


@router.get(
    "/api/v1/health",
    response_model=HealthResponse,
    summary="Health check",
    responses={503: {"model": ErrorResponse, "description": "Service unavailable"}}
)
async def health_check(request: Request) -> HealthResponse:
    """
    Returns HTTP 200 if the database is reachable and a snapshot is loaded.
    Otherwise returns HTTP 503.

    An unreachable provider does not fail the check: the held snapshot still
    serves conversions, so the status drops to "degraded" instead.
    """
    services = request.app.state.services
    db_connected = await services.store.health_check()
    snapshot = services.holder.get()
    today = services.holder.manager.clock()

    if not db_connected or snapshot is None:
        raise _error(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "CNVTBOT_UNHEALTHY",
            "Service is not healthy",
            {
                "database": "connected" if db_connected else "disconnected",
                "snapshot_date": snapshot.date if snapshot else None
            }
        )

    provider_ok = await services.provider.health_check()
    if not provider_ok:
        status_text = "degraded"
    elif snapshot.date != today:
        status_text = "stale"
    else:
        status_text = "healthy"

    return HealthResponse(
        status=status_text,
        version=__version__,
        database="connected",
        provider=services.provider.PROVIDER_NAME,
        provider_status="reachable" if provider_ok else "unreachable",
        today=today,
        snapshot_date=snapshot.date
    )


@router.get(
    "/api/v1/rates/today",
    response_model=RatesResponse,
    summary="Today's rate snapshot",
    responses={503: {"model": ErrorResponse, "description": "Rates unavailable"}}
)
async def rates_today(request: Request) -> RatesResponse:
    """Serve the current snapshot, refreshing it first if the date has rolled over."""
    holder = request.app.state.services.holder

    try:
        snapshot = await holder.refresh_if_stale()
    except (RateProviderError, StoreError) as e:
        logger.error(f"Could not load today's rates: {e}")
        raise _error(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "CNVTBOT_RATES_UNAVAILABLE",
            "Today's rates are not available",
            {"reason": str(e)}
        )

    return RatesResponse(
        date=snapshot.date,
        base=snapshot.base,
        symbols=sorted(snapshot.symbols),
        rates={code: str(rate) for code, rate in sorted(snapshot.rates.items())}
    )
