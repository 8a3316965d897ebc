"""
CNVTBOT Main Application Entry Point

Startup loads today's snapshot before anything is served; if the provider
or the database is unavailable at that point the process exits.
"""

import asyncio
import contextlib
import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from fastapi import FastAPI

from cnvtbot import __version__
from cnvtbot.api import router
from cnvtbot.cache import SnapshotHolder
from cnvtbot.config import Settings, get_settings
from cnvtbot.database import close_pool
from cnvtbot.providers.base import RateProviderError
from cnvtbot.services import BotServices, build_services
from cnvtbot.storage.base import StoreError
from cnvtbot.telegram.polling import run_polling

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


async def warm_snapshot(holder: SnapshotHolder) -> None:
    """Scheduled job: load the new day's rates before the first user asks."""
    logger.info("⏰ Snapshot warm-up triggered")
    try:
        snapshot = await holder.refresh_if_stale()
        logger.info(f"⏰ Snapshot warm-up complete: {snapshot.date}")
    except (RateProviderError, StoreError) as e:
        # The next inbound event retries the refresh
        logger.error(f"⏰ Snapshot warm-up failed: {e}")


def create_scheduler(settings: Settings, holder: SnapshotHolder) -> AsyncIOScheduler:
    if settings.scheduler_timezone:
        scheduler = AsyncIOScheduler(timezone=settings.scheduler_timezone)
    else:
        scheduler = AsyncIOScheduler()

    scheduler.add_job(
        warm_snapshot,
        CronTrigger(
            hour=settings.scheduler_cron_hour,
            minute=settings.scheduler_cron_minute
        ),
        args=[holder],
        id="daily_snapshot_warmup",
        name="Daily snapshot warm-up",
        replace_existing=True
    )
    return scheduler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    settings: Settings = app.state.settings
    services: BotServices = app.state.services
    scheduler: AsyncIOScheduler | None = None
    polling_task: asyncio.Task | None = None

    # Startup
    logger.info(f"🚀 Starting CNVTBOT v.{__version__} ({settings.telegram_mode} mode)")

    snapshot = await services.holder.load()
    logger.info(f"✅ Rates ready for {snapshot.date} (base {snapshot.base})")

    if settings.scheduler_enabled:
        scheduler = create_scheduler(settings, services.holder)
        scheduler.start()
        logger.info(
            f"⏰ Scheduler started: warm-up daily at "
            f"{settings.scheduler_cron_hour:02d}:{settings.scheduler_cron_minute:02d}"
        )

    if settings.telegram_mode == "webhook":
        if settings.telegram_webhook_url:
            await services.telegram.set_webhook(
                settings.telegram_webhook_url,
                secret_token=settings.telegram_webhook_secret
            )
        else:
            logger.warning("⚠️ Webhook mode without TELEGRAM_WEBHOOK_URL; expecting it registered elsewhere")
    else:
        # getUpdates is refused while a webhook is registered
        await services.telegram.delete_webhook()
        polling_task = asyncio.create_task(
            run_polling(
                services.telegram,
                services.dispatcher.handle_update,
                poll_timeout=settings.telegram_poll_timeout
            )
        )

    yield

    # Shutdown
    logger.info("🛑 Shutting down CNVTBOT")

    if polling_task:
        polling_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await polling_task

    if scheduler:
        scheduler.shutdown()
        logger.info("⏰ Scheduler stopped")

    await services.telegram.close()
    await close_pool()
    logger.info("✅ Shutdown complete")


def create_app(settings: Settings | None = None, services: BotServices | None = None) -> FastAPI:
    """Create FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="CNVTBOT",
        description="Telegram currency conversion bot",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/api/v1/openapi.json"
    )
    app.state.settings = settings
    app.state.services = services or build_services(settings)

    app.include_router(router)

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "CNVTBOT",
            "version": __version__,
            "mode": settings.telegram_mode,
            "docs": "/docs",
            "api": {
                "health": "/api/v1/health",
                "rates_today": "/api/v1/rates/today",
                "webhook": "/telegram/webhook"
            }
        }

    return app


def main():
    """Main entry point for running the bot."""
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    logger.info(f"Starting CNVTBOT server on {settings.api_host}:{settings.api_port}")

    uvicorn.run(
        "cnvtbot.main:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    main()
