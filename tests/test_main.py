"""
Startup, daily warm-up job and scheduler wiring.
"""

import asyncio
import logging

import pytest
from fastapi.testclient import TestClient

from cnvtbot.bot.dispatcher import Dispatcher
from cnvtbot.config import Settings
from cnvtbot.main import create_app, create_scheduler, warm_snapshot
from cnvtbot.providers.base import RateProviderError
from cnvtbot.services import BotServices
from cnvtbot.storage.base import StoreError

from conftest import SCENARIO_DATE


@pytest.fixture
def services(store, provider, holder, transport):
    return BotServices(
        store=store,
        provider=provider,
        holder=holder,
        dispatcher=Dispatcher(holder, transport),
        telegram=transport
    )


@pytest.fixture
def settings():
    # Webhook mode without a URL: no polling task, no setWebhook call
    return Settings(telegram_mode="webhook", scheduler_enabled=False, _env_file=None)


class TestStartup:

    def test_initial_load_runs_before_serving(self, settings, services, holder, transport):
        with TestClient(create_app(settings, services)) as client:
            assert holder.get().date == SCENARIO_DATE
            assert client.get("/api/v1/health").json()["status"] == "healthy"

        assert transport.closed

    def test_provider_down_is_fatal(self, settings, services, provider, holder):
        provider.fail = True

        with pytest.raises(RateProviderError):
            with TestClient(create_app(settings, services)):
                pass

        assert holder.get() is None

    def test_store_down_is_fatal(self, settings, services, store):
        store.fail_reads = True

        with pytest.raises(StoreError):
            with TestClient(create_app(settings, services)):
                pass

    def test_webhook_is_registered(self, services, transport):
        settings = Settings(
            telegram_mode="webhook",
            telegram_webhook_url="https://bot.test/telegram/webhook",
            scheduler_enabled=False,
            _env_file=None
        )

        with TestClient(create_app(settings, services)):
            assert transport.webhooks == ["https://bot.test/telegram/webhook"]


def test_warm_up_loads_new_day(holder, clock, provider):
    asyncio.run(holder.load())
    clock.today = "2023-01-02"

    asyncio.run(warm_snapshot(holder))

    assert holder.get().date == "2023-01-02"
    assert provider.rate_calls == ["2023-01-01", "2023-01-02"]


def test_warm_up_failure_is_logged_not_raised(holder, provider, caplog):
    provider.fail = True

    with caplog.at_level(logging.ERROR, logger="cnvtbot.main"):
        asyncio.run(warm_snapshot(holder))

    assert holder.get() is None
    assert "Snapshot warm-up failed" in caplog.text


def test_scheduler_registers_daily_job(holder):
    settings = Settings(scheduler_cron_hour=0, scheduler_cron_minute=5, _env_file=None)

    scheduler = create_scheduler(settings, holder)

    [job] = scheduler.get_jobs()
    assert job.id == "daily_snapshot_warmup"
    assert job.args == (holder,)
