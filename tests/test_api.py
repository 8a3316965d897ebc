"""
API route tests: Telegram webhook, health and today's rates.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from cnvtbot.bot.commands import HELP_TEXT
from cnvtbot.bot.dispatcher import Dispatcher
from cnvtbot.config import Settings
from cnvtbot.main import create_app
from cnvtbot.services import BotServices

from conftest import SCENARIO_DATE

SECRET = "s3cret"


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
def client(services):
    settings = Settings(telegram_mode="webhook", telegram_webhook_secret=SECRET, _env_file=None)
    # No `with`: the lifespan (startup load, scheduler, polling) is not run
    return TestClient(create_app(settings, services))


def help_update():
    return {
        "update_id": 100,
        "message": {
            "message_id": 1,
            "chat": {"id": 42},
            "text": "/help",
            "entities": [{"type": "bot_command", "offset": 0, "length": 5}],
        },
    }


class TestWebhook:

    def test_update_is_dispatched(self, client, transport):
        response = client.post(
            "/telegram/webhook",
            json=help_update(),
            headers={"X-Telegram-Bot-Api-Secret-Token": SECRET}
        )

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert transport.messages == [(42, HELP_TEXT)]

    def test_missing_secret_is_rejected(self, client, transport):
        response = client.post("/telegram/webhook", json=help_update())

        assert response.status_code == 403
        assert response.json()["detail"]["error"]["code"] == "CNVTBOT_FORBIDDEN"
        assert transport.messages == []

    def test_wrong_secret_is_rejected(self, client):
        response = client.post(
            "/telegram/webhook",
            json=help_update(),
            headers={"X-Telegram-Bot-Api-Secret-Token": "guess"}
        )
        assert response.status_code == 403

    def test_failing_update_still_returns_ok(self, client, transport, provider):
        provider.fail = True
        update = {"update_id": 101, "inline_query": {"id": "q-9", "query": "usd uah 5"}}

        response = client.post(
            "/telegram/webhook",
            json=update,
            headers={"X-Telegram-Bot-Api-Secret-Token": SECRET}
        )

        assert response.status_code == 200
        assert transport.inline_answers[0]["results"][0]["title"] == "Failed to convert."


class TestHealth:

    def test_unhealthy_without_snapshot(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 503
        assert response.json()["detail"]["error"]["code"] == "CNVTBOT_UNHEALTHY"

    def test_healthy_with_todays_snapshot(self, client, holder):
        asyncio.run(holder.load())

        response = client.get("/api/v1/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["provider"] == "fake"
        assert body["provider_status"] == "reachable"
        assert body["snapshot_date"] == SCENARIO_DATE

    def test_unreachable_provider_degrades(self, client, holder, provider):
        asyncio.run(holder.load())
        provider.fail = True

        response = client.get("/api/v1/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "degraded"
        assert body["provider_status"] == "unreachable"

    def test_stale_snapshot_is_reported(self, client, holder, clock):
        asyncio.run(holder.load())
        clock.today = "2023-01-02"

        body = client.get("/api/v1/health").json()

        assert body["status"] == "stale"
        assert body["today"] == "2023-01-02"


class TestRatesToday:

    def test_serves_snapshot(self, client):
        response = client.get("/api/v1/rates/today")

        assert response.status_code == 200
        assert response.json() == {
            "date": SCENARIO_DATE,
            "base": "EUR",
            "symbols": ["EUR", "UAH", "USD"],
            "rates": {"UAH": "40.0", "USD": "1.10"},
        }

    def test_provider_down(self, client, provider):
        provider.fail = True

        response = client.get("/api/v1/rates/today")

        assert response.status_code == 503
        assert response.json()["detail"]["error"]["code"] == "CNVTBOT_RATES_UNAVAILABLE"


def test_root(client):
    body = client.get("/").json()
    assert body["name"] == "CNVTBOT"
    assert body["mode"] == "webhook"
