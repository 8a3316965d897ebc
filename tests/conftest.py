"""
Shared fakes for the store, provider and transport.
"""

from decimal import Decimal

import pytest

from cnvtbot.cache import RateCacheManager, SnapshotHolder
from cnvtbot.models import RateSnapshot
from cnvtbot.providers.base import BaseRateProvider, RateProviderError
from cnvtbot.storage.base import SnapshotStore, StoreError

SCENARIO_DATE = "2023-01-01"


def make_snapshot(date: str = SCENARIO_DATE, **overrides) -> RateSnapshot:
    """Scenario snapshot: EUR base, USD 1.10, UAH 40.0."""
    data = {
        "date": date,
        "symbols": {"USD": True, "EUR": True, "UAH": True},
        "base": "EUR",
        "rates": {"USD": "1.10", "UAH": "40.0"},
    }
    data.update(overrides)
    return RateSnapshot(**data)


class FakeStore(SnapshotStore):
    def __init__(self, *snapshots: RateSnapshot):
        self.snapshots = {snapshot.date: snapshot for snapshot in snapshots}
        self.finds = 0
        self.inserts = 0
        self.fail_reads = False
        self.fail_writes = False

    async def find_by_date(self, date):
        self.finds += 1
        if self.fail_reads:
            raise StoreError("read failed", operation="find_by_date")
        return self.snapshots.get(date)

    async def insert(self, snapshot):
        self.inserts += 1
        if self.fail_writes:
            raise StoreError("write failed", operation="insert")
        return self.snapshots.setdefault(snapshot.date, snapshot)


class FakeProvider(BaseRateProvider):
    PROVIDER_NAME = "fake"

    def __init__(self, symbols=None, base="EUR", rates=None):
        super().__init__("http://rates.invalid")
        self.symbols = symbols if symbols is not None else {"USD": "US Dollar", "EUR": "Euro", "UAH": "Hryvnia"}
        self.base = base
        self.rates = rates if rates is not None else {"USD": Decimal("1.10"), "UAH": Decimal("40.0")}
        self.symbol_calls = 0
        self.rate_calls: list[str] = []
        self.fail = False

    async def fetch_symbols(self):
        self.symbol_calls += 1
        if self.fail:
            raise RateProviderError("unreachable", provider=self.PROVIDER_NAME, error_type="NETWORK")
        return dict(self.symbols)

    async def fetch_rates(self, date):
        self.rate_calls.append(date)
        if self.fail:
            raise RateProviderError("unreachable", provider=self.PROVIDER_NAME, error_type="NETWORK")
        return self.base, dict(self.rates)


class FakeTransport:
    def __init__(self):
        self.messages: list[tuple[int, str]] = []
        self.inline_answers: list[dict] = []
        self.fail_next = 0
        self.webhooks: list[str] = []
        self.closed = False

    async def set_webhook(self, url, secret_token=""):
        self.webhooks.append(url)

    async def delete_webhook(self):
        pass

    async def close(self):
        self.closed = True

    async def send_message(self, chat_id, text):
        if self.fail_next:
            self.fail_next -= 1
            raise RuntimeError("transport down")
        self.messages.append((chat_id, text))

    async def answer_inline_query(self, inline_query_id, results, cache_time=0):
        if self.fail_next:
            self.fail_next -= 1
            raise RuntimeError("transport down")
        self.inline_answers.append({
            "inline_query_id": inline_query_id,
            "results": [result.model_dump() for result in results],
            "cache_time": cache_time,
        })


class Clock:
    def __init__(self, today: str = SCENARIO_DATE):
        self.today = today

    def __call__(self) -> str:
        return self.today


@pytest.fixture
def snapshot():
    return make_snapshot()


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def manager(store, provider, clock):
    return RateCacheManager(store, provider, clock=clock)


@pytest.fixture
def holder(manager):
    return SnapshotHolder(manager)


@pytest.fixture
def transport():
    return FakeTransport()
