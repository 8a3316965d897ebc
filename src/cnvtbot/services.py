"""
Wiring of the bot's collaborators.

The FastAPI app keeps one BotServices on app.state; tests build their own
with fakes.
"""

from dataclasses import dataclass

from cnvtbot.bot.dispatcher import Dispatcher
from cnvtbot.cache import RateCacheManager, SnapshotHolder
from cnvtbot.config import Settings
from cnvtbot.providers import BaseRateProvider, create_provider
from cnvtbot.storage import PostgresSnapshotStore, SnapshotStore
from cnvtbot.telegram.client import TelegramClient


@dataclass
class BotServices:
    store: SnapshotStore
    provider: BaseRateProvider
    holder: SnapshotHolder
    dispatcher: Dispatcher
    telegram: TelegramClient


def build_services(settings: Settings) -> BotServices:
    store = PostgresSnapshotStore()
    provider = create_provider(settings)
    holder = SnapshotHolder(RateCacheManager(store, provider))
    telegram = TelegramClient(
        settings.telegram_token,
        api_url=settings.telegram_api_url,
        timeout=settings.http_timeout
    )
    return BotServices(
        store=store,
        provider=provider,
        holder=holder,
        dispatcher=Dispatcher(holder, telegram),
        telegram=telegram
    )
