"""
getUpdates long-polling loop.

Every update is dispatched as its own task, so a slow conversion does not
hold up the next poll. The loop runs until cancelled.
"""

import asyncio
import logging
from typing import Awaitable, Callable

from pydantic import ValidationError

from cnvtbot.telegram.client import TelegramClient, TelegramError
from cnvtbot.telegram.schemas import Update

logger = logging.getLogger(__name__)

ERROR_BACKOFF_SECONDS = 5.0


async def run_polling(
    client: TelegramClient,
    handle_update: Callable[[Update], Awaitable[None]],
    poll_timeout: int = 30,
    backoff: float = ERROR_BACKOFF_SECONDS
) -> None:
    offset: int | None = None
    tasks: set[asyncio.Task] = set()

    logger.info("📡 Polling Telegram for updates")
    try:
        while True:
            try:
                raw_updates = await client.get_updates(offset=offset, timeout=poll_timeout)
            except TelegramError as e:
                logger.warning(f"getUpdates failed ({e.error_type}): {e}; retrying in {backoff}s")
                await asyncio.sleep(backoff)
                continue

            for raw in raw_updates:
                update_id = raw.get("update_id")
                if isinstance(update_id, int):
                    offset = update_id + 1

                try:
                    update = Update.model_validate(raw)
                except ValidationError as e:
                    logger.warning(f"Skipping malformed update {update_id}: {e}")
                    continue

                task = asyncio.create_task(handle_update(update))
                tasks.add(task)
                task.add_done_callback(tasks.discard)
    finally:
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("Polling stopped")
