"""
PostgreSQL Snapshot Store

Table `rate_snapshots` (db/migrations/001_initial_schema.sql), one row per
date, symbols and rates as JSONB. Rates are stored as decimal strings.
"""

import json
import logging
from datetime import date as date_type

import asyncpg

from cnvtbot.database import check_connection, get_connection
from cnvtbot.models import RateSnapshot
from cnvtbot.storage.base import SnapshotStore, StoreError

logger = logging.getLogger(__name__)


class PostgresSnapshotStore(SnapshotStore):
    """asyncpg-backed store; first writer for a date wins."""

    async def find_by_date(self, date: str) -> RateSnapshot | None:
        try:
            async with get_connection() as conn:
                row = await conn.fetchrow(
                    """
                    SELECT date, symbols, base, rates
                    FROM rate_snapshots
                    WHERE date = $1
                    """,
                    date_type.fromisoformat(date)
                )
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise StoreError(
                message=f"Failed to read snapshot for {date}: {e}",
                operation="find_by_date",
                details={"date": date}
            ) from e

        return self._row_to_snapshot(row) if row else None

    async def insert(self, snapshot: RateSnapshot) -> RateSnapshot:
        payload = snapshot.model_dump(mode="json")
        snapshot_date = date_type.fromisoformat(snapshot.date)

        try:
            async with get_connection() as conn:
                async with conn.transaction():
                    row = await conn.fetchrow(
                        """
                        INSERT INTO rate_snapshots (date, symbols, base, rates)
                        VALUES ($1, $2::jsonb, $3, $4::jsonb)
                        ON CONFLICT (date) DO NOTHING
                        RETURNING date, symbols, base, rates
                        """,
                        snapshot_date,
                        json.dumps(payload["symbols"]),
                        snapshot.base,
                        json.dumps(payload["rates"])
                    )
                    if row is None:
                        logger.info(f"Snapshot for {snapshot.date} already stored, keeping existing row")
                        row = await conn.fetchrow(
                            """
                            SELECT date, symbols, base, rates
                            FROM rate_snapshots
                            WHERE date = $1
                            """,
                            snapshot_date
                        )
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise StoreError(
                message=f"Failed to insert snapshot for {snapshot.date}: {e}",
                operation="insert",
                details={"date": snapshot.date}
            ) from e

        if row is None:
            raise StoreError(
                message=f"Snapshot for {snapshot.date} vanished after insert",
                operation="insert",
                details={"date": snapshot.date}
            )

        return self._row_to_snapshot(row)

    async def health_check(self) -> bool:
        return await check_connection()

    @staticmethod
    def _row_to_snapshot(row) -> RateSnapshot:
        symbols = row["symbols"]
        rates = row["rates"]
        # asyncpg returns json/jsonb columns as text unless a codec is set
        if isinstance(symbols, str):
            symbols = json.loads(symbols)
        if isinstance(rates, str):
            rates = json.loads(rates)
        return RateSnapshot(
            date=row["date"],
            symbols=symbols,
            base=row["base"],
            rates=rates
        )
