import argparse
import asyncio
from datetime import date

from cnvtbot.conversion import convert
from cnvtbot.database import close_pool
from cnvtbot.storage import PostgresSnapshotStore


async def main():
    parser = argparse.ArgumentParser(description="Show the stored rate snapshot for a date")
    parser.add_argument("--date", "-d", type=str, default=date.today().isoformat(), help="Date in YYYY-MM-DD format")
    parser.add_argument("--convert", "-c", nargs=3, metavar=("FROM", "TO", "AMOUNT"), help="Also run a conversion")
    args = parser.parse_args()

    target_date = date.fromisoformat(args.date).isoformat()

    store = PostgresSnapshotStore()
    try:
        snapshot = await store.find_by_date(target_date)
    finally:
        await close_pool()

    if snapshot is None:
        print(f"No snapshot stored for {target_date}")
        return

    print(f"Date: {snapshot.date}")
    print(f"Base: {snapshot.base}")
    print(f"Symbols: {len(snapshot.symbols)}")
    for code, rate in sorted(snapshot.rates.items()):
        print(f"  {code}: {rate}")

    if args.convert:
        from_code, to_code, amount = args.convert
        result = convert(snapshot, from_code, to_code, amount)
        print(f"{amount} {from_code} -> {result if result is not None else 'rejected'} {to_code}")


if __name__ == "__main__":
    asyncio.run(main())
