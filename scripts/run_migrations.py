import argparse
import asyncio
from pathlib import Path

import asyncpg

from cnvtbot.config import get_settings

MIGRATIONS_DIR = Path(__file__).resolve().parents[1] / "db" / "migrations"


async def run_migrations(paths: list[Path]) -> None:
    settings = get_settings()

    conn = await asyncpg.connect(
        host=settings.database_host,
        port=settings.database_port,
        database=settings.database_name,
        user=settings.database_user,
        password=settings.database_password,
        ssl=settings.database_ssl_mode,
    )
    try:
        async with conn.transaction():
            for path in paths:
                # Without arguments asyncpg runs a multi-statement script as-is
                await conn.execute(path.read_text(encoding="utf-8"))
                print(f"Applied {path.name}")
    finally:
        await conn.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Apply CNVTBOT SQL migrations")
    parser.add_argument("files", nargs="*", type=Path, help="Migration files (default: all in db/migrations)")
    args = parser.parse_args()

    paths = args.files or sorted(MIGRATIONS_DIR.glob("*.sql"))
    if not paths:
        raise FileNotFoundError(f"No migrations found in {MIGRATIONS_DIR}")
    for path in paths:
        if not path.exists():
            raise FileNotFoundError(f"Migration file not found: {path}")

    asyncio.run(run_migrations(paths))


if __name__ == '__main__':
    main()
