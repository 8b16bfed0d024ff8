"""
Assign the first administrator of a board.

Run this script once per new board; afterwards the administrator manages
the board's permissions through the API.

Usage:
    python -m scripts.seed_board_admin --board 1 --user 2 [--board-name "My Board"]
"""
import argparse
import asyncio

from rdb.core.database.engine import get_db, init_db
from rdb.features.permissions.bootstrap import ensure_dashboard, grant_admin
from rdb.utils import get_logger


log = get_logger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--board", type=int, required=True, help="Dashboard id")
    parser.add_argument("--user", type=int, required=True, help="User id to make ADMIN")
    parser.add_argument("--board-name", help="Create the dashboard with this name if missing")
    return parser.parse_args(argv)


async def main(argv=None):
    args = parse_args(argv)

    log.info("Initializing database tables...")
    await init_db()

    async for db in get_db():
        try:
            dashboard = await ensure_dashboard(db, args.board, args.board_name)
            permission = await grant_admin(db, dashboard, args.user)
            log.info(
                "User %s is ADMIN on dashboard %s (permission %s)",
                args.user, dashboard.id, permission.id
            )
        except Exception as e:
            log.error(f"Error assigning board administrator: {e}", exc_info=True)
            await db.rollback()
            raise

        break  # Only use first session


if __name__ == "__main__":
    asyncio.run(main())
