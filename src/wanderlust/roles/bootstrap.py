"""Promote the first admin.

Run once after the first user has signed in, then manage roles through the API.

Usage: python -m wanderlust.roles.bootstrap <email>
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from wanderlust.config import get_settings
from wanderlust.database import close_db, get_session, init_db
from wanderlust.roles.service import promote_to_admin

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


async def run(email: str) -> bool:
    """Returns True when a user was promoted."""
    settings = get_settings()
    await init_db(settings.database_url)
    try:
        async for db in get_session():
            user = await promote_to_admin(db, email)
            if user is None:
                logger.error("User with email %s not found", email)
                return False
            await db.commit()
            logger.info("Set %s (id=%d) as admin", email, user.id)
            return True
        return False
    finally:
        await close_db()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Promote a user to admin by email.")
    parser.add_argument("email")
    args = parser.parse_args(argv)
    return 0 if asyncio.run(run(args.email)) else 1


if __name__ == "__main__":
    sys.exit(main())
