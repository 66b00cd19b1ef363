#!/usr/bin/env python
"""
Seed the document store with synthetic tickets and users.

Usage:
    python scripts/seed_demo_data.py --days 60
    python scripts/seed_demo_data.py --days 90 --warm   # also compute rollups
"""

import argparse
import asyncio
import sys
from datetime import date, timedelta
from pathlib import Path

import structlog

sys.path.insert(0, str(Path(__file__).parent.parent))

from ticket_analytics.analytics import AnalyticsService  # noqa: E402
from ticket_analytics.config import get_settings  # noqa: E402
from ticket_analytics.config.logging import configure_logging  # noqa: E402
from ticket_analytics.data import GeneratorConfig, TicketingDataGenerator  # noqa: E402
from ticket_analytics.database import close_database, init_database  # noqa: E402
from ticket_analytics.store import SQLDocumentStore  # noqa: E402

logger = structlog.get_logger(__name__)
settings = get_settings()


async def seed(days: int, seed_value: int, warm: bool) -> None:
    end = date.today() - timedelta(days=1)
    start = end - timedelta(days=days - 1)

    generator = TicketingDataGenerator(GeneratorConfig(start=start, end=end, seed=seed_value))
    users, tickets = generator.generate()

    await init_database()
    store = SQLDocumentStore()
    try:
        for user in users:
            await store.update_document(settings.analytics.users_collection, user["id"], user)
        logger.info("Seeded users", count=len(users))

        for ticket in tickets:
            await store.update_document(settings.analytics.tickets_collection, ticket["id"], ticket)
        logger.info("Seeded tickets", count=len(tickets))

        if warm:
            records = await AnalyticsService(store).get_analytics_range(start, end)
            logger.info("Rollups computed", days=len(records))
    finally:
        await close_database()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed synthetic ticketing data")
    parser.add_argument("--days", type=int, default=60, help="Days of history to generate (default: 60)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--warm", action="store_true", help="Compute daily rollups after seeding")
    args = parser.parse_args()

    configure_logging()
    asyncio.run(seed(args.days, args.seed, args.warm))
