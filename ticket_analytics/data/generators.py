"""
Synthetic Data Generator

Generates realistic ticket and user documents for demos and local
development. Daily volume follows a linear trend with Poisson noise so the
forecasting endpoints have something to fit.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
from faker import Faker

from ticket_analytics.analytics.dates import iter_days

# =============================================================================
# CONFIGURATION
# =============================================================================

TICKET_CATEGORIES: Sequence[Tuple[str, float]] = (
    ("Standard", 0.70),
    ("Premium", 0.22),
    ("VIP", 0.08),
)

EVENT_KINDS = ["Conference", "Summit", "Meetup", "Festival", "Workshop", "Gala"]


@dataclass
class GeneratorConfig:
    """Knobs for the synthetic data set"""
    start: date
    end: date
    base_tickets_per_day: float = 40.0
    daily_growth: float = 0.5
    signups_per_day: float = 12.0
    user_pool_size: int = 300
    event_count: int = 6
    check_in_rate: float = 0.6
    cancel_rate: float = 0.04
    anonymous_rate: float = 0.05
    deleted_user_rate: float = 0.03
    seed: int = 42
    categories: Sequence[Tuple[str, float]] = field(default_factory=lambda: TICKET_CATEGORIES)


# =============================================================================
# GENERATORS
# =============================================================================

class TicketingDataGenerator:
    """
    Generate ticket and user documents shaped like the ticketing system's.

    Example:
        generator = TicketingDataGenerator(GeneratorConfig(start, end))
        users, tickets = generator.generate()
    """

    def __init__(self, config: GeneratorConfig):
        self.config = config
        self.rng = np.random.default_rng(config.seed)
        self.fake = Faker()
        self.fake.seed_instance(config.seed)

    def _random_time(self, day: date) -> datetime:
        seconds = int(self.rng.integers(0, 24 * 3600))
        return datetime.combine(day, time.min) + timedelta(seconds=seconds)

    def event_names(self) -> List[str]:
        return [
            f"{self.fake.city()} {EVENT_KINDS[i % len(EVENT_KINDS)]}"
            for i in range(self.config.event_count)
        ]

    def generate_users(self) -> List[Dict[str, Any]]:
        """Sign-ups spread over the configured window"""
        users = []
        for day in iter_days(self.config.start, self.config.end):
            for _ in range(int(self.rng.poisson(self.config.signups_per_day))):
                users.append({
                    "id": str(uuid.uuid4()),
                    "email": self.fake.email(),
                    "displayName": self.fake.name(),
                    "createdAt": self._random_time(day),
                    "deleted": bool(self.rng.random() < self.config.deleted_user_rate),
                })
        return users

    def generate_tickets(self, user_ids: Sequence[str]) -> List[Dict[str, Any]]:
        """Tickets with a linear daily trend, owned by ``user_ids``"""
        names = [c for c, _ in self.config.categories]
        weights = np.array([w for _, w in self.config.categories], dtype=float)
        weights /= weights.sum()
        events = self.event_names()
        owners = list(user_ids) or [str(uuid.uuid4()) for _ in range(self.config.user_pool_size)]

        tickets = []
        for offset, day in enumerate(iter_days(self.config.start, self.config.end)):
            expected = max(self.config.base_tickets_per_day + self.config.daily_growth * offset, 0.0)
            for _ in range(int(self.rng.poisson(expected))):
                anonymous = self.rng.random() < self.config.anonymous_rate
                tickets.append({
                    "id": str(uuid.uuid4()),
                    "createdAt": self._random_time(day),
                    "ticketType": str(self.rng.choice(names, p=weights)),
                    "eventName": events[int(self.rng.integers(0, len(events)))],
                    "userId": None if anonymous else owners[int(self.rng.integers(0, len(owners)))],
                    "checkedIn": bool(self.rng.random() < self.config.check_in_rate),
                    "status": "cancelled" if self.rng.random() < self.config.cancel_rate else "active",
                })
        return tickets

    def generate(self) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        """Return (users, tickets)"""
        users = self.generate_users()
        tickets = self.generate_tickets([u["id"] for u in users])
        return users, tickets


def generate_demo_data(
    days: int = 60,
    end: Optional[date] = None,
    seed: int = 42,
) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """Convenience wrapper: ``days`` of data ending at ``end`` (yesterday by default)."""
    end = end or date.today() - timedelta(days=1)
    start = end - timedelta(days=days - 1)
    return TicketingDataGenerator(GeneratorConfig(start=start, end=end, seed=seed)).generate()
