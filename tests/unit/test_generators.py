"""
Unit Tests - Synthetic Data Generator
"""
from datetime import date, datetime

from ticket_analytics.analytics.models import RawTicketRecord, RawUserRecord
from ticket_analytics.data import GeneratorConfig, TicketingDataGenerator, generate_demo_data


class TestTicketingDataGenerator:
    """Tests for TicketingDataGenerator"""

    def test_documents_fit_raw_record_models(self):
        users, tickets = generate_demo_data(days=5, end=date(2025, 3, 14), seed=1)

        assert users and tickets
        for document in tickets:
            record = RawTicketRecord.model_validate(document)
            assert record.category in {"Standard", "Premium", "VIP"}
            assert record.status in {"active", "cancelled"}
        for document in users:
            RawUserRecord.model_validate(document)

    def test_timestamps_within_window(self):
        users, tickets = generate_demo_data(days=3, end=date(2025, 3, 14), seed=3)

        for document in users + tickets:
            assert datetime(2025, 3, 12) <= document["createdAt"] < datetime(2025, 3, 15)

    def test_seed_is_deterministic(self):
        config = GeneratorConfig(start=date(2025, 3, 1), end=date(2025, 3, 7), seed=11)

        _, first = TicketingDataGenerator(config).generate()
        _, second = TicketingDataGenerator(config).generate()

        assert [t["ticketType"] for t in first] == [t["ticketType"] for t in second]
        assert [t["createdAt"] for t in first] == [t["createdAt"] for t in second]

    def test_volume_trends_upward(self):
        config = GeneratorConfig(
            start=date(2025, 1, 1),
            end=date(2025, 2, 28),
            base_tickets_per_day=10,
            daily_growth=2.0,
            signups_per_day=1,
        )

        _, tickets = TicketingDataGenerator(config).generate()

        january = sum(1 for t in tickets if t["createdAt"].month == 1)
        february = sum(1 for t in tickets if t["createdAt"].month == 2)
        assert february > january
