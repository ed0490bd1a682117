"""Integration tests for the revenue aggregator against a real database"""

import pytest
import pytest_asyncio
from datetime import datetime
from decimal import Decimal

from src.adapter.services.use_case_factory import UseCaseFactory
from src.app.use_cases.monetization.dtos import ActorDTO, ActorRole
from src.domain.transaction import RevenueSource, Transaction, TransactionStatus

NOW = datetime(2024, 6, 15, 12, 0, 0)


def transaction(amount, created_at, source=RevenueSource.MERCHANDISE, status=TransactionStatus.COMPLETED,
                payer_id="fan_1", artist_id="artist_1"):
    return Transaction(
        amount=Decimal(amount),
        payer_id=payer_id,
        artist_id=artist_id,
        description="Seeded purchase",
        source=source,
        status=status,
        created_at=created_at,
        updated_at=created_at,
    )


@pytest.fixture
def use_cases(db_session):
    return UseCaseFactory(db_session, clock=lambda: NOW)


@pytest_asyncio.fixture
async def seeded(db_session, catalog):
    db_session.add_all([
        # M-1 and M-4
        transaction("100", datetime(2024, 5, 3), RevenueSource.EVENT_TICKET),
        transaction("40", datetime(2024, 2, 20), RevenueSource.MERCHANDISE, payer_id="fan_2"),
        # Outside the 6-month window
        transaction("10", datetime(2023, 10, 1), RevenueSource.DONATION, payer_id="fan_2"),
        # Not COMPLETED, never counted
        transaction("500", datetime(2024, 5, 4), status=TransactionStatus.FAILED),
        transaction("300", datetime(2024, 5, 5), status=TransactionStatus.REFUNDED),
        transaction("200", datetime(2024, 5, 6), status=TransactionStatus.PENDING),
        # Other artist
        transaction("999", datetime(2024, 5, 7), artist_id="artist_2"),
    ])
    await db_session.commit()


@pytest.mark.asyncio
class TestRevenueSummary:

    async def test_six_month_series_with_gaps(self, use_cases, seeded):
        """
        Given: COMPLETED transactions in M-1 and M-4 (and one older)
        When: Summarizing revenue
        Then: Six months oldest first, zeros for M, M-2, M-3, M-5
        """
        result = await use_cases.get_revenue_summary().execute("artist_1")

        assert result.is_ok()
        summary = result.value
        assert list(summary.revenue_by_month) == [
            "2024-01", "2024-02", "2024-03", "2024-04", "2024-05", "2024-06",
        ]
        assert summary.revenue_by_month["2024-05"] == Decimal("100")
        assert summary.revenue_by_month["2024-02"] == Decimal("40")
        for month in ("2024-06", "2024-04", "2024-03", "2024-01"):
            assert summary.revenue_by_month[month] == Decimal("0")

    async def test_totals_agree(self, use_cases, seeded):
        result = await use_cases.get_revenue_summary().execute("artist_1")

        summary = result.value
        assert summary.total_revenue == Decimal("150")
        assert summary.transaction_count == 3
        assert sum(summary.revenue_by_source.values()) == summary.total_revenue
        assert summary.revenue_by_source == {
            "EVENT_TICKET": Decimal("100"),
            "MERCHANDISE": Decimal("40"),
            "DONATION": Decimal("10"),
        }

    async def test_series_matches_total_inside_window(self, use_cases, db_session, catalog):
        """Every COMPLETED transaction inside the window lands in exactly one month"""
        db_session.add_all([
            transaction("12.5", datetime(2024, 1, 1)),
            transaction("7.25", datetime(2024, 3, 31, 23, 59)),
            transaction("80", datetime(2024, 6, 1)),
        ])
        await db_session.commit()

        summary = (await use_cases.get_revenue_summary().execute("artist_1")).value

        assert sum(summary.revenue_by_month.values()) == summary.total_revenue == Decimal("99.75")

    async def test_artist_without_sales(self, use_cases, catalog):
        summary = (await use_cases.get_revenue_summary().execute("artist_2")).value

        assert summary.total_revenue == Decimal("0")
        assert summary.revenue_by_source == {}
        assert len(summary.revenue_by_month) == 6

    async def test_only_owner_or_admin(self, use_cases, catalog):
        fan = ActorDTO(user_id="fan_1", role=ActorRole.USER)
        owner = ActorDTO(user_id="artist_user", role=ActorRole.ARTIST)
        admin = ActorDTO(user_id="ops", role=ActorRole.ADMIN)

        assert (await use_cases.get_revenue_summary().execute("artist_1", fan)).error.code == "FORBIDDEN"
        assert (await use_cases.get_revenue_summary().execute("artist_1", owner)).is_ok()
        assert (await use_cases.get_revenue_summary().execute("artist_1", admin)).is_ok()


@pytest.mark.asyncio
class TestTopPayers:

    async def test_ranked_by_total_spent(self, use_cases, seeded):
        result = await use_cases.get_top_payers().execute("artist_1", limit=10)

        payers = result.value.payers
        assert [p.payer_id for p in payers] == ["fan_1", "fan_2"]
        assert payers[0].total_spent == Decimal("100")
        assert payers[0].transaction_count == 1
        assert payers[1].total_spent == Decimal("50")
        assert payers[1].transaction_count == 2

    async def test_limit(self, use_cases, seeded):
        result = await use_cases.get_top_payers().execute("artist_1", limit=1)

        assert [p.payer_id for p in result.value.payers] == ["fan_1"]
