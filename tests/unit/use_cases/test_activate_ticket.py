"""Unit tests for ActivateTicket use case"""

import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, call

from src.app.services.catalog_service import EventInfo
from src.app.use_cases.monetization.activate_ticket import ActivateTicket
from src.domain.ticket import Ticket, TicketStatus
from src.domain.transaction import RevenueSource, Transaction, TransactionStatus


def make_transaction(status=TransactionStatus.COMPLETED):
    return Transaction(
        id=10, amount=Decimal("25"), payer_id="fan_1", artist_id="artist_1",
        description="Ticket: Live at the Roof", source=RevenueSource.EVENT_TICKET,
        source_id="event_1", status=status,
        created_at=datetime.utcnow(), updated_at=datetime.utcnow(),
    )


def make_ticket(status=TicketStatus.PENDING):
    return Ticket(
        id=1, event_id="event_1", user_id="fan_1", transaction_id=10,
        status=status, price=Decimal("25"), currency="EUR",
        created_at=datetime.utcnow(), updated_at=datetime.utcnow(),
    )


async def assign_id(ticket):
    ticket.id = 1
    return ticket


@pytest.fixture
def mock_ticket_repo():
    repo = MagicMock()
    repo.get_by_transaction_id = AsyncMock(return_value=make_ticket())
    repo.get_by_id = AsyncMock(return_value=make_ticket(TicketStatus.ACTIVE))
    repo.create = AsyncMock(side_effect=assign_id)
    repo.compare_and_set_status = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def mock_transaction_repo():
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=make_transaction())
    return repo


@pytest.fixture
def mock_catalog():
    catalog = MagicMock()
    catalog.get_event = AsyncMock(
        return_value=EventInfo(
            id="event_1", artist_id="artist_1", artist_user_id="artist_user",
            is_paid=True, price=Decimal("25"), currency="EUR",
        )
    )
    return catalog


@pytest.fixture
def use_case(mock_uow, mock_ticket_repo, mock_transaction_repo, mock_catalog):
    return ActivateTicket(
        uow=mock_uow,
        ticket_repo=mock_ticket_repo,
        transaction_repo=mock_transaction_repo,
        catalog=mock_catalog,
    )


@pytest.mark.asyncio
class TestActivateTicket:

    async def test_pending_ticket_becomes_active(self, use_case, mock_ticket_repo, mock_uow):
        """
        Given: A PENDING ticket of a COMPLETED transaction
        When: It is activated
        Then: The write is conditional on the ticket being PENDING and the
              transaction still COMPLETED, and the reloaded ticket is returned
        """
        result = await use_case.execute(10)

        assert result.value.status == "ACTIVE"
        mock_ticket_repo.compare_and_set_status.assert_called_once_with(
            1, TicketStatus.PENDING, TicketStatus.ACTIVE, require_completed_transaction=True
        )
        mock_ticket_repo.get_by_id.assert_called_once_with(1)
        mock_uow.commit.assert_called_once()

    async def test_concurrently_cancelled_ticket_is_not_reactivated(self, use_case, mock_ticket_repo, mock_uow):
        """
        Given: A ticket read as PENDING that the holder cancels before the write
        When: Activation runs
        Then: INVALID_STATE and nothing is committed
        """
        mock_ticket_repo.compare_and_set_status = AsyncMock(return_value=False)
        mock_ticket_repo.get_by_id = AsyncMock(return_value=make_ticket(TicketStatus.CANCELLED))

        result = await use_case.execute(10)

        assert result.error.code == "INVALID_STATE"
        mock_uow.commit.assert_not_called()

    async def test_concurrent_activation_is_idempotent(self, use_case, mock_ticket_repo):
        mock_ticket_repo.compare_and_set_status = AsyncMock(return_value=False)

        result = await use_case.execute(10)

        assert result.value.status == "ACTIVE"

    async def test_active_ticket_is_left_alone(self, use_case, mock_ticket_repo):
        mock_ticket_repo.get_by_transaction_id = AsyncMock(return_value=make_ticket(TicketStatus.ACTIVE))

        result = await use_case.execute(10)

        assert result.value.status == "ACTIVE"
        mock_ticket_repo.compare_and_set_status.assert_not_called()

    @pytest.mark.parametrize("status", [TransactionStatus.PENDING, TransactionStatus.REFUNDED])
    async def test_transaction_must_be_completed(self, use_case, mock_transaction_repo, mock_ticket_repo, status):
        mock_transaction_repo.get_by_id = AsyncMock(return_value=make_transaction(status))

        result = await use_case.execute(10)

        assert result.error.code == "INVALID_STATE"
        mock_ticket_repo.compare_and_set_status.assert_not_called()

    async def test_missing_ticket_is_issued_from_event_price(self, use_case, mock_ticket_repo):
        mock_ticket_repo.get_by_transaction_id = AsyncMock(return_value=None)

        result = await use_case.execute(10)

        assert result.value.status == "ACTIVE"
        issued = mock_ticket_repo.create.call_args[0][0]
        assert issued.status == TicketStatus.PENDING
        assert issued.currency == "EUR"
        assert issued.transaction_id == 10

    async def test_issued_ticket_of_refunded_transaction_is_revoked(self, use_case, mock_ticket_repo):
        """
        Given: No ticket yet, and a refund lands between loading the transaction and activation
        When: Activation issues the ticket
        Then: The new ticket ends REFUNDED, never ACTIVE
        """
        mock_ticket_repo.get_by_transaction_id = AsyncMock(return_value=None)
        mock_ticket_repo.get_by_id = AsyncMock(return_value=make_ticket(TicketStatus.PENDING))
        mock_ticket_repo.compare_and_set_status = AsyncMock(side_effect=[False, True])

        result = await use_case.execute(10)

        assert result.error.code == "INVALID_STATE"
        assert mock_ticket_repo.compare_and_set_status.call_args_list[1] == call(
            1, TicketStatus.PENDING, TicketStatus.REFUNDED
        )

    async def test_unknown_transaction(self, use_case, mock_transaction_repo):
        mock_transaction_repo.get_by_id = AsyncMock(return_value=None)

        result = await use_case.execute(10)

        assert result.error.code == "TRANSACTION_NOT_FOUND"
