"""Unit tests for ticket use cases

Tests cover:
- RequestTicket: free events, duplicate purchases, reuse of open requests
- UpdateTicketStatus: actor checks and legal transitions
- CheckTicketAccess: free events and ACTIVE tickets
"""

import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from libs.result import Return
from src.app.services.catalog_service import EventInfo
from src.app.use_cases.monetization.check_ticket_access import CheckTicketAccess
from src.app.use_cases.monetization.dtos import (
    ActorDTO,
    ActorRole,
    RequestTicketCommandDTO,
    TicketStatusTarget,
    TransactionResponseDTO,
    UpdateTicketStatusCommandDTO,
)
from src.app.use_cases.monetization.request_ticket import RequestTicket
from src.app.use_cases.monetization.update_ticket_status import UpdateTicketStatus
from src.domain.ticket import Ticket, TicketStatus
from src.domain.transaction import RevenueSource, Transaction, TransactionStatus

PAID_EVENT = EventInfo(
    id="event_1", artist_id="artist_1", artist_user_id="artist_user",
    title="Live at the Roof", is_paid=True, price=Decimal("25"), currency="EUR",
)
FREE_EVENT = EventInfo(id="event_2", artist_id="artist_1", artist_user_id="artist_user", is_paid=False)


def make_ticket(status=TicketStatus.PENDING, ticket_id=1, transaction_id=10):
    return Ticket(
        id=ticket_id, event_id="event_1", user_id="fan_1", transaction_id=transaction_id,
        status=status, price=Decimal("25"), currency="EUR",
        created_at=datetime.utcnow(), updated_at=datetime.utcnow(),
    )


def make_transaction(status=TransactionStatus.PENDING, transaction_id=10):
    return Transaction(
        id=transaction_id, amount=Decimal("25"), payer_id="fan_1", artist_id="artist_1",
        description="Ticket: Live at the Roof", source=RevenueSource.EVENT_TICKET,
        source_id="event_1", status=status,
        created_at=datetime.utcnow(), updated_at=datetime.utcnow(),
    )


async def assign_id(ticket):
    ticket.id = 5
    return ticket


@pytest.fixture
def mock_catalog():
    catalog = MagicMock()
    catalog.get_event = AsyncMock(return_value=PAID_EVENT)
    return catalog


@pytest.fixture
def mock_ticket_repo():
    repo = MagicMock()
    repo.find_by_event_and_user = AsyncMock(return_value=[])
    repo.create = AsyncMock(side_effect=assign_id)
    repo.compare_and_set_status = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def mock_transaction_repo():
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=make_transaction())
    return repo


@pytest.fixture
def mock_creator():
    creator = MagicMock()
    creator.stage = AsyncMock(return_value=Return.ok(make_transaction(transaction_id=11)))
    return creator


@pytest.fixture
def request_ticket(mock_uow, mock_ticket_repo, mock_transaction_repo, mock_catalog, mock_creator):
    return RequestTicket(
        uow=mock_uow,
        ticket_repo=mock_ticket_repo,
        transaction_repo=mock_transaction_repo,
        catalog=mock_catalog,
        transaction_creator=mock_creator,
    )


@pytest.mark.asyncio
class TestRequestTicket:

    async def test_paid_event_creates_pending_ticket_and_transaction(
        self, request_ticket, mock_uow, mock_creator, mock_ticket_repo
    ):
        """
        Given: A paid event priced 25 EUR
        When: A fan requests a ticket
        Then: An EVENT_TICKET transaction is staged for the price and a PENDING ticket
              bound to it is created, in one commit
        """
        result = await request_ticket.execute(RequestTicketCommandDTO(event_id="event_1", user_id="fan_1"))

        assert result.is_ok()
        command = mock_creator.stage.call_args[0][0]
        assert command.amount == Decimal("25")
        assert command.source == RevenueSource.EVENT_TICKET
        assert command.source_id == "event_1"
        assert command.payer_id == "fan_1"
        assert command.artist_id == "artist_1"

        assert result.value.ticket_id == 5
        assert result.value.status == "PENDING"
        assert result.value.transaction_id == 11
        assert result.value.currency == "EUR"
        mock_uow.commit.assert_called_once()

    async def test_free_event_needs_no_ticket(self, request_ticket, mock_catalog, mock_creator):
        mock_catalog.get_event = AsyncMock(return_value=FREE_EVENT)

        result = await request_ticket.execute(RequestTicketCommandDTO(event_id="event_2", user_id="fan_1"))

        assert result.error.code == "VALIDATION_ERROR"
        mock_creator.stage.assert_not_called()

    async def test_unknown_event(self, request_ticket, mock_catalog):
        mock_catalog.get_event = AsyncMock(return_value=None)

        result = await request_ticket.execute(RequestTicketCommandDTO(event_id="nope", user_id="fan_1"))

        assert result.error.code == "EVENT_NOT_FOUND"

    async def test_active_ticket_holder_cannot_buy_again(self, request_ticket, mock_ticket_repo, mock_creator):
        mock_ticket_repo.find_by_event_and_user = AsyncMock(return_value=[make_ticket(TicketStatus.ACTIVE)])

        result = await request_ticket.execute(RequestTicketCommandDTO(event_id="event_1", user_id="fan_1"))

        assert result.error.code == "INVALID_STATE"
        mock_creator.stage.assert_not_called()

    async def test_open_request_is_returned(self, request_ticket, mock_ticket_repo, mock_creator, mock_uow):
        mock_ticket_repo.find_by_event_and_user = AsyncMock(return_value=[make_ticket()])

        result = await request_ticket.execute(RequestTicketCommandDTO(event_id="event_1", user_id="fan_1"))

        assert result.value.ticket_id == 1
        mock_creator.stage.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_declined_request_is_abandoned(
        self, request_ticket, mock_ticket_repo, mock_transaction_repo, mock_creator
    ):
        mock_ticket_repo.find_by_event_and_user = AsyncMock(return_value=[make_ticket()])
        mock_transaction_repo.get_by_id = AsyncMock(return_value=make_transaction(TransactionStatus.FAILED))

        result = await request_ticket.execute(RequestTicketCommandDTO(event_id="event_1", user_id="fan_1"))

        assert result.is_ok()
        mock_ticket_repo.compare_and_set_status.assert_called_once_with(
            1, TicketStatus.PENDING, TicketStatus.CANCELLED
        )
        mock_creator.stage.assert_called_once()

    async def test_paid_request_awaiting_activation_is_not_bought_twice(
        self, request_ticket, mock_ticket_repo, mock_transaction_repo, mock_creator, mock_uow
    ):
        """
        Given: A PENDING ticket whose transaction is already COMPLETED
        When: The fan requests a ticket for the same event again
        Then: INVALID_STATE, and no second transaction is staged
        """
        mock_ticket_repo.find_by_event_and_user = AsyncMock(return_value=[make_ticket()])
        mock_transaction_repo.get_by_id = AsyncMock(return_value=make_transaction(TransactionStatus.COMPLETED))

        result = await request_ticket.execute(RequestTicketCommandDTO(event_id="event_1", user_id="fan_1"))

        assert result.error.code == "INVALID_STATE"
        mock_creator.stage.assert_not_called()
        mock_uow.commit.assert_not_called()


@pytest.fixture
def mock_activator():
    activator = MagicMock()
    activator.apply = AsyncMock()
    return activator


@pytest.fixture
def mock_refunder():
    refunder = MagicMock()
    refunder.execute = AsyncMock()
    return refunder


@pytest.fixture
def update_status(mock_uow, mock_ticket_repo, mock_transaction_repo, mock_catalog, mock_activator, mock_refunder):
    return UpdateTicketStatus(
        uow=mock_uow,
        ticket_repo=mock_ticket_repo,
        transaction_repo=mock_transaction_repo,
        catalog=mock_catalog,
        ticket_activator=mock_activator,
        refunder=mock_refunder,
    )


FAN = ActorDTO(user_id="fan_1", role=ActorRole.USER)
STRANGER = ActorDTO(user_id="someone_else", role=ActorRole.USER)
ARTIST = ActorDTO(user_id="artist_user", role=ActorRole.ARTIST)
ADMIN = ActorDTO(user_id="ops", role=ActorRole.ADMIN)


def command(target, actor, ticket_id=1):
    return UpdateTicketStatusCommandDTO(ticket_id=ticket_id, target_status=target, actor=actor)


@pytest.mark.asyncio
class TestUpdateTicketStatus:

    @pytest.mark.parametrize("actor", [FAN, ARTIST, ADMIN])
    async def test_holder_artist_and_admin_can_cancel(self, update_status, mock_ticket_repo, mock_uow, actor):
        mock_ticket_repo.get_by_id = AsyncMock(
            side_effect=[make_ticket(TicketStatus.ACTIVE), make_ticket(TicketStatus.CANCELLED)]
        )

        result = await update_status.execute(command(TicketStatusTarget.CANCELLED, actor))

        assert result.is_ok()
        assert result.value.status == "CANCELLED"
        mock_uow.commit.assert_called_once()
        mock_ticket_repo.compare_and_set_status.assert_called_once_with(
            1, TicketStatus.ACTIVE, TicketStatus.CANCELLED
        )

    async def test_cancel_loses_to_concurrent_change(self, update_status, mock_ticket_repo, mock_uow):
        """
        Given: A ticket read as ACTIVE that another request changes before the write
        When: The holder cancels it
        Then: INVALID_STATE and the work is rolled back
        """
        mock_ticket_repo.get_by_id = AsyncMock(return_value=make_ticket(TicketStatus.ACTIVE))
        mock_ticket_repo.compare_and_set_status = AsyncMock(return_value=False)

        result = await update_status.execute(command(TicketStatusTarget.CANCELLED, FAN))

        assert result.error.code == "INVALID_STATE"
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()

    async def test_stranger_cannot_cancel(self, update_status, mock_ticket_repo):
        mock_ticket_repo.get_by_id = AsyncMock(return_value=make_ticket(TicketStatus.ACTIVE))

        result = await update_status.execute(command(TicketStatusTarget.CANCELLED, STRANGER))

        assert result.error.code == "FORBIDDEN"
        mock_ticket_repo.compare_and_set_status.assert_not_called()

    async def test_refunded_ticket_cannot_be_cancelled(self, update_status, mock_ticket_repo):
        mock_ticket_repo.get_by_id = AsyncMock(return_value=make_ticket(TicketStatus.REFUNDED))

        result = await update_status.execute(command(TicketStatusTarget.CANCELLED, FAN))

        assert result.error.code == "INVALID_STATE"

    async def test_holder_cannot_refund(self, update_status, mock_ticket_repo, mock_refunder):
        mock_ticket_repo.get_by_id = AsyncMock(return_value=make_ticket(TicketStatus.ACTIVE))

        result = await update_status.execute(command(TicketStatusTarget.REFUNDED, FAN))

        assert result.error.code == "FORBIDDEN"
        mock_refunder.execute.assert_not_called()

    async def test_refund_requires_active_ticket(self, update_status, mock_ticket_repo, mock_refunder):
        mock_ticket_repo.get_by_id = AsyncMock(return_value=make_ticket(TicketStatus.PENDING))

        result = await update_status.execute(command(TicketStatusTarget.REFUNDED, ARTIST))

        assert result.error.code == "INVALID_STATE"
        mock_refunder.execute.assert_not_called()

    async def test_refund_delegates_to_transaction_refund(self, update_status, mock_ticket_repo, mock_refunder):
        """
        Given: An ACTIVE ticket
        When: The event's artist refunds it
        Then: The owning transaction is refunded, and the reloaded ticket is returned
        """
        mock_ticket_repo.get_by_id = AsyncMock(
            side_effect=[make_ticket(TicketStatus.ACTIVE), make_ticket(TicketStatus.REFUNDED)]
        )
        mock_refunder.execute = AsyncMock(
            return_value=Return.ok(TransactionResponseDTO.from_entity(make_transaction(TransactionStatus.REFUNDED)))
        )

        result = await update_status.execute(command(TicketStatusTarget.REFUNDED, ARTIST))

        assert result.is_ok()
        assert result.value.status == "REFUNDED"
        refund_command = mock_refunder.execute.call_args[0][0]
        assert refund_command.transaction_id == 10
        assert refund_command.actor is None

    async def test_activation_needs_artist(self, update_status, mock_ticket_repo, mock_activator):
        mock_ticket_repo.get_by_id = AsyncMock(return_value=make_ticket())

        result = await update_status.execute(command(TicketStatusTarget.COMPLETED, FAN))

        assert result.error.code == "FORBIDDEN"
        mock_activator.apply.assert_not_called()

    async def test_activation_uses_activator(self, update_status, mock_ticket_repo, mock_activator, mock_uow):
        mock_ticket_repo.get_by_id = AsyncMock(return_value=make_ticket())
        mock_activator.apply = AsyncMock(return_value=Return.ok(make_ticket(TicketStatus.ACTIVE)))

        result = await update_status.execute(command(TicketStatusTarget.COMPLETED, ADMIN))

        assert result.value.status == "ACTIVE"
        mock_uow.commit.assert_called_once()

    async def test_unknown_ticket(self, update_status, mock_ticket_repo):
        mock_ticket_repo.get_by_id = AsyncMock(return_value=None)

        result = await update_status.execute(command(TicketStatusTarget.CANCELLED, ADMIN, ticket_id=99))

        assert result.error.code == "TICKET_NOT_FOUND"


@pytest.mark.asyncio
class TestCheckTicketAccess:

    async def test_free_event_is_open(self, mock_ticket_repo, mock_catalog):
        mock_catalog.get_event = AsyncMock(return_value=FREE_EVENT)

        result = await CheckTicketAccess(mock_ticket_repo, mock_catalog).execute("event_2", "fan_1")

        assert result.value.has_access
        mock_ticket_repo.find_by_event_and_user.assert_not_called()

    async def test_paid_event_needs_active_ticket(self, mock_ticket_repo, mock_catalog):
        result = await CheckTicketAccess(mock_ticket_repo, mock_catalog).execute("event_1", "fan_1")

        assert not result.value.has_access
        mock_ticket_repo.find_by_event_and_user.assert_called_once_with(
            "event_1", "fan_1", status=TicketStatus.ACTIVE
        )

    async def test_active_ticket_grants_access(self, mock_ticket_repo, mock_catalog):
        mock_ticket_repo.find_by_event_and_user = AsyncMock(return_value=[make_ticket(TicketStatus.ACTIVE)])

        result = await CheckTicketAccess(mock_ticket_repo, mock_catalog).execute("event_1", "fan_1")

        assert result.value.has_access
        assert result.value.reason == "active_ticket"

    async def test_unknown_event(self, mock_ticket_repo, mock_catalog):
        mock_catalog.get_event = AsyncMock(return_value=None)

        result = await CheckTicketAccess(mock_ticket_repo, mock_catalog).execute("nope", "fan_1")

        assert result.error.code == "EVENT_NOT_FOUND"
