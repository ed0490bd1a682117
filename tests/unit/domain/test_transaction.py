"""Unit tests for Transaction domain entity"""

from decimal import Decimal
from src.domain.transaction import (
    ALLOWED_TRANSITIONS,
    RevenueSource,
    Transaction,
    TransactionStatus,
)


def make_transaction(**overrides) -> Transaction:
    data = {
        "amount": Decimal("100.000000"),
        "payer_id": "user_1",
        "artist_id": "artist_1",
        "description": "Ticket: Live at the Roof",
        "source": RevenueSource.EVENT_TICKET,
        "source_id": "event_1",
    }
    data.update(overrides)
    return Transaction(**data)


class TestTransactionCreation:

    def test_new_transaction_is_pending(self):
        # Arrange & Act
        transaction = make_transaction()

        # Assert
        assert transaction.status == TransactionStatus.PENDING
        assert transaction.extra_data == {}
        assert transaction.created_at is not None

    def test_timestamps_are_naive_utc(self):
        transaction = make_transaction()

        assert transaction.created_at.tzinfo is None
        assert transaction.updated_at.tzinfo is None

    def test_metadata_is_kept_as_is(self):
        transaction = make_transaction(extra_data={"seat": "A1", "nested": {"x": 1}})

        assert transaction.extra_data == {"seat": "A1", "nested": {"x": 1}}


class TestTransactionTransitions:

    def test_pending_can_complete_or_fail(self):
        transaction = make_transaction()

        assert transaction.can_transition_to(TransactionStatus.COMPLETED)
        assert transaction.can_transition_to(TransactionStatus.FAILED)
        assert not transaction.can_transition_to(TransactionStatus.REFUNDED)

    def test_completed_can_only_be_refunded(self):
        transaction = make_transaction(status=TransactionStatus.COMPLETED)

        assert transaction.can_transition_to(TransactionStatus.REFUNDED)
        assert not transaction.can_transition_to(TransactionStatus.PENDING)
        assert not transaction.can_transition_to(TransactionStatus.FAILED)

    def test_failed_and_refunded_are_terminal(self):
        assert ALLOWED_TRANSITIONS[TransactionStatus.FAILED] == set()
        assert ALLOWED_TRANSITIONS[TransactionStatus.REFUNDED] == set()

    def test_every_status_has_transition_rules(self):
        assert set(ALLOWED_TRANSITIONS) == set(TransactionStatus)
