"""Ticket Repository Interface

Defines the contract for ticket persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.ticket import Ticket, TicketStatus


class TicketRepository(ABC):
    """
    Repository interface for Ticket persistence

    Each ticket is bound to exactly one transaction (unique transaction_id).
    """

    @abstractmethod
    async def create(self, ticket: Ticket) -> Ticket:
        """
        Create a new ticket

        Raises:
            IntegrityError: If a ticket already exists for the transaction
        """
        pass

    @abstractmethod
    async def get_by_id(self, ticket_id: int) -> Optional[Ticket]:
        pass

    @abstractmethod
    async def get_by_transaction_id(self, transaction_id: int) -> Optional[Ticket]:
        pass

    @abstractmethod
    async def find_by_event_and_user(
        self, event_id: str, user_id: str, status: Optional[TicketStatus] = None
    ) -> List[Ticket]:
        """
        Tickets a user holds for an event, newest first

        Args:
            event_id: Event identifier
            user_id: Ticket holder
            status: Optional status filter
        """
        pass

    @abstractmethod
    async def list_by_event(self, event_id: str) -> List[Ticket]:
        pass

    @abstractmethod
    async def list_by_user(self, user_id: str) -> List[Ticket]:
        pass

    @abstractmethod
    async def compare_and_set_status(
        self,
        ticket_id: int,
        expected: TicketStatus,
        new_status: TicketStatus,
        require_completed_transaction: bool = False,
    ) -> bool:
        """
        Atomically move a ticket between statuses

        Args:
            ticket_id: Ticket ID
            expected: Status the row must currently hold
            new_status: Status to write
            require_completed_transaction: Also require the owning
                transaction to be COMPLETED in the same statement

        Returns:
            True if exactly one row was updated

        Note:
            Callers check the transition is legal before calling
        """
        pass
