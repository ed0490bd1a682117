"""Transaction Repository Interface

Defines the contract for transaction persistence operations.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, NamedTuple, Optional, Tuple
from src.domain.transaction import Transaction, TransactionStatus


class PayerTotal(NamedTuple):
    payer_id: str
    total_spent: Decimal
    transaction_count: int


class TransactionRepository(ABC):
    """
    Repository interface for Transaction persistence

    Status changes go exclusively through compare_and_set_status so that
    concurrent authorizations or refunds on the same row cannot both win.
    """

    @abstractmethod
    async def create(self, transaction: Transaction) -> Transaction:
        """
        Create a new transaction

        Args:
            transaction: Transaction entity to persist (status PENDING)

        Returns:
            Created Transaction with generated ID
        """
        pass

    @abstractmethod
    async def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        """
        Retrieve transaction by ID, always reflecting the stored row

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction if found, None otherwise
        """
        pass

    @abstractmethod
    async def compare_and_set_status(
        self,
        transaction_id: int,
        expected: TransactionStatus,
        new_status: TransactionStatus,
    ) -> bool:
        """
        Atomically move a transaction from `expected` to `new_status`

        Args:
            transaction_id: Transaction ID
            expected: Status the row must currently hold
            new_status: Status to write

        Returns:
            True if the row was updated, False if it no longer held `expected`
        """
        pass

    @abstractmethod
    async def list_by_payer(
        self, payer_id: str, limit: int = 20, offset: int = 0
    ) -> Tuple[List[Transaction], int]:
        """
        List a payer's transactions, newest first

        Returns:
            Tuple of (page of transactions, total count)
        """
        pass

    @abstractmethod
    async def list_by_artist(
        self, artist_id: str, limit: int = 20, offset: int = 0
    ) -> Tuple[List[Transaction], int]:
        """
        List transactions paying an artist, newest first

        Returns:
            Tuple of (page of transactions, total count)
        """
        pass

    @abstractmethod
    async def get_completed_by_artist(self, artist_id: str) -> List[Transaction]:
        """
        All COMPLETED transactions for an artist

        Args:
            artist_id: Artist identifier

        Returns:
            List of completed transactions
        """
        pass

    @abstractmethod
    async def get_top_payers(self, artist_id: str, limit: int) -> List[PayerTotal]:
        """
        Payers of an artist's COMPLETED transactions grouped and summed

        Ordered by total spent descending, ties by payer_id ascending.

        Args:
            artist_id: Artist identifier
            limit: Maximum number of payers

        Returns:
            List of PayerTotal rows
        """
        pass
