"""
Get Transaction Use Case

Retrieves a single transaction with its payment record.
"""
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.catalog_service import CatalogService
from src.app.repositories.transaction_repository import TransactionRepository
from src.app.repositories.payment_repository import PaymentRepository
from . import errors
from .access import owns_artist
from .dtos import ActorDTO, TransactionResponseDTO


class GetTransaction:
    """
    Use case: View a transaction

    The payer, the artist being paid and admins may read a transaction.
    """

    def __init__(
        self,
        transaction_repo: TransactionRepository,
        payment_repo: PaymentRepository,
        catalog: CatalogService,
    ):
        self.transaction_repo = transaction_repo
        self.payment_repo = payment_repo
        self.catalog = catalog

    async def execute(
        self, transaction_id: int, actor: Optional[ActorDTO] = None
    ) -> Result[TransactionResponseDTO]:
        """
        Get a transaction by ID.

        Args:
            transaction_id: Transaction identifier
            actor: Caller; None skips the access check

        Returns:
            Result[TransactionResponseDTO]: Transaction with payment, or error
        """
        transaction = await self.transaction_repo.get_by_id(transaction_id)
        if not transaction:
            return Return.err(
                Error(
                    code=errors.TRANSACTION_NOT_FOUND,
                    message=f"Transaction {transaction_id} not found",
                )
            )

        if actor is not None and transaction.payer_id != actor.user_id:
            artist = await self.catalog.get_artist(transaction.artist_id) if transaction.artist_id else None
            if not owns_artist(artist.user_id if artist else None, actor):
                return Return.err(errors.forbidden())

        payment = await self.payment_repo.get_by_transaction_id(transaction_id)
        return Return.ok(TransactionResponseDTO.from_entity(transaction, payment))
