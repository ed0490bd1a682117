"""
List Transactions Use Case

Retrieves transaction history for a payer or an artist with pagination.
"""
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.catalog_service import CatalogService
from src.app.repositories.transaction_repository import TransactionRepository
from . import errors
from .access import owns_artist
from .dtos import ActorDTO, ListTransactionsResponseDTO, TransactionResponseDTO

MAX_PAGE_SIZE = 100


class ListTransactions:
    """
    Use case: View transactions

    Retrieves paginated transaction history.
    Transactions are ordered by created_at DESC (most recent first).

    Business Rules:
    1. artist_id lists what was paid to an artist (artist owner or admin)
    2. payer_id of another user requires admin
    3. Without filters the caller's own purchases are listed
    """

    def __init__(self, transaction_repo: TransactionRepository, catalog: CatalogService):
        self.transaction_repo = transaction_repo
        self.catalog = catalog

    async def execute(
        self,
        actor: ActorDTO,
        payer_id: Optional[str] = None,
        artist_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Result[ListTransactionsResponseDTO]:
        """
        List transactions with pagination.

        Args:
            actor: Caller
            payer_id: List purchases of this payer
            artist_id: List revenue transactions of this artist
            limit: Maximum number of transactions to return (1..100, default 20)
            offset: Number of transactions to skip (default 0)

        Returns:
            Result[ListTransactionsResponseDTO]: Paginated transaction list
        """
        if limit < 1 or limit > MAX_PAGE_SIZE:
            return Return.err(errors.validation_error(f"limit must be between 1 and {MAX_PAGE_SIZE}"))
        if offset < 0:
            return Return.err(errors.validation_error("offset must not be negative"))

        if artist_id:
            artist = await self.catalog.get_artist(artist_id)
            if not artist:
                return Return.err(
                    Error(code=errors.ARTIST_NOT_FOUND, message=f"Artist {artist_id} not found")
                )
            if not owns_artist(artist.user_id, actor):
                return Return.err(errors.forbidden())

            transactions, total = await self.transaction_repo.list_by_artist(
                artist_id=artist_id, limit=limit, offset=offset
            )
        else:
            payer_id = payer_id or actor.user_id
            if payer_id != actor.user_id and not actor.is_admin:
                return Return.err(errors.forbidden())

            transactions, total = await self.transaction_repo.list_by_payer(
                payer_id=payer_id, limit=limit, offset=offset
            )

        return Return.ok(
            ListTransactionsResponseDTO(
                transactions=[TransactionResponseDTO.from_entity(txn) for txn in transactions],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
