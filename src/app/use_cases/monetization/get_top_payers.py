"""Get Top Payers Use Case

An artist's biggest fans by total spend.
"""

from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.catalog_service import CatalogService
from src.app.repositories.transaction_repository import TransactionRepository
from . import errors
from .access import owns_artist
from .dtos import ActorDTO, TopPayerDTO, TopPayersResponseDTO

MAX_LIMIT = 100


class GetTopPayers:
    """
    Get Top Payers Use Case

    Groups COMPLETED transactions by payer, ordered by total spent
    descending with ties broken by payer id, truncated to limit (1..100).
    """

    def __init__(self, transaction_repo: TransactionRepository, catalog: CatalogService):
        self.transaction_repo = transaction_repo
        self.catalog = catalog

    async def execute(
        self, artist_id: str, limit: int = 10, actor: Optional[ActorDTO] = None
    ) -> Result[TopPayersResponseDTO]:
        if limit < 1 or limit > MAX_LIMIT:
            return Return.err(errors.validation_error(f"limit must be between 1 and {MAX_LIMIT}"))

        artist = await self.catalog.get_artist(artist_id)
        if not artist:
            return Return.err(Error(code=errors.ARTIST_NOT_FOUND, message=f"Artist {artist_id} not found"))

        if actor is not None and not owns_artist(artist.user_id, actor):
            return Return.err(errors.forbidden("Only the artist or an admin can view top fans"))

        rows = await self.transaction_repo.get_top_payers(artist_id, limit)
        return Return.ok(
            TopPayersResponseDTO(
                artist_id=artist_id,
                payers=[
                    TopPayerDTO(
                        payer_id=row.payer_id,
                        total_spent=row.total_spent,
                        transaction_count=row.transaction_count,
                    )
                    for row in rows
                ],
            )
        )
