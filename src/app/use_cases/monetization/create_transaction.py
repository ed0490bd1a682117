"""CreateTransaction Use Case

Records a fan's intent to pay as a PENDING transaction after checking the
referenced artist and catalog item exist. No money moves here.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.catalog_service import CatalogService
from src.app.repositories.transaction_repository import TransactionRepository
from src.domain.transaction import Transaction, TransactionStatus, RevenueSource
from . import errors
from .dtos import CreateTransactionCommandDTO, TransactionResponseDTO

logger = logging.getLogger(__name__)


class CreateTransaction:
    """
    Use Case: Create a PENDING transaction

    Business Rules:
    1. amount > 0, description non-empty, source in RevenueSource (DTO validation)
    2. artist_id, when given, must exist in the catalog
    3. source_id, when given, must exist as the entity implied by source
       (event, merchandise, album, track); other sources are not checked
    4. Inserted with status PENDING

    Flow:
    1. Validate artist
    2. Validate source item
    3. Insert transaction
    4. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        transaction_repo: TransactionRepository,
        catalog: CatalogService,
    ):
        self.uow = uow
        self.transaction_repo = transaction_repo
        self.catalog = catalog

    async def execute(self, command: CreateTransactionCommandDTO) -> Result[TransactionResponseDTO]:
        """
        Execute transaction creation

        Args:
            command: CreateTransactionCommandDTO

        Returns:
            Result[TransactionResponseDTO]: PENDING transaction or error
        """
        try:
            staged = await self.stage(command)
            if staged.is_err():
                return staged

            await self.uow.commit()

            transaction = staged.value
            logger.info(
                f"Transaction {transaction.id} created: payer={transaction.payer_id}, "
                f"source={transaction.source.value}, amount={transaction.amount}"
            )
            return Return.ok(TransactionResponseDTO.from_entity(transaction))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_TRANSACTION_FAILED",
                    message="Failed to create transaction",
                    reason=str(e),
                )
            )

    async def stage(self, command: CreateTransactionCommandDTO) -> Result[Transaction]:
        """
        Validate and insert the transaction without committing

        Lets callers (RequestTicket) add more rows to the same unit of work.
        """
        if command.artist_id:
            artist = await self.catalog.get_artist(command.artist_id)
            if not artist:
                return Return.err(
                    Error(
                        code=errors.ARTIST_NOT_FOUND,
                        message=f"Artist {command.artist_id} not found",
                    )
                )

        if command.source_id:
            if not await self._source_exists(command.source, command.source_id):
                return Return.err(
                    Error(
                        code=errors.SOURCE_NOT_FOUND,
                        message=f"Source item {command.source_id} not found",
                        reason=f"source={command.source.value}",
                    )
                )

        transaction = Transaction(
            amount=command.amount,
            payer_id=command.payer_id,
            artist_id=command.artist_id,
            description=command.description,
            source=command.source,
            source_id=command.source_id,
            extra_data=dict(command.metadata or {}),
            status=TransactionStatus.PENDING,
        )
        created = await self.transaction_repo.create(transaction)
        return Return.ok(created)

    async def _source_exists(self, source: RevenueSource, source_id: str) -> bool:
        if source == RevenueSource.EVENT_TICKET:
            return await self.catalog.get_event(source_id) is not None
        if source == RevenueSource.MERCHANDISE:
            return await self.catalog.merchandise_exists(source_id)
        if source == RevenueSource.ALBUM_SALE:
            return await self.catalog.album_exists(source_id)
        if source == RevenueSource.TRACK_SALE:
            return await self.catalog.track_exists(source_id)
        # Subscriptions, donations, streaming and exclusive content are not catalog-checked
        return True
