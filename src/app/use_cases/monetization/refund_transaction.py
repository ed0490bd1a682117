"""RefundTransaction Use Case

Moves a COMPLETED transaction to REFUNDED and revokes the tickets it paid for.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.catalog_service import CatalogService
from src.app.repositories.transaction_repository import TransactionRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.app.repositories.ticket_repository import TicketRepository
from src.app.repositories.side_effect_log_repository import SideEffectLogRepository
from src.domain.ticket import TicketStatus
from src.domain.transaction import Transaction, TransactionStatus
from . import errors
from .access import owns_artist
from .dtos import ActorDTO, RefundTransactionCommandDTO, TransactionResponseDTO

logger = logging.getLogger(__name__)

REVOCABLE_TICKET_STATUSES = (TicketStatus.PENDING, TicketStatus.ACTIVE)


class RefundTransaction:
    """
    Use Case: Refund a completed transaction

    Business Rules:
    1. Caller must be an admin or the user owning the transaction's artist
       (skipped when no actor is given, for internal callers)
    2. Only COMPLETED transactions can be refunded; a still-PENDING
       transaction fails with INVALID_STATE until authorization resolves
    3. COMPLETED -> REFUNDED is a conditional update, so a refund happens once
    4. The ticket tied to the transaction, if PENDING or ACTIVE, becomes REFUNDED;
       a ticket cancelled concurrently keeps its CANCELLED status
    5. Side effects not yet applied are skipped
    6. Reward entries already issued are kept

    Flow:
    1. Load transaction, check actor
    2. Compare-and-set COMPLETED -> REFUNDED
    3. Revoke ticket, skip unfinished side effects
    4. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        transaction_repo: TransactionRepository,
        payment_repo: PaymentRepository,
        ticket_repo: TicketRepository,
        side_effect_repo: SideEffectLogRepository,
        catalog: CatalogService,
    ):
        self.uow = uow
        self.transaction_repo = transaction_repo
        self.payment_repo = payment_repo
        self.ticket_repo = ticket_repo
        self.side_effect_repo = side_effect_repo
        self.catalog = catalog

    async def execute(self, command: RefundTransactionCommandDTO) -> Result[TransactionResponseDTO]:
        """
        Execute refund

        Args:
            command: RefundTransactionCommandDTO with transaction_id and optional actor

        Returns:
            Result[TransactionResponseDTO]: REFUNDED transaction or error
        """
        try:
            # Step 1: Load and authorize
            transaction = await self.transaction_repo.get_by_id(command.transaction_id)
            if not transaction:
                return Return.err(
                    Error(
                        code=errors.TRANSACTION_NOT_FOUND,
                        message=f"Transaction {command.transaction_id} not found",
                    )
                )

            if command.actor is not None and not await self._may_refund(command.actor, transaction):
                return Return.err(errors.forbidden("Only the artist or an admin can refund"))

            if transaction.status != TransactionStatus.COMPLETED:
                return Return.err(
                    errors.invalid_state(
                        f"Transaction {transaction.id} is {transaction.status.value}, "
                        f"only COMPLETED transactions can be refunded"
                    )
                )

            # Step 2: Conditional status change
            updated = await self.transaction_repo.compare_and_set_status(
                transaction.id, TransactionStatus.COMPLETED, TransactionStatus.REFUNDED
            )
            if not updated:
                await self.uow.rollback()
                return Return.err(
                    errors.invalid_state(f"Transaction {command.transaction_id} was refunded concurrently")
                )

            # Step 3: Revoke ticket and pending follow-ups
            ticket = await self.ticket_repo.get_by_transaction_id(command.transaction_id)
            if ticket and ticket.status in REVOCABLE_TICKET_STATUSES:
                ticket_id = ticket.id
                revoked = await self.ticket_repo.compare_and_set_status(
                    ticket_id, ticket.status, TicketStatus.REFUNDED
                )
                if revoked:
                    logger.info(f"Ticket {ticket_id} revoked by refund of transaction {command.transaction_id}")
                else:
                    logger.info(f"Ticket {ticket_id} changed concurrently, left as is by refund")

            skipped = await self.side_effect_repo.skip_unfinished(
                command.transaction_id, "Transaction refunded"
            )
            if skipped:
                logger.warning(
                    f"{skipped} unfinished side effect(s) of transaction {command.transaction_id} "
                    f"skipped by refund"
                )

            # Step 4: Commit
            await self.uow.commit()

            transaction = await self.transaction_repo.get_by_id(command.transaction_id)
            payment = await self.payment_repo.get_by_transaction_id(command.transaction_id)

            logger.info(f"Transaction {transaction.id} REFUNDED (amount={transaction.amount})")
            return Return.ok(TransactionResponseDTO.from_entity(transaction, payment))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="REFUND_TRANSACTION_FAILED",
                    message="Failed to refund transaction",
                    reason=str(e),
                )
            )

    async def _may_refund(self, actor: ActorDTO, transaction: Transaction) -> bool:
        if actor.is_admin or not transaction.artist_id:
            return actor.is_admin
        artist = await self.catalog.get_artist(transaction.artist_id)
        return owns_artist(artist.user_id if artist else None, actor)

