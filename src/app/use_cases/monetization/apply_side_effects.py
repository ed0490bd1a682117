"""ApplySideEffects Use Case

Runs the follow-up actions a COMPLETED transaction owes: ticket
activation, merchandise stock decrement and loyalty reward issuance.
"""

import logging
from decimal import Decimal
from typing import Optional, Tuple
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.catalog_service import CatalogService
from src.app.services.notification_service import NotificationService
from src.app.repositories.transaction_repository import TransactionRepository
from src.app.repositories.reward_entry_repository import RewardEntryRepository
from src.app.repositories.side_effect_log_repository import SideEffectLogRepository
from src.domain.reward_entry import RewardEntry, DEFAULT_REWARD_RATE, compute_reward
from src.domain.side_effect_log import SideEffectType, SideEffectStatus
from src.domain.transaction import Transaction, TransactionStatus
from . import errors
from .activate_ticket import ActivateTicket
from .dtos import SideEffectOutcomeDTO, SideEffectReportDTO

logger = logging.getLogger(__name__)


class ApplySideEffects:
    """
    Use Case: Apply the side effects of a completed transaction

    Business Rules:
    1. Only COMPLETED transactions are processed
    2. Each effect is tracked by a SideEffectLog row; APPLIED/SKIPPED rows are not rerun
    3. An effect and the update that finishes its log commit together, and
       finishing is conditional, so two runners never both apply an effect
    4. A failing effect is rolled back alone and recorded FAILED; the
       remaining effects still run and the transaction stays COMPLETED
    5. Stock already at 0 is not an error: the decrement is skipped and
       logged as an anomaly
    6. Refunds never claw back rewards

    Flow:
    1. Load transaction and its side-effect logs
    2. For every unfinished log: run effect, finish log, commit
    3. Notify reward credits after their commit
    4. Return per-effect outcomes
    """

    def __init__(
        self,
        uow: UnitOfWork,
        transaction_repo: TransactionRepository,
        side_effect_repo: SideEffectLogRepository,
        reward_repo: RewardEntryRepository,
        catalog: CatalogService,
        ticket_activator: ActivateTicket,
        notification_service: NotificationService,
        reward_rate: Decimal = DEFAULT_REWARD_RATE,
    ):
        self.uow = uow
        self.transaction_repo = transaction_repo
        self.side_effect_repo = side_effect_repo
        self.reward_repo = reward_repo
        self.catalog = catalog
        self.ticket_activator = ticket_activator
        self.notification_service = notification_service
        self.reward_rate = reward_rate

    async def execute(self, transaction_id: int) -> Result[SideEffectReportDTO]:
        """
        Execute pending side effects of a transaction

        Args:
            transaction_id: COMPLETED transaction

        Returns:
            Result[SideEffectReportDTO]: Outcome per effect
        """
        try:
            transaction = await self.transaction_repo.get_by_id(transaction_id)
            if not transaction:
                return Return.err(
                    Error(
                        code=errors.TRANSACTION_NOT_FOUND,
                        message=f"Transaction {transaction_id} not found",
                    )
                )

            if transaction.status != TransactionStatus.COMPLETED:
                return Return.err(
                    errors.invalid_state(
                        f"Transaction {transaction_id} is {transaction.status.value}, "
                        f"side effects only run for COMPLETED transactions"
                    )
                )

            logs = await self.side_effect_repo.list_by_transaction(transaction_id)

            # Snapshot before any rollback expires the loaded rows
            finished = [
                SideEffectOutcomeDTO(effect=log.effect, status=log.status, detail=log.last_error)
                for log in logs
                if log.is_finished
            ]
            unfinished = [(log.id, log.effect) for log in logs if not log.is_finished]

            outcomes = list(finished)
            for log_id, effect in unfinished:
                outcomes.append(await self._run(transaction_id, log_id, effect))

            report = SideEffectReportDTO(transaction_id=transaction_id, outcomes=outcomes)

            if report.has_failures:
                failed = [o.effect.value for o in report.outcomes if o.status == SideEffectStatus.FAILED]
                logger.error(
                    f"Side effects failed for transaction {transaction_id}: {failed}. "
                    f"They will be retried by the side-effect worker"
                )

            return Return.ok(report)

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Applying side effects for transaction {transaction_id} failed: {e}")
            return Return.err(
                Error(
                    code="APPLY_SIDE_EFFECTS_FAILED",
                    message="Failed to apply side effects",
                    reason=str(e),
                )
            )

    async def _run(self, transaction_id: int, log_id: int, effect: SideEffectType) -> SideEffectOutcomeDTO:
        reward: Optional[RewardEntry] = None

        try:
            transaction = await self.transaction_repo.get_by_id(transaction_id)

            if effect == SideEffectType.TICKET_ACTIVATION:
                status, detail = await self._activate_ticket(transaction)
            elif effect == SideEffectType.STOCK_DECREMENT:
                status, detail = await self._decrement_stock(transaction)
            elif effect == SideEffectType.REWARD_ISSUANCE:
                status, detail, reward = await self._issue_reward(transaction)
            else:
                raise ValueError(f"Unknown side effect: {effect}")

            if status == SideEffectStatus.APPLIED:
                finished = await self.side_effect_repo.mark_applied(log_id)
            else:
                finished = await self.side_effect_repo.mark_skipped(log_id, detail)

            if not finished:
                await self.uow.rollback()
                logger.info(
                    f"Side effect {effect.value} of transaction {transaction_id} "
                    f"was finished by another runner"
                )
                return SideEffectOutcomeDTO(
                    effect=effect,
                    status=SideEffectStatus.SKIPPED,
                    detail="Already finished by another runner",
                )

            await self.uow.commit()

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Side effect {effect.value} failed for transaction {transaction_id}: {e}")
            await self.side_effect_repo.record_failure(log_id, str(e))
            await self.uow.commit()
            return SideEffectOutcomeDTO(effect=effect, status=SideEffectStatus.FAILED, detail=str(e))

        if reward is not None:
            await self._notify(reward)

        return SideEffectOutcomeDTO(effect=effect, status=status, detail=detail)

    async def _activate_ticket(self, transaction: Transaction) -> Tuple[SideEffectStatus, Optional[str]]:
        result = await self.ticket_activator.apply(transaction)
        if result.is_err():
            logger.warning(
                f"Ticket activation skipped for transaction {transaction.id}: {result.error.message}"
            )
            return SideEffectStatus.SKIPPED, result.error.message
        return SideEffectStatus.APPLIED, None

    async def _decrement_stock(self, transaction: Transaction) -> Tuple[SideEffectStatus, Optional[str]]:
        if await self.catalog.decrement_stock(transaction.source_id):
            logger.info(f"Stock of merchandise {transaction.source_id} decremented (transaction {transaction.id})")
            return SideEffectStatus.APPLIED, None

        logger.warning(
            f"ANOMALY: merchandise {transaction.source_id} sold with no stock left "
            f"(transaction {transaction.id}); decrement skipped"
        )
        return SideEffectStatus.SKIPPED, "Stock already at 0"

    async def _issue_reward(
        self, transaction: Transaction
    ) -> Tuple[SideEffectStatus, Optional[str], Optional[RewardEntry]]:
        amount = compute_reward(transaction.amount, self.reward_rate)
        if amount <= 0:
            return SideEffectStatus.SKIPPED, "Reward amount is 0", None

        existing = await self.reward_repo.get_by_transaction_id(transaction.id)
        if existing:
            return SideEffectStatus.APPLIED, "Reward already issued", None

        entry = RewardEntry(
            user_id=transaction.payer_id,
            amount=amount,
            description=f"Reward for purchase: {transaction.description}",
            transaction_id=transaction.id,
        )
        entry = await self.reward_repo.create(entry)
        logger.info(f"Reward of {amount} issued to {entry.user_id} for transaction {transaction.id}")
        return SideEffectStatus.APPLIED, None, entry

    async def _notify(self, entry: RewardEntry) -> None:
        try:
            await self.notification_service.send_reward_credited(entry)
        except Exception as e:
            logger.error(f"Reward notification for transaction {entry.transaction_id} failed: {e}")
