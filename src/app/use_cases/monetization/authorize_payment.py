"""AuthorizePayment Use Case

Single entry point that moves a PENDING transaction to a terminal state.
On approval the transaction, its payment and its side-effect obligations
commit together, then the side effects run.
"""

import asyncio
import logging
from decimal import Decimal
from typing import List
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.payment_gateway import (
    PaymentGateway,
    PaymentRequest,
    PaymentAuthorization,
    PaymentGatewayError,
)
from src.app.repositories.transaction_repository import TransactionRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.app.repositories.side_effect_log_repository import SideEffectLogRepository
from src.domain.payment import Payment, PaymentStatus
from src.domain.reward_entry import DEFAULT_REWARD_RATE
from src.domain.side_effect_log import SideEffectLog, SideEffectStatus, plan_side_effects
from src.domain.transaction import Transaction, TransactionStatus
from . import errors
from .apply_side_effects import ApplySideEffects
from .dtos import AuthorizePaymentCommandDTO, SideEffectOutcomeDTO, TransactionResponseDTO

logger = logging.getLogger(__name__)


class AuthorizePayment:
    """
    Use Case: Authorize payment of a transaction

    Business Rules:
    1. Only PENDING transactions can be authorized; anything else is INVALID_STATE
       (a duplicate submission, never a generic error)
    2. The terminal status is written with a conditional update, so of two
       concurrent attempts exactly one wins and the other gets INVALID_STATE
    3. Gateway timeout or transport error leaves the transaction PENDING
       (PAYMENT_TIMEOUT); FAILED is reserved for explicit declines
    4. Decline: FAILED, no payment, no side effects, PAYMENT_FAILED error
    5. Approval: COMPLETED + Payment + one PENDING SideEffectLog per owed
       effect in a single commit, then side effects run synchronously
    6. Side-effect failures never revert COMPLETED

    Flow:
    1. Load transaction, check PENDING
    2. Call gateway (bounded by timeout)
    3. Compare-and-set to FAILED or COMPLETED
    4. On COMPLETED: create payment and side-effect logs, commit
    5. Apply side effects
    """

    def __init__(
        self,
        uow: UnitOfWork,
        transaction_repo: TransactionRepository,
        payment_repo: PaymentRepository,
        side_effect_repo: SideEffectLogRepository,
        payment_gateway: PaymentGateway,
        side_effects: ApplySideEffects,
        gateway_timeout: float = 10.0,
        reward_rate: Decimal = DEFAULT_REWARD_RATE,
    ):
        self.uow = uow
        self.transaction_repo = transaction_repo
        self.payment_repo = payment_repo
        self.side_effect_repo = side_effect_repo
        self.payment_gateway = payment_gateway
        self.side_effects = side_effects
        self.gateway_timeout = gateway_timeout
        self.reward_rate = reward_rate

    async def execute(self, command: AuthorizePaymentCommandDTO) -> Result[TransactionResponseDTO]:
        """
        Execute payment authorization

        Args:
            command: AuthorizePaymentCommandDTO with transaction_id and payment method

        Returns:
            Result[TransactionResponseDTO]: COMPLETED transaction or error
        """
        try:
            # Step 1: Load and check status
            transaction = await self.transaction_repo.get_by_id(command.transaction_id)
            if not transaction:
                return Return.err(
                    Error(
                        code=errors.TRANSACTION_NOT_FOUND,
                        message=f"Transaction {command.transaction_id} not found",
                    )
                )

            if transaction.status != TransactionStatus.PENDING:
                return Return.err(self._not_pending(transaction.id, transaction.status))

            # Step 2: Ask the gateway
            request = PaymentRequest(
                transaction_id=transaction.id,
                amount=transaction.amount,
                payer_id=transaction.payer_id,
                method=command.payment_method,
                details=command.payment_details,
                idempotency_key=f"transaction:{transaction.id}",
            )
            try:
                authorization = await asyncio.wait_for(
                    self.payment_gateway.authorize(request), timeout=self.gateway_timeout
                )
            except (asyncio.TimeoutError, PaymentGatewayError) as e:
                logger.warning(
                    f"No gateway decision for transaction {transaction.id}, left PENDING: {e!r}"
                )
                return Return.err(
                    Error(
                        code=errors.PAYMENT_TIMEOUT,
                        message="Payment provider did not answer, try again",
                        reason=str(e) or type(e).__name__,
                    )
                )

            # Step 3: Decline
            if not authorization.approved:
                return await self._decline(transaction, authorization)

            # Step 4: Approval
            completed = await self._complete(transaction, command, authorization)
            if completed.is_err():
                return completed
            transaction_id = transaction.id

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="AUTHORIZE_PAYMENT_FAILED",
                    message="Failed to authorize payment",
                    reason=str(e),
                )
            )

        # Step 5: Side effects (COMPLETED is already committed)
        outcomes: List[SideEffectOutcomeDTO] = []
        report = await self.side_effects.execute(transaction_id)
        if report.is_ok():
            outcomes = report.value.outcomes
        else:
            logger.error(
                f"Side effects for transaction {transaction_id} not applied: "
                f"{report.error.message} ({report.error.reason})"
            )

        transaction = await self.transaction_repo.get_by_id(transaction_id)
        payment = await self.payment_repo.get_by_transaction_id(transaction_id)
        return Return.ok(TransactionResponseDTO.from_entity(transaction, payment, outcomes))

    async def _decline(
        self, transaction: Transaction, authorization: PaymentAuthorization
    ) -> Result[TransactionResponseDTO]:
        transaction_id = transaction.id
        updated = await self.transaction_repo.compare_and_set_status(
            transaction_id, TransactionStatus.PENDING, TransactionStatus.FAILED
        )
        if not updated:
            await self.uow.rollback()
            return Return.err(self._lost_race(transaction_id))

        await self.uow.commit()
        logger.info(
            f"Payment declined for transaction {transaction_id}: {authorization.decline_reason}"
        )
        return Return.err(
            Error(
                code=errors.PAYMENT_FAILED,
                message="Payment could not be completed, try again",
                reason=authorization.decline_reason,
            )
        )

    async def _complete(
        self,
        transaction: Transaction,
        command: AuthorizePaymentCommandDTO,
        authorization: PaymentAuthorization,
    ) -> Result[None]:
        transaction_id = transaction.id
        updated = await self.transaction_repo.compare_and_set_status(
            transaction_id, TransactionStatus.PENDING, TransactionStatus.COMPLETED
        )
        if not updated:
            await self.uow.rollback()
            return Return.err(self._lost_race(transaction_id))

        await self.payment_repo.create(
            Payment(
                transaction_id=transaction_id,
                method=command.payment_method,
                details=dict(command.payment_details or {}),
                status=PaymentStatus.COMPLETED,
                provider_reference=authorization.provider_reference,
            )
        )

        for effect in plan_side_effects(transaction, self.reward_rate):
            await self.side_effect_repo.create(
                SideEffectLog(
                    transaction_id=transaction_id,
                    effect=effect,
                    status=SideEffectStatus.PENDING,
                )
            )

        await self.uow.commit()
        logger.info(
            f"Transaction {transaction_id} COMPLETED "
            f"(amount={transaction.amount}, method={command.payment_method})"
        )
        return Return.ok(None)

    @staticmethod
    def _not_pending(transaction_id: int, status: TransactionStatus) -> Error:
        return errors.invalid_state(
            f"Transaction {transaction_id} is already {status.value}",
            reason="duplicate_submission",
        )

    @staticmethod
    def _lost_race(transaction_id: int) -> Error:
        logger.info(f"Concurrent authorization of transaction {transaction_id} lost the race")
        return errors.invalid_state(
            f"Transaction {transaction_id} was processed concurrently",
            reason="duplicate_submission",
        )
