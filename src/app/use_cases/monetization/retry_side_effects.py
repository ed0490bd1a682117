"""RetrySideEffects Use Case

Completes side effects that failed or were interrupted after payment.
"""

import logging
import time
from datetime import datetime, timedelta
from typing import Callable, Dict, Set
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.side_effect_log_repository import SideEffectLogRepository
from src.domain.side_effect_log import SideEffectStatus, SideEffectType
from . import errors
from .apply_side_effects import ApplySideEffects
from .dtos import RetrySideEffectsResultDTO

logger = logging.getLogger(__name__)


class RetrySideEffects:
    """
    Use Case: Retry unfinished side effects

    Business Rules:
    1. FAILED logs are retried until they reach max_attempts
    2. PENDING logs older than the grace period are retried; their
       authorization crashed between commit and side effects
    3. Effects are rerun through ApplySideEffects, so they stay idempotent
    4. Logs of transactions that are no longer COMPLETED are skipped

    Flow:
    1. Collect retryable logs, grouped by transaction
    2. Run ApplySideEffects for each transaction
    3. Count outcomes of the retried effects
    """

    def __init__(
        self,
        uow: UnitOfWork,
        side_effect_repo: SideEffectLogRepository,
        side_effects: ApplySideEffects,
        grace_seconds: int = 60,
        max_attempts: int = 5,
        batch_size: int = 100,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.uow = uow
        self.side_effect_repo = side_effect_repo
        self.side_effects = side_effects
        self.grace_seconds = grace_seconds
        self.max_attempts = max_attempts
        self.batch_size = batch_size
        self.clock = clock

    async def execute(self) -> Result[RetrySideEffectsResultDTO]:
        """
        Execute side-effect retry

        Returns:
            Result[RetrySideEffectsResultDTO]: Counts of retried effects
        """
        start_time = time.time()
        run_time = self.clock()

        try:
            # Step 1: Retryable logs
            logs = await self.side_effect_repo.list_retryable(
                stale_before=run_time - timedelta(seconds=self.grace_seconds),
                max_attempts=self.max_attempts,
                limit=self.batch_size,
            )

            pending: Dict[int, Set[SideEffectType]] = {}
            for log in logs:
                pending.setdefault(log.transaction_id, set()).add(log.effect)

            logger.info(f"Found {len(logs)} side effects to retry across {len(pending)} transactions")

            applied = skipped = failed = 0

            # Step 2: Rerun per transaction
            for transaction_id, effects in pending.items():
                report = await self.side_effects.execute(transaction_id)

                if report.is_err():
                    if report.error.code == errors.INVALID_STATE:
                        count = await self.side_effect_repo.skip_unfinished(
                            transaction_id, "Transaction no longer COMPLETED"
                        )
                        await self.uow.commit()
                        skipped += count
                        logger.warning(
                            f"Skipped {count} side effects of transaction {transaction_id}: "
                            f"{report.error.message}"
                        )
                    else:
                        failed += len(effects)
                        logger.error(
                            f"Retry of transaction {transaction_id} failed: "
                            f"{report.error.message} ({report.error.reason})"
                        )
                    continue

                # Step 3: Count only the effects this run retried
                for outcome in report.value.outcomes:
                    if outcome.effect not in effects:
                        continue
                    if outcome.status == SideEffectStatus.APPLIED:
                        applied += 1
                    elif outcome.status == SideEffectStatus.SKIPPED:
                        skipped += 1
                    else:
                        failed += 1

            execution_time_ms = int((time.time() - start_time) * 1000)

            result = RetrySideEffectsResultDTO(
                transactions_checked=len(pending),
                effects_applied=applied,
                effects_skipped=skipped,
                effects_failed=failed,
                run_time=run_time,
                execution_time_ms=execution_time_ms,
            )

            if failed:
                logger.warning(
                    f"Side-effect retry complete: {applied} applied, {skipped} skipped, "
                    f"{failed} still failing in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Side-effect retry complete: {applied} applied, {skipped} skipped "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(result)

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Side-effect retry failed: {e}")
            return Return.err(
                Error(
                    code="RETRY_SIDE_EFFECTS_FAILED",
                    message="Failed to retry side effects",
                    reason=str(e),
                )
            )
