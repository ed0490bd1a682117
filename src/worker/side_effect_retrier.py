"""Side-Effect Retry Background Worker

Periodically completes side effects (ticket activation, stock decrement,
reward issuance) that failed or were interrupted after a payment.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.notification_service import create_notification_service
from src.adapter.services.use_case_factory import UseCaseFactory
from src.app.services.notification_service import NotificationService
from src.app.use_cases.monetization import RetrySideEffectsResultDTO

logger = logging.getLogger(__name__)


class SideEffectRetryWorker:
    """
    Background worker for side-effect retries

    Features:
    - Retries FAILED side effects up to SIDE_EFFECT_MAX_ATTEMPTS
    - Picks up PENDING side effects older than SIDE_EFFECT_GRACE_SECONDS
    - Can run once or continuously

    Usage:
        # Run once
        worker = SideEffectRetryWorker()
        result = await worker.run_once()

        # Run continuously
        worker = SideEffectRetryWorker()
        await worker.run_forever(interval_seconds=300)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        session_factory=None,
        notification_service: Optional[NotificationService] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            session_factory: Existing session factory; db_uri is ignored when given
            notification_service: Reward notifications (defaults to config)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.engine = None
        if session_factory is None:
            self.engine = create_async_engine(self.db_uri, echo=False, future=True)
            session_factory = sessionmaker(
                self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
            )
        self.async_session_factory = session_factory
        self.notification_service = notification_service or create_notification_service(
            ApplicationConfig.REWARD_WEBHOOK_URL
        )

        logger.info("SideEffectRetryWorker initialized")

    async def run_once(self) -> RetrySideEffectsResultDTO:
        """
        Run one retry pass

        Returns:
            RetrySideEffectsResultDTO with counts of retried effects
        """
        if not ApplicationConfig.SIDE_EFFECT_RETRY_ENABLED:
            logger.info("Side-effect retry is disabled, skipping")
            return RetrySideEffectsResultDTO(
                transactions_checked=0,
                effects_applied=0,
                effects_skipped=0,
                effects_failed=0,
                run_time=datetime.utcnow(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            factory = UseCaseFactory(
                session,
                notification_service=self.notification_service,
                reward_rate=Decimal(ApplicationConfig.REWARD_RATE),
            )
            use_case = factory.retry_side_effects(
                grace_seconds=ApplicationConfig.SIDE_EFFECT_GRACE_SECONDS,
                max_attempts=ApplicationConfig.SIDE_EFFECT_MAX_ATTEMPTS,
            )

            result = await use_case.execute()

            if result.is_err():
                logger.error(f"Side-effect retry failed: {result.error.message}")
                raise RuntimeError(f"Side-effect retry failed: {result.error.message}")

            response = result.value

            if response.effects_failed > 0:
                logger.error(
                    f"ALERT: {response.effects_failed} side effects still failing after retry"
                )

            return response

    async def run_forever(self, interval_seconds: int = 300):
        """
        Run retries continuously at specified interval

        Args:
            interval_seconds: Seconds between runs (default: 5 minutes)
        """
        logger.info(f"Starting continuous side-effect retry with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Retry cycle complete. "
                    f"Checked {result.transactions_checked} transactions: "
                    f"{result.effects_applied} applied, {result.effects_skipped} skipped, "
                    f"{result.effects_failed} failed in {result.execution_time_ms}ms"
                )
            except Exception as e:
                logger.error(f"Retry cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        if self.engine is not None:
            await self.engine.dispose()
        logger.info("SideEffectRetryWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run once
        python -m src.worker.side_effect_retrier --once

        # Run continuously (default: SIDE_EFFECT_RETRY_INTERVAL_SECONDS)
        python -m src.worker.side_effect_retrier

        # Run continuously with custom interval (in seconds)
        python -m src.worker.side_effect_retrier --interval 60
    """
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Side-Effect Retry Worker")
    parser.add_argument(
        "--once", action="store_true", help="Run once and exit"
    )
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.SIDE_EFFECT_RETRY_INTERVAL_SECONDS,
        help="Interval between runs in seconds"
    )
    args = parser.parse_args()

    worker = SideEffectRetryWorker()

    try:
        if args.once:
            result = await worker.run_once()
            print("Side-effect retry complete:")
            print(f"  Transactions checked: {result.transactions_checked}")
            print(f"  Applied: {result.effects_applied}")
            print(f"  Skipped: {result.effects_skipped}")
            print(f"  Still failing: {result.effects_failed}")
            print(f"  Execution time: {result.execution_time_ms}ms")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
