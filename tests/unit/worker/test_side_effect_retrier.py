"""Unit tests for SideEffectRetryWorker

Tests cover:
- Worker initialization with configuration
- run_once delegates to RetrySideEffects
- Retry disabled scenario
- Error handling
- Shutdown and cleanup
"""

import pytest
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

from libs.result import Error, Return
from src.app.use_cases.monetization.dtos import RetrySideEffectsResultDTO
from src.worker.side_effect_retrier import SideEffectRetryWorker


@pytest.fixture
def sample_result():
    return RetrySideEffectsResultDTO(
        transactions_checked=3,
        effects_applied=2,
        effects_skipped=1,
        effects_failed=0,
        run_time=datetime.utcnow(),
        execution_time_ms=12,
    )


@pytest.fixture
def mock_session_factory():
    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=session)


@pytest.fixture
def mock_notifier():
    notifier = MagicMock()
    notifier.send_reward_credited = AsyncMock(return_value=True)
    return notifier


class TestSideEffectRetryWorkerInit:

    @patch("src.worker.side_effect_retrier.ApplicationConfig")
    @patch("src.worker.side_effect_retrier.create_async_engine")
    def test_initializes_with_default_config(self, mock_create_engine, mock_app_config, mock_notifier):
        """
        Given: No custom configuration provided
        When: Worker is initialized
        Then: Uses DB_URI from ApplicationConfig
        """
        mock_app_config.DB_URI = "sqlite+aiosqlite:///./default.db"

        worker = SideEffectRetryWorker(notification_service=mock_notifier)

        assert worker.db_uri == "sqlite+aiosqlite:///./default.db"
        mock_create_engine.assert_called_once()

    @patch("src.worker.side_effect_retrier.create_async_engine")
    def test_existing_session_factory_creates_no_engine(
        self, mock_create_engine, mock_session_factory, mock_notifier
    ):
        worker = SideEffectRetryWorker(session_factory=mock_session_factory, notification_service=mock_notifier)

        assert worker.async_session_factory is mock_session_factory
        mock_create_engine.assert_not_called()


@pytest.mark.asyncio
class TestSideEffectRetryWorkerRunOnce:

    @patch("src.worker.side_effect_retrier.ApplicationConfig")
    @patch("src.worker.side_effect_retrier.UseCaseFactory")
    async def test_run_once_executes_retry(
        self, mock_factory_class, mock_app_config, mock_session_factory, mock_notifier, sample_result
    ):
        """
        Given: Retry is enabled
        When: run_once is called
        Then: Builds RetrySideEffects with configured limits and returns its result
        """
        mock_app_config.SIDE_EFFECT_RETRY_ENABLED = True
        mock_app_config.SIDE_EFFECT_GRACE_SECONDS = 30
        mock_app_config.SIDE_EFFECT_MAX_ATTEMPTS = 4
        mock_app_config.REWARD_RATE = "0.05"

        mock_use_case = MagicMock()
        mock_use_case.execute = AsyncMock(return_value=Return.ok(sample_result))
        mock_factory_class.return_value.retry_side_effects.return_value = mock_use_case

        worker = SideEffectRetryWorker(session_factory=mock_session_factory, notification_service=mock_notifier)
        result = await worker.run_once()

        assert result.effects_applied == 2
        mock_factory_class.return_value.retry_side_effects.assert_called_once_with(
            grace_seconds=30, max_attempts=4
        )
        mock_use_case.execute.assert_called_once()

    @patch("src.worker.side_effect_retrier.ApplicationConfig")
    @patch("src.worker.side_effect_retrier.UseCaseFactory")
    async def test_run_once_skips_when_disabled(
        self, mock_factory_class, mock_app_config, mock_session_factory, mock_notifier
    ):
        mock_app_config.SIDE_EFFECT_RETRY_ENABLED = False

        worker = SideEffectRetryWorker(session_factory=mock_session_factory, notification_service=mock_notifier)
        result = await worker.run_once()

        assert result.transactions_checked == 0
        mock_factory_class.assert_not_called()

    @patch("src.worker.side_effect_retrier.ApplicationConfig")
    @patch("src.worker.side_effect_retrier.UseCaseFactory")
    async def test_run_once_raises_on_error(
        self, mock_factory_class, mock_app_config, mock_session_factory, mock_notifier
    ):
        mock_app_config.SIDE_EFFECT_RETRY_ENABLED = True
        mock_app_config.REWARD_RATE = "0.05"
        mock_use_case = MagicMock()
        mock_use_case.execute = AsyncMock(
            return_value=Return.err(Error(code="RETRY_SIDE_EFFECTS_FAILED", message="Failed to retry side effects"))
        )
        mock_factory_class.return_value.retry_side_effects.return_value = mock_use_case

        worker = SideEffectRetryWorker(session_factory=mock_session_factory, notification_service=mock_notifier)

        with pytest.raises(RuntimeError, match="Failed to retry side effects"):
            await worker.run_once()


@pytest.mark.asyncio
class TestSideEffectRetryWorkerShutdown:

    @patch("src.worker.side_effect_retrier.create_async_engine")
    async def test_shutdown_disposes_engine(self, mock_create_engine, mock_notifier):
        engine = MagicMock()
        engine.dispose = AsyncMock()
        mock_create_engine.return_value = engine

        worker = SideEffectRetryWorker(db_uri="sqlite+aiosqlite:///./x.db", notification_service=mock_notifier)
        await worker.shutdown()

        engine.dispose.assert_called_once()
