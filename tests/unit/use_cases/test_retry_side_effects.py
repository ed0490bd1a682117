"""Unit tests for RetrySideEffects use case"""

import pytest
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

from libs.result import Error, Return
from src.app.use_cases.monetization.dtos import SideEffectOutcomeDTO, SideEffectReportDTO
from src.app.use_cases.monetization.retry_side_effects import RetrySideEffects
from src.domain.side_effect_log import SideEffectLog, SideEffectStatus, SideEffectType

NOW = datetime(2024, 6, 15, 12, 0)


@pytest.fixture
def mock_side_effect_repo():
    repo = MagicMock()
    repo.list_retryable = AsyncMock(
        return_value=[
            SideEffectLog(id=1, transaction_id=10, effect=SideEffectType.STOCK_DECREMENT,
                          status=SideEffectStatus.FAILED, attempts=1),
            SideEffectLog(id=2, transaction_id=11, effect=SideEffectType.REWARD_ISSUANCE,
                          status=SideEffectStatus.PENDING),
        ]
    )
    repo.skip_unfinished = AsyncMock(return_value=1)
    return repo


@pytest.fixture
def mock_side_effects():
    def report(transaction_id):
        if transaction_id == 10:
            outcomes = [
                SideEffectOutcomeDTO(effect=SideEffectType.STOCK_DECREMENT, status=SideEffectStatus.APPLIED),
                SideEffectOutcomeDTO(effect=SideEffectType.REWARD_ISSUANCE, status=SideEffectStatus.APPLIED),
            ]
        else:
            outcomes = [
                SideEffectOutcomeDTO(effect=SideEffectType.REWARD_ISSUANCE, status=SideEffectStatus.FAILED),
            ]
        return Return.ok(SideEffectReportDTO(transaction_id=transaction_id, outcomes=outcomes))

    applier = MagicMock()
    applier.execute = AsyncMock(side_effect=report)
    return applier


@pytest.fixture
def use_case(mock_uow, mock_side_effect_repo, mock_side_effects):
    return RetrySideEffects(
        uow=mock_uow,
        side_effect_repo=mock_side_effect_repo,
        side_effects=mock_side_effects,
        grace_seconds=60,
        max_attempts=5,
        clock=lambda: NOW,
    )


@pytest.mark.asyncio
class TestRetrySideEffects:

    async def test_reruns_each_transaction_once(self, use_case, mock_side_effect_repo, mock_side_effects):
        """
        Given: A FAILED stock log of transaction 10 and a stale PENDING reward log of 11
        When: Retrying
        Then: Each transaction rerun once; only retried effects are counted
        """
        result = await use_case.execute()

        assert result.is_ok()
        dto = result.value
        assert dto.transactions_checked == 2
        assert dto.effects_applied == 1
        assert dto.effects_failed == 1
        assert dto.effects_skipped == 0
        assert [c[0][0] for c in mock_side_effects.execute.call_args_list] == [10, 11]

        mock_side_effect_repo.list_retryable.assert_called_once_with(
            stale_before=NOW - timedelta(seconds=60), max_attempts=5, limit=100
        )

    async def test_transaction_no_longer_completed_is_skipped(
        self, use_case, mock_uow, mock_side_effect_repo, mock_side_effects
    ):
        mock_side_effects.execute = AsyncMock(
            return_value=Return.err(Error(code="INVALID_STATE", message="Transaction 10 is REFUNDED"))
        )

        result = await use_case.execute()

        assert result.value.effects_skipped == 2
        assert mock_side_effect_repo.skip_unfinished.call_count == 2
        assert mock_uow.commit.call_count == 2

    async def test_nothing_to_retry(self, use_case, mock_side_effect_repo, mock_side_effects):
        mock_side_effect_repo.list_retryable = AsyncMock(return_value=[])

        result = await use_case.execute()

        assert result.value.transactions_checked == 0
        mock_side_effects.execute.assert_not_called()

    async def test_repository_error(self, use_case, mock_side_effect_repo, mock_uow):
        mock_side_effect_repo.list_retryable = AsyncMock(side_effect=RuntimeError("db down"))

        result = await use_case.execute()

        assert result.error.code == "RETRY_SIDE_EFFECTS_FAILED"
        mock_uow.rollback.assert_called_once()
