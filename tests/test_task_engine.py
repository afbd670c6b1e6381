"""Tests for TaskEngine - pure logic, no HA fixtures needed.

Exercises every combination of completion, manual override and detector
signal, plus multi-count counter behavior.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from custom_components.dailies_checklist import const
from custom_components.dailies_checklist.engines.task_engine import TaskEngine
from custom_components.dailies_checklist.utils.dt_utils import dt_to_iso
from tests.helpers import make_task

NOW = datetime(2025, 1, 7, 12, 0, tzinfo=UTC)
EARLIER = datetime(2025, 1, 7, 10, 0, tzinfo=UTC)


# =============================================================================
# TEST: DETECTOR SIGNAL MATRIX
# =============================================================================


@pytest.mark.parametrize("completed", [False, True])
@pytest.mark.parametrize("override", [False, True])
@pytest.mark.parametrize("signal", [False, True])
def test_detector_signal_matrix(completed: bool, override: bool, signal: bool) -> None:
    """Override blocks every signal; otherwise only disagreeing signals apply."""
    task = make_task(
        completed=completed,
        completed_at=dt_to_iso(EARLIER) if completed else None,
        manual_override=override,
        current_count=1 if completed else 0,
    )

    changed = TaskEngine.apply_detector_signal(task, signal, NOW)

    if override or completed == signal:
        assert changed is False
        assert task[const.DATA_TASK_COMPLETED] is completed
        assert task[const.DATA_TASK_COMPLETED_AT] == (
            dt_to_iso(EARLIER) if completed else None
        )
    else:
        assert changed is True
        assert task[const.DATA_TASK_COMPLETED] is signal
        assert task[const.DATA_TASK_COMPLETED_AT] == (
            dt_to_iso(NOW) if signal else None
        )
    assert task[const.DATA_TASK_MANUAL_OVERRIDE] is override


class TestManualCompletion:
    """Manual toggles always set the override."""

    def test_toggle_sets_override(self) -> None:
        task = make_task()
        assert TaskEngine.set_manual_completion(task, True, NOW) is True
        assert task[const.DATA_TASK_COMPLETED] is True
        assert task[const.DATA_TASK_MANUAL_OVERRIDE] is True
        assert task[const.DATA_TASK_COMPLETED_AT] == dt_to_iso(NOW)

    def test_override_then_disagreeing_detector(self) -> None:
        task = make_task()
        TaskEngine.set_manual_completion(task, True, NOW)
        assert TaskEngine.apply_detector_signal(task, False, NOW) is False
        assert task[const.DATA_TASK_COMPLETED] is True

    def test_override_then_agreeing_detector(self) -> None:
        task = make_task()
        TaskEngine.set_manual_completion(task, False, NOW)
        assert TaskEngine.apply_detector_signal(task, False, NOW) is False
        assert task[const.DATA_TASK_MANUAL_OVERRIDE] is True

    def test_toggle_to_same_value_still_sets_override(self) -> None:
        task = make_task()
        assert TaskEngine.set_manual_completion(task, False, NOW) is False
        assert task[const.DATA_TASK_MANUAL_OVERRIDE] is True


class TestMultiCount:
    """Counter behavior for tasks with max_count > 1."""

    def test_detector_true_fills_counter(self) -> None:
        task = make_task("mini_cactpot", max_count=3, current_count=2)
        assert TaskEngine.apply_detector_signal(task, True, NOW) is True
        assert task[const.DATA_TASK_CURRENT_COUNT] == 3
        assert task[const.DATA_TASK_COMPLETED] is True

        assert TaskEngine.apply_detector_signal(task, False, NOW) is True
        assert task[const.DATA_TASK_CURRENT_COUNT] == 0
        assert task[const.DATA_TASK_COMPLETED] is False

    def test_adjust_count_completes_at_max(self) -> None:
        task = make_task("mini_cactpot", max_count=3)
        TaskEngine.adjust_task_count(task, 2, NOW)
        assert task[const.DATA_TASK_COMPLETED] is False
        TaskEngine.adjust_task_count(task, 1, NOW)
        assert task[const.DATA_TASK_CURRENT_COUNT] == 3
        assert task[const.DATA_TASK_COMPLETED] is True
        assert task[const.DATA_TASK_COMPLETED_AT] == dt_to_iso(NOW)
        assert task[const.DATA_TASK_MANUAL_OVERRIDE] is True

    def test_adjust_count_clamps(self) -> None:
        task = make_task("mini_cactpot", max_count=3)
        assert TaskEngine.adjust_task_count(task, 10, NOW) is True
        assert task[const.DATA_TASK_CURRENT_COUNT] == 3
        assert TaskEngine.adjust_task_count(task, -10, NOW) is True
        assert task[const.DATA_TASK_CURRENT_COUNT] == 0
        assert task[const.DATA_TASK_COMPLETED] is False
        assert task[const.DATA_TASK_COMPLETED_AT] is None

    def test_adjust_count_at_floor_is_no_change(self) -> None:
        task = make_task("mini_cactpot", max_count=3)
        assert TaskEngine.adjust_task_count(task, -1, NOW) is False


class TestResetAndLookups:
    """reset_task, enable flag and governing cadence."""

    def test_reset_task_clears_everything(self) -> None:
        task = make_task(
            "mini_cactpot",
            max_count=3,
            current_count=3,
            completed=True,
            completed_at=dt_to_iso(NOW),
            manual_override=True,
        )
        assert TaskEngine.reset_task(task) is True
        assert task[const.DATA_TASK_COMPLETED] is False
        assert task[const.DATA_TASK_COMPLETED_AT] is None
        assert task[const.DATA_TASK_MANUAL_OVERRIDE] is False
        assert task[const.DATA_TASK_CURRENT_COUNT] == 0

    def test_reset_incomplete_task_reports_false(self) -> None:
        assert TaskEngine.reset_task(make_task(manual_override=True)) is False

    def test_set_task_enabled(self) -> None:
        task = make_task()
        assert TaskEngine.set_task_enabled(task, False) is True
        assert TaskEngine.set_task_enabled(task, False) is False
        assert task[const.DATA_TASK_ENABLED] is False

    @pytest.mark.parametrize(
        ("key", "category", "expected"),
        [
            ("roulette_expert", const.CATEGORY_DAILY, const.RESET_TYPE_DAILY),
            (
                "gc_supply_provisioning",
                const.CATEGORY_GRAND_COMPANY,
                const.RESET_TYPE_GRAND_COMPANY,
            ),
            ("wondrous_tails", const.CATEGORY_WEEKLY, const.RESET_TYPE_WEEKLY),
            ("jumbo_cactpot", const.CATEGORY_WEEKLY, const.RESET_TYPE_JUMBO_CACTPOT),
        ],
    )
    def test_governing_reset_type(self, key: str, category: str, expected: str) -> None:
        assert TaskEngine.get_governing_reset_type(make_task(key, category)) == expected
