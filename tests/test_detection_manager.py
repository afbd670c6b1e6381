"""Tests for DetectionManager: registry rules, signal routing and failure isolation."""

# pylint: disable=redefined-outer-name  # Pytest fixtures redefine names
# pylint: disable=unused-argument  # Fixtures needed for setup only

from __future__ import annotations

from unittest.mock import patch

import pytest
from homeassistant.core import HomeAssistant

from custom_components.dailies_checklist import const
from custom_components.dailies_checklist.coordinator import ChecklistCoordinator
from custom_components.dailies_checklist.detectors.base import DetectionLimitation
from custom_components.dailies_checklist.managers.detection_manager import (
    DetectionManager,
)
from tests.helpers import (
    BrokenInitDetector,
    FakeDetector,
    OtherFakeDetector,
    ThrowingShutdownDetector,
    capture_signals,
)
from tests.helpers.detectors import POST_START_LIMITATION


@pytest.fixture
def manager(coordinator: ChecklistCoordinator) -> DetectionManager:
    return coordinator.detection_manager


def _completed(coordinator: ChecklistCoordinator, task_key: str) -> bool:
    return coordinator.get_task(task_key)[const.DATA_TASK_COMPLETED]


# =============================================================================
# TEST: REGISTRATION
# =============================================================================


async def test_add_detector_rejects_none_and_non_detectors(
    manager: DetectionManager,
) -> None:
    with pytest.raises(ValueError):
        manager.add_detector(None)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        manager.add_detector(object())  # type: ignore[arg-type]


async def test_add_detector_registers_and_initializes(
    manager: DetectionManager,
) -> None:
    detector = FakeDetector()
    assert manager.add_detector(detector) is True

    assert detector.initialize_calls == 1
    assert detector.listener_count == 1
    assert manager.is_detector_enabled(FakeDetector)
    assert manager.active_detector_count == 1
    assert manager.get_detector("mini_cactpot") is detector
    assert set(manager.get_detectable_task_keys()) == {
        "mini_cactpot",
        "roulette_expert",
    }
    assert manager.get_registered_detector_types() == [FakeDetector]


async def test_duplicate_detector_type_rejected(manager: DetectionManager) -> None:
    first = FakeDetector()
    second = FakeDetector(["fashion_report"])
    assert manager.add_detector(first) is True
    assert manager.add_detector(second) is False

    assert second.initialize_calls == 0
    assert manager.get_detector("fashion_report") is None


async def test_duplicate_task_key_keeps_first_detector(
    hass: HomeAssistant,
    coordinator: ChecklistCoordinator,
    manager: DetectionManager,
) -> None:
    first = FakeDetector(["roulette_expert"])
    second = OtherFakeDetector(["roulette_expert", "fashion_report"])
    assert manager.add_detector(first)
    assert manager.add_detector(second)

    assert manager.get_detector("roulette_expert") is first
    assert manager.get_detector("fashion_report") is second

    # Signals from the non-owning detector are dropped
    second.fire("roulette_expert", True)
    await hass.async_block_till_done()
    assert _completed(coordinator, "roulette_expert") is False

    first.fire("roulette_expert", True)
    await hass.async_block_till_done()
    assert _completed(coordinator, "roulette_expert") is True


async def test_initial_states_synced_on_add(
    coordinator: ChecklistCoordinator, manager: DetectionManager
) -> None:
    detector = FakeDetector(known_states={"roulette_expert": True})
    manager.add_detector(detector)
    assert _completed(coordinator, "roulette_expert") is True
    assert _completed(coordinator, "mini_cactpot") is False


async def test_disabled_detector_is_not_synced(
    coordinator: ChecklistCoordinator, manager: DetectionManager
) -> None:
    detector = FakeDetector(known_states={"roulette_expert": True})
    manager.add_detector(detector, enabled=False)
    assert _completed(coordinator, "roulette_expert") is False
    assert manager.active_detector_count == 0


async def test_remove_detector(manager: DetectionManager) -> None:
    detector = FakeDetector()
    manager.add_detector(detector)

    assert manager.remove_detector(FakeDetector) is True
    assert detector.shutdown_calls == 1
    assert detector.listener_count == 0
    assert manager.get_detectable_task_keys() == []
    assert manager.remove_detector(FakeDetector) is False


# =============================================================================
# TEST: SIGNAL ROUTING
# =============================================================================


async def test_signal_completes_task_and_notifies(
    hass: HomeAssistant,
    coordinator: ChecklistCoordinator,
    manager: DetectionManager,
    init_integration,
) -> None:
    events = capture_signals(
        hass, init_integration.entry_id, const.SIGNAL_SUFFIX_TASK_STATE_CHANGED
    )
    detector = FakeDetector()
    manager.add_detector(detector)

    detector.fire("roulette_expert", True)
    await hass.async_block_till_done()

    task = coordinator.get_task("roulette_expert")
    assert task[const.DATA_TASK_COMPLETED] is True
    assert task[const.DATA_TASK_COMPLETED_AT] is not None
    assert events == [
        {
            "task_key": "roulette_expert",
            "completed": True,
            "origin": const.ORIGIN_DETECTOR,
        }
    ]
    assert coordinator.store.has_pending_save

    # Same value again is a no-op
    detector.fire("roulette_expert", True)
    await hass.async_block_till_done()
    assert len(events) == 1


async def test_manual_override_blocks_detector(
    hass: HomeAssistant,
    coordinator: ChecklistCoordinator,
    manager: DetectionManager,
) -> None:
    detector = FakeDetector()
    manager.add_detector(detector)

    coordinator.set_task_completed("roulette_expert", True)
    detector.fire("roulette_expert", False)
    await hass.async_block_till_done()

    assert _completed(coordinator, "roulette_expert") is True


async def test_signal_for_unknown_task_is_dropped(
    hass: HomeAssistant,
    coordinator: ChecklistCoordinator,
    manager: DetectionManager,
) -> None:
    detector = FakeDetector(["not_in_checklist"])
    manager.add_detector(detector)

    detector.fire("not_in_checklist", True)
    await hass.async_block_till_done()

    assert coordinator.get_task("not_in_checklist") is None
    assert manager.is_detector_enabled(FakeDetector)


async def test_signal_for_unclaimed_task_is_dropped(
    hass: HomeAssistant,
    coordinator: ChecklistCoordinator,
    manager: DetectionManager,
) -> None:
    detector = FakeDetector(["mini_cactpot"])
    manager.add_detector(detector)

    detector.fire("fashion_report", True)
    await hass.async_block_till_done()

    assert _completed(coordinator, "fashion_report") is False
    assert manager.is_detector_enabled(FakeDetector)


async def test_signal_applies_to_user_disabled_task(
    hass: HomeAssistant,
    coordinator: ChecklistCoordinator,
    manager: DetectionManager,
) -> None:
    coordinator.set_task_enabled("roulette_expert", False)
    detector = FakeDetector()
    manager.add_detector(detector)

    detector.fire("roulette_expert", True)
    await hass.async_block_till_done()

    assert _completed(coordinator, "roulette_expert") is True


async def test_disabled_detector_signals_dropped(
    hass: HomeAssistant,
    coordinator: ChecklistCoordinator,
    manager: DetectionManager,
) -> None:
    detector = FakeDetector()
    manager.add_detector(detector)

    assert manager.set_detector_enabled(FakeDetector, False) is True
    detector.fire("roulette_expert", True)
    await hass.async_block_till_done()
    assert _completed(coordinator, "roulette_expert") is False
    assert manager.get_task_completion_state("roulette_expert") is None

    assert manager.set_detector_enabled(FakeDetector, True) is True
    detector.fire("roulette_expert", True)
    await hass.async_block_till_done()
    assert _completed(coordinator, "roulette_expert") is True


async def test_set_enabled_unknown_detector(manager: DetectionManager) -> None:
    assert manager.set_detector_enabled(FakeDetector, True) is False


async def test_signal_from_worker_thread_is_marshalled(
    hass: HomeAssistant,
    coordinator: ChecklistCoordinator,
    manager: DetectionManager,
) -> None:
    """Signals fired off the event loop are applied on the loop."""
    detector = FakeDetector()
    manager.add_detector(detector)

    await hass.async_add_executor_job(detector.fire, "roulette_expert", True)
    await hass.async_block_till_done()

    assert _completed(coordinator, "roulette_expert") is True


# =============================================================================
# TEST: FAILURE ISOLATION
# =============================================================================


async def test_init_failure_marks_detector_failed(
    hass: HomeAssistant,
    coordinator: ChecklistCoordinator,
    manager: DetectionManager,
    init_integration,
) -> None:
    errors = capture_signals(
        hass, init_integration.entry_id, const.SIGNAL_SUFFIX_DETECTOR_ERROR
    )
    healthy = OtherFakeDetector(["fashion_report"])
    manager.add_detector(healthy)

    broken = BrokenInitDetector(["roulette_expert"])
    assert manager.add_detector(broken) is False
    await hass.async_block_till_done()

    assert errors == [
        {"detector": "BrokenInitDetector", "error": "game client not found"}
    ]
    assert broken.listener_count == 0
    assert not manager.is_detector_enabled(BrokenInitDetector)
    assert manager.set_detector_enabled(BrokenInitDetector, True) is False
    assert manager.get_detector("roulette_expert") is None
    assert manager.active_detector_count == 1

    healthy.fire("fashion_report", True)
    await hass.async_block_till_done()
    assert _completed(coordinator, "fashion_report") is True


async def test_signal_handling_failure_marks_detector_failed(
    hass: HomeAssistant,
    coordinator: ChecklistCoordinator,
    manager: DetectionManager,
) -> None:
    detector = FakeDetector()
    manager.add_detector(detector)

    with patch.object(
        coordinator, "apply_detector_signal", side_effect=RuntimeError("boom")
    ):
        detector.fire("roulette_expert", True)
        await hass.async_block_till_done()

    assert not manager.is_detector_enabled(FakeDetector)
    assert detector.listener_count == 0

    diagnostics = manager.get_diagnostics()
    assert diagnostics[0]["failed"] is True
    assert diagnostics[0]["error"] == "boom"


async def test_completion_state_query_failure_returns_none(
    manager: DetectionManager,
) -> None:
    detector = FakeDetector()
    manager.add_detector(detector)

    with patch.object(
        detector, "get_completion_state", side_effect=RuntimeError("read failed")
    ):
        assert manager.get_task_completion_state("roulette_expert") is None


async def test_shutdown_continues_past_errors(manager: DetectionManager) -> None:
    throwing = ThrowingShutdownDetector(["roulette_expert"])
    healthy = FakeDetector(["fashion_report"])
    manager.add_detector(throwing)
    manager.add_detector(healthy)

    await manager.async_shutdown()

    assert throwing.shutdown_calls == 1
    assert healthy.shutdown_calls == 1
    assert healthy.listener_count == 0
    assert manager.get_registered_detector_types() == []


# =============================================================================
# TEST: LIMITATIONS / DIAGNOSTICS
# =============================================================================


def test_unknown_limitation_kind_rejected() -> None:
    with pytest.raises(ValueError):
        DetectionLimitation(
            kind="sometimes", description="Flaky", technical_reason="Unknown"
        )


async def test_limitations_reported(manager: DetectionManager) -> None:
    detector = FakeDetector(limitations=[POST_START_LIMITATION])
    manager.add_detector(detector)

    assert detector.has_limited_detection
    assert manager.get_detection_limitations() == {
        "FakeDetector": [POST_START_LIMITATION]
    }
    assert manager.get_task_limitations("roulette_expert") == [POST_START_LIMITATION]
    assert manager.get_task_limitations("fashion_report") == []

    diagnostics = manager.get_diagnostics()
    assert diagnostics[0]["limitations"][0]["kind"] == const.LIMITATION_POST_START_ONLY
