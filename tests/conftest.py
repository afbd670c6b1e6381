"""Shared fixtures for Dailies Checklist tests."""

# pylint: disable=redefined-outer-name  # Pytest fixtures shadow names

from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.dailies_checklist import const
from custom_components.dailies_checklist.coordinator import ChecklistCoordinator

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
def config_dir(hass: HomeAssistant, tmp_path: Path) -> Path:
    """Point the Home Assistant config directory at a temporary path."""
    hass.config.config_dir = str(tmp_path)
    return tmp_path


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Create a config entry for a single character profile."""
    return MockConfigEntry(
        domain=const.DOMAIN,
        title="Dailies Checklist (Alphinaud)",
        data={const.CONF_OWNER_NAME: "Alphinaud", const.CONF_OWNER_ID: 1001},
        options={
            const.CONF_RESET_CHECK_INTERVAL: const.DEFAULT_RESET_CHECK_INTERVAL,
            const.CONF_SAVE_DELAY: const.DEFAULT_SAVE_DELAY_SECONDS,
        },
        unique_id="alphinaud",
        entry_id="test_entry_alphinaud",
    )


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    config_dir: Path,
    mock_config_entry: MockConfigEntry,
) -> AsyncGenerator[MockConfigEntry]:
    """Set up the integration and unload it after the test."""
    # pylint: disable=unused-argument
    mock_config_entry.add_to_hass(hass)
    assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
    await hass.async_block_till_done()

    yield mock_config_entry

    if mock_config_entry.entry_id in hass.data.get(const.DOMAIN, {}):
        await hass.config_entries.async_unload(mock_config_entry.entry_id)
        await hass.async_block_till_done()


@pytest.fixture
def coordinator(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> ChecklistCoordinator:
    """Return the coordinator of the set-up profile."""
    return hass.data[const.DOMAIN][init_integration.entry_id][const.COORDINATOR]
