"""Tests for the Dailies Checklist config and options flows."""

# pylint: disable=redefined-outer-name  # Pytest fixtures redefine names
# pylint: disable=unused-argument  # Fixtures needed for setup only

from __future__ import annotations

from datetime import timedelta
from unittest.mock import patch

from homeassistant import config_entries
from homeassistant.core import HomeAssistant
from homeassistant.data_entry_flow import FlowResultType
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.dailies_checklist import const

SETUP_ENTRY = "custom_components.dailies_checklist.async_setup_entry"


async def test_user_step_creates_entry(hass: HomeAssistant) -> None:
    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    assert result["type"] is FlowResultType.FORM
    assert result["step_id"] == const.CONFIG_FLOW_STEP_USER

    with patch(SETUP_ENTRY, return_value=True) as mock_setup:
        result = await hass.config_entries.flow.async_configure(
            result["flow_id"],
            {const.CONF_OWNER_NAME: "  Y'shtola  ", const.CONF_OWNER_ID: 42.0},
        )
        await hass.async_block_till_done()

    assert result["type"] is FlowResultType.CREATE_ENTRY
    assert result["title"] == "Dailies Checklist (Y'shtola)"
    assert result["data"] == {
        const.CONF_OWNER_NAME: "Y'shtola",
        const.CONF_OWNER_ID: 42,
    }
    assert result["result"].unique_id == "y'shtola"
    assert len(mock_setup.mock_calls) == 1


async def test_owner_id_is_optional(hass: HomeAssistant) -> None:
    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    with patch(SETUP_ENTRY, return_value=True):
        result = await hass.config_entries.flow.async_configure(
            result["flow_id"], {const.CONF_OWNER_NAME: "Urianger"}
        )
        await hass.async_block_till_done()

    assert result["type"] is FlowResultType.CREATE_ENTRY
    assert result["data"] == {const.CONF_OWNER_NAME: "Urianger"}


async def test_blank_owner_name_shows_error(hass: HomeAssistant) -> None:
    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    result = await hass.config_entries.flow.async_configure(
        result["flow_id"], {const.CONF_OWNER_NAME: "   "}
    )

    assert result["type"] is FlowResultType.FORM
    assert result["errors"] == {
        const.CONF_OWNER_NAME: const.TRANS_KEY_ERROR_INVALID_OWNER_NAME
    }


async def test_duplicate_owner_aborts(
    hass: HomeAssistant, mock_config_entry: MockConfigEntry
) -> None:
    mock_config_entry.add_to_hass(hass)

    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    result = await hass.config_entries.flow.async_configure(
        result["flow_id"], {const.CONF_OWNER_NAME: "ALPHINAUD"}
    )

    assert result["type"] is FlowResultType.ABORT
    assert result["reason"] == const.TRANS_KEY_ERROR_ALREADY_CONFIGURED


async def test_options_flow_updates_and_reloads(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    result = await hass.config_entries.options.async_init(init_integration.entry_id)
    assert result["type"] is FlowResultType.FORM
    assert result["step_id"] == const.OPTIONS_FLOW_STEP_INIT

    result = await hass.config_entries.options.async_configure(
        result["flow_id"],
        {const.CONF_RESET_CHECK_INTERVAL: 5, const.CONF_SAVE_DELAY: 0.5},
    )
    await hass.async_block_till_done()

    assert result["type"] is FlowResultType.CREATE_ENTRY
    assert init_integration.options == {
        const.CONF_RESET_CHECK_INTERVAL: 5,
        const.CONF_SAVE_DELAY: 0.5,
    }

    # The reload built a new coordinator with the new options
    coordinator = hass.data[const.DOMAIN][init_integration.entry_id][
        const.COORDINATOR
    ]
    assert coordinator.reset_manager.check_interval == timedelta(minutes=5)
    assert coordinator.store.save_delay == 0.5
