from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME, Platform
from homeassistant.core import HomeAssistant

from . import api
from .api import EaseeApiClient, create_session_client
from .const import DOMAIN
from .coordinator import EaseeAccountCoordinator

_LOGGER = logging.getLogger(__name__)

PLATFORMS = [Platform.BINARY_SENSOR, Platform.SENSOR]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.info("Setting up Easee integration for entry %s", entry.entry_id)

    client = EaseeApiClient(
        create_session_client(hass),
        entry.data[CONF_USERNAME],
        entry.data[CONF_PASSWORD],
    )

    try:
        await client.async_authenticate()
    except api.EaseeAuthenticationError as err:
        _LOGGER.error(
            "Check Easee cloud credentials for entry %s: %s", entry.entry_id, err
        )
        await client.async_close()
        return False
    except api.EaseeCommunicationError as err:
        _LOGGER.error(
            "Could not reach Easee cloud for entry %s: %s", entry.entry_id, err
        )
        await client.async_close()
        return False

    coordinator = EaseeAccountCoordinator(hass, entry, client)
    await coordinator.async_config_entry_first_refresh()
    _LOGGER.info(
        "Got %d chargers from Easee cloud for entry %s",
        len(coordinator.data),
        entry.entry_id,
    )

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {
        "client": client,
        "account_coordinator": coordinator,
    }

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    entry.async_on_unload(entry.add_update_listener(async_reload_entry))
    return True


async def async_reload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    _LOGGER.debug("Options changed, reloading entry %s", entry.entry_id)
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.info("Unloading Easee integration for entry %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if not unload_ok:
        _LOGGER.warning("Failed to unload some platforms for entry %s", entry.entry_id)
        return False

    entry_data = hass.data.get(DOMAIN, {}).pop(entry.entry_id, None)
    if entry_data is not None:
        await entry_data["client"].async_close()
        _LOGGER.debug("Cleaned up data for entry %s", entry.entry_id)

    return True
