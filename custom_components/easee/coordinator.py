"""Coordinators for Easee Cloud integration."""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from homeassistant.helpers import device_registry as dr
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from .const import (
    CONF_POLLING_INTERVAL,
    DEFAULT_POLLING_INTERVAL,
    DISCOVERY_INTERVAL,
    DISCOVERY_TIMEOUT,
    DOMAIN,
)
from .models import EaseeCharger, EaseeChargerState

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

    from .api import EaseeApiClient

_LOGGER = logging.getLogger(__name__)


def get_polling_interval(config_entry: ConfigEntry) -> int:
    """Return the polling interval in seconds, options taking precedence."""
    return int(
        config_entry.options.get(
            CONF_POLLING_INTERVAL,
            config_entry.data.get(CONF_POLLING_INTERVAL, DEFAULT_POLLING_INTERVAL),
        )
    )


class EaseeChargerCoordinator(DataUpdateCoordinator[EaseeChargerState]):
    """Coordinator that polls the state of a single charger."""

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        client: EaseeApiClient,
        charger: EaseeCharger,
    ) -> None:
        """Initialize the coordinator."""
        super().__init__(
            hass,
            _LOGGER,
            config_entry=config_entry,
            name=f"{DOMAIN}_{charger.id}",
            update_interval=timedelta(seconds=get_polling_interval(config_entry)),
        )
        self.client = client
        self.charger = charger

    async def _async_update_data(self) -> EaseeChargerState:
        charger_id = self.charger.id
        _LOGGER.debug("Updating state for charger %s", charger_id)

        state = await self.client.async_get_charger_state(charger_id)
        if state is None:
            error_msg = (
                f"Failed to update state of charger {charger_id}. "
                "Will try again later"
            )
            raise UpdateFailed(error_msg)

        if not state.is_online:
            _LOGGER.debug("Cloud reports charger %s offline", charger_id)

        self._update_device_firmware(state)
        return state

    def _update_device_firmware(self, state: EaseeChargerState) -> None:
        if state.charger_firmware is None:
            return

        sw_version = str(state.charger_firmware)
        device_registry = dr.async_get(self.hass)
        device = device_registry.async_get_device(
            identifiers={(DOMAIN, self.charger.id)}
        )
        if device is None or device.sw_version == sw_version:
            return

        _LOGGER.info(
            "Charger %s firmware changed from %s to %s",
            self.charger.id,
            device.sw_version,
            sw_version,
        )
        device_registry.async_update_device(device.id, sw_version=sw_version)


class EaseeAccountCoordinator(DataUpdateCoordinator[list[EaseeCharger]]):
    """Coordinator that scans the account for chargers.

    Every charger seen for the first time gets its own
    ``EaseeChargerCoordinator``, refreshed immediately.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        client: EaseeApiClient,
    ) -> None:
        """Initialize the coordinator."""
        super().__init__(
            hass,
            _LOGGER,
            config_entry=config_entry,
            name=DOMAIN,
            update_interval=DISCOVERY_INTERVAL,
        )
        self.client = client
        self.charger_coordinators: dict[str, EaseeChargerCoordinator] = {}
        self.new_charger_ids: list[str] = []

    async def _async_update_data(self) -> list[EaseeCharger]:
        """Scan for chargers; a failed scan keeps the last known list."""
        previous = self.data or []
        self.new_charger_ids = []
        _LOGGER.debug("Starting scan for new chargers")

        try:
            async with asyncio.timeout(DISCOVERY_TIMEOUT):
                result = await self.client.async_fetch_chargers()
        except TimeoutError:
            _LOGGER.warning(
                "Charger scan timed out after %d seconds", DISCOVERY_TIMEOUT
            )
            return previous

        if not result.success:
            _LOGGER.warning("Charger scan failed, will try again later")
            return previous

        if not result.chargers:
            _LOGGER.debug("No chargers found when scanning")

        for charger in result.chargers:
            if charger.id in self.charger_coordinators:
                continue

            _LOGGER.debug("Found charger %s (%s) during scan", charger.id, charger.name)
            coordinator = EaseeChargerCoordinator(
                self.hass,
                self.config_entry,
                self.client,
                charger,
            )
            self.charger_coordinators[charger.id] = coordinator
            await coordinator.async_refresh()
            self.new_charger_ids.append(charger.id)

        if self.new_charger_ids:
            _LOGGER.info(
                "Discovered %d new chargers on Easee account",
                len(self.new_charger_ids),
            )

        await self._async_remove_missing_chargers(
            {charger.id for charger in result.chargers}
        )
        return result.chargers

    async def _async_remove_missing_chargers(self, charger_ids: set[str]) -> None:
        """Stop polling chargers no longer on the account and drop their devices."""
        missing = [
            charger_id
            for charger_id in self.charger_coordinators
            if charger_id not in charger_ids
        ]
        if not missing:
            return

        device_registry = dr.async_get(self.hass)
        for charger_id in missing:
            _LOGGER.info("Charger %s is no longer on the Easee account", charger_id)
            coordinator = self.charger_coordinators.pop(charger_id)
            await coordinator.async_shutdown()

            device = device_registry.async_get_device(
                identifiers={(DOMAIN, charger_id)}
            )
            if device is not None:
                device_registry.async_update_device(
                    device.id, remove_config_entry_id=self.config_entry.entry_id
                )
