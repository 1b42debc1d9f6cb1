"""Binary sensor platform for Easee Cloud integration."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
    BinarySensorEntityDescription,
)
from homeassistant.const import EntityCategory

from .const import DOMAIN
from .entity import EaseeChargerEntity, async_setup_charger_entities
from .models import EaseeChargerState

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from .coordinator import EaseeChargerCoordinator

PARALLEL_UPDATES = 0


@dataclass(frozen=True, kw_only=True)
class EaseeBinarySensorEntityDescription(BinarySensorEntityDescription):
    """Describes an Easee charger binary sensor."""

    value_fn: Callable[[EaseeChargerState], bool | None]
    available_when_offline: bool = False


BINARY_SENSORS: tuple[EaseeBinarySensorEntityDescription, ...] = (
    EaseeBinarySensorEntityDescription(
        key="new_firmware_available",
        device_class=BinarySensorDeviceClass.UPDATE,
        entity_category=EntityCategory.DIAGNOSTIC,
        value_fn=lambda state: state.new_firmware_available,
    ),
    EaseeBinarySensorEntityDescription(
        key="online",
        device_class=BinarySensorDeviceClass.CONNECTIVITY,
        entity_category=EntityCategory.DIAGNOSTIC,
        value_fn=lambda state: state.is_online,
        available_when_offline=True,
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up binary sensors for every charger on the Easee account."""
    account = hass.data[DOMAIN][entry.entry_id]["account_coordinator"]

    def _create_binary_sensors(
        coordinator: EaseeChargerCoordinator,
    ) -> list[EaseeChargerBinarySensor]:
        return [
            EaseeChargerBinarySensor(coordinator, description)
            for description in BINARY_SENSORS
        ]

    entry.async_on_unload(
        async_setup_charger_entities(account, _create_binary_sensors, async_add_entities)
    )


class EaseeChargerBinarySensor(EaseeChargerEntity, BinarySensorEntity):
    """Binary sensor exposing one flag of the charger state."""

    entity_description: EaseeBinarySensorEntityDescription

    def __init__(
        self,
        coordinator: EaseeChargerCoordinator,
        description: EaseeBinarySensorEntityDescription,
    ) -> None:
        """Initialize the binary sensor."""
        super().__init__(coordinator, description)
        self._available_when_offline = description.available_when_offline

    @property
    def is_on(self) -> bool | None:
        """Return True if the flag is set."""
        if self.coordinator.data is None:
            return None
        return self.entity_description.value_fn(self.coordinator.data)
