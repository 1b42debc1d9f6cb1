"""Sensor platform for Easee Cloud integration."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorEntityDescription,
    SensorStateClass,
)
from homeassistant.const import (
    UnitOfElectricCurrent,
    UnitOfElectricPotential,
    UnitOfEnergy,
    UnitOfPower,
)

from .const import CHARGER_OP_MODE_UNKNOWN, CHARGER_OP_MODES, DOMAIN
from .entity import EaseeChargerEntity, async_setup_charger_entities
from .models import EaseeChargerState

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from .coordinator import EaseeChargerCoordinator

# Coordinators do the fetching; entities only read cached state.
PARALLEL_UPDATES = 0


@dataclass(frozen=True, kw_only=True)
class EaseeSensorEntityDescription(SensorEntityDescription):
    """Describes an Easee charger sensor."""

    value_fn: Callable[[EaseeChargerState], str | float | None]


def _phase_current(key: str, attr: str) -> EaseeSensorEntityDescription:
    return EaseeSensorEntityDescription(
        key=key,
        device_class=SensorDeviceClass.CURRENT,
        state_class=SensorStateClass.MEASUREMENT,
        native_unit_of_measurement=UnitOfElectricCurrent.AMPERE,
        value_fn=lambda state: getattr(state, attr),
    )


def _phase_voltage(key: str, attr: str) -> EaseeSensorEntityDescription:
    return EaseeSensorEntityDescription(
        key=key,
        device_class=SensorDeviceClass.VOLTAGE,
        state_class=SensorStateClass.MEASUREMENT,
        native_unit_of_measurement=UnitOfElectricPotential.VOLT,
        value_fn=lambda state: getattr(state, attr),
    )


SENSORS: tuple[EaseeSensorEntityDescription, ...] = (
    EaseeSensorEntityDescription(
        key="state",
        device_class=SensorDeviceClass.ENUM,
        options=[*CHARGER_OP_MODES.values(), CHARGER_OP_MODE_UNKNOWN],
        value_fn=lambda state: state.op_mode_name,
    ),
    EaseeSensorEntityDescription(
        key="total_power",
        device_class=SensorDeviceClass.POWER,
        state_class=SensorStateClass.MEASUREMENT,
        native_unit_of_measurement=UnitOfPower.KILO_WATT,
        value_fn=lambda state: state.total_power,
    ),
    EaseeSensorEntityDescription(
        key="energy_per_hour",
        state_class=SensorStateClass.MEASUREMENT,
        native_unit_of_measurement=UnitOfEnergy.KILO_WATT_HOUR,
        value_fn=lambda state: state.energy_per_hour,
    ),
    EaseeSensorEntityDescription(
        key="session_energy",
        device_class=SensorDeviceClass.ENERGY,
        state_class=SensorStateClass.TOTAL_INCREASING,
        native_unit_of_measurement=UnitOfEnergy.KILO_WATT_HOUR,
        value_fn=lambda state: state.session_energy,
    ),
    EaseeSensorEntityDescription(
        key="lifetime_energy",
        device_class=SensorDeviceClass.ENERGY,
        state_class=SensorStateClass.TOTAL_INCREASING,
        native_unit_of_measurement=UnitOfEnergy.KILO_WATT_HOUR,
        value_fn=lambda state: state.lifetime_energy,
    ),
    _phase_current("phase1_current", "in_current_t3"),
    _phase_current("phase2_current", "in_current_t4"),
    _phase_current("phase3_current", "in_current_t5"),
    _phase_voltage("phase1_voltage", "in_voltage_t2_t3"),
    _phase_voltage("phase2_voltage", "in_voltage_t2_t4"),
    _phase_voltage("phase3_voltage", "in_voltage_t2_t5"),
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up sensors for every charger on the Easee account."""
    account = hass.data[DOMAIN][entry.entry_id]["account_coordinator"]

    def _create_sensors(
        coordinator: EaseeChargerCoordinator,
    ) -> list[EaseeChargerSensor]:
        return [EaseeChargerSensor(coordinator, description) for description in SENSORS]

    entry.async_on_unload(
        async_setup_charger_entities(account, _create_sensors, async_add_entities)
    )


class EaseeChargerSensor(EaseeChargerEntity, SensorEntity):
    """Sensor exposing one value of the charger state."""

    entity_description: EaseeSensorEntityDescription

    @property
    def native_value(self) -> str | float | None:
        """Return the state of the sensor."""
        if self.coordinator.data is None:
            return None
        return self.entity_description.value_fn(self.coordinator.data)
