"""Base entity for Easee chargers."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from homeassistant.core import callback
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.entity import Entity, EntityDescription
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN, MANUFACTURER
from .coordinator import EaseeAccountCoordinator, EaseeChargerCoordinator


class EaseeChargerEntity(CoordinatorEntity[EaseeChargerCoordinator]):
    """Base entity bound to the state coordinator of one charger."""

    _attr_has_entity_name = True
    # Entities stay available while the cloud reports the charger offline.
    _available_when_offline = False

    def __init__(
        self,
        coordinator: EaseeChargerCoordinator,
        description: EntityDescription,
    ) -> None:
        """Initialize the entity."""
        super().__init__(coordinator)
        self.entity_description = description
        charger = coordinator.charger
        self._attr_unique_id = f"{charger.id}_{description.key}"
        self._attr_translation_key = description.key

        firmware = None
        if coordinator.data is not None and coordinator.data.charger_firmware is not None:
            firmware = str(coordinator.data.charger_firmware)

        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, charger.id)},
            name=charger.name,
            manufacturer=MANUFACTURER,
            model=charger.product_code,
            serial_number=charger.id,
            sw_version=firmware,
            configuration_url="https://easee.cloud",
        )

    @property
    def available(self) -> bool:
        """Return True if the last poll succeeded and the charger is online."""
        if not super().available or self.coordinator.data is None:
            return False
        if self._available_when_offline:
            return True
        return bool(self.coordinator.data.is_online)


@callback
def async_setup_charger_entities(
    account: EaseeAccountCoordinator,
    factory: Callable[[EaseeChargerCoordinator], Iterable[Entity]],
    async_add_entities: Callable[[list[Entity]], None],
) -> Callable[[], None]:
    """Add entities for known chargers and for every charger discovered later.

    Returns:
        Callback removing the discovery listener.

    """
    known: dict[str, EaseeChargerCoordinator] = {}

    @callback
    def _async_add_new_chargers() -> None:
        entities: list[Entity] = []
        for charger_id, coordinator in account.charger_coordinators.items():
            if known.get(charger_id) is coordinator:
                continue
            known[charger_id] = coordinator
            entities.extend(factory(coordinator))
        if entities:
            async_add_entities(entities)

    _async_add_new_chargers()
    return account.async_add_listener(_async_add_new_chargers)
