"""Data models for Easee Cloud integration."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta
from typing import Any

from .const import (
    CHARGER_OP_MODE_UNKNOWN,
    CHARGER_OP_MODES,
    MAX_TOKEN_LIFETIME,
    TOKEN_EXPIRATION_BUFFER,
)


def _require_mapping(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        error_msg = f"Expected a JSON object, got {type(data).__name__}"
        raise TypeError(error_msg)
    return data


@dataclass(frozen=True, slots=True)
class AccessToken:
    """Represents an Easee access/refresh token pair with its lifetime."""

    access_token: str
    refresh_token: str
    token_type: str
    issued_at: datetime
    expires_in: int

    @property
    def expires_at(self) -> datetime:
        """Return the nominal expiry timestamp reported by the server."""
        return self.issued_at + timedelta(seconds=self.expires_in)

    @property
    def authorization(self) -> str:
        """Return the value for the Authorization header."""
        return f"{self.token_type} {self.access_token}"

    def is_expired(
        self, now: datetime, buffer: int = TOKEN_EXPIRATION_BUFFER
    ) -> bool:
        """Check whether the token should be treated as stale.

        Args:
            now: Current timestamp.
            buffer: Seconds subtracted from the nominal lifetime.

        Returns:
            True once ``now`` reaches ``issued_at + expires_in - buffer``.

        """
        return now >= self.expires_at - timedelta(seconds=buffer)

    @classmethod
    def from_api(cls, data: Any, issued_at: datetime) -> AccessToken:
        """Build a token from a login or refresh_token response body.

        Raises:
            KeyError: If a required key is missing.
            TypeError: If the body or a token value has the wrong type.
            ValueError: If expiresIn is not an integer within
                ``0..MAX_TOKEN_LIFETIME`` seconds.

        """
        body = _require_mapping(data)
        access_token = body["accessToken"]
        refresh_token = body["refreshToken"]
        if not isinstance(access_token, str) or not isinstance(refresh_token, str):
            error_msg = "Token values must be strings"
            raise TypeError(error_msg)

        return cls(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type=body.get("tokenType") or "Bearer",
            issued_at=issued_at,
            expires_in=_parse_expires_in(body["expiresIn"]),
        )


def _parse_expires_in(value: Any) -> int:
    try:
        expires_in = int(value)
    except OverflowError as err:
        error_msg = f"expiresIn is not finite: {value}"
        raise ValueError(error_msg) from err

    if not 0 <= expires_in <= MAX_TOKEN_LIFETIME:
        error_msg = f"expiresIn out of range: {expires_in}"
        raise ValueError(error_msg)
    return expires_in


@dataclass(frozen=True, slots=True)
class EaseeCharger:
    """Represents an Easee charger as listed on the account.

    Attributes:
        id: Charger serial, used as the unique identifier.
        name: Human-readable charger name.

    """

    id: str
    name: str
    color: int | None = None
    created_on: str | None = None
    updated_on: str | None = None
    back_plate: str | None = None
    level_of_access: str | None = None
    product_code: str | None = None

    @classmethod
    def from_api(cls, data: Any) -> EaseeCharger:
        """Build a charger from one element of the /chargers response."""
        body = _require_mapping(data)
        charger_id = str(body["id"])
        back_plate = body.get("backPlate")
        if isinstance(back_plate, dict):
            back_plate = back_plate.get("id")

        return cls(
            id=charger_id,
            name=body.get("name") or charger_id,
            color=body.get("color"),
            created_on=body.get("createdOn"),
            updated_on=body.get("updatedOn"),
            back_plate=back_plate,
            level_of_access=(
                str(body["levelOfAccess"])
                if body.get("levelOfAccess") is not None
                else None
            ),
            product_code=(
                str(body["productCode"])
                if body.get("productCode") is not None
                else None
            ),
        )


@dataclass(frozen=True, slots=True)
class ChargerListResult:
    """Outcome of listing chargers, separating 'none found' from 'failed'."""

    chargers: list[EaseeCharger]
    success: bool


def _api_field(key: str) -> Any:
    return field(default=None, metadata={"api_key": key})


@dataclass(frozen=True)
class EaseeChargerState:
    """Snapshot of the telemetry reported by /chargers/{id}/state."""

    smart_charging: bool | None = _api_field("smartCharging")
    cable_locked: bool | None = _api_field("cableLocked")
    charger_op_mode: int | None = _api_field("chargerOpMode")
    total_power: float | None = _api_field("totalPower")
    session_energy: float | None = _api_field("sessionEnergy")
    energy_per_hour: float | None = _api_field("energyPerHour")
    wifi_rssi: int | None = _api_field("wiFiRSSI")
    cell_rssi: int | None = _api_field("cellRSSI")
    local_rssi: int | None = _api_field("localRSSI")
    output_phase: int | None = _api_field("outputPhase")
    dynamic_circuit_current_p1: int | None = _api_field("dynamicCircuitCurrentP1")
    dynamic_circuit_current_p2: int | None = _api_field("dynamicCircuitCurrentP2")
    dynamic_circuit_current_p3: int | None = _api_field("dynamicCircuitCurrentP3")
    latest_pulse: str | None = _api_field("latestPulse")
    charger_firmware: int | None = _api_field("chargerFirmware")
    latest_firmware: int | None = _api_field("latestFirmware")
    voltage: float | None = _api_field("voltage")
    charger_rat: int | None = _api_field("chargerRAT")
    lock_cable_permanently: bool | None = _api_field("lockCablePermanently")
    in_current_t2: float | None = _api_field("inCurrentT2")
    in_current_t3: float | None = _api_field("inCurrentT3")
    in_current_t4: float | None = _api_field("inCurrentT4")
    in_current_t5: float | None = _api_field("inCurrentT5")
    output_current: float | None = _api_field("outputCurrent")
    is_online: bool | None = _api_field("isOnline")
    in_voltage_t1_t2: float | None = _api_field("inVoltageT1T2")
    in_voltage_t1_t3: float | None = _api_field("inVoltageT1T3")
    in_voltage_t1_t4: float | None = _api_field("inVoltageT1T4")
    in_voltage_t1_t5: float | None = _api_field("inVoltageT1T5")
    in_voltage_t2_t3: float | None = _api_field("inVoltageT2T3")
    in_voltage_t2_t4: float | None = _api_field("inVoltageT2T4")
    in_voltage_t2_t5: float | None = _api_field("inVoltageT2T5")
    in_voltage_t3_t4: float | None = _api_field("inVoltageT3T4")
    in_voltage_t3_t5: float | None = _api_field("inVoltageT3T5")
    in_voltage_t4_t5: float | None = _api_field("inVoltageT4T5")
    led_mode: int | None = _api_field("ledMode")
    cable_rating: float | None = _api_field("cableRating")
    dynamic_charger_current: float | None = _api_field("dynamicChargerCurrent")
    circuit_total_allocated_phase_conductor_current_l1: float | None = _api_field(
        "circuitTotalAllocatedPhaseConductorCurrentL1"
    )
    circuit_total_allocated_phase_conductor_current_l2: float | None = _api_field(
        "circuitTotalAllocatedPhaseConductorCurrentL2"
    )
    circuit_total_allocated_phase_conductor_current_l3: float | None = _api_field(
        "circuitTotalAllocatedPhaseConductorCurrentL3"
    )
    circuit_total_phase_conductor_current_l1: float | None = _api_field(
        "circuitTotalPhaseConductorCurrentL1"
    )
    circuit_total_phase_conductor_current_l2: float | None = _api_field(
        "circuitTotalPhaseConductorCurrentL2"
    )
    circuit_total_phase_conductor_current_l3: float | None = _api_field(
        "circuitTotalPhaseConductorCurrentL3"
    )
    reason_for_no_current: int | str | None = _api_field("reasonForNoCurrent")
    wifi_ap_enabled: bool | None = _api_field("wiFiAPEnabled")
    lifetime_energy: float | None = _api_field("lifetimeEnergy")
    offline_max_circuit_current_p1: int | None = _api_field(
        "offlineMaxCircuitCurrentP1"
    )
    offline_max_circuit_current_p2: int | None = _api_field(
        "offlineMaxCircuitCurrentP2"
    )
    offline_max_circuit_current_p3: int | None = _api_field(
        "offlineMaxCircuitCurrentP3"
    )
    error_code: int | None = _api_field("errorCode")
    fatal_error_code: int | None = _api_field("fatalErrorCode")
    eq_available_current_p1: float | None = _api_field("eqAvailableCurrentP1")
    eq_available_current_p2: float | None = _api_field("eqAvailableCurrentP2")
    eq_available_current_p3: float | None = _api_field("eqAvailableCurrentP3")
    derated_current: float | None = _api_field("deratedCurrent")
    derating_active: bool | None = _api_field("deratingActive")

    @classmethod
    def from_api(cls, data: Any) -> EaseeChargerState:
        """Build a state snapshot from the /state response body.

        Missing keys become None and unknown keys are ignored.

        Raises:
            TypeError: If the body is not a JSON object.

        """
        body = _require_mapping(data)
        return cls(
            **{
                f.name: body.get(f.metadata["api_key"])
                for f in fields(cls)
                if "api_key" in f.metadata
            }
        )

    @property
    def op_mode_name(self) -> str:
        """Return the charger operating mode as text."""
        return CHARGER_OP_MODES.get(self.charger_op_mode, CHARGER_OP_MODE_UNKNOWN)

    @property
    def new_firmware_available(self) -> bool:
        """Return True when the cloud offers a newer firmware than installed."""
        if self.latest_firmware is None:
            return False
        return self.latest_firmware != self.charger_firmware
