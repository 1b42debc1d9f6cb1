"""Pytest configuration and fixtures for Easee Cloud tests."""

from datetime import UTC, datetime
from typing import Any
from unittest.mock import Mock

import pytest

from custom_components.easee.models import AccessToken

TEST_CHARGER_ID = "EH123456"
TEST_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def clock() -> Mock:
    """Fixture providing a controllable clock returning TEST_NOW."""
    return Mock(return_value=TEST_NOW)


@pytest.fixture
def sample_login_response() -> dict[str, Any]:
    """Fixture providing a sample login API response."""
    return {
        "accessToken": "access_token_1",
        "expiresIn": 3600,
        "accessClaims": ["User"],
        "tokenType": "Bearer",
        "refreshToken": "refresh_token_1",
    }


@pytest.fixture
def sample_refresh_response() -> dict[str, Any]:
    """Fixture providing a sample refresh_token API response."""
    return {
        "accessToken": "access_token_2",
        "expiresIn": 3600,
        "accessClaims": ["User"],
        "tokenType": "Bearer",
        "refreshToken": "refresh_token_2",
    }


@pytest.fixture
def sample_token() -> AccessToken:
    """Fixture providing a token issued at TEST_NOW, valid for one hour."""
    return AccessToken(
        access_token="access_token_1",
        refresh_token="refresh_token_1",
        token_type="Bearer",
        issued_at=TEST_NOW,
        expires_in=3600,
    )


@pytest.fixture
def sample_chargers_response() -> list[dict[str, Any]]:
    """Fixture providing a sample /chargers API response."""
    return [
        {
            "id": TEST_CHARGER_ID,
            "name": "Garage",
            "color": 1,
            "createdOn": "2021-03-01T10:00:00",
            "updatedOn": "2021-03-02T10:00:00",
            "backPlate": {"id": "BP0001", "masterBackPlateId": "BP0001"},
            "levelOfAccess": 1,
            "productCode": 1,
        },
        {"id": "EH654321", "name": "Driveway"},
    ]


@pytest.fixture
def sample_state_response() -> dict[str, Any]:
    """Fixture providing a sample /chargers/{id}/state API response."""
    return {
        "smartCharging": False,
        "cableLocked": True,
        "chargerOpMode": 3,
        "totalPower": 7.2,
        "sessionEnergy": 12.5,
        "energyPerHour": 7.1,
        "wiFiRSSI": -60,
        "cellRSSI": -80,
        "localRSSI": -50,
        "outputPhase": 30,
        "latestPulse": "2024-05-01T11:59:00Z",
        "chargerFirmware": 290,
        "latestFirmware": 292,
        "voltage": 230.1,
        "isOnline": True,
        "inCurrentT2": 0.0,
        "inCurrentT3": 10.1,
        "inCurrentT4": 10.2,
        "inCurrentT5": 10.3,
        "inVoltageT2T3": 231.0,
        "inVoltageT2T4": 232.0,
        "inVoltageT2T5": 233.0,
        "lifetimeEnergy": 4321.5,
        "errorCode": 0,
        "fatalErrorCode": 0,
        "reasonForNoCurrent": 0,
        "someFutureField": "ignored",
    }
