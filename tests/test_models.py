"""Tests for the Easee Cloud data models."""

from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from custom_components.easee.const import MAX_TOKEN_LIFETIME
from custom_components.easee.models import (
    AccessToken,
    ChargerListResult,
    EaseeCharger,
    EaseeChargerState,
)

TEST_CHARGER_ID = "EH123456"
TEST_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


class TestAccessTokenIsExpired:
    """Tests for AccessToken.is_expired."""

    def test_is_expired_false_when_more_than_buffer_left(
        self, sample_token: AccessToken
    ) -> None:
        """Test that a token with more than 300 seconds left is valid."""
        now = TEST_NOW + timedelta(seconds=3600 - 301)
        assert sample_token.is_expired(now) is False

    def test_is_expired_true_at_buffer_boundary(
        self, sample_token: AccessToken
    ) -> None:
        """Test that a token is stale exactly 300 seconds before expiry."""
        now = TEST_NOW + timedelta(seconds=3600 - 300)
        assert sample_token.is_expired(now) is True

    def test_is_expired_true_after_nominal_expiry(
        self, sample_token: AccessToken
    ) -> None:
        """Test that a token is stale after its nominal lifetime."""
        now = TEST_NOW + timedelta(seconds=3600)
        assert sample_token.is_expired(now) is True

    def test_is_expired_honours_custom_buffer(
        self, sample_token: AccessToken
    ) -> None:
        """Test that the buffer can be overridden."""
        now = TEST_NOW + timedelta(seconds=3599)
        assert sample_token.is_expired(now, buffer=0) is False

    def test_expires_at_adds_expires_in(self, sample_token: AccessToken) -> None:
        """Test that expires_at is issued_at plus expires_in."""
        assert sample_token.expires_at == TEST_NOW + timedelta(hours=1)

    def test_authorization_combines_type_and_token(
        self, sample_token: AccessToken
    ) -> None:
        """Test the Authorization header value."""
        assert sample_token.authorization == "Bearer access_token_1"


class TestAccessTokenFromApi:
    """Tests for AccessToken.from_api."""

    def test_from_api_parses_login_response(
        self, sample_login_response: dict[str, Any]
    ) -> None:
        """Test that all token fields are taken from the response."""
        token = AccessToken.from_api(sample_login_response, issued_at=TEST_NOW)
        assert token.access_token == "access_token_1"
        assert token.refresh_token == "refresh_token_1"
        assert token.token_type == "Bearer"
        assert token.issued_at == TEST_NOW
        assert token.expires_in == 3600

    def test_from_api_defaults_token_type(self) -> None:
        """Test that a missing tokenType defaults to Bearer."""
        token = AccessToken.from_api(
            {"accessToken": "a", "refreshToken": "r", "expiresIn": 60},
            issued_at=TEST_NOW,
        )
        assert token.token_type == "Bearer"

    def test_from_api_raises_on_missing_key(self) -> None:
        """Test that a missing access token is rejected."""
        with pytest.raises(KeyError):
            AccessToken.from_api(
                {"refreshToken": "r", "expiresIn": 60}, issued_at=TEST_NOW
            )

    def test_from_api_raises_on_non_object(self) -> None:
        """Test that a non-object body is rejected."""
        with pytest.raises(TypeError):
            AccessToken.from_api(["not", "a", "token"], issued_at=TEST_NOW)

    def test_from_api_raises_on_invalid_expires_in(self) -> None:
        """Test that a non-numeric expiresIn is rejected."""
        with pytest.raises(ValueError):
            AccessToken.from_api(
                {"accessToken": "a", "refreshToken": "r", "expiresIn": "soon"},
                issued_at=TEST_NOW,
            )

    @pytest.mark.parametrize(
        "expires_in",
        [float("inf"), float("nan"), 10**20, -1, MAX_TOKEN_LIFETIME + 1],
    )
    def test_from_api_raises_on_unusable_lifetime(self, expires_in: float) -> None:
        """Test that a lifetime that cannot be added to a datetime is rejected."""
        with pytest.raises(ValueError):
            AccessToken.from_api(
                {"accessToken": "a", "refreshToken": "r", "expiresIn": expires_in},
                issued_at=TEST_NOW,
            )

    def test_from_api_accepts_max_lifetime(self) -> None:
        """Test that the longest accepted lifetime still yields an expiry."""
        token = AccessToken.from_api(
            {"accessToken": "a", "refreshToken": "r", "expiresIn": MAX_TOKEN_LIFETIME},
            issued_at=TEST_NOW,
        )
        assert token.is_expired(TEST_NOW) is False

    def test_token_is_frozen(self, sample_token: AccessToken) -> None:
        """Test that a token cannot be updated in place."""
        with pytest.raises(AttributeError):
            sample_token.access_token = "other"


class TestEaseeCharger:
    """Tests for EaseeCharger."""

    def test_from_api_parses_all_fields(
        self, sample_chargers_response: list[dict[str, Any]]
    ) -> None:
        """Test that charger metadata is parsed."""
        charger = EaseeCharger.from_api(sample_chargers_response[0])
        assert charger.id == TEST_CHARGER_ID
        assert charger.name == "Garage"
        assert charger.color == 1
        assert charger.created_on == "2021-03-01T10:00:00"
        assert charger.updated_on == "2021-03-02T10:00:00"
        assert charger.back_plate == "BP0001"
        assert charger.level_of_access == "1"
        assert charger.product_code == "1"

    def test_from_api_optional_fields_default_to_none(self) -> None:
        """Test that metadata is optional."""
        charger = EaseeCharger.from_api({"id": "EH1", "name": "Car"})
        assert charger.product_code is None
        assert charger.back_plate is None

    def test_from_api_falls_back_to_id_for_name(self) -> None:
        """Test that a missing name falls back to the charger id."""
        charger = EaseeCharger.from_api({"id": "EH1"})
        assert charger.name == "EH1"

    def test_from_api_requires_id(self) -> None:
        """Test that a charger without id is rejected."""
        with pytest.raises(KeyError):
            EaseeCharger.from_api({"name": "No id"})

    def test_charger_is_frozen(self) -> None:
        """Test that EaseeCharger cannot be modified."""
        charger = EaseeCharger(id="EH1", name="Car")
        with pytest.raises(AttributeError):
            charger.id = "EH2"


class TestEaseeChargerState:
    """Tests for EaseeChargerState."""

    def test_from_api_maps_camel_case_keys(
        self, sample_state_response: dict[str, Any]
    ) -> None:
        """Test that API keys are mapped onto snake_case fields."""
        state = EaseeChargerState.from_api(sample_state_response)
        assert state.charger_op_mode == 3
        assert state.total_power == 7.2
        assert state.session_energy == 12.5
        assert state.energy_per_hour == 7.1
        assert state.lifetime_energy == 4321.5
        assert state.wifi_rssi == -60
        assert state.in_current_t3 == 10.1
        assert state.in_voltage_t2_t5 == 233.0
        assert state.is_online is True

    def test_from_api_missing_keys_become_none(self) -> None:
        """Test that absent fields are None."""
        state = EaseeChargerState.from_api({"isOnline": False})
        assert state.is_online is False
        assert state.total_power is None
        assert state.derating_active is None

    def test_from_api_raises_on_non_object(self) -> None:
        """Test that a non-object body is rejected."""
        with pytest.raises(TypeError):
            EaseeChargerState.from_api("offline")

    @pytest.mark.parametrize(
        ("op_mode", "expected"),
        [
            (1, "waiting"),
            (2, "connected"),
            (3, "charging"),
            (4, "idle"),
            (0, "unknown"),
            (7, "unknown"),
            (None, "unknown"),
        ],
    )
    def test_op_mode_name(self, op_mode: int | None, expected: str) -> None:
        """Test the op mode to text mapping."""
        state = EaseeChargerState(charger_op_mode=op_mode)
        assert state.op_mode_name == expected

    def test_new_firmware_available_when_versions_differ(self) -> None:
        """Test that a newer firmware is reported."""
        state = EaseeChargerState(charger_firmware=290, latest_firmware=292)
        assert state.new_firmware_available is True

    def test_new_firmware_not_available_when_versions_match(self) -> None:
        """Test that matching firmware is not reported."""
        state = EaseeChargerState(charger_firmware=292, latest_firmware=292)
        assert state.new_firmware_available is False

    def test_new_firmware_not_available_when_latest_unknown(self) -> None:
        """Test that an unknown latest firmware is not reported."""
        state = EaseeChargerState(charger_firmware=292)
        assert state.new_firmware_available is False


class TestChargerListResult:
    """Tests for ChargerListResult."""

    def test_empty_success_differs_from_failure(self) -> None:
        """Test that 'no chargers' and 'failed' are distinguishable."""
        empty = ChargerListResult(chargers=[], success=True)
        failed = ChargerListResult(chargers=[], success=False)
        assert empty != failed
