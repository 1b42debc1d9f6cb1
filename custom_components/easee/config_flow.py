"""
Configuration flow for Easee Cloud integration.

This module handles the setup and configuration of the Easee Cloud
integration through Home Assistant's config flow system.
"""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol
from homeassistant.config_entries import (
    ConfigEntry,
    ConfigFlow,
    ConfigFlowResult,
    OptionsFlow,
)
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME
from homeassistant.core import callback
from homeassistant.helpers.httpx_client import get_async_client

from . import api
from .const import (
    CONF_POLLING_INTERVAL,
    DEFAULT_POLLING_INTERVAL,
    DOMAIN,
    ERROR_CANNOT_CONNECT,
    ERROR_INVALID_AUTH,
    ERROR_UNKNOWN,
    MIN_POLLING_INTERVAL,
)
from .coordinator import get_polling_interval

_LOGGER = logging.getLogger(__name__)

POLLING_INTERVAL_VALIDATOR = vol.All(
    vol.Coerce(int), vol.Range(min=MIN_POLLING_INTERVAL)
)


class EaseeConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle configuration flow for Easee Cloud integration."""

    VERSION = 1

    @staticmethod
    @callback
    def async_get_options_flow(config_entry: ConfigEntry) -> EaseeOptionsFlow:
        """Return the options flow handler."""
        return EaseeOptionsFlow()

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """
        Handle the initial step of the config flow.

        Args:
            user_input: User input data containing username, password and
                polling interval.

        Returns:
            ConfigFlowResult indicating the next step or errors.

        """
        errors: dict[str, str] = {}

        if user_input is not None:
            username = user_input[CONF_USERNAME]
            password = user_input[CONF_PASSWORD]

            client = api.EaseeApiClient(
                get_async_client(self.hass), username, password
            )
            try:
                await client.async_authenticate()
                _LOGGER.info("Successfully authenticated with Easee cloud")

            except api.EaseeAuthenticationError as err:
                _LOGGER.warning(
                    "Authentication failed (%s): %s", ERROR_INVALID_AUTH, err
                )
                errors["base"] = ERROR_INVALID_AUTH
            except api.EaseeCommunicationError as err:
                _LOGGER.warning("Connection error (%s): %s", ERROR_CANNOT_CONNECT, err)
                errors["base"] = ERROR_CANNOT_CONNECT
            except Exception:
                _LOGGER.exception(
                    "Unexpected error during authentication (%s)",
                    ERROR_UNKNOWN,
                )
                errors["base"] = ERROR_UNKNOWN

            else:
                await self.async_set_unique_id(username.lower())
                self._abort_if_unique_id_configured()

                return self.async_create_entry(
                    title=f"Easee ({username})",
                    data={
                        CONF_USERNAME: username,
                        CONF_PASSWORD: password,
                        CONF_POLLING_INTERVAL: user_input.get(
                            CONF_POLLING_INTERVAL, DEFAULT_POLLING_INTERVAL
                        ),
                    },
                )

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(
                {
                    vol.Required(CONF_USERNAME): str,
                    vol.Required(CONF_PASSWORD): str,
                    vol.Optional(
                        CONF_POLLING_INTERVAL, default=DEFAULT_POLLING_INTERVAL
                    ): POLLING_INTERVAL_VALIDATOR,
                }
            ),
            errors=errors,
        )


class EaseeOptionsFlow(OptionsFlow):
    """Handle options for an Easee account."""

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Manage the polling interval."""
        if user_input is not None:
            return self.async_create_entry(data=user_input)

        return self.async_show_form(
            step_id="init",
            data_schema=vol.Schema(
                {
                    vol.Required(
                        CONF_POLLING_INTERVAL,
                        default=get_polling_interval(self.config_entry),
                    ): POLLING_INTERVAL_VALIDATOR,
                }
            ),
        )
