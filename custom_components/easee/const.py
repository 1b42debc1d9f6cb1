"""Constants for Easee Cloud integration.

This module contains all the constants used throughout the integration,
including API endpoints, configuration keys, and polling intervals.
"""

from datetime import timedelta

DOMAIN = "easee"
MANUFACTURER = "Easee"

BASE_URL = "https://api.easee.cloud/api"
LOGIN_URL = f"{BASE_URL}/accounts/login"
REFRESH_TOKEN_URL = f"{BASE_URL}/accounts/refresh_token"
CHARGERS_URL = f"{BASE_URL}/chargers"

CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_BODY = "application/*+json"

TOKEN_EXPIRATION_BUFFER = 300  # seconds subtracted from expiresIn
MAX_TOKEN_LIFETIME = 366 * 24 * 3600  # upper bound accepted for expiresIn
REQUEST_TIMEOUT = 10.0

CONF_POLLING_INTERVAL = "polling_interval"
DEFAULT_POLLING_INTERVAL = 60
MIN_POLLING_INTERVAL = 10

DISCOVERY_INTERVAL = timedelta(minutes=15)
DISCOVERY_TIMEOUT = 5  # seconds per scan

ERROR_INVALID_AUTH = "invalid_auth"
ERROR_CANNOT_CONNECT = "cannot_connect"
ERROR_UNKNOWN = "unknown_error"

CHARGER_OP_MODES = {
    1: "waiting",
    2: "connected",
    3: "charging",
    4: "idle",
}
CHARGER_OP_MODE_UNKNOWN = "unknown"
