"""
Sensu Teams Handler - Constants and Configuration
==================================================
Shared constants, severity tables, and default values
for the Microsoft Teams notification handler.
"""

from typing import Dict, Tuple

# Version identifier for the handler
HANDLER_VERSION = "1.0.0"

# Settings section used when no -j/--json option is given
DEFAULT_CONFIG_NAME: str = "microsoft-teams"

# =============================================================================
# SEVERITY CONFIGURATION
# =============================================================================

# Check status code -> card color
SEVERITY_COLORS: Dict[int, str] = {
    0: '#36a64f',
    1: '#FFCC00',
    2: '#FF0000',
    3: '#6600CC',
}

# Check status code -> human readable label
SEVERITY_LABELS: Dict[int, str] = {
    0: 'OK',
    1: 'WARNING',
    2: 'CRITICAL',
    3: 'UNKNOWN',
}

# Bucket for any status outside the table (126, 127, -1, ...)
UNKNOWN_STATUS: int = 3

# =============================================================================
# PAYLOAD DEFAULTS
# =============================================================================

DEFAULT_ACTIVITY_IMAGE: str = (
    "https://raw.githubusercontent.com/sensu/sensu-logo/master/"
    "sensu1_flat%20white%20bg_png.png"
)

DEFAULT_ACTION_TYPE: str = "OpenUri"
DEFAULT_ACTION_NAME: str = "View in Sensu"
DEFAULT_ACTION_OS: str = "default"

# =============================================================================
# SETTINGS FILES
# =============================================================================

DEFAULT_CONFIG_FILE: str = "/etc/sensu/config.json"
DEFAULT_CONFIG_DIR: str = "/etc/sensu/conf.d"

# Environment variables consulted by the settings loader
ENV_LOADED_TEMPFILE: str = "SENSU_LOADED_TEMPFILE"
ENV_CONFIG_FILES: str = "SENSU_CONFIG_FILES"
ENV_ENCRYPTION_KEY: str = "SENSU_TEAMS_ENCRYPTION_KEY"

# Settings stored Fernet-encrypted as "<name>_encrypted"
ENCRYPTABLE_SETTINGS: Tuple[str, ...] = (
    'webhook_url',
    'proxy_username',
    'proxy_password',
)

# =============================================================================
# DELIVERY CONFIGURATION
# =============================================================================

# Timeout for the webhook POST (seconds)
REQUEST_TIMEOUT_SECONDS: int = 10

# Port used when proxy_address is set without proxy_port
DEFAULT_PROXY_PORT: int = 80

JSON_HEADERS: Dict[str, str] = {'Content-Type': 'application/json'}
