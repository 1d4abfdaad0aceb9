"""
Configuration module - Settings loading, encrypted secrets and constants.
"""

from .credentials import (
    generate_fernet_key,
    get_encryption_key,
    decrypt_setting,
    decrypt_settings,
)

from .settings import (
    SettingsError,
    TeamsSettings,
    config_file_paths,
    load_settings,
    get_settings_section,
    mask_settings,
)

from .constants import (
    HANDLER_VERSION,
    DEFAULT_CONFIG_NAME,
    SEVERITY_COLORS,
    SEVERITY_LABELS,
    DEFAULT_ACTIVITY_IMAGE,
    DEFAULT_ACTION_TYPE,
    DEFAULT_ACTION_NAME,
)

__all__ = [
    # Credentials
    "generate_fernet_key",
    "get_encryption_key",
    "decrypt_setting",
    "decrypt_settings",
    # Settings
    "SettingsError",
    "TeamsSettings",
    "config_file_paths",
    "load_settings",
    "get_settings_section",
    "mask_settings",
    # Constants
    "HANDLER_VERSION",
    "DEFAULT_CONFIG_NAME",
    "SEVERITY_COLORS",
    "SEVERITY_LABELS",
    "DEFAULT_ACTIVITY_IMAGE",
    "DEFAULT_ACTION_TYPE",
    "DEFAULT_ACTION_NAME",
]
