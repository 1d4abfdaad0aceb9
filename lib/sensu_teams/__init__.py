"""
Sensu Teams Handler
===================
Delivers Sensu monitoring events to Microsoft Teams incoming webhooks.

Modules:
    config         - Settings files, encrypted secrets, constants
    events         - Event normalization and severity mapping
    rendering      - Sandboxed message and payload templates
    notifications  - Connector card assembly and webhook delivery
"""

from .config import (
    HANDLER_VERSION,
    DEFAULT_CONFIG_NAME,
    SettingsError,
    TeamsSettings,
    load_settings,
    get_settings_section,
    decrypt_settings,
    mask_settings,
)

from .events import (
    Event,
    EventError,
    Severity,
    parse_event,
    read_event,
)

from .notifications import (
    DeliveryError,
    TeamsNotifier,
    handle,
    create_notifier_from_section,
)

__all__ = [
    # Config
    "HANDLER_VERSION",
    "DEFAULT_CONFIG_NAME",
    "SettingsError",
    "TeamsSettings",
    "load_settings",
    "get_settings_section",
    "decrypt_settings",
    "mask_settings",
    # Events
    "Event",
    "EventError",
    "Severity",
    "parse_event",
    "read_event",
    # Notifications
    "DeliveryError",
    "TeamsNotifier",
    "handle",
    "create_notifier_from_section",
]
