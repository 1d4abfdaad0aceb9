"""
Notifications module - Microsoft Teams webhook delivery.
"""

from .teams_notifier import (
    DeliveryError,
    TeamsNotifier,
    handle,
    create_notifier_from_section,
)

__all__ = [
    "DeliveryError",
    "TeamsNotifier",
    "handle",
    "create_notifier_from_section",
]
