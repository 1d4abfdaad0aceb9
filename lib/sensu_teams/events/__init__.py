"""
Events module - Sensu event normalization and severity mapping.
"""

from .models import Event, EventError, Severity, parse_event, read_event

__all__ = [
    "Event",
    "EventError",
    "Severity",
    "parse_event",
    "read_event",
]
