"""
Event Models
============
Normalized Sensu event and the four-level check severity.

Sensu 1.x handlers receive events in the legacy shape. Sensu 2.x events can
be mapped into that shape by the plugin runtime, in which case the names
live under "metadata" and the flag "v2_event_mapped_into_v1" is set. Both
shapes are normalized into a single Event here so nothing downstream needs
to know which one arrived.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional, TextIO

from ..config.constants import SEVERITY_COLORS, SEVERITY_LABELS, UNKNOWN_STATUS


class EventError(Exception):
    """Raised when the event payload cannot be read or normalized."""


class Severity(Enum):
    """Check severity derived from the check's exit status."""
    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3

    @property
    def label(self) -> str:
        return SEVERITY_LABELS[self.value]

    @property
    def color(self) -> str:
        return SEVERITY_COLORS[self.value]

    @classmethod
    def from_status(cls, status: Any) -> "Severity":
        """
        Map a raw check status to a severity.

        A check command can exit with any code: 127 when the command is not
        on $PATH, 126 when it is not executable, and so on. Anything other
        than 0-3, including non-numeric input, is treated as UNKNOWN.

        Args:
            status: Raw status (int, float, numeric string, or anything else)

        Returns:
            Matching Severity, never raises
        """
        if isinstance(status, bool):
            return cls.UNKNOWN
        try:
            code = int(status)
        except (TypeError, ValueError):
            try:
                code = int(float(status))
            except (TypeError, ValueError, OverflowError):
                return cls.UNKNOWN
        except OverflowError:
            return cls.UNKNOWN

        if code not in SEVERITY_LABELS:
            code = UNKNOWN_STATUS
        return cls(code)


@dataclass(frozen=True)
class Event:
    """A Sensu event normalized from either accepted input shape."""
    client_name: str
    check_name: str
    client_address: Optional[str] = None
    client_subscriptions: List[str] = field(default_factory=list)
    check_status: Any = None
    check_output: Optional[str] = None
    notification: Optional[str] = None
    client_channel: Optional[str] = None
    check_channel: Optional[str] = None
    mapped_from_v2: bool = False

    @property
    def severity(self) -> Severity:
        return Severity.from_status(self.check_status)


def _metadata_name(section: Dict[str, Any]) -> Optional[str]:
    metadata = section.get('metadata')
    if isinstance(metadata, dict):
        return metadata.get('name')
    return None


def parse_event(data: Dict[str, Any]) -> Event:
    """
    Normalize a decoded event payload.

    Legacy events take names from client.name / check.name and the
    description override from check.notification. Mapped 2.x events take
    names from the metadata blocks and the override from check.output.

    Args:
        data: Decoded event JSON

    Returns:
        Normalized Event

    Raises:
        EventError: If client or check is missing, or a name cannot be found
    """
    if not isinstance(data, dict):
        raise EventError("Event must be a JSON object")

    client = data.get('client')
    check = data.get('check')
    if not isinstance(client, dict) or not isinstance(check, dict):
        raise EventError("Event must contain 'client' and 'check' objects")

    mapped = bool(data.get('v2_event_mapped_into_v1'))

    if mapped:
        client_name = _metadata_name(client) or client.get('name')
        check_name = _metadata_name(check) or check.get('name')
        notification = check.get('output')
    else:
        client_name = client.get('name')
        check_name = check.get('name')
        notification = check.get('notification')

    if not client_name or not check_name:
        raise EventError("Event is missing the client or check name")

    subscriptions = client.get('subscriptions') or []
    if isinstance(subscriptions, str):
        subscriptions = [subscriptions]

    return Event(
        client_name=client_name,
        check_name=check_name,
        client_address=client.get('address'),
        client_subscriptions=[str(s) for s in subscriptions],
        check_status=check.get('status'),
        check_output=check.get('output'),
        notification=notification,
        client_channel=client.get('teams_channel'),
        check_channel=check.get('teams_channel'),
        mapped_from_v2=mapped,
    )


def read_event(stream: TextIO) -> Event:
    """
    Read and normalize an event from a text stream (usually stdin).

    Raises:
        EventError: If the stream is not valid UTF-8 or does not contain valid JSON
    """
    try:
        raw = stream.read()
    except UnicodeDecodeError as e:
        raise EventError(f"Failed to decode event input: {e}")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise EventError(f"Failed to parse event JSON: {e}")
    return parse_event(data)
