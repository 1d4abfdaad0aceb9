"""
Template Rendering
==================
Renders message and payload templates in a jinja2 sandbox.

Templates only see a whitelisted context built from the event and the
non-secret settings:

    client.name, client.address, client.subscriptions
    check.name, check.status, check.output
    severity, color, incident_key, channel, settings.<name>

Example message template:

    {{ check.output }} on {{ client.name }} ({{ severity }})
"""

from typing import Dict, Any, Optional

from jinja2.sandbox import SandboxedEnvironment

from ..events.models import Event
from ..utils.file_utils import read_template_file

DEFAULT_MESSAGE_TEMPLATE = (
    '{{ check.output | default("", true) }} : '
    '{{ client.address | default("", true) }} : '
    '{{ client.subscriptions | join(",") }}'
)

_environment = SandboxedEnvironment(autoescape=False, keep_trailing_newline=True)


def build_template_context(
    event: Event,
    incident_key: str,
    channel: Optional[str] = None,
    settings: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Build the whitelisted template context for an event.

    Args:
        event: Normalized event
        incident_key: Incident key/URL for the event
        channel: Resolved channel override, if any
        settings: Non-secret settings (see TeamsSettings.to_template_context)

    Returns:
        Plain dict of strings, lists and numbers
    """
    severity = event.severity
    return {
        'client': {
            'name': event.client_name,
            'address': event.client_address,
            'subscriptions': list(event.client_subscriptions),
        },
        'check': {
            'name': event.check_name,
            'status': event.check_status,
            'output': event.check_output,
        },
        'severity': severity.label,
        'color': severity.color,
        'incident_key': incident_key,
        'channel': channel,
        'settings': dict(settings or {}),
    }


def render_string(source: str, context: Dict[str, Any]) -> str:
    """Render template source against a context in the sandbox."""
    return _environment.from_string(source).render(context)


def render_message_template(path: Optional[str], context: Dict[str, Any]) -> str:
    """
    Render the description text.

    Uses the template file at `path` when it is configured and readable,
    otherwise DEFAULT_MESSAGE_TEMPLATE.

    Raises:
        jinja2.TemplateError: If the template is invalid or touches
            something the sandbox does not allow
    """
    source = read_template_file(path)
    if source is None:
        source = DEFAULT_MESSAGE_TEMPLATE
    return render_string(source, context).strip()


def render_payload_template(path: Optional[str], context: Dict[str, Any]) -> Optional[str]:
    """
    Render a full request body from a payload template.

    Returns:
        Rendered text verbatim, or None if no readable template is configured
    """
    source = read_template_file(path)
    if source is None:
        return None
    return render_string(source, context)
