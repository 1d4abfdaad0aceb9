"""
Teams Notifier
==============
Formats a Sensu event into a Microsoft Teams connector card and delivers it
to an incoming webhook.

One notifier call performs exactly one POST. There is no retry: a failed
delivery raises DeliveryError and the Sensu server decides what to do with
the handler's exit status.
"""

import json
from typing import Dict, Any, Optional
from urllib.parse import quote, unquote, urlsplit

import requests

from ..config.constants import (
    DEFAULT_ACTIVITY_IMAGE,
    DEFAULT_ACTION_NAME,
    DEFAULT_ACTION_OS,
    DEFAULT_ACTION_TYPE,
    DEFAULT_PROXY_PORT,
    JSON_HEADERS,
)
from ..config.settings import TeamsSettings
from ..events.models import Event
from ..rendering.templates import (
    build_template_context,
    render_message_template,
    render_payload_template,
)


class DeliveryError(Exception):
    """
    Raised when the webhook POST does not succeed.

    Attributes:
        status_code: HTTP status, or None if no response was received
        body: Response body text, if any
        reason: Short description of the failure
    """

    def __init__(self, status_code: Optional[int], body: Optional[str], reason: str):
        self.status_code = status_code
        self.body = body
        self.reason = reason
        if status_code is None:
            message = reason
        else:
            message = f"Webhook returned {status_code} {reason}: {body}"
        super().__init__(message)


class TeamsNotifier:
    """
    Sends one Sensu event to a Microsoft Teams incoming webhook.

    Usage:
        settings = TeamsSettings.from_section(section)
        notifier = TeamsNotifier(settings)
        notifier.notify(event)
    """

    def __init__(self, settings: TeamsSettings):
        self.settings = settings

    def incident_key(self, event: Event) -> str:
        """
        Identifier linking the notification back to its check.

        "<client>/<check>" without a dashboard, otherwise
        "<dashboard><client>?check=<check>".
        """
        if not self.settings.dashboard:
            return f"{event.client_name}/{event.check_name}"
        return f"{self.settings.dashboard}{event.client_name}?check={event.check_name}"

    def resolve_channel(self, event: Event) -> Optional[str]:
        """Channel override: client, then check, then settings."""
        return event.client_channel or event.check_channel or self.settings.channel

    def template_context(self, event: Event) -> Dict[str, Any]:
        return build_template_context(
            event,
            incident_key=self.incident_key(event),
            channel=self.resolve_channel(event),
            settings=self.settings.to_template_context(),
        )

    def build_description(self, event: Event) -> str:
        """
        Description text for the card.

        The event's own notification text wins; otherwise the message
        template (custom file or built-in default) is rendered.
        """
        if event.notification:
            return event.notification
        return render_message_template(
            self.settings.message_template, self.template_context(event)
        )

    def build_notice(self, event: Event) -> str:
        """Card body: "<incident key>: <description>", optionally surrounded."""
        body = f"{self.incident_key(event)}: {self.build_description(event)}"
        surround = self.settings.surround
        if surround:
            body = f"{surround}{body}{surround}"
        return body

    def build_payload(self, event: Event, notice: str) -> Dict[str, Any]:
        """
        Assemble the connector card JSON.

        Args:
            event: Normalized event
            notice: Section text (see build_notice)

        Returns:
            Payload dictionary ready for JSON encoding
        """
        settings = self.settings
        severity = event.severity

        payload: Dict[str, Any] = {
            'themeColor': severity.color,
            'text': f"{event.client_address} - {severity.label}",
            'sections': [{
                'activityImage': settings.icon_url or DEFAULT_ACTIVITY_IMAGE,
                'text': ' '.join(p for p in (settings.message_prefix, notice) if p),
            }],
            'potentialAction': [{
                '@type': settings.action_type or DEFAULT_ACTION_TYPE,
                'name': settings.action_name or DEFAULT_ACTION_NAME,
                'targets': [{
                    'os': DEFAULT_ACTION_OS,
                    'uri': self.incident_key(event),
                }],
            }],
        }

        channel = self.resolve_channel(event)
        if channel:
            payload['channel'] = channel
        if settings.bot_name:
            payload['username'] = settings.bot_name
        if settings.icon_emoji:
            payload['icon_emoji'] = settings.icon_emoji
        if settings.link_names:
            payload['link_names'] = settings.link_names

        return payload

    def build_body(self, event: Event) -> str:
        """
        Request body for an event.

        A readable payload template replaces the card entirely and is sent
        verbatim; otherwise the card is built and JSON-encoded.
        """
        if self.settings.payload_template:
            rendered = render_payload_template(
                self.settings.payload_template, self.template_context(event)
            )
            if rendered is not None:
                return rendered
            print(
                f"Payload template {self.settings.payload_template} is not readable, "
                f"falling back to the default card"
            )

        return json.dumps(self.build_payload(event, self.build_notice(event)))

    def build_proxies(self) -> Optional[Dict[str, str]]:
        """
        requests proxy mapping, or None for a direct connection.

        proxy_address may be a bare host or a URL. proxy_username and
        proxy_password take precedence over credentials embedded in the URL;
        either way they are URL-quoted into the proxy URL.
        """
        settings = self.settings
        if not settings.proxy_address:
            return None

        address = settings.proxy_address
        if '://' not in address:
            address = f"http://{address}"
        parsed = urlsplit(address)

        port = settings.proxy_port or parsed.port or DEFAULT_PROXY_PORT

        if settings.proxy_username:
            username = str(settings.proxy_username)
            password = settings.proxy_password
        else:
            username = unquote(parsed.username) if parsed.username else None
            password = unquote(parsed.password) if parsed.password else None

        auth = ''
        if username:
            auth = quote(username, safe='')
            if password:
                auth += ':' + quote(str(password), safe='')
            auth += '@'

        host = parsed.hostname
        if ':' in host:
            host = f"[{host}]"

        proxy_url = f"{parsed.scheme}://{auth}{host}:{int(port)}"
        return {'http': proxy_url, 'https': proxy_url}

    def post(self, body: str) -> bool:
        """
        POST a body to the webhook.

        Returns:
            True when the webhook answered with a 2xx/3xx status

        Raises:
            SettingsError: If webhook_url is not configured
            DeliveryError: On connection failure or any other status
        """
        url = self.settings.require_webhook_url()
        proxies = self.build_proxies()

        try:
            response = requests.post(
                url,
                data=body.encode('utf-8'),
                headers=JSON_HEADERS,
                proxies=proxies,
                timeout=self.settings.timeout,
            )
        except requests.exceptions.ProxyError as e:
            raise DeliveryError(None, None, f"Cannot connect to proxy: {e}")
        except requests.exceptions.Timeout:
            # The webhook URL is a secret, keep it out of the message
            raise DeliveryError(None, None, "Connection timeout while posting to webhook")
        except requests.exceptions.RequestException as e:
            raise DeliveryError(None, None, f"Webhook request failed: {e}")

        if not 200 <= response.status_code < 400:
            raise DeliveryError(response.status_code, response.text, response.reason or '')

        return True

    def notify(self, event: Event) -> bool:
        """
        Render and deliver the notification for an event.

        Returns:
            True on success

        Raises:
            DeliveryError: If the webhook rejects the request
        """
        severity = event.severity
        print(f"Sending Teams notification for {self.incident_key(event)} [{severity.label}]")

        self.post(self.build_body(event))

        print(f"Teams notification sent: {event.client_name}/{event.check_name}")
        return True


def handle(event: Event, settings: TeamsSettings) -> bool:
    """
    Deliver one event with the given settings.

    Returns:
        True on success

    Raises:
        DeliveryError: If delivery fails
    """
    return TeamsNotifier(settings).notify(event)


def create_notifier_from_section(section: Dict[str, Any]) -> TeamsNotifier:
    """
    Factory function to create a TeamsNotifier from a decrypted settings section.

    Args:
        section: Settings section mapping

    Returns:
        Configured TeamsNotifier instance
    """
    return TeamsNotifier(TeamsSettings.from_section(section))
