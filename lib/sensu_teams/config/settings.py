"""
Settings Loader
===============
Loads the Sensu JSON configuration and resolves the handler's settings section.

Sensu hands its configuration to handlers as a list of JSON files which are
deep-merged in order. The handler reads a single named section (by default
"microsoft-teams") from the merged result.
"""

import glob
import json
import os
from dataclasses import dataclass, fields
from typing import Dict, Any, List, Optional

from .constants import (
    DEFAULT_CONFIG_DIR,
    DEFAULT_CONFIG_FILE,
    ENV_CONFIG_FILES,
    ENV_LOADED_TEMPFILE,
    ENCRYPTABLE_SETTINGS,
    REQUEST_TIMEOUT_SECONDS,
)


class SettingsError(Exception):
    """Raised when settings cannot be loaded or a required value is missing."""


def config_file_paths() -> List[str]:
    """
    Resolve the list of settings files to load.

    Order of precedence:
        1. SENSU_LOADED_TEMPFILE - file containing a ':'-separated path list
        2. SENSU_CONFIG_FILES - ':'-separated path list
        3. /etc/sensu/config.json plus /etc/sensu/conf.d/**/*.json

    Returns:
        Ordered list of file paths (later files override earlier ones)
    """
    tempfile = os.getenv(ENV_LOADED_TEMPFILE)
    if tempfile and os.path.isfile(tempfile):
        with open(tempfile, 'r') as f:
            return [p for p in f.read().strip().split(':') if p]

    config_files = os.getenv(ENV_CONFIG_FILES)
    if config_files:
        return [p for p in config_files.split(':') if p]

    pattern = os.path.join(DEFAULT_CONFIG_DIR, '**', '*.json')
    return [DEFAULT_CONFIG_FILE] + sorted(glob.glob(pattern, recursive=True))


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge two mappings.

    Nested dicts are merged key by key; any other value in `override`
    replaces the one in `base`. Neither input is modified.
    """
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(paths: Optional[List[str]] = None) -> Dict[str, Any]:
    """
    Load and deep-merge Sensu settings files.

    Args:
        paths: Explicit list of files. If None, resolved via config_file_paths()

    Returns:
        Merged settings dictionary

    Raises:
        SettingsError: If a file exists but is not a JSON object
    """
    if paths is None:
        paths = config_file_paths()

    settings: Dict[str, Any] = {}

    for path in paths:
        if not os.path.isfile(path):
            continue
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SettingsError(f"Failed to load settings file {path}: {e}")

        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {path} must contain a JSON object")

        settings = deep_merge(settings, data)

    return settings


def get_settings_section(settings: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Return the named section, or an empty mapping when it is absent."""
    section = settings.get(name)
    if not isinstance(section, dict):
        return {}
    return section


@dataclass(frozen=True)
class TeamsSettings:
    """
    Resolved configuration for one handler invocation.

    Every field is optional; webhook_url is only enforced when the
    notification is delivered.
    """
    webhook_url: Optional[str] = None
    payload_template: Optional[str] = None
    message_template: Optional[str] = None
    icon_emoji: Optional[str] = None
    icon_url: Optional[str] = None
    channel: Optional[str] = None
    message_prefix: Optional[str] = None
    bot_name: Optional[str] = None
    surround: Optional[str] = None
    link_names: Any = None
    action_type: Optional[str] = None
    action_name: Optional[str] = None
    dashboard: Optional[str] = None
    proxy_address: Optional[str] = None
    proxy_port: Optional[int] = None
    proxy_username: Optional[str] = None
    proxy_password: Optional[str] = None
    timeout: float = REQUEST_TIMEOUT_SECONDS

    @classmethod
    def from_section(cls, section: Dict[str, Any]) -> "TeamsSettings":
        """
        Build settings from a (decrypted) settings section.

        "template" takes precedence over "message_template". Unknown keys
        are ignored.
        """
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in section.items() if k in known and v is not None}

        template = section.get('template') or section.get('message_template')
        if template:
            values['message_template'] = template

        return cls(**values)

    def require_webhook_url(self) -> str:
        """Return webhook_url or raise SettingsError if it is not configured."""
        if not self.webhook_url:
            raise SettingsError("webhook_url is not configured")
        return self.webhook_url

    def to_template_context(self) -> Dict[str, Any]:
        """Non-secret settings exposed to templates."""
        hidden = set(ENCRYPTABLE_SETTINGS)
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name not in hidden
        }


def mask_settings(section: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a masked copy of a settings section for safe logging.

    Args:
        section: Settings mapping potentially containing secrets

    Returns:
        Mapping with secret values masked
    """
    if not isinstance(section, dict):
        return section

    masked = dict(section)
    sensitive_fields = list(ENCRYPTABLE_SETTINGS) + [
        f"{name}_encrypted" for name in ENCRYPTABLE_SETTINGS
    ]

    for field in sensitive_fields:
        if field in masked and masked[field]:
            value = masked[field]
            if isinstance(value, str) and len(value) > 8:
                masked[field] = f"{value[:4]}...{value[-4:]}"
            else:
                masked[field] = "***"

    # Proxy URLs may carry user:password@
    address = masked.get('proxy_address')
    if isinstance(address, str) and '@' in address:
        scheme, sep, rest = address.rpartition('://')
        masked['proxy_address'] = f"{scheme}{sep}***@{rest.rsplit('@', 1)[1]}"

    return masked
