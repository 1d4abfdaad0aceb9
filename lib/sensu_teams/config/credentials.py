"""
Credentials Management
======================
Decrypts secret settings stored Fernet-encrypted in the Sensu configuration.

Anyone holding a Teams incoming-webhook URL can post to the channel, so the
URL (and proxy credentials) may be kept encrypted in the settings files:

    "microsoft-teams": {
        "webhook_url_encrypted": "gAAAAAB..."
    }

The key is read from the SENSU_TEAMS_ENCRYPTION_KEY environment variable.

To generate a new key:
    from cryptography.fernet import Fernet
    print(Fernet.generate_key().decode())

Or use: generate_fernet_key() from this module.
"""

import os
from typing import Dict, Any
from cryptography.fernet import Fernet

from .constants import ENV_ENCRYPTION_KEY, ENCRYPTABLE_SETTINGS


def generate_fernet_key() -> str:
    """
    Generate a new Fernet encryption key.

    Export the generated key in the Sensu server environment as:
        SENSU_TEAMS_ENCRYPTION_KEY="generated-key-here"

    Returns:
        Base64-encoded Fernet key string
    """
    return Fernet.generate_key().decode()


def get_encryption_key() -> str:
    """
    Get the settings encryption key from the environment.

    Returns:
        Encryption key string

    Raises:
        ValueError: If the environment variable is not set
    """
    encryption_key = os.getenv(ENV_ENCRYPTION_KEY)

    if not encryption_key:
        raise ValueError(
            f"No encryption key found. Set {ENV_ENCRYPTION_KEY} to decrypt "
            f"encrypted settings."
        )

    return encryption_key


def decrypt_setting(encrypted_value: str, encryption_key: str) -> str:
    """
    Decrypt a single encrypted setting value.

    Args:
        encrypted_value: Fernet-encrypted string
        encryption_key: Fernet key string

    Returns:
        Decrypted string value

    Raises:
        ValueError: If decryption fails
    """
    try:
        fernet = Fernet(encryption_key.encode())
        return fernet.decrypt(encrypted_value.encode()).decode()
    except Exception as e:
        raise ValueError(f"Failed to decrypt setting: {e}")


def has_encrypted_settings(section: Dict[str, Any]) -> bool:
    """Return True if the section holds any known *_encrypted field."""
    return any(
        section.get(f"{name}_encrypted") for name in ENCRYPTABLE_SETTINGS
    )


def decrypt_settings(section: Dict[str, Any]) -> Dict[str, Any]:
    """
    Decrypt all encrypted fields of a settings section.

    Maps:
        webhook_url_encrypted -> webhook_url
        proxy_username_encrypted -> proxy_username
        proxy_password_encrypted -> proxy_password

    A section without encrypted fields is returned as a copy and does not
    require an encryption key.

    Args:
        section: Settings section mapping

    Returns:
        Copy of the section with decrypted values (encrypted fields removed)

    Raises:
        ValueError: If the key is missing or a value cannot be decrypted
    """
    decrypted = dict(section)

    if not has_encrypted_settings(section):
        return decrypted

    encryption_key = get_encryption_key()

    try:
        Fernet(encryption_key.encode())
    except Exception as e:
        raise ValueError(f"Invalid encryption key format: {e}")

    for name in ENCRYPTABLE_SETTINGS:
        encrypted_field = f"{name}_encrypted"
        if not section.get(encrypted_field):
            continue
        try:
            value = decrypt_setting(section[encrypted_field], encryption_key)
        except ValueError as e:
            raise ValueError(f"Failed to decrypt {encrypted_field}: {e}")
        decrypted[name] = value
        del decrypted[encrypted_field]

    return decrypted
