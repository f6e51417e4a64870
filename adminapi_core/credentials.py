"""
API client credential generation.

Every API client gets a key/secret pair when it is created. The key
identifies the client; the secret is only ever returned once, in the
result of the command that created it.
"""

from __future__ import annotations

import secrets
import string

KEY_ALPHABET = string.ascii_letters + string.digits
KEY_LENGTH = 20
SECRET_BYTES = 24


def generate_key(length: int = KEY_LENGTH) -> str:
    """Generate an alphanumeric client key."""
    return "".join(secrets.choice(KEY_ALPHABET) for _ in range(length))


def generate_secret(nbytes: int = SECRET_BYTES) -> str:
    """Generate a URL-safe client secret."""
    return secrets.token_urlsafe(nbytes)


def generate_key_secret() -> tuple[str, str]:
    """
    Generate a new credential pair.

    Returns:
        Tuple of (key, secret).
    """
    return generate_key(), generate_secret()
