"""
Slug and admin key generation.

Both are random strings over the Base62 alphabet (a-z, A-Z, 0-9), drawn with
secrets.choice: cryptographically secure and free of modulo bias.

    >>> generate_slug()
    '!aZ3k9'
    >>> len(generate_admin_key())
    64
"""

import secrets
import string

from bang_app.config import settings
from bang_app.exceptions import RandomSourceError


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits


def generate(length: int) -> str:
    """
    Generate a random Base62 string of exactly `length` characters.

    Raises:
        ValueError: If length is negative
        RandomSourceError: If the OS entropy source cannot be read
    """
    if length < 0:
        raise ValueError(f"Length must be a non-negative integer (given value: {length}).")
    try:
        return "".join(secrets.choice(ALPHABET) for _ in range(length))
    except (OSError, NotImplementedError) as e:
        raise RandomSourceError(f"Could not read the entropy source: {e}") from e


def generate_slug() -> str:
    """Public slug: sentinel prefix + short random part"""
    return settings.slug_prefix + generate(settings.slug_length)


def generate_admin_key() -> str:
    """Admin key: long random bearer secret, no prefix"""
    return generate(settings.admin_key_length)
