import re
from typing import Optional

from bang_app.config import settings


# Bare scheme://host.tld only: no port, path or query.
URL_RE = re.compile(r"https?://[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")


def is_valid_url(url: Optional[str]) -> bool:
    """Check whether url is an acceptable redirect target"""
    if not url:
        return False
    # fullmatch so a trailing newline is rejected too
    return URL_RE.fullmatch(url) is not None


def is_missing_slug(slug: Optional[str]) -> bool:
    """Empty slugs and the bare sentinel don't name a record"""
    return not slug or slug == settings.slug_prefix
