"""
Domain models for the redirect registry.

Note: records live in a list-structured key-value store. The on-wire
layout is handled by bang_app.storage.codec, these models never see it.
"""

from .record import RedirectRecord

__all__ = ["RedirectRecord"]
