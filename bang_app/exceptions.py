"""
Error taxonomy for the redirect registry.

Every error raised by RedirectRegistry is a RegistryError carrying the HTTP
status it maps to. The API layer turns them into JSON responses through a
single exception handler (see main.py).

Lower layers have their own errors which the registry converts:
- RandomSourceError (generator) -> GenerationFailure
- StoreError (record store)     -> PersistenceFailure / LookupFailure / DeletionFailure
"""

from typing import Optional

from fastapi import status


class RegistryError(Exception):
    """Base class for errors surfaced to the client"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Internal server error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.detail
        super().__init__(self.detail)


# Client faults (400)

class MissingParameter(RegistryError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "missing url query parameter"


class InvalidUrl(RegistryError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "invalid url, please add http:// or https://"


class MissingSlug(RegistryError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "missing slug"


class MissingKey(RegistryError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "missing key from query params"


class NotFound(RegistryError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "failed to retrieve redirect"


# Auth faults (401)

class Unauthorized(RegistryError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Unauthorized"


# Server faults (500)

class GenerationFailure(RegistryError):
    detail = "failed to generate random string"


class PersistenceFailure(RegistryError):
    detail = "failed to register redirect"


class LookupFailure(RegistryError):
    detail = "failed to get statistics"


class DeletionFailure(RegistryError):
    detail = "failed to delete redirect"


# Lower-layer errors

class RandomSourceError(Exception):
    """The operating system entropy source could not be read"""


class StoreError(Exception):
    """A record store command failed (connection issues, timeouts, wrong type, etc.)"""
