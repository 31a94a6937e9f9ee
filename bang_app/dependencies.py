"""
FastAPI dependencies for dependency injection.

The record store and hit scheduler are created once by the app lifespan
(see main.py) and kept on app.state. These providers hand them to routes.

Pattern: Dependency Injection
- Routes depend on the registry, the registry on store + scheduler
- Tests swap backends through settings or app.dependency_overrides
"""

from fastapi import Depends, Request

from bang_app.hits.strategies import HitScheduler
from bang_app.services.registry import RedirectRegistry
from bang_app.storage.strategies import RecordStore


def get_store(request: Request) -> RecordStore:
    """Process-wide record store created at startup"""
    return request.app.state.store


def get_hit_scheduler(request: Request) -> HitScheduler:
    """Process-wide hit scheduler created at startup"""
    return request.app.state.hits


def get_registry(
    store: RecordStore = Depends(get_store),
    hits: HitScheduler = Depends(get_hit_scheduler)
) -> RedirectRegistry:
    """
    Get RedirectRegistry with all dependencies injected.

    The registry is stateless, so building one per request is cheap.
    """
    return RedirectRegistry(store=store, hits=hits)
