from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse

from bang_app.schemas.link import CreatedLink
from bang_app.services.registry import RedirectRegistry
from bang_app.dependencies import get_registry

router = APIRouter(tags=["links"])


@router.post("/new", response_model=CreatedLink)
async def create_link(
    url: Optional[str] = None,
    registry: RedirectRegistry = Depends(get_registry)
):
    """Register a redirect for ?url= and return its slug and admin key"""
    return await registry.create(url)


@router.get("/clicks/{slug}", response_class=PlainTextResponse)
async def get_clicks(
    slug: str,
    key: Optional[str] = None,
    registry: RedirectRegistry = Depends(get_registry)
):
    """Click counter for a slug, as plain text (requires ?key=)"""
    return await registry.stats(slug, key)


@router.delete("/{slug}")
async def delete_link(
    slug: str,
    key: Optional[str] = None,
    registry: RedirectRegistry = Depends(get_registry)
):
    """Delete a redirect (requires ?key=)"""
    await registry.delete(slug, key)
    return Response(status_code=status.HTTP_200_OK)
