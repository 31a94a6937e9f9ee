from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from bang_app.services.registry import RedirectRegistry
from bang_app.dependencies import get_registry

router = APIRouter(tags=["redirect"])


@router.get("/{slug}")
async def redirect_to_target(
    slug: str,
    registry: RedirectRegistry = Depends(get_registry)
):
    """
    Redirect to the stored URL.

    Flow:
    1. Read the target (one LINDEX)
    2. Hand the click increment to the hit scheduler
    3. Redirect immediately, the counter write doesn't hold up the response
    """
    target = await registry.resolve(slug)
    return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)
