from typing import Optional

from fastapi import APIRouter, Depends, Request

from rotator_app.dependencies import (
    enforce_rate_limit,
    get_remote_addr,
    get_url_set_service,
    require_dashboard_token,
)
from rotator_app.schemas.url import URLUpdateResponse
from rotator_app.services.url_set_service import URLSetService, parse_update_body

router = APIRouter(prefix="/urls", tags=["urls"])


@router.post(
    "",
    response_model=URLUpdateResponse,
    response_model_exclude_none=True,
    # Order matters: authentication, then rate limiting, then the body
    dependencies=[Depends(require_dashboard_token), Depends(enforce_rate_limit)],
)
async def update_urls(
    request: Request,
    remote_addr: Optional[str] = Depends(get_remote_addr),
    url_set_service: URLSetService = Depends(get_url_set_service),
):
    """
    Replace the rotated URLs (called by the central dashboard).

    Body: {"urls": ["https://...", ...]}. Invalid entries are reported as
    warnings as long as at least one URL is valid.
    """
    update = parse_update_body(await request.body())
    return url_set_service.update(update, updated_from=remote_addr)
