from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from rotator_app.dependencies import get_redirect_recorder, get_rotator_service
from rotator_app.exceptions import NoDestinationError
from rotator_app.services.client_info import VisitInfo
from rotator_app.services.redirect_logger import RedirectRecorder
from rotator_app.services.rotation_service import RotatorService

router = APIRouter(tags=["redirect"])


UNAVAILABLE_PAGE = (
    "<!DOCTYPE html><html><head><title>Service temporarily unavailable</title></head>"
    '<body style="font-family:sans-serif;text-align:center;padding:50px;">'
    "<h1>Service temporarily unavailable</h1>"
    "<p>Please try again later.</p>"
    "</body></html>"
)


@router.api_route("/", methods=["GET", "HEAD"])
async def rotate(
    request: Request,
    background_tasks: BackgroundTasks,
    rotator: RotatorService = Depends(get_rotator_service),
    recorder: RedirectRecorder = Depends(get_redirect_recorder),
):
    """
    Redirect to one of the active URLs, chosen at random.

    The event is logged by a background task once the 302 has been sent,
    so geolocation and disk I/O never delay the visitor.
    """
    try:
        url = rotator.choose()
    except NoDestinationError:
        return HTMLResponse(UNAVAILABLE_PAGE, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

    background_tasks.add_task(recorder.record, url, VisitInfo.from_request(request))

    response = RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)
    # Keeps destinations such as YouTube from showing a referer warning page
    response.headers["Referrer-Policy"] = "no-referrer"
    return response
