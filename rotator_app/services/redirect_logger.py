import logging

from starlette.concurrency import run_in_threadpool

from rotator_app.exceptions import EventLogError
from rotator_app.models.event import Event
from rotator_app.services.client_info import VisitInfo
from rotator_app.services.geolocation import GeoLocator
from rotator_app.storage.event_store import EventStore


logger = logging.getLogger(__name__)


class RedirectRecorder:
    """
    Records one redirection in the event log.

    Runs as a background task after the 302 has been sent. Logging is
    best-effort: failures are reported through the application log and
    never reach the visitor.
    """

    def __init__(
        self,
        store: EventStore,
        geolocator: GeoLocator,
        timezone: str = "UTC",
        enabled: bool = True,
    ):
        self.store = store
        self.geolocator = geolocator
        self.timezone = timezone
        self.enabled = enabled

    async def record(self, url: str, visit: VisitInfo) -> bool:
        """
        Returns:
            True if the event was appended, False otherwise
        """
        if not self.enabled:
            return False

        geo = await self.geolocator.locate(visit.ip, visit.headers)
        event = Event.create(
            url=url,
            ip=visit.ip,
            user_agent=visit.user_agent,
            referer=visit.referer,
            country=geo.country,
            city=geo.city,
            tz=self.timezone,
        )

        try:
            await run_in_threadpool(self.store.append, event)
        except EventLogError:
            logger.exception("Redirection to %s was not logged", url)
            return False
        return True
