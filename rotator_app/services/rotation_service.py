import logging
import random
from typing import List, Optional, Sequence

from rotator_app.exceptions import NoDestinationError
from rotator_app.storage.url_store import ActiveURLStore


logger = logging.getLogger(__name__)


def pick(candidates: Sequence[str], rng: Optional[random.Random] = None) -> str:
    """
    Choose one destination uniformly at random.

    Raises:
        ValueError: if candidates is empty. Callers substitute the fallback
            set first, so this is a programming error.
    """
    if not candidates:
        raise ValueError("pick() needs at least one candidate URL")
    return (rng or random).choice(candidates)


class RotatorService:
    """
    Resolves the URLs to rotate and picks one.

    Priority of sources:
    1. data/urls.json (managed by the central dashboard)
    2. fallback URLs from settings
    """

    def __init__(
        self,
        url_store: ActiveURLStore,
        fallback_urls: Sequence[str],
        rng: Optional[random.Random] = None,
    ):
        self.url_store = url_store
        self.fallback_urls = list(fallback_urls)
        self.rng = rng

    def active_urls(self) -> List[str]:
        url_set = self.url_store.load()
        if url_set is not None and url_set.urls:
            return url_set.urls
        return self.fallback_urls

    def choose(self) -> str:
        """
        Raises:
            NoDestinationError: if neither source has a URL
        """
        candidates = self.active_urls()
        if not candidates:
            logger.error("No destination URL available (active set and fallback are empty)")
            raise NoDestinationError()
        return pick(candidates, self.rng)
