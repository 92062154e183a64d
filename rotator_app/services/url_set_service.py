import json
import logging
from typing import Any, List, Optional, Tuple
from urllib.parse import urlparse

from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from rotator_app.exceptions import ValidationError
from rotator_app.schemas.url import InvalidURL, URLUpdateRequest, URLUpdateResponse
from rotator_app.storage.url_store import ActiveURLStore


logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https")
FORBIDDEN_PATTERNS = ("javascript:", "data:", "vbscript:", "<script", "onclick", "onerror")

_http_url = TypeAdapter(HttpUrl)


def is_valid_url(url: str) -> bool:
    """
    Well-formed http(s) URL without script injection patterns.

    The URL is only checked, the original string is what gets stored.
    """
    try:
        _http_url.validate_python(url)
    except PydanticValidationError:
        return False

    parsed = urlparse(url)
    if parsed.scheme.lower() not in ALLOWED_SCHEMES or not parsed.netloc:
        return False

    lowered = url.lower()
    return not any(pattern in lowered for pattern in FORBIDDEN_PATTERNS)


def parse_update_body(raw: bytes) -> URLUpdateRequest:
    """
    Raises:
        ValidationError: invalid JSON or missing/non-list "urls"
    """
    try:
        payload = json.loads(raw or b"null")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(f"Invalid JSON: {e}") from e

    try:
        return URLUpdateRequest.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError('The "urls" field is required and must be an array.') from e


def split_urls(candidates: List[Any]) -> Tuple[List[str], List[InvalidURL]]:
    """Valid URLs (trimmed, deduplicated in order) and rejected entries with a reason"""
    valid: List[str] = []
    invalid: List[InvalidURL] = []

    for candidate in candidates:
        if not isinstance(candidate, str):
            invalid.append(InvalidURL(url=candidate, reason="Must be a string"))
            continue

        url = candidate.strip()
        if not url:
            continue

        if is_valid_url(url):
            valid.append(url)
        else:
            invalid.append(InvalidURL(url=url, reason="Invalid URL format"))

    return list(dict.fromkeys(valid)), invalid


class URLSetService:
    """Validates URL lists pushed by the dashboard and persists them"""

    def __init__(self, url_store: ActiveURLStore):
        self.url_store = url_store

    def update(self, request: URLUpdateRequest, updated_from: Optional[str]) -> URLUpdateResponse:
        """
        Raises:
            ValidationError: no valid URL in the request
            StorageError: the URL file could not be written
        """
        valid, invalid = split_urls(request.urls)

        if not valid:
            raise ValidationError(
                "No valid URL provided.",
                extra={"invalid_urls": [item.model_dump() for item in invalid]},
            )

        url_set = self.url_store.save(valid, updated_from=updated_from or "unknown")
        logger.info("Active URL set replaced: %d URLs (%d rejected)", len(url_set.urls), len(invalid))

        response = URLUpdateResponse(urls_count=len(url_set.urls), updated_at=url_set.updated_at)
        if invalid:
            response.warnings = {"invalid_urls": invalid}
        return response
