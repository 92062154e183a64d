import re
import secrets
from typing import Optional


BEARER_PATTERN = re.compile(r"^Bearer\s+(.+)$", re.IGNORECASE)


def verify_bearer_token(authorization: Optional[str], expected: str) -> bool:
    """Check an "Authorization: Bearer <token>" header in constant time"""
    if not authorization or not expected:
        return False

    match = BEARER_PATTERN.match(authorization.strip())
    if not match:
        return False

    token = match.group(1).strip()
    return secrets.compare_digest(token.encode("utf-8"), expected.encode("utf-8"))
