import ipaddress
from dataclasses import dataclass
from typing import Mapping, Optional

from starlette.requests import Request


UNKNOWN_IP = "0.0.0.0"

# Checked in order, the socket peer comes last
IP_HEADERS = ("cf-connecting-ip", "x-forwarded-for", "x-real-ip")


def _valid_ip(value: str) -> Optional[str]:
    # X-Forwarded-For may hold a chain, the client is the first entry
    candidate = value.split(",")[0].strip()
    try:
        ipaddress.ip_address(candidate)
    except ValueError:
        return None
    return candidate


def get_real_ip(headers: Mapping[str, str], peer: Optional[str] = None) -> str:
    """First valid IP from proxy headers, then the peer address, else 0.0.0.0"""
    for header in IP_HEADERS:
        value = headers.get(header)
        if value:
            ip = _valid_ip(value)
            if ip:
                return ip
    if peer:
        ip = _valid_ip(peer)
        if ip:
            return ip
    return UNKNOWN_IP


@dataclass(frozen=True)
class VisitInfo:
    """Request metadata captured before the response is sent"""

    ip: str
    user_agent: str
    referer: str
    headers: Mapping[str, str]

    @classmethod
    def from_request(cls, request: Request) -> "VisitInfo":
        headers = {key.lower(): value for key, value in request.headers.items()}
        return cls(
            ip=get_real_ip(headers, request.client.host if request.client else None),
            user_agent=headers.get("user-agent", ""),
            referer=headers.get("referer", ""),
            headers=headers,
        )
