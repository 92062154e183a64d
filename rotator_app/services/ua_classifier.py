"""
User-agent classification.

Each category is an ordered table of (predicate, result) pairs evaluated on
the lower-cased user agent. The first matching predicate wins, so order is
significant (Edge must be tested before Chrome, Windows 10 before Windows).
"""

from enum import Enum
from typing import Callable, NamedTuple, Sequence, Tuple, TypeVar


class Browser(str, Enum):
    BOT = "Bot"
    EDGE = "Edge"
    CHROME = "Chrome"
    FIREFOX = "Firefox"
    SAFARI = "Safari"
    INTERNET_EXPLORER = "Internet Explorer"
    OTHER = "Other"


class Device(str, Enum):
    BOT = "bot"
    MOBILE = "mobile"
    TABLET = "tablet"
    DESKTOP = "desktop"


class OperatingSystem(str, Enum):
    WINDOWS_10 = "Windows 10"
    WINDOWS = "Windows"
    MACOS = "macOS"
    IOS = "iOS"
    ANDROID = "Android"
    LINUX = "Linux"
    UNKNOWN = ""


class UserAgentInfo(NamedTuple):
    browser: Browser
    device: Device
    os: OperatingSystem


Predicate = Callable[[str], bool]
T = TypeVar("T")

BOT_KEYWORDS = ("bot", "crawler", "spider")
MOBILE_KEYWORDS = (
    "iphone", "android", "mobile", "phone", "ipod",
    "blackberry", "windows phone", "opera mini", "opera mobi",
)
TABLET_KEYWORDS = ("ipad", "tablet", "kindle", "silk", "playbook")


def contains(*keywords: str) -> Predicate:
    """Predicate: any of the keywords occurs in the user agent"""
    return lambda ua: any(keyword in ua for keyword in keywords)


def contains_all(*keywords: str) -> Predicate:
    return lambda ua: all(keyword in ua for keyword in keywords)


def _android_tablet(ua: str) -> bool:
    # Android tablets omit the "mobile" token
    return "android" in ua and "mobile" not in ua


BROWSER_RULES: Sequence[Tuple[Predicate, Browser]] = (
    (contains(*BOT_KEYWORDS), Browser.BOT),
    (contains_all("chrome", "edg"), Browser.EDGE),
    (contains("chrome"), Browser.CHROME),
    (contains("firefox"), Browser.FIREFOX),
    (contains("safari"), Browser.SAFARI),
    (contains("msie", "trident"), Browser.INTERNET_EXPLORER),
)

DEVICE_RULES: Sequence[Tuple[Predicate, Device]] = (
    (contains(*BOT_KEYWORDS), Device.BOT),
    (_android_tablet, Device.TABLET),
    (contains(*MOBILE_KEYWORDS), Device.MOBILE),
    (contains(*TABLET_KEYWORDS), Device.TABLET),
)

OS_RULES: Sequence[Tuple[Predicate, OperatingSystem]] = (
    (contains("windows nt 10"), OperatingSystem.WINDOWS_10),
    (contains("windows"), OperatingSystem.WINDOWS),
    (contains("mac os x"), OperatingSystem.MACOS),
    (contains("iphone", "ipad"), OperatingSystem.IOS),
    (contains("android"), OperatingSystem.ANDROID),
    (contains("linux"), OperatingSystem.LINUX),
)


def _first_match(rules: Sequence[Tuple[Predicate, T]], user_agent: str, default: T) -> T:
    ua = (user_agent or "").lower()
    for predicate, result in rules:
        if predicate(ua):
            return result
    return default


def classify_browser(user_agent: str) -> Browser:
    return _first_match(BROWSER_RULES, user_agent, Browser.OTHER)


def classify_device(user_agent: str) -> Device:
    return _first_match(DEVICE_RULES, user_agent, Device.DESKTOP)


def classify_os(user_agent: str) -> OperatingSystem:
    """OperatingSystem.UNKNOWN (empty string) when nothing matches"""
    return _first_match(OS_RULES, user_agent, OperatingSystem.UNKNOWN)


def classify(user_agent: str) -> UserAgentInfo:
    return UserAgentInfo(
        browser=classify_browser(user_agent),
        device=classify_device(user_agent),
        os=classify_os(user_agent),
    )
