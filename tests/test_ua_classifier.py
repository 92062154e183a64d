"""
Tests for user-agent classification rules.
"""
import pytest

from rotator_app.services.ua_classifier import (
    Browser,
    Device,
    OperatingSystem,
    classify,
    classify_browser,
    classify_device,
    classify_os,
)


ANDROID_PHONE = "Mozilla/5.0 (Linux; Android 10) AppleWebKit Chrome/90 Mobile Safari"
ANDROID_TABLET = "Mozilla/5.0 (Linux; Android 10)"
WINDOWS_EDGE = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36 Edg/120.0"
)
MAC_SAFARI = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Safari/605.1.15"
)
GOOGLEBOT = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"


class TestClassifyBrowser:
    """Ordered browser rules"""

    def test_edge_checked_before_chrome(self):
        """Test edge checked before chrome"""
        assert classify_browser(WINDOWS_EDGE) == Browser.EDGE

    def test_chrome_checked_before_safari(self):
        """Test chrome checked before safari"""
        assert classify_browser(ANDROID_PHONE) == Browser.CHROME

    def test_safari(self):
        """Test Safari detection"""
        assert classify_browser(MAC_SAFARI) == Browser.SAFARI

    def test_firefox(self):
        """Test Firefox detection"""
        assert classify_browser("Mozilla/5.0 (X11; Linux x86_64; rv:120.0) Gecko/20100101 Firefox/120.0") == "Firefox"

    def test_internet_explorer(self):
        """Test Internet Explorer detection"""
        assert classify_browser("Mozilla/5.0 (Windows NT 6.1; Trident/7.0; rv:11.0) like Gecko") == Browser.INTERNET_EXPLORER

    @pytest.mark.parametrize("ua", [GOOGLEBOT, "SomeCrawler/1.0", "Baiduspider"])
    def test_bots_win_over_everything(self, ua):
        """Test bots win over everything"""
        assert classify_browser(ua) == Browser.BOT

    def test_unknown_and_empty(self):
        """Test unknown and empty"""
        assert classify_browser("curl/8.4.0") == Browser.OTHER
        assert classify_browser("") == Browser.OTHER


class TestClassifyDevice:
    """Device heuristics"""

    def test_android_phone_is_mobile(self):
        """Test android phone is mobile"""
        assert classify_device(ANDROID_PHONE) == "mobile"

    def test_android_without_mobile_token_is_tablet(self):
        """Test android without mobile token is tablet"""
        assert classify_device(ANDROID_TABLET) == "tablet"

    def test_iphone_is_mobile(self):
        """Test iphone is mobile"""
        assert classify_device("Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X)") == Device.MOBILE

    def test_ipad_is_tablet(self):
        """Test ipad is tablet"""
        assert classify_device("Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X)") == Device.TABLET

    def test_kindle_is_tablet(self):
        """Test kindle is tablet"""
        assert classify_device("Mozilla/5.0 (Linux; U; en-us; KFTT Build/IML74K) Silk/3.4") == Device.TABLET

    def test_bot(self):
        """Test that crawlers are classified as bots"""
        assert classify_device(GOOGLEBOT) == Device.BOT

    def test_desktop_default(self):
        """Test desktop default"""
        assert classify_device(WINDOWS_EDGE) == Device.DESKTOP
        assert classify_device("") == Device.DESKTOP


class TestClassifyOS:
    """Operating system rules"""

    def test_windows_10_before_windows(self):
        """Test windows 10 before windows"""
        assert classify_os(WINDOWS_EDGE) == OperatingSystem.WINDOWS_10
        assert classify_os("Mozilla/4.0 (compatible; MSIE 8.0; Windows NT 6.1)") == OperatingSystem.WINDOWS

    def test_macos(self):
        """Test macOS detection"""
        assert classify_os(MAC_SAFARI) == "macOS"

    def test_ios(self):
        """Test iOS detection"""
        assert classify_os("Mozilla/5.0 (iPhone; CPU iPhone OS 17_0)") == OperatingSystem.IOS

    def test_android_before_linux(self):
        """Test android before linux"""
        assert classify_os(ANDROID_PHONE) == OperatingSystem.ANDROID

    def test_linux(self):
        """Test Linux detection"""
        assert classify_os("Mozilla/5.0 (X11; Linux x86_64)") == OperatingSystem.LINUX

    def test_unmatched_is_empty_string(self):
        """Test unmatched is empty string"""
        assert classify_os("curl/8.4.0") == ""
        assert classify_os("curl/8.4.0") == OperatingSystem.UNKNOWN


def test_classify_returns_all_three():
    """Test classify returns all three"""
    info = classify(ANDROID_PHONE)

    assert info.device == "mobile"
    assert info.browser == "Chrome"
    assert info.os == "Android"


def test_case_insensitive():
    """Test case insensitive"""
    assert classify_browser(WINDOWS_EDGE.upper()) == Browser.EDGE
