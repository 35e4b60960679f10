"""
Tests for the screenshot stage and its external clients.
"""

import random
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from codewall.domain import ExternalToolError
from codewall.infra.browser_client import BrowserClient
from codewall.infra.display_client import DisplayClient, parse_xrandr_resolution
from codewall.services.screenshot_service import ScreenshotService, inject_scroll_script

XRANDR_OUTPUT = """Screen 0: minimum 320 x 200, current 2560 x 1440, maximum 16384 x 16384
DP-1 connected primary 2560x1440+0+0 (normal left inverted right x axis y axis) 597mm x 336mm
"""

PAGE = "<html><head><title>code view</title></head><body><pre>x</pre></body></html>"


class TestDisplayClient:
    """Tests for xrandr parsing."""

    def test_parse(self):
        assert parse_xrandr_resolution(XRANDR_OUTPUT) == (2560, 1440)

    def test_parse_garbage(self):
        assert parse_xrandr_resolution("Can't open display") is None

    def test_no_xrandr(self):
        assert DisplayClient(executable='definitely-not-xrandr').screen_resolution() is None

    def test_xrandr_failure(self):
        with patch('subprocess.run', return_value=Mock(returncode=1, stdout='', stderr="Can't open display")):
            assert DisplayClient().screen_resolution() is None

    def test_xrandr_success(self):
        with patch('subprocess.run', return_value=Mock(returncode=0, stdout=XRANDR_OUTPUT, stderr='')):
            assert DisplayClient().screen_resolution() == (2560, 1440)


class TestBrowserClient:
    """Tests for the headless Chrome wrapper."""

    def test_command(self, tmp_path):
        page = tmp_path / 'page.html'
        cmd = BrowserClient(executable='chromium', settle_seconds=2).command(page, tmp_path / 'o.png', (800, 600))

        assert cmd[0] == 'chromium'
        assert '--headless' in cmd
        assert '--hide-scrollbars' in cmd
        assert '--window-size=800,600' in cmd
        assert '--virtual-time-budget=2000' in cmd
        assert f'--screenshot={tmp_path / "o.png"}' in cmd
        assert cmd[-1] == page.resolve().as_uri()

    def test_screenshot_success(self, tmp_path):
        out = tmp_path / 'o.png'

        def fake_run(cmd, **kwargs):
            out.write_bytes(b'\x89PNG')
            return Mock(returncode=0, stdout='', stderr='')

        with patch('subprocess.run', side_effect=fake_run):
            assert BrowserClient().screenshot(tmp_path / 'p.html', out, (10, 10)) == out

    def test_no_image_written(self, tmp_path):
        with patch('subprocess.run', return_value=Mock(returncode=0, stdout='', stderr='')):
            with pytest.raises(ExternalToolError, match='did not write'):
                BrowserClient().screenshot(tmp_path / 'p.html', tmp_path / 'o.png', (10, 10))

    def test_browser_failure(self, tmp_path):
        with patch('subprocess.run', return_value=Mock(returncode=1, stdout='', stderr='crash')):
            with pytest.raises(ExternalToolError, match='crash'):
                BrowserClient().screenshot(tmp_path / 'p.html', tmp_path / 'o.png', (10, 10))

    def test_missing_browser(self, tmp_path):
        with pytest.raises(ExternalToolError, match='not installed'):
            BrowserClient(executable='definitely-not-chrome').screenshot(
                tmp_path / 'p.html', tmp_path / 'o.png', (10, 10))


class TestScreenshotService:
    """Tests for ScreenshotService."""

    def test_inject_scroll_script(self):
        html = inject_scroll_script(PAGE, 0.25)
        assert 'window.scrollTo(0, Math.floor(limit * 0.250000))' in html
        assert html.index('<script>') < html.index('</body>')

    def test_inject_without_body(self):
        assert inject_scroll_script('<pre>x</pre>', 0.5).startswith('<pre>x</pre><script>')

    def test_capture_uses_screen_resolution(self, scratch, tmp_path):
        browser = Mock()
        display = Mock()
        display.screen_resolution.return_value = (2560, 1440)
        service = ScreenshotService(browser, display, rng=random.Random(0))

        service.capture(PAGE, tmp_path / 'out.png', scratch)

        page, out, size = browser.screenshot.call_args.args
        assert size == (2560, 1440)
        assert out == tmp_path / 'out.png'
        assert page.parent == scratch.root
        assert 'window.scrollTo' in page.read_text()

    def test_capture_falls_back_to_default_resolution(self, scratch, tmp_path, caplog):
        browser = Mock()
        display = Mock()
        display.screen_resolution.return_value = None
        service = ScreenshotService(browser, display, default_resolution=(1280, 720))

        with caplog.at_level('WARNING'):
            service.capture(PAGE, tmp_path / 'out.png', scratch)

        assert browser.screenshot.call_args.args[2] == (1280, 720)
        assert 'Could not detect screen resolution' in caplog.text
