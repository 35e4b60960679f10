"""
Headless browser infrastructure for codewall.

Rasterizes a local HTML page to PNG with headless Chrome. The browser is
started fresh for every screenshot and always exits before this returns.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional, Tuple

from ..domain.failure import ExternalToolError

logger = logging.getLogger(__name__)


class BrowserClient:
    """
    Headless Chrome screenshotter.

    Example:
        browser = BrowserClient()
        browser.screenshot(Path("page.html"), Path("out.png"), (1920, 1080))
    """

    def __init__(self, executable: str = "google-chrome", settle_seconds: float = 5):
        """
        Initialize BrowserClient.

        Args:
            executable: Chrome/Chromium binary
            settle_seconds: Virtual time given to the page (fonts, scripts)
                before the screenshot is taken
        """
        self.executable = executable
        self.settle_seconds = settle_seconds

    def command(self, page: Path, out_png: Path, window_size: Tuple[int, int]) -> list:
        width, height = window_size
        return [
            self.executable,
            '--headless',
            '--disable-gpu',
            '--hide-scrollbars',
            f'--window-size={width},{height}',
            f'--virtual-time-budget={int(self.settle_seconds * 1000)}',
            f'--screenshot={out_png}',
            page.resolve().as_uri(),
        ]

    def screenshot(
        self,
        page: Path,
        out_png: Path,
        window_size: Tuple[int, int],
        timeout: Optional[float] = None,
    ) -> Path:
        """
        Render `page` at `window_size` and save the viewport to `out_png`.

        Raises:
            ExternalToolError: if the browser is missing, fails, or writes no image
        """
        cmd = self.command(page, out_png, window_size)
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
        except FileNotFoundError as e:
            raise ExternalToolError(f"'{self.executable}' is not installed") from e
        except subprocess.TimeoutExpired as e:
            raise ExternalToolError(f"'{self.executable}' timed out rendering {page}") from e

        if result.returncode != 0:
            raise ExternalToolError(
                f"'{self.executable}' exited {result.returncode}: {result.stderr.strip()}"
            )
        if not out_png.exists() or out_png.stat().st_size == 0:
            raise ExternalToolError(f"'{self.executable}' did not write {out_png}")

        logger.debug(f"Saved screenshot of {page} to {out_png}")
        return out_png
