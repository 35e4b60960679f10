"""
Screenshot stage for codewall.

Writes a rendered page into the scratch area and rasterizes it at the
screen's resolution, scrolled to a random position.
"""

import logging
import random
from pathlib import Path
from typing import Optional, Tuple

from ..domain.failure import ScratchAreaError
from ..infra.browser_client import BrowserClient
from ..infra.display_client import DisplayClient
from ..infra.scratch import ScratchArea

logger = logging.getLogger(__name__)

DEFAULT_RESOLUTION = (1920, 1080)

# Scrolls to a random Y in [0, max(page_height / 2 - screen_height, 0)]
# once web fonts have loaded.
SCROLL_SCRIPT = """<script>
document.fonts.ready.then(function () {{
  var limit = Math.max(document.body.scrollHeight / 2 - window.innerHeight, 0);
  window.scrollTo(0, Math.floor(limit * {fraction:.6f}));
}});
</script>
"""


def inject_scroll_script(page_html: str, fraction: float) -> str:
    script = SCROLL_SCRIPT.format(fraction=fraction)
    if '</body>' in page_html:
        return page_html.replace('</body>', script + '</body>', 1)
    return page_html + script


class ScreenshotService:
    """Rasterize code view pages to PNG."""

    def __init__(
        self,
        browser: BrowserClient,
        display: DisplayClient,
        default_resolution: Tuple[int, int] = DEFAULT_RESOLUTION,
        rng: Optional[random.Random] = None,
    ):
        self.browser = browser
        self.display = display
        self.default_resolution = tuple(default_resolution)
        self.rng = rng or random.Random()

    def resolution(self) -> Tuple[int, int]:
        """Screen resolution, or the configured default when no display answers."""
        resolution = self.display.screen_resolution()
        if resolution is None:
            logger.warning(
                f"Could not detect screen resolution, using "
                f"{self.default_resolution[0]}x{self.default_resolution[1]}"
            )
            return self.default_resolution
        return resolution

    def write_page(self, page_html: str, scratch: ScratchArea) -> Path:
        page = scratch.new_file(prefix='code_view', suffix='.html')
        try:
            page.write_text(inject_scroll_script(page_html, self.rng.random()), encoding='utf-8')
        except OSError as e:
            raise ScratchAreaError(f"Could not write {page}: {e}") from e
        return page

    def capture(self, page_html: str, out_png: Path, scratch: ScratchArea) -> Path:
        """
        Save a screenshot of `page_html` to `out_png`.

        Raises:
            ExternalToolError: the browser could not produce the image
        """
        page = self.write_page(page_html, scratch)
        width, height = self.resolution()
        logger.debug(f"Capturing {page} at {width}x{height}")
        return self.browser.screenshot(page, out_png, (width, height))
