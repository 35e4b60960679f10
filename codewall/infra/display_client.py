"""
Screen geometry query for codewall.

Reads the current display resolution from `xrandr`.
"""

import logging
import re
import subprocess
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

CURRENT_RESOLUTION_RE = re.compile(r'current (\d+) x (\d+)')


def parse_xrandr_resolution(output: str) -> Optional[Tuple[int, int]]:
    """Extract (width, height) from `xrandr` output, or None if absent."""
    match = CURRENT_RESOLUTION_RE.search(output)
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


class DisplayClient:
    """Query the screen resolution of the machine running codewall."""

    def __init__(self, executable: str = "xrandr"):
        self.executable = executable

    def screen_resolution(self) -> Optional[Tuple[int, int]]:
        """
        Get the current screen resolution.

        Returns:
            (width, height), or None when no display can be queried
        """
        try:
            result = subprocess.run(
                [self.executable],
                capture_output=True,
                text=True,
                timeout=10,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            logger.debug(f"{self.executable} unavailable: {e}")
            return None

        if result.returncode != 0:
            logger.debug(f"{self.executable} exited {result.returncode}: {result.stderr.strip()}")
            return None
        return parse_xrandr_resolution(result.stdout)
