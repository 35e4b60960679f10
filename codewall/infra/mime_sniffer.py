"""
Content-type sniffing for codewall.

Uses the external `file` program to detect a MIME type from file contents.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from ..domain.failure import ExternalToolError

logger = logging.getLogger(__name__)


class MimeSniffer:
    """
    Detect MIME types with `file --brief --mime-type`.

    Example:
        sniffer = MimeSniffer()
        sniffer.mime_type(Path("setup.py"))  # "text/x-script.python"
    """

    def __init__(self, executable: str = "file", timeout: Optional[float] = None):
        self.executable = executable
        self.timeout = timeout

    def mime_type(self, path: Path) -> str:
        """
        Return the MIME type of a file, e.g. "text/plain".

        Raises:
            ExternalToolError: if `file` is missing or cannot read the path
        """
        cmd = [self.executable, '--brief', '--mime-type', str(path)]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise ExternalToolError(f"'{self.executable}' is not installed") from e
        except subprocess.TimeoutExpired as e:
            raise ExternalToolError(f"'{self.executable}' timed out on {path}") from e

        if result.returncode != 0:
            raise ExternalToolError(
                f"'{self.executable}' failed on {path}: {result.stderr.strip()}"
            )
        return result.stdout.strip()

    @staticmethod
    def top_level(mime_type: str) -> str:
        """Top-level category of a MIME type ("text/x-c; charset=..." -> "text")."""
        return mime_type.split(';', 1)[0].split('/', 1)[0].strip().lower()
