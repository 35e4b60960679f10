"""
Tar client infrastructure for codewall.

Wraps the external `tar` program. Process exit status is the only error
signal `tar` gives, so callers receive it verbatim and decide what a
failure means.
"""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from ..domain.failure import ExternalToolError

logger = logging.getLogger(__name__)

# Under the C locale tar escapes non-ASCII member names as octal, and the
# escaped names cannot be passed back for extraction.
TAR_LOCALE = "C.UTF-8"


@dataclass
class TarResult:
    """Outcome of one tar invocation."""
    returncode: int
    lines: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class TarClient:
    """
    Abstraction over `tar` for listing and selective extraction.

    Example:
        client = TarClient()
        result = client.list_members(Path("repo.tar.gz"))
        if result.ok:
            client.extract_member(Path("repo.tar.gz"), Path("/tmp/out"), result.lines[0])
    """

    def __init__(self, executable: str = "tar", timeout: Optional[float] = None):
        """
        Initialize TarClient.

        Args:
            executable: Name or path of the tar binary
            timeout: Command timeout in seconds (None waits indefinitely)
        """
        self.executable = executable
        self.timeout = timeout

    def _run(self, args: Sequence[str]) -> TarResult:
        cmd = [self.executable, *args]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                encoding='utf-8',
                errors='surrogateescape',
                env={**os.environ, 'LC_ALL': TAR_LOCALE},
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise ExternalToolError(f"'{self.executable}' is not installed") from e
        except subprocess.TimeoutExpired:
            logger.warning(f"tar command timed out: {' '.join(cmd)}")
            return TarResult(returncode=-1)

        if result.returncode != 0:
            logger.debug(f"tar exited {result.returncode}: {result.stderr.strip()}")
        return TarResult(returncode=result.returncode, lines=result.stdout.splitlines())

    def list_members(self, archive: Path) -> TarResult:
        """List every member path of a gzipped tarball, in archive order."""
        return self._run(['-tzf', str(archive)])

    def extract_member(self, archive: Path, dest: Path, member: str) -> TarResult:
        """Extract exactly one member of a gzipped tarball into dest."""
        return self._run(['-xzf', str(archive), '-C', str(dest), member])
