"""
Scratch area infrastructure for codewall.

One run owns exactly one scratch directory. Every downloaded archive,
extracted file and generated HTML page lives under it, and it is removed
when the run ends, whatever the outcome.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from ..domain.failure import ScratchAreaError

logger = logging.getLogger(__name__)


class ScratchArea:
    """
    Scoped temporary directory for one run.

    Example:
        with ScratchArea() as scratch:
            archive = scratch.new_file(prefix="archive_", suffix=".tar.gz")
            ...
        # directory is gone here, even if the block raised
    """

    def __init__(self, prefix: str = "codewall-", parent: Optional[Path] = None):
        """
        Initialize ScratchArea.

        Args:
            prefix: Directory name prefix
            parent: Directory to create the scratch area in (system temp if None)
        """
        self.prefix = prefix
        self.parent = parent
        self._root: Optional[Path] = None

    @property
    def root(self) -> Path:
        if self._root is None:
            raise ScratchAreaError("Scratch area is not active")
        return self._root

    @property
    def active(self) -> bool:
        return self._root is not None

    def __enter__(self) -> 'ScratchArea':
        if self._root is not None:
            raise ScratchAreaError("Scratch area is already active")
        try:
            self._root = Path(tempfile.mkdtemp(
                prefix=self.prefix,
                dir=str(self.parent) if self.parent else None,
            ))
        except OSError as e:
            raise ScratchAreaError(f"Could not create scratch area: {e}") from e
        logger.debug(f"Created scratch area {self._root}")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def release(self) -> None:
        """Remove the scratch directory. Safe to call more than once."""
        if self._root is None:
            return
        root, self._root = self._root, None
        shutil.rmtree(root, ignore_errors=True)
        if root.exists():
            logger.warning(f"Could not fully remove scratch area {root}")
        else:
            logger.debug(f"Removed scratch area {root}")

    def new_file(self, prefix: str = "", suffix: str = "") -> Path:
        """Create a new empty file inside the scratch area and return its path."""
        try:
            fd, path = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=str(self.root))
            os.close(fd)
        except OSError as e:
            raise ScratchAreaError(f"Could not create scratch file: {e}") from e
        return Path(path)

    def subdir(self, name: str) -> Path:
        """Return (creating if needed) a named directory inside the scratch area."""
        path = self.root / name
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ScratchAreaError(f"Could not create {path}: {e}") from e
        return path
