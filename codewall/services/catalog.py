"""
File catalog extraction for codewall.

Lists the regular files in an archive without unpacking it.
"""

import logging
from typing import List

from ..domain.candidate import ArchiveHandle, CatalogEntry
from ..domain.failure import BadArchive, EmptyArchive
from ..infra.tar_client import TarClient

logger = logging.getLogger(__name__)


def is_regular_entry(line: str) -> bool:
    """Tar lists directories with a trailing separator; everything else is a file."""
    return bool(line) and not line.endswith('/')


class CatalogExtractor:
    """Build the catalog of file entries for one archive."""

    def __init__(self, tar: TarClient):
        self.tar = tar

    def list_entries(self, archive: ArchiveHandle) -> List[CatalogEntry]:
        """
        List the regular files of an archive, in the order tar emits them.

        Raises:
            BadArchive: the archive is corrupt, truncated or not a gzipped tarball
            EmptyArchive: the archive holds no regular files
        """
        result = self.tar.list_members(archive.path)
        if not result.ok:
            raise BadArchive()

        entries = [line for line in result.lines if is_regular_entry(line)]
        if not entries:
            raise EmptyArchive()

        logger.debug(f"{archive.repo.full_name}: {len(entries)} files in archive")
        return entries
