"""
File sampling for codewall.

Draws random entries from an archive's catalog, extracts only the drawn
entry, and keeps the first one that passes the usability filter.
"""

import logging
import random
from typing import List, Optional

from ..domain.budget import AttemptBudget
from ..domain.candidate import ArchiveHandle, CatalogEntry, ExtractedFile
from ..domain.failure import BadArchive, NoUsableFile
from ..infra.scratch import ScratchArea
from ..infra.tar_client import TarClient
from .usability import UsabilityFilter

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_ATTEMPTS = 5


class FileSampler:
    """
    Pick a usable file out of one archive.

    Entries are drawn with replacement, so the same entry may be tried
    twice. A failed selective extraction means the archive itself is bad
    and raises BadArchive at once instead of using up an attempt.

    Example:
        sampler = FileSampler(tar, usability, scratch)
        extracted = sampler.sample_file(archive, catalog)
    """

    def __init__(
        self,
        tar: TarClient,
        usability: UsabilityFilter,
        scratch: ScratchArea,
        max_attempts: int = DEFAULT_SAMPLE_ATTEMPTS,
        rng: Optional[random.Random] = None,
    ):
        self.tar = tar
        self.usability = usability
        self.scratch = scratch
        self.max_attempts = max_attempts
        self.rng = rng or random.Random()

    def extract(self, archive: ArchiveHandle, entry: CatalogEntry) -> ExtractedFile:
        """
        Materialize exactly one catalog entry.

        A symlink or other special entry extracts fine but is not a
        regular file; the usability filter rejects it as a draw.

        Raises:
            BadArchive: tar could not extract the entry
        """
        dest = self.scratch.subdir('files')
        result = self.tar.extract_member(archive.path, dest, entry)
        if not result.ok:
            raise BadArchive()
        path = dest / entry
        return ExtractedFile(path=path, source_entry=entry)

    def sample_file(self, archive: ArchiveHandle, catalog: List[CatalogEntry]) -> ExtractedFile:
        """
        Return the first usable file among up to `max_attempts` random draws.

        Raises:
            BadArchive: selective extraction failed
            NoUsableFile: every draw was rejected by the usability filter
        """
        budget = AttemptBudget("file sampling", self.max_attempts)

        for attempt in budget:
            entry = self.rng.choice(catalog)
            extracted = self.extract(archive, entry)
            verdict = self.usability.is_usable(extracted.path)
            if verdict.usable:
                logger.debug(f"Picked {entry} from {archive.repo.full_name}")
                return extracted

            budget.record_failure()
            logger.warning(f"Attempt #{attempt} failed: {verdict.describe()}")

        raise NoUsableFile()
