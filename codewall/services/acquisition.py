"""
Acquisition orchestration for codewall.

Composes repository selection, archive fetching, catalog listing and file
sampling into one bounded retry loop that yields a Candidate.

Retry layers:

    select_repository()          unbounded redraws on not-found
    fetch -> list -> sample      sampler retries up to 5 draws per archive
    whole iteration              up to 100 attempts, each with a new repository

Any classification failure inside an iteration discards that repository
and its archive entirely. Fatal errors are never caught here.
"""

import logging
from typing import Callable, Optional, Tuple, TypeVar

from ..domain.budget import AttemptBudget
from ..domain.candidate import Candidate
from ..domain.failure import ClassificationFailure, ExhaustedSearch
from .archive_fetcher import ArchiveFetcher
from .catalog import CatalogExtractor
from .file_sampler import FileSampler
from .repository_selector import RepositorySelector

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 100

T = TypeVar('T')


class AcquisitionOrchestrator:
    """
    Find one usable (repository, file) pair.

    `acquire()` optionally takes an `accept` callback run on every candidate
    (the render stage). If it raises a ClassificationFailure the candidate
    is thrown away and the attempt counts against the same outer budget, so
    a single ceiling covers everything from repository selection through
    rendering.

    Example:
        orchestrator = AcquisitionOrchestrator(selector, fetcher, catalog, sampler)
        candidate = orchestrator.acquire_candidate()
    """

    def __init__(
        self,
        selector: RepositorySelector,
        fetcher: ArchiveFetcher,
        catalog: CatalogExtractor,
        sampler: FileSampler,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self.selector = selector
        self.fetcher = fetcher
        self.catalog = catalog
        self.sampler = sampler
        self.max_attempts = max_attempts
        self.last_budget: Optional[AttemptBudget] = None

    def _attempt(self) -> Candidate:
        repo = self.selector.select_repository()
        archive = self.fetcher.fetch_archive(repo)
        entries = self.catalog.list_entries(archive)
        extracted = self.sampler.sample_file(archive, entries)
        return Candidate(repo=repo, file=extracted)

    def acquire(
        self,
        accept: Optional[Callable[[Candidate], T]] = None,
    ) -> Tuple[Candidate, Optional[T]]:
        """
        Run outer attempts until a candidate is found (and accepted).

        Args:
            accept: Called with each candidate; its return value is passed
                back to the caller. Raising ClassificationFailure rejects
                the candidate.

        Returns:
            (candidate, accept's return value or None)

        Raises:
            ExhaustedSearch: after `max_attempts` failed attempts
            FatalError: immediately, from any stage
        """
        budget = AttemptBudget("acquisition", self.max_attempts)
        self.last_budget = budget
        last_failure: Optional[ClassificationFailure] = None

        for attempt in budget:
            try:
                candidate = self._attempt()
                accepted = accept(candidate) if accept is not None else None
            except ClassificationFailure as e:
                last_failure = e
                budget.record_failure()
                logger.warning(f"Attempt #{attempt} failed: {e}")
                continue

            logger.info(
                f"Found {candidate.file.source_entry} in {candidate.repo.full_name} "
                f"on attempt #{attempt}"
            )
            return candidate, accepted

        raise ExhaustedSearch(budget.failures, last_failure)

    def acquire_candidate(self) -> Candidate:
        """Find a candidate without a render check."""
        candidate, _ = self.acquire()
        return candidate
