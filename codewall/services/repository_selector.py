"""
Candidate repository selection for codewall.

Draws repository IDs uniformly from [0, max_repo_id) and resolves them
through the GitHub API until one exists.
"""

import logging
import random
from typing import Optional

from ..domain.budget import AttemptBudget
from ..domain.candidate import RepositoryRef
from ..domain.failure import RepositoryNotFound
from ..infra.github_client import GitHubClient

logger = logging.getLogger(__name__)


class RepositorySelector:
    """
    Pick a random public repository.

    Non-existent IDs (private, deleted, never allocated) are common, so the
    redraw budget is unbounded unless `max_not_found` is configured. Any
    other API failure propagates as RemoteServiceError.

    Example:
        selector = RepositorySelector(client, max_repo_id=889_000_000)
        repo = selector.select_repository()
    """

    def __init__(
        self,
        client: GitHubClient,
        max_repo_id: int,
        max_not_found: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize RepositorySelector.

        Args:
            client: GitHub client used to resolve IDs
            max_repo_id: Exclusive upper bound of the ID range
            max_not_found: Redraw ceiling (None for unbounded)
            rng: Random source (module-level random if None)
        """
        if max_repo_id < 1:
            raise ValueError(f"max_repo_id must be positive, got {max_repo_id}")
        self.client = client
        self.max_repo_id = max_repo_id
        self.max_not_found = max_not_found
        self.rng = rng or random.Random()

    def draw_id(self) -> int:
        """Draw one ID uniformly from [0, max_repo_id)."""
        return self.rng.randrange(self.max_repo_id)

    def select_repository(self) -> RepositoryRef:
        """
        Draw IDs until one resolves.

        Raises:
            RepositoryNotFound: only when a finite `max_not_found` is exhausted
            RemoteServiceError: on any API failure other than not-found
        """
        budget = AttemptBudget("repository resolution", self.max_not_found)
        last_failure = None

        for attempt in budget:
            repo_id = self.draw_id()
            repo = self.client.get_repository(repo_id)
            if repo is not None:
                logger.debug(f"Selected {repo.full_name} (#{repo.numeric_id})")
                return repo

            last_failure = RepositoryNotFound(repo_id)
            budget.record_failure()
            logger.info(f"Attempt #{attempt} failed: {last_failure}")

        raise last_failure
