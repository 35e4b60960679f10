"""
MAX_REPO_ID estimation for codewall.

The repository selector draws IDs below a configured ceiling. New
repositories are created every day, so the ceiling has to be refreshed
from time to time. This probes upward from a known-good ID: each window
of `step` IDs is sampled `probes` times, and the first window where no
probe resolves is taken as the end of the allocated ID space.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Generator, List, Optional

from ..infra.github_client import GitHubClient

logger = logging.getLogger(__name__)

DEFAULT_STEP = 1_000_000
DEFAULT_PROBES = 20
DEFAULT_MAX_WINDOWS = 100


@dataclass
class EstimateResult:
    """Outcome of one estimation run."""
    start: int
    estimate: int
    windows_probed: int = 0
    requests: int = 0
    found_ids: List[int] = field(default_factory=list)
    complete: bool = True


class MaxRepoIdEstimator:
    """
    Estimate the upper end of the allocated repository ID space.

    Example:
        estimator = MaxRepoIdEstimator(client)
        for message in estimator.estimate(start=889_000_000):
            print(message)
        print(estimator.last_result.estimate)
    """

    def __init__(
        self,
        client: GitHubClient,
        step: int = DEFAULT_STEP,
        probes: int = DEFAULT_PROBES,
        max_windows: int = DEFAULT_MAX_WINDOWS,
        rng: Optional[random.Random] = None,
    ):
        if step < 1 or probes < 1 or max_windows < 1:
            raise ValueError("step, probes and max_windows must all be positive")
        self.client = client
        self.step = step
        self.probes = probes
        self.max_windows = max_windows
        self.rng = rng or random.Random()
        self.last_result: Optional[EstimateResult] = None

    def probe_window(self, low: int, result: EstimateResult) -> Optional[int]:
        """Return the first ID in [low, low + step) that resolves, if any."""
        for _ in range(self.probes):
            repo_id = low + self.rng.randrange(self.step)
            result.requests += 1
            if self.client.get_repository(repo_id) is not None:
                return repo_id
        return None

    def estimate(self, start: int) -> Generator[str, None, EstimateResult]:
        """
        Probe upward from `start`.

        Yields progress messages, returns EstimateResult. The estimate is
        the lower bound of the first window with no live repository.
        """
        result = EstimateResult(start=start, estimate=start)
        self.last_result = result
        low = start

        for _ in range(self.max_windows):
            yield f"Probing IDs {low:,}..{low + self.step - 1:,}"
            result.windows_probed += 1
            found = self.probe_window(low, result)
            if found is None:
                result.estimate = low
                logger.info(f"No repositories found at or above {low:,}")
                return result
            result.found_ids.append(found)
            logger.debug(f"Repository #{found} exists")
            low += self.step

        result.estimate = low
        result.complete = False
        logger.warning(f"Stopped after {self.max_windows} windows; IDs still resolve at {low:,}")
        return result
