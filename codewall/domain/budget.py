"""
Attempt budgets for the acquisition pipeline.

Each retry layer owns its own budget:
- repository resolution: unbounded (not-found IDs are common)
- file sampling within one archive: 5
- whole-candidate acquisition across archives: 100

The ceilings are independent; a burst of failures at one layer never
drains another layer's budget.
"""

from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass
class AttemptBudget:
    """
    A bounded (or unbounded) counter of failed attempts.

    Iterating yields the 1-based number of the attempt about to be made,
    for as long as the budget is not exhausted. Callers record each
    failure; a successful attempt simply leaves the loop.

    Example:
        budget = AttemptBudget("sampling", ceiling=5)
        for attempt in budget:
            if try_something():
                return result
            budget.record_failure()
        raise NoUsableFile(...)
    """
    name: str
    ceiling: Optional[int] = None
    failures: int = 0

    def __post_init__(self):
        if self.ceiling is not None and self.ceiling < 1:
            raise ValueError(f"{self.name} budget ceiling must be >= 1, got {self.ceiling}")

    @property
    def unbounded(self) -> bool:
        return self.ceiling is None

    @property
    def exhausted(self) -> bool:
        return self.ceiling is not None and self.failures >= self.ceiling

    @property
    def remaining(self) -> Optional[int]:
        """Failures still allowed, or None when unbounded."""
        if self.ceiling is None:
            return None
        return max(0, self.ceiling - self.failures)

    def record_failure(self) -> int:
        """Consume one attempt. Returns the number of failures so far."""
        self.failures += 1
        return self.failures

    def __iter__(self) -> Iterator[int]:
        while not self.exhausted:
            yield self.failures + 1
