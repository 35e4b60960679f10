"""
Candidate domain objects for codewall.

A run narrows the universe of public repositories down to one file:

    RepositoryRef -> ArchiveHandle -> [CatalogEntry] -> ExtractedFile -> Candidate

All of these are immutable once created.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

# A relative path naming one regular file inside an archive.
CatalogEntry = str


@dataclass(frozen=True)
class RepositoryRef:
    """A repository resolved from its numeric ID."""
    full_name: str
    numeric_id: int

    @property
    def owner(self) -> str:
        return self.full_name.split('/', 1)[0]

    @property
    def name(self) -> str:
        return self.full_name.split('/', 1)[-1]

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'RepositoryRef':
        """Create from a GitHub `repositories/{id}` response."""
        return cls(full_name=data['full_name'], numeric_id=int(data['id']))

    def to_dict(self) -> Dict[str, Any]:
        return {'full_name': self.full_name, 'id': self.numeric_id}

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class ArchiveHandle:
    """A downloaded source tarball owned by the current run's scratch area."""
    path: Path
    repo: RepositoryRef


@dataclass(frozen=True)
class ExtractedFile:
    """A single catalog entry materialized on disk."""
    path: Path
    source_entry: CatalogEntry

    @property
    def basename(self) -> str:
        return Path(self.source_entry).name


@dataclass(frozen=True)
class Candidate:
    """
    A (repository, file) pair that passed the usability filter.

    This is the unit handed to the render stage.
    """
    repo: RepositoryRef
    file: ExtractedFile

    def to_dict(self) -> Dict[str, Any]:
        return {
            'repo': self.repo.full_name,
            'repo_id': self.repo.numeric_id,
            'entry': self.file.source_entry,
            'path': str(self.file.path),
        }


@dataclass(frozen=True)
class UsabilityVerdict:
    """
    Result of classifying one extracted file.

    `reason` is set only when the file was rejected.
    """
    usable: bool
    reason: Optional[str] = None

    BINARY = "binary"
    BORING = "too boring"

    @classmethod
    def accept(cls) -> 'UsabilityVerdict':
        return cls(usable=True)

    @classmethod
    def reject(cls, reason: str) -> 'UsabilityVerdict':
        return cls(usable=False, reason=reason)

    def describe(self) -> str:
        """Human-readable form used in attempt log lines."""
        if self.usable:
            return "File is usable"
        return f"File is {self.reason}"

    def __bool__(self) -> bool:
        return self.usable
