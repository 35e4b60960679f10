"""
Domain layer for codewall.

Contains pure domain objects with no I/O or side effects:
- RepositoryRef: A resolved repository (full name + numeric ID)
- ArchiveHandle: A downloaded source tarball inside the scratch area
- ExtractedFile: One catalog entry materialized on disk
- Candidate: A (repository, file) pair that passed usability checks
- AttemptBudget: Per-layer retry ceiling
- Failures: Retryable classification failures vs. fatal errors
"""

from .candidate import (
    RepositoryRef,
    ArchiveHandle,
    CatalogEntry,
    ExtractedFile,
    Candidate,
    UsabilityVerdict,
)
from .budget import AttemptBudget
from .failure import (
    FailureKind,
    AcquisitionError,
    ClassificationFailure,
    RepositoryNotFound,
    BadArchive,
    EmptyArchive,
    NoUsableFile,
    RenderUnusable,
    FatalError,
    RemoteServiceError,
    ScratchAreaError,
    ConfigurationError,
    ExternalToolError,
    ExhaustedSearch,
)

__all__ = [
    'RepositoryRef',
    'ArchiveHandle',
    'CatalogEntry',
    'ExtractedFile',
    'Candidate',
    'UsabilityVerdict',
    'AttemptBudget',
    'FailureKind',
    'AcquisitionError',
    'ClassificationFailure',
    'RepositoryNotFound',
    'BadArchive',
    'EmptyArchive',
    'NoUsableFile',
    'RenderUnusable',
    'FatalError',
    'RemoteServiceError',
    'ScratchAreaError',
    'ConfigurationError',
    'ExternalToolError',
    'ExhaustedSearch',
]
