"""
codewall - Desktop wallpaper from a random file of a random GitHub repository.

codewall draws a random repository ID, downloads that repository's source
tarball, picks a random text file out of it, highlights it, and takes a
screenshot of the result sized to your screen.

Quick Start:
    import codewall

    service = codewall.WallpaperService()
    result = service.generate()
    print(result.path)

    # Only the acquisition pipeline
    from codewall.infra import ScratchArea

    with ScratchArea() as scratch:
        orchestrator = service.build_orchestrator(scratch)
        candidate = orchestrator.acquire_candidate()
        print(candidate.repo.full_name, candidate.file.source_entry)

Domain Objects:
    RepositoryRef - A resolved repository (full name, numeric ID)
    Candidate - A repository and one usable file from it
    AttemptBudget - Per-layer retry ceiling

Failures:
    ClassificationFailure - Retryable (not found, bad/empty archive,
                            no usable file, render unusable)
    FatalError - Never retried (remote service, scratch area,
                 configuration, external tool, exhausted search)
"""

__version__ = "0.1.0"

from .domain import (
    RepositoryRef,
    ArchiveHandle,
    ExtractedFile,
    Candidate,
    AttemptBudget,
    ClassificationFailure,
    FatalError,
    ExhaustedSearch,
)

from .services import (
    AcquisitionOrchestrator,
    RenderService,
    WallpaperService,
    WallpaperResult,
)

from .config import load_config, save_config

__all__ = [
    "__version__",
    "RepositoryRef",
    "ArchiveHandle",
    "ExtractedFile",
    "Candidate",
    "AttemptBudget",
    "ClassificationFailure",
    "FatalError",
    "ExhaustedSearch",
    "AcquisitionOrchestrator",
    "RenderService",
    "WallpaperService",
    "WallpaperResult",
    "load_config",
    "save_config",
]
