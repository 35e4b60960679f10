"""
Failure kinds for the acquisition pipeline.

Two families, never mixed:

- ClassificationFailure: "this repository/archive/file is unusable".
  Expected and frequent; the enclosing retry layer logs it and moves on.
- FatalError: the remote service, the scratch area, an external tool or
  the configuration is broken. Never retried; terminates the run.

Retry loops catch ClassificationFailure only.
"""

from enum import Enum
from typing import Optional


class FailureKind(Enum):
    """Explicit kind carried by every acquisition failure."""
    NOT_FOUND = "not_found"
    BAD_ARCHIVE = "bad_archive"
    EMPTY_ARCHIVE = "empty_archive"
    NO_USABLE_FILE = "no_usable_file"
    RENDER_UNUSABLE = "render_unusable"
    REMOTE_SERVICE = "remote_service"
    SCRATCH_AREA = "scratch_area"
    CONFIGURATION = "configuration"
    EXTERNAL_TOOL = "external_tool"
    EXHAUSTED_SEARCH = "exhausted_search"


class AcquisitionError(Exception):
    """Base class for pipeline failures."""
    kind: FailureKind
    retryable: bool = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ClassificationFailure(AcquisitionError):
    """A candidate turned out to be unusable. Retry with a fresh one."""
    retryable = True


class RepositoryNotFound(ClassificationFailure):
    """The drawn repository ID is private, deleted or never allocated."""
    kind = FailureKind.NOT_FOUND

    def __init__(self, repo_id: int):
        super().__init__(f"Repository #{repo_id} not found")
        self.repo_id = repo_id


class BadArchive(ClassificationFailure):
    """The archive could not be listed or extracted."""
    kind = FailureKind.BAD_ARCHIVE

    def __init__(self, message: str = "Bad tarball."):
        super().__init__(message)


class EmptyArchive(ClassificationFailure):
    """The archive listed fine but holds no regular files."""
    kind = FailureKind.EMPTY_ARCHIVE

    def __init__(self, message: str = "No files in tarball."):
        super().__init__(message)


class NoUsableFile(ClassificationFailure):
    """The sampler ran out of attempts without finding a usable file."""
    kind = FailureKind.NO_USABLE_FILE

    def __init__(self, message: str = "Couldn't find a usable file in tarball."):
        super().__init__(message)


class RenderUnusable(ClassificationFailure):
    """The render stage could not produce highlighted output for a file."""
    kind = FailureKind.RENDER_UNUSABLE


class FatalError(AcquisitionError):
    """An unrecoverable failure. Propagates to the top of the run."""
    retryable = False


class RemoteServiceError(FatalError):
    """The repository API or archive transfer failed (other than not-found)."""
    kind = FailureKind.REMOTE_SERVICE

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ScratchAreaError(FatalError):
    """The run's scratch directory could not be created or written."""
    kind = FailureKind.SCRATCH_AREA


class ConfigurationError(FatalError):
    """Required configuration (e.g. the access token) is missing or invalid."""
    kind = FailureKind.CONFIGURATION


class ExternalToolError(FatalError):
    """A required external program is missing or misbehaved."""
    kind = FailureKind.EXTERNAL_TOOL


class ExhaustedSearch(FatalError):
    """The outer attempt budget ran out before a usable candidate was found."""
    kind = FailureKind.EXHAUSTED_SEARCH

    def __init__(self, attempts: int, last_failure: Optional[ClassificationFailure] = None):
        message = f"No usable candidate found after {attempts} attempts"
        if last_failure is not None:
            message += f" (last failure: {last_failure})"
        super().__init__(message)
        self.attempts = attempts
        self.last_failure = last_failure
