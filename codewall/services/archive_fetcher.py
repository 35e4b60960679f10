"""
Archive fetching for codewall.

Downloads a repository's source tarball into the run's scratch area.
"""

import logging

from ..domain.candidate import ArchiveHandle, RepositoryRef
from ..infra.github_client import GitHubClient
from ..infra.scratch import ScratchArea

logger = logging.getLogger(__name__)


class ArchiveFetcher:
    """
    Fetch one tarball per repository.

    No retries happen here; a transfer failure is fatal and the outer
    acquisition loop decides what a classification failure means.
    """

    def __init__(self, client: GitHubClient, scratch: ScratchArea):
        self.client = client
        self.scratch = scratch

    def fetch_archive(self, repo: RepositoryRef) -> ArchiveHandle:
        """
        Download the packaged source of `repo`.

        Raises:
            EmptyArchive: the repository has no archive to download
            RemoteServiceError: the API or the transfer failed
            ScratchAreaError: the archive could not be written
        """
        url = self.client.archive_link(repo.full_name)
        path = self.scratch.new_file(prefix='archive_', suffix='.tar.gz')
        size = self.client.download(url, path)
        logger.debug(f"Fetched {repo.full_name} archive ({size} bytes)")
        return ArchiveHandle(path=path, repo=repo)
