"""
Shared test doubles for codewall tests.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest

from codewall.domain import ArchiveHandle, RepositoryRef
from codewall.infra import ScratchArea
from codewall.infra.tar_client import TarResult


class FakeSniffer:
    """MIME sniffer keyed on file name; anything unknown is text/plain."""

    def __init__(self, types: Optional[Dict[str, str]] = None):
        self.types = types or {}
        self.calls: List[Path] = []

    def mime_type(self, path: Path) -> str:
        self.calls.append(Path(path))
        return self.types.get(Path(path).name, 'text/plain; charset=us-ascii')


class FakeTar:
    """
    Tar client backed by an in-memory {entry: content} mapping.

    `list_code` / `extract_code` force non-zero exit statuses.
    """

    def __init__(self, files: Dict[str, str], extra_lines: Iterable[str] = (),
                 list_code: int = 0, extract_code: int = 0):
        self.files = files
        self.extra_lines = list(extra_lines)
        self.list_code = list_code
        self.extract_code = extract_code
        self.list_calls = 0
        self.extracted: List[str] = []

    def list_members(self, archive: Path) -> TarResult:
        self.list_calls += 1
        if self.list_code:
            return TarResult(returncode=self.list_code)
        return TarResult(returncode=0, lines=self.extra_lines + list(self.files))

    def extract_member(self, archive: Path, dest: Path, member: str) -> TarResult:
        self.extracted.append(member)
        if self.extract_code:
            return TarResult(returncode=self.extract_code)
        path = Path(dest) / member
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.files[member])
        return TarResult(returncode=0)


class ScriptedRandom:
    """Random stand-in whose choice() replays a fixed sequence."""

    def __init__(self, choices: Iterable = (), ids: Iterable[int] = ()):
        self.choices = list(choices)
        self.ids = list(ids)

    def choice(self, seq):
        value = self.choices.pop(0)
        assert value in seq
        return value

    def randrange(self, stop):
        return self.ids.pop(0)

    def random(self):
        return 0.5


@pytest.fixture
def scratch(tmp_path):
    with ScratchArea(parent=tmp_path) as area:
        yield area


@pytest.fixture
def repo():
    return RepositoryRef(full_name="octocat/hello-world", numeric_id=1296269)


@pytest.fixture
def archive(scratch, repo):
    path = scratch.new_file(prefix='archive_', suffix='.tar.gz')
    return ArchiveHandle(path=path, repo=repo)
