"""
Tests for the tar client against a real `tar` binary.
"""

import io
import shutil
import subprocess
import tarfile
from pathlib import Path
from unittest.mock import patch

import pytest

from codewall.domain import ExternalToolError
from codewall.infra.tar_client import TarClient, TarResult

pytestmark = pytest.mark.skipif(shutil.which('tar') is None, reason="tar not installed")


def build_tarball(path: Path, files: dict) -> Path:
    """Write a GitHub-style tarball: one top-level directory holding `files`."""
    with tarfile.open(path, 'w:gz') as tar:
        root = tarfile.TarInfo('octocat-hello-world-abc123')
        root.type = tarfile.DIRTYPE
        tar.addfile(root)
        for name, content in files.items():
            data = content.encode('utf-8')
            info = tarfile.TarInfo(f'octocat-hello-world-abc123/{name}')
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return path


class TestTarClient:
    """Tests for TarClient."""

    def test_list_members(self, tmp_path):
        archive = build_tarball(tmp_path / 'a.tar.gz', {'README': 'hi', 'src/main.c': 'int main;'})
        result = TarClient().list_members(archive)

        assert result.ok
        assert 'octocat-hello-world-abc123/README' in result.lines
        assert 'octocat-hello-world-abc123/src/main.c' in result.lines
        assert any(line.endswith('/') for line in result.lines)

    def test_list_corrupt_archive(self, tmp_path):
        archive = tmp_path / 'bad.tar.gz'
        archive.write_bytes(b'this is not a tarball')

        result = TarClient().list_members(archive)
        assert not result.ok

    def test_extract_single_member(self, tmp_path):
        archive = build_tarball(tmp_path / 'a.tar.gz', {'a.py': 'print(1)\n', 'b.py': 'print(2)\n'})
        dest = tmp_path / 'out'
        dest.mkdir()

        result = TarClient().extract_member(archive, dest, 'octocat-hello-world-abc123/a.py')

        assert result.ok
        assert (dest / 'octocat-hello-world-abc123' / 'a.py').read_text() == 'print(1)\n'
        assert not (dest / 'octocat-hello-world-abc123' / 'b.py').exists()

    def test_extract_missing_member(self, tmp_path):
        archive = build_tarball(tmp_path / 'a.tar.gz', {'a.py': 'x'})
        dest = tmp_path / 'out'
        dest.mkdir()

        result = TarClient().extract_member(archive, dest, 'nope/b.py')
        assert not result.ok

    def test_non_ascii_names_under_c_locale(self, tmp_path, monkeypatch):
        monkeypatch.setenv('LC_ALL', 'C')
        archive = build_tarball(tmp_path / 'a.tar.gz', {'caf\u00e9.py': 'x = 1\n'})
        dest = tmp_path / 'out'
        dest.mkdir()
        member = 'octocat-hello-world-abc123/caf\u00e9.py'

        listing = TarClient().list_members(archive)
        assert member in listing.lines

        assert TarClient().extract_member(archive, dest, member).ok
        assert (dest / member).read_text() == 'x = 1\n'


class TestTarClientErrors:
    """Tests for tar invocation failures."""

    def test_missing_binary(self, tmp_path):
        client = TarClient(executable='definitely-not-tar-xyz')
        with pytest.raises(ExternalToolError):
            client.list_members(tmp_path / 'a.tar.gz')

    def test_timeout_reports_failure(self, tmp_path):
        with patch('subprocess.run', side_effect=subprocess.TimeoutExpired('tar', 1)):
            result = TarClient(timeout=1).list_members(tmp_path / 'a.tar.gz')
        assert result == TarResult(returncode=-1)

    def test_runs_with_utf8_locale(self, tmp_path, monkeypatch):
        monkeypatch.setenv('LC_ALL', 'C')
        completed = subprocess.CompletedProcess([], 0, stdout='a\n', stderr='')
        with patch('subprocess.run', return_value=completed) as mock_run:
            TarClient().list_members(tmp_path / 'a.tar.gz')

        assert mock_run.call_args.kwargs['env']['LC_ALL'] == 'C.UTF-8'
