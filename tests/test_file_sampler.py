"""
Tests for the file sampler.
"""

import io
import random
import shutil
import tarfile

import pytest

from codewall.domain import ArchiveHandle, BadArchive, NoUsableFile
from codewall.infra.tar_client import TarClient
from codewall.services.catalog import CatalogExtractor
from codewall.services.file_sampler import FileSampler
from codewall.services.usability import UsabilityFilter

from conftest import FakeSniffer, FakeTar, ScriptedRandom

BINARY = 'application/octet-stream'


def _sampler(tar, sniffer, scratch, rng, max_attempts=5):
    return FileSampler(tar, UsabilityFilter(sniffer), scratch, max_attempts=max_attempts, rng=rng)


class TestFileSampler:
    """Tests for FileSampler.sample_file."""

    def test_returns_first_usable_draw(self, scratch, archive):
        files = {'r/a.bin': '\0', 'r/b.bin': '\0', 'r/main.go': 'package main\n'}
        tar = FakeTar(files)
        sniffer = FakeSniffer({'a.bin': BINARY, 'b.bin': BINARY})
        rng = ScriptedRandom(choices=['r/a.bin', 'r/b.bin', 'r/main.go'])

        extracted = _sampler(tar, sniffer, scratch, rng).sample_file(archive, list(files))

        assert extracted.source_entry == 'r/main.go'
        assert extracted.path.read_text() == 'package main\n'
        assert tar.extracted == ['r/a.bin', 'r/b.bin', 'r/main.go']

    def test_extracted_file_lives_in_scratch_area(self, scratch, archive):
        tar = FakeTar({'r/x.py': 'x'})
        extracted = _sampler(tar, FakeSniffer(), scratch, ScriptedRandom(['r/x.py'])).sample_file(
            archive, ['r/x.py'])
        assert scratch.root in extracted.path.parents

    def test_no_usable_file_after_five_attempts(self, scratch, archive):
        files = {'r/a.bin': '\0', 'r/b.bin': '\0'}
        tar = FakeTar(files)
        sniffer = FakeSniffer({'a.bin': BINARY, 'b.bin': BINARY})

        with pytest.raises(NoUsableFile):
            _sampler(tar, sniffer, scratch, random.Random(1)).sample_file(archive, list(files))

        assert len(tar.extracted) == 5

    def test_draws_with_replacement(self, scratch, archive):
        tar = FakeTar({'r/README': 'hi'})
        with pytest.raises(NoUsableFile):
            _sampler(tar, FakeSniffer(), scratch, random.Random(0)).sample_file(archive, ['r/README'])
        assert tar.extracted == ['r/README'] * 5

    def test_attempt_ceiling_is_configurable(self, scratch, archive):
        tar = FakeTar({'r/README': 'hi'})
        with pytest.raises(NoUsableFile):
            _sampler(tar, FakeSniffer(), scratch, random.Random(0), max_attempts=2).sample_file(
                archive, ['r/README'])
        assert len(tar.extracted) == 2

    def test_extraction_failure_is_bad_archive_immediately(self, scratch, archive):
        tar = FakeTar({'r/a.py': 'x'}, extract_code=2)
        with pytest.raises(BadArchive):
            _sampler(tar, FakeSniffer(), scratch, random.Random(0)).sample_file(archive, ['r/a.py'])
        assert len(tar.extracted) == 1

    def test_logs_each_rejection(self, scratch, archive, caplog):
        files = {'r/a.bin': '\0', 'r/ok.rs': 'fn main() {}'}
        tar = FakeTar(files)
        sniffer = FakeSniffer({'a.bin': BINARY})
        rng = ScriptedRandom(choices=['r/a.bin', 'r/ok.rs'])

        with caplog.at_level('WARNING'):
            _sampler(tar, sniffer, scratch, rng).sample_file(archive, list(files))

        assert 'Attempt #1 failed: File is binary' in caplog.text

    @pytest.mark.parametrize("seed", range(50))
    def test_never_returns_unusable_file(self, scratch, archive, seed):
        files = {'r/a.bin': '\0', 'r/lib.py': 'import os\n'}
        sniffer = FakeSniffer({'a.bin': BINARY})
        usability = UsabilityFilter(sniffer)
        sampler = FileSampler(FakeTar(files), usability, scratch, rng=random.Random(seed))

        try:
            extracted = sampler.sample_file(archive, list(files))
        except NoUsableFile:
            return
        assert extracted.source_entry == 'r/lib.py'
        assert usability.is_usable(extracted.path).usable is True


@pytest.mark.skipif(shutil.which('tar') is None, reason="tar not installed")
class TestFileSamplerWithRealTar:
    """FileSampler against a real gzipped tarball."""

    def test_dangling_symlink_costs_one_draw(self, scratch, repo):
        path = scratch.new_file(prefix='archive_', suffix='.tar.gz')
        with tarfile.open(path, 'w:gz') as tar:
            link = tarfile.TarInfo('r/docs-link')
            link.type = tarfile.SYMTYPE
            link.linkname = '../elsewhere/docs.md'
            tar.addfile(link)
            data = b'int main(void) { return 0; }\n'
            info = tarfile.TarInfo('r/main.c')
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
        archive = ArchiveHandle(path=path, repo=repo)
        tar_client = TarClient()

        catalog = CatalogExtractor(tar_client).list_entries(archive)
        assert 'r/docs-link' in catalog

        rng = ScriptedRandom(choices=['r/docs-link', 'r/main.c'])
        sampler = FileSampler(tar_client, UsabilityFilter(FakeSniffer()), scratch, rng=rng)
        extracted = sampler.sample_file(archive, catalog)

        assert extracted.source_entry == 'r/main.c'
        assert extracted.path.read_bytes() == data
