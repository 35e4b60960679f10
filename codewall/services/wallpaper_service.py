"""
Wallpaper generation service for codewall.

Runs one complete, stateless generation:

1. Open the run's scratch area
2. Acquire a candidate and render it, under one shared attempt budget
3. Screenshot the rendered page (or keep the HTML)
4. Remove the scratch area, whatever happened
"""

import logging
import random
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from ..config import get_github_token, load_config
from ..domain.candidate import Candidate
from ..domain.failure import ConfigurationError
from ..infra.browser_client import BrowserClient
from ..infra.display_client import DisplayClient
from ..infra.github_client import GitHubClient
from ..infra.mime_sniffer import MimeSniffer
from ..infra.scratch import ScratchArea
from ..infra.tar_client import TarClient
from .acquisition import AcquisitionOrchestrator
from .archive_fetcher import ArchiveFetcher
from .catalog import CatalogExtractor
from .file_sampler import FileSampler
from .render_service import CodeView, RenderService
from .repository_selector import RepositorySelector
from .screenshot_service import ScreenshotService
from .usability import UsabilityFilter

logger = logging.getLogger(__name__)


def output_filename(candidate: Candidate, when: datetime, extension: str = "png") -> str:
    """
    Name the output image after the time, repository and file.

    Example:
        20241228093000-octocat-hello-world-main.c.png
    """
    timestamp = when.strftime('%Y%m%d%H%M%S')
    name = f"{timestamp}-{candidate.repo.full_name}-{candidate.file.basename}.{extension}"
    return name.replace('/', '-')


def _positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def validate_config(config: Dict[str, Any]) -> None:
    """
    Check the ID range and attempt budgets before a run starts.

    Raises:
        ConfigurationError: a value is missing, not an integer, or below 1
    """
    checks = [
        ('github.max_repo_id', config['github'].get('max_repo_id'), False),
        ('acquisition.max_attempts', config['acquisition'].get('max_attempts'), False),
        ('acquisition.sample_attempts', config['acquisition'].get('sample_attempts'), False),
        ('acquisition.max_not_found', config['acquisition'].get('max_not_found'), True),
    ]
    for key, value, optional in checks:
        if optional and value is None:
            continue
        if not _positive_int(value):
            raise ConfigurationError(f"{key} must be a positive integer, got {value!r}")


@dataclass
class WallpaperResult:
    """Result of one generation run."""
    path: Path
    candidate: Candidate
    theme: str
    font: str
    lexer: str
    attempts: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': str(self.path),
            'repo': self.candidate.repo.full_name,
            'file': self.candidate.file.source_entry,
            'theme': self.theme,
            'font': self.font,
            'lexer': self.lexer,
            'attempts': self.attempts,
        }


class WallpaperService:
    """
    Generate one wallpaper from a random file in a random repository.

    Clients default to real implementations built from the configuration;
    pass them in to substitute test doubles.

    Example:
        service = WallpaperService()
        result = service.generate(Path("~/Pictures/wallpapers").expanduser())
        print(result.path)
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        github: Optional[GitHubClient] = None,
        tar: Optional[TarClient] = None,
        sniffer: Optional[MimeSniffer] = None,
        display: Optional[DisplayClient] = None,
        browser: Optional[BrowserClient] = None,
        scratch_factory: Callable[[], ScratchArea] = ScratchArea,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize WallpaperService.

        Raises:
            ConfigurationError: no GitHub token is configured, or a budget is invalid
        """
        self.config = config or load_config()
        validate_config(self.config)
        github_config = self.config['github']
        screenshot_config = self.config['screenshot']
        render_config = self.config['render']

        self.github = github or GitHubClient(
            get_github_token(self.config),
            api_url=github_config['api_url'],
            timeout=github_config.get('request_timeout'),
        )
        self.tar = tar or TarClient()
        self.sniffer = sniffer or MimeSniffer()
        self.scratch_factory = scratch_factory
        self.rng = rng or random.Random()

        self.renderer = RenderService(
            fonts=render_config.get('fonts'),
            font_size_em=render_config['font_size_em'],
            title=render_config['page_title'],
            rng=self.rng,
        )
        self.screenshots = ScreenshotService(
            browser or BrowserClient(
                executable=screenshot_config['chrome_binary'],
                settle_seconds=screenshot_config['settle_seconds'],
            ),
            display or DisplayClient(),
            default_resolution=tuple(screenshot_config['default_resolution']),
            rng=self.rng,
        )
        self.last_result: Optional[WallpaperResult] = None
        self._attempts = 0

    def build_orchestrator(self, scratch: ScratchArea) -> AcquisitionOrchestrator:
        """Wire the acquisition pipeline for one run's scratch area."""
        github_config = self.config['github']
        acquisition_config = self.config['acquisition']

        selector = RepositorySelector(
            self.github,
            max_repo_id=github_config['max_repo_id'],
            max_not_found=acquisition_config.get('max_not_found'),
            rng=self.rng,
        )
        usability = UsabilityFilter(
            self.sniffer,
            boring_patterns=self.config['usability'].get('boring_patterns'),
        )
        sampler = FileSampler(
            self.tar,
            usability,
            scratch,
            max_attempts=acquisition_config['sample_attempts'],
            rng=self.rng,
        )
        return AcquisitionOrchestrator(
            selector,
            ArchiveFetcher(self.github, scratch),
            CatalogExtractor(self.tar),
            sampler,
            max_attempts=acquisition_config['max_attempts'],
        )

    def random_code_view(self, scratch: ScratchArea) -> CodeView:
        """
        Acquire and render a candidate.

        A render failure throws the whole candidate away and draws a new
        repository; it costs one attempt of the same outer budget.
        """
        orchestrator = self.build_orchestrator(scratch)
        _, view = orchestrator.acquire(accept=self.renderer.code_view)
        self._attempts = orchestrator.last_budget.failures + 1
        return view

    def generate(
        self,
        output_dir: Optional[Path] = None,
        html_only: bool = False,
        now: Optional[datetime] = None,
    ) -> WallpaperResult:
        """
        Run one generation and write the result into `output_dir`.

        Args:
            output_dir: Where to write the image (config `output.directory` if None)
            html_only: Write the rendered HTML page instead of a PNG
            now: Timestamp used in the output name

        Raises:
            ExhaustedSearch: no usable candidate within the outer budget
            FatalError: any unrecoverable failure
        """
        output_dir = Path(output_dir or self.config['output']['directory']).expanduser()
        output_dir.mkdir(parents=True, exist_ok=True)

        with self.scratch_factory() as scratch:
            view = self.random_code_view(scratch)
            name = output_filename(view.candidate, now or datetime.now(), "html" if html_only else "png")
            out_path = output_dir / name

            if html_only:
                out_path.write_text(view.html, encoding='utf-8')
            else:
                self.screenshots.capture(view.html, out_path, scratch)

        result = WallpaperResult(
            path=out_path,
            candidate=view.candidate,
            theme=view.theme,
            font=view.font,
            lexer=view.lexer,
            attempts=self._attempts,
        )
        self.last_result = result
        logger.info(f"Wrote {out_path}")
        return result
