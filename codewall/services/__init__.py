"""
Service layer for codewall.

Contains the acquisition pipeline and the stages around it:
- RepositorySelector: Random repository by ID
- ArchiveFetcher: Tarball download into the scratch area
- CatalogExtractor: Regular files listed in a tarball
- UsabilityFilter: Binary / boring file rejection
- FileSampler: Bounded random draws from a catalog
- AcquisitionOrchestrator: The outer retry loop
- RenderService: Syntax-highlighted HTML page
- ScreenshotService: HTML to PNG
- WallpaperService: One complete run
- MaxRepoIdEstimator: Refresh the repository ID ceiling
"""

from .repository_selector import RepositorySelector
from .archive_fetcher import ArchiveFetcher
from .catalog import CatalogExtractor
from .usability import UsabilityFilter
from .file_sampler import FileSampler
from .acquisition import AcquisitionOrchestrator
from .render_service import RenderService, CodeView
from .screenshot_service import ScreenshotService
from .wallpaper_service import WallpaperService, WallpaperResult
from .max_id_estimator import MaxRepoIdEstimator, EstimateResult

__all__ = [
    'RepositorySelector',
    'ArchiveFetcher',
    'CatalogExtractor',
    'UsabilityFilter',
    'FileSampler',
    'AcquisitionOrchestrator',
    'RenderService',
    'CodeView',
    'ScreenshotService',
    'WallpaperService',
    'WallpaperResult',
    'MaxRepoIdEstimator',
    'EstimateResult',
]
