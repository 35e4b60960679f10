"""
Infrastructure layer for codewall.

Contains abstractions for external systems:
- GitHubClient: Repository resolution and archive transfer
- TarClient: Archive listing and selective extraction (`tar`)
- MimeSniffer: Content-type detection (`file`)
- ScratchArea: The run's scoped temporary directory
- DisplayClient: Screen geometry (`xrandr`)
- BrowserClient: HTML rasterization (headless Chrome)

These provide clean interfaces that can be mocked for testing.
"""

from .github_client import GitHubClient, RateLimitStatus
from .tar_client import TarClient, TarResult
from .mime_sniffer import MimeSniffer
from .scratch import ScratchArea
from .display_client import DisplayClient
from .browser_client import BrowserClient

__all__ = [
    'GitHubClient',
    'RateLimitStatus',
    'TarClient',
    'TarResult',
    'MimeSniffer',
    'ScratchArea',
    'DisplayClient',
    'BrowserClient',
]
