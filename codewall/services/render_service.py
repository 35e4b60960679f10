"""
Render stage for codewall.

Turns a candidate file into a standalone HTML page of syntax-highlighted
code with a random Pygments theme and a random monospace Google Font.

A file that cannot be rendered (blank, or no lexer matches it) raises
RenderUnusable, which the acquisition loop treats like any other
classification failure.
"""

import html
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import guess_lexer_for_filename
from pygments.styles import get_all_styles
from pygments.util import ClassNotFound

from ..domain.candidate import Candidate
from ..domain.failure import RenderUnusable, ScratchAreaError

logger = logging.getLogger(__name__)

MONOSPACE_GOOGLE_FONTS = (
    'Anonymous Pro',
    'Cousine',
    'Cutive Mono',
    'Fira Mono',
    'Inconsolata',
    'Nova Mono',
    'Overpass Mono',
    'Oxygen Mono',
    'PT Mono',
    'Roboto Mono',
    'Share Tech Mono',
    'Source Code Pro',
    'Space Mono',
    'Ubuntu Mono',
    'VT323',
)

GOOGLE_FONTS_URL = "https://fonts.googleapis.com/css?family={family}"

DEFAULT_PAGE_TITLE = "code view"

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>{title}</title>
<link href="{font_link}" rel="stylesheet">
<style type="text/css">
pre {{ font-family: '{font}', monospace; font-size: {font_size}em; }}
{css}
</style>
</head>
<body>
  <pre>{code}</pre>
</body>
</html>
"""


@dataclass(frozen=True)
class CodeView:
    """A rendered candidate."""
    candidate: Candidate
    html: str
    theme: str
    font: str
    lexer: str


def font_link(font: str) -> str:
    return GOOGLE_FONTS_URL.format(family=font.replace(' ', '+'))


class RenderService:
    """
    Render candidates to highlighted HTML pages.

    Example:
        service = RenderService()
        view = service.code_view(candidate)
        Path("page.html").write_text(view.html)
    """

    def __init__(
        self,
        fonts: Optional[Sequence[str]] = None,
        font_size_em: float = 3,
        title: str = DEFAULT_PAGE_TITLE,
        rng: Optional[random.Random] = None,
    ):
        self.fonts = list(fonts or MONOSPACE_GOOGLE_FONTS)
        self.font_size_em = font_size_em
        self.title = title
        self.rng = rng or random.Random()

    def read_source(self, path: Path) -> str:
        """
        Read a candidate file as text.

        Raises:
            RenderUnusable: the file is blank
            ScratchAreaError: the file could not be read
        """
        try:
            source = path.read_bytes().decode('utf-8', errors='replace')
        except OSError as e:
            raise ScratchAreaError(f"Could not read {path}: {e}") from e
        if not source.strip():
            raise RenderUnusable("Source file is empty.")
        return source

    def highlight(self, source: str, filename: str) -> Tuple[str, str]:
        """
        Highlight source code as HTML spans (no wrapping element).

        Returns:
            (html, lexer name)

        Raises:
            RenderUnusable: no lexer could be determined for the file
        """
        try:
            lexer = guess_lexer_for_filename(filename, source)
        except ClassNotFound as e:
            raise RenderUnusable("Unable to detect filetype for syntax highlighting.") from e
        formatter = HtmlFormatter(nowrap=True)
        return highlight(source, lexer, formatter), lexer.name

    def random_theme(self) -> Tuple[str, str]:
        """Pick a random Pygments style and return (name, CSS scoped to body)."""
        name = self.rng.choice(sorted(get_all_styles()))
        css = HtmlFormatter(style=name).get_style_defs('body')
        return name, css

    def random_font(self) -> str:
        return self.rng.choice(self.fonts)

    def code_view(self, candidate: Candidate) -> CodeView:
        """Render one candidate file to a complete HTML page."""
        source = self.read_source(candidate.file.path)
        code, lexer_name = self.highlight(source, candidate.file.basename)
        theme, css = self.random_theme()
        font = self.random_font()

        page = PAGE_TEMPLATE.format(
            title=html.escape(self.title),
            font_link=font_link(font),
            font=font,
            font_size=self.font_size_em,
            css=css,
            code=code,
        )
        logger.debug(f"Rendered {candidate.file.source_entry} as {lexer_name} ({theme}, {font})")
        return CodeView(candidate=candidate, html=page, theme=theme, font=font, lexer=lexer_name)
