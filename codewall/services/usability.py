"""
Usability filter for codewall.

Decides whether one extracted file is worth rendering. Two literal checks,
both of which must pass:

1. It is a regular file and its sniffed MIME type is `text/*` (otherwise
   "binary").
2. Its path does not match a boring-file pattern (otherwise "too boring").
"""

import re
from pathlib import Path
from typing import Iterable, Optional, Pattern

from ..domain.candidate import UsabilityVerdict
from ..infra.mime_sniffer import MimeSniffer

DEFAULT_BORING_PATTERNS = (
    r'README',
    r'gitignore',
    r'gitattributes',
    r'npmignore',
    r'min\.js',
)


def compile_boring_patterns(patterns: Iterable[str]) -> Pattern:
    return re.compile('|'.join(f'(?:{p})' for p in patterns))


class UsabilityFilter:
    """
    Classify extracted files as usable or not.

    Pure with respect to the file: the same content at the same path always
    gets the same verdict.
    """

    def __init__(
        self,
        sniffer: MimeSniffer,
        boring_patterns: Optional[Iterable[str]] = None,
    ):
        self.sniffer = sniffer
        self.boring = compile_boring_patterns(boring_patterns or DEFAULT_BORING_PATTERNS)

    def is_binary(self, path: Path) -> bool:
        # symlinks and other special entries count as binary
        if path.is_symlink() or not path.is_file():
            return True
        return MimeSniffer.top_level(self.sniffer.mime_type(path)) != 'text'

    def is_boring(self, path: Path) -> bool:
        return self.boring.search(str(path)) is not None

    def is_usable(self, path: Path) -> UsabilityVerdict:
        if self.is_binary(path):
            return UsabilityVerdict.reject(UsabilityVerdict.BINARY)
        if self.is_boring(path):
            return UsabilityVerdict.reject(UsabilityVerdict.BORING)
        return UsabilityVerdict.accept()
