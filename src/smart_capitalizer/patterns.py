"""Protected-span patterns.

Each category's regex is run once, globally, over the current state of
the text.  Categories are processed in a fixed order (inline code, block
code, URL, file). A later category only matches the text between
placeholders issued by earlier ones, so a URL running into a code span
is cut where the placeholder starts.
"""

from __future__ import annotations
import re
from typing import TYPE_CHECKING, Iterator

from .types import ProtectedSpan

if TYPE_CHECKING:
    from .extensions import ExtensionOracle


INLINE_CODE = "INLINE_CODE"
BLOCK_CODE = "BLOCK_CODE"
URL = "URL"
FILE = "FILE"

# Order matters: inline code runs before block code, so in a text with
# both the inline pattern may eat into a fenced block.
_PATTERNS: list[tuple[str, re.Pattern]] = [
    (INLINE_CODE, re.compile(r"`[^`]+`")),
    (BLOCK_CODE, re.compile(r"```[\s\S]*?```")),
    (URL, re.compile(r"https?://[^\s]+")),
]

# Dotted token; the trailing word segment is the extension candidate.
_FILE_CANDIDATE = re.compile(r"[\w\-.]+\.(?P<ext>\w+)")

PLACEHOLDER_RE = re.compile(r"__(?:INLINE_CODE|BLOCK_CODE|URL|FILE)\d+__")


def placeholder_spans(text: str) -> list[tuple[int, int]]:
    """Spans of placeholder-shaped tokens currently in text."""
    return [(m.start(), m.end()) for m in PLACEHOLDER_RE.finditer(text)]


def _free_ranges(text: str) -> Iterator[tuple[int, int]]:
    cursor = 0
    for start, end in placeholder_spans(text):
        if start > cursor:
            yield cursor, start
        cursor = end
    if cursor < len(text):
        yield cursor, len(text)


def _finditer(pattern: re.Pattern, text: str) -> Iterator[re.Match]:
    """Match only between placeholders; a candidate stops at the next one."""
    for start, end in _free_ranges(text):
        yield from pattern.finditer(text, start, end)


def iter_categories() -> list[tuple[str, re.Pattern]]:
    """The regex-only categories, in extraction order."""
    return list(_PATTERNS)


def scan_category(category: str, pattern: re.Pattern, text: str) -> list[ProtectedSpan]:
    """Find every span of one category between existing placeholders."""
    spans: list[ProtectedSpan] = []
    for m in _finditer(pattern, text):
        spans.append(ProtectedSpan(category, m.start(), m.end(), m.group()))
    return spans


def scan_files(text: str, oracle: ExtensionOracle) -> list[ProtectedSpan]:
    """Two-phase file scan: collect dotted candidates, keep known extensions.

    The extension is checked as written first, then lower-cased, so
    ``REPORT.PDF`` is protected by a list holding ``pdf``.
    """
    candidates = list(_finditer(_FILE_CANDIDATE, text))
    spans: list[ProtectedSpan] = []
    for m in candidates:
        ext = m.group("ext")
        if oracle.is_known_extension(ext) or oracle.is_known_extension(ext.lower()):
            spans.append(ProtectedSpan(FILE, m.start(), m.end(), m.group()))
    return spans
