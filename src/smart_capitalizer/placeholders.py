"""Placeholders — per-call mapping between protected spans and tokens.

Design goals:
  - Ordered: placeholders are issued in discovery order, one counter
    shared by every category
  - Verbatim: restoration puts back the exact original substring
  - Throwaway: a fresh map is built for every message and dropped after
    restoration

Token format is ``__<CATEGORY><index>__`` (``__INLINE_CODE0__``,
``__URL1__``, ``__FILE2__``).  Nothing is escaped: a literal
placeholder-shaped string in the input can be mistaken for a real one.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator

from .patterns import PLACEHOLDER_RE, iter_categories, scan_category, scan_files
from .types import ProtectedSpan

if TYPE_CHECKING:
    from .extensions import ExtensionOracle

logger = logging.getLogger(__name__)

_TOKEN_FMT = "__{category}{idx}__"


class ExceptionMap:
    """Ordered placeholder → original store, scoped to one transformation."""

    __slots__ = ("_token_to_original",)

    def __init__(self) -> None:
        self._token_to_original: dict[str, str] = {}   # "__URL0__" → "https://…"

    # ------------------------------------------------------------------
    # Core API
    # ------------------------------------------------------------------

    def add(self, category: str, original: str) -> str:
        """Issue the next placeholder for an extracted span."""
        token = _TOKEN_FMT.format(category=category, idx=len(self._token_to_original))
        self._token_to_original[token] = original
        return token

    def restore(self, text: str) -> str:
        """Replace the first occurrence of each placeholder, in insertion order."""
        result = text
        for token, original in self._token_to_original.items():
            if token in result:
                result = result.replace(token, original, 1)
            else:
                logger.debug("placeholder %s not found during restore", token)
        return result

    def lookup(self, token: str) -> str | None:
        return self._token_to_original.get(token)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._token_to_original)

    def __iter__(self) -> Iterator[str]:
        return iter(self._token_to_original)

    def dump(self) -> dict[str, str]:
        """Return a copy of the placeholder → original mapping."""
        return dict(self._token_to_original)


@dataclass(slots=True)
class ExtractedText:
    """Working text plus everything needed to undo the extraction."""
    text: str
    exceptions: ExceptionMap = field(default_factory=ExceptionMap)
    spans: list[ProtectedSpan] = field(default_factory=list)


def _substitute(text: str, spans: list[ProtectedSpan], exceptions: ExceptionMap) -> tuple[str, list[ProtectedSpan]]:
    """Replace spans left to right, issuing placeholders in that order."""
    if not spans:
        return text, []
    parts: list[str] = []
    issued: list[ProtectedSpan] = []
    cursor = 0
    for span in sorted(spans, key=lambda s: s.start):
        token = exceptions.add(span.category, span.text)
        parts.append(text[cursor:span.start])
        parts.append(token)
        cursor = span.end
        issued.append(ProtectedSpan(span.category, span.start, span.end, span.text, token))
    parts.append(text[cursor:])
    return "".join(parts), issued


def extract(text: str, oracle: ExtensionOracle | None = None) -> ExtractedText:
    """Swap code spans, URLs and known-extension filenames for placeholders.

    Without an oracle the file stage is skipped.  Unbalanced backticks
    simply do not match; this never raises.
    """
    exceptions = ExceptionMap()
    all_spans: list[ProtectedSpan] = []

    for category, pattern in iter_categories():
        text, issued = _substitute(text, scan_category(category, pattern, text), exceptions)
        all_spans.extend(issued)

    if oracle is not None:
        text, issued = _substitute(text, scan_files(text, oracle), exceptions)
        all_spans.extend(issued)

    if all_spans:
        logger.debug("extracted %d protected span(s)", len(all_spans))
    return ExtractedText(text=text, exceptions=exceptions, spans=all_spans)


def restore(text: str, exceptions: ExceptionMap) -> str:
    """Put the original spans back.  Mangled placeholders stay as they are."""
    result = exceptions.restore(text)
    if exceptions and PLACEHOLDER_RE.search(result):
        logger.debug("placeholder-shaped text left after restore: %r", result)
    return result
