"""Core types."""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ProtectedSpan:
    """A single span shielded from the rewrite rules."""
    category: str          # "INLINE_CODE" | "BLOCK_CODE" | "URL" | "FILE"
    start: int             # offsets in the text the category was scanned on
    end: int
    text: str
    placeholder: str = ""  # e.g. "__URL1__", filled in once replaced


@dataclass(slots=True)
class CapitalizedMessage:
    """Result of transforming a message."""
    text: str                                   # final text, exceptions restored
    working_text: str = ""                      # pipeline output before restore
    spans: list[ProtectedSpan] = field(default_factory=list)
    exceptions: dict[str, str] = field(default_factory=dict)  # placeholder → original
