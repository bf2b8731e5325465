"""Rewrite rules — capitalization and punctuation steps.

Every step takes the working text (placeholders already in place) plus
the piece of configuration it needs, and returns new text.  They are
plain functions so each one can be exercised on its own.
"""

from __future__ import annotations
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .capitalizer import CapitalizerConfig


def capitalize_first_letter(text: str) -> str:
    """Upper-case the first character of text."""
    return text[:1].upper() + text[1:]


def add_dot_if_missing(text: str, exclude_end_symbols: str) -> str:
    """Append a period unless the text already ends in an excluded symbol.

    Trailing whitespace is trimmed when a period is added.  Text that is
    empty after trimming is not excluded, so it becomes ``"."``.
    """
    trimmed = text.rstrip()
    end_char = trimmed[-1:]
    if end_char and end_char in set(exclude_end_symbols):
        return text
    return trimmed + "."


def capitalize_lines(text: str) -> str:
    """Capitalize every line but the first."""
    return "\n".join(
        line if i == 0 else capitalize_first_letter(line)
        for i, line in enumerate(text.split("\n"))
    )


def add_dots_to_lines(text: str, exclude_end_symbols: str) -> str:
    """Add trailing periods to every line but the last."""
    lines = text.split("\n")
    last = len(lines) - 1
    return "\n".join(
        line if i == last else add_dot_if_missing(line, exclude_end_symbols)
        for i, line in enumerate(lines)
    )


def delimiter_pattern(delimiters: str) -> re.Pattern | None:
    """``[<delimiters>]\\s*`` with every delimiter escaped; None when empty."""
    chars = "".join(re.escape(c) for c in dict.fromkeys(delimiters))
    if not chars:
        return None
    return re.compile(f"[{chars}]\\s*")


def _upper_char(char: str) -> str:
    # Only length-preserving case changes keep the collected offsets valid.
    upper = char.upper()
    return upper if len(upper) == 1 else char


def apply_delimiters(text: str, delimiters: str) -> str:
    """Capitalize the character following each delimiter (and its spaces).

    Offsets are collected against the unmodified text first, then each
    character is upper-cased in a second pass.
    """
    pattern = delimiter_pattern(delimiters)
    if pattern is None:
        return text

    offsets = [m.end() for m in pattern.finditer(text) if m.end() < len(text)]
    if not offsets:
        return text

    chars = list(text)
    for idx in offsets:
        chars[idx] = _upper_char(chars[idx])
    result = "".join(chars)
    if len(result) != len(text):
        raise ValueError("delimiter capitalization changed the text length")
    return result


def process_content(text: str, config: CapitalizerConfig) -> str:
    """Run the whole rewrite pipeline, in order, on working text."""
    if config.first_letter:
        text = capitalize_first_letter(text)
    if config.dot_at_end:
        text = add_dot_if_missing(text, config.exclude_end_symbols)
    if config.each_line:
        text = capitalize_lines(text)
    if config.dot_at_each_line:
        text = add_dots_to_lines(text, config.exclude_end_symbols)
    return apply_delimiters(text, config.delimiters)
