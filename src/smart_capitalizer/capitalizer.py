"""Capitalizer — the main API.  Protect, rewrite, restore.

Usage:
    from smart_capitalizer import Capitalizer, CapitalizerConfig

    capitalizer = Capitalizer()          # reusable, stateless between calls
    capitalizer.transform("hi. see https://example.com/a.b")
    # "Hi. See https://example.com/a.b"

    strict = Capitalizer(CapitalizerConfig(dot_at_end=True))
    strict.transform("done")             # "Done."
"""

from __future__ import annotations
import logging
from dataclasses import dataclass

from .extensions import ExtensionOracle, default_oracle
from .placeholders import extract, restore
from .rules import process_content
from .types import CapitalizedMessage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapitalizerConfig:
    """Configuration snapshot, read-only for the whole transformation."""
    delimiters: str = "?!."              # next letter after these is capitalized
    each_line: bool = True               # capitalize every line after the first
    first_letter: bool = True            # capitalize the start of the message
    dot_at_end: bool = False             # append "." to the message
    dot_at_each_line: bool = False       # append "." to every line but the last
    exclude_end_symbols: str = "!?.,:()"  # no trailing "." after these


class Capitalizer:
    """Message rewriter.

    Stage 1: Extract protected spans (code, URLs, known filenames)
    Stage 2: Rewrite pipeline over the working text
    Stage 3: Restore protected spans verbatim
    """

    def __init__(
        self,
        config: CapitalizerConfig | None = None,
        oracle: ExtensionOracle | None = None,
    ) -> None:
        self.config = config or CapitalizerConfig()
        self.oracle = oracle if oracle is not None else default_oracle()

    def process(self, text: str) -> CapitalizedMessage:
        """Transform text, keeping the intermediate results."""
        if not text:
            return CapitalizedMessage(text=text)

        extracted = extract(text, self.oracle)
        working = process_content(extracted.text, self.config)
        result = restore(working, extracted.exceptions)
        logger.debug(
            "transformed %d chars with %d protected span(s)",
            len(text), len(extracted.exceptions),
        )

        return CapitalizedMessage(
            text=result,
            working_text=working,
            spans=extracted.spans,
            exceptions=extracted.exceptions.dump(),
        )

    def transform(self, text: str) -> str:
        """Return the rewritten message text."""
        return self.process(text).text

    def transform_messages(
        self,
        messages: list[dict],
        *,
        content_key: str = "content",
    ) -> list[dict]:
        """Rewrite the content of a list of message dicts.

        Returns new message dicts.  Does NOT mutate the originals.
        """
        out: list[dict] = []
        for msg in messages:
            content = msg.get(content_key)
            if isinstance(content, str) and content:
                out.append({**msg, content_key: self.transform(content)})
            else:
                out.append(msg)
        return out


def transform(
    text: str,
    config: CapitalizerConfig | None = None,
    oracle: ExtensionOracle | None = None,
) -> str:
    """One-shot convenience wrapper around Capitalizer.transform."""
    return Capitalizer(config, oracle).transform(text)
