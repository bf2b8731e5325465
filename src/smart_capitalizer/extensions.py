"""Extension oracle — is a dotted token's suffix a known file extension?

The bundled list lives in ``resources/extensions.json`` and is loaded
once, on first use.  Membership is exact and case-sensitive; callers
that want case-insensitive matching normalize before asking.
"""

from __future__ import annotations
import json
import logging
import threading
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

BUNDLED_EXTENSIONS = Path(__file__).parent / "resources" / "extensions.json"

# Lazy singleton — don't read the bundled list until first use
_default: ExtensionOracle | None = None
_lock = threading.Lock()


class ExtensionOracle:
    """Static set-membership test over known file extensions."""

    __slots__ = ("_known",)

    def __init__(self, extensions: Iterable[str] = ()) -> None:
        self._known: frozenset[str] = frozenset(extensions)

    def is_known_extension(self, token: str) -> bool:
        return token in self._known

    def __contains__(self, token: object) -> bool:
        return token in self._known

    def __len__(self) -> int:
        return len(self._known)


def load_extensions(path: str | Path = BUNDLED_EXTENSIONS) -> ExtensionOracle:
    """Load an extension list.

    ``.json`` files must hold an array of strings; any other file is read
    as one extension per line (blank lines and ``#`` comments ignored).
    A leading dot on an entry is dropped.
    """
    path = Path(path).expanduser()
    raw = path.read_text(encoding="utf-8")

    if path.suffix == ".json":
        data = json.loads(raw)
        if not isinstance(data, list) or not all(isinstance(e, str) for e in data):
            raise ValueError(f"{path}: expected a JSON array of strings")
        entries = data
    else:
        entries = [
            line.strip() for line in raw.splitlines()
            if line.strip() and not line.lstrip().startswith("#")
        ]

    oracle = ExtensionOracle(e[1:] if e.startswith(".") else e for e in entries)
    logger.debug("loaded %d extensions from %s", len(oracle), path)
    return oracle


def default_oracle() -> ExtensionOracle:
    """The bundled list, loaded once per process."""
    global _default
    if _default is None:
        with _lock:
            if _default is None:
                _default = load_extensions(BUNDLED_EXTENSIONS)
    return _default
