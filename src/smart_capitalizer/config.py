"""YAML/dict config loader for smart-capitalizer.

Supports loading from a YAML file or a plain dict (for embedding in a
host client's settings).  Option names may use the host's camelCase
spelling or snake_case.

Example YAML:

    smart_capitalization:
      enabled: true
      delimiters: "?!."
      eachLine: true
      firstLetter: true
      dotAtEnd: false
      dotAtEachLine: false
      excludeEndSymbols: "!?.,:()"
      extensions: ~/.config/smart-capitalizer/extensions.txt   # optional
"""

from __future__ import annotations
from dataclasses import fields
from pathlib import Path
from typing import Any

from .capitalizer import Capitalizer, CapitalizerConfig
from .extensions import default_oracle, load_extensions
from .middleware import CapitalizeMiddleware

# host option name → CapitalizerConfig field
_ALIASES = {
    "delimiters": "delimiters",
    "eachLine": "each_line",
    "firstLetter": "first_letter",
    "dotAtEnd": "dot_at_end",
    "dotAtEachLine": "dot_at_each_line",
    "excludeEndSymbols": "exclude_end_symbols",
}

_DEFAULTS = CapitalizerConfig()
_STRING_FIELDS = {"delimiters", "exclude_end_symbols"}


class _NoopMiddleware:
    """Pass-through middleware when capitalization is disabled."""
    running = False
    def pre_send(self, messages: list[dict]) -> list[dict]:
        return messages
    def transform_text(self, text: str) -> str:
        return text
    def on_pre_send(self, channel_id: Any, message: dict) -> None:
        pass
    def start(self, events: Any) -> None:
        pass
    def stop(self, events: Any) -> None:
        pass


def _option(data: dict[str, Any], name: str) -> Any:
    for key, field_name in _ALIASES.items():
        if field_name == name and key in data:
            return data[key]
    return data.get(name, getattr(_DEFAULTS, name))


def load_config(data: dict[str, Any]) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline)."""
    # Support nested under "smart_capitalization" key or flat
    if "smart_capitalization" in data:
        data = data["smart_capitalization"] or {}

    cfg: dict[str, Any] = {
        "enabled": bool(data.get("enabled", True)),
        "extensions": data.get("extensions"),
    }
    for f in fields(CapitalizerConfig):
        value = _option(data, f.name)
        if f.name in _STRING_FIELDS:
            cfg[f.name] = "" if value is None else str(value)
        else:
            cfg[f.name] = bool(value)
    return cfg


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file."""
    import yaml  # optional dependency
    with open(Path(path).expanduser()) as f:
        return load_config(yaml.safe_load(f) or {})


def config_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Only the options data names, keyed by CapitalizerConfig field."""
    if "smart_capitalization" in data:
        data = data["smart_capitalization"] or {}

    given = {f.name: f.name for f in fields(CapitalizerConfig)}
    given.update(_ALIASES)
    out: dict[str, Any] = {}
    for key, name in given.items():
        if key in data:
            value = data[key]
            if name in _STRING_FIELDS:
                out[name] = "" if value is None else str(value)
            else:
                out[name] = bool(value)
    return out


def build_config(config: dict[str, Any]) -> CapitalizerConfig:
    """Turn a (raw or normalized) config dict into a snapshot."""
    cfg = load_config(config)
    return CapitalizerConfig(**{f.name: cfg[f.name] for f in fields(CapitalizerConfig)})


def create_capitalizer(config: dict[str, Any]) -> Capitalizer:
    """Create a capitalizer, honouring a custom extension list if set."""
    cfg = load_config(config)
    oracle = load_extensions(cfg["extensions"]) if cfg.get("extensions") else default_oracle()
    return Capitalizer(build_config(cfg), oracle)


def create_middleware(config: dict[str, Any]) -> CapitalizeMiddleware:
    """Create a fully configured middleware from a config dict."""
    cfg = load_config(config)

    if not cfg["enabled"]:
        # Return a pass-through middleware (no rewriting)
        return _NoopMiddleware()

    return CapitalizeMiddleware(capitalizer=create_capitalizer(cfg))
