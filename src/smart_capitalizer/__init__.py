"""Smart Capitalizer — sentence capitalization and punctuation for outgoing messages."""

from .capitalizer import Capitalizer, CapitalizerConfig, transform
from .extensions import ExtensionOracle, default_oracle, load_extensions
from .placeholders import ExceptionMap, extract, restore
from .middleware import CapitalizeMiddleware, PreSendEvents
from .config import create_middleware, load_config, load_from_yaml
from .types import CapitalizedMessage, ProtectedSpan

__all__ = [
    "Capitalizer", "CapitalizerConfig", "transform",
    "ExtensionOracle", "default_oracle", "load_extensions",
    "ExceptionMap", "extract", "restore",
    "CapitalizeMiddleware", "PreSendEvents",
    "create_middleware", "load_config", "load_from_yaml",
    "CapitalizedMessage", "ProtectedSpan",
]
__version__ = "0.1.0"
