"""HTTP sidecar server for smart-capitalizer.

Runs as a lightweight stdlib HTTP server on localhost so a client can
rewrite messages without spawning a process per send.

Endpoints:
    POST /transform           — Rewrite text (JSON body)
    POST /transform-messages  — Rewrite message dicts (JSON body)
    POST /extract             — Show placeholders for text (JSON body)
    GET  /health              — Health check

All endpoints expect/return JSON.
Body format: {"text": "...", "config": {...}}  ("config" is optional and
overrides the server defaults for that request only)
"""

from __future__ import annotations
import json
import os
from dataclasses import replace
from http.server import HTTPServer, BaseHTTPRequestHandler
from typing import Any

from .capitalizer import Capitalizer
from .config import config_overrides, create_capitalizer, load_config, load_from_yaml
from .placeholders import extract

DEFAULT_PORT = int(os.environ.get("SMART_CAPITALIZER_PORT", "18792"))
DEFAULT_CONFIG = os.environ.get("SMART_CAPITALIZER_CONFIG", "")

# Shared state
_capitalizer: Capitalizer | None = None
_config_path: str = DEFAULT_CONFIG


def _get_capitalizer() -> Capitalizer:
    global _capitalizer
    if _capitalizer is None:
        cfg = load_from_yaml(_config_path) if _config_path else load_config({})
        _capitalizer = create_capitalizer(cfg)
    return _capitalizer


def _for_request(body: dict[str, Any]) -> Capitalizer:
    base = _get_capitalizer()
    overrides = config_overrides(body.get("config") or {})
    if not overrides:
        return base
    return Capitalizer(replace(base.config, **overrides), base.oracle)


class CapitalizeHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the capitalizer sidecar."""

    def _read_json(self) -> dict[str, Any]:
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length).decode("utf-8")
        return json.loads(body) if body else {}

    def _respond(self, status: int, data: Any) -> None:
        body = json.dumps(data, ensure_ascii=False).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:
        pass

    def do_GET(self) -> None:
        if self.path == "/health":
            self._respond(200, {"status": "ok", "extensions": len(_get_capitalizer().oracle)})
        else:
            self._respond(404, {"error": "not found"})

    def do_POST(self) -> None:
        try:
            body = self._read_json()

            if self.path == "/transform":
                capitalizer = _for_request(body)
                self._respond(200, {"text": capitalizer.transform(body.get("text", ""))})

            elif self.path == "/transform-messages":
                capitalizer = _for_request(body)
                messages = body.get("messages", [])
                self._respond(200, {"messages": capitalizer.transform_messages(messages)})

            elif self.path == "/extract":
                extracted = extract(body.get("text", ""), _get_capitalizer().oracle)
                self._respond(200, {
                    "text": extracted.text,
                    "exceptions": extracted.exceptions.dump(),
                })

            else:
                self._respond(404, {"error": "not found"})

        except Exception as e:
            self._respond(500, {"error": str(e)})


def serve(port: int = DEFAULT_PORT, config_path: str = DEFAULT_CONFIG) -> None:
    """Start the capitalizer HTTP sidecar."""
    global _config_path, _capitalizer
    _config_path = config_path
    _capitalizer = None

    server = HTTPServer(("127.0.0.1", port), CapitalizeHandler)
    print(f"smart-capitalizer on 127.0.0.1:{port}, {len(_get_capitalizer().oracle)} extensions")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="smart-capitalizer HTTP sidecar")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--config", default=DEFAULT_CONFIG)
    args = parser.parse_args()
    serve(port=args.port, config_path=args.config)
