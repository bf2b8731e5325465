"""Tests for config loading, middleware, CLI and the HTTP sidecar."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import io
import json
import threading
import urllib.error
import urllib.request
from http.server import HTTPServer

import pytest

from smart_capitalizer import (
    Capitalizer, CapitalizeMiddleware, CapitalizerConfig, ExtensionOracle, PreSendEvents,
    create_middleware, load_config, load_from_yaml,
)
from smart_capitalizer.config import build_config, config_overrides
from smart_capitalizer import cli, server

ORACLE = ExtensionOracle({"pdf", "txt"})

# talk to the local sidecar directly, whatever the proxy environment says
_opener = urllib.request.build_opener(urllib.request.ProxyHandler({}))


# ── Config ───────────────────────────────────────────────────────────

def test_load_config_defaults():
    cfg = load_config({})
    assert cfg["enabled"] is True
    assert cfg["extensions"] is None
    assert build_config(cfg) == CapitalizerConfig()


def test_load_config_camel_case_host_names():
    cfg = load_config({"eachLine": False, "dotAtEnd": True, "excludeEndSymbols": "!"})
    assert cfg["each_line"] is False
    assert cfg["dot_at_end"] is True
    assert cfg["exclude_end_symbols"] == "!"
    assert cfg["delimiters"] == "?!."


def test_load_config_nested_and_snake_case():
    cfg = load_config({"smart_capitalization": {"first_letter": False, "delimiters": "."}})
    config = build_config(cfg)
    assert config.first_letter is False
    assert config.delimiters == "."


def test_load_config_is_idempotent():
    cfg = load_config({"dotAtEachLine": True})
    assert load_config(cfg) == cfg


def test_config_overrides_only_named_options():
    assert config_overrides({"eachLine": False, "delimiters": "."}) == {
        "each_line": False, "delimiters": ".",
    }
    assert config_overrides({}) == {}


def test_load_from_yaml(tmp_path):
    pytest.importorskip("yaml")
    path = tmp_path / "config.yaml"
    path.write_text(
        "smart_capitalization:\n"
        "  dotAtEnd: true\n"
        "  excludeEndSymbols: \"!?\"\n"
    )
    cfg = load_from_yaml(path)
    assert cfg["dot_at_end"] is True
    assert cfg["exclude_end_symbols"] == "!?"


def test_create_middleware_disabled_passes_through():
    mw = create_middleware({"enabled": False})
    assert mw.transform_text("hi. there") == "hi. there"
    assert mw.pre_send([{"content": "hi"}]) == [{"content": "hi"}]


def test_create_middleware_custom_extensions(tmp_path):
    path = tmp_path / "exts.txt"
    path.write_text("foo\n")
    mw = create_middleware({"extensions": str(path)})
    assert mw.transform_text("see a.foo and a.bar") == "See a.foo and a.Bar"


# ── Middleware ───────────────────────────────────────────────────────

def test_middleware_pre_send():
    mw = CapitalizeMiddleware.create(config=CapitalizerConfig(dot_at_end=True), oracle=ORACLE)
    out = mw.pre_send([{"role": "user", "content": "send report.pdf. thanks"}])
    assert out[0]["content"] == "Send report.pdf. Thanks."


def test_middleware_start_stop():
    events = PreSendEvents()
    mw = CapitalizeMiddleware.create(oracle=ORACLE)

    mw.start(events)
    mw.start(events)
    assert mw.running
    assert len(events) == 1

    msg = {"content": "hi. there"}
    events.dispatch("channel-1", msg)
    assert msg["content"] == "Hi. There"

    mw.stop(events)
    assert not mw.running
    assert len(events) == 0

    msg = {"content": "hi. there"}
    events.dispatch("channel-1", msg)
    assert msg["content"] == "hi. there"


def test_listener_ignores_empty_content():
    mw = CapitalizeMiddleware.create(oracle=ORACLE)
    msg = {"content": ""}
    mw.on_pre_send(None, msg)
    assert msg == {"content": ""}


# ── CLI ──────────────────────────────────────────────────────────────

def _run_cli(monkeypatch, capsys, argv, stdin=""):
    monkeypatch.setattr(sys, "stdin", io.StringIO(stdin))
    cli.main(["--config", ""] + argv)
    return capsys.readouterr().out


def test_cli_transform(monkeypatch, capsys):
    assert _run_cli(monkeypatch, capsys, ["transform"], "hello. world") == "Hello. World"


def test_cli_transform_flags(monkeypatch, capsys):
    out = _run_cli(monkeypatch, capsys, ["--no-first-letter", "--dot-at-end", "transform"], "hello. world")
    assert out == "hello. World."


def test_cli_transform_messages(monkeypatch, capsys):
    out = _run_cli(monkeypatch, capsys, ["transform-messages"], '[{"content": "ok. go"}]')
    assert json.loads(out) == [{"content": "Ok. Go"}]


def test_cli_extract(monkeypatch, capsys):
    out = json.loads(_run_cli(monkeypatch, capsys, ["extract"], "see https://a.io"))
    assert out == {"text": "see __URL0__", "exceptions": {"__URL0__": "https://a.io"}}


def test_cli_check_ext(monkeypatch, capsys):
    out = json.loads(_run_cli(monkeypatch, capsys, ["check-ext", "pdf", "PDF"]))
    assert out == {"pdf": True, "PDF": False}


# ── HTTP sidecar ─────────────────────────────────────────────────────

@pytest.fixture
def sidecar():
    server._capitalizer = None
    server._config_path = ""
    httpd = HTTPServer(("127.0.0.1", 0), server.CapitalizeHandler)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{httpd.server_address[1]}"
    httpd.shutdown()
    httpd.server_close()


def _post(url, body):
    req = urllib.request.Request(
        url, data=json.dumps(body).encode("utf-8"),
        headers={"Content-Type": "application/json"}, method="POST",
    )
    with _opener.open(req) as resp:
        return json.loads(resp.read())


def test_sidecar_health(sidecar):
    with _opener.open(sidecar + "/health") as resp:
        data = json.loads(resp.read())
    assert data["status"] == "ok"
    assert data["extensions"] > 0


def test_sidecar_transform(sidecar):
    assert _post(sidecar + "/transform", {"text": "hi. there"}) == {"text": "Hi. There"}


def test_sidecar_transform_with_request_config(sidecar):
    body = {"text": "hi", "config": {"dotAtEnd": True}}
    assert _post(sidecar + "/transform", body) == {"text": "Hi."}


def test_sidecar_request_config_keeps_server_options(sidecar):
    server._capitalizer = Capitalizer(CapitalizerConfig(dot_at_end=True), ORACLE)
    body = {"text": "hi\nthere", "config": {"eachLine": False}}
    assert _post(sidecar + "/transform", body) == {"text": "Hi\nthere."}


def test_sidecar_transform_messages(sidecar):
    body = {"messages": [{"role": "user", "content": "ok. go"}, {"role": "system"}]}
    assert _post(sidecar + "/transform-messages", body) == {
        "messages": [{"role": "user", "content": "Ok. Go"}, {"role": "system"}],
    }


def test_sidecar_extract(sidecar):
    data = _post(sidecar + "/extract", {"text": "run `make` at https://x.io"})
    assert data == {
        "text": "run __INLINE_CODE0__ at __URL1__",
        "exceptions": {"__INLINE_CODE0__": "`make`", "__URL1__": "https://x.io"},
    }


def test_sidecar_unknown_path(sidecar):
    with pytest.raises(urllib.error.HTTPError) as exc:
        _post(sidecar + "/nope", {})
    assert exc.value.code == 404


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
