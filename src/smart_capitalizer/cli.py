"""CLI interface for smart-capitalizer.

Usage:
    # Rewrite plain text (stdin → stdout)
    echo 'hello. see notes.txt' | python -m smart_capitalizer.cli transform

    # Rewrite messages (stdin: JSON array of message dicts, stdout: JSON)
    echo '[{"content":"hi. there"}]' | \
        python -m smart_capitalizer.cli --dot-at-end transform-messages

    # Show the placeholder map for a message
    echo 'run `make` at https://x.io' | python -m smart_capitalizer.cli extract

    # Ask the extension list about a few suffixes
    python -m smart_capitalizer.cli check-ext pdf PDF docx

Options are read from --config (or $SMART_CAPITALIZER_CONFIG) first;
flags on the command line override them.
"""

from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from dataclasses import replace

from .capitalizer import Capitalizer
from .config import build_config, load_config, load_from_yaml
from .extensions import ExtensionOracle, default_oracle, load_extensions
from .placeholders import extract


DEFAULT_CONFIG = os.environ.get("SMART_CAPITALIZER_CONFIG", "")


def _load_cfg(args: argparse.Namespace) -> dict:
    if args.config:
        return load_from_yaml(args.config)
    return load_config({})


def _build_oracle(args: argparse.Namespace, cfg: dict) -> ExtensionOracle:
    path = args.extensions or cfg.get("extensions")
    return load_extensions(path) if path else default_oracle()


def _build_capitalizer(args: argparse.Namespace) -> Capitalizer:
    cfg = _load_cfg(args)
    config = build_config(cfg)
    overrides = {}
    if args.delimiters is not None:
        overrides["delimiters"] = args.delimiters
    if args.exclude_end_symbols is not None:
        overrides["exclude_end_symbols"] = args.exclude_end_symbols
    if args.no_each_line:
        overrides["each_line"] = False
    if args.no_first_letter:
        overrides["first_letter"] = False
    if args.dot_at_end:
        overrides["dot_at_end"] = True
    if args.dot_at_each_line:
        overrides["dot_at_each_line"] = True
    return Capitalizer(replace(config, **overrides), _build_oracle(args, cfg))


def cmd_transform(args: argparse.Namespace) -> None:
    """Rewrite plain text on stdin."""
    capitalizer = _build_capitalizer(args)
    sys.stdout.write(capitalizer.transform(sys.stdin.read()))


def cmd_transform_messages(args: argparse.Namespace) -> None:
    """Rewrite a JSON array of message dicts on stdin."""
    capitalizer = _build_capitalizer(args)
    messages = json.loads(sys.stdin.read())
    json.dump(capitalizer.transform_messages(messages), sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_extract(args: argparse.Namespace) -> None:
    """Dump the working text and placeholder map for stdin text."""
    oracle = _build_oracle(args, _load_cfg(args))
    extracted = extract(sys.stdin.read(), oracle)
    output = {
        "text": extracted.text,
        "exceptions": extracted.exceptions.dump(),
    }
    json.dump(output, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_check_ext(args: argparse.Namespace) -> None:
    """Report whether each argument is a known extension."""
    oracle = _build_oracle(args, _load_cfg(args))
    json.dump({ext: oracle.is_known_extension(ext) for ext in args.ext}, sys.stdout)
    sys.stdout.write("\n")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="smart_capitalizer",
        description="Sentence capitalization and punctuation for outgoing messages",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="YAML config path")
    parser.add_argument("--delimiters", default=None, help="Characters that start a new sentence")
    parser.add_argument("--exclude-end-symbols", default=None, help="No trailing period after these")
    parser.add_argument("--no-each-line", action="store_true", help="Don't capitalize each line")
    parser.add_argument("--no-first-letter", action="store_true", help="Don't capitalize the first letter")
    parser.add_argument("--dot-at-end", action="store_true", help="Add a period at the end")
    parser.add_argument("--dot-at-each-line", action="store_true", help="Add a period at each line end")
    parser.add_argument("--extensions", default=None, help="Custom extension list (JSON or text)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("transform", help="Rewrite plain text (stdin)")
    sub.add_parser("transform-messages", help="Rewrite messages (JSON stdin)")
    sub.add_parser("extract", help="Show protected spans and placeholders")
    check = sub.add_parser("check-ext", help="Check extensions against the list")
    check.add_argument("ext", nargs="+")

    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    cmds = {
        "transform": cmd_transform,
        "transform-messages": cmd_transform_messages,
        "extract": cmd_extract,
        "check-ext": cmd_check_ext,
    }
    cmds[args.command](args)


if __name__ == "__main__":
    main()
