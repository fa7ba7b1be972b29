"""Entry point for the rawline demo REPL."""

from __future__ import annotations

import argparse
import logging
import sys

from rawline.config import LineEditorConfig
from rawline.errors import Interrupted
from rawline.linenoise import Linenoise


def demo_completions(line: str) -> list[str]:
    if line.startswith("h"):
        return ["hello", "hello there"]
    return []


def demo_hints(line: str) -> str | None:
    if line == "hello":
        return " World"
    return None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="rawline: interactive line editing demo")
    parser.add_argument("--prompt", default="hello> ", help="Prompt to show (default: 'hello> ')")
    parser.add_argument("--multiline", action="store_true", help="Wrap long lines over several rows")
    parser.add_argument("--mask", action="store_true", help="Echo '*' instead of the typed text")
    parser.add_argument(
        "--history-max-len", type=int, default=None, help="Maximum number of history entries"
    )
    parser.add_argument(
        "--log-level", default="warning", choices=["debug", "info", "warning", "error"]
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config = LineEditorConfig.from_env()
    if args.multiline:
        config.multiline = True
    if args.mask:
        config.mask = True
    if args.history_max_len is not None:
        config.history_max_len = max(0, args.history_max_len)

    ln = Linenoise(config, hints=demo_hints, completions=demo_completions)

    while True:
        try:
            line = ln.read_line(args.prompt)
        except Interrupted:
            return 130
        if line is None:
            return 0
        print(f"echo: {line!r}", flush=True)
        ln.history.add(line)


if __name__ == "__main__":
    sys.exit(main())
