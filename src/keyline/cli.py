"""Entry point for the keyline demo."""

from __future__ import annotations

import argparse
import logging
import sys

DEMO_HISTORY = ["ls -a", "dotnet run", "git init"]
DEMO_COMMANDS = {"git ": ["init", "clone", "pull", "push"]}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="keyline: line editing demo")
    parser.add_argument(
        "--history",
        action="append",
        default=None,
        help="Seed a history entry (repeatable; default: a few shell commands)",
    )
    parser.add_argument(
        "--no-history-recording",
        action="store_true",
        help="Do not append entered lines to the history",
    )
    parser.add_argument("--log-level", default="warning", choices=["debug", "info", "warning", "error"])
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    from keyline.completion import PrefixCompletionProvider
    from keyline.config import ReaderOptions
    from keyline.reader import LineReader

    reader = LineReader(
        completion=PrefixCompletionProvider(DEMO_COMMANDS),
        options=ReaderOptions(history_enabled=not args.no_history_recording),
    )
    reader.history.extend(args.history if args.history is not None else DEMO_HISTORY)

    print("keyline demo")
    print("------------")
    print()

    try:
        line = reader.read("(prompt)> ")
        print(line)
        password = reader.read_password("Enter Password> ")
        print(password)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130
    except EOFError:
        print("\nEnd of input", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
