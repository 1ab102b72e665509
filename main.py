#!/usr/bin/env python3

from __future__ import annotations

import sys

from src.cli.commands.analysis import build_parser


def main(argv: list[str] | None = None) -> int:
    raw_args = sys.argv[1:] if argv is None else argv
    parser = build_parser()
    args = parser.parse_args(raw_args)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
