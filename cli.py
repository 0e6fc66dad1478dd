"""Command-line cleaner: run one HTML file through sanitize, clean and format.

Exit codes: 0 ok, 1 input error, 2 adapter error.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional
import argparse
import logging
import sys

from adapters import AdapterError
from env import get_log_level
from pipeline import InputError, run_clean


def _read_input(source: str) -> str:
	if source == "-":
		return sys.stdin.read()
	path = Path(source).expanduser()
	if not path.exists():
		raise InputError(f"input not found: {path}")
	return path.read_text(encoding="utf-8")


def main(argv: Optional[List[str]] = None) -> int:
	parser = argparse.ArgumentParser(description="Clean promotional terms HTML")
	parser.add_argument("input", help="HTML file to clean, or - for stdin")
	parser.add_argument("--header", action="append", default=[], help="extra header phrase to emphasize (repeatable)")
	parser.add_argument("--no-format", action="store_true", help="write the cleaned markup without pretty-printing")
	parser.add_argument("--output", "-o", default=None, help="write to this file instead of stdout")
	parser.add_argument("--log-level", default=get_log_level())
	args = parser.parse_args(argv)
	logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.INFO))

	try:
		result = run_clean(_read_input(args.input), args.header, format_output=not args.no_format)
	except InputError as exc:
		print(f"error: {exc}", file=sys.stderr)
		return 1
	except AdapterError as exc:
		print(f"error ({exc.stage}): {exc}", file=sys.stderr)
		if exc.cleaned is not None and args.output is None:
			sys.stdout.write(exc.cleaned + "\n")
		return 2

	text = result.formatted if not result.formatted.endswith("\n") else result.formatted[:-1]
	if args.output:
		Path(args.output).write_text(text + "\n", encoding="utf-8")
	else:
		sys.stdout.write(text + "\n")
	return 0


if __name__ == "__main__":
	raise SystemExit(main())
