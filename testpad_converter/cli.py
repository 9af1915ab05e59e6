"""Command-line entry point for Testpad Converter."""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .converter import convert
from .errors import SetupError
from .schemas import ConvertOptions


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="testpad-convert",
        description="Convert exported Testpad CSV files into tab-indented TXT files.",
    )
    parser.add_argument("-p", "--path", required=True, help="Path to the object to be converted")
    parser.add_argument("-r", "--result", default="result", help="Path to result folder (./result by default)")
    parser.add_argument("-nf", "--no-flatten", action="store_true",
                        help="Mirror the source folders instead of indexing files in one layer")
    parser.add_argument("-np", "--no-path-line", action="store_true",
                        help="Do not add the relative path as the first line")
    parser.add_argument("-ni", "--no-index-file", action="store_true", help="Do not generate the index file")
    parser.add_argument("-ne", "--no-error-file", action="store_true", help="Do not generate the error report")
    parser.add_argument("-q", "--quiet", action="store_true", help="Hide the progress bar")
    return parser


def options_from_args(args: argparse.Namespace) -> ConvertOptions:
    return ConvertOptions(
        source_path=args.path,
        result_path=args.result,
        flatten=not args.no_flatten,
        path_line=not args.no_path_line,
        index_file=not args.no_index_file,
        error_file=not args.no_error_file,
        show_progress=not args.quiet,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        report = convert(options_from_args(args))
    except SetupError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if report.errors_path:
        print(f"Error report: {report.errors_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
