#!/usr/bin/env python3
"""Example: Convert a folder of exported Testpad CSV files."""

import os
import sys

from testpad_converter import ConvertOptions, SetupError, convert


def _flag(name: str, default: str = "1") -> bool:
    return os.getenv(name, default).strip().lower() not in ("0", "false", "no", "off")


def main():
    # Configuration
    source_path = os.getenv("SOURCE_PATH", "./export")
    result_path = os.getenv("RESULT_PATH", "./result")
    flatten = _flag("FLATTEN")
    index_file = _flag("INDEX_FILE")
    path_line = _flag("PATH_LINE")

    print("=" * 60)
    print("Testpad Converter")
    print("=" * 60)
    print(f"Source path:  {source_path}")
    print(f"Result path:  {result_path}")
    print(f"Flatten:      {flatten}")
    print(f"Index file:   {index_file}")
    print(f"Path line:    {path_line}")
    print("=" * 60)
    print()

    options = ConvertOptions(
        source_path=source_path,
        result_path=result_path,
        flatten=flatten,
        index_file=index_file,
        path_line=path_line,
    )

    try:
        report = convert(options)
    except SetupError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Set SOURCE_PATH environment variable or create ./export directory")
        sys.exit(1)

    print()
    print("=" * 60)
    print("Conversion completed!")
    print("=" * 60)
    print(f"Converted files: {len(report.converted)}")
    print(f"Failed files:    {report.failed_count}")
    if report.errors:
        print("\nFailed files:")
        for error in report.errors[:10]:
            print(f"  - {error.path} (line {error.line_index})")
        if report.failed_count > 10:
            print(f"  ... and {report.failed_count - 10} more")
    if report.index_path:
        print(f"\nIndex file: {report.index_path}")
    print("=" * 60)


if __name__ == "__main__":
    main()
