"""Convert exported Testpad CSV files into tab-indented TXT files."""

from __future__ import annotations

import enum
import os
import time
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from tqdm import tqdm

from .errors import ConvertException, SetupError
from .parsing import PhysicalLines, assemble_record, locate_schema, parse_entry
from .prefix import PrefixConstructor
from .schemas import ColumnSchema, ConversionError, ConversionReport, ConvertOptions, FileResult, OutlineEntry
from .utils import base_name, has_extension, safe_relpath


INDEX_FILE = "index.txt"
ERRORS_FILE = "errors.txt"
RESULT_SUFFIX = ".txt"


class State(enum.Enum):
    SEEKING_SCHEMA = "seeking_schema"
    EMITTING = "emitting"
    FAILED = "failed"


class FileConverter:
    """
    Turns the physical lines of one source file into outline entries.

    The converter seeks the schema line first, then emits one entry per
    logical record until the lines run out. Any syntax problem moves it
    to FAILED and raises ``ConvertException``.
    """

    def __init__(self, path: str, lines: PhysicalLines):
        self.path = path
        self.lines = lines
        self.state = State.SEEKING_SCHEMA
        self.schema: Optional[ColumnSchema] = None

    def entries(self) -> Iterator[OutlineEntry]:
        try:
            yield from self._run()
        except ConvertException:
            self.state = State.FAILED
            raise

    def _run(self) -> Iterator[OutlineEntry]:
        self.schema, line = locate_schema(self.lines)
        if self.schema is None:
            return
        self.state = State.EMITTING

        while line is not None:
            # Blank lines between records carry no data
            if not line:
                line = self.lines.read()
                continue
            line_index = self.lines.line_index
            fields, raw = assemble_record(line, line_index, self.lines, self.schema.field_count, self.path)
            yield parse_entry(fields, self.schema, self.path, line_index, raw)
            line = self.lines.read()


def scan_sources(source_dir: str, extension: str = "csv") -> List[str]:
    """
    Scan directory for source files.

    Shallower files come first; files at the same depth are ordered by path.
    This order fixes the prefixes handed out by ``PrefixConstructor``.
    """
    root = Path(source_dir)
    included: List[Path] = [
        path for path in root.rglob("*")
        if path.is_file() and has_extension(path, extension)
    ]
    included.sort(key=lambda path: (len(path.relative_to(root).parts), str(path)))
    return [str(path) for path in included]


def _result_path(
    source: Path,
    source_root: Path,
    result_dir: Path,
    options: ConvertOptions,
    prefix_ctor: Optional[PrefixConstructor],
) -> Tuple[Path, Optional[str]]:
    """Pick the output file for a source file; returns (path, prefix)."""
    if prefix_ctor is None:
        return result_dir / f"{base_name(source)}{RESULT_SUFFIX}", None

    if options.flatten:
        prefix = prefix_ctor.get_prefix(source)
        return result_dir / f"{prefix}{RESULT_SUFFIX}", prefix

    folder = result_dir / source.parent.relative_to(source_root)
    os.makedirs(folder, exist_ok=True)
    return folder / f"{base_name(source)}{RESULT_SUFFIX}", None


def convert_file(
    source: str,
    source_root: str,
    result_dir: str,
    options: ConvertOptions,
    prefix_ctor: Optional[PrefixConstructor] = None,
) -> FileResult:
    """
    Convert one source file; failures are returned, not raised.

    Without ``prefix_ctor`` the file is converted on its own and named
    after its base name.
    """
    source_path = Path(source)
    root = Path(source_root)
    result = FileResult(source_path=str(source_path))
    lines: Optional[PhysicalLines] = None

    try:
        with open(source_path, "r", encoding=options.encoding, newline=None) as reader:
            lines = PhysicalLines(reader)
            output, result.prefix = _result_path(source_path, root, Path(result_dir), options, prefix_ctor)
            result.output_path = str(output)

            with open(output, "w", encoding=options.encoding, newline="\n") as writer:
                if options.path_line:
                    header = source_path.name if prefix_ctor is None else safe_relpath(source_path, root)
                    writer.write(header + "\n")

                converter = FileConverter(str(source_path), lines)
                for entry in converter.entries():
                    writer.write(entry.render())
                    result.entry_count += 1

    except ConvertException as exc:
        result.error = exc.error
    except (OSError, ValueError) as exc:
        result.error = ConversionError(
            path=str(source_path),
            line_index=lines.line_index if lines is not None else 0,
            line=str(exc),
            kind="io",
        )

    return result


def _write_index_file(prefix_ctor: PrefixConstructor, result_dir: str, encoding: str) -> str:
    """Write ``index.txt``: one ``<indices>\\t<relative/dir>`` line per folder."""
    index_path = os.path.join(result_dir, INDEX_FILE)
    with open(index_path, "w", encoding=encoding, newline="\n") as handle:
        handle.write(prefix_ctor.render_manifest())
    return index_path


def _write_error_file(report: ConversionReport, result_dir: str, encoding: str) -> str:
    errors_path = os.path.join(result_dir, ERRORS_FILE)
    with open(errors_path, "w", encoding=encoding, errors="replace", newline="\n") as handle:
        handle.write(report.report_text())
        handle.write("\n")
    return errors_path


def convert(options: ConvertOptions) -> ConversionReport:
    """
    Convert a source file or every source file under a directory.

    Args:
        options: resolved run configuration

    Returns:
        ConversionReport with one FileResult per source file

    Raises:
        SetupError: missing source, wrong extension, or result directory not creatable
    """
    start_time = time.perf_counter()
    source = Path(options.source_path).resolve()
    result_dir = Path(options.result_path).resolve()

    if not source.exists():
        raise SetupError(f"Path not found: {source}")
    if source.is_file() and not has_extension(source, options.extension):
        raise SetupError(f"Incorrect file extension: {source}")

    try:
        os.makedirs(result_dir, exist_ok=True)
    except OSError as exc:
        raise SetupError(f"Cannot create result directory {result_dir}: {exc}") from exc

    report = ConversionReport(source_path=str(source), result_path=str(result_dir))

    if source.is_file():
        result = convert_file(str(source), str(source.parent), str(result_dir), options)
        report.results.append(result)
        if result.error is not None:
            print(f"[WARN] {result.error.message}")
    else:
        included = scan_sources(str(source), options.extension)
        print(f"Scan summary: total={len(included)}")

        prefix_ctor = PrefixConstructor(source)
        progress = tqdm(included, desc="Converting files", disable=not options.show_progress)
        for path in progress:
            progress.set_postfix_str(safe_relpath(path, source))
            result = convert_file(path, str(source), str(result_dir), options, prefix_ctor)
            report.results.append(result)
            if result.error is not None:
                tqdm.write(f"[WARN] conversion failed: {result.error.message}")

        if options.flatten and options.index_file:
            report.index_path = _write_index_file(prefix_ctor, str(result_dir), options.encoding)

    if options.error_file and report.failed_count:
        report.errors_path = _write_error_file(report, str(result_dir), options.encoding)

    elapsed = time.perf_counter() - start_time
    print(
        "Convert summary: "
        f"success={len(report.converted)}, failed={report.failed_count}"
    )
    print(f"Convert summary: duration={elapsed:.1f}s, output_dir={result_dir}")
    return report
