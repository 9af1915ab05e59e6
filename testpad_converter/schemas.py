"""Data schemas for Testpad conversion."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from .utils import tabs


ERROR_DIVIDER = "=" * 90


class ColumnSchema(BaseModel):
    """Positions of the indent and text columns in a schema line."""
    indent_index: int
    text_index: int
    field_count: int


class OutlineEntry(BaseModel):
    """One output line: nesting depth and text."""
    depth: int = Field(ge=0)
    text: str

    def render(self) -> str:
        return tabs(self.depth) + self.text + "\n"


class ConversionError(BaseModel):
    """A per-file failure anchored at a source line."""
    path: str
    line_index: int
    line: str = ""
    kind: str = "syntax"

    @property
    def message(self) -> str:
        label = "Syntax error" if self.kind == "syntax" else "I/O error"
        return f"{label} at line {self.line_index} in file {self.path}\n{self.line}"


class ConvertOptions(BaseModel):
    """Resolved configuration for one conversion run."""
    source_path: str
    result_path: str = "result"
    flatten: bool = True
    index_file: bool = True
    path_line: bool = True
    error_file: bool = True
    extension: str = "csv"
    encoding: str = "cp866"
    show_progress: bool = True


class FileResult(BaseModel):
    """Outcome of converting a single source file."""
    source_path: str
    output_path: Optional[str] = None
    prefix: Optional[str] = None
    entry_count: int = 0
    error: Optional[ConversionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ConversionReport(BaseModel):
    """Batch conversion summary with accumulated per-file errors."""
    source_path: str
    result_path: str
    results: List[FileResult] = Field(default_factory=list)
    index_path: Optional[str] = None
    errors_path: Optional[str] = None

    @property
    def converted(self) -> List[str]:
        return [result.source_path for result in self.results if result.ok]

    @property
    def errors(self) -> List[ConversionError]:
        return [result.error for result in self.results if result.error is not None]

    @property
    def failed_count(self) -> int:
        return len(self.errors)

    def report_text(self) -> str:
        """Error messages joined by the divider line."""
        return f"\n{ERROR_DIVIDER}\n".join(error.message for error in self.errors)
