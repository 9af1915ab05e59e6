"""Testpad Converter - exported Testpad CSV files to tab-indented TXT files."""

from .converter import convert, convert_file, scan_sources
from .errors import ConvertException, SetupError
from .prefix import PrefixConstructor
from .schemas import ConversionError, ConversionReport, ConvertOptions, FileResult, OutlineEntry

__version__ = "0.1.0"

__all__ = [
    "convert",
    "convert_file",
    "scan_sources",
    "ConvertException",
    "SetupError",
    "PrefixConstructor",
    "ConversionError",
    "ConversionReport",
    "ConvertOptions",
    "FileResult",
    "OutlineEntry",
]
