"""Shared fixtures for Testpad Converter tests."""

import pytest


@pytest.fixture
def write_csv():
    """Write CP866-encoded lines to a file, creating parent folders."""
    def _write(path, lines):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("".join(line + "\n" for line in lines), encoding="cp866")
        return path
    return _write
