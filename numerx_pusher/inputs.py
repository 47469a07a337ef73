"""
Input file selection for an upload run.
"""

from __future__ import annotations

from pathlib import Path

from numerx_pusher.errors import ConfigurationError

CSV_EXTENSION = ".csv"


def is_csv_file(path: Path) -> bool:
    return path.is_file() and path.suffix == CSV_EXTENSION


def collect_input_files(*, filename: str | None, directory: str | None) -> list[str]:
    """
    Resolve the files to upload.

    A directory takes precedence over a single file when both are given; it
    is walked recursively for ``*.csv`` files. A single file is passed
    through unchecked so that an unreadable path is reported as a failed
    job rather than aborting the run.
    """

    if directory:
        root = Path(directory)
        if not root.is_dir():
            raise ConfigurationError([f"Working directory '{directory}' does not exist or is not a directory."])
        return sorted(str(path) for path in root.rglob("*") if is_csv_file(path))

    if filename:
        return [filename]

    raise ConfigurationError(["Input file name or working directory is not provided."])
