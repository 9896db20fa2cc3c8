"""Utility functions for CLI operations."""

import os
import posixpath
import sys
from pathlib import Path
from typing import Iterable, Sequence, TextIO

from cli.constants import GREEN, RESET


class UploadProgress:
    """Progress callback that writes upload progress for one file to a stream."""

    def __init__(self, display_name: str, stream: TextIO = sys.stdout):
        """
        Initialize the progress display.

        Args:
            display_name: Name shown for the file being uploaded
            stream: Output stream (stdout by default)
        """
        self.display_name = display_name
        self.stream = stream

    def __call__(self, sent: int, total: int) -> None:
        progress = (sent / total) * 100 if total else 100.0
        self.stream.write(
            f"\rUploading {self.display_name}: {format_file_size(sent)} / {format_file_size(total)} "
            f"({GREEN}{progress:.1f}%{RESET})"
        )
        if sent >= total:
            self.stream.write('\n')
        self.stream.flush()


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"


def format_table(headers: Sequence[str], rows: Iterable[Sequence[object]]) -> str:
    """
    Render rows as a left-aligned, fixed-width text table.

    Args:
        headers: Column titles
        rows: Row values; each is converted with str()

    Returns:
        Table text with a header line and a dashed separator
    """
    text_rows = [[str(value) for value in row] for row in rows]
    widths = [len(h) for h in headers]
    for row in text_rows:
        for i, value in enumerate(row):
            widths[i] = max(widths[i], len(value))

    def render(values: Sequence[str]) -> str:
        return "  ".join(value.ljust(widths[i]) for i, value in enumerate(values)).rstrip()

    lines = [render(headers), render(["-" * w for w in widths])]
    lines.extend(render(row) for row in text_rows)
    return "\n".join(lines)


def collect_upload_targets(local_paths: Iterable[str], prefix: str = "") -> list[tuple[str, str]]:
    """
    Expand local files and directories into (local_path, remote_path) pairs.

    A plain file maps to prefix/<basename>. A directory is walked recursively in
    sorted order, skipping hidden entries, and each file maps to
    prefix/<dirname>/<path relative to the directory>.

    Args:
        local_paths: Files and directories given on the command line
        prefix: Remote directory to place files under

    Returns:
        List of (local_path, remote_path) tuples

    Raises:
        FileNotFoundError: If a path does not exist
    """
    base = "/" + prefix.strip("/") if prefix.strip("/") else ""
    targets = []

    for local in local_paths:
        path = Path(local)
        if path.is_file():
            targets.append((str(path), posixpath.join(base or "/", path.name)))
        elif path.is_dir():
            root_name = path.resolve().name
            for dirpath, dirnames, filenames in os.walk(path):
                dirnames[:] = sorted(d for d in dirnames if not d.startswith('.'))
                for filename in sorted(filenames):
                    if filename.startswith('.'):
                        continue
                    file_path = Path(dirpath) / filename
                    relative = file_path.relative_to(path).as_posix()
                    targets.append((str(file_path), posixpath.join(base or "/", root_name, relative)))
        else:
            raise FileNotFoundError(f"No such file or directory: {local}")

    return targets
