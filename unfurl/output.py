"""
Output sinks for formatted lines.
"""
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

logger = logging.getLogger(__name__)


def write_lines(lines: List[str], stream: Optional[TextIO] = None):
    """Write lines verbatim, one per row."""
    stream = stream or sys.stdout
    for line in lines:
        stream.write(f"{line}\n")


def insert_lines(path: Path, lines: List[str], after: Optional[int] = None) -> bool:
    """
    Insert lines into a text file.

    Args:
        path: File to modify (created if missing)
        lines: Lines to insert
        after: 1-based line number to insert after; 0 inserts at the top,
            None appends at the end

    Returns:
        True if the file was written
    """
    if not lines:
        logger.info("No lines to insert.")
        return False

    path = Path(path)
    existing: List[str] = []
    if path.exists():
        existing = path.read_text(encoding="utf-8").splitlines()

    if after is None or after > len(existing):
        position = len(existing)
    else:
        position = max(after, 0)

    updated = existing[:position] + list(lines) + existing[position:]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(updated) + "\n", encoding="utf-8")
    logger.info(f"Inserted {len(lines)} lines into {path}")
    return True
