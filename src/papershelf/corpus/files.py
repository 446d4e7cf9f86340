"""
Filesystem helpers: artifact naming, catalog JSON IO and size formatting.
"""

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

from ..errors import StorageError

logger = logging.getLogger(__name__)

MAX_FILENAME_LENGTH = 200

_ILLEGAL_CHARS = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE = re.compile(r'\s+')
_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f]')
_REPEATED_UNDERSCORES = re.compile(r'_{2,}')

_ARXIV_URL_PATTERNS = [
    re.compile(r'arxiv\.org/abs/(\d{4}\.\d{4,5})'),
    re.compile(r'arxiv\.org/pdf/(\d{4}\.\d{4,5})'),
    re.compile(r'arxiv\.org/abs/([a-z-]+/\d{7})'),
    re.compile(r'arxiv\.org/pdf/([a-z-]+/\d{7})'),
]


def sanitize_filename(filename: str) -> str:
    """Make a string safe to use as part of a filename."""
    filename = _ILLEGAL_CHARS.sub('_', filename)
    filename = _WHITESPACE.sub('_', filename)
    filename = _CONTROL_CHARS.sub('', filename)
    filename = _REPEATED_UNDERSCORES.sub('_', filename)
    return filename[:MAX_FILENAME_LENGTH]


def artifact_filename(paper_id: str, title: str) -> str:
    """Build the on-disk PDF name for a paper.

    Args:
        paper_id: Paper identifier, e.g. ``2301.00001`` or ``hep-th/9901001``
        title: Paper title

    Returns:
        ``{id}_{sanitized title}.pdf`` with slashes in the id replaced
    """
    return f"{paper_id.replace('/', '_')}_{sanitize_filename(title)}.pdf"


def arxiv_id_from_url(url: str) -> Optional[str]:
    """Extract an arXiv identifier from an abs/pdf URL, if there is one."""
    for pattern in _ARXIV_URL_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def format_file_size(size_bytes: int) -> str:
    """Format a byte count as a human readable string (e.g. ``2.00 KB``)."""
    units = ["B", "KB", "MB", "GB"]
    size = float(size_bytes)
    unit_index = 0

    while size >= 1024 and unit_index < len(units) - 1:
        size /= 1024
        unit_index += 1

    return f"{size:.2f} {units[unit_index]}"


def read_json_file(path: Path) -> Optional[Dict[str, Any]]:
    """Read a JSON object from disk.

    Returns:
        Parsed object, or None if the file does not exist

    Raises:
        StorageError: If the file exists but cannot be read or parsed
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.error(f"Error reading JSON file {path}: {e}")
        raise StorageError(f"Could not read {path}: {e}", details={"path": str(path)}) from e

    if not isinstance(data, dict):
        raise StorageError(f"Expected a JSON object in {path}", details={"path": str(path)})
    return data


def write_json_file(path: Path, data: Dict[str, Any]) -> None:
    """Atomically replace ``path`` with ``data`` serialized as JSON.

    The content is written to a temporary sibling, fsynced and renamed over
    the destination so readers never observe a partially written file.

    Raises:
        StorageError: If the file cannot be written
    """
    path = Path(path)
    tmp = path.with_name(path.name + f".tmp-{os.getpid()}")

    try:
        with open(tmp, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        logger.error(f"Error writing JSON file {path}: {e}")
        raise StorageError(f"Could not write {path}: {e}", details={"path": str(path)}) from e
