"""
Runtime configuration loaded from environment variables.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .errors import ValidationError

DEFAULT_STORAGE_DIR = "storage"
DEFAULT_FETCH_TIMEOUT = 60.0


@dataclass
class Settings:
    """Settings shared by the corpus service and the CLI.

    Attributes:
        storage_dir: Directory holding downloaded PDFs and the catalog file
        fetch_timeout: HTTP timeout in seconds for artifact downloads
        debug: Enables debug logging
    """

    storage_dir: Path = Path(DEFAULT_STORAGE_DIR)
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``PAPERSHELF_*`` environment variables."""
        env = os.environ if environ is None else environ

        raw_timeout = env.get("PAPERSHELF_FETCH_TIMEOUT", str(DEFAULT_FETCH_TIMEOUT))
        try:
            fetch_timeout = float(raw_timeout)
        except ValueError as e:
            raise ValidationError(
                f"PAPERSHELF_FETCH_TIMEOUT must be a number, got {raw_timeout!r}"
            ) from e
        if fetch_timeout <= 0:
            raise ValidationError("PAPERSHELF_FETCH_TIMEOUT must be positive")

        return cls(
            storage_dir=Path(env.get("PAPERSHELF_STORAGE_DIR", DEFAULT_STORAGE_DIR)),
            fetch_timeout=fetch_timeout,
            debug=env.get("PAPERSHELF_DEBUG", "").lower() in ("1", "true", "yes"),
        )
