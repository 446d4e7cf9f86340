"""
Durable catalog of downloaded papers backed by a JSON file and a PDF directory.
"""

import logging
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional

import httpx
from pydantic import ValidationError as RecordValidationError

from ..errors import FetchError, StorageError
from .files import (
    artifact_filename,
    format_file_size,
    read_json_file,
    write_json_file,
)
from .models import PaperRecord, StorageStats, StoredDocument

logger = logging.getLogger(__name__)

CATALOG_FILENAME = "metadata.json"


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _discard(path: Path):
    try:
        path.unlink(missing_ok=True)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not remove partial artifact {path}: {e}")


class ContentStore:
    """Owns the artifact directory and the id -> StoredDocument catalog.

    The catalog is held in memory and rewritten in full to ``metadata.json``
    after every mutation. All read-modify-persist sequences run under a single
    lock; network fetches happen outside it.
    """

    def __init__(
        self,
        storage_dir: str | Path,
        client: Optional[httpx.Client] = None,
        timeout: float = 60.0
    ):
        """Initialize content store.

        Args:
            storage_dir: Directory for PDFs and the catalog file
            client: HTTP client used for downloads (creates one if None)
            timeout: Request timeout in seconds for the default client
        """
        self.storage_dir = Path(storage_dir).resolve()
        self.catalog_path = self.storage_dir / CATALOG_FILENAME

        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)
        self._catalog: Dict[str, StoredDocument] = {}
        self._lock = threading.RLock()

    def initialize(self):
        """Create the storage directory and load the catalog from disk."""
        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Could not create storage directory {self.storage_dir}: {e}") from e

        with self._lock:
            self._load_catalog()

    def close(self):
        """Release the HTTP client if this store created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "ContentStore":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _load_catalog(self):
        data = read_json_file(self.catalog_path)
        if data is None:
            self._catalog = {}
            return

        try:
            self._catalog = {
                paper_id: StoredDocument.model_validate(record)
                for paper_id, record in data.items()
            }
        except RecordValidationError as e:
            raise StorageError(f"Malformed catalog entry in {self.catalog_path}: {e}") from e

        logger.info(f"Loaded metadata for {len(self._catalog)} papers")

    def _save_catalog(self):
        data = {paper_id: doc.to_catalog() for paper_id, doc in self._catalog.items()}
        write_json_file(self.catalog_path, data)

    def _fetch(self, url: str) -> bytes:
        logger.info(f"Downloading {url}")
        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise FetchError(
                f"Failed to download {url}: HTTP {status}",
                status_code=status
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to download {url}: {e}") from e
        return response.content

    def acquire(self, paper_id: str, fetch_url: str, metadata: PaperRecord) -> StoredDocument:
        """Download a paper unless a valid copy is already stored.

        Args:
            paper_id: Paper identifier used as the catalog key
            fetch_url: URL of the PDF
            metadata: Descriptive metadata stored alongside the artifact

        Returns:
            The catalog entry for the paper

        Raises:
            FetchError: If the download fails
            StorageError: If the artifact or catalog cannot be written
        """
        with self._lock:
            existing = self._catalog.get(paper_id)
            if existing is not None:
                if Path(existing.file_path).exists():
                    logger.info(f"Paper {paper_id} already downloaded")
                    return existing
                logger.info(f"Re-downloading paper {paper_id} (file not found)")

        content = self._fetch(fetch_url)

        file_path = self.storage_dir / artifact_filename(paper_id, metadata.title)
        with self._lock:
            try:
                file_path.write_bytes(content)
                file_size = file_path.stat().st_size
            except (OSError, ValueError) as e:
                _discard(file_path)
                logger.error(f"Error writing paper {paper_id} to {file_path}: {e}")
                raise StorageError(
                    f"Could not write {file_path}: {e}",
                    details={"paper_id": paper_id}
                ) from e

            document = StoredDocument(
                id=paper_id,
                title=metadata.title,
                authors=list(metadata.authors),
                download_date=_utc_timestamp(),
                file_path=str(file_path),
                file_size=file_size,
                categories=list(metadata.categories),
                abstract=metadata.abstract,
            )

            previous = self._catalog.get(paper_id)
            self._catalog[paper_id] = document
            try:
                self._save_catalog()
            except StorageError:
                if previous is None:
                    del self._catalog[paper_id]
                else:
                    self._catalog[paper_id] = previous
                # The catalog on disk never referenced the new artifact
                if previous is None or previous.file_path != str(file_path):
                    _discard(file_path)
                raise

        logger.info(f"Successfully downloaded paper {paper_id} ({format_file_size(file_size)})")
        return document

    def get(self, paper_id: str) -> Optional[StoredDocument]:
        """Return the entry for ``paper_id`` if it exists and its file is present."""
        with self._lock:
            document = self._catalog.get(paper_id)
        if document is None or not Path(document.file_path).exists():
            return None
        return document

    def list_documents(self) -> List[StoredDocument]:
        """List stored papers, dropping entries whose files have disappeared.

        The catalog is persisted once after the scan, and only when at least
        one entry was dropped.
        """
        with self._lock:
            remaining: Dict[str, StoredDocument] = {}

            for paper_id, document in self._catalog.items():
                if Path(document.file_path).exists():
                    remaining[paper_id] = document
                else:
                    logger.warning(f"Removing metadata for missing file: {document.file_path}")

            if len(remaining) != len(self._catalog):
                previous = self._catalog
                self._catalog = remaining
                try:
                    self._save_catalog()
                except StorageError:
                    self._catalog = previous
                    raise

            return list(remaining.values())

    def evict(self, paper_id: str) -> bool:
        """Delete a paper's artifact and catalog entry.

        Returns:
            True if the paper was removed, False if it was not in the catalog

        Raises:
            StorageError: If the artifact cannot be deleted; the catalog entry
                is kept in that case
        """
        with self._lock:
            document = self._catalog.get(paper_id)
            if document is None:
                return False

            try:
                Path(document.file_path).unlink(missing_ok=True)
            except OSError as e:
                logger.error(f"Error deleting paper {paper_id}: {e}")
                raise StorageError(
                    f"Could not delete {document.file_path}: {e}",
                    details={"paper_id": paper_id}
                ) from e

            del self._catalog[paper_id]
            self._save_catalog()

        logger.info(f"Deleted paper {paper_id}")
        return True

    def stats(self) -> StorageStats:
        """Count and size of the valid stored papers."""
        documents = self.list_documents()
        total_size = sum(doc.file_size for doc in documents)

        return StorageStats(
            total_papers=len(documents),
            total_size=total_size,
            formatted_size=format_file_size(total_size)
        )

    def cleanup_old(self, days_old: int) -> int:
        """Evict papers downloaded more than ``days_old`` days ago.

        Returns:
            Number of papers evicted
        """
        try:
            cutoff = datetime.now(timezone.utc) - timedelta(days=days_old)
        except OverflowError:
            # Older than any representable date: nothing qualifies
            cutoff = datetime.min.replace(tzinfo=timezone.utc)
        deleted_count = 0

        with self._lock:
            for document in self.list_documents():
                try:
                    downloaded_at = _parse_timestamp(document.download_date)
                except ValueError:
                    logger.warning(
                        f"Skipping {document.id}: unparseable download date {document.download_date!r}"
                    )
                    continue
                if downloaded_at < cutoff and self.evict(document.id):
                    deleted_count += 1

        logger.info(f"Cleaned up {deleted_count} papers older than {days_old} days")
        return deleted_count
