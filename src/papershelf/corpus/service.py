"""
Corpus service: acquire, list, evict, read and search stored papers.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol, Union

from pydantic import ValidationError as RecordValidationError

from ..errors import NotDownloadedError, ValidationError
from .extractor import PDFExtractor
from .models import PaperContent, PaperRecord, SectionMatches, StorageStats, StoredDocument
from .search import SearchEngine
from .segmenter import SectionSegmenter
from .store import ContentStore

logger = logging.getLogger(__name__)


class MetadataClient(Protocol):
    """Remote metadata source that resolves a paper id to its record."""

    def get_paper(self, paper_id: str) -> Union[PaperRecord, Dict[str, Any]]:
        """Return title, authors, categories, abstract and pdfUrl for a paper."""
        ...


class CorpusService:
    """Composes the content store, PDF extractor, segmenter and search engine."""

    def __init__(
        self,
        store: ContentStore,
        extractor: Optional[PDFExtractor] = None,
        segmenter: Optional[SectionSegmenter] = None,
        search_engine: Optional[SearchEngine] = None,
        metadata_client: Optional[MetadataClient] = None
    ):
        """Initialize corpus service.

        Args:
            store: ContentStore instance
            extractor: PDFExtractor instance (creates default if None)
            segmenter: SectionSegmenter instance (creates default if None)
            search_engine: SearchEngine instance (creates default if None)
            metadata_client: Used by :meth:`acquire` when no record is given
        """
        self.store = store
        self.extractor = extractor or PDFExtractor()
        self.segmenter = segmenter or SectionSegmenter()
        self.search_engine = search_engine or SearchEngine()
        self.metadata_client = metadata_client

    def initialize(self):
        self.store.initialize()

    def close(self):
        self.store.close()

    def __enter__(self) -> "CorpusService":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @staticmethod
    def _require_id(paper_id: str) -> str:
        if not paper_id or not paper_id.strip():
            raise ValidationError("Paper id must not be empty")
        return paper_id.strip()

    def _resolve_record(
        self,
        paper_id: str,
        record: Union[PaperRecord, Dict[str, Any], None]
    ) -> PaperRecord:
        if record is None:
            if self.metadata_client is None:
                raise ValidationError(
                    f"No metadata supplied for {paper_id} and no metadata client configured"
                )
            record = self.metadata_client.get_paper(paper_id)

        if isinstance(record, PaperRecord):
            return record
        try:
            return PaperRecord.model_validate(record)
        except RecordValidationError as e:
            raise ValidationError(f"Invalid metadata for {paper_id}: {e}") from e

    def acquire(
        self,
        paper_id: str,
        record: Union[PaperRecord, Dict[str, Any], None] = None
    ) -> StoredDocument:
        """Download a paper into the local corpus.

        Args:
            paper_id: Paper identifier
            record: Paper metadata; fetched from the metadata client if None

        Returns:
            Catalog entry for the stored paper

        Raises:
            ValidationError: If the id is empty or the record has no PDF URL
            FetchError: If the download fails
            StorageError: If the artifact or catalog cannot be written
        """
        paper_id = self._require_id(paper_id)
        record = self._resolve_record(paper_id, record)

        if not record.pdf_url:
            raise ValidationError(f"No PDF URL available for paper {paper_id}")

        return self.store.acquire(paper_id, record.pdf_url, record)

    def list_documents(self) -> List[StoredDocument]:
        return self.store.list_documents()

    def evict(self, paper_id: str) -> bool:
        return self.store.evict(self._require_id(paper_id))

    def stats(self) -> StorageStats:
        return self.store.stats()

    def cleanup_old(self, days_old: int) -> int:
        if days_old < 0:
            raise ValidationError("days_old must not be negative")
        return self.store.cleanup_old(days_old)

    def read(self, paper_id: str) -> PaperContent:
        """Extract and segment the text of a stored paper.

        Raises:
            ValidationError: If the id is empty
            NotDownloadedError: If the paper has no valid catalog entry
            StorageError: If the artifact cannot be read
            DecodeError: If the PDF cannot be parsed
        """
        paper_id = self._require_id(paper_id)
        document = self.store.get(paper_id)
        if document is None:
            raise NotDownloadedError(paper_id)

        full_text = self.extractor.extract_file_text(document.file_path)
        sections = self.segmenter.segment(full_text)

        logger.info(f"Read paper {paper_id}: {len(full_text)} characters, {len(sections)} sections")
        return PaperContent(
            id=document.id,
            title=document.title,
            sections=sections,
            full_text=full_text
        )

    def read_section(self, paper_id: str, section: str) -> Optional[str]:
        """Return the body of one section, or None if it was not detected."""
        content = self.read(paper_id)
        return content.sections.get(section.lower())

    def search(
        self,
        paper_id: str,
        term: str,
        case_sensitive: bool = False
    ) -> List[SectionMatches]:
        """Search the sections of a stored paper.

        Raises:
            ValidationError: If the id or term is invalid
            NotDownloadedError: If the paper has no valid catalog entry
        """
        paper_id = self._require_id(paper_id)
        if not term:
            raise ValidationError("Search term must not be empty")

        content = self.read(paper_id)
        return self.search_engine.search(content.sections, term, case_sensitive)

    def citations(self, paper_id: str) -> List[str]:
        """Extract references and DOIs from a stored paper."""
        content = self.read(paper_id)
        return self.segmenter.extract_citations(content.sections, content.full_text)
