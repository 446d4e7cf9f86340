"""
Local research paper corpus.

This module provides functionality for downloading papers, keeping a durable
catalog of them, segmenting their text into sections and searching it.
"""

from .store import ContentStore
from .extractor import PDFExtractor
from .segmenter import SectionSegmenter
from .search import SearchEngine
from .service import CorpusService, MetadataClient

__all__ = [
    "ContentStore",
    "PDFExtractor",
    "SectionSegmenter",
    "SearchEngine",
    "CorpusService",
    "MetadataClient",
]
