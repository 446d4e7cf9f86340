"""
Record types for the paper corpus.

Persisted and externally supplied records are pydantic models so the catalog
file keeps its camelCase field names; per-query results are plain dataclasses.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from pydantic import BaseModel, Field


class PaperRecord(BaseModel):
    """Descriptive metadata for a paper as returned by the metadata client."""
    title: str
    authors: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    abstract: str = ""
    pdf_url: str = Field("", alias="pdfUrl")

    model_config = {"populate_by_name": True}


class StoredDocument(BaseModel):
    """Catalog entry for a downloaded paper."""
    id: str
    title: str
    authors: List[str] = Field(default_factory=list)
    download_date: str = Field(..., alias="downloadDate", description="ISO-8601 timestamp")
    file_path: str = Field(..., alias="filePath", description="Absolute artifact path")
    file_size: int = Field(..., alias="fileSize", ge=0)
    categories: List[str] = Field(default_factory=list)
    abstract: str = ""

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "id": "2301.00001",
                "title": "An Example Paper",
                "authors": ["Ada Lovelace"],
                "downloadDate": "2024-01-01T12:00:00.000Z",
                "filePath": "/data/storage/2301.00001_An_Example_Paper.pdf",
                "fileSize": 123456,
                "categories": ["cs.AI"],
                "abstract": "We study examples."
            }
        }
    }

    def to_catalog(self) -> Dict[str, object]:
        """Serialize with the catalog's field names."""
        return self.model_dump(by_alias=True)


@dataclass
class StorageStats:
    """Aggregate size of the local corpus."""
    total_papers: int
    total_size: int
    formatted_size: str


@dataclass
class SearchMatch:
    """A single match with its surrounding context."""
    text: str
    position: int


@dataclass
class SectionMatches:
    """All matches found in one section, ordered by position."""
    section: str
    matches: List[SearchMatch] = field(default_factory=list)


@dataclass
class PaperContent:
    """Extracted and segmented text of a stored paper."""
    id: str
    title: str
    sections: Dict[str, str]
    full_text: str
