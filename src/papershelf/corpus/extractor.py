"""
PDF text extraction using pdfminer.six.
"""

import io
import logging
from pathlib import Path

from pdfminer.high_level import extract_text
from pdfminer.layout import LAParams

from ..errors import DecodeError, StorageError

logger = logging.getLogger(__name__)


class PDFExtractor:
    """Extracts plain text from PDF bytes."""

    def __init__(self, preserve_layout: bool = True):
        """Initialize PDF extractor.

        Args:
            preserve_layout: Whether to run layout analysis so text keeps its
                line structure (needed for heading detection)
        """
        self.preserve_layout = preserve_layout
        self.laparams = LAParams(
            boxes_flow=0.5,
            word_margin=0.1,
            char_margin=2.0,
            line_margin=0.5
        ) if preserve_layout else None

    def extract_text(self, data: bytes) -> str:
        """Extract the text content of a PDF.

        Args:
            data: Raw PDF bytes

        Returns:
            Extracted text with one line per text line

        Raises:
            DecodeError: If the bytes cannot be parsed as a PDF
        """
        if not data:
            raise DecodeError("PDF content is empty")

        try:
            text = extract_text(io.BytesIO(data), laparams=self.laparams)
        except Exception as e:
            logger.error(f"Failed to extract text from PDF: {e}")
            raise DecodeError(f"Failed to read PDF content: {e}") from e

        logger.debug(f"Extracted {len(text)} characters")
        return text

    def extract_file_text(self, pdf_path: str | Path) -> str:
        """Read a PDF from disk and extract its text.

        Raises:
            StorageError: If the file cannot be read
            DecodeError: If the content cannot be parsed
        """
        pdf_path = Path(pdf_path)
        try:
            data = pdf_path.read_bytes()
        except OSError as e:
            logger.error(f"Error reading PDF {pdf_path}: {e}")
            raise StorageError(f"Could not read {pdf_path}: {e}", details={"path": str(pdf_path)}) from e

        return self.extract_text(data)
