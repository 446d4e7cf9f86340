"""
Heuristic segmentation of extracted paper text into canonical sections.
"""

import re
import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# Heading patterns per canonical section, tried in this order for every line.
# Patterns are matched case-insensitively against the stripped line.
SECTION_PATTERNS: List[Tuple[str, List[str]]] = [
    ("abstract", [r"^abstract\s*$", r"^summary\s*$"]),
    ("introduction", [r"^introduction\s*$", r"^1\.\s*introduction"]),
    ("methodology", [
        r"^methodology\s*$",
        r"^methods\s*$",
        r"^approach\s*$",
        r"^\d+\.?\s*(?:methodology|methods|approach)\s*$",
    ]),
    ("results", [
        r"^results\s*$",
        r"^findings\s*$",
        r"^experiments\s*$",
        r"^\d+\.?\s*(?:results|findings|experiments)\s*$",
    ]),
    ("discussion", [
        r"^discussion\s*$",
        r"^analysis\s*$",
        r"^\d+\.?\s*(?:discussion|analysis)\s*$",
    ]),
    ("conclusion", [r"^conclusions?\s*$", r"^\d+\.?\s*conclusions?\s*$"]),
    ("references", [r"^references\s*$", r"^bibliography\s*$"]),
]

CANONICAL_SECTIONS = [name for name, _ in SECTION_PATTERNS]

# Inline "Abstract: ..." paragraphs that the line scan cannot see as a heading
ABSTRACT_FALLBACK = re.compile(
    r"abstract[:\s]*(.+?)(?=\n\s*\n|\nintroduction|\n1\.|keywords)",
    re.IGNORECASE | re.DOTALL
)

CITATION_PATTERNS = [
    re.compile(r"^\s*\[\d+\]\s+(.+?)(?=\s*^\s*\[\d+\]|\Z)", re.MULTILINE | re.DOTALL),
    re.compile(r"^\d+\.\s+(.+?)(?=^\d+\.|\Z)", re.MULTILINE | re.DOTALL),
    re.compile(r"^(.+?)\s*\(\d{4}\)", re.MULTILINE),
]
DOI_PATTERN = re.compile(r"10\.\d{4,}/[-._;()/:a-zA-Z0-9]+")

MIN_CITATION_LENGTH = 10
MAX_CITATION_LENGTH = 500


class SectionSegmenter:
    """Splits raw paper text into a section name -> body mapping.

    Segmentation is a single forward pass over the lines. A line matching a
    heading pattern closes the current section and opens a new one; other
    lines are appended to the open section. Lines before the first heading
    are dropped.
    """

    def __init__(self, extra_sections: Optional[Mapping[str, Sequence[str]]] = None):
        """Initialize segmenter.

        Args:
            extra_sections: Additional section name -> heading patterns,
                tried after the canonical sections
        """
        table = list(SECTION_PATTERNS)
        if extra_sections:
            table.extend((name.lower(), list(patterns)) for name, patterns in extra_sections.items())

        self._table: List[Tuple[str, List[re.Pattern]]] = [
            (name, [re.compile(p, re.IGNORECASE) for p in patterns])
            for name, patterns in table
        ]

    @property
    def section_names(self) -> List[str]:
        return [name for name, _ in self._table]

    def match_heading(self, line: str) -> Optional[str]:
        """Return the section name a line introduces, or None."""
        candidate = line.strip()
        if not candidate:
            return None

        for name, patterns in self._table:
            if any(pattern.match(candidate) for pattern in patterns):
                return name
        return None

    def segment(self, text: str) -> Dict[str, str]:
        """Segment text into sections.

        Args:
            text: Raw text extracted from a paper

        Returns:
            Mapping of section name to body text in document order; empty if
            no heading was recognised
        """
        sections: Dict[str, str] = {}
        current_section: Optional[str] = None
        current_lines: List[str] = []

        def flush():
            if current_section and current_lines:
                body = "\n".join(current_lines).strip()
                if body:
                    sections[current_section] = body

        for line in text.split("\n"):
            heading = self.match_heading(line)
            if heading is not None:
                flush()
                current_section = heading
                current_lines = []
            elif current_section is not None:
                current_lines.append(line)

        flush()

        if "abstract" not in sections:
            match = ABSTRACT_FALLBACK.search(text)
            if match and match.group(1).strip():
                sections["abstract"] = match.group(1).strip()
                logger.debug("Abstract recovered from inline label")

        logger.debug(f"Segmented text into sections: {list(sections)}")
        return sections

    def extract_citations(self, sections: Mapping[str, str], full_text: str) -> List[str]:
        """Collect reference strings and DOIs from a segmented paper.

        Args:
            sections: Output of :meth:`segment`
            full_text: Text the sections were derived from, scanned for DOIs

        Returns:
            Unique citations in first-seen order
        """
        citations: Dict[str, None] = {}
        references = sections.get("references", "")

        for pattern in CITATION_PATTERNS:
            for match in pattern.finditer(references):
                citation = " ".join(match.group(1).split())
                if MIN_CITATION_LENGTH < len(citation) < MAX_CITATION_LENGTH:
                    citations.setdefault(citation)

        for match in DOI_PATTERN.finditer(full_text):
            citations.setdefault(f"DOI: {match.group(0)}")

        return list(citations)
