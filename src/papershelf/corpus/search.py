"""
Positional search over segmented paper text.
"""

import re
import logging
from typing import List, Mapping

from ..errors import ValidationError
from .models import SearchMatch, SectionMatches

logger = logging.getLogger(__name__)

CONTEXT_CHARS = 50


class SearchEngine:
    """Finds occurrences of a pattern in each section of a paper."""

    def __init__(self, context_chars: int = CONTEXT_CHARS):
        """Initialize search engine.

        Args:
            context_chars: Characters of context kept on each side of a match
        """
        self.context_chars = context_chars

    def search(
        self,
        sections: Mapping[str, str],
        term: str,
        case_sensitive: bool = False
    ) -> List[SectionMatches]:
        """Search every non-empty section for ``term``.

        ``term`` is used as a regular expression, so metacharacters keep their
        meaning. Each match carries a context window of ``context_chars``
        before the match start and ``context_chars + len(term)`` after it,
        clamped to the section.

        Args:
            sections: Section name -> body text
            term: Pattern to search for
            case_sensitive: Whether matching is case sensitive

        Returns:
            One entry per section with at least one match, in section order

        Raises:
            ValidationError: If ``term`` is empty or not a valid pattern
        """
        if not term:
            raise ValidationError("Search term must not be empty")

        flags = 0 if case_sensitive else re.IGNORECASE
        try:
            pattern = re.compile(term, flags)
        except re.error as e:
            raise ValidationError(f"Invalid search pattern {term!r}: {e}") from e

        results = []
        for section_name, content in sections.items():
            if not content:
                continue

            matches = []
            for match in pattern.finditer(content):
                if match.end() == match.start():
                    continue
                position = match.start()
                start = max(0, position - self.context_chars)
                end = min(len(content), position + len(term) + self.context_chars)
                matches.append(SearchMatch(text=content[start:end], position=position))

            if matches:
                results.append(SectionMatches(section=section_name, matches=matches))

        total = sum(len(r.matches) for r in results)
        logger.debug(f"Found {total} matches for {term!r} in {len(results)} sections")
        return results
