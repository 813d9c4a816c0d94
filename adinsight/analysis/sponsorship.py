"""
Sponsorship detection from video descriptions and tags.

Detection is keyword and regex based:
1. Indicator phrases in the description (with the matching sentences kept
   as details and mined for brand names)
2. Indicator phrases in tags, plus capitalized tags as brand candidates
3. A "<time> - <time> sponsor" style timestamp marking the ad segment
"""

import logging
import re
from typing import Iterable, List, Optional

from ..core.config import DetectionRules
from ..core.models import SponsorshipInfo
from .brands import extract_brands
from .timestamps import parse_timestamp

logger = logging.getLogger(__name__)

AD_TIMESTAMP = re.compile(
    r'(\d+:?\d*)\s*-?\s*(\d+:?\d*)?\s*(ad|sponsor|promotion|sponsored)',
    re.IGNORECASE,
)

SENTENCE_BOUNDARY = re.compile(r'[.!?]+')

TAG_BRAND = re.compile(r'^[A-Z]')

TIMESTAMP_INDICATOR = 'timestamp indicator'


class _OrderedSet:
    """Insertion-ordered set used to accumulate indicators and brands."""

    def __init__(self):
        self._seen = set()
        self._items: List[str] = []

    def add(self, item: str) -> None:
        if item not in self._seen:
            self._seen.add(item)
            self._items.append(item)

    def update(self, items: Iterable[str]) -> None:
        for item in items:
            self.add(item)

    def __contains__(self, item: str) -> bool:
        return item in self._seen

    def to_list(self) -> List[str]:
        return list(self._items)


class SponsorshipDetector:
    """
    Scans descriptions and tags for paid-promotion signals.

    Stateless apart from its injected rules: the same inputs always
    produce the same SponsorshipInfo.
    """

    def __init__(self, rules: Optional[DetectionRules] = None):
        self.rules = rules or DetectionRules()

    def detect(self, description: Optional[str], tags: Optional[Iterable[str]]) -> SponsorshipInfo:
        """
        Detect sponsorship signals.

        Args:
            description: Raw video description
            tags: Video tags in platform order

        Returns:
            SponsorshipInfo with deduplicated indicators and brands
        """
        description = description or ''
        tags = list(tags or [])

        has_sponsorship = False
        details: List[str] = []
        indicators = _OrderedSet()
        brands = _OrderedSet()
        ad_duration = None

        description_lower = description.lower()
        if description:
            sentences = SENTENCE_BOUNDARY.split(description)
            for phrase in self.rules.sponsor_indicators:
                if phrase not in description_lower:
                    continue

                has_sponsorship = True
                for sentence in sentences:
                    if phrase in sentence.lower():
                        details.append(f"{sentence.strip()}. ")
                        brands.update(extract_brands(sentence))
                indicators.add(phrase)

        for tag in tags:
            tag_lower = tag.lower()
            for phrase in self.rules.sponsor_indicators:
                if phrase in tag_lower and phrase not in indicators:
                    has_sponsorship = True
                    indicators.add(phrase)

            # Capitalized tags longer than 3 chars are brand candidates
            if len(tag) > 3 and TAG_BRAND.match(tag):
                brands.add(tag)

        match = AD_TIMESTAMP.search(description) if description else None
        if match:
            has_sponsorship = True
            indicators.add(TIMESTAMP_INDICATOR)
            start_text, end_text = match.group(1), match.group(2)
            details.append(f"Ad segment detected at {start_text}. ")

            if end_text:
                ad_duration = self._segment_duration(start_text, end_text)

        return SponsorshipInfo(
            has_sponsorship=has_sponsorship,
            sponsorship_details=''.join(details).strip(),
            ad_indicators=indicators.to_list(),
            detected_brands=brands.to_list(),
            ad_duration=ad_duration,
        )

    @staticmethod
    def _segment_duration(start_text: str, end_text: str) -> Optional[int]:
        start = parse_timestamp(start_text)
        end = parse_timestamp(end_text)
        if start is None or end is None:
            return None

        duration = end - start
        if duration < 0:
            logger.debug(f"Ignoring ad segment {start_text}-{end_text}: end precedes start")
            return None
        return duration


def detect_sponsorship(
    description: Optional[str],
    tags: Optional[Iterable[str]],
    rules: Optional[DetectionRules] = None
) -> SponsorshipInfo:
    """Convenience wrapper around SponsorshipDetector.detect."""
    return SponsorshipDetector(rules).detect(description, tags)
