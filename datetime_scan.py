"""
Find date/time fragments embedded in arbitrary text.

A single alternation regex is built once from the fragment sources in `datetime_patterns.PATTERNS` (table order)
followed by `SEARCH_ONLY_FRAGMENTS`. It is run left to right over the text; every candidate span goes through a
boundary check (so IP addresses, version numbers and long digit runs are not picked up) and is then re-parsed with
`parse_date_time`, which has the final word.
"""

import logging
import re
from typing import Iterator, List, Optional

from datetime_patterns import PATTERNS, SEARCH_ONLY_FRAGMENTS, parse_date_time
from structured import DateTimeMatch, TextSegment

logger = logging.getLogger(__name__)

_SEARCH_RE = re.compile('|'.join(
    [p.fragment for p in PATTERNS if p.fragment is not None] + list(SEARCH_ONLY_FRAGMENTS)
))

_CN_MARKERS_RE = re.compile(r'[年月日]')
_SHORT_TIME_RE = re.compile(r'\d{1,2}:\d{2}')


def _should_skip(text, match_text, start, end):
    """Boundary rules for a candidate span text[start:end]."""
    before = text[start - 1] if start > 0 else ''
    after = text[end] if end < len(text) else ''

    # 2024年1月15日 may sit right next to other digits in Chinese prose
    if not _CN_MARKERS_RE.search(match_text):
        if before.isdecimal() or after.isdecimal():
            return True

    if _SHORT_TIME_RE.fullmatch(match_text):
        if before in (':', '.'):        # 192.168.1:30, v1.2:30
            return True
        if after == ':':
            return True

    return False


def _iter_matches(text) -> Iterator[DateTimeMatch]:
    for m in _SEARCH_RE.finditer(text):
        start, end = m.span()
        match_text = m.group(0)

        if _should_skip(text, match_text, start, end):
            logger.debug("skipping %r at %d: boundary", match_text, start)
            continue

        info = parse_date_time(match_text)
        if info is None:
            logger.debug("skipping %r at %d: does not parse", match_text, start)
            continue

        yield DateTimeMatch(start=start, end=end, text=match_text, info=info)


def find_date_times(text: str) -> List[DateTimeMatch]:
    """All embedded date/time spans in *text*, in text order, non-overlapping."""
    if not text:
        return []
    return list(_iter_matches(text))


def has_date_time(text: str) -> bool:
    """Same scan as `find_date_times` but stops at the first verified span."""
    if not text:
        return False
    return next(_iter_matches(text), None) is not None


def split_segments(text: str, matches: Optional[List[DateTimeMatch]] = None) -> List[TextSegment]:
    """
    Cut *text* into plain and date/time segments for highlighting.

    `matches` defaults to `find_date_times(text)`; joining the segment texts gives back *text*.
    """
    if not text:
        return []
    if matches is None:
        matches = find_date_times(text)

    segments = []
    last_end = 0
    for i, match in enumerate(matches):
        if match.start > last_end:
            segments.append(TextSegment(text=text[last_end:match.start]))
        segments.append(TextSegment(text=text[match.start:match.end], is_date_time=True, match_index=i))
        last_end = match.end

    if last_end < len(text):
        segments.append(TextSegment(text=text[last_end:]))

    return segments
