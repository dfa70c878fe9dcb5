"""
========================================================================================================================
`datetime_patterns` – the table of date/time notations recognised in clipboard text
========================================================================================================================

Goal
----
Decide whether a (trimmed) piece of text *is* a date, a time or a date-time, and if so turn it into a `datetime`.

Every notation is declared exactly once, as a `DateTimePattern`:

•  `anchored` – a full-match regex used to validate and capture.
•  `fragment` – the same notation as an unanchored regex source, used by `datetime_scan` to build one combined
   search alternation.  `None` means the notation is never searched for inside larger text.
•  `has_date` / `has_time` – what the notation carries.
•  `parse` – turns the anchored match into a `datetime`, or `None` when the captured values are not a real
   calendar instant.

Table order (most specific → least specific)
--------------------------------------------
 1. ISO date-time            2024-01-15T14:30:00Z, 2024-01-15 14:30:00.123+08:00
 2. ISO date                 2024-01-15
 3. Slash date-time          2024/01/15 14:30[:00]
 4. Slash date               2024/01/15
 5. Dot date-time            2024.01.15 14:30[:00]
 6. Dot date                 2024.01.15
 7. Chinese date-time        2024年1月15日 下午2:30
 8. Chinese date             2024年1月15日
 9. Weekday + Chinese date   星期一 2024年1月15日 [14:30]            (anchored only)
10. English month name       Jan 15, 2024 [2:30 PM]                  (anchored only)
11. Bare time                14:30, 14:30:00, 2:30 PM               (anchored only, see SEARCH_ONLY_FRAGMENTS)
12. Unix seconds             1700000000                              (anchored only)
13. Unix milliseconds        1700000000000                           (anchored only)

The scanner concatenates fragments in table order and the regex engine takes the first alternative that matches at
a given offset, so a longer notation must come before any notation that is a prefix of it.

Key rules
---------
1. **No clamping** – `2024-02-30`, month 13, `25:00` or `14:60` fail; they never roll over into the next unit.
2. **First anchored hit decides** – if a pattern's anchored regex accepts the text but the values are not a valid
   instant, the lookup stops there and returns `None`.
3. **Zones are literal** – `Z` / `±HH:MM` produce an aware `datetime`; anything else stays naive local time.
4. **Sub-seconds are dropped** – `.123` is accepted but not kept.
5. **Timestamps are range-checked** – 2001-01-01 … 2099-12-31 so that phone numbers and codes are not read as dates.

Dependencies
------------
Only `re` and `datetime`; the records themselves are pydantic models from `structured`.
"""

import logging
import re
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from structured import DateTimePattern, ParsedDateTime

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------
MAX_TEXT_LENGTH = 100

TS_MIN_SEC = 978_307_200        # 2001-01-01T00:00:00Z
TS_MAX_SEC = 4_102_358_400      # 2099-12-31T00:00:00Z
TS_MIN_MS = TS_MIN_SEC * 1000
TS_MAX_MS = TS_MAX_SEC * 1000

_MONTHS = {k: v for names, v in [
    (['january', 'jan'], 1),
    (['february', 'feb'], 2),
    (['march', 'mar'], 3),
    (['april', 'apr'], 4),
    (['may'], 5),
    (['june', 'jun'], 6),
    (['july', 'jul'], 7),
    (['august', 'aug'], 8),
    (['september', 'sep'], 9),
    (['october', 'oct'], 10),
    (['november', 'nov'], 11),
    (['december', 'dec'], 12),
] for k in names}

_PM_TOKENS = ('pm', '下午')
_AM_TOKENS = ('am', '上午')


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------
def _adjust_ampm(hour, ampm):
    """Convert a 12-hour clock reading to 24 hours. Unknown / missing marker leaves the hour alone."""
    if not ampm:
        return hour
    token = ampm.lower()
    if token in _PM_TOKENS:
        return hour + 12 if 1 <= hour <= 11 else hour
    if token in _AM_TOKENS:
        return 0 if hour == 12 else hour
    return hour


def _safe_datetime(y, mo, d, h=0, mi=0, s=0, tzinfo=None) -> Optional[datetime]:
    """Build a datetime or return None if any component is out of range."""
    try:
        return datetime(int(y), int(mo), int(d), int(h), int(mi), int(s or 0), tzinfo=tzinfo)
    except (ValueError, OverflowError):
        logger.debug("invalid calendar values %s-%s-%s %s:%s:%s", y, mo, d, h, mi, s)
        return None


def _parse_offset(offset):
    """'Z' / '+08:00' / '-0530' → tzinfo; None for no offset; False for an impossible one."""
    if not offset:
        return None
    if offset.upper() == 'Z':
        return timezone.utc
    sign = -1 if offset[0] == '-' else 1
    digits = offset[1:].replace(':', '')
    hours, minutes = int(digits[:2]), int(digits[2:])
    if hours > 23 or minutes > 59:
        return False
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def _from_timestamp_sec(ts) -> Optional[datetime]:
    if not TS_MIN_SEC <= ts <= TS_MAX_SEC:
        return None
    return datetime.fromtimestamp(ts)


def _from_timestamp_ms(ts) -> Optional[datetime]:
    if not TS_MIN_MS <= ts <= TS_MAX_MS:
        return None
    return datetime.fromtimestamp(ts // 1000).replace(microsecond=(ts % 1000) * 1000)


# ---------------------------------------------------------------------
# Parse functions (one per notation family)
# ---------------------------------------------------------------------
def _parse_iso_datetime(m):
    tz = _parse_offset(m['tz'])
    if tz is False:
        return None
    return _safe_datetime(m['y'], m['mo'], m['d'], m['h'], m['mi'], m['s'], tzinfo=tz)


def _parse_date(m):
    return _safe_datetime(m['y'], m['mo'], m['d'])


def _parse_date_time(m):
    return _safe_datetime(m['y'], m['mo'], m['d'], m['h'], m['mi'], m['s'])


def _parse_date_ampm_time(m):
    """Date with an optional trailing time that may carry 上午/下午 or AM/PM."""
    if m['h'] is None:
        return _parse_date(m)
    hour = _adjust_ampm(int(m['h']), m['ampm'])
    return _safe_datetime(m['y'], m['mo'], m['d'], hour, m['mi'], m['s'])


def _parse_month_name(m):
    month = _MONTHS.get(m['mon'].lower())
    if month is None:
        return None
    if m['h'] is None:
        return _safe_datetime(m['y'], month, m['d'])
    hour = _adjust_ampm(int(m['h']), m['ampm'])
    return _safe_datetime(m['y'], month, m['d'], hour, m['mi'], m['s'])


def _parse_bare_time(m):
    hour = _adjust_ampm(int(m['h']), m['ampm'])
    today = date.today()
    return _safe_datetime(today.year, today.month, today.day, hour, m['mi'], m['s'])


def _parse_unix_seconds(m):
    return _from_timestamp_sec(int(m['ts']))


def _parse_unix_millis(m):
    return _from_timestamp_ms(int(m['ts']))


# ---------------------------------------------------------------------
# Pattern table
# ---------------------------------------------------------------------
_YMD_DASH = r'(?P<y>\d{4})-(?P<mo>\d{1,2})-(?P<d>\d{1,2})'
_YMD_SLASH = r'(?P<y>\d{4})/(?P<mo>\d{1,2})/(?P<d>\d{1,2})'
_YMD_DOT = r'(?P<y>\d{4})\.(?P<mo>\d{1,2})\.(?P<d>\d{1,2})'
_YMD_CN = r'(?P<y>\d{4})年(?P<mo>\d{1,2})月(?P<d>\d{1,2})日'
_HMS = r'(?P<h>\d{1,2}):(?P<mi>\d{2})(?::(?P<s>\d{2}))?'

_MONTH_NAMES = (r'Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|Jul(?:y)?|Aug(?:ust)?'
                r'|Sep(?:tember)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?')

PATTERNS = (
    DateTimePattern(
        name='iso_datetime',
        anchored=re.compile(_YMD_DASH + r'[T\s]' + _HMS + r'(?:\.\d+)?(?P<tz>Z|[+-]\d{2}:?\d{2})?'),
        # "-HH:MM" stays out of the search: "14:30-16:30" is a range, not UTC-16:30
        fragment=r'\d{4}-\d{1,2}-\d{1,2}[T ]\d{1,2}:\d{2}(?::\d{2})?(?:\.\d+)?(?:Z|\+(?:[01]\d|2[0-3]):?[0-5]\d)?',
        has_date=True, has_time=True,
        parse=_parse_iso_datetime,
    ),
    DateTimePattern(
        name='iso_date',
        anchored=re.compile(_YMD_DASH),
        fragment=r'\d{4}-\d{1,2}-\d{1,2}',
        has_date=True, has_time=False,
        parse=_parse_date,
    ),
    DateTimePattern(
        name='slash_datetime',
        anchored=re.compile(_YMD_SLASH + r'\s+' + _HMS),
        fragment=r'\d{4}/\d{1,2}/\d{1,2} \d{1,2}:\d{2}(?::\d{2})?',
        has_date=True, has_time=True,
        parse=_parse_date_time,
    ),
    DateTimePattern(
        name='slash_date',
        anchored=re.compile(_YMD_SLASH),
        fragment=r'\d{4}/\d{1,2}/\d{1,2}',
        has_date=True, has_time=False,
        parse=_parse_date,
    ),
    DateTimePattern(
        name='dot_datetime',
        anchored=re.compile(_YMD_DOT + r'\s+' + _HMS),
        fragment=r'\d{4}\.\d{1,2}\.\d{1,2} \d{1,2}:\d{2}(?::\d{2})?',
        has_date=True, has_time=True,
        parse=_parse_date_time,
    ),
    DateTimePattern(
        name='dot_date',
        anchored=re.compile(_YMD_DOT),
        fragment=r'\d{4}\.\d{1,2}\.\d{1,2}',
        has_date=True, has_time=False,
        parse=_parse_date,
    ),
    DateTimePattern(
        name='cn_datetime',
        anchored=re.compile(_YMD_CN + r'\s*(?:(?P<ampm>上午|下午|AM|PM)\s*)?' + _HMS, re.IGNORECASE),
        fragment=r'\d{4}年\d{1,2}月\d{1,2}日\s*(?:(?:上午|下午)\s*)?\d{1,2}:\d{2}(?::\d{2})?',
        has_date=True, has_time=True,
        parse=_parse_date_ampm_time,
    ),
    DateTimePattern(
        name='cn_date',
        anchored=re.compile(_YMD_CN),
        fragment=r'\d{4}年\d{1,2}月\d{1,2}日',
        has_date=True, has_time=False,
        parse=_parse_date,
    ),
    # the plain Chinese date already finds the informative part of these in free text
    DateTimePattern(
        name='cn_weekday_date',
        anchored=re.compile(r'星期[一二三四五六日天]\s*' + _YMD_CN
                            + r'(?:\s*(?:(?P<ampm>上午|下午)\s*)?' + _HMS + r')?'),
        has_date=True, has_time=False, time_group='h',
        parse=_parse_date_ampm_time,
    ),
    DateTimePattern(
        name='month_name_date',
        anchored=re.compile(r'(?P<mon>' + _MONTH_NAMES + r')\s+(?P<d>\d{1,2}),?\s+(?P<y>\d{4})'
                            r'(?:\s+' + _HMS + r'(?:\s*(?P<ampm>AM|PM))?)?', re.IGNORECASE),
        has_date=True, has_time=False, time_group='h',
        parse=_parse_month_name,
    ),
    # searched for through SEARCH_ONLY_FRAGMENTS
    DateTimePattern(
        name='bare_time',
        anchored=re.compile(_HMS + r'(?:\s*(?P<ampm>AM|PM))?', re.IGNORECASE),
        has_date=False, has_time=True,
        parse=_parse_bare_time,
    ),
    DateTimePattern(
        name='unix_seconds',
        anchored=re.compile(r'(?P<ts>1\d{9})'),
        has_date=True, has_time=True, is_timestamp=True,
        parse=_parse_unix_seconds,
    ),
    DateTimePattern(
        name='unix_millis',
        anchored=re.compile(r'(?P<ts>1\d{12})'),
        has_date=True, has_time=True, is_timestamp=True,
        parse=_parse_unix_millis,
    ),
)

# Bare-time notations for embedded search, longest first so that
# "14:30:00" and "2:30 PM" are not cut down to their "14:30" / "2:30" prefix.
SEARCH_ONLY_FRAGMENTS = (
    r'\d{1,2}:\d{2}:\d{2}',
    r'\d{1,2}:\d{2}\s*(?:AM|PM|am|pm)',
    r'\d{1,2}:\d{2}',
)


# ---------------------------------------------------------------------
# Main routines
# ---------------------------------------------------------------------
def _candidate(text) -> Optional[str]:
    if not text:
        return None
    trimmed = text.strip()
    if not trimmed or len(trimmed) > MAX_TEXT_LENGTH:
        return None
    return trimmed


def parse_date_time(text: str) -> Optional[ParsedDateTime]:
    """
    Parse *text* (the whole string, after trimming) as one date/time notation.

    Returns None when the text is empty or longer than MAX_TEXT_LENGTH, when no notation matches, or when the
    first matching notation captured values that are not a valid instant.
    """
    trimmed = _candidate(text)
    if trimmed is None:
        return None

    for pattern in PATTERNS:
        m = pattern.anchored.fullmatch(trimmed)
        if not m:
            continue

        instant = pattern.parse(m)
        if instant is None:
            return None

        has_time = pattern.has_time
        if pattern.time_group and m[pattern.time_group] is not None:
            has_time = True

        return ParsedDateTime(
            original=trimmed,
            instant=instant,
            has_date=pattern.has_date,
            has_time=has_time,
            is_timestamp=pattern.is_timestamp,
        )

    return None


def is_date_time(text: str) -> bool:
    """True when the whole (trimmed) text is one recognised, calendar-valid date/time."""
    return parse_date_time(text) is not None
