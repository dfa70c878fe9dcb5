"""
Copyable representations of a parsed date/time.

`format_options` returns the list shown in the hover popover, most useful first. Which entries appear depends on
whether the source text carried a date, a time or both, and whether it was itself a Unix timestamp.
Aware instants (the text had `Z` or an offset) are shown in local time.
"""

import math
from datetime import datetime, timezone
from typing import List, Optional

from structured import FormatOption, ParsedDateTime

WEEKDAY_CN = ('日', '一', '二', '三', '四', '五', '六')   # Sunday first

_SECONDS_MINUTE = 60
_SECONDS_HOUR = 3_600
_SECONDS_DAY = 86_400


def _local(instant: datetime) -> datetime:
    return instant.astimezone() if instant.tzinfo is not None else instant


def _now_for(instant: datetime, now: Optional[datetime]) -> datetime:
    if now is None:
        now = datetime.now(timezone.utc) if instant.tzinfo is not None else datetime.now()
    # compare like with like
    if instant.tzinfo is not None and now.tzinfo is None:
        now = now.astimezone()
    elif instant.tzinfo is None and now.tzinfo is not None:
        now = now.astimezone().replace(tzinfo=None)
    return now


def weekday_cn(instant: datetime) -> str:
    return WEEKDAY_CN[instant.isoweekday() % 7]


def relative_time(instant: datetime, now: Optional[datetime] = None) -> str:
    """
    Human phrase for the distance between *now* and *instant*:
    刚刚, N分钟前/后, N小时前/后, N天前/后, N个月前/后, N年前/后.
    """
    delta = (_now_for(instant, now) - instant).total_seconds()
    suffix = '后' if delta < 0 else '前'
    seconds = abs(delta)

    if seconds < _SECONDS_MINUTE:
        return '刚刚'

    minutes = math.floor(seconds / _SECONDS_MINUTE)
    if minutes < 60:
        return f"{minutes}分钟{suffix}"

    hours = math.floor(seconds / _SECONDS_HOUR)
    if hours < 24:
        return f"{hours}小时{suffix}"

    days = math.floor(seconds / _SECONDS_DAY)
    if days < 30:
        return f"{days}天{suffix}"

    months = days // 30
    if months < 12:
        return f"{months}个月{suffix}"

    years = days // 365
    return f"{years}年{suffix}"


def format_short_date(instant: datetime) -> str:
    """Compact label used in the history list, e.g. '1月15日 14:30'."""
    dt = _local(instant)
    return f"{dt.month}月{dt.day}日 {dt.hour:02d}:{dt.minute:02d}"


def format_options(info: ParsedDateTime, now: Optional[datetime] = None) -> List[FormatOption]:
    dt = _local(info.instant)
    ymd = f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
    slash = f"{dt.year:04d}/{dt.month:02d}/{dt.day:02d}"
    hm = f"{dt.hour:02d}:{dt.minute:02d}"
    hms = f"{hm}:{dt.second:02d}"
    cn_date = f"{dt.year}年{dt.month}月{dt.day}日"
    weekday = f"星期{weekday_cn(dt)}"

    options = []
    if info.has_date:
        options.append(FormatOption(label='相对', value=relative_time(info.instant, now)))

    if info.has_date and info.has_time:
        options += [
            FormatOption(label='ISO', value=f"{ymd} {hms}"),
            FormatOption(label='日期', value=ymd),
            FormatOption(label='时间', value=hms),
            FormatOption(label='中文', value=f"{cn_date} {hm}"),
            FormatOption(label='斜杠', value=f"{slash} {hms}"),
            FormatOption(label='星期', value=weekday),
        ]
    elif info.has_date:
        options += [
            FormatOption(label='ISO', value=ymd),
            FormatOption(label='中文', value=cn_date),
            FormatOption(label='斜杠', value=slash),
            FormatOption(label='星期', value=weekday),
            FormatOption(label='完整', value=f"{cn_date} {weekday}"),
        ]
    elif info.has_time:
        ampm = '下午' if dt.hour >= 12 else '上午'
        hour12 = dt.hour % 12 or 12
        options += [
            FormatOption(label='24h', value=hms),
            FormatOption(label='短时间', value=hm),
            FormatOption(label='12h', value=f"{ampm}{hour12}:{dt.minute:02d}"),
        ]

    ts = info.instant.timestamp()
    ts_sec = str(math.floor(ts))
    ts_ms = str(round(ts * 1000))

    if info.is_timestamp:
        options.append(FormatOption(label='秒', value=ts_sec))
        options.append(FormatOption(label='毫秒', value=ts_ms))
    elif info.has_date:
        options.append(FormatOption(label='秒戳', value=ts_sec))
        options.append(FormatOption(label='毫秒戳', value=ts_ms))

    return options
