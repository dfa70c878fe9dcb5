import time
import pytest
from datetime import datetime, timedelta, timezone
from datetime_patterns import parse_date_time
from datetime_format import format_options, format_short_date, relative_time, weekday_cn

NOW = datetime(2024, 1, 20, 14, 30, 0)

def _as_dict(options):
    return {o.label: o.value for o in options}

def _epoch(dt):
    return str(int(dt.timestamp())), str(int(dt.timestamp()) * 1000)


@pytest.mark.parametrize("delta,expected", [
    (timedelta(seconds=0), "刚刚"),
    (timedelta(seconds=59), "刚刚"),
    (timedelta(seconds=-59), "刚刚"),
    (timedelta(minutes=1), "1分钟前"),
    (timedelta(minutes=59, seconds=59), "59分钟前"),
    (timedelta(minutes=-5), "5分钟后"),
    (timedelta(hours=3, minutes=10), "3小时前"),
    (timedelta(hours=-23), "23小时后"),
    (timedelta(days=2), "2天前"),
    (timedelta(days=-29), "29天后"),
    (timedelta(days=45), "1个月前"),
    (timedelta(days=-300), "10个月后"),
    (timedelta(days=362), "0年前"),            # 12 "months" but under a year
    (timedelta(days=400), "1年前"),
    (timedelta(days=-800), "2年后"),
])
def test_relative_time(delta, expected):
    # delta is how far the instant lies in the past
    assert relative_time(NOW - delta, now=NOW) == expected


def test_relative_time_aware_instant():
    instant = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
    assert relative_time(instant, now=datetime(2024, 1, 15, 13, 0, tzinfo=timezone.utc)) == "1小时前"
    assert relative_time(instant, now=datetime(2024, 1, 15, 20, 0, tzinfo=timezone(timedelta(hours=8)))) == "刚刚"


def test_weekday_cn():
    assert weekday_cn(datetime(2024, 1, 14)) == "日"     # Sunday
    assert weekday_cn(datetime(2024, 1, 15)) == "一"
    assert weekday_cn(datetime(2024, 1, 20)) == "六"


def test_date_only_options():
    info = parse_date_time("2024年1月15日")
    options = format_options(info, now=NOW)
    sec, ms = _epoch(datetime(2024, 1, 15))

    assert [(o.label, o.value) for o in options] == [
        ("相对", "5天前"),
        ("ISO", "2024-01-15"),
        ("中文", "2024年1月15日"),
        ("斜杠", "2024/01/15"),
        ("星期", "星期一"),
        ("完整", "2024年1月15日 星期一"),
        ("秒戳", sec),
        ("毫秒戳", ms),
    ]


def test_date_time_options():
    info = parse_date_time("2024/1/15 14:30:05")
    options = format_options(info, now=NOW)
    sec, ms = _epoch(datetime(2024, 1, 15, 14, 30, 5))

    assert [(o.label, o.value) for o in options] == [
        ("相对", "4天前"),
        ("ISO", "2024-01-15 14:30:05"),
        ("日期", "2024-01-15"),
        ("时间", "14:30:05"),
        ("中文", "2024年1月15日 14:30"),
        ("斜杠", "2024/01/15 14:30:05"),
        ("星期", "星期一"),
        ("秒戳", sec),
        ("毫秒戳", ms),
    ]


@pytest.mark.parametrize("raw,expected", [
    ("2:05 PM", [("24h", "14:05:00"), ("短时间", "14:05"), ("12h", "下午2:05")]),
    ("0:15", [("24h", "00:15:00"), ("短时间", "00:15"), ("12h", "上午12:15")]),
    ("12:00", [("24h", "12:00:00"), ("短时间", "12:00"), ("12h", "下午12:00")]),
    ("9:30:45", [("24h", "09:30:45"), ("短时间", "09:30"), ("12h", "上午9:30")]),
])
def test_time_only_options(raw, expected):
    # no relative phrase and no timestamps without a date
    options = format_options(parse_date_time(raw), now=NOW)
    assert [(o.label, o.value) for o in options] == expected


@pytest.mark.parametrize("raw,sec,ms", [
    ("1700000000", "1700000000", "1700000000000"),
    ("1700000000123", "1700000000", "1700000000123"),
])
def test_timestamp_options(raw, sec, ms):
    options = _as_dict(format_options(parse_date_time(raw)))
    assert options["秒"] == sec
    assert options["毫秒"] == ms
    assert "秒戳" not in options
    assert "毫秒戳" not in options
    assert list(options)[0] == "相对"


def test_aware_instant_timestamps():
    options = _as_dict(format_options(parse_date_time("2024-01-15T14:30:00Z")))
    assert options["秒戳"] == "1705329000"
    assert options["毫秒戳"] == "1705329000000"


@pytest.mark.parametrize("raw", [
    "2024-01-15T14:30:00",
    "2024-01-15",
    "2024/01/15 14:30",
    "2024.1.5",
    "2024年1月15日 下午2:30",
    "星期一 2024年1月15日",
    "Jan 15, 2024 2:30 PM",
    "14:30",
    "1700000000",
])
def test_some_option_reparses_to_same_date(raw):
    info = parse_date_time(raw)
    dates = set()
    for option in format_options(info):
        reparsed = parse_date_time(option.value)
        if reparsed is not None:
            dates.add(reparsed.instant.date())
    assert info.instant.date() in dates


def test_format_short_date():
    assert format_short_date(datetime(2024, 1, 5, 9, 3)) == "1月5日 09:03"
    assert format_short_date(datetime(2024, 12, 25, 18, 45, 59)) == "12月25日 18:45"


@pytest.fixture
def new_york_tz(monkeypatch):
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.mark.parametrize("raw,sec,ms", [
    # 2023-11-05 01:30 EST, the second pass through the repeated hour
    ("1699165800000", "1699165800", "1699165800000"),
    ("1699165800250", "1699165800", "1699165800250"),
    ("1699165800", "1699165800", "1699165800000"),
    # first pass, EDT
    ("1699162200000", "1699162200", "1699162200000"),
])
def test_timestamp_options_in_repeated_dst_hour(new_york_tz, raw, sec, ms):
    options = _as_dict(format_options(parse_date_time(raw)))
    assert options["秒"] == sec
    assert options["毫秒"] == ms
