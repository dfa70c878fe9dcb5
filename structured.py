from datetime import datetime
from re import Match, Pattern
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict

# Everything the engine hands back is immutable:
# patterns are module constants, parse results are created per call and never mutated.


class DateTimePattern(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    anchored: Pattern
    fragment: Optional[str] = None          # None => anchored-only, excluded from embedded search
    has_date: bool
    has_time: bool
    is_timestamp: bool = False
    time_group: Optional[str] = None        # optional time part that upgrades has_time when present
    parse: Callable[[Match], Optional[datetime]]


class ParsedDateTime(BaseModel):
    model_config = ConfigDict(frozen=True)

    original: str
    instant: datetime
    has_date: bool
    has_time: bool
    is_timestamp: bool = False


class DateTimeMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: int
    end: int
    text: str
    info: ParsedDateTime


class FormatOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    value: str


class TextSegment(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    is_date_time: bool = False
    match_index: int = -1
