from typing import Any, Dict
from ast import literal_eval
from structured import DateTimeMatch
from datetime_format import format_options
import pandas as pd
import json

def convert_lists(data):
    """ If an element of the DataFrame in any row and any column
        or a value in a dictionary is a string and starts with '[',
        it will convert it into a list, unless it's already a list.
        JSON is tried first (that is how convert_value_to_string writes lists),
        then a Python literal.
    """
    def convert_element(x):
        if isinstance(x, list):
            return x
        if pd.isna(x):
            return x
        if isinstance(x, str) and x.startswith('['):
            try:
                return json.loads(x)
            except ValueError:
                pass
            try:
                return literal_eval(x)
            except (ValueError, SyntaxError):
                return x
        return x

    if isinstance(data, pd.DataFrame):
        return data.map(convert_element)
    elif isinstance(data, dict):
        return {key: convert_element(value) for key, value in data.items()}
    else:
        # For other types, apply the conversion directly
        return convert_element(data)

def flatten_match(match: DateTimeMatch, with_formats: bool = True) -> Dict[str, Any]:
    """
    Flatten a DateTimeMatch into a flat dictionary.

    Output format:
      text, start, end: the span in the source text
      instant: ISO 8601 string of the parsed instant
      has date / has time / is timestamp: flags of the parse
      <label>: <value>                  (one per format option, only if with_formats)

    Later duplicate labels overwrite earlier ones (last one wins).
    """
    info = match.info
    flat: Dict[str, Any] = {
        "text": match.text,
        "start": match.start,
        "end": match.end,
        "instant": info.instant.isoformat(),
        "has date": info.has_date,
        "has time": info.has_time,
        "is timestamp": info.is_timestamp,
    }

    if with_formats:
        for option in format_options(info):
            flat[option.label] = option.value

    return flat

# Serialization of final output
def convert_value_to_string(value):
    if isinstance(value, str):
        return value
    # If it's None, return as-is
    if value is None:
        return None
    try:
        # Try JSON serialization (works for lists, dicts, numbers, booleans, etc.)
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        # Fallback for unserializable objects
        return str(value)
