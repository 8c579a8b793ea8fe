"""
Date coercion used by the `date` / `dateFormat` rules and by date properties.

Parsing follows the ISO-8601 handling of entity helpers (`fromisoformat`, with
a trailing `Z` read as UTC), then a few common slash, dot and day-first
layouts. Formats are written with PHP style tokens (`Y-m-d H:i:s`); a format
containing `%` is taken as a strftime format as-is.
"""

from datetime import date, datetime

# PHP date() token -> strftime directive
_TOKENS = {
    "d": "%d",
    "j": "%d",
    "D": "%a",
    "l": "%A",
    "m": "%m",
    "n": "%m",
    "M": "%b",
    "F": "%B",
    "y": "%y",
    "Y": "%Y",
    "H": "%H",
    "G": "%H",
    "h": "%I",
    "i": "%M",
    "s": "%S",
    "A": "%p",
    "u": "%f",
    "e": "%Z",
    "O": "%z",
}

# Tokens written without zero padding
_UNPADDED = {
    "j": lambda value: str(value.day),
    "n": lambda value: str(value.month),
    "G": lambda value: str(value.hour),
}

# Tried in order when the value is not ISO-8601
_FALLBACK_FORMATS = (
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
)


def parse_date(value) -> datetime:
    """
    Parse a stored value into a datetime.

    Raises:
        ValueError: If the value is not a date or a recognised date string
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        raise ValueError(f"Cannot parse {type(value).__name__} as a date")

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ValueError(f"Cannot parse {value!r} as a date")


def _php_tokens(fmt: str):
    """Yield (is_token, char) pairs of a PHP format, honouring `\\` escapes."""
    escaped = False
    for char in fmt:
        if escaped:
            yield False, char
            escaped = False
        elif char == "\\":
            escaped = True
        else:
            yield char in _TOKENS, char


def to_strftime(fmt: str) -> str:
    """Translate a PHP style date format into a strptime / strftime format."""
    if "%" in fmt:
        return fmt
    return "".join(
        _TOKENS[char] if is_token else char.replace("%", "%%")
        for is_token, char in _php_tokens(fmt)
    )


def parse_date_format(value: str, fmt: str) -> datetime:
    """
    Parse a string laid out in the given format.

    Raises:
        ValueError: If the string does not match the format
    """
    return datetime.strptime(value, to_strftime(fmt))


def format_date(value: datetime, fmt: str) -> str:
    if "%" in fmt:
        return value.strftime(fmt)

    out = []
    for is_token, char in _php_tokens(fmt):
        if not is_token:
            out.append(char)
        elif char in _UNPADDED:
            out.append(_UNPADDED[char](value))
        else:
            out.append(value.strftime(_TOKENS[char]))
    return "".join(out)
