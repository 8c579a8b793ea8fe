"""
Built-in rule predicates.

Every predicate has the signature `(value, arguments) -> bool`, where
`arguments` is the (possibly empty) list of string arguments parsed from the
rule text, e.g. `["a", "b", "c"]` for `in:a,b,c`. Predicates never raise for
an unexpected value type; they return False.
"""

import operator
import re
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from email_validator import EmailNotValidError, validate_email

from .dates import format_date, parse_date, parse_date_format

_NUMERIC_STRING = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
_UUID = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_number(value: Any) -> Optional[float]:
    """Return the numeric value of a number or numeric string, else None."""
    if _is_number(value):
        return value
    if isinstance(value, str) and _NUMERIC_STRING.match(value):
        return float(value)
    return None


def rule_numeric(value: Any, arguments: List[str]) -> bool:
    """The value must be a number or a numeric string."""
    return _to_number(value) is not None


def rule_int(value: Any, arguments: List[str]) -> bool:
    """The value must be an integer, or convert to one without loss."""
    # None and bools are rejected even though int(None)/int(True) would round-trip loosely
    if isinstance(value, bool) or value is None:
        return False
    if isinstance(value, int):
        return True
    number = _to_number(value)
    if number is None:
        return False
    return float(number).is_integer()


def rule_not_null(value: Any, arguments: List[str]) -> bool:
    return value is not None


def rule_not_empty(value: Any, arguments: List[str]) -> bool:
    return value is not None and value != ""


def rule_date(value: Any, arguments: List[str]) -> bool:
    """The value must be a date, or a string parseable as one."""
    if isinstance(value, date):
        return True
    try:
        parse_date(value)
    except ValueError:
        return False
    return True


def rule_date_format(value: Any, arguments: List[str]) -> bool:
    """
    The value must be a date string written exactly in the given format.

    The value is parsed with the format (or, failing that, as any date),
    formatted back with the format argument, and the result must reproduce
    the input character for character.
    """
    if not arguments or not isinstance(value, str):
        return False
    try:
        parsed = parse_date_format(value, arguments[0])
    except ValueError:
        try:
            parsed = parse_date(value)
        except ValueError:
            return False
    return format_date(parsed, arguments[0]) == value


def rule_string(value: Any, arguments: List[str]) -> bool:
    return isinstance(value, str)


def rule_email(value: Any, arguments: List[str]) -> bool:
    """The value must be a syntactically valid email address (no DNS lookup)."""
    if not isinstance(value, str):
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _loose_equals(value: Any, candidate: str) -> bool:
    if isinstance(value, bool):
        return value == (candidate not in ("", "0"))
    if isinstance(value, str) and value == candidate:
        return True
    left = _to_number(value)
    right = _to_number(candidate)
    if left is not None and right is not None:
        return float(left) == float(right)
    return False


def rule_in(value: Any, arguments: List[str]) -> bool:
    """The value must loosely equal one of the arguments (`1` matches `"1"`)."""
    return any(_loose_equals(value, candidate) for candidate in arguments)


def _comparison(compare: Callable[[float, float], bool]):
    def rule(value: Any, arguments: List[str]) -> bool:
        if not arguments:
            return False
        left = _to_number(value)
        right = _to_number(arguments[0])
        if left is None or right is None:
            return False
        return compare(left, right)

    return rule


rule_greater_than = _comparison(operator.gt)
rule_greater_than_equal = _comparison(operator.ge)
rule_less_than = _comparison(operator.lt)
rule_less_than_equal = _comparison(operator.le)


def rule_uuid(value: Any, arguments: List[str]) -> bool:
    return isinstance(value, str) and bool(_UUID.match(value))


BUILTIN_RULES: Dict[str, Callable[[Any, List[str]], bool]] = {
    "numeric": rule_numeric,
    "int": rule_int,
    "notNull": rule_not_null,
    "notEmpty": rule_not_empty,
    "date": rule_date,
    "dateFormat": rule_date_format,
    "string": rule_string,
    "email": rule_email,
    "in": rule_in,
    "greaterThan": rule_greater_than,
    "greaterThanEqual": rule_greater_than_equal,
    "lessThan": rule_less_than,
    "lessThanEqual": rule_less_than_equal,
    "uuid": rule_uuid,
}
