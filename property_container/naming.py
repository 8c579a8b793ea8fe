"""Name normalization shared by the rule registry and the accessor resolver."""

import re

_WORD_BOUNDARY = re.compile(r"[-_\s]+|(?<=[a-z0-9])(?=[A-Z])")


def _words(name: str) -> list[str]:
    return [w for w in _WORD_BOUNDARY.split(name) if w]


def to_pascal(name: str) -> str:
    """
    Convert dash, underscore or camel case input to PascalCase.

    Example:
        to_pascal("date_format") == to_pascal("dateFormat") == "DateFormat"
    """
    return "".join(w[0].upper() + w[1:] for w in _words(name))


def to_snake(name: str) -> str:
    """Convert dash, camel or Pascal case input to snake_case."""
    return "_".join(w.lower() for w in _words(name))


def accessor_name(field: str) -> str:
    """Method name a macro must be registered under to act as a field accessor."""
    return f"get_{to_snake(field)}"


def accessor_names(field: str) -> list[str]:
    """
    Macro names that answer reads of a field, in lookup order.

    Example:
        accessor_names("full_name") == ["get_full_name", "getFullName"]
    """
    return [accessor_name(field), f"get{to_pascal(field)}"]
