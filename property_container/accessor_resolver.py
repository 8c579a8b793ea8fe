"""
Accessor Resolver - decides what answers `container.get(field)`.

Resolution order, first match wins:

1. A computed accessor declared on the container type (`@computed`)
2. A macro registered under `get_<field>` or `get<Field>`
3. None, if the field is not set (or set to None)
4. The parsed datetime, if the field is one of the type's `date_properties`
5. The raw stored value

Computed accessors come first so a derived property cannot be bypassed by
storing a field of the same name.
"""

import logging
from typing import Any, Callable, Optional, Union

from .dates import parse_date
from .macro_registry import MacroRegistry, get_macro_registry
from .naming import accessor_names, to_snake

logger = logging.getLogger(__name__)

COMPUTED_ATTR = "__computed_field__"


def computed(field: Union[str, Callable, None] = None):
    """
    Mark a method as the computed accessor of a field.

    The method takes no arguments besides self. The field name is given
    explicitly, or derived from a method named `get_<field>`:

        class Person(PropertyContainer):
            @computed("full_name")
            def full_name_of(self):
                return f"{self.get('first')} {self.get('last')}"

            @computed
            def get_initials(self):
                ...
    """

    def decorator(func: Callable) -> Callable:
        name = field if isinstance(field, str) else func.__name__
        if not isinstance(field, str) and name.startswith("get_"):
            name = name[len("get_"):]
        setattr(func, COMPUTED_ATTR, name)
        return func

    if callable(field):
        return decorator(field)
    return decorator


class AccessorResolver:
    """Resolves field reads through computed accessors, macros and the store."""

    def __init__(self, macros: Optional[MacroRegistry] = None):
        self._macros = macros

    @property
    def macros(self) -> MacroRegistry:
        return self._macros if self._macros is not None else get_macro_registry()

    def resolve(self, container, field: str) -> Any:
        container_type = type(container)

        method_name = container_type.computed_accessors().get(to_snake(field))
        if method_name is not None:
            logger.debug(f"{field} answered by computed accessor {method_name}")
            return getattr(container, method_name)()

        for macro_name in accessor_names(field):
            if self.macros.has(macro_name):
                logger.debug(f"{field} answered by macro {macro_name}")
                return self.macros.invoke(container, macro_name)

        if container.does_not_have(field):
            return None

        value = container.raw(field)
        if field in container_type.date_properties:
            return parse_date(value)
        return value
