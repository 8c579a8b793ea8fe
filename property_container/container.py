"""
PropertyContainer - a validated bag of dynamically named properties.

Subclasses declare which fields are validated and how, which fields are read
back as datetimes, and which fields are computed:

```python
class Customer(PropertyContainer):
    rule_set = {
        "email": ["required", "email"],
        "age": ["int", "greaterThanEqual:0"],
        "nickname": ["required", "nullable", "string"],
    }
    date_properties = {"created_at"}

    @computed
    def get_display_name(self):
        return self.get("nickname") or self.get("email")


customer = Customer.make({"email": "ada@example.com", "nickname": None})
customer.get("display_name")  # "ada@example.com"
```

Only fields present in the incoming data are validated, unless they are
marked `required`. Fields not declared in the rule set are stored without
validation.
"""

import functools
import json
import logging
from datetime import date
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional

from .accessor_resolver import COMPUTED_ATTR, AccessorResolver
from .exceptions import UnknownMethod
from .macro_registry import MacroRegistry, get_macro_registry
from .naming import to_snake
from .property_store import ABSENT, PropertyStore
from .rule_registry import RuleRegistry
from .rules import FieldRules, parse_rule_set
from .validation_engine import ValidationEngine

logger = logging.getLogger(__name__)


def _json_default(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class PropertyContainer:
    """Holds named properties, validated on fill, resolved on read."""

    # {field: [rule, ...]} - see rules.parse_rule for the rule syntax
    rule_set: Mapping[str, Any] = {}

    # Fields read back as datetime instances
    date_properties: FrozenSet[str] = frozenset()

    # Registries used by this type; None means the process-wide instance
    rule_registry: Optional[RuleRegistry] = None
    macro_registry: Optional[MacroRegistry] = None

    _computed: Dict[str, str] = {}
    _parsed_rules: Optional[Dict[str, FieldRules]] = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)

        computed = {}
        for klass in reversed(cls.__mro__):
            for attr, member in vars(klass).items():
                field = getattr(member, COMPUTED_ATTR, None)
                if field is not None:
                    computed[to_snake(field)] = attr
        cls._computed = computed
        date_properties = cls.date_properties
        if isinstance(date_properties, str):
            date_properties = [date_properties]
        cls.date_properties = frozenset(date_properties)
        cls._parsed_rules = None

    def __init__(self, data: Optional[Mapping[str, Any]] = None):
        self._store = PropertyStore()
        self.fill(data or {})

    @classmethod
    def make(cls, data: Mapping[str, Any]) -> "PropertyContainer":
        """Validate and build a container of this type."""
        return cls(data)

    # -- declarations ------------------------------------------------------

    @classmethod
    def rules(cls) -> Mapping[str, Any]:
        """Return the rule declaration of this type. Override or set `rule_set`."""
        return cls.rule_set

    @classmethod
    def parsed_rules(cls) -> Dict[str, FieldRules]:
        """Return the parsed rule set, parsing `rules()` on first use."""
        parsed = cls.__dict__.get("_parsed_rules")
        if parsed is None:
            parsed = parse_rule_set(cls.rules())
            cls._parsed_rules = parsed
        return parsed

    @classmethod
    def computed_accessors(cls) -> Dict[str, str]:
        """Return the computed accessors of this type as {field: method name}."""
        return dict(cls._computed)

    @classmethod
    def validation_failures(cls, data: Mapping[str, Any]) -> Dict[str, str]:
        """
        Report every field of `data` that would fail validation.

        Unlike `fill`, this does not stop at the first failing field and never
        raises a validation error.

        Returns:
            Dict mapping field name to the rule it failed
        """
        return ValidationEngine(cls.rule_registry).failures(cls.parsed_rules(), data)

    # -- macros ------------------------------------------------------------

    @classmethod
    def _macros(cls) -> MacroRegistry:
        return cls.macro_registry if cls.macro_registry is not None else get_macro_registry()

    @classmethod
    def macro(cls, name: str, macro: Callable[..., Any]) -> None:
        """Add a method to every container. It receives the container first."""
        cls._macros().register(name, macro)

    def has_macro(self, name: str) -> bool:
        return self._macros().has(name)

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails, so declared methods win.
        if name.startswith("_"):
            raise AttributeError(name)

        macro = self._macros().get(name)
        if macro is None:
            raise UnknownMethod(name, type(self).__name__)
        return functools.partial(macro, self)

    # -- fill / merge ------------------------------------------------------

    def fill(self, data: Mapping[str, Any]) -> "PropertyContainer":
        """
        Validate `data` against the rule set, then store every entry.

        Raises:
            PropertyValidationError: On the first failing field; nothing is stored
            UnknownRule: If the rule set names an unregistered rule
        """
        data = dict(data)
        ValidationEngine(self.rule_registry).validate(self.parsed_rules(), data)

        for name, value in data.items():
            self.set(name, value)

        logger.debug(
            f"Filled {type(self).__name__}",
            extra={"properties": list(data)},
        )
        return self

    def merge(self, other: "PropertyContainer") -> "PropertyContainer":
        """Fill this container with the properties of another, overwriting on conflict."""
        return self.fill(other.to_dict())

    # -- read / write ------------------------------------------------------

    def get(self, name: str) -> Any:
        return AccessorResolver(self.macro_registry).resolve(self, name)

    def raw(self, name: str) -> Any:
        """Return the stored value, bypassing accessors and date coercion."""
        value = self._store.read(name)
        return None if value is ABSENT else value

    def set(self, name: str, value: Any) -> "PropertyContainer":
        self._store.set(name, value)
        return self

    def has(self, name: str) -> bool:
        return self._store.has(name)

    def does_not_have(self, name: str) -> bool:
        return not self.has(name)

    def forget(self, name: str) -> "PropertyContainer":
        self._store.forget(name)
        return self

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __delitem__(self, name: str) -> None:
        self.forget(name)

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    # -- export ------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Return a copy of the stored properties (no accessors applied)."""
        return self._store.to_dict()

    def to_json(self, **kwargs) -> str:
        """Return the stored properties as JSON. Dates are written in ISO-8601."""
        kwargs.setdefault("ensure_ascii", False)
        kwargs.setdefault("default", _json_default)
        return json.dumps(self.to_dict(), **kwargs)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_dict()!r})"
