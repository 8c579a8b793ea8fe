"""
property-container: validated containers of dynamically named properties

This library provides a base class for lightweight domain objects with:
- Ad hoc fields stored in a per-instance property map
- Per-field validation rules in a small text language ("required", "in:a,b,c")
- Custom predicate rules and an extensible rule registry
- Computed accessors and datetime coercion on read
- Process-wide macros callable as methods on every container
- Container types declared in YAML

Example:
    from property_container import PropertyContainer

    class Order(PropertyContainer):
        rule_set = {"id": ["required", "uuid"], "total": ["numeric", "greaterThan:0"]}

    order = Order.make({"id": "4f8e0a0e-2b1c-4f3a-9d7e-1c2b3a4d5e6f", "total": 10})
    order.get("total")
"""

from .accessor_resolver import AccessorResolver, computed
from .config_loader import ConfigLoader, define_containers
from .container import PropertyContainer
from .exceptions import (
    PropertyContainerError,
    PropertyValidationError,
    RequiredViolation,
    RuleViolation,
    UnknownMethod,
    UnknownRule,
)
from .macro_registry import MacroRegistry, get_macro_registry
from .rule_registry import RuleRegistry, get_rule_registry, register_rule
from .rules import CustomRule, NamedRule

__version__ = "0.1.0"
__all__ = [
    "AccessorResolver",
    "ConfigLoader",
    "CustomRule",
    "MacroRegistry",
    "NamedRule",
    "PropertyContainer",
    "PropertyContainerError",
    "PropertyValidationError",
    "RequiredViolation",
    "RuleRegistry",
    "RuleViolation",
    "UnknownMethod",
    "UnknownRule",
    "computed",
    "define_containers",
    "get_macro_registry",
    "get_rule_registry",
    "register_rule",
]
