"""
Rule Registry - named rule predicates resolved by normalized name.

Maps rule names to predicates of the form `(value, arguments) -> bool`. Names
are normalized to PascalCase before storage and lookup, so `date_format`,
`date-format`, `dateFormat` and `DateFormat` all name the same rule.

## Usage

```python
from property_container.rule_registry import get_rule_registry

registry = get_rule_registry()
registry.register("even", lambda value, arguments: value % 2 == 0)
registry.resolve("even")(4, [])  # True
```

## Process lifetime

`get_rule_registry()` returns one registry per process, created lazily with
the built-in rules. Entries persist until process exit. The registry does no
locking of its own: registration from several threads must be serialized by
the caller, while concurrent `resolve()` calls against a registry that is not
being written to are safe.

**Testing:**
```python
from property_container.rule_registry import reset_rule_registry

reset_rule_registry()  # back to built-ins only
```
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from .builtin_rules import BUILTIN_RULES
from .exceptions import UnknownRule
from .naming import to_pascal

logger = logging.getLogger(__name__)

RulePredicate = Callable[[Any, List[str]], bool]


class RuleRegistry:
    """Catalog of rule predicates keyed by PascalCase rule name."""

    def __init__(self, include_builtins: bool = True):
        """
        Initialize the registry.

        Args:
            include_builtins: Register the built-in rules (numeric, int, email, ...)
        """
        self._rules: Dict[str, RulePredicate] = {}

        if include_builtins:
            for name, predicate in BUILTIN_RULES.items():
                self._rules[to_pascal(name)] = predicate

    def register(self, name: str, predicate: RulePredicate) -> None:
        """
        Register a named rule.

        Args:
            name: Rule name in any of dash, underscore, camel or Pascal case
            predicate: Callable taking (value, arguments) and returning a bool
        """
        if not callable(predicate):
            raise TypeError(f"Rule predicate for {name!r} must be callable")

        key = to_pascal(name)
        if key in self._rules:
            logger.info(f"Replacing rule {key}")
        else:
            logger.info(f"Registering rule {key}")
        self._rules[key] = predicate

    def has(self, name: str) -> bool:
        return to_pascal(name) in self._rules

    def resolve(self, name: str) -> RulePredicate:
        """
        Look up a rule predicate by name.

        Raises:
            UnknownRule: If no rule is registered under the normalized name
        """
        try:
            return self._rules[to_pascal(name)]
        except KeyError:
            raise UnknownRule(name) from None

    def names(self) -> List[str]:
        """Return the normalized names of all registered rules."""
        return sorted(self._rules)

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __len__(self) -> int:
        return len(self._rules)


_registry: Optional[RuleRegistry] = None


def get_rule_registry() -> RuleRegistry:
    """Get or initialize the process-wide RuleRegistry."""
    global _registry
    if _registry is None:
        _registry = RuleRegistry()
    return _registry


def reset_rule_registry() -> None:
    """Reset the process-wide registry to built-in rules only (for testing)."""
    global _registry
    _registry = None


def register_rule(name: str, predicate: RulePredicate) -> None:
    """Register a rule on the process-wide registry."""
    get_rule_registry().register(name, predicate)
