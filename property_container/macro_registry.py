"""
Macro Registry - methods added to every container at runtime.

A macro is a callable registered under a method name. It becomes callable on
every container instance, of every container type, with the container passed
as the first argument:

```python
PropertyContainer.macro("shout", lambda container, key: container.get(key).upper())
PropertyContainer.make({"name": "ada"}).shout("name")  # "ADA"
```

A macro registered under `get_<field>` also answers `container.get("<field>")`
(see `accessor_resolver`).

Like the rule registry, one instance lives for the whole process, grows only,
and does no locking: serialize concurrent registration externally.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from .exceptions import UnknownMethod

logger = logging.getLogger(__name__)


class MacroRegistry:
    """Method name -> callable table shared by all containers."""

    def __init__(self):
        self._macros: Dict[str, Callable[..., Any]] = {}

    def register(self, name: str, macro: Callable[..., Any]) -> None:
        """Register a macro. Registering an existing name replaces it."""
        if not callable(macro):
            raise TypeError(f"Macro {name!r} must be callable")

        logger.info(
            f"Registering macro {name}",
            extra={"replaces": name in self._macros},
        )
        self._macros[name] = macro

    def has(self, name: str) -> bool:
        return name in self._macros

    def get(self, name: str) -> Optional[Callable[..., Any]]:
        return self._macros.get(name)

    def invoke(self, container, name: str, *args, **kwargs) -> Any:
        """
        Call a macro with the container as its first argument.

        Raises:
            UnknownMethod: If no macro is registered under the name
        """
        macro = self._macros.get(name)
        if macro is None:
            raise UnknownMethod(name, type(container).__name__)
        return macro(container, *args, **kwargs)

    def names(self) -> List[str]:
        return sorted(self._macros)


_registry: Optional[MacroRegistry] = None


def get_macro_registry() -> MacroRegistry:
    """Get or initialize the process-wide MacroRegistry."""
    global _registry
    if _registry is None:
        _registry = MacroRegistry()
    return _registry


def reset_macro_registry() -> None:
    """Drop every registered macro (for testing)."""
    global _registry
    _registry = None
