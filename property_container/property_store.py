from typing import Any, Dict, Iterator


class _Absent:
    """Marker returned by `PropertyStore.read` for names never set."""

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()


class PropertyStore:
    """Name -> value mapping owned by one container. Performs no validation."""

    def __init__(self):
        self._properties: Dict[str, Any] = {}

    def set(self, name: str, value: Any) -> "PropertyStore":
        self._properties[name] = value
        return self

    def has(self, name: str) -> bool:
        """True if the name was set to a non-null value."""
        return self._properties.get(name) is not None

    def contains(self, name: str) -> bool:
        """True if the name was set at all, null included."""
        return name in self._properties

    def forget(self, name: str) -> "PropertyStore":
        self._properties.pop(name, None)
        return self

    def read(self, name: str) -> Any:
        return self._properties.get(name, ABSENT)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._properties)

    def __iter__(self) -> Iterator[str]:
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)
