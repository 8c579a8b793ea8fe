"""Error kinds raised by property containers."""


class PropertyContainerError(Exception):
    """Base class for every error raised by this package."""


class PropertyValidationError(PropertyContainerError, ValueError):
    """A property value failed one of its validation rules."""

    code = 422

    def __init__(self, property_name: str, rule: str):
        self.property_name = property_name
        self.rule = rule
        super().__init__(f"[{property_name}] failed validation rule [{rule}]")


class RequiredViolation(PropertyValidationError):
    """A required property is missing from the incoming data."""

    def __init__(self, property_name: str):
        super().__init__(property_name, "required")


class RuleViolation(PropertyValidationError):
    """A rule predicate returned False for a present value."""


class UnknownRule(PropertyContainerError, LookupError):
    """A declared rule name does not resolve in the rule registry."""

    def __init__(self, rule: str):
        self.rule = rule
        super().__init__(f"No such rule: {rule}")


class UnknownMethod(PropertyContainerError, AttributeError):
    """Neither a declared method nor a registered macro answers a call."""

    def __init__(self, method: str, container_type: str):
        self.method = method
        self.container_type = container_type
        super().__init__(
            f"{method} does not exist as a method or a macro on {container_type}."
        )
