import logging
from typing import Any, Dict, Mapping, Optional

from .exceptions import RequiredViolation, RuleViolation
from .rule_registry import RuleRegistry, get_rule_registry
from .rules import CustomRule, FieldRules

logger = logging.getLogger(__name__)


class ValidationEngine:
    """Evaluates parsed rule sets against incoming data, failing fast."""

    def __init__(self, registry: Optional[RuleRegistry] = None):
        """
        Initialize validation engine.

        Args:
            registry: Rule registry used to resolve named rules. Defaults to
                the process-wide registry.
        """
        self.registry = registry if registry is not None else get_rule_registry()

    def validate(self, rule_set: Mapping[str, FieldRules], data: Mapping[str, Any]) -> None:
        """
        Validate every declared field against the incoming data.

        Fields are checked in declaration order and the first failure aborts
        the whole call.

        Args:
            rule_set: Parsed rules keyed by field name
            data: Incoming field values

        Raises:
            RequiredViolation: A required, non-nullable field is missing
            RuleViolation: A rule rejected a present value
            UnknownRule: A named rule is not registered
        """
        for field_name, field_rules in rule_set.items():
            self.validate_field(field_name, field_rules, data)

    def validate_field(
        self, field_name: str, field_rules: FieldRules, data: Mapping[str, Any]
    ) -> None:
        """Validate one field against the incoming data."""
        if field_name not in data:
            if field_rules.required and not field_rules.nullable:
                raise RequiredViolation(field_name)
            logger.debug(f"Skipping {field_name}: not present in data")
            return

        value = data[field_name]
        if value is None and field_rules.nullable:
            logger.debug(f"Skipping {field_name}: nullable and null")
            return

        for rule in field_rules.rules:
            if not self._passes(rule, value):
                raise RuleViolation(field_name, rule.label)

        logger.debug(
            f"{field_name} passed validation",
            extra={"rules": [rule.label for rule in field_rules.rules]},
        )

    def _passes(self, rule, value: Any) -> bool:
        if isinstance(rule, CustomRule):
            return bool(rule.predicate(value))

        predicate = self.registry.resolve(rule.name)
        return bool(predicate(value, list(rule.arguments)))

    def failures(self, rule_set: Mapping[str, FieldRules], data: Mapping[str, Any]) -> Dict[str, str]:
        """
        Collect the first failing rule of every field instead of stopping.

        Returns:
            Dict mapping field name to the label of its failing rule; empty
            when the data is valid. Unknown rules still raise.
        """
        failed = {}
        for field_name, field_rules in rule_set.items():
            try:
                self.validate_field(field_name, field_rules, data)
            except (RequiredViolation, RuleViolation) as e:
                failed[field_name] = e.rule
        return failed
