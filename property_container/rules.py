"""
Rule specifications and the textual rule mini-language.

A field's rules are declared as a list whose items are either rule text
(`"required"`, `"numeric"`, `"in:a,b,c"`, `"dateFormat:Y-m-d H:i:s"`) or a
callable predicate taking the value and returning a bool. Declarations are
parsed once into `FieldRules`; `required` and `nullable` become flags and
are never looked up as predicates.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Mapping, Tuple, Union

REQUIRED = "required"
NULLABLE = "nullable"


@dataclass(frozen=True)
class NamedRule:
    """A rule resolved through the rule registry, with string arguments."""

    name: str
    arguments: Tuple[str, ...] = ()

    @property
    def label(self) -> str:
        return self.name


@dataclass(frozen=True)
class CustomRule:
    """An opaque predicate supplied directly in a rule declaration."""

    predicate: Callable[[Any], bool]
    label: str = "custom rule"


RuleSpec = Union[NamedRule, CustomRule]


@dataclass(frozen=True)
class FieldRules:
    """The parsed rule list of one field."""

    required: bool = False
    nullable: bool = False
    rules: Tuple[RuleSpec, ...] = field(default_factory=tuple)


def parse_rule(rule: Any) -> RuleSpec:
    """
    Parse one rule declaration.

    The rule text is split on the first `:` into name and argument list, and
    the argument list on `,`. Arguments stay strings.

    Raises:
        TypeError: If the declaration is neither text, a rule spec nor callable
    """
    if isinstance(rule, (NamedRule, CustomRule)):
        return rule
    if isinstance(rule, str):
        name, sep, args = rule.partition(":")
        arguments = tuple(args.split(",")) if sep else ()
        return NamedRule(name.strip(), arguments)
    if callable(rule):
        return CustomRule(rule)
    raise TypeError(f"Cannot use {rule!r} as a validation rule")


def parse_field_rules(declaration: Iterable[Any]) -> FieldRules:
    if isinstance(declaration, (str, NamedRule, CustomRule)) or callable(declaration):
        declaration = [declaration]

    required = nullable = False
    rules = []
    for item in declaration:
        spec = parse_rule(item)
        marker = spec.name if isinstance(spec, NamedRule) else None
        if marker == REQUIRED:
            required = True
        elif marker == NULLABLE:
            nullable = True
        else:
            rules.append(spec)

    return FieldRules(required=required, nullable=nullable, rules=tuple(rules))


def parse_rule_set(declarations: Mapping[str, Iterable[Any]]) -> Dict[str, FieldRules]:
    """Parse a `{field: [rule, ...]}` declaration into `{field: FieldRules}`."""
    return {name: parse_field_rules(rules) for name, rules in declarations.items()}
