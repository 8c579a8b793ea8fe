"""
Tests for PropertyContainer

Covers construction, validation on fill, accessor resolution, macros,
merge and export.
"""
import json
from datetime import datetime

import pytest

from property_container import (
    PropertyContainer,
    PropertyValidationError,
    RequiredViolation,
    RuleViolation,
    UnknownMethod,
    UnknownRule,
    computed,
)


class Example(PropertyContainer):
    rule_set = {
        "some_required_property": ["required"],
        "some_not_null_property": ["notNull"],
        "some_integer_property": ["int"],
        "some_numeric_property": ["numeric"],
        "some_date_property": ["date"],
        "some_date_format_property": ["date_format:Y-m-d"],
        "some_required_nullable_string_property": ["required", "nullable", "string"],
        "some_email_property": ["email"],
        "some_in_rule_strings": ["in:a,b,c"],
        "some_in_rule_int": ["in:1,2,3"],
    }

    date_properties = ["test_date"]

    @computed
    def get_some_mutator(self):
        return "value_of_the_mutator"


def make_example(**fields):
    data = {"some_required_property": "some random value"}
    data.update(fields)
    return Example(data)


class TestConstruction:
    """Test make() and the constructor."""

    def test_contains_properties(self):
        container = PropertyContainer.make({
            "a_property": "a_value",
            "another_property": "another_value",
        })

        assert isinstance(container, PropertyContainer)
        assert container.get("a_property") == "a_value"
        assert container["another_property"] == "another_value"

    def test_make_returns_subclass_instance(self):
        example = Example.make({"some_required_property": "x"})
        assert type(example) is Example

    def test_empty_container(self):
        container = PropertyContainer()
        assert container.to_dict() == {}

    def test_missing_property_reads_as_none(self):
        container = PropertyContainer.make({"some_property": "some_value"})
        assert container.get("some_other_property") is None
        assert container["some_other_property"] is None


class TestRequiredAndNullable:
    """Test the required / nullable applicability rules."""

    def test_missing_required_property_fails(self):
        with pytest.raises(RequiredViolation) as exc_info:
            Example.make({"some_property": "some_value"})

        assert str(exc_info.value) == "[some_required_property] failed validation rule [required]"
        assert exc_info.value.property_name == "some_required_property"
        assert exc_info.value.rule == "required"
        assert exc_info.value.code == 422

    def test_nullable_required_accepts_null(self):
        example = make_example(some_required_nullable_string_property=None)
        assert example.get("some_required_nullable_string_property") is None

    def test_nullable_required_accepts_no_value(self):
        example = make_example()
        assert "some_required_nullable_string_property" not in example.to_dict()

    def test_nullable_required_accepts_string(self):
        make_example(some_required_nullable_string_property="some string")

    def test_nullable_required_rejects_int(self):
        with pytest.raises(RuleViolation) as exc_info:
            make_example(some_required_nullable_string_property=123)
        assert exc_info.value.rule == "string"

    def test_null_is_validated_when_not_nullable(self):
        with pytest.raises(RuleViolation):
            make_example(some_not_null_property=None)


class TestFieldValidation:
    """Test named rules declared on a container type."""

    def test_valid_fields(self):
        make_example(
            some_not_null_property=0,
            some_integer_property=100,
            some_numeric_property="12.52",
            some_date_property="2021-01-01 01:00:00",
        )

    def test_integer_rule_fails(self):
        with pytest.raises(PropertyValidationError):
            make_example(some_integer_property=125.25)

    def test_numeric_rule_fails(self):
        with pytest.raises(PropertyValidationError):
            make_example(some_numeric_property=["123", "abc"])

    def test_numeric_rule_rejects_text(self):
        with pytest.raises(PropertyValidationError):
            make_example(some_numeric_property="Not a date")

    def test_date_rule_fails(self):
        with pytest.raises(RuleViolation):
            make_example(some_date_property="Not a date")

    def test_valid_email(self):
        make_example(some_email_property="testing@email.com")

    def test_invalid_email(self):
        with pytest.raises(RuleViolation):
            make_example(some_email_property="testingemail.com")

    def test_valid_date_format(self):
        make_example(some_date_format_property="2021-10-01")

    def test_invalid_date_format(self):
        with pytest.raises(RuleViolation) as exc_info:
            make_example(some_date_format_property="01-10-2021")
        assert exc_info.value.rule == "date_format"

    @pytest.mark.parametrize("value", ["a", "b", "c"])
    def test_in_rule_strings_accepted(self, value):
        make_example(some_in_rule_strings=value)

    def test_in_rule_strings_rejected(self):
        with pytest.raises(RuleViolation):
            make_example(some_in_rule_strings="d")

    def test_in_rule_int_accepted(self):
        make_example(some_in_rule_int=1)

    def test_in_rule_int_rejected(self):
        with pytest.raises(RuleViolation):
            make_example(some_in_rule_int=4)

    def test_undeclared_fields_are_not_validated(self):
        example = make_example(anything=object)
        assert example.get("anything") is object

    def test_failed_fill_leaves_store_untouched(self):
        example = make_example(some_integer_property=1)

        with pytest.raises(RuleViolation):
            example.fill({
                "some_required_property": "changed",
                "some_integer_property": "one",
            })

        assert example.get("some_required_property") == "some random value"
        assert example.get("some_integer_property") == 1

    def test_custom_rule(self):
        class Even(PropertyContainer):
            rule_set = {"n": [lambda value: value % 2 == 0]}

        assert Even.make({"n": 4}).get("n") == 4
        with pytest.raises(RuleViolation) as exc_info:
            Even.make({"n": 3})
        assert exc_info.value.rule == "custom rule"

    def test_unknown_rule_is_a_configuration_error(self):
        class Broken(PropertyContainer):
            rule_set = {"x": ["noSuchRule"]}

        with pytest.raises(UnknownRule):
            Broken.make({"x": 1})

        # Not validated when absent, so no lookup happens
        Broken.make({})

    def test_rules_classmethod_override(self):
        class Positive(PropertyContainer):
            @classmethod
            def rules(cls):
                return {"amount": ["required", "greaterThan:0"]}

        Positive.make({"amount": 1.1})
        with pytest.raises(RuleViolation):
            Positive.make({"amount": 0})

    def test_validation_failures_reports_every_field(self):
        failures = Example.validation_failures({
            "some_integer_property": 1.5,
            "some_email_property": "nope",
        })

        assert failures == {
            "some_required_property": "required",
            "some_integer_property": "int",
            "some_email_property": "email",
        }


class TestAccessors:
    """Test read resolution: computed accessors, macros, dates, raw values."""

    def test_computed_accessor(self):
        example = make_example()
        assert example.get("some_mutator") == "value_of_the_mutator"

    def test_computed_accessor_wins_over_stored_value(self):
        example = make_example(some_mutator="some_value")

        assert example.get("some_mutator") == "value_of_the_mutator"
        assert example.raw("some_mutator") == "some_value"

    def test_computed_accessor_with_explicit_field(self):
        class Person(PropertyContainer):
            @computed("full_name")
            def full_name_of(self):
                return f"{self.get('first')} {self.get('last')}"

        person = Person.make({"first": "Ada", "last": "Lovelace"})
        assert person.get("full_name") == "Ada Lovelace"
        assert Person.computed_accessors() == {"full_name": "full_name_of"}

    def test_computed_accessors_are_inherited(self):
        class Child(Example):
            pass

        assert Child.make({"some_required_property": 1}).get("some_mutator") == "value_of_the_mutator"

    def test_macro_accessor(self):
        PropertyContainer.macro("get_shout", lambda container: container.get("word").upper())

        container = PropertyContainer.make({"word": "hello", "shout": "stored"})
        assert container.get("shout") == "HELLO"

    def test_computed_accessor_wins_over_macro(self):
        PropertyContainer.macro("get_some_mutator", lambda container: "from macro")
        assert make_example().get("some_mutator") == "value_of_the_mutator"

    @pytest.mark.parametrize("name", ["some_mutator", "someMutator", "SomeMutator", "some-mutator"])
    def test_computed_accessor_matches_any_case(self, name):
        assert make_example(some_mutator="stored").get(name) == "value_of_the_mutator"

    def test_computed_accessor_declared_in_camel_case(self):
        class Camel(PropertyContainer):
            @computed("fullName")
            def full(self):
                return "Ada Lovelace"

        assert Camel().get("full_name") == "Ada Lovelace"
        assert Camel.computed_accessors() == {"full_name": "full"}

    def test_pascal_case_macro_accessor(self):
        PropertyContainer.macro("getShout", lambda container: container.get("word").upper())

        container = PropertyContainer.make({"word": "hello", "shout": "stored"})
        assert container.get("shout") == "HELLO"

    def test_snake_case_macro_accessor_wins_over_pascal_case(self):
        PropertyContainer.macro("getShout", lambda container: "pascal")
        PropertyContainer.macro("get_shout", lambda container: "snake")

        assert PropertyContainer().get("shout") == "snake"

    def test_macro_accessor_matches_camel_case_field(self):
        PropertyContainer.macro("get_first_name", lambda container: "Ada")
        assert PropertyContainer().get("firstName") == "Ada"

    def test_single_date_property_string(self):
        class Event(PropertyContainer):
            date_properties = "starts_at"

        assert Event.date_properties == frozenset({"starts_at"})
        assert Event.make({"starts_at": "2021-10-01"}).get("starts_at") == datetime(2021, 10, 1)

    def test_date_property_is_coerced(self):
        example = make_example(test_date="1970-01-01")

        assert isinstance(example.get("test_date"), datetime)
        assert example.get("test_date") == datetime(1970, 1, 1)
        assert example.raw("test_date") == "1970-01-01"

    def test_date_property_coerced_on_every_read(self):
        example = make_example(test_date="1970-01-01")
        example.set("test_date", "2000-02-03T04:05:06Z")

        assert example.get("test_date").year == 2000
        assert example.get("test_date").tzinfo is not None

    def test_null_date_property_reads_as_none(self):
        example = make_example(test_date=None)
        assert example.get("test_date") is None

    def test_get_does_not_write(self):
        container = PropertyContainer()
        container.get("missing")
        assert container.to_dict() == {}


class TestReadWrite:
    """Test set / has / forget."""

    def test_set_then_get(self):
        container = PropertyContainer.make({"some_property": "some_value"})
        assert container.set("some_other_property", "some_other_value") is container
        assert container.get("some_other_property") == "some_other_value"

    def test_item_assignment(self):
        container = PropertyContainer()
        container["answer"] = 42
        assert container.get("answer") == 42
        assert "answer" in container

    def test_has_ignores_null(self):
        container = PropertyContainer.make({"a": None, "b": 0})

        assert not container.has("a")
        assert container.does_not_have("a")
        assert container.has("b")
        assert container.does_not_have("c")

    def test_forget(self):
        container = PropertyContainer.make({"some_property": "some_value"})
        assert container.forget("some_property") is container
        assert container.get("some_property") is None
        assert container.does_not_have("some_property")

    def test_forget_twice(self):
        container = PropertyContainer.make({"a": 1, "b": 2})
        container.forget("a")
        container.forget("a")
        assert container.to_dict() == {"b": 2}

    def test_forget_removes_null_entry(self):
        container = PropertyContainer.make({"a": None})
        del container["a"]
        assert container.to_dict() == {}


class TestMacros:
    """Test macros as methods on containers."""

    def test_unknown_method(self):
        container = PropertyContainer.make({"some_property": "some_value"})

        with pytest.raises(UnknownMethod) as exc_info:
            container.thisMethodDoesNotExist()

        assert str(exc_info.value) == (
            "thisMethodDoesNotExist does not exist as a method or a macro on PropertyContainer."
        )

    def test_unknown_method_names_subclass(self):
        with pytest.raises(UnknownMethod, match="on Example"):
            make_example().nothing_here()

    def test_macro_becomes_callable(self):
        container = PropertyContainer.make({"some_property": "some_value"})

        PropertyContainer.macro("thisMethodDoesNotExist", lambda c: "Now it actually does exist")

        assert container.thisMethodDoesNotExist() == "Now it actually does exist"

    def test_macro_receives_container_and_arguments(self):
        PropertyContainer.macro("pick", lambda c, key, default=None: c.get(key) or default)

        container = PropertyContainer.make({"a": 1})
        assert container.pick("a") == 1
        assert container.pick("b", default=2) == 2

    def test_macro_is_shared_across_types(self):
        Example.macro("kind", lambda c: type(c).__name__)
        assert PropertyContainer().kind() == "PropertyContainer"
        assert make_example().kind() == "Example"

    def test_has_macro(self):
        container = PropertyContainer.make({"some_property": "some_value"})
        assert not container.has_macro("someMacroMethod")

        PropertyContainer.macro("someMacroMethod", lambda c: "someMacroMethod")

        assert container.has_macro("someMacroMethod")

    def test_declared_method_wins_over_macro(self):
        PropertyContainer.macro("to_dict", lambda c: "macro")
        assert PropertyContainer.make({"a": 1}).to_dict() == {"a": 1}

    def test_hasattr_is_false_for_unknown_names(self):
        assert not hasattr(PropertyContainer(), "unknown")


class TestMergeAndExport:
    """Test merge(), to_dict() and to_json()."""

    def test_merge(self):
        container_a = PropertyContainer.make({"some_property": "some_value"})
        container_b = PropertyContainer.make({"some_other_property": "some_other_value"})

        assert container_a.has("some_property")
        assert not container_a.has("some_other_property")

        container_a.merge(container_b)

        assert container_a.has("some_property")
        assert container_a.has("some_other_property")

    def test_merge_overwrites(self):
        a = PropertyContainer.make({"x": 1})
        b = PropertyContainer.make({"x": 2, "y": 3})

        a.merge(b)

        assert a.get("x") == 2
        assert a.get("y") == 3

    def test_merge_revalidates(self):
        class Typed(PropertyContainer):
            rule_set = {"x": ["int"]}

        target = Typed.make({"x": 1})
        with pytest.raises(RuleViolation):
            target.merge(PropertyContainer.make({"x": "one"}))
        assert target.get("x") == 1

    def test_to_dict_round_trip(self):
        data = {"a": 1, "b": "two", "c": None, "d": [1, 2], "e": {"f": True}}
        assert PropertyContainer.make(data).to_dict() == data

    def test_to_dict_is_a_copy(self):
        container = PropertyContainer.make({"a": 1})
        container.to_dict()["a"] = 2
        assert container.get("a") == 1

    def test_to_dict_ignores_accessors(self):
        example = make_example(some_mutator="stored", test_date="1970-01-01")
        exported = example.to_dict()

        assert exported["some_mutator"] == "stored"
        assert exported["test_date"] == "1970-01-01"

    def test_to_json(self):
        container = PropertyContainer.make({
            "some_property": "some_value",
            "some_other_property": "sømé_other_value",
        })

        text = container.to_json()

        assert json.loads(text) == container.to_dict()
        assert "sømé" in text

    def test_to_json_writes_dates_as_iso(self):
        container = PropertyContainer.make({"when": datetime(2021, 10, 1, 12, 30)})
        assert json.loads(container.to_json()) == {"when": "2021-10-01T12:30:00"}
