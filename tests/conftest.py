import pytest

from property_container.macro_registry import reset_macro_registry
from property_container.rule_registry import reset_rule_registry


@pytest.fixture(autouse=True)
def fresh_registries():
    """Give every test empty process-wide macro and rule registries."""
    reset_rule_registry()
    reset_macro_registry()
    yield
    reset_rule_registry()
    reset_macro_registry()
