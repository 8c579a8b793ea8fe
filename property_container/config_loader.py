"""YAML configuration and container definitions loading."""

import logging
import os
import urllib.parse
from importlib.resources import files
from typing import Any, Dict, Optional, Type

import yaml
from jsonschema import ValidationError, validate

from .container import PropertyContainer

logger = logging.getLogger(__name__)

# Shape of a definitions document:
#
#   containers:
#     Customer:
#       rules:
#         email: [required, email]
#       date_properties: [created_at]
DEFINITIONS_SCHEMA = {
    "type": "object",
    "required": ["containers"],
    "additionalProperties": False,
    "properties": {
        "containers": {
            "type": "object",
            "propertyNames": {"pattern": "^[A-Za-z_][A-Za-z0-9_]*$"},
            "additionalProperties": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "rules": {
                        "type": "object",
                        "additionalProperties": {
                            "type": "array",
                            "items": {"type": "string", "minLength": 1},
                        },
                    },
                    "date_properties": {
                        "type": "array",
                        "items": {"type": "string"},
                        "uniqueItems": True,
                    },
                },
            },
        },
    },
}


class ConfigLoader:
    """Loads the local config and the container definitions it points to."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize config loader.

        Args:
            config_path: Path to a local config YAML file. Defaults to the
                local-config.yaml bundled with the package.
        """
        if config_path is None:
            config_file = files("property_container").joinpath("local-config.yaml")
            self.local_config_path = str(config_file)
            with config_file.open("r") as f:
                self.local_config = yaml.safe_load(f) or {}
        else:
            self.local_config_path = str(config_path)
            self.local_config = self._load_yaml(self.local_config_path)

        self._definitions: Optional[Dict[str, Any]] = None

    def _load_yaml(self, path: str) -> Dict[str, Any]:
        """Load YAML file from disk."""
        with open(path) as f:
            return yaml.safe_load(f) or {}

    def resolve_uri(self, uri: str) -> str:
        """
        Resolve a definitions URI to a local path.

        Supports:
        - Relative paths - resolved against the local config directory
        - Absolute paths
        - file:// URIs

        Raises:
            ValueError: For any other URI scheme
        """
        parsed = urllib.parse.urlparse(uri)

        if not parsed.scheme:
            config_dir = os.path.dirname(os.path.abspath(self.local_config_path))
            return os.path.join(config_dir, uri)

        if parsed.scheme == "file":
            return urllib.parse.unquote(parsed.path)

        raise ValueError(f"Unsupported URI scheme: {parsed.scheme} in {uri}")

    def get_local_config(self) -> Dict[str, Any]:
        return self.local_config

    def get_definitions(self) -> Dict[str, Any]:
        """
        Load the definitions document named by `definitions_uri`.

        Returns:
            The parsed document, or `{"containers": {}}` if none is configured

        Raises:
            ValueError: If the document does not match DEFINITIONS_SCHEMA
        """
        if self._definitions is None:
            uri = self.local_config.get("definitions_uri")
            if uri:
                definitions = self._load_yaml(self.resolve_uri(uri))
                if self.local_config.get("validate_definitions", True):
                    check_definitions(definitions, source=uri)
                logger.info(
                    "Loaded container definitions",
                    extra={
                        "uri": uri,
                        "containers": sorted(definitions.get("containers", {})),
                    },
                )
            else:
                definitions = {"containers": {}}
            self._definitions = definitions
        return self._definitions


def check_definitions(definitions: Any, source: str = "<definitions>") -> None:
    """
    Validate a definitions document against DEFINITIONS_SCHEMA.

    Raises:
        ValueError: Describing the first schema violation
    """
    try:
        validate(instance=definitions, schema=DEFINITIONS_SCHEMA)
    except ValidationError as e:
        error_path = " -> ".join(str(p) for p in e.path) if e.path else "root"
        raise ValueError(
            f"Invalid container definitions in {source} at {error_path}: {e.message}"
        ) from e


def define_containers(
    source=None, base: Type[PropertyContainer] = PropertyContainer
) -> Dict[str, Type[PropertyContainer]]:
    """
    Build container classes from a definitions document.

    Args:
        source: A ConfigLoader, a path to a local config file, an already
            parsed definitions dict, or None for the bundled configuration
        base: Class the generated containers inherit from

    Returns:
        Dict mapping container name to the generated class
    """
    if isinstance(source, dict):
        check_definitions(source)
        definitions = source
    else:
        loader = source if isinstance(source, ConfigLoader) else ConfigLoader(source)
        definitions = loader.get_definitions()

    classes = {}
    for name, declaration in definitions.get("containers", {}).items():
        classes[name] = type(
            name,
            (base,),
            {
                "rule_set": declaration.get("rules", {}),
                "date_properties": frozenset(declaration.get("date_properties", [])),
            },
        )
        logger.debug(f"Defined container {name}")
    return classes
