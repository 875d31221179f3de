"""Policy loading and validation from YAML files."""

import json
import os
from pathlib import Path

import jsonschema
import yaml

from .logger import get_logger
from .policy import DEFAULT_POLICY, Policy, PolicyError

logger = get_logger(__name__)

SCHEMA_PATH = Path(__file__).parent / "policy.schema.json"

ENV_AUTO_CLOSE_BLOCK_LEVEL = "SAFEMARKUP_AUTO_CLOSE_BLOCK_LEVEL"


class ConfigurationError(Exception):
    """Raised when a policy configuration is invalid."""

    pass


def load_policy_config(
    config_path: Path,
    base: Policy = DEFAULT_POLICY,
    schema_path: Path = SCHEMA_PATH,
) -> Policy:
    """
    Load and validate a policy from a YAML file.

    Keys left out of the file keep their value from ``base``. Environment
    overrides are applied last.

    Args:
        config_path: Path to the policy YAML file.
        base: Policy supplying values for keys missing from the file.
        schema_path: JSON Schema the file must satisfy.

    Returns:
        The loaded Policy.

    Raises:
        ConfigurationError: If the file is missing, not valid YAML, fails the
            schema, or describes an inconsistent policy.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigurationError(f"Policy config file not found: {config_path}")

    logger.info(f"Loading policy configuration from {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in policy config: {e}") from e

    if raw_config is None:
        raise ConfigurationError("Policy config file is empty")
    if not isinstance(raw_config, dict):
        raise ConfigurationError("Policy config must be a mapping")

    validate_policy_config(raw_config, schema_path)

    policy = apply_env_overrides(Policy.from_dict(raw_config, base=base))

    try:
        policy.validate()
    except PolicyError as e:
        raise ConfigurationError(str(e)) from e

    logger.info(
        f"Loaded policy '{policy.name}' ({len(policy.allowed_tags)} allowed tags, "
        f"{len(policy.dangerous_tags)} dangerous tags)"
    )
    return policy


def validate_policy_config(config: dict, schema_path: Path = SCHEMA_PATH) -> None:
    """
    Validate a raw policy mapping against the JSON Schema.

    Args:
        config: Parsed configuration dictionary.
        schema_path: Path to the schema file.

    Raises:
        ConfigurationError: If the schema is unreadable or validation fails.
    """
    try:
        with open(schema_path, encoding="utf-8") as f:
            schema = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read policy schema {schema_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON schema: {e}") from e

    try:
        jsonschema.validate(instance=config, schema=schema)
    except jsonschema.ValidationError as e:
        path = " -> ".join(str(p) for p in e.absolute_path) if e.absolute_path else "root"
        raise ConfigurationError(f"Policy validation failed at '{path}': {e.message}") from e

    logger.debug("Policy configuration validated against schema")


def apply_env_overrides(policy: Policy) -> Policy:
    """Apply ``SAFEMARKUP_*`` environment variable overrides to a policy."""
    auto_close = os.environ.get(ENV_AUTO_CLOSE_BLOCK_LEVEL)
    if auto_close is None:
        return policy

    enabled = auto_close.lower() in ("true", "1", "yes")
    logger.debug(f"Overriding auto_close_block_level from environment: {enabled}")
    return policy.replace(auto_close_block_level=enabled)
