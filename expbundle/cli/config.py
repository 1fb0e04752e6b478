"""Configuration loading, merging, and validation.

This module handles loading connection settings from JSON and YAML files and
from the environment, merging CLI arguments over them (CLI takes precedence
over environment, environment over file), validating the result, and turning
the value-source flags into a single resolution mode.

Configuration files can specify:
- instance_url: Base URL of the org
- access_token: OAuth access token or session id
- api_version: REST API version (default "60.0")
- username: Username, skips the userinfo lookup
- org_id: Org id, skips the userinfo lookup
- timeout: Request timeout in seconds
"""

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from expbundle.core.exceptions import ConfigurationError
from expbundle.core.schema import (
    DEFAULT_QUERY_FIELD,
    LiteralSource,
    OrgVariable,
    QuerySource,
    ResolutionMode,
    VariableSource,
)

CONNECTION_KEYS = (
    "instance_url",
    "access_token",
    "api_version",
    "username",
    "org_id",
    "timeout",
)

ENV_PREFIX = "EXPBUNDLE_"

SESSION_KEYS = ("org_id", "username", "instance_url")


def load_config(path: Path) -> dict[str, Any]:
    """Load configuration from JSON or YAML file.

    Format is determined by file extension (.json, .yaml, .yml); any other
    extension is parsed as JSON first and YAML second.

    Args:
        path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        ConfigurationError: If the file cannot be read or parsed, or does not
            hold a mapping

    Example:
        >>> config = load_config(Path("expbundle.yaml"))
        >>> config["instance_url"]
        'https://acme.my.salesforce.com'
    """
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}", option="config")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read config from {path}", option="config", reason=str(e)
        ) from e

    try:
        if path.suffix == ".json":
            config = json.loads(content)
        elif path.suffix in (".yaml", ".yml"):
            config = yaml.safe_load(content)
        else:
            try:
                config = json.loads(content)
            except json.JSONDecodeError:
                config = yaml.safe_load(content)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}", option="config", reason=str(e)) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}", option="config", reason=str(e)) from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Configuration in {path} must be a mapping",
            option="config",
            reason=f"found {type(config).__name__}",
        )
    return config


def load_env_config(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Read connection settings from ``EXPBUNDLE_*`` environment variables.

    Blank values are ignored.

    Example:
        >>> load_env_config({"EXPBUNDLE_INSTANCE_URL": "https://acme.my.salesforce.com"})
        {'instance_url': 'https://acme.my.salesforce.com'}
    """
    environ = os.environ if environ is None else environ
    config: dict[str, Any] = {}
    for key in CONNECTION_KEYS:
        value = environ.get(f"{ENV_PREFIX}{key.upper()}")
        if value is not None and value.strip():
            config[key] = value.strip()
    return config


def merge_config(base: dict[str, Any], **overrides: Any) -> dict[str, Any]:
    """Merge overrides into base configuration.

    Only non-None override values are applied, so lower-precedence values
    survive when a flag was not given.

    Example:
        >>> merge_config({"api_version": "58.0"}, api_version="60.0", org_id=None)
        {'api_version': '60.0'}
    """
    merged = base.copy()
    for key, value in overrides.items():
        if value is not None:
            merged[key] = value
    return merged


def validate_config(config: dict[str, Any], mode: ResolutionMode | None = None) -> list[str]:
    """Validate connection configuration for the given resolution mode.

    Checks that:
    - No unknown keys are present
    - ``timeout`` is a positive number
    - Query mode has ``instance_url`` and ``access_token``
    - Variable mode has ``instance_url`` and ``access_token``, unless
      ``org_id``, ``username`` and ``instance_url`` are all configured

    Args:
        config: Merged configuration dictionary
        mode: Resolution mode of the update, if known

    Returns:
        List of validation error messages (empty list if valid)
    """
    errors = []

    unknown = sorted(set(config) - set(CONNECTION_KEYS))
    if unknown:
        errors.append(
            f"Unknown configuration keys: {', '.join(unknown)}. "
            f"Available: {', '.join(CONNECTION_KEYS)}"
        )

    if "timeout" in config:
        try:
            if float(config["timeout"]) <= 0:
                errors.append("timeout must be positive")
        except (TypeError, ValueError):
            errors.append(f"timeout must be a number, got {config['timeout']!r}")

    needs_connection = isinstance(mode, QuerySource) or (
        isinstance(mode, VariableSource) and not all(config.get(k) for k in SESSION_KEYS)
    )
    if needs_connection:
        for key in ("instance_url", "access_token"):
            if not config.get(key):
                errors.append(f"Missing connection setting: {key}")

    return errors


def build_resolution_mode(
    value: str | None = None,
    query: str | None = None,
    query_field: str | None = None,
    tooling: bool = False,
    variable: str | None = None,
    truncate: bool = False,
) -> ResolutionMode:
    """Turn the value-source options into exactly one resolution mode.

    Raises:
        ConfigurationError: If zero or several of value/query/variable are
            given, or if the other flags do not fit the chosen source

    Example:
        >>> build_resolution_mode(query="SELECT Id FROM Organization", truncate=True)
        QuerySource(soql='SELECT Id FROM Organization', field='Id', use_tooling_api=False, truncate=True)
    """
    given = [
        name
        for name, option in (("value", value), ("query", query), ("variable", variable))
        if option is not None
    ]
    if not given:
        raise ConfigurationError("either query or value or variable has to be specified")
    if len(given) > 1:
        raise ConfigurationError(
            "value, query and variable are mutually exclusive",
            option=", ".join(given),
        )

    if tooling and query is None:
        raise ConfigurationError("--tooling requires --query", option="tooling")
    if query_field is not None and query is None:
        raise ConfigurationError("--query-field requires --query", option="query_field")

    if value is not None:
        if truncate:
            raise ConfigurationError(
                "--truncate cannot be combined with --value", option="truncate"
            )
        return LiteralSource(value)

    if query is not None:
        return QuerySource(
            soql=query,
            field=query_field or DEFAULT_QUERY_FIELD,
            use_tooling_api=tooling,
            truncate=truncate,
        )

    try:
        name = OrgVariable(variable)
    except ValueError as e:
        available = ", ".join(v.value for v in OrgVariable)
        raise ConfigurationError(
            f"Unknown variable '{variable}'. Available: {available}",
            option="variable",
        ) from e
    return VariableSource(name=name, truncate=truncate)
