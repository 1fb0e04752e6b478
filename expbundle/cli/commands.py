"""CLI command implementations.

This module implements the CLI commands for the expbundle tool:
- modify: Set a component property in an ExperienceBundle page JSON file
- check_config: Validate a connection configuration file

Each command is implemented as a function that returns an exit code,
enabling both direct invocation and subprocess-based testing.
"""

import json
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Annotated, Any

from cyclopts import Parameter

from expbundle.cli.config import (
    SESSION_KEYS,
    build_resolution_mode,
    load_config,
    load_env_config,
    merge_config,
    validate_config,
)
from expbundle.cli.exit_codes import ExitCode
from expbundle.cli.logs import configure_logging
from expbundle.cli.output import ConsoleDiagnostics, handle_error
from expbundle.connectors.json_store import JsonDocumentStore
from expbundle.connectors.salesforce import ConnectionSettings, OrgSession, SalesforceClient
from expbundle.core.exceptions import (
    ConfigurationError,
    MalformedEmbeddedJsonError,
    NotFoundError,
    QueryError,
    StorageError,
)
from expbundle.core.schema import PatchTarget, QuerySource, VariableSource
from expbundle.core.updater import update_document


def _session_from_config(config: dict[str, Any]) -> OrgSession | None:
    """Return a session built only from configuration, if it is complete."""
    if all(config.get(key) for key in SESSION_KEYS):
        return OrgSession(
            org_id=str(config["org_id"]),
            username=str(config["username"]),
            instance_url=str(config["instance_url"]),
        )
    return None


def modify(
    *,
    file: Annotated[Path, Parameter(name=["--file", "-f"], help="Full path to the page JSON file")],
    component_id: Annotated[
        str,
        Parameter(
            name=["--id", "-i"],
            help="Unique id of the component, e.g. 69c03077-932a-4c08-b932-46baec5a7c86",
        ),
    ],
    property: Annotated[
        str, Parameter(name=["--property", "-p"], help="Property that will be updated")
    ],
    subproperty: Annotated[
        str | None,
        Parameter(
            name=["--subproperty", "-s"],
            help="Sub-property inside a property holding a JSON string",
        ),
    ] = None,
    value: Annotated[
        str | None, Parameter(name=["--value", "-d"], help="New value for the property")
    ] = None,
    query: Annotated[
        str | None, Parameter(name=["--query", "-q"], help="SOQL query returning one record")
    ] = None,
    query_field: Annotated[
        str | None, Parameter(help="Field of the queried record to use (default Id)")
    ] = None,
    tooling: Annotated[
        bool, Parameter(name=["--tooling", "-t"], help="Run the query against the Tooling API")
    ] = False,
    variable: Annotated[
        str | None, Parameter(help="Org variable to assign: OrgId, InstanceUrl, Username")
    ] = None,
    truncate: Annotated[bool, Parameter(help="Truncate ids to 15 characters")] = False,
    write: Annotated[
        bool, Parameter(name=["--write", "-w"], help="Overwrite the file with its new version")
    ] = False,
    json_output: Annotated[
        bool, Parameter(name="--json", help="Print the resulting document as JSON only")
    ] = False,
    config: Annotated[Path | None, Parameter(help="Connection configuration file")] = None,
    instance_url: Annotated[str | None, Parameter(help="Org instance URL")] = None,
    access_token: Annotated[str | None, Parameter(help="Org access token")] = None,
    api_version: Annotated[str | None, Parameter(help="REST API version")] = None,
    verbose: Annotated[bool, Parameter(help="Show search traces and stack traces")] = False,
    log_level: Annotated[str, Parameter(help="Log level (debug, info, warning, error)")] = "warning",
    log_file: Annotated[Path | None, Parameter(help="Log file path")] = None,
) -> int:
    """Set a property of one component in an ExperienceBundle page file.

    The new value comes from exactly one of --value, --query, or --variable.
    Without --write the updated document is printed and the file is left
    untouched; with --write the file is overwritten and the new property
    value is printed.

    Args:
        file: Path to the page JSON file
        component_id: Id of the component to update
        property: Property to update
        subproperty: Sub-property inside a JSON string stored in ``property``
        value: Literal value
        query: SOQL query whose single record supplies the value
        query_field: Record field to use (default Id)
        tooling: Use the Tooling API for the query
        variable: Org variable (OrgId, InstanceUrl, Username)
        truncate: Keep the first 15 characters of a queried id or the org id
        write: Write the updated document back to ``file``
        json_output: Print only the resulting document as compact JSON
        config: Connection configuration file (JSON or YAML)
        instance_url: Org instance URL (overrides config and environment)
        access_token: Org access token (overrides config and environment)
        api_version: REST API version (overrides config and environment)
        verbose: Show search traces, query results, and stack traces
        log_level: Logging level (debug, info, warning, error)
        log_file: Path to log file (optional)

    Returns:
        Exit code (0 for success, non-zero for errors)

    Example:
        >>> from pathlib import Path
        >>> from expbundle.cli.commands import modify
        >>>
        >>> exit_code = modify(
        ...     file=Path("force-app/main/default/experiences/site1/views/home.json"),
        ...     component_id="69c03077-932a-4c08-b932-46baec5a7c86",
        ...     property="someUnconvertedJSON",
        ...     subproperty="actualPropInsideTheJSON",
        ...     query="select id from organization",
        ...     tooling=True,
        ...     write=True,
        ... )
    """
    try:
        # Value-source flags are checked before any file or network access
        mode = build_resolution_mode(
            value=value,
            query=query,
            query_field=query_field,
            tooling=tooling,
            variable=variable,
            truncate=truncate,
        )
        target = PatchTarget(property=property, subproperty=subproperty)

        configure_logging(log_level, log_file)

        cfg: dict[str, Any] = {}
        if config:
            cfg = load_config(config)
        cfg = merge_config(cfg, **load_env_config())
        cfg = merge_config(
            cfg,
            instance_url=instance_url,
            access_token=access_token,
            api_version=api_version,
        )

        errors = validate_config(cfg, mode)
        if errors:
            print("✗ Configuration validation failed:", file=sys.stderr)
            for error in errors:
                print(f"  {error}", file=sys.stderr)
            return ExitCode.CONFIG_ERROR

        diagnostics = ConsoleDiagnostics(verbose=verbose, machine=json_output)

        with ExitStack() as stack:
            query_client = None
            session = None
            if isinstance(mode, VariableSource):
                session = _session_from_config(cfg)

            if isinstance(mode, QuerySource) or (
                isinstance(mode, VariableSource) and session is None
            ):
                client = stack.enter_context(
                    SalesforceClient(ConnectionSettings.from_config(cfg))
                )
                if isinstance(mode, QuerySource):
                    query_client = client
                else:
                    session = client.session()

            document = update_document(
                path=file,
                component_id=component_id,
                target=target,
                mode=mode,
                store=JsonDocumentStore(),
                query_client=query_client,
                session=session,
                commit=write,
                diagnostics=diagnostics,
            )

        if json_output:
            print(json.dumps(document, ensure_ascii=False))

        return ExitCode.SUCCESS

    except ConfigurationError as e:
        handle_error(e, verbose=verbose)
        return ExitCode.CONFIG_ERROR
    except NotFoundError as e:
        handle_error(e, verbose=verbose)
        return ExitCode.NOT_FOUND_ERROR
    except StorageError as e:
        handle_error(e, verbose=verbose)
        return ExitCode.STORAGE_ERROR
    except QueryError as e:
        handle_error(e, verbose=verbose)
        return ExitCode.QUERY_ERROR
    except MalformedEmbeddedJsonError as e:
        handle_error(e, verbose=verbose)
        return ExitCode.PATCH_ERROR
    except Exception as e:
        handle_error(e, verbose=verbose)
        return ExitCode.UNEXPECTED_ERROR


def check_config(
    config_path: Annotated[Path, Parameter(help="Configuration file path")],
) -> int:
    """Validate a connection configuration file.

    Loads the file, checks its keys and values, and prints a summary with the
    access token redacted. Missing connection settings are reported as a
    note, since literal values need no connection at all.

    Args:
        config_path: Path to configuration file to validate

    Returns:
        Exit code (0 for valid config, 6 for invalid config)

    Example:
        >>> from pathlib import Path
        >>> from expbundle.cli.commands import check_config
        >>>
        >>> exit_code = check_config(config_path=Path("expbundle.yaml"))
    """
    try:
        config = load_config(config_path)
        errors = validate_config(config)

        if errors:
            print("✗ Configuration validation failed:", file=sys.stderr)
            for error in errors:
                print(f"  {error}", file=sys.stderr)
            return ExitCode.CONFIG_ERROR

        print("✓ Configuration is valid")

        for key in ("instance_url", "api_version", "username", "org_id", "timeout"):
            if key in config:
                print(f"  {key}: {config[key]}")
        if config.get("access_token"):
            print("  access_token: ****")

        missing = [k for k in ("instance_url", "access_token") if not config.get(k)]
        if missing:
            print(f"  Note: --query needs {', '.join(missing)}")

        return ExitCode.SUCCESS

    except ConfigurationError as e:
        print("✗ Configuration error:", file=sys.stderr)
        print(f"  {e}", file=sys.stderr)
        return ExitCode.CONFIG_ERROR
    except Exception as e:
        handle_error(e, verbose=False)
        return ExitCode.UNEXPECTED_ERROR
