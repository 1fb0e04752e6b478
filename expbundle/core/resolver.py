"""Value resolution for property updates.

Turns a resolution mode into the string that will be written:

1. LiteralSource: the value itself
2. QuerySource: one field of the single record returned by the org
3. VariableSource: the org id, instance URL, or username of the session

Query and variable values can be truncated to the 15-character short form of
a Salesforce id.
"""

import logging
from collections.abc import Mapping
from typing import Any

from expbundle.core.exceptions import (
    AmbiguousQueryError,
    ConfigurationError,
    NoRecordsError,
    QueryError,
)
from expbundle.core.protocols import DiagnosticsSink, QueryClient, SessionContext
from expbundle.core.schema import (
    SHORT_ID_LENGTH,
    LiteralSource,
    OrgVariable,
    QuerySource,
    ResolutionMode,
    VariableSource,
)

log = logging.getLogger(__name__)


def truncate_id(value: str) -> str:
    """Return the first 15 characters of ``value``.

    Example:
        >>> truncate_id("001xx0000001234AAA")
        '001xx0000001234'
    """
    return value[:SHORT_ID_LENGTH]


def resolve(
    mode: ResolutionMode,
    query_client: QueryClient | None = None,
    session: SessionContext | None = None,
    diagnostics: DiagnosticsSink | None = None,
) -> str:
    """Produce the value to write for ``mode``.

    Args:
        mode: Exactly one of LiteralSource, QuerySource, VariableSource
        query_client: Client used by QuerySource
        session: Org values used by VariableSource
        diagnostics: Optional sink tracing the raw query result

    Returns:
        Value to store in the target property

    Raises:
        ConfigurationError: If ``mode`` is not a resolution mode, or the
            collaborator it needs was not supplied
        NoRecordsError: If the query matched no record
        AmbiguousQueryError: If the query matched more than one record
        QueryError: If the org rejected the query or the field is missing
    """
    if isinstance(mode, LiteralSource):
        return mode.value
    if isinstance(mode, QuerySource):
        if query_client is None:
            raise ConfigurationError(
                "a query client is required to resolve a query", option="query"
            )
        return _resolve_query(mode, query_client, diagnostics)
    if isinstance(mode, VariableSource):
        if session is None:
            raise ConfigurationError(
                "an org session is required to resolve a variable", option="variable"
            )
        return _resolve_variable(mode, session)

    raise ConfigurationError(
        "either query or value or variable has to be specified",
        reason=f"unsupported resolution mode: {type(mode).__name__}",
    )


def _resolve_query(
    mode: QuerySource,
    query_client: QueryClient,
    diagnostics: DiagnosticsSink | None,
) -> str:
    log.info("Querying %s API: %s", "tooling" if mode.use_tooling_api else "data", mode.soql)
    result = query_client.query(mode.soql, use_tooling=mode.use_tooling_api)
    if diagnostics is not None:
        diagnostics.trace_json(result)

    total_size = result.get("totalSize", 0)
    if total_size == 0:
        raise NoRecordsError(
            "no records found for your query",
            query=mode.soql,
            tooling=mode.use_tooling_api,
        )
    if total_size > 1:
        raise AmbiguousQueryError(
            "multiple records found...fix your query",
            query=mode.soql,
            tooling=mode.use_tooling_api,
            total_size=total_size,
        )

    records = result.get("records") or []
    if not records:
        raise NoRecordsError(
            "no records found for your query",
            query=mode.soql,
            tooling=mode.use_tooling_api,
            total_size=total_size,
        )

    record = records[0]
    value = _record_field(record, mode.field)
    if value is None:
        raise QueryError(
            "queried field has no value on the returned record",
            query=mode.soql,
            field=mode.field,
        )

    text = value if isinstance(value, str) else str(value)
    return truncate_id(text) if mode.truncate else text


def _record_field(record: Mapping[str, Any], field: str) -> Any:
    """Read ``field`` from ``record``; field names are case-insensitive."""
    if field in record:
        return record[field]

    wanted = field.lower()
    for key, value in record.items():
        if key.lower() == wanted:
            return value

    available = sorted(key for key in record if key != "attributes")
    raise QueryError(
        "field not found on the returned record",
        field=field,
        available=available,
    )


def _resolve_variable(mode: VariableSource, session: SessionContext) -> str:
    if mode.name is OrgVariable.ORG_ID:
        org_id = session.org_id
        return truncate_id(org_id) if mode.truncate else org_id

    if mode.truncate:
        log.warning("Ignoring truncate for variable %s", mode.name.value)

    if mode.name is OrgVariable.USERNAME:
        return session.username
    if mode.name is OrgVariable.INSTANCE_URL:
        return session.instance_url.removesuffix("/")

    raise ConfigurationError("unknown variable", option="variable", value=str(mode.name))
