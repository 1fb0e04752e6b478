"""Custom exception classes for expbundle error handling.

This module defines the exception hierarchy for modifying ExperienceBundle
documents:
- ConfigurationError: Missing, conflicting, or invalid inputs
- NotFoundError: No component matches the requested id
- StorageError: Document load/save failures
- QueryError: Remote query failures (NoRecordsError, AmbiguousQueryError)
- MalformedEmbeddedJsonError: Sub-property target is not embedded JSON
- UpdateError: Unexpected collaborator failure during an update

All exceptions inherit from ExpBundleError for consistent error handling.
"""

from typing import Any


class ExpBundleError(Exception):
    """Base exception for all expbundle errors.

    Carries a human-readable message plus a context dictionary that the CLI
    renders underneath the message.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error description
            context: Optional dictionary of contextual information (file paths,
                    component ids, query text, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return a formatted error message with context."""
        if not self.context:
            return self.message

        context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"{self.message} [{context_str}]"


class ConfigurationError(ExpBundleError):
    """Exception raised when inputs are missing, conflicting, or invalid.

    Raised before any I/O happens: zero or several value sources, flags that
    do not combine (truncate with a literal value, tooling without a query),
    unreadable configuration files, or missing connection settings.

    Context typically includes:
        - option: The offending option or configuration key
        - reason: Specific reason the configuration was rejected
    """

    def __init__(
        self,
        message: str,
        option: str | None = None,
        reason: str | None = None,
        **extra_context: Any,
    ) -> None:
        context: dict[str, Any] = {}
        if option is not None:
            context["option"] = option
        if reason is not None:
            context["reason"] = reason
        context.update(extra_context)

        super().__init__(message, context)


class NotFoundError(ExpBundleError):
    """Exception raised when no component in the document has the given id.

    Context typically includes:
        - component_id: The id that was searched for
        - regions_searched: Number of regions scanned
    """

    def __init__(
        self,
        message: str,
        component_id: str | None = None,
        regions_searched: int | None = None,
        **extra_context: Any,
    ) -> None:
        context: dict[str, Any] = {}
        if component_id is not None:
            context["component_id"] = component_id
        if regions_searched is not None:
            context["regions_searched"] = regions_searched
        context.update(extra_context)

        super().__init__(message, context)


class StorageError(ExpBundleError):
    """Exception raised when a document cannot be loaded or saved.

    Context typically includes:
        - file_path: Path of the document
        - operation: "load" or "save"
        - reason: Underlying OS or decode error
    """

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        operation: str | None = None,
        reason: str | None = None,
        **extra_context: Any,
    ) -> None:
        context: dict[str, Any] = {}
        if file_path is not None:
            context["file_path"] = file_path
        if operation is not None:
            context["operation"] = operation
        if reason is not None:
            context["reason"] = reason
        context.update(extra_context)

        super().__init__(message, context)


class QueryError(ExpBundleError):
    """Exception raised when a query against the org fails.

    Context typically includes:
        - query: The SOQL text
        - tooling: Whether the Tooling API endpoint was used
        - status_code: HTTP status returned by the org
        - error_code: Salesforce errorCode from the response body
        - field: Field that was requested from the record
    """

    def __init__(
        self,
        message: str,
        query: str | None = None,
        tooling: bool | None = None,
        status_code: int | None = None,
        error_code: str | None = None,
        field: str | None = None,
        **extra_context: Any,
    ) -> None:
        context: dict[str, Any] = {}
        if query is not None:
            context["query"] = query
        if tooling is not None:
            context["tooling"] = tooling
        if status_code is not None:
            context["status_code"] = status_code
        if error_code is not None:
            context["error_code"] = error_code
        if field is not None:
            context["field"] = field
        context.update(extra_context)

        super().__init__(message, context)


class NoRecordsError(QueryError):
    """Exception raised when a query returns no records."""


class AmbiguousQueryError(QueryError):
    """Exception raised when a query returns more than one record.

    The caller has to narrow the query; no record is ever picked on its own.
    """


class MalformedEmbeddedJsonError(ExpBundleError):
    """Exception raised when a sub-property update targets a non-JSON value.

    Context typically includes:
        - property: Property expected to hold embedded JSON
        - subproperty: Sub-property that was to be set
        - reason: Decoder message or type mismatch description
    """

    def __init__(
        self,
        message: str,
        property: str | None = None,
        subproperty: str | None = None,
        reason: str | None = None,
        **extra_context: Any,
    ) -> None:
        context: dict[str, Any] = {}
        if property is not None:
            context["property"] = property
        if subproperty is not None:
            context["subproperty"] = subproperty
        if reason is not None:
            context["reason"] = reason
        context.update(extra_context)

        super().__init__(message, context)


class UpdateError(ExpBundleError):
    """Exception raised when an update fails for an unexpected reason.

    Wraps errors that are not ExpBundleError subclasses (for example a
    misbehaving collaborator) and records which step failed.

    Context typically includes:
        - step: load, resolve, locate, patch, save
        - file_path: Path of the document being updated
    """

    def __init__(
        self,
        message: str,
        step: str | None = None,
        file_path: str | None = None,
        **extra_context: Any,
    ) -> None:
        context: dict[str, Any] = {}
        if step is not None:
            context["step"] = step
        if file_path is not None:
            context["file_path"] = file_path
        context.update(extra_context)

        super().__init__(message, context)
