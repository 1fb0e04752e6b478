"""Protocol definitions for expbundle collaborators.

The core never performs I/O itself. Loading and saving documents, talking to
the org, and printing diagnostics are injected through these interfaces.

Protocols:
    - DocumentStore: Loads and saves page documents
    - QueryClient: Runs SOQL queries against an org
    - SessionContext: Exposes the org id, username, and instance URL
    - DiagnosticsSink: Receives verbose traces and JSON values to display
"""

from pathlib import Path
from typing import Any, Protocol

from expbundle.core.schema import Document


class DocumentStore(Protocol):
    """Protocol for page document storage.

    Implementations must:

    1. Return the decoded document from ``load``
    2. Reject input that has no ``regions`` list
    3. Write documents with stable 2-space indentation
    4. Raise StorageError for any load or save failure

    Example:
        >>> class InMemoryStore:
        ...     def __init__(self, document):
        ...         self.document = document
        ...     def load(self, path: Path) -> Document:
        ...         return self.document
        ...     def save(self, path: Path, document: Document) -> None:
        ...         self.document = document
    """

    def load(self, path: Path) -> Document:
        """Read and decode the document stored at ``path``.

        Args:
            path: Path to the page JSON file

        Returns:
            Decoded document

        Raises:
            StorageError: If the file cannot be read or is not a page document
        """
        ...

    def save(self, path: Path, document: Document) -> None:
        """Serialize ``document`` to ``path``.

        Args:
            path: Path to write
            document: Document to serialize

        Raises:
            StorageError: If the file cannot be written
        """
        ...


class QueryClient(Protocol):
    """Protocol for running SOQL queries against an org."""

    def query(self, soql: str, use_tooling: bool = False) -> dict[str, Any]:
        """Run ``soql`` and return the raw query result.

        Args:
            soql: Query text
            use_tooling: Query the Tooling API instead of the data API

        Returns:
            Mapping with at least ``totalSize`` (int) and ``records`` (list of
            mappings)

        Raises:
            QueryError: If the org rejects the query or cannot be reached
        """
        ...


class SessionContext(Protocol):
    """Protocol for the org values available to variable resolution."""

    @property
    def org_id(self) -> str: ...

    @property
    def username(self) -> str: ...

    @property
    def instance_url(self) -> str: ...


class DiagnosticsSink(Protocol):
    """Protocol for observational output.

    Implementations decide whether traces are shown; calling them must never
    change the outcome of an update.
    """

    def trace(self, message: str) -> None:
        """Record a verbose diagnostic line."""
        ...

    def trace_json(self, value: Any) -> None:
        """Record an intermediate JSON value, shown only with verbose traces."""
        ...

    def show_json(self, value: Any) -> None:
        """Display a JSON-serializable value."""
        ...
