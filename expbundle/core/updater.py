"""Update orchestration for the load → resolve → locate → patch → save flow.

The updater coordinates one property update on one document:

1. Validation: Reject anything that is not a single resolution mode
2. Load: Read the document through the DocumentStore
3. Resolve: Produce the new value (literal, query, or org variable)
4. Locate: Find the component by id
5. Patch: Write the value into the component's property bag
6. Commit or preview: Save the document, or only display it

Errors from expbundle collaborators propagate unchanged. Anything else is
wrapped in UpdateError with the failing step recorded. Nothing is written
unless every earlier step succeeded.
"""

import json
import logging
from pathlib import Path
from typing import Any

from expbundle.core.exceptions import ConfigurationError, ExpBundleError, UpdateError
from expbundle.core.locator import locate
from expbundle.core.patcher import patch
from expbundle.core.protocols import (
    DiagnosticsSink,
    DocumentStore,
    QueryClient,
    SessionContext,
)
from expbundle.core.resolver import resolve
from expbundle.core.schema import (
    ATTRIBUTES_KEY,
    RESOLUTION_MODE_TYPES,
    Document,
    PatchTarget,
    ResolutionMode,
    component_at,
)

log = logging.getLogger(__name__)


def confirmation_value(value: Any) -> Any:
    """Return ``value`` decoded as JSON when possible, else unchanged.

    Used to echo a committed value: embedded JSON is shown structured, plain
    strings such as record ids are shown as they are.
    """
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def update_document(  # noqa: C901
    path: Path,
    component_id: str,
    target: PatchTarget,
    mode: ResolutionMode,
    store: DocumentStore,
    query_client: QueryClient | None = None,
    session: SessionContext | None = None,
    commit: bool = False,
    diagnostics: DiagnosticsSink | None = None,
) -> Document:
    """Update one component property in the document at ``path``.

    Args:
        path: Path to the page JSON file
        component_id: Id of the component to update
        target: Property and optional sub-property to set
        mode: Source of the new value
        store: Loads and saves the document
        query_client: Needed when ``mode`` is a QuerySource
        session: Needed when ``mode`` is a VariableSource
        commit: Save the document; otherwise only preview it
        diagnostics: Optional sink for traces and displayed JSON

    Returns:
        The updated document (saved only when ``commit`` is True)

    Raises:
        ConfigurationError: If ``mode`` is not a single resolution mode
        StorageError: If the document cannot be loaded or saved
        NotFoundError: If no component has ``component_id``
        QueryError: If the query fails or does not match exactly one record
        MalformedEmbeddedJsonError: If a sub-property update targets a
            property that does not hold an embedded JSON object
        UpdateError: If a collaborator fails with an unexpected exception

    Example:
        >>> from pathlib import Path
        >>> from expbundle.connectors.json_store import JsonDocumentStore
        >>> update_document(
        ...     path=Path("views/home.json"),
        ...     component_id="69c03077-932a-4c08-b932-46baec5a7c86",
        ...     target=PatchTarget("someProp"),
        ...     mode=LiteralSource("NewValue"),
        ...     store=JsonDocumentStore(),
        ...     commit=True,
        ... )
    """
    if not isinstance(mode, RESOLUTION_MODE_TYPES):
        raise ConfigurationError(
            "either query or value or variable has to be specified",
            reason=f"got {type(mode).__name__}",
        )

    step = "load"
    try:
        document = store.load(path)

        step = "resolve"
        value = resolve(mode, query_client=query_client, session=session, diagnostics=diagnostics)

        step = "locate"
        location = locate(document, component_id, diagnostics=diagnostics)

        step = "patch"
        component = component_at(document, location)
        attributes = component.get(ATTRIBUTES_KEY)
        if attributes is None:
            attributes = component[ATTRIBUTES_KEY] = {}
        if target.subproperty is not None and diagnostics is not None:
            diagnostics.trace(f"found existing value : {attributes.get(target.property)}")
            diagnostics.trace("working on subproperty")
        patched = patch(attributes, target, value)
        log.info(
            "Set %s%s on component %s",
            target.property,
            f".{target.subproperty}" if target.subproperty else "",
            component_id,
        )

        if commit:
            step = "save"
            store.save(path, document)
            log.info("Wrote %s", path)
            if diagnostics is not None:
                diagnostics.show_json(confirmation_value(patched))
        elif diagnostics is not None:
            diagnostics.show_json(document)

    except ExpBundleError:
        raise
    except Exception as e:
        raise UpdateError(
            f"Update failed at {step} step: {e}",
            step=step,
            file_path=str(path),
        ) from e

    return document
