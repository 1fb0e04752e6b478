"""Locate, resolve, and patch: the document update core.

Public API:
    - update_document: Orchestrates a single property update
    - locate: Finds a component by id
    - resolve: Produces the value from a resolution mode
    - patch: Writes a value into a property or embedded JSON sub-property
"""

from expbundle.core.exceptions import (
    AmbiguousQueryError,
    ConfigurationError,
    ExpBundleError,
    MalformedEmbeddedJsonError,
    NoRecordsError,
    NotFoundError,
    QueryError,
    StorageError,
    UpdateError,
)
from expbundle.core.locator import locate
from expbundle.core.patcher import patch
from expbundle.core.resolver import resolve
from expbundle.core.schema import (
    ComponentLocation,
    LiteralSource,
    OrgVariable,
    PatchTarget,
    QuerySource,
    ResolutionMode,
    VariableSource,
)
from expbundle.core.updater import update_document

__all__ = [
    "AmbiguousQueryError",
    "ComponentLocation",
    "ConfigurationError",
    "ExpBundleError",
    "LiteralSource",
    "MalformedEmbeddedJsonError",
    "NoRecordsError",
    "NotFoundError",
    "OrgVariable",
    "PatchTarget",
    "QuerySource",
    "QueryError",
    "ResolutionMode",
    "StorageError",
    "UpdateError",
    "VariableSource",
    "locate",
    "patch",
    "resolve",
    "update_document",
]
