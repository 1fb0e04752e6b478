"""Data model for ExperienceBundle page documents and update requests.

A page document is plain JSON: a root object holding ``regions``, each region
holding ``components``, each component holding an ``id`` and a
``componentAttributes`` property bag. Documents stay as decoded ``dict``
objects so that unknown keys survive a load/save cycle untouched.

Resolution modes:
    - LiteralSource: A value given directly
    - QuerySource: A field of the single record returned by a SOQL query
    - VariableSource: One of the org variables (OrgId, InstanceUrl, Username)

Exactly one of them is active per update; ``ResolutionMode`` is their union.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

Document = dict[str, Any]
"""Decoded page document (root object with a ``regions`` list)."""

REGIONS_KEY = "regions"
REGION_NAME_KEY = "regionName"
COMPONENTS_KEY = "components"
COMPONENT_ID_KEY = "id"
ATTRIBUTES_KEY = "componentAttributes"

# Canonical short form of a Salesforce record id
SHORT_ID_LENGTH = 15

DEFAULT_QUERY_FIELD = "Id"


class OrgVariable(str, Enum):
    """Org values that can be assigned to a property by name."""

    ORG_ID = "OrgId"
    INSTANCE_URL = "InstanceUrl"
    USERNAME = "Username"


@dataclass(frozen=True)
class LiteralSource:
    """Use ``value`` as-is."""

    value: str


@dataclass(frozen=True)
class QuerySource:
    """Use one field of the single record returned by ``soql``.

    Attributes:
        soql: Query text sent to the org
        field: Record field to read (default ``Id``)
        use_tooling_api: Query the Tooling API instead of the data API
        truncate: Keep only the first 15 characters of the value
    """

    soql: str
    field: str = DEFAULT_QUERY_FIELD
    use_tooling_api: bool = False
    truncate: bool = False


@dataclass(frozen=True)
class VariableSource:
    """Use an org variable taken from the session context."""

    name: OrgVariable
    truncate: bool = False


ResolutionMode = Union[LiteralSource, QuerySource, VariableSource]

RESOLUTION_MODE_TYPES = (LiteralSource, QuerySource, VariableSource)


@dataclass(frozen=True)
class PatchTarget:
    """Property to update, optionally a sub-property inside embedded JSON."""

    property: str
    subproperty: str | None = None


@dataclass(frozen=True)
class ComponentLocation:
    """Coordinate of a component inside a document."""

    region_index: int
    component_index: int


def component_at(document: Document, location: ComponentLocation) -> dict[str, Any]:
    """Return the component stored at ``location``."""
    region = document[REGIONS_KEY][location.region_index]
    return region[COMPONENTS_KEY][location.component_index]


def is_page_document(value: Any) -> bool:
    """Return True if ``value`` looks like a page document.

    Only the shape needed to locate components is checked: a JSON object
    whose ``regions`` entry is a list.
    """
    return isinstance(value, dict) and isinstance(value.get(REGIONS_KEY), list)
