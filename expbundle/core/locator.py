"""Component lookup inside a page document."""

import logging

from expbundle.core.exceptions import NotFoundError
from expbundle.core.protocols import DiagnosticsSink
from expbundle.core.schema import (
    COMPONENT_ID_KEY,
    COMPONENTS_KEY,
    REGION_NAME_KEY,
    REGIONS_KEY,
    ComponentLocation,
    Document,
)

log = logging.getLogger(__name__)


def locate(
    document: Document,
    component_id: str,
    diagnostics: DiagnosticsSink | None = None,
) -> ComponentLocation:
    """Find the first component whose ``id`` equals ``component_id``.

    Regions are scanned in order and, inside each region, components are
    scanned in order. The first match in the whole document wins. Regions
    without components are skipped.

    Args:
        document: Page document with a ``regions`` list
        component_id: Component id to look for
        diagnostics: Optional sink receiving one trace line per region

    Returns:
        Location of the matching component

    Raises:
        NotFoundError: If no component in any region has that id

    Example:
        >>> doc = {"regions": [{"regionName": "header", "components": [{"id": "a"}]}]}
        >>> locate(doc, "a")
        ComponentLocation(region_index=0, component_index=0)
    """
    regions = document[REGIONS_KEY]

    for region_index, region in enumerate(regions):
        components = region.get(COMPONENTS_KEY) or []
        if diagnostics is not None:
            ids = [component.get(COMPONENT_ID_KEY) for component in components]
            diagnostics.trace(
                f"searching in {region.get(REGION_NAME_KEY)}, which has components {ids}"
            )

        for component_index, component in enumerate(components):
            if component.get(COMPONENT_ID_KEY) == component_id:
                log.debug(
                    "Found component %s at region %d, component %d",
                    component_id,
                    region_index,
                    component_index,
                )
                return ComponentLocation(region_index, component_index)

        if diagnostics is not None:
            diagnostics.trace("no matching component found")

    raise NotFoundError(
        "no component was found matching that id",
        component_id=component_id,
        regions_searched=len(regions),
    )
