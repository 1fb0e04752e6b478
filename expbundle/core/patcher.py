"""Property patching for component attribute bags.

A property is either replaced wholesale, or, when a sub-property is given,
treated as a JSON string holding an object: the string is decoded, the
sub-property is set on the decoded object, and the object is encoded back
into the property.
"""

import json
import logging
from typing import Any

from expbundle.core.exceptions import MalformedEmbeddedJsonError
from expbundle.core.schema import PatchTarget

log = logging.getLogger(__name__)


def encode_embedded(value: dict[str, Any]) -> str:
    """Encode an object the way embedded JSON properties are stored (compact)."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def decode_embedded(attributes: dict[str, Any], target: PatchTarget) -> dict[str, Any]:
    """Decode the JSON object embedded in ``attributes[target.property]``.

    Raises:
        MalformedEmbeddedJsonError: If the property is missing, is not a
            string, is not valid JSON, or does not hold a JSON object
    """
    if target.property not in attributes:
        raise MalformedEmbeddedJsonError(
            "property does not exist, so it holds no embedded JSON",
            property=target.property,
            subproperty=target.subproperty,
        )

    existing = attributes[target.property]
    if not isinstance(existing, str):
        raise MalformedEmbeddedJsonError(
            "property is not a JSON-encoded string",
            property=target.property,
            subproperty=target.subproperty,
            reason=f"found {type(existing).__name__}",
        )

    try:
        decoded = json.loads(existing)
    except json.JSONDecodeError as e:
        raise MalformedEmbeddedJsonError(
            "property does not contain valid JSON",
            property=target.property,
            subproperty=target.subproperty,
            reason=str(e),
        ) from e

    if not isinstance(decoded, dict):
        raise MalformedEmbeddedJsonError(
            "embedded JSON is not an object",
            property=target.property,
            subproperty=target.subproperty,
            reason=f"found {type(decoded).__name__}",
        )
    return decoded


def patch(attributes: dict[str, Any], target: PatchTarget, new_value: str) -> Any:
    """Write ``new_value`` into ``attributes`` at ``target``.

    Args:
        attributes: Component property bag, modified in place
        target: Property (and optional sub-property) to update
        new_value: Resolved value

    Returns:
        The value now stored at ``attributes[target.property]``; for a
        sub-property update this is the re-encoded JSON string

    Raises:
        MalformedEmbeddedJsonError: If a sub-property update targets a value
            that is not an embedded JSON object

    Example:
        >>> attrs = {"title": '{"label":"Old"}'}
        >>> patch(attrs, PatchTarget("title", "label"), "New")
        '{"label":"New"}'
    """
    if target.subproperty is None:
        attributes[target.property] = new_value
        return new_value

    log.debug("Found existing value: %r", attributes.get(target.property))
    embedded = decode_embedded(attributes, target)
    embedded[target.subproperty] = new_value
    encoded = encode_embedded(embedded)
    attributes[target.property] = encoded
    return encoded
