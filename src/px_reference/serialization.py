"""Dict/JSON boundary for references.

The dict shape is what display layers consume: every field key is always
present and absent fields are ``None``.
"""

from __future__ import annotations

from typing import Any

import orjson

from px_reference.codec import format_reference, parse_detailed
from px_reference.errors import Err, InvalidReference, Ok, ReferenceParseError
from px_reference.types import FieldSlot, Reference, ReferenceType

INVALID_REFERENCE_TEXT = "Invalid reference"
ABSENT_FIELD_TEXT = "None"


def reference_to_dict(reference: Reference) -> dict[str, Any]:
    row: dict[str, Any] = {
        "reference": format_reference(reference),
        "reference_type": reference.reference_type.tag,
    }
    for slot in FieldSlot:
        row[slot.attribute] = reference.get(slot)
    return row


def reference_from_dict(payload: dict[str, Any]) -> Reference:
    """Rebuild a Reference from ``reference_to_dict`` output.

    The ``reference`` string key is ignored; fields are authoritative.
    Raises InvalidReference for an unknown type tag and ValueError for
    fields that do not match the type.
    """
    tag = str(payload.get("reference_type", ""))
    reference_type = ReferenceType.from_tag(tag)
    if reference_type is None:
        raise InvalidReference(
            ReferenceParseError(
                kind="unknown_tag",
                message=f"unknown reference tag {tag!r}",
                raw=tag,
                segment_index=0,
            ),
        )
    fields = {slot.attribute: payload.get(slot.attribute) for slot in FieldSlot}
    return Reference(reference_type, **fields)


def parse_result_to_dict(text: str) -> dict[str, Any]:
    match parse_detailed(text):
        case Ok(value=reference):
            return {"input": text, "valid": True, "reference": reference_to_dict(reference)}
        case Err(error=error):
            return {"input": text, "valid": False, "error": error.to_dict()}


def render_reference(reference: Reference | None) -> str:
    """Labelled plain-text rendering, or the invalid-reference message."""
    if reference is None:
        return INVALID_REFERENCE_TEXT
    lines = [f"Reference Type: {reference.reference_type.tag}"]
    for slot in FieldSlot:
        value = reference.get(slot)
        lines.append(f"{slot.label}: {value if value is not None else ABSENT_FIELD_TEXT}")
    return "\n".join(lines)


def dumps(obj: Any, *, pretty: bool = False) -> bytes:
    # orjson rejects ints above 64 bits; slot values never exceed that.
    option = orjson.OPT_SORT_KEYS
    if pretty:
        option |= orjson.OPT_INDENT_2
    return orjson.dumps(obj, option=option)


def loads(raw: bytes | str) -> Any:
    return orjson.loads(raw)
