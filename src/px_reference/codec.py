"""Reference string codec.

Text format::

    reference := tag ('-' segment)*
    tag       := 2 upper-case letters from the type table (case-sensitive)
    segment   := 1+ alphabet symbols (case-insensitive), one per declared slot

``parse`` is the boundary contract: any malformed input yields None.
``parse_detailed`` runs the same pipeline and returns ``Ok(Reference)`` or
``Err(ReferenceParseError)`` instead of erasing the reason.
"""

from __future__ import annotations

import logging

from px_reference.alphabet import decode_segment, encode_segment
from px_reference.errors import (
    Err,
    InvalidReference,
    Ok,
    ParseErrorKind,
    ReferenceParseError,
    Result,
    SegmentDecodeError,
)
from px_reference.types import TAG_LENGTH, FieldSlot, Reference, ReferenceType

logger = logging.getLogger(__name__)

DELIMITER = "-"


def _fail(
    raw: str,
    kind: ParseErrorKind,
    message: str,
    segment_index: int | None = None,
) -> Err[ReferenceParseError]:
    logger.debug("rejected reference %r: %s", raw, message)
    return Err(
        ReferenceParseError(
            kind=kind,
            message=message,
            raw=raw,
            segment_index=segment_index,
        ),
    )


def parse_detailed(text: str) -> Result[Reference, ReferenceParseError]:
    """Parse ``text`` into a Reference, or return the first failure.

    Steps, stopping at the first failure:
    1. split on ``-``
    2. resolve the tag
    3. check the segment count against the type's slots
    4. decode each segment in declared order
    5. build the Reference
    """
    if not isinstance(text, str):
        return _fail(repr(text), "unknown_tag", f"expected str, got {type(text).__name__}")

    raw = text
    segments = text.strip().split(DELIMITER)
    tag = segments[0]

    reference_type = ReferenceType.from_tag(tag) if len(tag) == TAG_LENGTH else None
    if reference_type is None:
        return _fail(raw, "unknown_tag", f"unknown reference tag {tag!r}", 0)

    slots = reference_type.slots
    values = segments[1:]
    if len(values) != len(slots):
        return _fail(
            raw,
            "slot_count_mismatch",
            f"{tag} references take {len(slots)} segments, got {len(values)}",
        )

    fields: dict[str, int] = {}
    for index, (slot, segment) in enumerate(zip(slots, values), start=1):
        try:
            fields[slot.attribute] = decode_segment(segment)
        except SegmentDecodeError as exc:
            kind: ParseErrorKind = "overflow" if exc.kind == "overflow" else "invalid_character"
            return _fail(raw, kind, f"{slot.attribute}: {exc}", index)

    return Ok(Reference(reference_type, **fields))


def parse(text: str) -> Reference | None:
    """Parse a reference string; None for any malformed input."""
    match parse_detailed(text):
        case Ok(value=reference):
            return reference
        case Err():
            return None


def parse_or_raise(text: str) -> Reference:
    """Parse a reference string or raise InvalidReference with the reason."""
    match parse_detailed(text):
        case Ok(value=reference):
            return reference
        case Err(error=error):
            raise InvalidReference(error)


def is_valid(text: str) -> bool:
    return isinstance(parse_detailed(text), Ok)


def format_reference(reference: Reference) -> str:
    """Inverse of ``parse``: tag, then each declared slot at the layout's width."""
    layout = reference.reference_type.layout
    parts = [layout.tag]
    for slot in FieldSlot:
        value = reference.get(slot)
        if (value is None) == (slot in layout.slots):
            raise ValueError(
                f"{slot.attribute}={value!r} does not match the {layout.tag} layout",
            )
    for slot in layout.slots:
        parts.append(encode_segment(reference.get(slot), layout.width))
    return DELIMITER.join(parts)
