"""px-reference: codec for compact, human-typeable reference strings."""

from px_reference.alphabet import (
    PX_ALPHABET,
    U64_MAX,
    Alphabet,
    decode_segment,
    encode_segment,
)
from px_reference.codec import (
    format_reference,
    is_valid,
    parse,
    parse_detailed,
    parse_or_raise,
)
from px_reference.errors import (
    Err,
    InvalidReference,
    Ok,
    ParseErrorKind,
    ReferenceCodecError,
    ReferenceParseError,
    Result,
    SegmentDecodeError,
)
from px_reference.serialization import (
    parse_result_to_dict,
    reference_from_dict,
    reference_to_dict,
    render_reference,
)
from px_reference.types import (
    PROVISIONAL_TYPES,
    SEGMENT_WIDTH,
    TYPE_TABLE,
    FieldSlot,
    Reference,
    ReferenceType,
    TypeLayout,
)

__all__ = [
    "Alphabet",
    "Err",
    "FieldSlot",
    "InvalidReference",
    "Ok",
    "PROVISIONAL_TYPES",
    "PX_ALPHABET",
    "ParseErrorKind",
    "Reference",
    "ReferenceCodecError",
    "ReferenceParseError",
    "ReferenceType",
    "Result",
    "SEGMENT_WIDTH",
    "SegmentDecodeError",
    "TYPE_TABLE",
    "TypeLayout",
    "U64_MAX",
    "decode_segment",
    "encode_segment",
    "format_reference",
    "is_valid",
    "parse",
    "parse_detailed",
    "parse_or_raise",
    "parse_result_to_dict",
    "reference_from_dict",
    "reference_to_dict",
    "render_reference",
]

__version__ = "0.1.0"
