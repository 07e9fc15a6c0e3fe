"""Reference types, slot layouts, and the ``Reference`` value.

``BA`` (company space id, object id) is the tag seen in deployed references.
The other tags are provisional: they cover the remaining slot combinations
and are listed in ``PROVISIONAL_TYPES`` until deployed references confirm them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from px_reference.alphabet import PX_ALPHABET, U64_MAX


# Output width of every slot segment: enough symbols for any 64-bit value.
SEGMENT_WIDTH = PX_ALPHABET.max_width(64)
TAG_LENGTH = 2


class FieldSlot(Enum):
    """Numeric field a reference type may declare, in canonical order."""

    COMPANY_SPACE_ID = "company_space_id"
    AGGREGATE_ROOT_ID = "aggregate_root_id"
    REVISION = "revision"
    OBJECT_ID = "object_id"

    @property
    def attribute(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        return _SLOT_LABELS[self]


_SLOT_LABELS: dict[FieldSlot, str] = {
    FieldSlot.COMPANY_SPACE_ID: "CompanySpace Id",
    FieldSlot.AGGREGATE_ROOT_ID: "AggregateRoot Id",
    FieldSlot.REVISION: "Revision",
    FieldSlot.OBJECT_ID: "Object Id",
}


class ReferenceType(Enum):
    """Closed set of reference types; the value is the 2-letter tag."""

    COMPANY_SPACE = "CS"
    BUSINESS_OBJECT = "BA"
    AGGREGATE_ROOT = "AR"
    AGGREGATE_REVISION = "RV"
    AGGREGATE_OBJECT = "AO"
    GLOBAL_OBJECT = "GO"

    @property
    def tag(self) -> str:
        return self.value

    @property
    def layout(self) -> TypeLayout:
        return _LAYOUTS[self]

    @property
    def slots(self) -> tuple[FieldSlot, ...]:
        return _LAYOUTS[self].slots

    @property
    def provisional(self) -> bool:
        return self in PROVISIONAL_TYPES

    @classmethod
    def from_tag(cls, tag: str) -> ReferenceType | None:
        """Exact, case-sensitive tag lookup; None for unknown tags."""
        layout = _LAYOUTS_BY_TAG.get(tag)
        return layout.reference_type if layout is not None else None


# ---------------------------------------------------------------------------
# Type table
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TypeLayout:
    """Segment layout of one reference type."""

    reference_type: ReferenceType
    slots: tuple[FieldSlot, ...]
    width: int = SEGMENT_WIDTH

    def __post_init__(self) -> None:
        tag = self.reference_type.tag
        if len(tag) != TAG_LENGTH or not (tag.isascii() and tag.isalpha() and tag.isupper()):
            raise ValueError(f"tag must be {TAG_LENGTH} upper-case letters, got {tag!r}")
        if len(set(self.slots)) != len(self.slots):
            raise ValueError(f"duplicate slot in layout for {tag!r}")
        if self.width < 1:
            raise ValueError(f"width must be >= 1, got {self.width}")

    @property
    def tag(self) -> str:
        return self.reference_type.tag


_C = FieldSlot.COMPANY_SPACE_ID
_A = FieldSlot.AGGREGATE_ROOT_ID
_R = FieldSlot.REVISION
_O = FieldSlot.OBJECT_ID

TYPE_TABLE: tuple[TypeLayout, ...] = (
    TypeLayout(ReferenceType.COMPANY_SPACE, (_C,)),
    TypeLayout(ReferenceType.BUSINESS_OBJECT, (_C, _O)),
    TypeLayout(ReferenceType.AGGREGATE_ROOT, (_C, _A)),
    TypeLayout(ReferenceType.AGGREGATE_REVISION, (_C, _A, _R)),
    TypeLayout(ReferenceType.AGGREGATE_OBJECT, (_C, _A, _R, _O)),
    TypeLayout(ReferenceType.GLOBAL_OBJECT, (_O,)),
)


def _index_layouts(
    table: tuple[TypeLayout, ...],
) -> tuple[dict[ReferenceType, TypeLayout], dict[str, TypeLayout]]:
    by_type: dict[ReferenceType, TypeLayout] = {}
    by_tag: dict[str, TypeLayout] = {}
    for layout in table:
        if layout.reference_type in by_type:
            raise ValueError(f"reference type {layout.reference_type.name} declared twice")
        by_type[layout.reference_type] = layout
        by_tag[layout.tag] = layout
    missing = set(ReferenceType) - set(by_type)
    if missing:
        names = ", ".join(sorted(rt.name for rt in missing))
        raise ValueError(f"reference types without a layout: {names}")
    return by_type, by_tag


_LAYOUTS, _LAYOUTS_BY_TAG = _index_layouts(TYPE_TABLE)

PROVISIONAL_TYPES: frozenset[ReferenceType] = frozenset({
    ReferenceType.COMPANY_SPACE,
    ReferenceType.AGGREGATE_ROOT,
    ReferenceType.AGGREGATE_REVISION,
    ReferenceType.AGGREGATE_OBJECT,
    ReferenceType.GLOBAL_OBJECT,
})


# ---------------------------------------------------------------------------
# Reference value
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Reference:
    """Structured reference: a type plus the slot values that type declares.

    A field is set if and only if the type declares its slot.
    """

    reference_type: ReferenceType
    company_space_id: int | None = None
    aggregate_root_id: int | None = None
    revision: int | None = None
    object_id: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.reference_type, ReferenceType):
            raise ValueError(f"reference_type must be a ReferenceType, got {self.reference_type!r}")
        declared = self.reference_type.slots
        for slot in FieldSlot:
            value = getattr(self, slot.attribute)
            if slot not in declared:
                if value is not None:
                    raise ValueError(
                        f"{slot.attribute} is not part of {self.reference_type.tag} references",
                    )
                continue
            if value is None:
                raise ValueError(f"{slot.attribute} is required for {self.reference_type.tag} references")
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{slot.attribute} must be an int, got {type(value).__name__}")
            if not 0 <= value <= U64_MAX:
                raise ValueError(f"{slot.attribute} must be in [0, 2**64 - 1], got {value}")

    @classmethod
    def build(cls, reference_type: ReferenceType, *values: int) -> Reference:
        """Fill the type's slots positionally, in declared order."""
        slots = reference_type.slots
        if len(values) != len(slots):
            raise ValueError(
                f"{reference_type.tag} references take {len(slots)} values, got {len(values)}",
            )
        fields = {slot.attribute: value for slot, value in zip(slots, values)}
        return cls(reference_type, **fields)

    def get(self, slot: FieldSlot) -> int | None:
        return getattr(self, slot.attribute)

    def slot_values(self) -> list[tuple[FieldSlot, int]]:
        """(slot, value) pairs in the type's declared order."""
        return [(slot, getattr(self, slot.attribute)) for slot in self.reference_type.slots]
