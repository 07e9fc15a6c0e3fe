"""Failure taxonomy and Result type for reference parsing.

``parse`` erases every failure into ``None``; ``parse_detailed`` returns
``Ok(reference)`` or ``Err(ReferenceParseError)`` so the reason survives.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


type ParseErrorKind = Literal[
    "unknown_tag",
    "slot_count_mismatch",
    "invalid_character",
    "overflow",
]
type SegmentErrorKind = Literal["empty_segment", "invalid_character", "overflow"]


# ---------------------------------------------------------------------------
# Result ADT
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Success case of Result[T, E].

    Usage::

        match parse_detailed(text):
            case Ok(value=reference): ...
            case Err(error=error): print(error.kind)
    """

    value: T


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failure case of Result[T, E]."""

    error: E


type Result[T, E] = Ok[T] | Err[E]


@dataclass(frozen=True, slots=True)
class ReferenceParseError:
    """Typed failure for one parse call. None erases the reason; this preserves it."""

    kind: ParseErrorKind
    message: str
    raw: str
    segment_index: int | None = None  # 0 is the tag, slots start at 1

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind,
            "message": self.message,
            "segment_index": self.segment_index,
        }


class ReferenceCodecError(ValueError):
    """Base for reference codec errors."""


class SegmentDecodeError(ReferenceCodecError):
    """Raised by ``decode_segment`` for malformed segment text."""

    def __init__(
        self,
        kind: SegmentErrorKind,
        text: str,
        *,
        position: int | None = None,
        character: str | None = None,
    ) -> None:
        self.kind = kind
        self.text = text
        self.position = position
        self.character = character
        if kind == "empty_segment":
            message = "segment is empty"
        elif kind == "invalid_character":
            message = f"invalid character {character!r} at position {position} in segment {text!r}"
        else:
            message = f"segment {text!r} exceeds 64 bits"
        super().__init__(message)


class InvalidReference(ReferenceCodecError):
    """Raised by ``parse_or_raise``; carries the typed failure."""

    def __init__(self, error: ReferenceParseError) -> None:
        self.error = error
        super().__init__(f"invalid reference {error.raw!r}: {error.message}")

    @property
    def kind(self) -> ParseErrorKind:
        return self.error.kind
