"""Segment alphabet and fixed-width segment codec.

A segment is a base-16 numeral written with letters only, so references stay
typeable and never mix digits with the tag letters:

  A B C D E F G H I J  ->  0 .. 9
  R S T U V W          ->  10 .. 15

``A`` is the zero symbol. Numerals are most-significant symbol first, e.g.
``AAAACD`` = 0x23 = 35 and ``WWWWWWWW`` = 0xFFFFFFFF. Decoding is
case-insensitive; encoding always emits upper case.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from px_reference.errors import SegmentDecodeError


U64_MAX = (1 << 64) - 1

# ---------------------------------------------------------------------------
# Alphabet
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Alphabet:
    """Ordered symbol set; a symbol's index is its digit value."""

    symbols: str
    _values: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.symbols) < 2:
            raise ValueError("alphabet needs at least two symbols")
        if self.symbols != self.symbols.upper():
            raise ValueError(f"alphabet symbols must be upper case, got {self.symbols!r}")
        if len(set(self.symbols)) != len(self.symbols):
            raise ValueError(f"alphabet symbols must be unique, got {self.symbols!r}")
        object.__setattr__(
            self, "_values", {symbol: idx for idx, symbol in enumerate(self.symbols)},
        )

    @property
    def base(self) -> int:
        return len(self.symbols)

    @property
    def zero(self) -> str:
        return self.symbols[0]

    def value_of(self, char: str) -> int | None:
        """Digit value of ``char`` (either case), or None if not in the alphabet."""
        if not char.isascii():
            return None
        return self._values.get(char.upper())

    def symbol_for(self, value: int) -> str:
        if not 0 <= value < self.base:
            raise ValueError(f"digit {value} out of range for base {self.base}")
        return self.symbols[value]

    def max_width(self, bits: int) -> int:
        """Symbols needed to write any unsigned ``bits``-bit value."""
        width = 1
        while self.base ** width < (1 << bits):
            width += 1
        return width


PX_ALPHABET = Alphabet("ABCDEFGHIJRSTUVW")


# ---------------------------------------------------------------------------
# Segment codec
# ---------------------------------------------------------------------------


def encode_segment(value: int, width: int, alphabet: Alphabet = PX_ALPHABET) -> str:
    """Render ``value`` left-padded with the zero symbol to exactly ``width`` symbols.

    Raises ValueError when the value cannot be written in ``width`` symbols;
    callers are expected to hold a value that fits.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"segment value must be an int, got {type(value).__name__}")
    if width < 1:
        raise ValueError(f"width must be >= 1, got {width}")
    if value < 0:
        raise ValueError(f"segment value must be >= 0, got {value}")
    base = alphabet.base
    if value >= base ** width:
        raise ValueError(f"value {value} does not fit in {width} base-{base} symbols")

    digits: list[str] = []
    remaining = value
    while remaining:
        remaining, digit = divmod(remaining, base)
        digits.append(alphabet.symbols[digit])
    return "".join(reversed(digits)).rjust(width, alphabet.zero)


def decode_segment(text: str, alphabet: Alphabet = PX_ALPHABET) -> int:
    """Decode a segment numeral into an unsigned 64-bit int.

    Raises SegmentDecodeError with kind ``empty_segment``,
    ``invalid_character`` or ``overflow``.
    """
    if not text:
        raise SegmentDecodeError("empty_segment", text)

    base = alphabet.base
    value = 0
    for position, char in enumerate(text):
        digit = alphabet.value_of(char)
        if digit is None:
            raise SegmentDecodeError(
                "invalid_character", text, position=position, character=char,
            )
        value = value * base + digit
        if value > U64_MAX:
            raise SegmentDecodeError("overflow", text, position=position)
    return value
