"""Reading and writing bit fields inside 64-bit words."""

from __future__ import annotations

WORD_BITS = 64
_MASK64 = (1 << WORD_BITS) - 1


class BitpackOverflow(OverflowError):
    """Raised when a value does not fit in the field it is packed into."""

    def __init__(self, message: str = "Overflow packing bits") -> None:
        super().__init__(message)


def _check_width(width: int) -> None:
    if not 0 <= width <= WORD_BITS:
        raise ValueError(f"field width {width} is outside 0..{WORD_BITS}")


def _check_field(width: int, lsb: int) -> None:
    _check_width(width)
    if lsb < 0 or lsb + width > WORD_BITS:
        raise ValueError(
            f"field of width {width} at bit {lsb} does not fit in {WORD_BITS} bits"
        )


def fitss(n: int, width: int) -> bool:
    """Return True if the signed integer n fits in width bits."""
    _check_width(width)
    if width == 0:
        return n == 0
    bound = 1 << (width - 1)
    return -bound <= n < bound


def fitsu(n: int, width: int) -> bool:
    """Return True if the unsigned 64-bit integer n fits in width bits."""
    _check_width(width)
    return (n & _MASK64) >> width == 0


def getu(word: int, width: int, lsb: int) -> int:
    """Extract an unsigned field of width bits starting at bit lsb."""
    _check_field(width, lsb)
    return ((word & _MASK64) >> lsb) & ((1 << width) - 1)


def gets(word: int, width: int, lsb: int) -> int:
    """Extract a signed (two's complement) field of width bits at bit lsb."""
    _check_field(width, lsb)
    if width == 0:
        return 0
    field = getu(word, width, lsb)
    if field >> (width - 1):
        field -= 1 << width
    return field


def newu(word: int, width: int, lsb: int, value: int) -> int:
    """Return word with the field at lsb replaced by the unsigned value."""
    _check_field(width, lsb)
    if not fitsu(value, width):
        raise BitpackOverflow()
    field_mask = ((1 << width) - 1) << lsb
    return ((word & _MASK64) & ~field_mask) | ((value & _MASK64) << lsb)


def news(word: int, width: int, lsb: int, value: int) -> int:
    """Return word with the field at lsb replaced by the signed value."""
    _check_field(width, lsb)
    if not fitss(value, width):
        raise BitpackOverflow()
    return newu(word, width, lsb, getu(value & _MASK64, width, 0))