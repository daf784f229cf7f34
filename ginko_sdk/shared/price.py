"""Fixed-point price utilities."""

from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal, InvalidOperation, localcontext

from ..errors import ParseError

DEFAULT_PRICE_DECIMALS = 6

MAX_U64 = 2**64 - 1
MAX_U8 = 255

# Enough digits for any u64 mantissa at any u8 scale.
_PRECISION = 400


@dataclass(frozen=True)
class Price:
    """A price stored as ``mantissa / 10**scale``.

    Layout on-chain: mantissa (u64 LE) | scale (u8)
    """

    mantissa: int
    scale: int

    def to_decimal(self) -> Decimal:
        """Return the exact decimal value."""
        with localcontext() as ctx:
            ctx.prec = _PRECISION
            return Decimal(self.mantissa).scaleb(-self.scale)

    def rescale(self, scale: int) -> "Price":
        """Return the same value at another scale, flooring extra digits."""
        if scale >= self.scale:
            return Price(self.mantissa * 10 ** (scale - self.scale), scale)
        return Price(self.mantissa // 10 ** (self.scale - scale), scale)


def parse_price(value: str, decimals: int = DEFAULT_PRICE_DECIMALS) -> Price:
    """Parse a user-entered price string into a ``Price``.

    The value is shifted by ``decimals`` places and floored toward negative
    infinity, so ``parse_price("1.23456789", 6)`` gives mantissa 1234567.
    Flooring keeps on-chain comparisons conservative, which can round a
    sell-side price down.

    Raises:
        ParseError: If the input is not a finite non-negative number, or the
            result does not fit in a u64
    """
    if not 0 <= decimals <= MAX_U8:
        raise ParseError(str(value), f"decimals must be 0-{MAX_U8}, got {decimals}")

    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise ParseError(str(value), f"not a decimal number ({e})")

    if not parsed.is_finite():
        raise ParseError(str(value), "price must be finite")
    if parsed > 0 and parsed.adjusted() + decimals > 20:
        raise ParseError(str(value), "price overflows a u64 mantissa")

    # Wide enough that the shift itself is exact and only the floor rounds.
    with localcontext() as ctx:
        ctx.prec = max(_PRECISION, len(parsed.as_tuple().digits) + decimals + 1)
        shifted = parsed.scaleb(decimals).to_integral_value(rounding=ROUND_FLOOR)

    mantissa = int(shifted)
    if mantissa < 0:
        raise ParseError(str(value), "price must not be negative")
    if mantissa > MAX_U64:
        raise ParseError(str(value), "price overflows a u64 mantissa")

    return Price(mantissa=mantissa, scale=decimals)


def format_price(price: Price) -> str:
    """Format a ``Price`` as a plain decimal string."""
    return format(price.to_decimal(), "f")
