"""Deterministic check-in draw based on the decimal expansion of pi.

Every check-in is assigned a sequence position. Whether that check-in wins is
decided by the pi digit at the position, so the decision for any position can
be replayed after the event by anyone who knows the rule: the digits are
public and nothing random is involved.

Position ``0`` is the leading ``3``; positions wrap around once they pass the
configured number of digits.
"""

from dataclasses import dataclass
from functools import lru_cache

from luckydraw.core.config import Settings, settings

_GUARD_DIGITS = 10
# Integers are rendered this many digits at a time; int-to-str conversion is
# capped at 4300 digits per call.
_CHUNK_DIGITS = 1000


def _arctan_inverse(x: int, unity: int) -> int:
    """Return ``arctan(1/x) * unity`` using the Taylor series in integers."""
    term = unity // x
    total = term
    x_squared = x * x
    n = 1
    sign = -1
    while term:
        term //= x_squared
        n += 2
        total += sign * (term // n)
        sign = -sign
    return total


def _decimal_string(value: int) -> str:
    """Render a non-negative integer of any size in base 10."""
    base = 10**_CHUNK_DIGITS
    chunks = []
    while value >= base:
        value, low = divmod(value, base)
        chunks.append(str(low).zfill(_CHUNK_DIGITS))
    chunks.append(str(value))
    return "".join(reversed(chunks))


@lru_cache(maxsize=8)
def pi_digits(count: int) -> str:
    """
    Return the first ``count`` decimal digits of pi, starting with ``3``.

    Uses Machin's formula ``pi = 16 arctan(1/5) - 4 arctan(1/239)`` on
    integers scaled by ``10 ** (count + guard)``; the guard digits absorb the
    truncation error of the series.
    """
    if count < 1:
        raise ValueError("count must be at least 1")
    unity = 10 ** (count + _GUARD_DIGITS)
    pi = 4 * (4 * _arctan_inverse(5, unity) - _arctan_inverse(239, unity))
    return _decimal_string(pi // 10**_GUARD_DIGITS)[:count]


def digit_at(position: int, length: int) -> int:
    """Digit of pi at ``position``, wrapping modulo ``length``."""
    if position < 0:
        raise ValueError("position must not be negative")
    return int(pi_digits(length)[position % length])


@dataclass(frozen=True)
class DrawDecision:
    position: int
    digit: int
    wins: bool


@dataclass(frozen=True)
class DrawRule:
    """Win/no-win rule applied to a check-in position.

    Positions below ``cutover`` win when their digit is in ``early_digits``;
    positions at or after it win when the digit is in ``late_digits``. Moving
    the cutover or the digit sets tunes the win rate over the course of an
    event.
    """

    cutover: int
    early_digits: frozenset[int]
    late_digits: frozenset[int]
    length: int = 10000

    def __post_init__(self):
        if self.length < 1:
            raise ValueError("digit sequence length must be at least 1")
        if self.cutover < 0:
            raise ValueError("cutover position must not be negative")
        for digit in self.early_digits | self.late_digits:
            if not 0 <= digit <= 9:
                raise ValueError(f"winning digit out of range: {digit}")

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "DrawRule":
        config = config or settings
        return cls(
            cutover=config.draw_cutover_position,
            early_digits=frozenset(config.draw_early_digits),
            late_digits=frozenset(config.draw_late_digits),
            length=config.draw_digit_count,
        )

    def winning_digits(self, position: int) -> frozenset[int]:
        return self.early_digits if position < self.cutover else self.late_digits

    def evaluate(self, position: int) -> DrawDecision:
        digit = digit_at(position, self.length)
        return DrawDecision(
            position=position,
            digit=digit,
            wins=digit in self.winning_digits(position),
        )
