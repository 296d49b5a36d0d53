"""
Common Value Objects

Value objects used across multiple domains:
- Money: Represents monetary amounts (single currency, exact decimals)
- BookingWindow: Represents the rental period of a booking
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from shared.domain.base import ValueObject
from shared.domain.errors import ValidationError

ONE_DAY = timedelta(days=1)
DEFAULT_CURRENCY = 'IDR'


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a monetary amount. Arithmetic stays in Decimal, floats are
    rejected so that no binary rounding can leak into stored amounts.
    """
    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            raise TypeError("Money amount must be a Decimal")
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if self.currency != DEFAULT_CURRENCY:
            raise ValueError(f"Unsupported currency: {self.currency}")

    @classmethod
    def zero(cls) -> 'Money':
        return cls(Decimal('0'))

    def __add__(self, other: 'Money') -> 'Money':
        """Add two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int | Decimal) -> 'Money':
        """Multiply money by an integer or Decimal factor"""
        if isinstance(factor, bool) or not isinstance(factor, (int, Decimal)):
            raise TypeError("Can only multiply Money by int or Decimal")
        return Money(self.amount * factor, self.currency)

    def is_positive(self) -> bool:
        return self.amount > 0

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class BookingWindow(ValueObject):
    """
    Booking window value object

    Represents a rental period from start (inclusive) to end (exclusive).
    Construction fails with ValidationError unless start < end.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValidationError(
                f"Start ({self.start.isoformat()}) must be before end ({self.end.isoformat()})"
            )

    def overlaps_with(self, other: 'BookingWindow') -> bool:
        """
        Check if this window collides with another for capacity purposes

        Touching windows count as colliding: a unit handed back at 10:00 is
        not considered free for a rental starting at 10:00.
        """
        if not isinstance(other, BookingWindow):
            raise TypeError("Can only check overlap with another BookingWindow")
        return self.start <= other.end and self.end >= other.start

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def billable_days(self) -> int:
        """Number of started days, i.e. ceil(duration / 1 day)"""
        return -(-self.duration // ONE_DAY)

    def __str__(self):
        return f"{self.start.strftime('%d.%m.%Y %H:%M')} - {self.end.strftime('%d.%m.%Y %H:%M')}"

    def __repr__(self):
        return f"BookingWindow({self.start.isoformat()}, {self.end.isoformat()})"
