from collections.abc import Mapping
from dataclasses import dataclass, fields
from decimal import (
    Context,
    Decimal,
    DivisionByZero,
    Inexact,
    InvalidOperation,
    MAX_EMAX,
    MAX_PREC,
    MIN_EMIN,
    Overflow,
    Rounded,
)
from typing import Any, NamedTuple, Union

Number = Union[Decimal, int, float, str]

# Sums and products never round: an inexact result raises instead of drifting.
EXACT = Context(
    prec=MAX_PREC,
    Emax=MAX_EMAX,
    Emin=MIN_EMIN,
    traps=[DivisionByZero, Inexact, InvalidOperation, Overflow, Rounded],
)


def to_decimal(value: Number) -> Decimal:
    """
    Convert a numeric input to an exact Decimal.

    Floats go through their shortest repr so that 0.1 becomes Decimal("0.1")
    rather than the binary expansion of the float.
    """
    if isinstance(value, bool):
        raise TypeError(f"Expected a number, got {value!r}")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    if isinstance(value, (int, str)):
        return Decimal(value)
    raise TypeError(f"Expected a number, got {type(value).__name__}")


class Point(NamedTuple):
    x: Number
    y: Number


def is_point_like(value: Any) -> bool:
    if isinstance(value, Mapping):
        return True
    return (
        isinstance(value, tuple)
        and len(value) == 2
        and not isinstance(value[0], (tuple, list, Mapping))
    )


def as_point(value: Any) -> Point:
    """Accept a Point, an (x, y) tuple or a mapping with "x" and "y" keys."""
    if isinstance(value, Point):
        return value
    if isinstance(value, Mapping):
        try:
            return Point(value["x"], value["y"])
        except KeyError as e:
            raise ValueError(f"Point mapping is missing key {e}") from e
    if isinstance(value, tuple) and len(value) == 2:
        return Point(*value)
    raise ValueError(f"Cannot interpret {value!r} as a point")


class StoredPoint(NamedTuple):
    x: Decimal
    y: Decimal
    xy: Decimal
    x_squared: Decimal
    y_squared: Decimal

    @classmethod
    def from_point(cls, point: Any) -> "StoredPoint":
        point = as_point(point)
        x = to_decimal(point.x)
        y = to_decimal(point.y)
        return cls(
            x=x,
            y=y,
            xy=EXACT.multiply(x, y),
            x_squared=EXACT.multiply(x, x),
            y_squared=EXACT.multiply(y, y),
        )


@dataclass
class RunningSums:
    """Sufficient statistics for simple OLS over the stored points."""

    sum_x: Decimal = Decimal(0)
    sum_y: Decimal = Decimal(0)
    sum_xy: Decimal = Decimal(0)
    sum_x2: Decimal = Decimal(0)
    sum_y2: Decimal = Decimal(0)
    count: int = 0

    def add(self, point: StoredPoint) -> None:
        self.sum_x = EXACT.add(self.sum_x, point.x)
        self.sum_y = EXACT.add(self.sum_y, point.y)
        self.sum_xy = EXACT.add(self.sum_xy, point.xy)
        self.sum_x2 = EXACT.add(self.sum_x2, point.x_squared)
        self.sum_y2 = EXACT.add(self.sum_y2, point.y_squared)
        self.count += 1

    def subtract(self, point: StoredPoint) -> None:
        self.sum_x = EXACT.subtract(self.sum_x, point.x)
        self.sum_y = EXACT.subtract(self.sum_y, point.y)
        self.sum_xy = EXACT.subtract(self.sum_xy, point.xy)
        self.sum_x2 = EXACT.subtract(self.sum_x2, point.x_squared)
        self.sum_y2 = EXACT.subtract(self.sum_y2, point.y_squared)
        self.count -= 1

    def is_zero(self) -> bool:
        return all(getattr(self, f.name) == 0 for f in fields(self))
