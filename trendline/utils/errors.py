class RegressionError(Exception):
    """Base class for errors raised while fitting a regression line."""


class NotEnoughDataError(RegressionError):
    """
    Raised when a line is requested from fewer than two points.

    Recoverable: push more points and try again.
    """

    def __init__(self, count: int) -> None:
        super().__init__(
            f"At least 2 points are needed to fit a line, got {count}"
        )
        self.count = count


InsufficientDataError = NotEnoughDataError


class DegenerateGeometryError(RegressionError, ZeroDivisionError):
    """
    Raised when the point set makes one of the regression divisors zero.

    This happens when every x value is identical, when exactly two points are
    stored (no residual degrees of freedom), or when one axis has zero variance.
    """

    def __init__(self, quantity: str) -> None:
        super().__init__(f"Division by zero while computing the {quantity}")
        self.quantity = quantity
