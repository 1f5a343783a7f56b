import dataclasses
from collections import deque
from decimal import Context, Decimal, localcontext
from typing import Any, Deque, List, NamedTuple, Optional, Tuple

from trendline.utils.errors import DegenerateGeometryError, NotEnoughDataError

from .points import (
    EXACT,
    is_point_like,
    Number,
    Point,
    RunningSums,
    StoredPoint,
    to_decimal,
)

DEFAULT_PRECISION = 28


class RegressionStats(NamedTuple):
    slope: float
    intercept: float
    residual: float
    pearsons_r: float
    r2: float
    n: int


class _Solution(NamedTuple):
    # y = b * x + a
    a: Decimal
    b: Decimal
    residual: Decimal
    pearsons_r: Decimal


class LinearRegression:
    """
    Incremental least-squares regression over a stream of (x, y) points.

    Fits Y = bX + a, where X is the explanatory variable (often a timestamp),
    b is the slope and a is the intercept. Running sums of x, y, xy, x² and y²
    are kept exact with decimal arithmetic so that any sequence of push() and
    shift() calls gives the same line as fitting the remaining points at once.

    The coefficients, the residual standard deviation and Pearson's R are
    solved lazily on first access and cached until the next mutation.

    Args:
        points: Optional point or iterable of points to start with.
        window_size: Maximum number of points to keep. Older points are
            shifted off as new ones are pushed. None keeps every point.
        precision: Significant digits of the decimal context used for all
            arithmetic.
    """

    def __init__(
        self,
        points: Any = None,
        window_size: Optional[int] = None,
        precision: int = DEFAULT_PRECISION,
    ) -> None:
        if window_size is not None and window_size < 1:
            raise ValueError(f"window_size must be positive, got {window_size}")
        self.window_size = window_size
        self._context = Context(prec=precision)
        self._points: Deque[StoredPoint] = deque()
        self._sums = RunningSums()
        self._solution: Optional[_Solution] = None

        if points is not None:
            self.push(points)

    def reset(self) -> None:
        # Reset all state.
        self._points.clear()
        self._sums = RunningSums()
        self._solution = None

    def push(self, points: Any) -> None:
        """
        Add one point or an iterable of points.

        A point is a Point, an (x, y) tuple or a mapping with "x" and "y" keys.
        Every point in the batch is converted before any is stored, so a bad
        point leaves the regression unchanged.
        """
        if is_point_like(points):
            points = [points]

        batch = [StoredPoint.from_point(point) for point in points]
        for stored in batch:
            self._points.append(stored)
            self._sums.add(stored)
            if self.window_size is not None and len(self._points) > self.window_size:
                self._sums.subtract(self._points.popleft())

        # Once per batch, not per point.
        self._invalidate()

    def shift(self) -> Optional[Point]:
        """
        Remove the oldest point and return it, or None if there are no points.
        """
        if not self._points:
            return None

        stored = self._points.popleft()
        self._sums.subtract(stored)
        self._invalidate()
        return Point(stored.x, stored.y)

    def count(self) -> int:
        return len(self._points)

    def calculate(self) -> "LinearRegression":
        """
        Solve the regression coefficients, the residual standard deviation and
        Pearson's R coefficient.

        Sums, differences and products are exact; only divisions and square
        roots are rounded to the configured precision.

        Raises:
            NotEnoughDataError: fewer than two points are stored.
            DegenerateGeometryError: all x values are identical, exactly two
                points are stored, or one axis has zero variance.
        """
        n = len(self._points)
        if n < 2:
            raise NotEnoughDataError(n)

        s = self._sums
        ctx = self._context
        with localcontext(EXACT):
            # Shared by both coefficients.
            denom = n * s.sum_x2 - s.sum_x * s.sum_x
            if denom == 0:
                raise DegenerateGeometryError(
                    "regression coefficients: all x values are identical"
                )

            #     (∑y) * (∑x²) - (∑x) * (∑xy)
            # a = ---------------------------
            #         n * (∑x²) - (∑x)²
            a = ctx.divide(s.sum_y * s.sum_x2 - s.sum_x * s.sum_xy, denom)

            #     n * (∑xy) - (∑x) * (∑y)
            # b = ---------------------------
            #         n * (∑x²) - (∑x)²
            b = ctx.divide(n * s.sum_xy - s.sum_x * s.sum_y, denom)

            if n == 2:
                raise DegenerateGeometryError(
                    "residual: two points leave no degrees of freedom"
                )

            residual, pearsons_r = self._derive_stats(n, a, b)

        self._solution = _Solution(a=a, b=b, residual=residual, pearsons_r=pearsons_r)
        return self

    def _derive_stats(self, n: int, a: Decimal, b: Decimal) -> Tuple[Decimal, Decimal]:
        # Runs under the exact context.
        s = self._sums
        ctx = self._context
        mean_x = ctx.divide(s.sum_x, n)
        mean_y = ctx.divide(s.sum_y, n)

        sum_residual_sq = Decimal(0)
        sum_cross = Decimal(0)
        sum_dx_sq = Decimal(0)
        sum_dy_sq = Decimal(0)
        for p in self._points:
            error = p.y - (b * p.x + a)
            dx = p.x - mean_x
            dy = p.y - mean_y
            sum_residual_sq += error * error
            sum_cross += dx * dy
            sum_dx_sq += dx * dx
            sum_dy_sq += dy * dy

        # residual = sqrt(∑(y - (b * x + a))² / (n - 2))
        residual = ctx.sqrt(ctx.divide(sum_residual_sq, n - 2))

        #                  ∑((x - x_mean) * (y - y_mean))
        # pearsons_r = -------------------------------------
        #              sqrt(∑(x - x_mean)² * ∑(y - y_mean)²)
        variance_product = sum_dx_sq * sum_dy_sq
        if variance_product == 0:
            raise DegenerateGeometryError(
                "Pearson's R: one axis has zero variance"
            )
        return residual, ctx.divide(sum_cross, ctx.sqrt(variance_product))

    def is_calculated(self) -> bool:
        return self._solution is not None

    def _solved(self) -> _Solution:
        if self._solution is None:
            self.calculate()
        return self._solution

    def _invalidate(self) -> None:
        self._solution = None

    def _fitted(self, x: Number) -> Decimal:
        solution = self._solved()
        with localcontext(self._context):
            return solution.b * to_decimal(x) + solution.a

    def _scaled_residual(self, multiplier: Number) -> Decimal:
        solution = self._solved()
        with localcontext(self._context):
            return solution.residual * to_decimal(multiplier)

    @property
    def intercept(self) -> Decimal:
        return self._solved().a

    @property
    def slope(self) -> Decimal:
        return self._solved().b

    def get_value(self, x: Number) -> float:
        """
        Return the fitted value at x. Can be thought of as the y value along
        the regression line at that x-axis position.
        """
        return float(self._fitted(x))

    def get_residual(self, multiplier: Number = 1) -> float:
        """
        Standard deviation of the residuals, also called the root mean square
        deviation (RMSD), scaled by multiplier.
        """
        return float(self._scaled_residual(multiplier))

    def get_standard_deviation(self, multiplier: Number = 1) -> float:
        return self.get_residual(multiplier)

    def get_pearsons_r(self) -> float:
        """
        Pearson's R coefficient. Helps decide whether the y values are actually
        correlated with the x-axis values.
        """
        return float(self._solved().pearsons_r)

    def get_r_squared(self) -> float:
        r = self._solved().pearsons_r
        with localcontext(self._context):
            return float(r * r)

    def get_standard_deviation_value(self, x: Number, std_devs: Number) -> float:
        """
        Return the fitted value at x moved by std_devs residual standard
        deviations. A negative std_devs gives the lower side of the band.
        """
        fitted = self._fitted(x)
        offset = self._scaled_residual(std_devs)
        with localcontext(self._context):
            return float(fitted + offset)

    def get_values(self, x: Number, std_devs: Number = 2) -> List[float]:
        """Return [lower band, fitted value, upper band] at x."""
        return [
            self.get_standard_deviation_value(x, -to_decimal(std_devs)),
            self.get_value(x),
            self.get_standard_deviation_value(x, std_devs),
        ]

    def get_stats(self) -> RegressionStats:
        solution = self._solved()
        return RegressionStats(
            slope=float(solution.b),
            intercept=float(solution.a),
            residual=float(solution.residual),
            pearsons_r=float(solution.pearsons_r),
            r2=self.get_r_squared(),
            n=len(self._points),
        )

    @property
    def sums(self) -> RunningSums:
        return dataclasses.replace(self._sums)

    @property
    def points(self) -> Tuple[Point, ...]:
        return tuple(Point(p.x, p.y) for p in self._points)

    def __len__(self) -> int:
        return len(self._points)
