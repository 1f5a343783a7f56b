from trendline.components.regression import LinearRegression, Point, RegressionStats
from trendline.utils.errors import (
    DegenerateGeometryError,
    InsufficientDataError,
    NotEnoughDataError,
    RegressionError,
)

__all__ = [
    "DegenerateGeometryError",
    "InsufficientDataError",
    "LinearRegression",
    "NotEnoughDataError",
    "Point",
    "RegressionError",
    "RegressionStats",
]
