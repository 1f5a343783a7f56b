from .linear_regression import LinearRegression, RegressionStats
from .points import as_point, Point, RunningSums, StoredPoint

__all__ = [
    "as_point",
    "LinearRegression",
    "Point",
    "RegressionStats",
    "RunningSums",
    "StoredPoint",
]
