"""
Fit a trend line to a CSV file or a bundled sample and print its bands.
"""

import argparse
import csv
import logging
import sys
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from trendline.components.regression import LinearRegression, Point
from trendline.utils.errors import RegressionError
from trendline.utils.metadata_utils import (
    DEFAULT_CONFIG,
    get_sample,
    list_samples,
    load_config,
)

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def decimal_value(value: str) -> Decimal:
    try:
        number = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    if not number.is_finite():
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    return number


def get_parser():
    parser = argparse.ArgumentParser(
        description="Fit a least-squares trend line and print its bands."
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--input",
        type=str,
        help="CSV file with x and y columns.",
    )
    source.add_argument(
        "--sample",
        type=str,
        choices=list_samples(),
        help="Name of a bundled sample point set.",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="YAML file with precision, window_size and std_devs.",
    )
    parser.add_argument(
        "--window",
        type=int,
        help="Only keep the most recent N points.",
    )
    parser.add_argument(
        "--precision",
        type=int,
        help="Significant digits for decimal arithmetic.",
    )
    parser.add_argument(
        "--std-devs",
        type=float,
        help="Width of the band in residual standard deviations.",
    )
    parser.add_argument(
        "--at",
        type=decimal_value,
        action="append",
        default=[],
        help="x value at which to print the band. Can be repeated. "
        "Defaults to the last stored x.",
    )
    parser.add_argument(
        "--plot",
        type=str,
        help="Directory to write a chart of the points and the band.",
    )
    return parser


def read_points_csv(path: str) -> List[Point]:
    with open(path, newline="") as f:
        reader = csv.DictReader(f)
        header = [col.strip() for col in reader.fieldnames or []]
        if "x" not in header or "y" not in header:
            raise ValueError(f"{path} needs x and y columns, got {header}")
        reader.fieldnames = header
        return [Point(row["x"].strip(), row["y"].strip()) for row in reader]


def resolve_config(args: argparse.Namespace) -> dict:
    config = load_config(args.config) if args.config else dict(DEFAULT_CONFIG)
    if args.window is not None:
        config["window_size"] = args.window
    if args.precision is not None:
        config["precision"] = args.precision
    if args.std_devs is not None:
        config["std_devs"] = args.std_devs
    return config


def print_results(regression: LinearRegression, xs: List[Decimal], std_devs) -> None:
    print(f"points:      {regression.count()}")
    print(f"slope:       {regression.slope}")
    print(f"intercept:   {regression.intercept}")
    print(f"residual:    {regression.get_residual()}")
    print(f"pearsons_r:  {regression.get_pearsons_r()}")
    for x in xs:
        lower, fitted, upper = regression.get_values(x, std_devs)
        print(f"x={x}  lower={lower}  fit={fitted}  upper={upper}")


def trendline_run(args: Optional[List[str]] = None) -> int:
    args = get_parser().parse_args(args)
    config = resolve_config(args)

    if args.input:
        points = read_points_csv(args.input)
        name = args.input
    else:
        points = get_sample(args.sample)
        name = args.sample
    logger.info(f"Loaded {len(points)} points from {name}")

    regression = LinearRegression(
        points,
        window_size=config["window_size"],
        precision=config["precision"],
    )
    xs = args.at or ([regression.points[-1].x] if regression.count() else [])

    try:
        regression.calculate()
        print_results(regression, xs, config["std_devs"])
    except RegressionError as e:
        logger.error(f"Cannot fit {name}: {e}")
        return 1

    if args.plot:
        from trendline.components.charts import plot_regression_band

        plot_regression_band(
            regression,
            args.plot,
            name=args.sample or "input",
            std_devs=config["std_devs"],
        )
    return 0


def main():
    logging.basicConfig(level=logging.INFO)
    sys.exit(trendline_run())
