import logging
import os

import matplotlib.pyplot as plt

from trendline.components.regression import LinearRegression

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def plot_regression_band(
    regression: LinearRegression, output_dir: str, name: str, std_devs: float = 2
) -> str:
    points = regression.points
    xs = [float(p.x) for p in points]
    ys = [float(p.y) for p in points]

    # the fitted line is straight, so its ends are enough
    x_ends = [min(xs), max(xs)]
    bands = [regression.get_values(x, std_devs) for x in x_ends]
    lower = [band[0] for band in bands]
    fitted = [band[1] for band in bands]
    upper = [band[2] for band in bands]

    plt.figure(figsize=(10, 6))
    plt.scatter(xs, ys, label="points", s=10)
    plt.plot(x_ends, fitted, label="fit")
    plt.fill_between(
        x_ends, lower, upper, alpha=0.2, label=f"±{std_devs} std dev"
    )
    plt.xlabel("x")
    plt.ylabel("y")
    plt.legend()
    plt.title(
        f"[trendline] {name}: r={regression.get_pearsons_r():.4f} over {len(points)} points"
    )
    output_file = os.path.join(output_dir, f"{name}-trend.png")
    plt.savefig(output_file, dpi=300, bbox_inches="tight")
    plt.close()
    logger.info(f"Saved trend chart to {output_file}")
    return output_file
