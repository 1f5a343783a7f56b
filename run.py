"""
Trendline runner.

Example: python run.py --sample hourly --at 1610866800 --std-devs 2
"""

import logging
from typing import List, Optional

from trendline.utils.run_utils import trendline_run

logging.basicConfig(level=logging.INFO)


def run(args: Optional[List[str]] = None) -> int:
    return trendline_run(args)


if __name__ == "__main__":
    raise SystemExit(trendline_run())
