"""
Adaptive left/right screen split via 1-D k-means over horizontal anchors.

Used both on line left edges (per-line strategy) and on group centers
(grouped strategy); both go through ``calibrate`` so they cannot drift.
"""
import logging
import math
from typing import Optional, Sequence

import numpy as np

from models.config import CalibrationConfig
from models.data_models import ThresholdPair

logger = logging.getLogger(__name__)


def fallback_thresholds(canvas_width: int, config: Optional[CalibrationConfig] = None) -> ThresholdPair:
    """Fixed split at 40% / 60% of the canvas width."""
    cfg = config or CalibrationConfig()
    return ThresholdPair(
        left_max_x=canvas_width * cfg.fallback_left_ratio,
        right_min_x=canvas_width * cfg.fallback_right_ratio,
        fallback=True,
    )


def round_to_step(value: float, step: int) -> int:
    """Round half up to a multiple of ``step``, never below 0."""
    return max(0, int(math.floor(value / step + 0.5)) * step)


def two_means(anchors: Sequence[float], max_iterations: int = 10, convergence_px: float = 0.5):
    """k=2 k-means in one dimension, centers seeded at min and max.

    Returns the (unordered) pair of centers.
    """
    xs = np.asarray(anchors, dtype=float)
    c1, c2 = float(xs.min()), float(xs.max())
    for _ in range(max_iterations):
        to_first = np.abs(xs - c1) <= np.abs(xs - c2)
        new_c1 = float(xs[to_first].mean()) if to_first.any() else c1
        new_c2 = float(xs[~to_first].mean()) if (~to_first).any() else c2
        converged = abs(new_c1 - c1) < convergence_px and abs(new_c2 - c2) < convergence_px
        c1, c2 = new_c1, new_c2
        if converged:
            break
    return c1, c2


def calibrate(
    anchors: Sequence[float],
    canvas_width: int,
    config: Optional[CalibrationConfig] = None,
) -> ThresholdPair:
    """Compute (left_max_x, right_min_x) from observed anchors.

    函数级注释：
    - 锚点少于 min_anchors、全部相同或两簇中心距离过近时，返回固定的 40%/60% 回退值；
    - 否则取两簇中心的中点 ± margin（margin = max(gap * margin_ratio, min_margin_px)）；
    - 两个边界按 step_px 对齐，若间距小于 min_separation_px 则对称扩张后再次对齐；
    - 结果始终满足 left_max_x < right_min_x，无法满足时同样回退。
    """
    cfg = config or CalibrationConfig()
    xs = [float(x) for x in anchors if x >= 0]
    if len(xs) < cfg.min_anchors:
        logger.debug(f"calibration: only {len(xs)} anchors, using fallback")
        return fallback_thresholds(canvas_width, cfg)
    if min(xs) == max(xs):
        logger.debug("calibration: identical anchors, using fallback")
        return fallback_thresholds(canvas_width, cfg)

    c1, c2 = two_means(xs, cfg.max_iterations, cfg.convergence_px)
    left_center, right_center = min(c1, c2), max(c1, c2)
    gap = right_center - left_center
    if gap < cfg.min_center_gap_px:
        logger.debug(f"calibration: centers {left_center:.1f}/{right_center:.1f} too close, using fallback")
        return fallback_thresholds(canvas_width, cfg)

    mid = (left_center + right_center) / 2.0
    margin = max(gap * cfg.margin_ratio, cfg.min_margin_px)
    left_max = float(round_to_step(mid - margin, cfg.step_px))
    right_min = float(round_to_step(mid + margin, cfg.step_px))

    if right_min - left_max < cfg.min_separation_px:
        adjust = (cfg.min_separation_px - (right_min - left_max)) / 2.0
        left_max = float(round_to_step(max(0.0, left_max - adjust), cfg.step_px))
        right_min = float(round_to_step(right_min + adjust, cfg.step_px))

    if left_max >= right_min:
        return fallback_thresholds(canvas_width, cfg)

    logger.debug(
        f"calibration: centers={left_center:.1f}/{right_center:.1f} "
        f"thresholds={left_max:.0f}/{right_min:.0f}"
    )
    return ThresholdPair(left_max_x=left_max, right_min_x=right_min)
