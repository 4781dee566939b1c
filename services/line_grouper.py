"""
Groups sorted OCR lines into message bubbles by vertical gap and horizontal alignment.
"""
import logging
from typing import List, Optional, Sequence

from models.config import GroupingConfig
from models.data_models import MessageGroup, OcrLine
from services.geometry import overlap_ratio
from services.literal_patterns import DEFAULT_PATTERNS, LiteralPatterns

logger = logging.getLogger(__name__)


class LineGrouper:
    """Sequential line-to-bubble grouping."""

    def __init__(self, config: Optional[GroupingConfig] = None, patterns: Optional[LiteralPatterns] = None):
        self.config = config or GroupingConfig()
        self.patterns = patterns or DEFAULT_PATTERNS

    def group(
        self,
        lines: Sequence[OcrLine],
        previous_groups: Optional[List[MessageGroup]] = None,
    ) -> List[MessageGroup]:
        """Group lines (already sorted by top, then left) into MessageGroups.

        函数级注释：
        - UI 元素（占位符、日期分隔）与时间标签在分组前过滤，不进入任何分组；
        - 允许的垂直间距随字号变化：两者平均高度 * vertical_gap_ratio；
        - 水平方向满足“区间重叠率 >= 阈值”或“左/右边缘对齐”之一即可，
          后者用于处理多行折行导致的参差不齐；
        - previous_groups 为上一帧的分组，目前仅接收不参与计算。
        """
        cfg = self.config
        groups: List[MessageGroup] = []

        for index, line in enumerate(lines):
            text = line.text.strip()
            if not text:
                continue
            if self.patterns.is_ui_garbage(text):
                logger.debug(f"line {index}: '{text}' -> UI element (filtered)")
                continue
            if self.patterns.is_time_label(text):
                logger.debug(f"line {index}: '{text}' -> time label (filtered)")
                continue

            last = groups[-1] if groups else None
            if last is None:
                groups.append(MessageGroup(lines=[line]))
                continue

            box = line.box
            overlap = overlap_ratio(last.min_x, last.max_x, box.left, box.right)
            v_dist = box.top - last.bottom
            avg_height = (box.height + (last.bottom - last.top)) / 2.0
            v_allow = avg_height * cfg.vertical_gap_ratio
            aligned = (
                abs(box.left - last.min_x) <= cfg.edge_alignment_px
                or abs(box.right - last.max_x) <= cfg.edge_alignment_px
            )
            same = v_dist <= v_allow and (overlap >= cfg.min_horizontal_overlap or aligned)

            logger.debug(
                f"line {index}: '{text}' overlap={overlap:.2f} v_dist={v_dist} "
                f"v_allow={v_allow:.1f} aligned={aligned} same={same}"
            )
            if same:
                last.lines.append(line)
            else:
                groups.append(MessageGroup(lines=[line]))

        logger.debug(f"grouped {len(lines)} lines into {len(groups)} groups")
        return groups
