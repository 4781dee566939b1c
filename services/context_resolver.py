"""
Speaker continuity across consecutive groups.

Weak verdicts inherit the previous speaker unless one of the break rules
fires; strong evidence always wins over the running context.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from models.config import ContextConfig
from models.data_models import MessageGroup, Speaker
from services.literal_patterns import DEFAULT_PATTERNS, LiteralPatterns
from services.sender_classifier import (
    LEFT_EDGE_MAX_RIGHT_RATIO,
    LEFT_EDGE_RATIO,
    RIGHT_EDGE_RATIO,
    Classification,
)

logger = logging.getLogger(__name__)

STRONG_ME_CONFIDENCE = 3


class ContextResolver:
    """Single-pass resolver keyed on the previous resolved speaker."""

    def __init__(self, config: Optional[ContextConfig] = None, patterns: Optional[LiteralPatterns] = None):
        self.config = config or ContextConfig()
        self.patterns = patterns or DEFAULT_PATTERNS

    def should_break(
        self,
        prev_speaker: Optional[Speaker],
        speaker: Speaker,
        confidence: int,
        group: MessageGroup,
        canvas_width: int,
    ) -> Tuple[bool, str]:
        """Return (break, reason). reason is "" when no rule fired."""
        w = canvas_width
        right_x = group.max_x
        left_x = group.min_x

        if prev_speaker == Speaker.OTHER and speaker == Speaker.ME and confidence >= STRONG_ME_CONFIDENCE:
            return True, "strong ME after OTHER"
        if right_x >= w * RIGHT_EDGE_RATIO:
            return True, "right-anchored bubble"
        if left_x <= w * LEFT_EDGE_RATIO and right_x < w * LEFT_EDGE_MAX_RIGHT_RATIO:
            return True, "left-anchored bubble"

        text = group.text
        if self.patterns.has_context_break_token(text):
            return True, "date/time literal"
        if self.patterns.has_first_person(text) and right_x >= w * 0.6:
            return True, "first person on the right"
        if self.patterns.has_second_person(text) and left_x <= w * 0.4:
            return True, "second person on the left"
        if group.width / w > 0.7 and right_x >= w * 0.7:
            return True, "very wide right bubble"
        return False, ""

    def resolve(
        self,
        groups: Sequence[MessageGroup],
        verdicts: Sequence[Classification],
        canvas_width: int,
    ) -> List[Speaker]:
        """Assign a final speaker to every group, in order.

        函数级注释：
        - 命中任一“上下文解除”规则时直接采用评分结果；
        - 否则，评分为 UNKNOWN 或置信度不超过 continuity_max_confidence 的分组沿用上一条的发言者；
        - 上一条为 UNKNOWN（或不存在）时不做继承。
        """
        resolved: List[Speaker] = []
        prev: Optional[Speaker] = None
        for index, (group, verdict) in enumerate(zip(groups, verdicts)):
            speaker = verdict.speaker
            broke, why = self.should_break(prev, speaker, verdict.confidence, group, canvas_width)
            if broke:
                logger.debug(f"group {index}: context break ({why})")
            elif (
                prev is not None
                and prev != Speaker.UNKNOWN
                and (speaker == Speaker.UNKNOWN or verdict.confidence <= self.config.continuity_max_confidence)
            ):
                logger.debug(f"group {index}: weak verdict {speaker.name}/{verdict.confidence}, continuing {prev.name}")
                speaker = prev
            resolved.append(speaker)
            prev = speaker
        return resolved
