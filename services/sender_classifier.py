"""
Group-level sender scoring.

Each signal adds a fixed weight to either the ME or the OTHER score; the
verdict is whichever is larger and the confidence is the difference. Equal
scores give UNKNOWN.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from models.data_models import MessageGroup, NameLabel, Speaker, ThresholdPair, TimeLabel
from services.literal_patterns import DEFAULT_PATTERNS, LiteralPatterns
from services.threshold_calibrator import fallback_thresholds

logger = logging.getLogger(__name__)

# 1) edge anchoring
RIGHT_EDGE_RATIO = 0.78
LEFT_EDGE_RATIO = 0.22
LEFT_EDGE_MAX_RIGHT_RATIO = 0.82
EDGE_WEIGHT = 3
# 2) center vs. calibrated thresholds
CENTER_WEIGHT = 2
# 3) bubble width
WIDE_RATIO = 0.6
WIDE_RIGHT_RATIO = 0.7
NARROW_RATIO = 0.5
NARROW_LEFT_RATIO = 0.3
WIDTH_WEIGHT = 2
# 4) neighbouring time label
TIME_LABEL_DISTANCE_PX = 120
TIME_LABEL_WEIGHT = 2
# 5) partner name above
NAME_ABOVE_MAX_GAP_PX = 120
NAME_ABOVE_WEIGHT = 2
# 6) pronouns
PRONOUN_WEIGHT = 1
# 7) vertical band
BOTTOM_BAND_RATIO = 0.7
BOTTOM_BAND_RIGHT_RATIO = 0.6
TOP_BAND_RATIO = 0.3
TOP_BAND_LEFT_RATIO = 0.4
BAND_WEIGHT = 1


@dataclass
class Classification:
    """Scored verdict for one group."""
    speaker: Speaker
    confidence: int
    me_score: int = 0
    other_score: int = 0
    signals: List[str] = field(default_factory=list)


class SenderClassifier:
    """Additive multi-signal scorer."""

    def __init__(self, patterns: Optional[LiteralPatterns] = None):
        self.patterns = patterns or DEFAULT_PATTERNS

    def classify(
        self,
        group: MessageGroup,
        canvas_width: int,
        canvas_height: int,
        partner_name: Optional[str] = None,
        name_labels: Sequence[NameLabel] = (),
        time_labels: Sequence[TimeLabel] = (),
        thresholds: Optional[ThresholdPair] = None,
    ) -> Classification:
        w = canvas_width
        left_x = group.min_x
        right_x = group.max_x
        center_x = group.center_x
        width = group.width
        th = thresholds or fallback_thresholds(canvas_width)

        me = 0
        other = 0
        signals: List[str] = []

        if right_x >= w * RIGHT_EDGE_RATIO:
            me += EDGE_WEIGHT
            signals.append("right edge")
        if left_x <= w * LEFT_EDGE_RATIO and right_x < w * LEFT_EDGE_MAX_RIGHT_RATIO:
            other += EDGE_WEIGHT
            signals.append("left edge")

        if center_x >= th.right_min_x:
            me += CENTER_WEIGHT
            signals.append("center right of threshold")
        if center_x <= th.left_max_x:
            other += CENTER_WEIGHT
            signals.append("center left of threshold")

        width_ratio = width / w
        if width_ratio > WIDE_RATIO and right_x >= w * WIDE_RIGHT_RATIO:
            me += WIDTH_WEIGHT
            signals.append("wide right bubble")
        if width_ratio < NARROW_RATIO and left_x <= w * NARROW_LEFT_RATIO:
            other += WIDTH_WEIGHT
            signals.append("narrow left bubble")

        mid_y = group.center_y
        near_times = [t for t in time_labels if abs(mid_y - t.y) <= TIME_LABEL_DISTANCE_PX]
        if any(t.x < left_x for t in near_times):
            me += TIME_LABEL_WEIGHT
            signals.append("time label on the left")
        if any(t.x > right_x for t in near_times):
            other += TIME_LABEL_WEIGHT
            signals.append("time label on the right")

        if partner_name and self._has_name_above(group, partner_name, name_labels):
            other += NAME_ABOVE_WEIGHT
            signals.append("partner name above")

        text = group.text
        if self.patterns.has_first_person(text):
            me += PRONOUN_WEIGHT
            signals.append("first person")
        if self.patterns.has_second_person(text):
            other += PRONOUN_WEIGHT
            signals.append("second person")

        y_ratio = group.top / canvas_height if canvas_height > 0 else 0.0
        if y_ratio > BOTTOM_BAND_RATIO and right_x >= w * BOTTOM_BAND_RIGHT_RATIO:
            me += BAND_WEIGHT
            signals.append("bottom right")
        if y_ratio < TOP_BAND_RATIO and left_x <= w * TOP_BAND_LEFT_RATIO:
            other += BAND_WEIGHT
            signals.append("top left")

        if me > other:
            speaker = Speaker.ME
        elif other > me:
            speaker = Speaker.OTHER
        else:
            speaker = Speaker.UNKNOWN
        confidence = abs(me - other)

        logger.debug(
            f"classify '{text[:20]}' left={left_x} right={right_x} center={center_x:.1f} "
            f"me={me} other={other} -> {speaker.name} ({', '.join(signals) or 'no signal'})"
        )
        return Classification(speaker, confidence, me, other, signals)

    @staticmethod
    def _has_name_above(group: MessageGroup, partner_name: str, name_labels: Sequence[NameLabel]) -> bool:
        for label in name_labels:
            if partner_name not in label.text.replace(" ", ""):
                continue
            gap = group.top - label.box.bottom
            if 0 <= gap <= NAME_ABOVE_MAX_GAP_PX:
                return True
        return False
