"""
Per-line sender classification (the alternative strategy).

Each line is attributed on its own using the partner's name line, bubble
shape and position; runs of consecutive same-speaker lines then become one
message with cleaned text and a diagnostic reason.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from models.config import CalibrationConfig
from models.data_models import ChatMessage, OcrLine, Speaker, ThresholdPair
from services.geometry import union_boxes
from services.label_extractor import extract_partner_name
from services.literal_patterns import DEFAULT_PATTERNS, LiteralPatterns
from services.text_cleaner import clean_message_text
from services.threshold_calibrator import calibrate

logger = logging.getLogger(__name__)

# lines narrower/shorter than this share of the canvas are icons, badges, etc.
MIN_LINE_WIDTH_RATIO = 0.12
MIN_LINE_HEIGHT_RATIO = 0.015
NAME_FOLLOW_DISTANCE_PX = 300
NAME_CONTEXT_DISTANCE_PX = 200
BOTTOM_AREA_RATIO = 0.7


@dataclass
class _PartnerContext:
    """Where the partner's name has been seen so far in the scan."""
    first_line: Optional[OcrLine] = None
    last_line: Optional[OcrLine] = None
    in_continuation: bool = False


def detect_left_bubble(line: OcrLine, canvas_width: int) -> bool:
    box = line.box
    return (
        box.center_x < canvas_width * 0.4
        and box.width < canvas_width * 0.6
        and box.left > canvas_width * 0.05
    )


def detect_right_bubble(line: OcrLine, canvas_width: int) -> bool:
    box = line.box
    return (
        box.center_x > canvas_width * 0.6
        and box.width < canvas_width * 0.6
        and box.right < canvas_width * 0.95
    )


class LineClassifier:
    """Line-by-line attribution followed by run merging."""

    def __init__(self, calibration: Optional[CalibrationConfig] = None, patterns: Optional[LiteralPatterns] = None):
        self.calibration = calibration or CalibrationConfig()
        self.patterns = patterns or DEFAULT_PATTERNS

    def _is_partner_line(self, line: OcrLine, partner_name: Optional[str], canvas_height: int) -> bool:
        if not partner_name:
            return False
        text = line.text.strip()
        if text == partner_name:
            return True
        if self.patterns.is_name_pattern(text, line.box, canvas_height):
            return self.patterns.extract_name(text) == partner_name
        return False

    def classify_line(
        self,
        line: OcrLine,
        canvas_width: int,
        canvas_height: int,
        partner: _PartnerContext,
        thresholds: ThresholdPair,
    ) -> Tuple[Speaker, str]:
        """Attribute one non-name line; returns (speaker, reason).

        Partner-name lines never reach here: ``classify`` consumes them to open the run.
        """
        text = line.text.strip()
        box = line.box

        if partner.in_continuation:
            side = thresholds.side_of(box.left)
            if side == Speaker.ME:
                return Speaker.ME, "right of calibrated split"
            if side == Speaker.OTHER:
                return Speaker.OTHER, "left of calibrated split"
            # 中间区域：固定归为对方（连续区间内上一条发言者必然是对方）
            if self.patterns.is_name_line(text):
                return Speaker.OTHER, "name line in middle zone"
            return Speaker.OTHER, "middle zone in partner run"

        if partner.last_line is not None and abs(box.top - partner.last_line.box.top) < NAME_FOLLOW_DISTANCE_PX:
            return Speaker.OTHER, "below partner name"

        if detect_left_bubble(line, canvas_width):
            return Speaker.OTHER, "left bubble detected"
        if detect_right_bubble(line, canvas_width):
            return Speaker.ME, "right bubble detected"

        if box.center_x < canvas_width * 0.25:
            return Speaker.OTHER, "left region"
        if box.center_x > canvas_width * 0.75:
            return Speaker.ME, "right region"

        if partner.first_line is not None and abs(box.top - partner.first_line.box.top) < NAME_CONTEXT_DISTANCE_PX:
            return Speaker.OTHER, "near partner name"
        if box.top > canvas_height * BOTTOM_AREA_RATIO:
            return Speaker.ME, "bottom region"
        return Speaker.UNKNOWN, "unclassified"

    def classify(
        self,
        lines: Sequence[OcrLine],
        canvas_width: int,
        canvas_height: int,
        partner_name: Optional[str] = None,
    ) -> List[ChatMessage]:
        """Classify sorted lines and merge same-speaker runs into messages.

        函数级注释：
        - 对方名字行本身不输出，只用来开启“对方连续区间”；区间内按校准后的左边缘位置判断，
          一旦出现“我”的行立即关闭区间；
        - 小尺寸行（图标、角标）与时间戳行直接跳过，名字行与连续区间内的行例外；
        - partner_name 为空时自动从顶部区域提取。
        """
        if not lines:
            return []
        if partner_name is None:
            partner_name = extract_partner_name(lines, canvas_height, self.patterns)

        thresholds = calibrate([ln.box.left for ln in lines], canvas_width, self.calibration)
        min_w = int(canvas_width * MIN_LINE_WIDTH_RATIO)
        min_h = int(canvas_height * MIN_LINE_HEIGHT_RATIO)

        partner = _PartnerContext()
        runs: List[Tuple[Speaker, str, List[OcrLine]]] = []

        for index, line in enumerate(lines):
            text = line.text.strip()
            box = line.box
            if not text:
                continue

            if self._is_partner_line(line, partner_name, canvas_height):
                if partner.first_line is None:
                    partner.first_line = line
                partner.last_line = line
                partner.in_continuation = True
                logger.debug(f"line {index}: '{text}' -> partner name, continuation opened")
                continue

            is_name = self.patterns.is_name_pattern(text, box, canvas_height)
            if not is_name and not partner.in_continuation and (box.width < min_w or box.height < min_h):
                logger.debug(f"line {index}: '{text}' -> too small, skipped")
                continue
            if self.patterns.looks_like_timestamp(text):
                continue

            speaker, reason = self.classify_line(
                line, canvas_width, canvas_height, partner, thresholds
            )
            logger.debug(f"line {index}: '{text}' -> {speaker.name} ({reason})")
            if speaker == Speaker.ME:
                partner.in_continuation = False

            if runs and runs[-1][0] == speaker:
                runs[-1][2].append(line)
            else:
                runs.append((speaker, reason, [line]))

        messages: List[ChatMessage] = []
        for speaker, reason, run_lines in runs:
            raw = "\n".join(ln.text.strip() for ln in run_lines)
            cleaned = clean_message_text(raw, self.patterns)
            if not cleaned:
                logger.debug(f"run dropped after cleanup: '{raw[:20]}'")
                continue
            messages.append(
                ChatMessage(
                    text=cleaned,
                    speaker=speaker,
                    box=union_boxes(ln.box for ln in run_lines),
                    reason=reason,
                )
            )
        return messages
