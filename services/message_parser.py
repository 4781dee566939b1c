"""
Message parsing entry point.

This module converts recognizer output (text blocks with line boxes) into
an ordered list of speaker-attributed ChatMessages, using one of two
strategies:

- ``grouped``: group lines into bubbles, score every bubble, apply speaker
  continuity, then merge fragments of the same bubble;
- ``per_line``: classify each line on its own, merge same-speaker runs and
  clean the resulting text.

Both strategies share the literal patterns and the threshold calibrator.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from models.config import (
    AppConfig,
    CalibrationConfig,
    ContextConfig,
    GroupingConfig,
    LocaleConfig,
    STRATEGIES,
)
from models.data_models import ChatMessage, MessageGroup, OcrLine, Speaker, TextBlock
from services.context_resolver import ContextResolver
from services.label_extractor import extract_name_labels, extract_partner_name, extract_time_labels
from services.line_classifier import LineClassifier
from services.line_grouper import LineGrouper
from services.literal_patterns import LiteralPatterns
from services.message_merger import merge_adjacent
from services.ocr_reader import collect_lines
from services.sender_classifier import SenderClassifier
from services.threshold_calibrator import calibrate

logger = logging.getLogger(__name__)


@dataclass
class ParseOptions:
    """Options to guide parsing behavior."""
    strategy: str = "grouped"
    grouping: GroupingConfig = field(default_factory=GroupingConfig)
    calibration: CalibrationConfig = field(default_factory=CalibrationConfig)
    context: ContextConfig = field(default_factory=ContextConfig)
    locale: LocaleConfig = field(default_factory=LocaleConfig)

    @classmethod
    def from_app_config(cls, cfg: AppConfig, strategy: Optional[str] = None) -> "ParseOptions":
        return cls(
            strategy=strategy or cfg.strategy,
            grouping=cfg.grouping,
            calibration=cfg.calibration,
            context=cfg.context,
            locale=cfg.locale,
        )


class MessageParser:
    """Parses recognizer output into structured chat messages."""

    def __init__(self, options: Optional[ParseOptions] = None):
        self.options = options or ParseOptions()
        if self.options.strategy not in STRATEGIES:
            raise ValueError(f"Unknown strategy '{self.options.strategy}', expected one of {STRATEGIES}")
        self.patterns = LiteralPatterns(self.options.locale)
        self.grouper = LineGrouper(self.options.grouping, self.patterns)
        self.classifier = SenderClassifier(self.patterns)
        self.resolver = ContextResolver(self.options.context, self.patterns)
        self.line_classifier = LineClassifier(self.options.calibration, self.patterns)

    def parse(
        self,
        blocks: Iterable[TextBlock],
        canvas_width: int,
        canvas_height: int,
        previous_groups: Optional[List[MessageGroup]] = None,
    ) -> List[ChatMessage]:
        """Parse recognizer blocks into messages.

        Args:
            blocks: 识别器输出的文本块（每块为有序的行列表，缺少边框的行会被丢弃）
            canvas_width: 截图宽度（像素），所有百分比阈值据此缩放
            canvas_height: 截图高度（像素）
            previous_groups: 上一帧的分组；当前不参与计算

        Returns:
            List[ChatMessage]: 按阅读顺序排列的消息
        """
        return self.parse_lines(collect_lines(blocks), canvas_width, canvas_height, previous_groups)

    def parse_lines(
        self,
        lines: Sequence[OcrLine],
        canvas_width: int,
        canvas_height: int,
        previous_groups: Optional[List[MessageGroup]] = None,
    ) -> List[ChatMessage]:
        """Same as ``parse`` for lines already sorted by (top, left)."""
        if not lines or canvas_width <= 0 or canvas_height <= 0:
            return []
        logger.debug(f"parse: {len(lines)} lines, canvas {canvas_width}x{canvas_height}, strategy={self.options.strategy}")

        if self.options.strategy == "per_line":
            messages = self.line_classifier.classify(lines, canvas_width, canvas_height)
        else:
            messages = self._parse_grouped(lines, canvas_width, canvas_height, previous_groups)

        logger.info(
            f"🧩 {len(messages)} messages "
            f"(ME: {sum(m.speaker == Speaker.ME for m in messages)}, "
            f"OTHER: {sum(m.speaker == Speaker.OTHER for m in messages)}, "
            f"UNKNOWN: {sum(m.speaker == Speaker.UNKNOWN for m in messages)})"
        )
        return messages

    def _parse_grouped(
        self,
        lines: Sequence[OcrLine],
        canvas_width: int,
        canvas_height: int,
        previous_groups: Optional[List[MessageGroup]],
    ) -> List[ChatMessage]:
        groups = self.grouper.group(lines, previous_groups)
        if not groups:
            return []

        time_labels = extract_time_labels(lines, self.patterns)
        name_labels = extract_name_labels(lines, canvas_height, self.patterns)
        partner_name = extract_partner_name(lines, canvas_height, self.patterns)
        thresholds = calibrate([g.center_x for g in groups], canvas_width, self.options.calibration)
        logger.debug(
            f"partner={partner_name!r} time_labels={len(time_labels)} name_labels={len(name_labels)} "
            f"thresholds={thresholds.left_max_x:.0f}/{thresholds.right_min_x:.0f}"
        )

        verdicts = [
            self.classifier.classify(
                g, canvas_width, canvas_height, partner_name, name_labels, time_labels, thresholds
            )
            for g in groups
        ]
        speakers = self.resolver.resolve(groups, verdicts, canvas_width)

        messages: List[ChatMessage] = []
        for group, verdict, speaker in zip(groups, verdicts, speakers):
            # inherited speakers carry no score margin of their own
            confidence = verdict.confidence if speaker == verdict.speaker else 0
            group.speaker = speaker
            group.confidence = confidence
            messages.append(ChatMessage(text=group.text, speaker=speaker, box=group.box, confidence=confidence))

        return merge_adjacent(messages, self.options.context.merge_vertical_slack_px)
