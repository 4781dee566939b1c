"""
Configuration data models for the chat OCR reconstructor.
"""
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional


@dataclass
class GroupingConfig:
    """Line grouping thresholds."""
    # 允许的垂直间距 = 两行平均高度 * 该系数
    vertical_gap_ratio: float = 0.9
    min_horizontal_overlap: float = 0.35
    # 左边缘或右边缘差值在此像素内视为同一气泡（应对多行折行参差不齐）
    edge_alignment_px: int = 30


@dataclass
class CalibrationConfig:
    """Adaptive left/right threshold calibration."""
    min_anchors: int = 4
    max_iterations: int = 10
    convergence_px: float = 0.5
    min_center_gap_px: float = 30.0
    margin_ratio: float = 0.10
    min_margin_px: float = 20.0
    step_px: int = 30
    min_separation_px: int = 60
    fallback_left_ratio: float = 0.4
    fallback_right_ratio: float = 0.6


@dataclass
class ContextConfig:
    """Speaker continuity settings."""
    # 未发生 context break 时，置信度不超过该值的分组继承上一条的发言者
    continuity_max_confidence: int = 1
    # 相邻同发言者分组合并时允许的垂直间距（像素）
    merge_vertical_slack_px: int = 20


@dataclass
class LocaleConfig:
    """Language specific literal patterns (Korean + English style chat UIs)."""
    placeholders: List[str] = field(default_factory=lambda: ["+", "메시지 입력", "Type a message"])
    time_of_day_pattern: str = r"(?:(?:오전|오후|AM|PM|am|pm)\s*\d{1,2}:\d{2}|\d{1,2}:\d{2}\s*(?:AM|PM|am|pm))"
    full_date_pattern: str = r"\d{4}년\s*\d{1,2}월\s*\d{1,2}일"
    numeric_date_pattern: str = r"\d{4}[./-]\d{1,2}[./-]\d{1,2}"
    date_patterns: List[str] = field(default_factory=lambda: [
        r"\d{4}년\s*\d{1,2}월\s*\d{1,2}일",
        r"\d{1,2}월\s*\d{1,2}일",
        r"\d{1,2}/\d{1,2}",
        r"\d{4}\.\d{1,2}\.\d{1,2}",
        r"\d{1,2}\.\d{1,2}",
        r"오늘", r"어제", r"내일",
        r"(?i)\btoday\b", r"(?i)\byesterday\b", r"(?i)\btomorrow\b",
    ])
    # 名字候选中不允许出现的字符/词（时间、日期相关）
    name_excluded_tokens: List[str] = field(default_factory=lambda: ["오전", "오후", ":", ".", "년", "월", "일"])
    name_prefix_symbols: str = "←→↑↓◀▶▲▼<>=•·\\-*"
    arrow_symbols: str = "←→↑↓◀▶▲▼"
    first_person: List[str] = field(default_factory=lambda: ["저는", "제가", "나", "저", "우리", "내가"])
    second_person: List[str] = field(default_factory=lambda: ["너", "당신", "그쪽", "형", "누나", "언니"])
    context_break_tokens: List[str] = field(default_factory=lambda: ["오전", "오후", "년", "월", "일"])
    weekday_chars: str = "월화수목금토일"
    weekday_suffix: str = "요일"
    boilerplate_tokens: List[str] = field(default_factory=lambda: ["메시지 입력", "메시지", "입력"])
    speaker_labels: Dict[str, str] = field(default_factory=lambda: {
        "ME": "나",
        "OTHER": "상대방",
        "UNKNOWN": "미분류",
    })


@dataclass
class OutputConfig:
    """Output configuration."""
    format: str = "json"  # json, csv, txt, md
    directory: str = "./output"
    # 同时导出多种格式（若非空则优先生效），例如 ["json", "txt"]
    formats: List[str] = field(default_factory=list)
    # 需要从 JSON/CSV 导出中排除的字段，例如 ["reason", "box"]
    exclude_fields: List[str] = field(default_factory=list)


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    # Empty/None disables the rotating file handler
    file: Optional[str] = "./logs/reconstructor.log"
    max_size: str = "10MB"


STRATEGIES = ("grouped", "per_line")
OUTPUT_FORMATS = {"json", "csv", "txt", "md"}


@dataclass
class AppConfig:
    """Main application configuration."""
    strategy: str = "grouped"

    grouping: GroupingConfig = field(default_factory=GroupingConfig)
    calibration: CalibrationConfig = field(default_factory=CalibrationConfig)
    context: ContextConfig = field(default_factory=ContextConfig)
    locale: LocaleConfig = field(default_factory=LocaleConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> bool:
        """Validate configuration parameters."""
        errors = []

        if self.strategy not in STRATEGIES:
            errors.append(f"strategy must be one of: {', '.join(STRATEGIES)}")

        g = self.grouping
        if g.vertical_gap_ratio <= 0:
            errors.append("grouping.vertical_gap_ratio must be positive")
        if not 0.0 <= g.min_horizontal_overlap <= 1.0:
            errors.append("grouping.min_horizontal_overlap must be between 0.0 and 1.0")
        if g.edge_alignment_px < 0:
            errors.append("grouping.edge_alignment_px must not be negative")

        c = self.calibration
        if c.min_anchors < 2:
            errors.append("calibration.min_anchors must be at least 2")
        if c.max_iterations < 1:
            errors.append("calibration.max_iterations must be at least 1")
        if c.step_px < 1:
            errors.append("calibration.step_px must be at least 1")
        if not 0.0 <= c.fallback_left_ratio < c.fallback_right_ratio <= 1.0:
            errors.append("calibration fallback ratios must satisfy 0 <= left < right <= 1")

        if self.context.continuity_max_confidence < 0:
            errors.append("context.continuity_max_confidence must not be negative")
        if self.context.merge_vertical_slack_px < 0:
            errors.append("context.merge_vertical_slack_px must not be negative")

        if self.output.format not in OUTPUT_FORMATS:
            errors.append("output.format must be one of: json, csv, txt, md")
        if self.output.formats:
            invalid = [f for f in self.output.formats if f not in OUTPUT_FORMATS]
            if invalid:
                errors.append(f"output.formats contains unsupported: {','.join(invalid)}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "app": {"strategy": self.strategy},
            "grouping": dict(vars(self.grouping)),
            "calibration": dict(vars(self.calibration)),
            "context": dict(vars(self.context)),
            "locale": {
                "placeholders": list(self.locale.placeholders),
                "first_person": list(self.locale.first_person),
                "second_person": list(self.locale.second_person),
                "boilerplate_tokens": list(self.locale.boilerplate_tokens),
                "speaker_labels": dict(self.locale.speaker_labels),
            },
            "output": {
                "format": self.output.format,
                "directory": self.output.directory,
                "formats": list(self.output.formats),
                "exclude_fields": list(self.output.exclude_fields),
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
                "max_size": self.logging.max_size,
            },
        }
