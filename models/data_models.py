"""
Core data models for chat-ocr-reconstructor.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Speaker(Enum):
    """Who wrote a message."""
    ME = "me"
    OTHER = "other"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Rectangle:
    """Represents a rectangular region with position and dimensions."""
    x: int
    y: int
    width: int
    height: int

    @property
    def left(self) -> int:
        return self.x

    @property
    def top(self) -> int:
        return self.y

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2.0

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2.0

    @classmethod
    def from_edges(cls, left: int, top: int, right: int, bottom: int) -> "Rectangle":
        return cls(x=left, y=top, width=right - left, height=bottom - top)


@dataclass
class RecognizedLine:
    """One line as handed over by the recognizer. The box may be missing."""
    text: str
    bounding_box: Optional[Rectangle] = None


@dataclass
class TextBlock:
    """An ordered list of recognizer lines."""
    lines: List[RecognizedLine] = field(default_factory=list)


def estimate_font_px(box_height: int, text_length: int) -> int:
    """Estimate the rendered font size from box height and text length.

    短文本（名字、时间）的框通常比字号高，长文本则略低，按长度分段修正后限制在 [10, 200]。
    """
    if text_length <= 5:
        size = int(box_height * 0.8)
    elif text_length <= 15:
        size = int(box_height * 0.9)
    elif text_length <= 30:
        size = int(box_height)
    else:
        size = int(box_height * 1.1)
    return max(10, min(200, size))


@dataclass(frozen=True)
class OcrLine:
    """A recognized text line with a guaranteed bounding box."""
    text: str
    box: Rectangle

    @property
    def font_px(self) -> int:
        return estimate_font_px(self.box.height, len(self.text))


@dataclass
class MessageGroup:
    """Lines believed to belong to one chat bubble."""
    lines: List[OcrLine] = field(default_factory=list)
    speaker: Speaker = Speaker.UNKNOWN
    confidence: int = 0
    reason: Optional[str] = None

    @property
    def min_x(self) -> int:
        return min(ln.box.left for ln in self.lines)

    @property
    def max_x(self) -> int:
        return max(ln.box.right for ln in self.lines)

    @property
    def top(self) -> int:
        return min(ln.box.top for ln in self.lines)

    @property
    def bottom(self) -> int:
        return max(ln.box.bottom for ln in self.lines)

    @property
    def width(self) -> int:
        return self.max_x - self.min_x

    @property
    def center_x(self) -> float:
        return (self.min_x + self.max_x) / 2.0

    @property
    def center_y(self) -> float:
        return (self.top + self.bottom) / 2.0

    @property
    def box(self) -> Rectangle:
        return Rectangle.from_edges(self.min_x, self.top, self.max_x, self.bottom)

    @property
    def text(self) -> str:
        return "\n".join(ln.text.strip() for ln in self.lines if ln.text.strip())


@dataclass(frozen=True)
class TimeLabel:
    """Anchor of a recognized timestamp; never rendered as content."""
    x: int
    y: int


@dataclass(frozen=True)
class NameLabel:
    """A top-band line that may be the partner's display name."""
    text: str
    box: Rectangle


@dataclass(frozen=True)
class ThresholdPair:
    """x <= left_max_x leans OTHER, x >= right_min_x leans ME."""
    left_max_x: float
    right_min_x: float
    fallback: bool = False

    def side_of(self, x: float) -> Speaker:
        if x >= self.right_min_x:
            return Speaker.ME
        if x <= self.left_max_x:
            return Speaker.OTHER
        return Speaker.UNKNOWN


@dataclass
class ChatMessage:
    """Output record handed to the presentation layer."""
    text: str
    speaker: Speaker
    box: Rectangle
    confidence: int = 0
    reason: Optional[str] = None
