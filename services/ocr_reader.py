"""
Reads recognizer output (text blocks with optional line boxes) into OcrLine lists.

The recognizer itself runs elsewhere; this module only turns its in-memory or
JSON-serialized result into the sorted line list both pipelines start from.
"""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

from models.data_models import OcrLine, RecognizedLine, Rectangle, TextBlock

logger = logging.getLogger(__name__)


@dataclass
class RecognizerResult:
    """Blocks plus the canvas size when the producer recorded it."""
    blocks: List[TextBlock] = field(default_factory=list)
    width: Optional[int] = None
    height: Optional[int] = None


def collect_lines(blocks: Iterable[TextBlock]) -> List[OcrLine]:
    """Flatten blocks into OcrLines sorted by (top, left).

    Lines without a bounding box or with blank text are dropped.
    """
    lines: List[OcrLine] = []
    for block in blocks:
        for line in block.lines:
            if line.bounding_box is None:
                logger.debug(f"Dropping line without box: '{line.text}'")
                continue
            text = (line.text or "").strip()
            if not text:
                continue
            lines.append(OcrLine(text=text, box=line.bounding_box))
    lines.sort(key=lambda ln: (ln.box.top, ln.box.left))
    return lines


def _parse_box(raw: Any) -> Optional[Rectangle]:
    if raw is None:
        return None
    if isinstance(raw, (list, tuple)) and len(raw) == 4:
        left, top, width, height = (int(v) for v in raw)
        return Rectangle(left, top, width, height)
    if isinstance(raw, dict):
        left = raw.get("left", raw.get("x"))
        top = raw.get("top", raw.get("y"))
        width = raw.get("width")
        height = raw.get("height")
        if width is None and "right" in raw and left is not None:
            width = int(raw["right"]) - int(left)
        if height is None and "bottom" in raw and top is not None:
            height = int(raw["bottom"]) - int(top)
        if None in (left, top, width, height):
            return None
        return Rectangle(int(left), int(top), int(width), int(height))
    return None


def blocks_from_data(data: Union[dict, list]) -> RecognizerResult:
    """Build a RecognizerResult from decoded JSON.

    Accepts ``{"blocks": [...], "width": W, "height": H}`` or a bare block
    list. A block is ``{"lines": [...]}`` or directly a list of lines; a line
    is ``{"text": str, "box": {...} | [l, t, w, h] | null}``.
    """
    if isinstance(data, dict):
        raw_blocks = data.get("blocks", [])
        width = data.get("width")
        height = data.get("height")
    else:
        raw_blocks, width, height = data, None, None

    blocks: List[TextBlock] = []
    for raw_block in raw_blocks or []:
        raw_lines = raw_block.get("lines", []) if isinstance(raw_block, dict) else raw_block
        block = TextBlock()
        for raw_line in raw_lines or []:
            if not isinstance(raw_line, dict):
                logger.warning(f"Skipping malformed line entry: {raw_line!r}")
                continue
            try:
                box = _parse_box(raw_line.get("box", raw_line.get("bounding_box")))
            except (TypeError, ValueError):
                logger.warning(f"Unreadable box for line '{raw_line.get('text', '')}', dropping box")
                box = None
            block.lines.append(RecognizedLine(text=str(raw_line.get("text") or ""), bounding_box=box))
        blocks.append(block)

    return RecognizerResult(
        blocks=blocks,
        width=int(width) if width is not None else None,
        height=int(height) if height is not None else None,
    )


def load_recognizer_result(path: Union[str, Path]) -> RecognizerResult:
    """Load a recognizer result from a JSON file."""
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Recognizer result not found: {file_path}")
    with open(file_path, "r", encoding="utf-8") as f:
        data = json.load(f)
    result = blocks_from_data(data)
    logger.info(f"Loaded {sum(len(b.lines) for b in result.blocks)} lines in {len(result.blocks)} blocks from {file_path}")
    return result
