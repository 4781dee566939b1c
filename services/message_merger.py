"""
Cross-group merge for the grouped strategy: glue same-speaker fragments of one bubble.
"""
import logging
from typing import List

from models.data_models import ChatMessage
from services.geometry import is_close, union_boxes

logger = logging.getLogger(__name__)

_SPEAKER_ORDER = {"ME": 0, "OTHER": 1, "UNKNOWN": 2}


def merge_adjacent(messages: List[ChatMessage], vertical_slack: int = 20) -> List[ChatMessage]:
    """Merge consecutive same-speaker messages whose boxes are close.

    Messages are stably sorted by (speaker, top, left) before merging, so
    fragments of one bubble interleaved with another speaker still meet.
    The result is returned in reading order (top, left).
    """
    if not messages:
        return []

    ordered = sorted(
        messages,
        key=lambda m: (_SPEAKER_ORDER[m.speaker.name], m.box.top, m.box.left),
    )
    merged: List[ChatMessage] = []
    for msg in ordered:
        last = merged[-1] if merged else None
        if last is not None and last.speaker == msg.speaker and is_close(last.box, msg.box, vertical_slack):
            logger.debug(f"merge [{msg.speaker.name}] '{last.text[:15]}' + '{msg.text[:15]}'")
            merged[-1] = ChatMessage(
                text=last.text + "\n" + msg.text,
                speaker=last.speaker,
                box=union_boxes([last.box, msg.box]),
                confidence=max(last.confidence, msg.confidence),
                reason=last.reason,
            )
        else:
            merged.append(msg)

    merged.sort(key=lambda m: (m.box.top, m.box.left))
    logger.debug(f"merge: {len(messages)} -> {len(merged)} messages")
    return merged
