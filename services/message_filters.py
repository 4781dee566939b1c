"""
Utilities to filter ChatMessage objects by speaker, content and confidence.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from models.data_models import ChatMessage, Speaker


def filter_messages(
    messages: Iterable[ChatMessage],
    speakers: Optional[Sequence[Speaker]] = None,
    contains: Optional[str] = None,
    min_confidence: Optional[int] = None,
) -> List[ChatMessage]:
    """Filter messages by criteria.

    - speakers: allowed Speaker sequence
    - contains: case-insensitive substring match in ChatMessage.text
    - min_confidence: minimum score margin (grouped strategy only fills it)
    """
    contains_q = contains.lower() if contains else None
    speaker_set = set(speakers) if speakers else None

    out: List[ChatMessage] = []
    for m in messages:
        if speaker_set and m.speaker not in speaker_set:
            continue
        if contains_q and (m.text or "").lower().find(contains_q) == -1:
            continue
        if (min_confidence is not None) and (m.confidence < int(min_confidence)):
            continue
        out.append(m)
    return out


def count_by_speaker(messages: Iterable[ChatMessage]) -> dict:
    """Number of messages per speaker name, every Speaker present."""
    counts = {s.name: 0 for s in Speaker}
    for m in messages:
        counts[m.speaker.name] += 1
    return counts
