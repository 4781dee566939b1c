"""
Auxiliary signals: chat timestamps and the conversation partner's display name.
"""
import logging
from typing import List, Optional, Sequence

from models.data_models import NameLabel, OcrLine, TimeLabel
from services.literal_patterns import DEFAULT_PATTERNS, LiteralPatterns

logger = logging.getLogger(__name__)

NAME_TOP_BAND_RATIO = 0.25


def extract_time_labels(lines: Sequence[OcrLine], patterns: Optional[LiteralPatterns] = None) -> List[TimeLabel]:
    """Every timestamp-looking line becomes a TimeLabel at its top-left corner."""
    pats = patterns or DEFAULT_PATTERNS
    labels = [TimeLabel(ln.box.left, ln.box.top) for ln in lines if pats.looks_like_timestamp(ln.text)]
    logger.debug(f"time labels: {len(labels)}")
    return labels


def extract_name_labels(
    lines: Sequence[OcrLine],
    canvas_height: int,
    patterns: Optional[LiteralPatterns] = None,
) -> List[NameLabel]:
    """Lines in the top quarter of the screen that could be a display name."""
    pats = patterns or DEFAULT_PATTERNS
    top_limit = canvas_height * NAME_TOP_BAND_RATIO
    return [
        NameLabel(ln.text.strip(), ln.box)
        for ln in lines
        if ln.box.top < top_limit and pats.is_name_candidate(ln.text)
    ]


def extract_partner_name(
    lines: Sequence[OcrLine],
    canvas_height: int,
    patterns: Optional[LiteralPatterns] = None,
) -> Optional[str]:
    """Name of the conversation partner, or None when nothing plausible is found."""
    pats = patterns or DEFAULT_PATTERNS
    for label in extract_name_labels(lines, canvas_height, pats):
        name = pats.extract_name(label.text)
        if name:
            logger.debug(f"partner name: '{name}' (from '{label.text}')")
            return name
    return None
