"""
Message text cleanup for the per-line strategy.
"""
from typing import Optional

from services.literal_patterns import DEFAULT_PATTERNS, LiteralPatterns


def clean_message_text(text: str, patterns: Optional[LiteralPatterns] = None) -> str:
    """Remove header names, date dividers and UI boilerplate from a message.

    - 第一行若为“← 태용”这类带箭头的名字行则删除（单独的名字保留）；
    - 删除“2025년 10월 22일 수요일 >”这类日期/星期分隔行；
    - 删除纯符号行、输入框占位文字以及纯时间行。
    """
    pats = patterns or DEFAULT_PATTERNS
    lines = [ln.strip() for ln in text.split("\n") if ln.strip()]
    kept = []
    first = True
    for line in lines:
        if first and pats.is_top_left_name_line(line):
            first = False
            continue
        if pats.is_date_divider(line):
            continue
        if pats.is_meaningless_line(line):
            continue
        kept.append(line)
        first = False
    return "\n".join(kept).strip()
