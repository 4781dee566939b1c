"""
Literal-pattern matchers for chat UI chrome, timestamps, dates and names.

All predicates are pure; the regular expressions are compiled once from a
LocaleConfig so a different chat client language only needs a new config.
"""
import re
from typing import List, Optional

from models.config import LocaleConfig
from models.data_models import Rectangle


class LiteralPatterns:
    """Compiled literal rules for one locale."""

    def __init__(self, locale: Optional[LocaleConfig] = None):
        self.locale = locale or LocaleConfig()
        loc = self.locale
        self._placeholders = {p.strip() for p in loc.placeholders}
        self._time = re.compile(loc.time_of_day_pattern)
        self._full_date = re.compile(loc.full_date_pattern)
        self._numeric_date = re.compile(loc.numeric_date_pattern)
        self._dates: List[re.Pattern] = [re.compile(p) for p in loc.date_patterns]

        # name_prefix_symbols is a regex character-class body
        self._name_prefix = re.compile(rf"^[{loc.name_prefix_symbols}]\s*(.+)$")
        arrows = loc.arrow_symbols
        self._arrow_name = re.compile(rf"^[{arrows}]\s*[가-힣a-zA-Z0-9]+\s*$")
        self._symbols_only = re.compile(rf"^[\s\-_=+*•·{arrows}<>]+$")

        wd = loc.weekday_chars
        suffix = re.escape(loc.weekday_suffix)
        full = loc.full_date_pattern
        self._date_dividers = [
            re.compile(rf"{full}\s*[{wd}]{suffix}"),
            re.compile(rf"{full}\s*>"),
            re.compile(rf"\d{{1,2}}월\s*\d{{1,2}}일\s*[{wd}]{suffix}\s*>"),
        ]

    # -- UI chrome -------------------------------------------------------

    def is_ui_garbage(self, text: str) -> bool:
        """Input placeholders, bare time-of-day labels and full-date dividers."""
        s = text.strip()
        if s in self._placeholders:
            return True
        return bool(self._time.fullmatch(s)) or bool(self._full_date.search(s))

    def is_time_label(self, text: str) -> bool:
        return bool(self._time.fullmatch(text.strip()))

    def looks_like_timestamp(self, text: str) -> bool:
        return bool(self._time.search(text)) or bool(self._numeric_date.search(text))

    def looks_like_date(self, text: str) -> bool:
        return any(p.search(text) for p in self._dates)

    # -- names -----------------------------------------------------------

    def is_name_candidate(self, text: str, max_length: int = 15) -> bool:
        """Length and content test shared by every name heuristic."""
        s = text.strip()
        if not 2 <= len(s) <= max_length:
            return False
        if self.looks_like_timestamp(s) or self.looks_like_date(s):
            return False
        return not any(tok in s for tok in self.locale.name_excluded_tokens)

    def is_name_pattern(self, text: str, box: Rectangle, canvas_height: int, top_ratio: float = 0.3) -> bool:
        """A name-like line in the top band of the screen."""
        return box.top < canvas_height * top_ratio and self.is_name_candidate(text)

    @staticmethod
    def is_name_line(text: str) -> bool:
        """Strict variant: 1-6 letters or digits, nothing else."""
        return 1 <= len(text) <= 6 and text.isalnum()

    def extract_name(self, text: str) -> str:
        """Strip a leading arrow/bullet/dash and return a 2-10 char name, or ""."""
        trimmed = text.strip()
        m = self._name_prefix.match(trimmed)
        if m:
            candidate = m.group(1).strip()
            if 2 <= len(candidate) <= 10:
                return candidate
        if 2 <= len(trimmed) <= 10:
            return trimmed
        return ""

    # -- text content ----------------------------------------------------

    def has_first_person(self, text: str) -> bool:
        s = text.lower()
        return any(tok in s for tok in self.locale.first_person)

    def has_second_person(self, text: str) -> bool:
        s = text.lower()
        return any(tok in s for tok in self.locale.second_person)

    def has_context_break_token(self, text: str) -> bool:
        return any(tok in text for tok in self.locale.context_break_tokens)

    # -- cleanup ---------------------------------------------------------

    def is_top_left_name_line(self, line: str) -> bool:
        """Arrow-prefixed header such as "← 태용"; a plain name alone is kept."""
        return bool(self._arrow_name.match(line.strip()))

    def is_date_divider(self, line: str) -> bool:
        s = line.strip()
        if any(p.search(s) for p in self._date_dividers):
            return True
        return (
            "년" in s and "월" in s and "일" in s
            and self.locale.weekday_suffix in s
            and s.endswith(">")
        )

    def is_meaningless_line(self, line: str) -> bool:
        s = line.strip()
        if not s or s in self._placeholders:
            return True
        if self._symbols_only.match(s):
            return True
        if any(tok in s for tok in self.locale.boilerplate_tokens):
            return True
        return self.is_time_label(s)


DEFAULT_PATTERNS = LiteralPatterns()
