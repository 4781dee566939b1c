"""
Storage manager for exporting reconstructed chat messages to files.
Supports JSON, CSV, TXT (speaker-labeled transcript) and Markdown.
"""
import csv
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from models.config import LocaleConfig, OutputConfig
from models.data_models import ChatMessage

ALLOWED_FORMATS = ("json", "csv", "txt", "md")
DEFAULT_FIELDS = ["index", "speaker", "text", "left", "top", "width", "height", "confidence", "reason"]


def speaker_label(msg: ChatMessage, labels: Dict[str, str]) -> str:
    return labels.get(msg.speaker.name, msg.speaker.name)


def format_labeled_transcript(messages: List[ChatMessage], labels: Optional[Dict[str, str]] = None) -> str:
    """Render messages as "[label]\\ntext" blocks separated by a blank line.

    函数级注释：
    - 供编辑界面直接展示：每条消息前加发言者标签（默认 나 / 상대방 / 미분류）；
    - 消息之间以空行分隔，消息内部保留原有换行。
    """
    labels = labels or LocaleConfig().speaker_labels
    return "\n\n".join(f"[{speaker_label(m, labels)}]\n{m.text.strip()}" for m in messages)


class StorageManager:
    """
    Handles persistence of ChatMessage objects to disk.
    """

    def __init__(self, output_config: Optional[OutputConfig] = None, locale: Optional[LocaleConfig] = None):
        self.logger = logging.getLogger(__name__)
        self.config = output_config or OutputConfig()
        self.labels = (locale or LocaleConfig()).speaker_labels
        self._ensure_output_dir()

    def _ensure_output_dir(self) -> None:
        """Create output directory if it does not exist."""
        out_dir = Path(self.config.directory)
        out_dir.mkdir(parents=True, exist_ok=True)
        self.logger.debug(f"Output directory ready: {out_dir}")

    def _generate_filename(self, prefix: str, ext: str) -> Path:
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"{prefix}_{ts}.{ext}"
        return Path(self.config.directory) / filename

    def _message_to_dict(self, index: int, msg: ChatMessage) -> dict:
        """Serialize a ChatMessage to a flat JSON/CSV friendly dict, minus excluded fields."""
        base = {
            "index": index,
            "speaker": msg.speaker.name,
            "text": msg.text,
            "left": msg.box.left,
            "top": msg.box.top,
            "width": msg.box.width,
            "height": msg.box.height,
            "confidence": msg.confidence,
            "reason": msg.reason,
        }
        for k in self.config.exclude_fields or []:
            base.pop(k, None)
        return base

    def _write_messages(self, messages: List[ChatMessage], fmt: str, filename_prefix: str) -> Path:
        """Write messages to a single file in the given format.

        参数:
        - messages: 待写入的消息列表
        - fmt: 输出格式（json/csv/txt/md）
        - filename_prefix: 文件名前缀

        返回: 写入文件的路径
        """
        fmt = (fmt or "json").lower()
        if fmt not in ALLOWED_FORMATS:
            raise ValueError(f"Unsupported output format: {fmt}")

        path = self._generate_filename(filename_prefix, fmt)

        if fmt == "json":
            data = [self._message_to_dict(i, m) for i, m in enumerate(messages)]
            with path.open("w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
        elif fmt == "csv":
            exclude = set(self.config.exclude_fields or [])
            fieldnames = [f for f in DEFAULT_FIELDS if f not in exclude]
            with path.open("w", encoding="utf-8", newline="") as f:
                writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
                writer.writeheader()
                for i, m in enumerate(messages):
                    writer.writerow(self._message_to_dict(i, m))
        elif fmt == "txt":
            with path.open("w", encoding="utf-8") as f:
                f.write(format_labeled_transcript(messages, self.labels))
                f.write("\n")
        else:
            with path.open("w", encoding="utf-8") as f:
                f.write("# Chat Transcript\n\n")
                for m in messages:
                    f.write(self._format_markdown_message(m) + "\n")

        self.logger.info(f"Saved {len(messages)} messages to {path}")
        return path

    def _format_markdown_message(self, msg: ChatMessage) -> str:
        body = msg.text.replace("\n", "  \n")
        return f"**{speaker_label(msg, self.labels)}**: {body}\n"

    def save_messages(self, messages: List[ChatMessage], filename_prefix: str = "transcript") -> Path:
        """Save messages according to the configured single format."""
        return self._write_messages(messages, self.config.format, filename_prefix)

    def save_messages_multiple(self, messages: List[ChatMessage], filename_prefix: str, formats: List[str]) -> List[Path]:
        """Save messages to several formats; falls back to the configured format when none given."""
        norm_formats: List[str] = []
        for f in formats or []:
            lf = (f or "").strip().lower()
            if lf and lf not in norm_formats:
                norm_formats.append(lf)
        if not norm_formats:
            norm_formats = [(self.config.format or "json").lower()]

        invalid = [f for f in norm_formats if f not in ALLOWED_FORMATS]
        if invalid:
            raise ValueError(f"Unsupported output formats: {', '.join(invalid)}")

        return [self._write_messages(messages, fmt, filename_prefix) for fmt in norm_formats]
