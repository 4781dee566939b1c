import csv
import json

import pytest

from models.config import OutputConfig
from models.data_models import ChatMessage, Rectangle, Speaker
from services.storage_manager import StorageManager, format_labeled_transcript


def _messages():
    return [
        ChatMessage("안녕\n저는 집에 가요", Speaker.ME, Rectangle(680, 100, 220, 90), 8),
        ChatMessage("응", Speaker.OTHER, Rectangle(60, 300, 100, 40), 7, "left bubble detected"),
        ChatMessage("?", Speaker.UNKNOWN, Rectangle(400, 500, 100, 40)),
    ]


def test_labeled_transcript():
    text = format_labeled_transcript(_messages())
    assert text == "[나]\n안녕\n저는 집에 가요\n\n[상대방]\n응\n\n[미분류]\n?"


def test_labeled_transcript_custom_labels():
    text = format_labeled_transcript(_messages()[:1], {"ME": "Me"})
    assert text.startswith("[Me]\n")


class TestStorageManager:
    def test_json_export_with_excluded_fields(self, tmp_path):
        storage = StorageManager(OutputConfig(directory=str(tmp_path), exclude_fields=["reason", "confidence"]))
        path = storage.save_messages(_messages(), "chat")
        assert path.name.startswith("chat_") and path.suffix == ".json"
        data = json.loads(path.read_text(encoding="utf-8"))
        assert [d["speaker"] for d in data] == ["ME", "OTHER", "UNKNOWN"]
        assert data[0]["text"] == "안녕\n저는 집에 가요"
        assert "reason" not in data[0] and "confidence" not in data[0]
        assert data[1]["left"] == 60

    def test_csv_header(self, tmp_path):
        storage = StorageManager(OutputConfig(format="csv", directory=str(tmp_path), exclude_fields=["reason"]))
        path = storage.save_messages(_messages())
        with path.open(encoding="utf-8", newline="") as f:
            rows = list(csv.DictReader(f))
        assert "reason" not in rows[0]
        assert rows[1]["speaker"] == "OTHER"

    def test_multiple_formats(self, tmp_path):
        storage = StorageManager(OutputConfig(directory=str(tmp_path)))
        paths = storage.save_messages_multiple(_messages(), "chat", ["txt", "MD", "txt"])
        assert [p.suffix for p in paths] == [".txt", ".md"]
        assert paths[0].read_text(encoding="utf-8").startswith("[나]\n안녕")
        md = paths[1].read_text(encoding="utf-8")
        assert md.startswith("# Chat Transcript")
        assert "**상대방**: 응" in md

    def test_empty_formats_use_configured_one(self, tmp_path):
        storage = StorageManager(OutputConfig(format="txt", directory=str(tmp_path)))
        paths = storage.save_messages_multiple(_messages(), "chat", [])
        assert [p.suffix for p in paths] == [".txt"]

    def test_unsupported_format(self, tmp_path):
        storage = StorageManager(OutputConfig(directory=str(tmp_path)))
        with pytest.raises(ValueError):
            storage.save_messages_multiple(_messages(), "chat", ["pdf"])
