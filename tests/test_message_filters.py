from models.data_models import ChatMessage, Rectangle, Speaker
from services.message_filters import count_by_speaker, filter_messages

BOX = Rectangle(0, 0, 10, 10)


def _msgs():
    return [
        ChatMessage("Hello there", Speaker.OTHER, BOX, 7),
        ChatMessage("good morning", Speaker.ME, BOX, 5),
        ChatMessage("ok", Speaker.UNKNOWN, BOX, 0),
    ]


def test_filter_by_speaker():
    out = filter_messages(_msgs(), speakers=[Speaker.ME, Speaker.UNKNOWN])
    assert [m.text for m in out] == ["good morning", "ok"]


def test_filter_contains_is_case_insensitive():
    assert [m.text for m in filter_messages(_msgs(), contains="HELLO")] == ["Hello there"]


def test_filter_min_confidence():
    assert [m.text for m in filter_messages(_msgs(), min_confidence=5)] == ["Hello there", "good morning"]


def test_no_criteria_keeps_everything():
    assert len(filter_messages(_msgs())) == 3


def test_count_by_speaker():
    assert count_by_speaker(_msgs()[:2]) == {"ME": 1, "OTHER": 1, "UNKNOWN": 0}
