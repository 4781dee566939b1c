from models.data_models import OcrLine, Rectangle, TimeLabel
from services.label_extractor import extract_name_labels, extract_partner_name, extract_time_labels

H = 2000


def _line(text, left, top, width=100, height=30):
    return OcrLine(text, Rectangle(left, top, width, height))


def test_time_labels_from_timestamps():
    lines = [
        _line("2025.10.22", 400, 20, 150),
        _line("오후 3:45", 800, 600, 120),
        _line("밥 먹었어?", 60, 700, 200),
    ]
    assert extract_time_labels(lines) == [TimeLabel(400, 20), TimeLabel(800, 600)]


def test_name_labels_only_in_top_band():
    lines = [
        _line("← 태용", 60, 50),
        _line("2025.10.22", 400, 20, 150),
        _line("다행이다", 60, 900),
    ]
    labels = extract_name_labels(lines, H)
    assert [label.text for label in labels] == ["← 태용"]


def test_partner_name_strips_arrow():
    assert extract_partner_name([_line("← 태용", 60, 50)], H) == "태용"


def test_partner_name_skips_unusable_candidates():
    lines = [
        _line("이건 화면 중간쯤에 있는 긴 문장입니다", 60, 30, 400),
        _line("가나다라마바사아자차카", 60, 60, 300),
        _line("태용", 60, 90),
    ]
    assert extract_partner_name(lines, H) == "태용"


def test_partner_name_absent_is_none():
    assert extract_partner_name([_line("다행이다", 60, 900)], H) is None
    assert extract_partner_name([], H) is None


def test_date_header_is_not_partner_name():
    lines = [_line("오늘", 400, 40), _line("← 태용", 60, 80)]
    assert extract_partner_name(lines, H) == "태용"
