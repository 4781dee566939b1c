from services.text_cleaner import clean_message_text


def test_arrow_name_header_removed():
    assert clean_message_text("← 태용\n안녕하세요") == "안녕하세요"


def test_plain_name_is_kept():
    assert clean_message_text("태용\n안녕") == "태용\n안녕"


def test_arrow_line_only_removed_when_first():
    assert clean_message_text("안녕\n← 태용") == "안녕\n← 태용"


def test_date_divider_removed():
    assert clean_message_text("2025년 10월 22일 수요일 >\n밥 먹었어?") == "밥 먹었어?"


def test_boilerplate_symbols_and_time_removed():
    assert clean_message_text("메시지 입력\n---\n오후 3:45") == ""


def test_blank_lines_collapsed():
    assert clean_message_text("  첫 줄  \n\n\n둘째 줄") == "첫 줄\n둘째 줄"


def test_placeholders_removed():
    assert clean_message_text("Type a message\n메시지 입력") == ""
    assert clean_message_text("+\n좋아") == "좋아"
