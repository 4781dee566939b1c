from models.data_models import OcrLine, Rectangle
from services.line_grouper import LineGrouper


def _line(text, left, top, width, height=40):
    return OcrLine(text, Rectangle(left, top, width, height))


class TestLineGrouper:
    def setup_method(self):
        self.grouper = LineGrouper()

    def test_wrapped_lines_form_one_bubble(self):
        groups = self.grouper.group([
            _line("안녕", 700, 100, 150),
            _line("저는 집에 가요", 680, 150, 220),
        ])
        assert len(groups) == 1
        assert groups[0].text == "안녕\n저는 집에 가요"
        assert (groups[0].min_x, groups[0].max_x) == (680, 900)

    def test_time_label_and_placeholders_are_filtered(self):
        groups = self.grouper.group([
            _line("hello", 60, 100, 300),
            _line("오후 3:45", 370, 110, 110, 30),
            _line("메시지 입력", 100, 1900, 500),
            _line("+", 20, 1900, 40),
        ])
        assert len(groups) == 1
        assert groups[0].text == "hello"

    def test_large_vertical_gap_splits(self):
        groups = self.grouper.group([
            _line("first", 100, 100, 200),
            _line("second", 100, 200, 200),
        ])
        assert [g.text for g in groups] == ["first", "second"]

    def test_ragged_wrap_joins_on_aligned_left_edge(self):
        # overlap 60/400 is below the ratio, the left edges line up
        groups = self.grouper.group([
            _line("a long first line", 100, 100, 400),
            _line("end", 100, 145, 60),
        ])
        assert len(groups) == 1

    def test_no_overlap_and_no_alignment_splits(self):
        groups = self.grouper.group([
            _line("left", 100, 100, 100),
            _line("right", 600, 145, 100),
        ])
        assert len(groups) == 2

    def test_previous_groups_do_not_change_result(self):
        lines = [_line("a", 100, 100, 200), _line("b", 100, 145, 200)]
        first = self.grouper.group(lines)
        again = self.grouper.group(lines, previous_groups=first)
        assert [g.text for g in again] == [g.text for g in first]

    def test_empty_input(self):
        assert self.grouper.group([]) == []
