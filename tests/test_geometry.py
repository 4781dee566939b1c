from models.data_models import OcrLine, Rectangle
from services.geometry import is_close, overlap_length, overlap_ratio, union_boxes


def test_overlap_ratio_partial_and_disjoint():
    # [700, 850] vs [680, 900]: intersection 150, union 220
    assert abs(overlap_ratio(700, 850, 680, 900) - 150 / 220) < 1e-9
    assert overlap_ratio(0, 100, 200, 300) == 0
    assert overlap_length(0, 100, 50, 300) == 50


def test_overlap_ratio_union_floor():
    # zero-width intervals at the same point do not divide by zero
    assert overlap_ratio(10, 10, 10, 10) == 0


def test_union_boxes():
    box = union_boxes([Rectangle(10, 20, 100, 30), Rectangle(50, 5, 100, 10)])
    assert box == Rectangle(10, 5, 140, 45)
    assert union_boxes([]) is None


def test_is_close_vertical_slack():
    a = Rectangle(700, 100, 200, 40)
    assert is_close(a, Rectangle(700, 155, 200, 40))      # 15px gap
    assert not is_close(a, Rectangle(700, 170, 200, 40))  # 30px gap
    assert is_close(a, Rectangle(700, 170, 200, 40), vertical_slack=40)


def test_is_close_needs_horizontal_proximity():
    a = Rectangle(50, 100, 200, 40)
    assert not is_close(a, Rectangle(700, 120, 200, 40))


def test_rectangle_derived_edges_and_font_estimate():
    r = Rectangle(10, 20, 100, 40)
    assert (r.right, r.bottom, r.center_x, r.center_y) == (110, 60, 60.0, 40.0)
    assert OcrLine("안녕", r).font_px == 32
    assert OcrLine("x" * 40, r).font_px == 44
    assert OcrLine("안녕", Rectangle(0, 0, 10, 5)).font_px == 10
