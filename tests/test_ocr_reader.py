import json

import pytest

from models.data_models import Rectangle
from services.ocr_reader import blocks_from_data, collect_lines, load_recognizer_result


def test_box_shapes_are_accepted():
    result = blocks_from_data({
        "width": 1000,
        "height": 2000,
        "blocks": [
            {"lines": [
                {"text": "dict", "box": {"left": 10, "top": 20, "width": 30, "height": 40}},
                {"text": "list", "box": [1, 2, 3, 4]},
                {"text": "xy", "box": {"x": 5, "y": 6, "right": 15, "bottom": 26}},
                {"text": "no box", "box": None},
            ]},
        ],
    })
    assert (result.width, result.height) == (1000, 2000)
    boxes = [ln.bounding_box for ln in result.blocks[0].lines]
    assert boxes == [Rectangle(10, 20, 30, 40), Rectangle(1, 2, 3, 4), Rectangle(5, 6, 10, 20), None]


def test_bare_block_list_has_no_size():
    result = blocks_from_data([[{"text": "a", "box": [0, 0, 10, 10]}]])
    assert result.width is None and result.height is None
    assert result.blocks[0].lines[0].text == "a"


def test_collect_lines_sorts_and_drops():
    result = blocks_from_data({"blocks": [
        {"lines": [{"text": "second", "box": [50, 200, 10, 10]}, {"text": "   ", "box": [0, 0, 10, 10]}]},
        {"lines": [{"text": "first", "box": [50, 100, 10, 10]}, {"text": "boxless"}]},
    ]})
    assert [ln.text for ln in collect_lines(result.blocks)] == ["first", "second"]


def test_malformed_entries_are_skipped():
    result = blocks_from_data({"blocks": [{"lines": ["oops", {"text": "bad", "box": {"left": "x", "top": 0, "width": 1, "height": 1}}]}]})
    assert len(result.blocks[0].lines) == 1
    assert result.blocks[0].lines[0].bounding_box is None


def test_load_from_file(tmp_path):
    path = tmp_path / "ocr.json"
    path.write_text(json.dumps({"width": 1080, "blocks": [{"lines": [{"text": "안녕", "box": [1, 2, 3, 4]}]}]}, ensure_ascii=False), encoding="utf-8")
    result = load_recognizer_result(path)
    assert result.width == 1080
    assert result.blocks[0].lines[0].text == "안녕"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_recognizer_result(tmp_path / "missing.json")


def test_null_text_is_dropped_not_stringified():
    result = blocks_from_data({"blocks": [{"lines": [
        {"text": None, "box": [60, 700, 300, 40]},
        {"text": "hello there", "box": [60, 800, 300, 40]},
    ]}]})
    assert result.blocks[0].lines[0].text == ""
    assert [ln.text for ln in collect_lines(result.blocks)] == ["hello there"]
