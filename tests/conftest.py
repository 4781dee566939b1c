"""
Pytest configuration and shared fixtures for chat-ocr-reconstructor tests.
"""
import os
import sys

import pytest

"""
将项目根目录加入 Python 导入路径，确保在以 tests 目录为起点执行时，
可以正常导入位于项目根目录下的内部模块（如 services/*）。
"""
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from models.data_models import RecognizedLine, Rectangle, TextBlock  # noqa: E402


@pytest.fixture
def make_blocks():
    """Build recognizer blocks from (text, left, top, width, height) tuples, one block per line."""
    def _build(*rows):
        blocks = []
        for text, left, top, width, height in rows:
            blocks.append(TextBlock(lines=[RecognizedLine(text, Rectangle(left, top, width, height))]))
        return blocks
    return _build


@pytest.fixture
def chat_blocks(make_blocks):
    """Four alternating bubbles on a 1000x2000 canvas: OTHER, ME, OTHER, ME."""
    return make_blocks(
        ("hello there", 60, 700, 300, 40),
        ("good morning", 640, 800, 300, 40),
        ("how are you", 60, 900, 250, 40),
        ("fine thanks", 700, 1000, 240, 40),
    )
