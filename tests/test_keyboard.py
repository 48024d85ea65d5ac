"""Tests for button batching."""

import pytest
from qqcodec.core.keyboard import batch_buttons, build_keyboard


class TestBatchButtons:
    def test_exact_multiple(self):
        assert batch_buttons([1, 2, 3, 4, 5, 6, 7, 8]) == [[1, 2, 3, 4], [5, 6, 7, 8]]

    def test_short_last_row(self):
        assert batch_buttons([1, 2, 3, 4, 5]) == [[1, 2, 3, 4], [5]]

    def test_empty(self):
        assert batch_buttons([]) == []

    def test_custom_width(self):
        assert batch_buttons([1, 2, 3], width=1) == [[1], [2], [3]]

    def test_invalid_width(self):
        with pytest.raises(ValueError):
            batch_buttons([1], width=0)


class TestBuildKeyboard:
    def test_envelope(self):
        keyboard = build_keyboard([{"id": "a"}, {"id": "b"}])
        assert keyboard == {"content": {"rows": [{"buttons": [{"id": "a"}, {"id": "b"}]}]}}
