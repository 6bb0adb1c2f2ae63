import pytest

from app.utils.pagination import clamp_limit, page_window, total_pages


class TestPageWindow:
    @pytest.mark.parametrize(
        "page, limit, expected",
        [
            (1, 10, (0, 10)),
            (2, 10, (10, 10)),
            (3, 4, (8, 4)),
            (0, 10, (0, 10)),
            (-3, 10, (0, 10)),
        ],
    )
    def test_skip_take(self, page, limit, expected):
        assert page_window(page, limit) == expected

    def test_limit_floor_without_ceiling(self):
        assert clamp_limit(0) == 1
        assert clamp_limit(-5) == 1
        assert clamp_limit(500) == 500
        assert page_window(2, 500) == (500, 500)


class TestTotalPages:
    @pytest.mark.parametrize(
        "count, limit, expected",
        [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (7, 3, 3)],
    )
    def test_ceil(self, count, limit, expected):
        assert total_pages(count, limit) == expected
