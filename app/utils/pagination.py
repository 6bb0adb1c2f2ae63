import math


def clamp_limit(limit: int) -> int:
    return max(1, limit)


def page_window(page: int, limit: int) -> tuple[int, int]:
    """Translate a 1-based page into (skip, take); pages below 1 skip nothing."""
    limit = clamp_limit(limit)
    skip = max(0, (page - 1) * limit)
    return skip, limit


def total_pages(count: int, limit: int) -> int:
    return math.ceil(count / limit)
