import pytest

from core.responses import ok, paginated
from db.database import _async_database_url


class TestDatabaseUrl:
    @pytest.mark.parametrize(
        "url, expected",
        [
            ("postgres://u:p@db/wh", "postgresql+asyncpg://u:p@db/wh"),
            ("postgresql://u:p@db/wh", "postgresql+asyncpg://u:p@db/wh"),
            ("postgresql+asyncpg://u:p@db/wh", "postgresql+asyncpg://u:p@db/wh"),
            ("sqlite+aiosqlite://", "sqlite+aiosqlite://"),
        ],
    )
    def test_rewrites_to_async_driver(self, url, expected):
        assert _async_database_url(url) == expected


class TestEnvelopes:
    def test_ok(self):
        assert ok({"a": 1}) == {"code": 200, "data": {"a": 1}, "message": "Success"}

    def test_paginated_rounds_pages_up(self):
        assert paginated([], 41, 1, 20)["pagination"] == {"total": 41, "page": 1, "limit": 20, "totalPages": 3}

    def test_paginated_empty(self):
        assert paginated([], 0, 1, 20)["pagination"]["totalPages"] == 0
