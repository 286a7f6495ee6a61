"""
Unit tests for shared helpers.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from schoolbase.modules.shared.helpers import (
    Pagination,
    blank_to_none,
    clamp_limit,
    clamp_page,
    is_unique_violation,
    normalize_phone,
)


class TestNormalizePhone:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("98765 43210", "9876543210"),
            ("(987) 654-3210", "9876543210"),
            (" +91 98765-43210 ", "+919876543210"),
        ],
    )
    def test_strips_separators(self, raw, expected):
        assert normalize_phone(raw) == expected


class TestIsUniqueViolation:
    def test_postgres_sqlstate(self):
        orig = MagicMock()
        orig.sqlstate = "23505"
        assert is_unique_violation(IntegrityError("stmt", {}, orig)) is True

    def test_postgres_foreign_key(self):
        orig = MagicMock()
        orig.sqlstate = "23503"
        assert is_unique_violation(IntegrityError("stmt", {}, orig)) is False

    def test_sqlite_unique(self):
        orig = MagicMock(spec=["sqlite_errorcode"])
        orig.sqlite_errorcode = 2067
        assert is_unique_violation(IntegrityError("stmt", {}, orig)) is True

    def test_message_text_is_ignored(self):
        orig = Exception("duplicate key value violates unique constraint")
        assert is_unique_violation(IntegrityError("stmt", {}, orig)) is False


class TestPagination:
    def test_build(self):
        pagination = Pagination.build(page=2, limit=10, total_count=25)
        assert pagination.total_pages == 3
        assert pagination.has_next_page is True
        assert pagination.has_prev_page is True

    def test_empty(self):
        pagination = Pagination.build(page=1, limit=20, total_count=0)
        assert pagination.total_pages == 0
        assert pagination.has_next_page is False

    def test_camel_case_keys(self):
        dumped = Pagination.build(page=1, limit=20, total_count=1).model_dump(by_alias=True)
        assert set(dumped) == {"page", "limit", "totalCount", "totalPages", "hasNextPage", "hasPrevPage"}


class TestClamping:
    def test_page(self):
        assert clamp_page(None) == 1
        assert clamp_page(-3) == 1
        assert clamp_page(4) == 4

    def test_limit(self):
        assert clamp_limit(None) == 20
        assert clamp_limit(0) == 20
        assert clamp_limit(500) == 100
        assert clamp_limit(None, default=10) == 10


class TestBlankToNone:
    def test_values(self):
        assert blank_to_none(None) is None
        assert blank_to_none("   ") is None
        assert blank_to_none(" x ") == "x"
