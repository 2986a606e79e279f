from __future__ import annotations

import pytest

from vidtube.core.pagination import PageQuery, SortDirection, SortQuery
from vidtube.models import Video


class TestPageQuery:
    def test_defaults(self) -> None:
        page = PageQuery.parse()
        assert (page.page, page.limit, page.offset) == (1, 10, 0)

    @pytest.mark.parametrize("raw", ["0", "-3", "abc", "", "1.5", True])
    def test_invalid_values_fall_back(self, raw: object) -> None:
        page = PageQuery.parse(raw, raw)
        assert (page.page, page.limit) == (1, 10)

    def test_offset(self) -> None:
        page = PageQuery.parse("3", " 25 ")
        assert page.offset == 50
        assert page.limit == 25


class TestSortQuery:
    def test_defaults_to_descending(self) -> None:
        sort = SortQuery.parse()
        assert sort.sort_by is None
        assert sort.direction is SortDirection.DESC

    def test_parses_direction_case_insensitively(self) -> None:
        assert SortQuery.parse("views", "ASC").direction is SortDirection.ASC
        assert SortQuery.parse("views", "sideways").direction is SortDirection.DESC

    def test_unknown_field_uses_default_column(self) -> None:
        columns = {"created_at": Video.created_at, "views": Video.views}
        clause = SortQuery.parse("password", "asc").order_by(columns, "created_at")
        assert "created_at" in str(clause)
        assert "ASC" in str(clause)
