import pytest

from translate_desk.errors import InvalidFilterKind, InvalidPageRequest
from translate_desk.i18n.keypath import KeyPath
from translate_desk.i18n.paginator import PageRequest, paginate, sort_keys
from translate_desk.i18n.store import NestedStore

KEYS = sorted(KeyPath.parse(k) for k in
              ["articles.new.page_title", "home.page_title", "vendor.foobar",
               "general.back", "category"])


class TestPageRequest:

    @pytest.mark.parametrize("page,size", [(0, 10), (1, 0), (-1, 5), (1.5, 10), (True, 10)])
    def test_invalid(self, page, size):
        with pytest.raises(InvalidPageRequest):
            PageRequest(page, size)


class TestPaginate:

    def test_first_page(self):
        result = paginate(KEYS, PageRequest(1, 2))
        assert [str(k) for k in result.entries] == ["articles.new.page_title", "category"]
        assert result.total_count == 5
        assert result.total_pages == 3

    def test_last_page_clipped(self):
        result = paginate(KEYS, PageRequest(3, 2))
        assert [str(k) for k in result.entries] == ["vendor.foobar"]
        assert not result.has_next
        assert result.has_previous

    def test_out_of_range(self):
        result = paginate(KEYS, PageRequest(10, 2))
        assert result.entries == ()
        assert result.total_count == 5

    def test_empty(self):
        result = paginate([], PageRequest(1, 50))
        assert result.entries == ()
        assert result.total_pages == 1

    @pytest.mark.parametrize("size", [1, 2, 3, 5, 7])
    def test_pages_concatenate_to_sequence(self, size):
        pages = []
        number = 1
        while True:
            result = paginate(KEYS, PageRequest(number, size))
            if not result.entries:
                break
            pages.extend(result.entries)
            number += 1
        assert pages == KEYS


class TestSortKeys:

    def test_by_key(self):
        keys = [KeyPath.parse(k) for k in ["vendor.foobar", "Zeta", "home.page_title"]]
        assert [str(k) for k in sort_keys(set(keys))] == ["Zeta", "home.page_title", "vendor.foobar"]

    def test_by_text(self):
        store = NestedStore({"a": "beta", "b": "Alpha", "c": "alpha"})
        keys = set(store.keys())
        assert [str(k) for k in sort_keys(keys, "text", store)] == ["b", "c", "a"]

    def test_unknown_sort(self):
        with pytest.raises(InvalidFilterKind):
            sort_keys([], "date")
