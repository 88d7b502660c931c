import pytest

from translate_desk.errors import InvalidFilterKind, SnapshotUnavailable
from translate_desk.i18n.differ import Snapshot
from translate_desk.i18n.filters import filter_keys
from translate_desk.i18n.keypath import KeyPath
from translate_desk.i18n.store import NestedStore

from .conftest import I18N_TRANSLATIONS

ALL_KEYS = {KeyPath.parse(k) for k in
            ["articles.new.page_title", "home.page_title", "vendor.foobar"]}


@pytest.fixture
def stores():
    return NestedStore(I18N_TRANSLATIONS["sv"]), NestedStore(I18N_TRANSLATIONS["en"])


def _names(keys):
    return sorted(str(k) for k in keys)


class TestKeyPattern:

    def test_no_pattern_passes_all(self, stores):
        assert filter_keys(ALL_KEYS, *stores) == ALL_KEYS

    def test_starts_with(self, stores):
        result = filter_keys(ALL_KEYS, *stores, key_pattern="articles", key_type="starts_with")
        assert _names(result) == ["articles.new.page_title"]

    def test_contains(self, stores):
        result = filter_keys(ALL_KEYS, *stores, key_pattern="page_", key_type="contains")
        assert _names(result) == ["articles.new.page_title", "home.page_title"]

    def test_default_key_type_is_contains(self, stores):
        result = filter_keys(ALL_KEYS, *stores, key_pattern="foo")
        assert _names(result) == ["vendor.foobar"]

    def test_unknown_key_type(self, stores):
        with pytest.raises(InvalidFilterKind):
            filter_keys(ALL_KEYS, *stores, key_pattern="a", key_type="regex")


class TestStatus:

    def test_untranslated(self, stores):
        result = filter_keys(ALL_KEYS, *stores, status="untranslated")
        assert _names(result) == ["articles.new.page_title", "home.page_title"]

    def test_translated(self, stores):
        assert _names(filter_keys(ALL_KEYS, *stores, status="translated")) == ["vendor.foobar"]

    def test_blank_target_counts_as_untranslated(self):
        sv = NestedStore({"a": "A", "b": "B"})
        en = NestedStore({"a": "  ", "b": "bee"})
        keys = set(sv.keys())
        assert _names(filter_keys(keys, sv, en, status="untranslated")) == ["a"]
        assert _names(filter_keys(keys, sv, en, status="translated")) == ["b"]

    def test_untranslated_requires_source_text(self):
        key = KeyPath.parse("general.back")
        assert filter_keys({key}, NestedStore(), NestedStore(), status="untranslated") == set()

    def test_all_is_noop(self, stores):
        assert filter_keys(ALL_KEYS, *stores, status="all") == ALL_KEYS

    def test_unknown_status(self, stores):
        with pytest.raises(InvalidFilterKind) as exc:
            filter_keys(ALL_KEYS, *stores, status="fuzzy")
        assert exc.value.details["param"] == "filter"

    @pytest.mark.parametrize("kwargs", [
        {"status": "untranslated"},
        {"status": "translated"},
        {"key_pattern": "page", "key_type": "contains", "status": "untranslated"},
        {"text_pattern": "ny"},
    ])
    def test_idempotent(self, stores, kwargs):
        once = filter_keys(ALL_KEYS, *stores, **kwargs)
        assert filter_keys(once, *stores, **kwargs) == once


class TestChanged:

    @pytest.fixture
    def snapshot(self):
        return Snapshot("sv", "en", NestedStore({"home": {"page_title": "Skapar ny artikel"}}))

    def test_changed(self, stores, snapshot):
        result = filter_keys(ALL_KEYS, *stores, status="changed", snapshot=snapshot)
        assert _names(result) == ["home.page_title"]

    def test_changed_intersects_with_key_pattern(self, stores, snapshot):
        result = filter_keys(ALL_KEYS, *stores, key_pattern="articles",
                             key_type="starts_with", status="changed", snapshot=snapshot)
        assert result == set()
        result = filter_keys(ALL_KEYS, *stores, key_pattern="home",
                             key_type="starts_with", status="changed", snapshot=snapshot)
        assert _names(result) == ["home.page_title"]

    def test_changed_limited_to_key_universe(self, stores, snapshot):
        keys = {KeyPath.parse("vendor.foobar")}
        assert filter_keys(keys, *stores, status="changed", snapshot=snapshot) == set()

    def test_changed_without_snapshot(self, stores):
        with pytest.raises(SnapshotUnavailable):
            filter_keys(ALL_KEYS, *stores, status="changed")


class TestTextPattern:

    def test_contains_case_insensitive(self, stores):
        result = filter_keys(ALL_KEYS, *stores, text_pattern="SKAPA")
        assert _names(result) == ["articles.new.page_title"]

    def test_equals(self, stores):
        result = filter_keys(ALL_KEYS, *stores, text_pattern="Fobar", text_type="equals")
        assert _names(result) == ["vendor.foobar"]
        assert filter_keys(ALL_KEYS, *stores, text_pattern="fobar", text_type="equals") == set()

    def test_unknown_text_type(self, stores):
        with pytest.raises(InvalidFilterKind):
            filter_keys(ALL_KEYS, *stores, text_pattern="x", text_type="like")
