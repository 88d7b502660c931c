import pytest

from translate_desk.errors import InvalidKeyPath
from translate_desk.i18n.keypath import KeyPath
from translate_desk.i18n.store import NestedStore, is_blank

from .conftest import I18N_TRANSLATIONS


class TestFlatten:

    def test_flatten(self):
        store = NestedStore(I18N_TRANSLATIONS["sv"])
        assert {str(k): v for k, v in store.flatten().items()} == {
            "articles.new.page_title": "Skapa ny artikel",
            "home.page_title": "Välkommen till I18n",
            "vendor.foobar": "Fobar",
        }

    @pytest.mark.parametrize("tree", [
        {},
        I18N_TRANSLATIONS["sv"],
        {"a": {"b": {"c": "1", "d": ["x", "y"]}, "e": 5}, "f.g": {"h": "dotted"}},
        {"empty": {}, "x": "y"},
    ])
    def test_round_trip(self, tree):
        store = NestedStore(tree)
        assert NestedStore.from_flat(store.flatten()) == store
        assert NestedStore.from_flat(store.flatten()).flatten() == store.flatten()

    def test_empty_subtrees_dropped(self):
        assert NestedStore({"a": {"b": {}}}).to_dict() == {}

    def test_keys_normalized_to_str(self):
        store = NestedStore({1: {True: "x"}})
        assert store.get("1.True") == "x"

    def test_from_flat_conflict(self):
        with pytest.raises(InvalidKeyPath):
            NestedStore.from_flat({"a": "x", "a.b": "y"})

    def test_from_flat_conflict_not_adjacent_in_sort_order(self):
        with pytest.raises(InvalidKeyPath):
            NestedStore.from_flat({"a": "x", "a-x": "z", "a.b": "y"})


class TestAccess:

    def test_get(self):
        store = NestedStore(I18N_TRANSLATIONS["sv"])
        assert store.get("home.page_title") == "Välkommen till I18n"
        assert store.get("home") is None
        assert store.get("home.page_title.deeper") is None
        assert store.get("nope", "default") == "default"

    def test_has_leaf_and_node(self):
        store = NestedStore(I18N_TRANSLATIONS["sv"])
        assert store.has_leaf("vendor.foobar")
        assert not store.has_leaf("vendor")
        assert store.has_node("vendor")
        assert "vendor.foobar" in store

    def test_set_creates_intermediate_nodes(self):
        store = NestedStore()
        store.set("articles.new.title", "New Article")
        assert store.to_dict() == {"articles": {"new": {"title": "New Article"}}}

    def test_set_replaces_leaf_with_node(self):
        store = NestedStore({"a": "leaf"})
        store.set("a.b", "x")
        assert store.to_dict() == {"a": {"b": "x"}}

    def test_merge_is_deep(self):
        store = NestedStore({"a": {"b": "1", "c": "2"}})
        store.merge({"a": {"b": "new"}, "d": "3"})
        assert store.to_dict() == {"a": {"b": "new", "c": "2"}, "d": "3"}

    def test_copy_is_independent(self):
        store = NestedStore({"a": {"b": "1"}})
        clone = store.copy()
        clone.set("a.b", "2")
        assert store.get("a.b") == "1"

    def test_restrict(self):
        store = NestedStore(I18N_TRANSLATIONS["sv"])
        restricted = store.restrict([KeyPath.parse("vendor.foobar")])
        assert restricted.to_dict() == {"vendor": {"foobar": "Fobar"}}


@pytest.mark.parametrize("value,blank", [
    (None, True), ("", True), ("   ", True), ("x", False), (0, False), ([], False),
])
def test_is_blank(value, blank):
    assert is_blank(value) is blank
