from translate_desk.i18n.differ import Snapshot, changed_keys
from translate_desk.i18n.keypath import KeyPath
from translate_desk.i18n.store import NestedStore


def _snapshot(tree, restrict_to=None):
    return Snapshot("sv", "en", NestedStore(tree), restrict_to)


class TestChangedKeys:

    def test_new_key_is_changed(self):
        current = NestedStore({"a": {"b": "x"}})
        assert changed_keys(current, _snapshot({})) == {KeyPath.parse("a.b")}

    def test_identical_value_not_changed(self):
        current = NestedStore({"a": {"b": "x"}})
        assert changed_keys(current, _snapshot({"a": {"b": "x"}})) == set()

    def test_different_value_changed(self):
        current = NestedStore({"a": {"b": "x"}})
        assert changed_keys(current, _snapshot({"a": {"b": "y"}})) == {KeyPath.parse("a.b")}

    def test_removed_key_not_reported(self):
        current = NestedStore({})
        assert changed_keys(current, _snapshot({"gone": "x"})) == set()

    def test_exact_comparison(self):
        current = NestedStore({"a": "Hello "})
        assert changed_keys(current, _snapshot({"a": "Hello"})) == {KeyPath.parse("a")}

    def test_include_new_false_ignores_unlogged_keys(self):
        current = NestedStore({"home": {"page_title": "Välkommen"}, "other": "x"})
        snapshot = _snapshot({"home": {"page_title": "Skapar ny artikel"}})
        assert changed_keys(current, snapshot, include_new=False) == {
            KeyPath.parse("home.page_title")}


class TestSnapshot:

    def test_restrict_to(self):
        snapshot = _snapshot({"a": "1", "b": "2"}, restrict_to={"a"})
        assert snapshot.store.to_dict() == {"a": "1"}
        assert snapshot.restrict_to == frozenset({KeyPath.parse("a")})

    def test_snapshot_does_not_share_store(self):
        store = NestedStore({"a": "1"})
        snapshot = Snapshot("sv", "en", store)
        store.set("a", "2")
        assert snapshot.store.get("a") == "1"
