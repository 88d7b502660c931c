import pytest

from translate_desk.errors import BackendWriteFailure, InvalidKeyPath
from translate_desk.i18n.backends import MemoryLocaleBackend
from translate_desk.i18n.writer import TranslationWriter

from .conftest import I18N_TRANSLATIONS

EDITS = {"articles.new.title": "New Article", "category": "Category"}


class FailingBackend(MemoryLocaleBackend):

    def __init__(self, fail_on, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fail_on = fail_on

    def store(self, locale, store):
        if self.fail_on == "store":
            raise OSError("memory full")
        super().store(locale, store)

    def persist(self, locale):
        if self.fail_on == "persist":
            raise OSError("disk full")
        super().persist(locale)


class TestApplyEdits:

    def test_store_and_persist(self, backend):
        result = TranslationWriter(backend).apply_edits("en", EDITS)

        assert result.ok
        assert [str(k) for k in result.keys] == ["articles.new.title", "category"]
        en = backend.load("en")
        assert en.get("articles.new.title") == "New Article"
        assert en.get("category") == "Category"
        assert en.get("vendor.foobar") == "Foo Baar"
        assert backend.persisted["en"] == en

    def test_creates_new_locale(self, backend):
        TranslationWriter(backend).apply_edits("de", {"home.page_title": "Willkommen"})
        assert "de" in backend.available_locales()
        assert backend.load("de").to_dict() == {"home": {"page_title": "Willkommen"}}

    @pytest.mark.parametrize("edits", [
        {"articles.new.title": "ok", "bad..key": "x"},
        {"": "x"},
        {"category": "x", "category.sub": "y"},
    ])
    def test_invalid_batch_is_not_applied(self, backend, edits):
        with pytest.raises(InvalidKeyPath):
            TranslationWriter(backend).apply_edits("en", edits)
        assert backend.load("en").to_dict() == I18N_TRANSLATIONS["en"]
        assert "en" not in backend.persisted

    def test_store_failure(self):
        backend = FailingBackend("store", I18N_TRANSLATIONS)
        with pytest.raises(BackendWriteFailure) as exc:
            TranslationWriter(backend).apply_edits("en", EDITS)
        assert exc.value.step == "store"
        assert exc.value.stored is False

    def test_persist_failure_reports_divergence(self):
        backend = FailingBackend("persist", I18N_TRANSLATIONS)
        with pytest.raises(BackendWriteFailure) as exc:
            TranslationWriter(backend).apply_edits("en", EDITS)
        assert exc.value.step == "persist"
        assert exc.value.stored is True
        assert backend.load("en").get("category") == "Category"
        assert backend.persisted == {}
