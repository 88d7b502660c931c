"""Общие фикстуры тестов."""

import pytest

from translate_desk.i18n.backends import MemoryLocaleBackend
from translate_desk.i18n.log import TranslationLog
from translate_desk.i18n.service import TranslationService

I18N_TRANSLATIONS = {
    "en": {
        "vendor": {
            "foobar": "Foo Baar",
        },
    },
    "sv": {
        "articles": {
            "new": {
                "page_title": "Skapa ny artikel",
            },
        },
        "home": {
            "page_title": "Välkommen till I18n",
        },
        "vendor": {
            "foobar": "Fobar",
        },
    },
}

FILES = {
    "home.page_title": ["app/views/home/index.rhtml"],
    "general.back": ["app/views/articles/new.rhtml", "app/views/categories/new.rhtml"],
    "articles.new.page_title": ["app/views/articles/new.rhtml"],
}


@pytest.fixture
def backend():
    return MemoryLocaleBackend(I18N_TRANSLATIONS, default_locale="sv")


@pytest.fixture
def log(tmp_path):
    return TranslationLog(tmp_path / "log")


@pytest.fixture
def service(backend, log):
    return TranslationService(
        backend=backend,
        log=log,
        file_refs_provider=lambda: FILES,
        per_page=1,
        default_to_locale="en",
    )


@pytest.fixture
def write_log(log):
    """Записывает содержимое журнала для пары локалей напрямую в файл."""
    import yaml

    def _write(from_locale, to_locale, data):
        path = log.file_path(from_locale, to_locale)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, allow_unicode=True)
        return path

    return _write
