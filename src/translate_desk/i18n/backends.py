"""
Backends - хранилища переводов по локалям.

Контракт бэкенда:
    load(locale) -> NestedStore          копия, чтение её не меняет бэкенд
    store(locale, store)                 заменить дерево локали в памяти
    persist(locale)                      записать дерево локали на диск
    available_locales() -> set
    default_locale() -> str
    reload()                             перечитать с диска

YAML-формат (как locale-файлы Rails):
    config/locales/
        en.yml   - {"en": {"articles": {"new": {"title": "..."}}}}
        sv.yml   - {"sv": {...}}
    Один файл может содержать несколько локалей; при загрузке они сливаются.
    Файл <locale>.yml вливается в свою локаль последним: persist() пишет
    туда всё дерево локали, и остальные файлы не должны перекрывать правки.
"""

import logging
import shutil
from pathlib import Path
from typing import Dict, Mapping, Optional, Set

import yaml

from .store import NestedStore

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yml", ".yaml")


def is_safe_locale(locale) -> bool:
    """Идентификатор локали можно использовать в имени файла."""
    locale = str(locale)
    return bool(locale) and "/" not in locale and "\\" not in locale \
        and ".." not in locale and locale != "."


class LocaleBackend:
    """Базовый класс бэкенда локалей."""

    def __init__(self, default_locale: str = "en"):
        self._default_locale = default_locale

    def load(self, locale: str) -> NestedStore:
        raise NotImplementedError

    def store(self, locale: str, store: NestedStore) -> None:
        raise NotImplementedError

    def persist(self, locale: str) -> None:
        raise NotImplementedError

    def available_locales(self) -> Set[str]:
        raise NotImplementedError

    def default_locale(self) -> str:
        return self._default_locale

    def reload(self) -> None:
        """По умолчанию перечитывать нечего."""


class MemoryLocaleBackend(LocaleBackend):
    """
    Бэкенд в памяти. persist() только запоминает, какие локали
    «записаны», - удобно для встраивания и тестов.
    """

    def __init__(self, translations: Optional[Mapping[str, Mapping]] = None,
                 default_locale: str = "en"):
        super().__init__(default_locale)
        self._translations: Dict[str, NestedStore] = {
            str(locale): NestedStore(tree)
            for locale, tree in (translations or {}).items()
        }
        self.persisted: Dict[str, NestedStore] = {}

    def load(self, locale: str) -> NestedStore:
        return self._translations.get(locale, NestedStore()).copy()

    def store(self, locale: str, store: NestedStore) -> None:
        self._translations[locale] = store.copy()

    def persist(self, locale: str) -> None:
        self.persisted[locale] = self.load(locale)

    def available_locales(self) -> Set[str]:
        return set(self._translations)


class YamlLocaleBackend(LocaleBackend):
    """
    Бэкенд на YAML-файлах в одной директории.

    Загрузка ленивая: файлы читаются при первом обращении и после reload().
    """

    def __init__(self, locales_dir: Path, default_locale: str = "en"):
        super().__init__(default_locale)
        self.locales_dir = Path(locales_dir)
        self._translations: Optional[Dict[str, NestedStore]] = None

    # ── Чтение ──

    def _files(self):
        if not self.locales_dir.is_dir():
            return []
        return sorted(p for p in self.locales_dir.iterdir()
                      if p.is_file() and p.suffix in YAML_SUFFIXES
                      and not p.name.endswith(".backup.yml"))

    def _load_all(self) -> Dict[str, NestedStore]:
        translations: Dict[str, NestedStore] = {}
        primary: Dict[str, dict] = {}
        for path in self._files():
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                logger.warning("Пропущен %s: ожидался словарь локалей", path)
                continue
            for locale, tree in data.items():
                if not isinstance(tree, dict):
                    continue
                locale = str(locale)
                if path.name == f"{locale}.yml":
                    primary[locale] = tree
                    continue
                translations.setdefault(locale, NestedStore()).merge(tree)
            logger.debug("Загружен файл локалей %s", path)

        for locale, tree in primary.items():
            translations.setdefault(locale, NestedStore()).merge(tree)
        return translations

    def _ensure_loaded(self) -> Dict[str, NestedStore]:
        if self._translations is None:
            self._translations = self._load_all()
            logger.info("Загружено локалей: %d из %s",
                        len(self._translations), self.locales_dir)
        return self._translations

    def reload(self) -> None:
        self._translations = None

    def load(self, locale: str) -> NestedStore:
        return self._ensure_loaded().get(locale, NestedStore()).copy()

    def available_locales(self) -> Set[str]:
        return set(self._ensure_loaded())

    # ── Запись ──

    def store(self, locale: str, store: NestedStore) -> None:
        if not is_safe_locale(locale):
            raise ValueError(f"Недопустимый идентификатор локали: {locale!r}")
        self._ensure_loaded()[locale] = store.copy()

    def file_path(self, locale: str) -> Path:
        if not is_safe_locale(locale):
            raise ValueError(f"Недопустимый идентификатор локали: {locale!r}")
        return self.locales_dir / f"{locale}.yml"

    def persist(self, locale: str) -> None:
        """
        Записывает всё дерево локали в <locale>.yml.

        Предыдущая версия файла сохраняется в <locale>.backup.yml.
        """
        tree = self.load(locale).to_dict()
        path = self.file_path(locale)
        self.locales_dir.mkdir(parents=True, exist_ok=True)

        if path.exists():
            shutil.copy2(path, self.locales_dir / f"{locale}.backup.yml")

        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump({locale: tree}, f, allow_unicode=True,
                           default_flow_style=False, sort_keys=True)
        logger.info("Локаль '%s' записана в %s", locale, path)
