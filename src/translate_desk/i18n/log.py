"""
Log - журнал исходных текстов, от которых были сделаны переводы.

Один YAML-файл на пару локалей: <log_dir>/from_<from>_to_<to>.yml.
Содержимое - вложенное дерево исходных текстов (from_locale) для ключей,
переведённых в to_locale. Сравнение текущих исходных текстов с журналом
показывает переводы, которые устарели.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

import yaml

from ..errors import SnapshotUnavailable
from .backends import is_safe_locale
from .differ import Snapshot
from .keypath import KeyPath
from .store import NestedStore

logger = logging.getLogger(__name__)


class TranslationLog:
    """Чтение и запись журнала для пар локалей."""

    def __init__(self, log_dir: Path):
        self.log_dir = Path(log_dir)

    def file_path(self, from_locale: str, to_locale: str) -> Path:
        for locale in (from_locale, to_locale):
            if not is_safe_locale(locale):
                raise SnapshotUnavailable(self.log_dir, f"недопустимая локаль {locale!r}")
        return self.log_dir / f"from_{from_locale}_to_{to_locale}.yml"

    def read(self, from_locale: str, to_locale: str,
             restrict_to: Optional[Iterable] = None) -> Snapshot:
        """
        Читает снимок журнала.

        Отсутствующий файл - пустой снимок (ничего ещё не записано).

        Raises:
            SnapshotUnavailable: файл есть, но не читается или повреждён.
        """
        path = self.file_path(from_locale, to_locale)
        restrict = frozenset(restrict_to) if restrict_to is not None else None
        if not path.exists():
            logger.debug("Журнал %s отсутствует, снимок пуст", path)
            return Snapshot(from_locale, to_locale, NestedStore(), restrict)

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise SnapshotUnavailable(path, str(exc)) from exc

        if not isinstance(data, dict):
            raise SnapshotUnavailable(path, "ожидался словарь")
        return Snapshot(from_locale, to_locale, NestedStore(data), restrict)

    def write(self, from_locale: str, to_locale: str, keys: Iterable,
              from_store: NestedStore) -> Path:
        """
        Дописывает в журнал текущие исходные тексты для keys.

        Ключи без исходного текста пропускаются. Существующие записи
        других ключей сохраняются.
        """
        texts = {}
        for key in keys:
            path = KeyPath.coerce(key)
            if from_store.has_leaf(path):
                texts[path] = from_store.get(path)

        current = self.read(from_locale, to_locale).store
        current.merge(NestedStore.from_flat(texts))

        path = self.file_path(from_locale, to_locale)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(current.to_dict(), f, allow_unicode=True,
                           default_flow_style=False, sort_keys=True)
        logger.info("Журнал %s: записано ключей %d", path, len(texts))
        return path
