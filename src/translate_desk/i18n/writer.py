"""
Writer - запись отредактированных переводов в бэкенд локалей.

Пакет правок {текст ключа: значение} применяется целиком или не применяется
вовсе: все ключи разбираются до первого изменения. Затем дерево целевой
локали обновляется по листьям и передаётся в backend.store(), после чего
backend.persist() пишет его на диск.

Журнал изменений (log) здесь не трогается - это делает вызывающий код.
"""

import logging
from dataclasses import dataclass, field
from typing import Mapping, Tuple

from ..errors import BackendWriteFailure
from .keypath import KeyPath
from .store import NestedStore

logger = logging.getLogger(__name__)


@dataclass
class WriteResult:
    """Результат записи пакета правок."""
    to_locale: str
    keys: Tuple[KeyPath, ...] = field(default_factory=tuple)
    stored: bool = False
    persisted: bool = False

    @property
    def ok(self) -> bool:
        return self.stored and self.persisted


class TranslationWriter:
    """Применяет правки к локали и сохраняет её."""

    def __init__(self, backend):
        self.backend = backend

    def apply_edits(self, to_locale: str, edits: Mapping[str, object]) -> WriteResult:
        """
        Применяет правки к локали to_locale.

        Raises:
            InvalidKeyPath: ключ не разбирается или конфликтует с другим
                ключом пакета; ничего не применено.
            BackendWriteFailure: ошибка на шаге store (stored=False)
                или persist (stored=True).
        """
        delta = NestedStore.from_flat(edits)
        keys = tuple(sorted(delta.keys()))

        merged = self.backend.load(to_locale).merge(delta)

        try:
            self.backend.store(to_locale, merged)
        except Exception as exc:
            logger.error("Локаль '%s': ошибка store: %s", to_locale, exc)
            raise BackendWriteFailure(to_locale, "store", False, str(exc)) from exc

        try:
            self.backend.persist(to_locale)
        except Exception as exc:
            logger.error("Локаль '%s': store выполнен, ошибка persist: %s",
                         to_locale, exc)
            raise BackendWriteFailure(to_locale, "persist", True, str(exc)) from exc

        logger.info("Локаль '%s': сохранено переводов %d", to_locale, len(keys))
        return WriteResult(to_locale=to_locale, keys=keys, stored=True, persisted=True)
