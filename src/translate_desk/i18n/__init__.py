"""
i18n - ядро управления переводами.

Модули:
- keypath: KeyPath, текстовая форма ключа и её разбор
- store: NestedStore, вложенное дерево переводов <-> плоский вид
- indexer: объединение ключей из кода и из исходной локали
- filters: фильтры по шаблону ключа, статусу и тексту
- differ: поиск изменившихся ключей относительно снимка журнала
- paginator: сортировка и постраничная нарезка
- writer: запись правок в бэкенд локалей
- backends: YAML- и in-memory бэкенды локалей
- log: журнал исходных текстов для статуса "changed"
- scanner: поиск ключей в исходном коде
- service: сквозные сценарии просмотра и записи
- manager: CLI
"""

from .keypath import KeyPath
from .store import NestedStore
from .indexer import merge_keys
from .filters import filter_keys
from .differ import Snapshot, changed_keys
from .paginator import PageRequest, PageResult, paginate, sort_keys
from .writer import TranslationWriter, WriteResult
from .backends import LocaleBackend, MemoryLocaleBackend, YamlLocaleBackend
from .log import TranslationLog
from .scanner import SourceScanner
from .service import BrowseRequest, BrowseResult, TranslationService, build_service

__all__ = [
    "KeyPath", "NestedStore", "merge_keys", "filter_keys", "Snapshot",
    "changed_keys", "PageRequest", "PageResult", "paginate", "sort_keys",
    "TranslationWriter", "WriteResult", "LocaleBackend", "MemoryLocaleBackend",
    "YamlLocaleBackend", "TranslationLog", "SourceScanner", "BrowseRequest",
    "BrowseResult", "TranslationService", "build_service",
]
