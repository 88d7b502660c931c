"""
Service - сквозные сценарии для хоста (веб, CLI).

Чтение:  сканер + бэкенд -> merge_keys -> prune_keys -> filter_keys
         -> sort_keys -> paginate.
Запись:  TranslationWriter.apply_edits, затем (если включено) журнал.

Бэкенд, журнал и сканер передаются явно, глобального состояния нет.
Каждый вызов browse() заново читает хранилища и снимок.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Set

import yaml

from ..errors import SnapshotUnavailable
from .filters import StatusFilter, filter_keys, parse_status
from .indexer import FileRefSet, merge_keys, normalize_file_refs, prune_keys
from .keypath import KeyPath
from .log import TranslationLog
from .paginator import PageRequest, PageResult, paginate, sort_keys
from .store import NestedStore
from .writer import TranslationWriter, WriteResult

logger = logging.getLogger(__name__)


@dataclass
class BrowseRequest:
    """Параметры просмотра (query-параметры страницы / флаги CLI)."""
    from_locale: Optional[str] = None
    to_locale: Optional[str] = None
    page: int = 1
    per_page: Optional[int] = None
    key_pattern: Optional[str] = None
    key_type: Optional[str] = None
    filter: Optional[str] = None
    text_pattern: Optional[str] = None
    text_type: Optional[str] = None
    sort_by: Optional[str] = None


@dataclass
class BrowseResult:
    """Результат просмотра."""
    from_locale: str
    to_locale: str
    files: FileRefSet
    keys: Set[KeyPath]
    page: PageResult
    from_store: NestedStore = field(repr=False, default_factory=NestedStore)
    to_store: NestedStore = field(repr=False, default_factory=NestedStore)

    @property
    def paginated_keys(self) -> List[KeyPath]:
        return list(self.page.entries)

    @property
    def total_entries(self) -> int:
        return self.page.total_count

    def rows(self) -> List[Dict]:
        """Строки страницы для отображения."""
        return [
            {
                "key": str(key),
                "from_text": self.from_store.get(key),
                "to_text": self.to_store.get(key),
                "files": self.files.get(key, []),
            }
            for key in self.page.entries
        ]

    def to_dict(self) -> Dict:
        return {
            "from_locale": self.from_locale,
            "to_locale": self.to_locale,
            "files": {str(k): v for k, v in sorted(self.files.items())},
            "keys": sorted(str(k) for k in self.keys),
            "paginated_keys": [str(k) for k in self.page.entries],
            "total_entries": self.total_entries,
            "page": self.page.page_number,
            "per_page": self.page.page_size,
            "total_pages": self.page.total_pages,
            "rows": self.rows(),
        }


@dataclass
class TranslateAck:
    """Подтверждение записи: локали возвращаются как пришли, без проверки."""
    from_locale: str
    to_locale: str
    result: WriteResult
    logged: bool = False
    log_error: Optional[str] = None


class TranslationService:
    """
    Связывает бэкенд локалей, журнал и сканер.

    file_refs_provider - вызываемый объект без аргументов, возвращающий
    FileRefSet (обычно SourceScanner(...).scan).
    """

    def __init__(self, backend,
                 log: Optional[TranslationLog] = None,
                 file_refs_provider: Optional[Callable[[], Mapping]] = None,
                 per_page: int = 50,
                 default_to_locale: str = "en",
                 track_changes: bool = False):
        self.backend = backend
        self.log = log
        self.file_refs_provider = file_refs_provider or dict
        self.per_page = per_page
        self.default_to_locale = default_to_locale
        self.track_changes = track_changes
        self.writer = TranslationWriter(backend)

    def resolve_locales(self, from_locale: Optional[str],
                        to_locale: Optional[str]):
        return (from_locale or self.backend.default_locale(),
                to_locale or self.default_to_locale)

    def browse(self, request: BrowseRequest) -> BrowseResult:
        """
        Список ключей с фильтрами и пагинацией.

        Raises:
            InvalidFilterKind, InvalidPageRequest: некорректные параметры.
            SnapshotUnavailable: filter=changed, а журнал не читается.
        """
        from_locale, to_locale = self.resolve_locales(request.from_locale,
                                                      request.to_locale)
        per_page = self.per_page if request.per_page is None else request.per_page
        page_request = PageRequest(request.page, per_page)
        status = parse_status(request.filter)

        files = normalize_file_refs(self.file_refs_provider())
        from_store = self.backend.load(from_locale)
        to_store = self.backend.load(to_locale)

        keys = merge_keys(files, from_store, to_store)
        keys = prune_keys(keys, from_store, from_locale, to_locale)

        snapshot = None
        if status is StatusFilter.CHANGED:
            if self.log is None:
                raise SnapshotUnavailable("-", "журнал не настроен")
            snapshot = self.log.read(from_locale, to_locale)

        keys = filter_keys(
            keys, from_store, to_store,
            key_pattern=request.key_pattern,
            key_type=request.key_type,
            status=status,
            snapshot=snapshot,
            text_pattern=request.text_pattern,
            text_type=request.text_type,
        )
        ordered = sort_keys(keys, request.sort_by or "key", from_store)
        page = paginate(ordered, page_request)

        logger.debug("%s -> %s: отобрано %d ключей, страница %d",
                     from_locale, to_locale, len(keys), page_request.page_number)
        return BrowseResult(
            from_locale=from_locale,
            to_locale=to_locale,
            files=files,
            keys=keys,
            page=page,
            from_store=from_store,
            to_store=to_store,
        )

    def translate(self, from_locale: str, to_locale: str,
                  edits: Mapping[str, object],
                  track_changes: Optional[bool] = None) -> TranslateAck:
        """
        Сохраняет правки в to_locale.

        Локали не проверяются и возвращаются в подтверждении как пришли.
        Журнал пишется только после успешной записи и только если включён
        track_changes. Ошибка журнала не отменяет уже сохранённые правки:
        она логируется, а в подтверждении logged=False.
        """
        result = self.writer.apply_edits(to_locale, edits)

        logged = False
        log_error = None
        track = self.track_changes if track_changes is None else track_changes
        if track and self.log is not None:
            try:
                self.log.write(from_locale, to_locale, result.keys,
                               self.backend.load(from_locale))
                logged = True
            except (SnapshotUnavailable, OSError, yaml.YAMLError) as exc:
                logger.warning("Правки %s -> %s сохранены, но журнал не записан: %s",
                               from_locale, to_locale, exc)
                log_error = str(exc)

        return TranslateAck(from_locale=from_locale, to_locale=to_locale,
                            result=result, logged=logged,
                            log_error=log_error)


def build_service(settings) -> TranslationService:
    """Собирает сервис по настройкам (config.Settings): YAML-бэкенд, журнал, сканер."""
    from .backends import YamlLocaleBackend
    from .scanner import SourceScanner

    backend = YamlLocaleBackend(settings.locales_dir, settings.default_locale)
    scanner = SourceScanner(settings.project_root, settings.scan_dirs,
                            settings.scan_extensions)
    return TranslationService(
        backend=backend,
        log=TranslationLog(settings.log_dir),
        file_refs_provider=scanner.scan,
        per_page=settings.per_page,
        default_to_locale=settings.default_to_locale,
        track_changes=settings.track_changes,
    )
