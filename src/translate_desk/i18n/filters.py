"""
Filters - сужение множества ключей по шаблону ключа, статусу перевода
и тексту исходной локали.

Порядок применения: шаблон ключа -> шаблон текста -> статус. Каждый шаг
сужает результат предыдущего (пересечение), в том числе статус "changed".
"""

from enum import Enum
from typing import Iterable, Optional, Set

from ..errors import InvalidFilterKind, SnapshotUnavailable
from .differ import Snapshot, changed_keys
from .keypath import KeyPath
from .store import NestedStore, is_blank


class KeyType(Enum):
    """Режим шаблона ключа."""
    STARTS_WITH = "starts_with"
    CONTAINS = "contains"


class StatusFilter(Enum):
    """Статус перевода."""
    ALL = "all"
    TRANSLATED = "translated"
    UNTRANSLATED = "untranslated"
    CHANGED = "changed"


class TextType(Enum):
    """Режим поиска по тексту исходной локали."""
    CONTAINS = "contains"
    EQUALS = "equals"


def _parse_kind(enum_cls, param: str, value, default=None):
    if value is None or value == "":
        return default
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidFilterKind(param, value, [m.value for m in enum_cls])


def parse_key_type(value) -> KeyType:
    return _parse_kind(KeyType, "key_type", value, KeyType.CONTAINS)


def parse_status(value) -> StatusFilter:
    return _parse_kind(StatusFilter, "filter", value, StatusFilter.ALL)


def parse_text_type(value) -> TextType:
    return _parse_kind(TextType, "text_type", value, TextType.CONTAINS)


def match_key(key: KeyPath, pattern: str, key_type: KeyType) -> bool:
    text = key.render()
    if key_type is KeyType.STARTS_WITH:
        return text.startswith(pattern)
    return pattern in text


def match_text(text, pattern: str, text_type: TextType) -> bool:
    if is_blank(text):
        return False
    text = str(text)
    if text_type is TextType.EQUALS:
        return text == pattern
    return pattern.lower() in text.lower()


def filter_keys(keys: Iterable[KeyPath],
                from_store: NestedStore,
                to_store: NestedStore,
                key_pattern: Optional[str] = None,
                key_type=None,
                status=None,
                snapshot: Optional[Snapshot] = None,
                text_pattern: Optional[str] = None,
                text_type=None) -> Set[KeyPath]:
    """
    Применяет фильтры к множеству ключей.

    Args:
        keys: исходное множество
        from_store / to_store: хранилища исходной и целевой локалей
        key_pattern, key_type: шаблон ключа ("starts_with" | "contains")
        status: "all" | "translated" | "untranslated" | "changed"
        snapshot: снимок журнала, обязателен для status="changed"
        text_pattern, text_type: поиск по исходному тексту ("contains" | "equals")

    Raises:
        InvalidFilterKind: неизвестный режим - до начала фильтрации.
        SnapshotUnavailable: status="changed" без снимка.
    """
    key_type = parse_key_type(key_type)
    status = parse_status(status)
    text_type = parse_text_type(text_type)
    if status is StatusFilter.CHANGED and snapshot is None:
        raise SnapshotUnavailable("-", "снимок не передан")

    result = set(keys)

    if key_pattern:
        result = {k for k in result if match_key(k, key_pattern, key_type)}

    if text_pattern:
        result = {k for k in result
                  if match_text(from_store.get(k), text_pattern, text_type)}

    if status is StatusFilter.UNTRANSLATED:
        result = {k for k in result
                  if not is_blank(from_store.get(k)) and is_blank(to_store.get(k))}
    elif status is StatusFilter.TRANSLATED:
        result = {k for k in result if not is_blank(to_store.get(k))}
    elif status is StatusFilter.CHANGED:
        # Журнал хранит исходные тексты; ключи без записи в журнале не сравниваются
        result &= changed_keys(from_store, snapshot, include_new=False)

    return result
