"""
Paginator - сортировка и постраничная нарезка ключей.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from ..errors import InvalidFilterKind, InvalidPageRequest
from .keypath import KeyPath
from .store import NestedStore

SORT_FIELDS = ("key", "text")


def _valid_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


@dataclass(frozen=True)
class PageRequest:
    """Номер страницы (с 1) и её размер."""
    page_number: int = 1
    page_size: int = 50

    def __post_init__(self):
        if not (_valid_int(self.page_number) and _valid_int(self.page_size)):
            raise InvalidPageRequest(self.page_number, self.page_size)

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size


@dataclass(frozen=True)
class PageResult:
    """Ключи одной страницы и общее число ключей после фильтрации."""
    entries: Tuple[KeyPath, ...]
    total_count: int
    page_number: int = 1
    page_size: int = 50

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total_count / self.page_size))

    @property
    def has_previous(self) -> bool:
        return self.page_number > 1

    @property
    def has_next(self) -> bool:
        return self.page_number < self.total_pages


def sort_keys(keys: Iterable[KeyPath], sort_by: str = "key",
              from_store: Optional[NestedStore] = None) -> List[KeyPath]:
    """
    Сортирует ключи.

    "key"  - по текстовой форме ключа (code points, без учёта локали);
    "text" - по исходному тексту без учёта регистра, при равенстве - по ключу.
    """
    sort_by = sort_by or "key"
    if sort_by not in SORT_FIELDS:
        raise InvalidFilterKind("sort_by", sort_by, SORT_FIELDS)
    if sort_by == "text":
        store = from_store or NestedStore()

        def text_key(key: KeyPath):
            value = store.get(key)
            return ("" if value is None else str(value).lower(), key.render())

        return sorted(keys, key=text_key)
    return sorted(keys, key=KeyPath.render)


def paginate(keys: Sequence[KeyPath], request: PageRequest) -> PageResult:
    """Срез [(n-1)*size, n*size) упорядоченной последовательности."""
    keys = list(keys)
    start = request.offset
    return PageResult(
        entries=tuple(keys[start:start + request.page_size]),
        total_count=len(keys),
        page_number=request.page_number,
        page_size=request.page_size,
    )
