"""
Differ - поиск ключей, значение которых изменилось относительно снимка.

Снимок (Snapshot) - ранее записанное состояние переводов для пары локалей.
Журнал хранит исходные тексты (from_locale), от которых был сделан перевод;
если исходный текст с тех пор поменялся - перевод устарел.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Set

from .keypath import KeyPath
from .store import NestedStore


@dataclass(frozen=True)
class Snapshot:
    """Неизменяемый снимок журнала для пары локалей."""
    from_locale: str
    to_locale: str
    store: NestedStore = field(default_factory=NestedStore, compare=False)
    restrict_to: Optional[FrozenSet[KeyPath]] = None

    def __post_init__(self):
        store = self.store.copy()
        if self.restrict_to is not None:
            restrict = frozenset(KeyPath.coerce(k) for k in self.restrict_to)
            object.__setattr__(self, "restrict_to", restrict)
            store = store.restrict(restrict)
        object.__setattr__(self, "store", store)

    def flatten(self):
        return self.store.flatten()


def changed_keys(current: NestedStore, snapshot: Snapshot,
                 include_new: bool = True) -> Set[KeyPath]:
    """
    Ключи current, значение которых отличается от значения в снимке.

    Args:
        current: текущее состояние локали
        snapshot: снимок для сравнения
        include_new: считать изменёнными ключи, которых нет в снимке

    Удалённые из current ключи не возвращаются. Сравнение строгое,
    без нормализации.
    """
    recorded = snapshot.flatten()
    result = set()
    for key, value in current.items():
        if key not in recorded:
            if include_new:
                result.add(key)
        elif recorded[key] != value:
            result.add(key)
    return result
