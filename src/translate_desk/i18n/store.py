"""
NestedStore - вложенное хранилище переводов одной локали.

Внутренние узлы - словари {сегмент: поддерево}, листья - скалярные значения
(обычно строки; из YAML могут прийти числа, bool или списки - они хранятся
как непрозрачные листья).

Инварианты:
- ключи всех уровней - строки (ключи из YAML приводятся к str при загрузке);
- пустых поддеревьев нет (отбрасываются при загрузке), поэтому
  from_flat(flatten(store)) == store для любого хранилища;
- один KeyPath указывает не более чем на один лист.
"""

import copy
from typing import Any, Dict, Iterator, Mapping, Optional, Union

from ..errors import InvalidKeyPath
from .keypath import KeyPath


def is_blank(value: Any) -> bool:
    """Пустое значение: None или строка из одних пробелов."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _normalize(tree: Mapping) -> Dict[str, Any]:
    """Копирует дерево, приводя ключи к str и отбрасывая пустые поддеревья."""
    result: Dict[str, Any] = {}
    for key, value in tree.items():
        segment = str(key)
        if not segment:
            continue
        if isinstance(value, Mapping):
            subtree = _normalize(value)
            if subtree:
                result[segment] = subtree
        else:
            result[segment] = copy.deepcopy(value)
    return result


def deep_merge(base: Dict[str, Any], other: Mapping) -> Dict[str, Any]:
    """
    Рекурсивно вливает other в base (на месте) и возвращает base.

    Лист в other заменяет поддерево в base и наоборот.
    """
    for key, value in other.items():
        current = base.get(key)
        if isinstance(value, Mapping) and isinstance(current, dict):
            deep_merge(current, value)
        elif isinstance(value, Mapping):
            base[key] = _normalize(value)
        else:
            base[key] = copy.deepcopy(value)
    return base


class NestedStore:
    """Дерево переводов с преобразованием в плоский вид и обратно."""

    def __init__(self, tree: Optional[Mapping] = None):
        self._tree: Dict[str, Any] = _normalize(tree or {})

    # ── Преобразования ──

    @classmethod
    def from_flat(cls, flat: Mapping[Union[KeyPath, str], Any]) -> "NestedStore":
        """
        Восстанавливает дерево из пар KeyPath -> значение.

        Raises:
            InvalidKeyPath: ключ не разбирается, либо один ключ является
                префиксом другого ("a" и "a.b") - такие пары не из одного дерева.
        """
        paths = {KeyPath.coerce(k): v for k, v in flat.items()}
        for path in paths:
            for depth in range(1, len(path)):
                prefix = KeyPath(path.segments[:depth])
                if prefix in paths:
                    raise InvalidKeyPath(str(path), f"конфликтует с ключом '{prefix}'")

        store = cls()
        for path in sorted(paths):
            store.set(path, paths[path])
        return store

    def flatten(self) -> Dict[KeyPath, Any]:
        """Возвращает плоское отображение KeyPath -> значение листа."""
        return dict(self.items())

    def items(self) -> Iterator:
        stack = [((), self._tree)]
        while stack:
            prefix, node = stack.pop()
            for key, value in node.items():
                segments = prefix + (key,)
                if isinstance(value, dict):
                    stack.append((segments, value))
                else:
                    yield KeyPath(segments), value

    def keys(self) -> Iterator[KeyPath]:
        for path, _ in self.items():
            yield path

    def to_dict(self) -> Dict[str, Any]:
        """Глубокая копия дерева в виде обычного словаря."""
        return copy.deepcopy(self._tree)

    def copy(self) -> "NestedStore":
        return NestedStore(self._tree)

    # ── Доступ к листьям ──

    def get(self, path: Union[KeyPath, str], default: Any = None) -> Any:
        """Значение листа или default, если пути нет или он ведёт в поддерево."""
        node: Any = self._tree
        for segment in KeyPath.coerce(path).segments:
            if not isinstance(node, dict) or segment not in node:
                return default
            node = node[segment]
        if isinstance(node, dict):
            return default
        return node

    def has_leaf(self, path: Union[KeyPath, str]) -> bool:
        marker = object()
        return self.get(path, marker) is not marker

    def has_node(self, path: Union[KeyPath, str]) -> bool:
        """True, если путь ведёт в лист или в поддерево."""
        node: Any = self._tree
        for segment in KeyPath.coerce(path).segments:
            if not isinstance(node, dict) or segment not in node:
                return False
            node = node[segment]
        return True

    def set(self, path: Union[KeyPath, str], value: Any) -> None:
        """Записывает лист, создавая промежуточные узлы. Лист на пути заменяется узлом."""
        if isinstance(value, Mapping):
            raise InvalidKeyPath(str(path), "значение листа не может быть словарём")
        segments = KeyPath.coerce(path).segments
        node = self._tree
        for segment in segments[:-1]:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = {}
                node[segment] = child
            node = child
        node[segments[-1]] = copy.deepcopy(value)

    def merge(self, other: Union["NestedStore", Mapping]) -> "NestedStore":
        """Вливает другое дерево в это (на месте), возвращает self."""
        tree = other._tree if isinstance(other, NestedStore) else _normalize(other)
        deep_merge(self._tree, tree)
        return self

    def restrict(self, paths) -> "NestedStore":
        """Новое хранилище только с листьями из paths."""
        wanted = {KeyPath.coerce(p) for p in paths}
        return NestedStore.from_flat(
            {path: value for path, value in self.items() if path in wanted}
        )

    def __len__(self) -> int:
        return sum(1 for _ in self.items())

    def __bool__(self) -> bool:
        return bool(self._tree)

    def __contains__(self, path) -> bool:
        return self.has_leaf(path)

    def __eq__(self, other) -> bool:
        if isinstance(other, NestedStore):
            return self._tree == other._tree
        return NotImplemented

    def __repr__(self) -> str:
        return f"NestedStore({self._tree!r})"
