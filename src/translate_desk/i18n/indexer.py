"""
Indexer - сведение ключей из исходного кода и из хранилищ локалей.

Вселенная ключей привязана к исходной локали (from_locale) и к использованию
в коде: ключи, которые есть только в целевой локали, в неё не попадают.
"""

import logging
from typing import Dict, List, Mapping, Set, Union

from .keypath import KeyPath
from .store import NestedStore, is_blank

logger = logging.getLogger(__name__)

FileRefSet = Dict[KeyPath, List[str]]


def normalize_file_refs(file_refs: Mapping[Union[KeyPath, str], List[str]]) -> FileRefSet:
    """Приводит ключи FileRefSet к KeyPath, убирая дубли файлов."""
    result: FileRefSet = {}
    for key, files in file_refs.items():
        path = KeyPath.coerce(key)
        bucket = result.setdefault(path, [])
        for f in files:
            if f not in bucket:
                bucket.append(f)
    return result


def merge_keys(file_refs: Mapping, from_store: NestedStore,
               to_store: NestedStore) -> Set[KeyPath]:
    """
    Объединение ключей из кода и листьев исходной локали.

    to_store принимается для симметрии вызова, но в объединение не входит.
    """
    keys = {KeyPath.coerce(k) for k in file_refs}
    keys.update(from_store.keys())
    logger.debug("Ключей из кода: %d, из исходной локали: %d, всего: %d",
                 len(file_refs), len(from_store), len(keys))
    return keys


def prune_keys(keys: Set[KeyPath], from_store: NestedStore,
               from_locale: str, to_locale: str) -> Set[KeyPath]:
    """
    Убирает ключи, которые нельзя редактировать.

    - при переводе между разными локалями нужен исходный текст;
    - нестроковые значения (списки, числа) в интерфейсе не редактируются.
    """
    result = set()
    for key in keys:
        text = from_store.get(key)
        if from_locale != to_locale and is_blank(text):
            continue
        if not is_blank(text) and not isinstance(text, str):
            continue
        result.add(key)
    return result


def missing_keys(file_refs: Mapping, default_store: NestedStore) -> FileRefSet:
    """Ключи, используемые в коде, но отсутствующие в локали по умолчанию."""
    refs = normalize_file_refs(file_refs)
    return {key: files for key, files in refs.items()
            if not default_store.has_node(key)}


def untranslated_keys(backend) -> Dict[str, List[KeyPath]]:
    """
    Для каждой локали, кроме локали по умолчанию, - ключи локали по умолчанию
    без перевода.
    """
    default = backend.default_locale()
    default_store = backend.load(default)
    result: Dict[str, List[KeyPath]] = {}
    for locale in sorted(backend.available_locales()):
        if locale == default:
            continue
        store = backend.load(locale)
        result[locale] = sorted(
            key for key, value in default_store.items()
            if not is_blank(value) and is_blank(store.get(key))
        )
    return result
