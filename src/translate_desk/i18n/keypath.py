"""
KeyPath - путь к записи перевода во вложенной структуре.

Текстовая форма - сегменты через точку: "articles.new.page_title".
Точка и обратный слеш внутри сегмента экранируются обратным слешем,
поэтому render() и parse() взаимно обратны.

Порядок ключей - посимвольное сравнение текстовой формы (code points),
без учёта локали.
"""

from typing import Iterable, Tuple, Union

from ..errors import InvalidKeyPath

SEPARATOR = "."
ESCAPE = "\\"


def _escape(segment: str) -> str:
    return segment.replace(ESCAPE, ESCAPE * 2).replace(SEPARATOR, ESCAPE + SEPARATOR)


class KeyPath:
    """Неизменяемая последовательность непустых строковых сегментов."""

    __slots__ = ("_segments", "_text")

    def __init__(self, segments: Iterable[str]):
        segments = tuple(segments)
        if not segments:
            raise InvalidKeyPath("", "пустой ключ")
        for segment in segments:
            if not isinstance(segment, str) or not segment:
                raise InvalidKeyPath(segments, "пустой или нестроковый сегмент")
        self._segments = segments
        self._text = SEPARATOR.join(_escape(s) for s in segments)

    @classmethod
    def parse(cls, text: str) -> "KeyPath":
        """
        Разбирает текстовую форму ключа.

        Raises:
            InvalidKeyPath: пустая строка, пустой сегмент ("a..b", ".a", "a.")
                или висячий/неизвестный escape.
        """
        if not isinstance(text, str) or not text:
            raise InvalidKeyPath(text, "пустой ключ")

        segments = []
        current = []
        chars = iter(text)
        for char in chars:
            if char == ESCAPE:
                nxt = next(chars, None)
                if nxt not in (ESCAPE, SEPARATOR):
                    raise InvalidKeyPath(text, "некорректное экранирование")
                current.append(nxt)
            elif char == SEPARATOR:
                if not current:
                    raise InvalidKeyPath(text, "пустой сегмент")
                segments.append("".join(current))
                current = []
            else:
                current.append(char)

        if not current:
            raise InvalidKeyPath(text, "пустой сегмент")
        segments.append("".join(current))
        return cls(segments)

    @classmethod
    def coerce(cls, value: Union["KeyPath", str]) -> "KeyPath":
        """Приводит строку или KeyPath к KeyPath (граница ввода)."""
        if isinstance(value, KeyPath):
            return value
        return cls.parse(value)

    @property
    def segments(self) -> Tuple[str, ...]:
        return self._segments

    @property
    def parent(self) -> "KeyPath":
        if len(self._segments) == 1:
            raise InvalidKeyPath(self._text, "у ключа верхнего уровня нет родителя")
        return KeyPath(self._segments[:-1])

    def child(self, segment: str) -> "KeyPath":
        return KeyPath(self._segments + (segment,))

    def render(self) -> str:
        return self._text

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"KeyPath({self._text!r})"

    def __len__(self) -> int:
        return len(self._segments)

    def __hash__(self) -> int:
        return hash(self._segments)

    def __eq__(self, other) -> bool:
        if isinstance(other, KeyPath):
            return self._segments == other._segments
        return NotImplemented

    def __lt__(self, other: "KeyPath") -> bool:
        if not isinstance(other, KeyPath):
            return NotImplemented
        return self._text < other._text

    def __le__(self, other: "KeyPath") -> bool:
        if not isinstance(other, KeyPath):
            return NotImplemented
        return self._text <= other._text

    def __gt__(self, other: "KeyPath") -> bool:
        if not isinstance(other, KeyPath):
            return NotImplemented
        return self._text > other._text

    def __ge__(self, other: "KeyPath") -> bool:
        if not isinstance(other, KeyPath):
            return NotImplemented
        return self._text >= other._text
