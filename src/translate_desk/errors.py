"""
Исключения translate_desk.

Все ошибки детерминированы (ошибка входных данных или состояния хранилища),
автоматических повторов нет.
"""

from typing import Optional


class TranslateDeskError(Exception):
    """Базовое исключение."""

    def __init__(self, message: str, code: str = "TRANSLATE_DESK_ERROR",
                 details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message, **self.details}


class InvalidFilterKind(TranslateDeskError):
    """Неизвестный режим фильтра (key_type, filter, text_type)."""

    def __init__(self, param: str, value: str, allowed=()):
        super().__init__(
            message=f"Неизвестное значение {param}={value!r}",
            code="INVALID_FILTER_KIND",
            details={"param": param, "value": value, "allowed": list(allowed)},
        )


class InvalidPageRequest(TranslateDeskError):
    """Некорректный номер или размер страницы."""

    def __init__(self, page_number, page_size):
        super().__init__(
            message=f"Некорректный запрос страницы: page={page_number!r}, "
                    f"per_page={page_size!r}",
            code="INVALID_PAGE_REQUEST",
            details={"page": page_number, "per_page": page_size},
        )


class InvalidKeyPath(TranslateDeskError):
    """Ключ перевода не разбирается в KeyPath или конфликтует с другим ключом."""

    def __init__(self, key, reason: str = ""):
        message = f"Некорректный ключ {key!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message=message,
            code="INVALID_KEY_PATH",
            details={"key": str(key), "reason": reason},
        )


class SnapshotUnavailable(TranslateDeskError):
    """Журнал изменений существует, но не читается."""

    def __init__(self, path, reason: str = ""):
        super().__init__(
            message=f"Журнал изменений недоступен: {path}"
                    + (f" ({reason})" if reason else ""),
            code="SNAPSHOT_UNAVAILABLE",
            details={"path": str(path), "reason": reason},
        )


class BackendWriteFailure(TranslateDeskError):
    """
    Ошибка записи в бэкенд локалей.

    step: "store" или "persist".
    stored: True, если store прошёл и упал только persist - тогда состояние
    в памяти и на диске расходится.
    """

    def __init__(self, locale: str, step: str, stored: bool, reason: str = ""):
        super().__init__(
            message=f"Ошибка записи локали '{locale}' на шаге {step}"
                    + (f": {reason}" if reason else ""),
            code="BACKEND_WRITE_FAILURE",
            details={"locale": locale, "step": step, "stored": stored},
        )
        self.locale = locale
        self.step = step
        self.stored = stored
