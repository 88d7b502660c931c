"""
translate_desk - управление переводами многоязычного приложения.

Подпакеты:
- i18n: ключи, хранилища локалей, фильтры, пагинация, запись переводов, CLI
- web: FastAPI-интерфейс для просмотра и редактирования переводов
"""

__version__ = "0.3.0"
