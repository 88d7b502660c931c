"""
Настройки translate_desk.

Загружаются из YAML (config/translate_desk.yaml в корне проекта, либо путь
из TRANSLATE_DESK_CONFIG, либо явный путь). Если файла нет - используются
значения по умолчанию.

Пример:
    locales_dir: config/locales
    log_dir: config/locales/log
    default_locale: sv
    default_to_locale: en
    per_page: 50
    track_changes: true
    scan_dirs: [app, lib]
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import List, Optional

import yaml

from .i18n.scanner import DEFAULT_EXTENSIONS, DEFAULT_SCAN_DIRS

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TRANSLATE_DESK_CONFIG"
DEFAULT_CONFIG_PATH = Path("config") / "translate_desk.yaml"


@dataclass
class Settings:
    """Настройки приложения. Относительные пути - от project_root."""
    project_root: Path = field(default_factory=Path.cwd)
    locales_dir: Path = Path("config/locales")
    log_dir: Path = Path("config/locales/log")
    default_locale: str = "en"
    default_to_locale: str = "en"
    per_page: int = 50
    track_changes: bool = False
    scan_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_SCAN_DIRS))
    scan_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))

    def __post_init__(self):
        self.project_root = Path(self.project_root)
        self.locales_dir = self._resolve(self.locales_dir)
        self.log_dir = self._resolve(self.log_dir)
        self.default_locale = str(self.default_locale)
        self.default_to_locale = str(self.default_to_locale)
        self.per_page = int(self.per_page)

    def _resolve(self, path) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.project_root / path


def _read_yaml(path: Path) -> dict:
    if not path.exists():
        logger.debug("Конфиг %s не найден, используются значения по умолчанию", path)
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ошибка загрузки конфига %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Конфиг %s должен быть словарём, пропущен", path)
        return {}
    logger.info("Конфигурация загружена из %s", path)
    return data


def load_settings(config_path: Optional[Path] = None,
                  project_root: Optional[Path] = None, **overrides) -> Settings:
    """
    Загружает настройки.

    Приоритет: overrides -> YAML -> значения по умолчанию.
    Неизвестные ключи YAML игнорируются с предупреждением.
    """
    root = Path(project_root) if project_root else Path.cwd()
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        config_path = Path(env_path) if env_path else root / DEFAULT_CONFIG_PATH

    data = _read_yaml(Path(config_path))
    known = {f.name for f in fields(Settings)}
    for key in sorted(set(data) - known):
        logger.warning("Неизвестный параметр конфига: %s", key)

    values = {k: v for k, v in data.items() if k in known}
    values.update({k: v for k, v in overrides.items() if v is not None})
    if project_root is not None:
        values["project_root"] = root
    values.setdefault("project_root", root)
    return Settings(**values)
