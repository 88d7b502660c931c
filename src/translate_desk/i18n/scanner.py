"""
Scanner - поиск ключей перевода в исходном коде и шаблонах.

Чисто регулярные выражения, без разбора синтаксиса. Ищутся вызовы:
    t('articles.new.title')      t "home.page_title"
    I18n.t('general.back')       I18n.translate(:'category.name')
    t :'vendor.foobar'

Ключ должен содержать хотя бы одну точку - одиночные слова слишком часто
оказываются ложными совпадениями.

Результат - FileRefSet: {KeyPath: [относительные пути файлов]}, файлы в порядке
первого упоминания.
"""

import json
import logging
import re
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, List, Optional

from .indexer import FileRefSet
from .keypath import KeyPath

logger = logging.getLogger(__name__)

I18N_LOOKUP_PATTERN = re.compile(
    r"""\b(?:I18n\.t|I18n\.translate|t)(?:\s+|\(\s*):?["']([a-z0-9_]+(?:\.[a-z0-9_]+)+)["']""",
    re.IGNORECASE,
)

DEFAULT_SCAN_DIRS = ["app", "config", "lib", "public/javascripts", "templates"]
DEFAULT_EXTENSIONS = [".rb", ".erb", ".rhtml", ".js", ".py", ".html"]


@dataclass
class KeyUsage:
    """Одно упоминание ключа в файле."""
    key: str
    file: str
    line: int


class SourceScanner:
    """
    Обходит директории проекта и собирает упоминания ключей.

    Директории scan_dirs задаются относительно project_root; отсутствующие
    пропускаются.
    """

    def __init__(self, project_root: Path,
                 scan_dirs: Optional[List[str]] = None,
                 extensions: Optional[List[str]] = None,
                 exclude_dirs: Optional[List[str]] = None):
        self.project_root = Path(project_root)
        self.scan_dirs = scan_dirs if scan_dirs is not None else list(DEFAULT_SCAN_DIRS)
        self.extensions = extensions if extensions is not None else list(DEFAULT_EXTENSIONS)
        self.exclude_dirs = exclude_dirs or [
            "__pycache__", ".git", ".venv", "venv", "node_modules", "locales",
        ]

    def scan(self) -> FileRefSet:
        """Возвращает {KeyPath: [файлы]}."""
        refs: FileRefSet = {}
        for usage in self.scan_usages():
            files = refs.setdefault(KeyPath.parse(usage.key), [])
            if usage.file not in files:
                files.append(usage.file)
        logger.info("Сканирование %s: найдено ключей %d", self.project_root, len(refs))
        return refs

    def scan_usages(self) -> List[KeyUsage]:
        usages: List[KeyUsage] = []
        for path in self._find_files():
            usages.extend(self._scan_file(path))
        return usages

    def _find_files(self) -> List[Path]:
        """Все файлы с нужными расширениями в scan_dirs."""
        files = set()
        for dir_name in self.scan_dirs:
            root = self.project_root / dir_name
            if not root.is_dir():
                continue
            for path in root.rglob("*"):
                if not path.is_file() or path.suffix not in self.extensions:
                    continue
                parts = path.relative_to(self.project_root).parts
                if any(exc in parts for exc in self.exclude_dirs):
                    continue
                files.add(path)
        return sorted(files)

    def _scan_file(self, file_path: Path) -> List[KeyUsage]:
        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("[SKIP] Ошибка чтения: %s: %s", file_path, e)
            return []

        rel_path = file_path.relative_to(self.project_root).as_posix()
        usages = []
        for match in I18N_LOOKUP_PATTERN.finditer(content):
            line_no = content[:match.start()].count("\n") + 1
            usages.append(KeyUsage(key=match.group(1), file=rel_path, line=line_no))
        return usages

    def generate_report(self, refs: FileRefSet) -> Dict:
        """Статистика сканирования."""
        by_file: Dict[str, int] = {}
        for files in refs.values():
            for f in files:
                by_file[f] = by_file.get(f, 0) + 1
        return {
            "total_keys": len(refs),
            "by_file": by_file,
        }

    def export_refs(self, refs: FileRefSet, output_path: Path):
        """Экспортирует найденные ключи и упоминания в JSON."""
        data = {
            "meta": {
                "project": str(self.project_root),
                "report": self.generate_report(refs),
            },
            "keys": {str(k): files for k, files in sorted(refs.items())},
            "usages": [asdict(u) for u in self.scan_usages()],
        }
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        logger.info("Экспортировано %d ключей -> %s", len(refs), output_path)
