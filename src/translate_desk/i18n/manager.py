#!/usr/bin/env python3
"""
Manager - CLI для работы с переводами.

Команды:
  scan          Находит ключи перевода в исходном коде
  keys          Список ключей с фильтрами и пагинацией
  translate     Записывает переводы в локаль
  missing       Ключи из кода, которых нет в локали по умолчанию
  untranslated  Непереведённые ключи по локалям
  stats         Покрытие переводами по локалям

Использование:
  translate-desk keys --from sv --to en --filter untranslated
  translate-desk keys --key-pattern articles --key-type starts_with --page 2
  translate-desk translate --from sv --to en articles.new.title="New Article"
  translate-desk translate --to en --input edits.json --log
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from rich import box
from rich.console import Console
from rich.table import Table

from ..config import load_settings
from ..errors import TranslateDeskError
from .indexer import missing_keys, untranslated_keys
from .service import BrowseRequest, build_service
from .store import is_blank

logger = logging.getLogger(__name__)


def _settings(args):
    return load_settings(
        config_path=Path(args.config) if args.config else None,
        project_root=Path(args.project_root) if args.project_root else None,
        locales_dir=args.locales_dir or None,
    )


def _short(text, width: int = 40) -> str:
    text = "" if text is None else str(text).replace("\n", " ")
    return text if len(text) <= width else text[:width - 1] + "…"


def cmd_scan(args):
    """Команда: сканирование исходного кода."""
    from .scanner import SourceScanner

    settings = _settings(args)
    scanner = SourceScanner(settings.project_root, settings.scan_dirs,
                            settings.scan_extensions)

    print(f"\n🔍 Сканирование проекта: {settings.project_root}")
    print(f"   Директории: {', '.join(settings.scan_dirs)}")

    refs = scanner.scan()
    report = scanner.generate_report(refs)

    print(f"\n{'='*60}")
    print(f"  Найдено ключей: {report['total_keys']}")
    print(f"{'='*60}")
    for key, files in sorted(refs.items()):
        print(f"  {str(key):<45} {len(files)} файл(ов)")

    if args.output:
        scanner.export_refs(refs, Path(args.output))
    return refs


def cmd_keys(args):
    """Команда: список ключей (сценарий просмотра)."""
    service = build_service(_settings(args))
    result = service.browse(BrowseRequest(
        from_locale=args.from_locale,
        to_locale=args.to_locale,
        page=args.page,
        per_page=args.per_page,
        key_pattern=args.key_pattern,
        key_type=args.key_type,
        filter=args.filter,
        text_pattern=args.text_pattern,
        text_type=args.text_type,
        sort_by=args.sort_by,
    ))

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return result

    print(f"\n🌐 {result.from_locale} -> {result.to_locale}")
    print(f"   Всего: {result.total_entries}, страница "
          f"{result.page.page_number}/{result.page.total_pages}\n")
    for row in result.rows():
        print(f"  {row['key']:<40} {_short(row['from_text']):<42} "
              f"{_short(row['to_text'])}")
    print()
    return result


def _parse_edits(args) -> dict:
    edits = {}
    if args.input:
        with open(args.input, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise SystemExit("Файл правок должен содержать JSON-объект {ключ: значение}")
        edits.update(data)
    for item in args.edits:
        key, sep, value = item.partition("=")
        if not sep:
            raise SystemExit(f"Ожидалось КЛЮЧ=ЗНАЧЕНИЕ, получено: {item}")
        edits[key] = value
    return edits


def cmd_translate(args):
    """Команда: запись переводов."""
    settings = _settings(args)
    service = build_service(settings)
    from_locale, to_locale = service.resolve_locales(args.from_locale, args.to_locale)

    edits = _parse_edits(args)
    if not edits:
        print("\n  Нет правок для записи.")
        return None

    ack = service.translate(from_locale, to_locale, edits,
                            track_changes=True if args.log else None)
    print(f"\n  Сохранено переводов: {len(ack.result.keys)} "
          f"({ack.from_locale} -> {ack.to_locale})")
    if ack.logged:
        print(f"  Журнал: {service.log.file_path(from_locale, to_locale)}")
    elif ack.log_error:
        print(f"  ⚠️  Журнал не записан: {ack.log_error}")
    return ack


def cmd_missing(args):
    """Команда: ключи из кода без записи в локали по умолчанию."""
    service = build_service(_settings(args))
    default = service.backend.default_locale()
    missing = missing_keys(service.file_refs_provider(), service.backend.load(default))

    print(f"\n  Нет в локали '{default}': {len(missing)}")
    for key, files in sorted(missing.items()):
        print(f"    {str(key):<45} {', '.join(files)}")
    return missing


def cmd_untranslated(args):
    """Команда: непереведённые ключи по локалям."""
    service = build_service(_settings(args))
    result = untranslated_keys(service.backend)

    if not result:
        print("\n  Других локалей, кроме локали по умолчанию, нет.")
    for locale, keys in result.items():
        print(f"\n  [{locale.upper()}] не переведено: {len(keys)}")
        for key in keys:
            print(f"    {key}")
    return result


def cmd_stats(args):
    """Команда: покрытие переводами."""
    service = build_service(_settings(args))
    backend = service.backend
    default = backend.default_locale()
    # Пустые тексты эталона не переводятся и в покрытие не входят
    total = sum(1 for _, value in backend.load(default).items() if not is_blank(value))
    untranslated = untranslated_keys(backend)

    table = Table(title=f"📊 Покрытие переводами (эталон: {default}, ключей: {total})",
                  box=box.ROUNDED)
    table.add_column("Локаль", style="cyan", no_wrap=True)
    table.add_column("Ключей", justify="right")
    table.add_column("Переведено", justify="right")
    table.add_column("Покрытие", justify="right", style="green")

    stats = {}
    for locale in sorted(backend.available_locales()):
        leaves = len(backend.load(locale))
        done = total - len(untranslated.get(locale, [])) if locale != default else total
        coverage = round(done / total * 100, 1) if total else 0.0
        stats[locale] = {"keys": leaves, "translated": done, "coverage": coverage}
        table.add_row(locale, str(leaves), f"{done}/{total}", f"{coverage}%")

    Console().print(table)
    return stats


def _add_common(p):
    p.add_argument("--config", default="", help="Путь к YAML-конфигу")
    p.add_argument("--project-root", default="", help="Корень проекта")
    p.add_argument("--locales-dir", default="", help="Директория файлов локалей")


def build_parser() -> argparse.ArgumentParser:
    """Строит парсер аргументов."""
    parser = argparse.ArgumentParser(
        prog="translate-desk",
        description="Управление переводами приложения",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры:
  translate-desk keys --from sv --to en --filter untranslated
  translate-desk keys --filter changed --json
  translate-desk translate --to en articles.new.title="New Article"
  translate-desk missing
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Подробный лог")

    subparsers = parser.add_subparsers(dest="command", help="Команда")

    # === scan ===
    p_scan = subparsers.add_parser("scan", help="Найти ключи в исходном коде")
    _add_common(p_scan)
    p_scan.add_argument("--output", default="", help="JSON-файл для экспорта")

    # === keys ===
    p_keys = subparsers.add_parser("keys", help="Список ключей")
    _add_common(p_keys)
    p_keys.add_argument("--from-locale", "--from", default=None, help="Исходная локаль")
    p_keys.add_argument("--to-locale", "--to", default=None, help="Целевая локаль")
    p_keys.add_argument("--page", type=int, default=1, help="Номер страницы")
    p_keys.add_argument("--per-page", type=int, default=None, help="Размер страницы")
    p_keys.add_argument("--key-pattern", default=None, help="Шаблон ключа")
    p_keys.add_argument("--key-type", default=None,
                        help="starts_with | contains")
    p_keys.add_argument("--filter", default=None,
                        help="all | translated | untranslated | changed")
    p_keys.add_argument("--text-pattern", default=None, help="Поиск по исходному тексту")
    p_keys.add_argument("--text-type", default=None, help="contains | equals")
    p_keys.add_argument("--sort-by", default=None, help="key | text")
    p_keys.add_argument("--json", action="store_true", help="Вывод в JSON")

    # === translate ===
    p_trans = subparsers.add_parser("translate", help="Записать переводы")
    _add_common(p_trans)
    p_trans.add_argument("--from-locale", "--from", default=None, help="Исходная локаль")
    p_trans.add_argument("--to-locale", "--to", default=None, help="Целевая локаль")
    p_trans.add_argument("--input", default="", help="JSON-файл {ключ: значение}")
    p_trans.add_argument("--log", action="store_true",
                         help="Записать исходные тексты в журнал изменений")
    p_trans.add_argument("edits", nargs="*", help="Правки КЛЮЧ=ЗНАЧЕНИЕ")

    # === missing ===
    p_missing = subparsers.add_parser("missing", help="Ключи из кода без перевода по умолчанию")
    _add_common(p_missing)

    # === untranslated ===
    p_untr = subparsers.add_parser("untranslated", help="Непереведённые ключи по локалям")
    _add_common(p_untr)

    # === stats ===
    p_stats = subparsers.add_parser("stats", help="Покрытие переводами")
    _add_common(p_stats)

    return parser


def main(argv=None):
    """Точка входа CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    if not args.command:
        parser.print_help()
        sys.exit(1)

    commands = {
        "scan": cmd_scan,
        "keys": cmd_keys,
        "translate": cmd_translate,
        "missing": cmd_missing,
        "untranslated": cmd_untranslated,
        "stats": cmd_stats,
    }

    handler = commands.get(args.command)
    try:
        handler(args)
    except TranslateDeskError as exc:
        logger.debug("Ошибка команды %s", args.command, exc_info=True)
        print(f"\n  ❌ {exc.message}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
