"""
Главный модуль CLI интерфейса для утилиты сортировки файлов.

Использование: process-files <incoming_dir> <processed_dir>
"""

import argparse
import sys
from typing import List, Optional

from .config_loader import load_config
from .logger import FileSorterLogger
from .sorter import create_sorter, SortError


class FileSorterCLI:
    """Класс для обработки команд CLI."""

    def __init__(self):
        self.config = None
        self.logger = None
        self.sorter = None

    def setup(self, config_path: Optional[str] = None, verbose: bool = False) -> bool:
        """
        Инициализирует CLI с конфигурацией.

        Args:
            config_path: Путь к файлу конфигурации (None - значения по умолчанию)
            verbose: Включить подробный вывод (уровень DEBUG)

        Returns:
            bool: True если инициализация успешна
        """
        try:
            self.config = load_config(config_path)

            if verbose:
                self.config.logging.level = 'DEBUG'

            self.logger = FileSorterLogger(self.config.logging)
            self.sorter = create_sorter(self.config, self.logger)

            self.logger.log_config_loaded(config_path)
            return True

        except Exception as e:
            print(f"❌ Ошибка инициализации: {e}", file=sys.stderr)
            return False

    def cmd_sort(self, args) -> int:
        """
        Команда сортировки входящего каталога.

        Args:
            args: Аргументы командной строки

        Returns:
            int: Код возврата (0 - сортировка выполнена, 1 - не удалось начать)
        """
        try:
            stats = self.sorter.sort_directory(args.incoming_dir, args.processed_dir)
        except SortError as e:
            print(f"❌ {e}", file=sys.stderr)
            return 1

        if stats.total_files == 0:
            print("No files found")
        else:
            print(f"Moved {stats.successful_files} files to {args.processed_dir}")

        return 0


def create_parser() -> argparse.ArgumentParser:
    """
    Создает парсер аргументов командной строки.

    Позиционные аргументы необязательны: при отсутствии любого из них
    утилита завершается без вывода и без действий.
    """
    parser = argparse.ArgumentParser(
        prog='process-files',
        description="Раскладывает файлы входящего каталога по каталогам YYYY/MM",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры использования:

  # Перемещение файлов из ./incoming/folder в ./processed/YYYY/MM/
  process-files ./incoming/folder ./processed

  # С файлом конфигурации и подробным выводом
  process-files ./incoming ./processed --config config/settings.ini -v
        """
    )

    parser.add_argument(
        'incoming_dir',
        nargs='?',
        help='Входящий каталог с файлами'
    )
    parser.add_argument(
        'processed_dir',
        nargs='?',
        help='Каталог назначения для структуры YYYY/MM'
    )
    parser.add_argument(
        '--config',
        default=None,
        help='Путь к файлу конфигурации (по умолчанию не используется)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Подробный вывод'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Главная функция CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.incoming_dir or not args.processed_dir:
        return 0

    cli = FileSorterCLI()

    if not cli.setup(args.config, args.verbose):
        return 1

    try:
        return cli.cmd_sort(args)
    except KeyboardInterrupt:
        print("\n⚠️ Операция прервана пользователем", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
