"""
Модуль бизнес-логики сортировки файлов.

Перемещает файлы входящего каталога в структуру каталогов по месяцам
(YYYY/MM) каталога назначения. Ошибка по отдельному файлу логируется
и не прерывает обработку остальных.
"""

from typing import Dict, Optional
from datetime import datetime
from pathlib import Path

from .config_loader import Config
from .logger import FileSorterLogger
from .file_ops import FileEntry, FileOps, FileOperationError


class SortError(Exception):
    """Исключение для ошибок сортировки."""
    pass


class SortStats:
    """Класс для хранения статистики сортировки."""

    def __init__(self):
        self.total_files = 0
        self.processed_files = 0
        self.successful_files = 0
        self.failed_files = 0
        self.skipped_files = 0
        self.start_time = None
        self.end_time = None
        self.errors = []

    def add_error(self, file_name: str, error: Exception):
        """Добавляет ошибку в список."""
        self.errors.append({
            'file_name': file_name,
            'error': str(error),
            'timestamp': datetime.now()
        })

    def get_duration(self) -> Optional[float]:
        """Возвращает продолжительность сортировки в секундах."""
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def get_success_rate(self) -> float:
        """Возвращает процент успешно перемещенных файлов."""
        if self.processed_files == 0:
            return 0.0
        return (self.successful_files / self.processed_files) * 100

    def to_dict(self) -> Dict:
        """Преобразует статистику в словарь."""
        return {
            'total_files': self.total_files,
            'processed_files': self.processed_files,
            'successful_files': self.successful_files,
            'failed_files': self.failed_files,
            'skipped_files': self.skipped_files,
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'end_time': self.end_time.isoformat() if self.end_time else None,
            'duration_seconds': self.get_duration(),
            'success_rate': self.get_success_rate(),
            'error_count': len(self.errors)
        }


class Sorter:
    """Основной класс для сортировки файлов по месяцам."""

    def __init__(self, config: Config, logger: FileSorterLogger):
        """
        Инициализация сортировщика.

        Args:
            config: Конфигурация приложения
            logger: Логгер для записи операций
        """
        self.config = config
        self.logger = logger
        self.file_ops = FileOps(config.sorter, logger)
        self.stats = SortStats()

    def process_file(self, entry: FileEntry, processed_dir: Path) -> bool:
        """
        Перемещает один файл.

        Args:
            entry: Файл входящего каталога
            processed_dir: Корневой каталог назначения

        Returns:
            bool: True если файл перемещен
        """
        try:
            self.file_ops.move_file(entry, processed_dir)
            return True

        except (FileOperationError, OSError, ValueError) as e:
            self.stats.add_error(entry.name, e)
            self.logger.log_file_error(entry.name, e)
            return False

    def sort_directory(self, incoming_dir: Path, processed_dir: Path) -> SortStats:
        """
        Сортирует все файлы входящего каталога.

        Args:
            incoming_dir: Входящий каталог
            processed_dir: Корневой каталог назначения

        Returns:
            SortStats: Статистика сортировки

        Raises:
            SortError: Если входящий каталог не удалось прочитать
        """
        incoming_dir = Path(incoming_dir)
        processed_dir = Path(processed_dir)

        self.stats = SortStats()
        self.stats.start_time = datetime.now()

        try:
            entries = self.file_ops.list_files(incoming_dir)
        except FileOperationError as e:
            self.stats.end_time = datetime.now()
            self.logger.log_critical_error("Ошибка чтения входящего каталога", e)
            raise SortError(f"Ошибка сортировки: {e}")

        self.stats.total_files = len(entries)
        self.stats.skipped_files = len(self.file_ops.skipped_entries)

        self.logger.log_sort_start(incoming_dir, processed_dir, self.stats.total_files)

        for entry in entries:
            if self.process_file(entry, processed_dir):
                self.stats.successful_files += 1
            else:
                self.stats.failed_files += 1
            self.stats.processed_files += 1

        self.stats.end_time = datetime.now()

        self.logger.log_sort_end(
            processed_files=self.stats.processed_files,
            successful_files=self.stats.successful_files,
            failed_files=self.stats.failed_files,
            skipped_files=self.stats.skipped_files
        )

        return self.stats


def create_sorter(config: Config, logger: FileSorterLogger) -> Sorter:
    """
    Удобная функция для создания объекта сортировщика.

    Args:
        config: Конфигурация приложения
        logger: Логгер

    Returns:
        Sorter: Объект сортировщика
    """
    return Sorter(config, logger)
