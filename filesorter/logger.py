"""
Модуль для настройки и управления логированием приложения.

Обеспечивает централизованную настройку логирования с цветным выводом
в stderr и необязательным файлом лога с ротацией.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime

from .config_loader import LoggingConfig


LOGGER_NAME = 'file_sorter'
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Форматтер с цветным выводом для консоли."""

    # Цветовые коды ANSI
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }

    def format(self, record):
        """Форматирует запись лога с цветом, не изменяя исходную запись."""
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


class FileSorterLogger:
    """Класс для управления логированием приложения File Sorter."""

    def __init__(self, config: LoggingConfig):
        """
        Инициализация логгера.

        Args:
            config: Конфигурация логирования
        """
        self.config = config
        self.logger: Optional[logging.Logger] = None
        self._setup_logger()

    def _setup_logger(self) -> None:
        """Настраивает логгер с консольным и (при необходимости) файловым выводом."""
        level = getattr(logging, self.config.level.upper())

        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(level)

        # Закрываем обработчики предыдущей настройки
        for handler in self.logger.handlers[:]:
            handler.close()
            self.logger.removeHandler(handler)

        # Ошибки по файлам пишутся в stderr, stdout остается для итоговой строки
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(ColoredFormatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        console_handler.setLevel(level)
        self.logger.addHandler(console_handler)

        if self.config.log_file:
            log_file_path = Path(self.config.log_file)
            log_file_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                filename=log_file_path,
                maxBytes=self.config.max_log_size * 1024 * 1024,  # MB в байты
                backupCount=self.config.backup_count,
                encoding='utf-8'
            )
            file_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
            file_handler.setLevel(level)
            self.logger.addHandler(file_handler)

        # Предотвращаем дублирование сообщений
        self.logger.propagate = False

    def get_logger(self) -> logging.Logger:
        """
        Возвращает настроенный логгер.

        Returns:
            logging.Logger: Настроенный логгер
        """
        if self.logger is None:
            raise RuntimeError("Логгер не инициализирован")
        return self.logger

    def log_sort_start(self, incoming_dir: Path, processed_dir: Path, total_files: int) -> None:
        """
        Логирует начало сортировки.

        Args:
            incoming_dir: Входящий каталог
            processed_dir: Каталог назначения
            total_files: Количество найденных файлов
        """
        self.logger.info(f"🚀 Начало сортировки файлов: {incoming_dir} → {processed_dir}")
        self.logger.info(f"📊 Найдено файлов: {total_files}")
        self.logger.info(f"⏰ Время начала: {datetime.now().strftime(LOG_DATE_FORMAT)}")

    def log_sort_end(self, processed_files: int, successful_files: int, failed_files: int,
                     skipped_files: int) -> None:
        """
        Логирует завершение сортировки.

        Args:
            processed_files: Обработано файлов
            successful_files: Успешно перемещено
            failed_files: Ошибок при перемещении
            skipped_files: Пропущено записей
        """
        self.logger.info(f"✅ Сортировка завершена")
        self.logger.info(f"📊 Статистика:")
        self.logger.info(f"   • Обработано: {processed_files}")
        self.logger.info(f"   • Успешно: {successful_files}")
        self.logger.info(f"   • Ошибок: {failed_files}")
        self.logger.info(f"   • Пропущено: {skipped_files}")
        self.logger.info(f"⏰ Время завершения: {datetime.now().strftime(LOG_DATE_FORMAT)}")

    def log_file_moved(self, name: str, source_path: Path, target_path: Path) -> None:
        """Логирует успешное перемещение файла."""
        self.logger.info(f"📁 Файл {name} перемещен: {source_path} → {target_path}")

    def log_file_error(self, name: str, error: Exception) -> None:
        """
        Логирует ошибку при обработке файла.

        Args:
            name: Имя файла
            error: Исключение
        """
        self.logger.error(f"❌ Ошибка при обработке файла {name}: {error}")

    def log_file_skipped(self, name: str, reason: str) -> None:
        """Логирует пропуск записи каталога."""
        self.logger.warning(f"⏭️ Пропущено {name}: {reason}")

    def log_directory_created(self, directory: Path) -> None:
        """Логирует создание каталога месяца."""
        self.logger.debug(f"📂 Каталог готов: {directory}")

    def log_file_operation(self, operation: str, file_path: Path, success: bool = True) -> None:
        """
        Логирует операцию с файлом.

        Args:
            operation: Тип операции (copy, utime, verify, remove)
            file_path: Путь к файлу
            success: Успешность операции
        """
        status = "✅" if success else "❌"
        self.logger.debug(f"{status} {operation.upper()}: {file_path}")

    def log_config_loaded(self, config_path: Optional[str]) -> None:
        """Логирует загрузку конфигурации."""
        if config_path:
            self.logger.info(f"⚙️ Конфигурация загружена из {config_path}")
        else:
            self.logger.info("⚙️ Используется конфигурация по умолчанию")

    def log_system_info(self, info: str) -> None:
        """Логирует системную информацию."""
        self.logger.info(f"ℹ️ {info}")

    def log_warning(self, message: str) -> None:
        """Логирует предупреждение."""
        self.logger.warning(f"⚠️ {message}")

    def log_critical_error(self, message: str, error: Exception = None) -> None:
        """
        Логирует критическую ошибку.

        Args:
            message: Сообщение об ошибке
            error: Исключение (опционально)
        """
        if error:
            self.logger.critical(f"💥 {message}: {error}")
        else:
            self.logger.critical(f"💥 {message}")


def setup_logger(config: LoggingConfig) -> logging.Logger:
    """
    Удобная функция для быстрой настройки логгера.

    Args:
        config: Конфигурация логирования

    Returns:
        logging.Logger: Настроенный логгер
    """
    sorter_logger = FileSorterLogger(config)
    return sorter_logger.get_logger()


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Получает логгер по имени."""
    return logging.getLogger(name)
