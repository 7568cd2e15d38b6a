"""
Модуль для операций с файловой системой.

Обеспечивает чтение входящего каталога, построение структуры каталогов
по месяцам (YYYY/MM) и перемещение файлов с сохранением времени изменения.
"""

import hashlib
import os
import shutil
import stat
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from .config_loader import SorterConfig
from .logger import FileSorterLogger


class FileOperationError(Exception):
    """Исключение для ошибок операций с файлами."""
    pass


@dataclass
class FileEntry:
    """Файл входящего каталога со временем изменения, прочитанным при листинге."""
    source_path: Path
    mtime_ns: int

    @property
    def name(self) -> str:
        return self.source_path.name

    @property
    def modified_at(self) -> datetime:
        """Время изменения файла в UTC."""
        return datetime.fromtimestamp(self.mtime_ns / 1e9, tz=timezone.utc)


class FileOps:
    """Класс для операций с файловой системой."""

    def __init__(self, sorter_config: SorterConfig, logger: FileSorterLogger):
        """
        Инициализация операций с файлами.

        Каталоги здесь не создаются: пустой входящий каталог не должен
        приводить к изменениям файловой системы.

        Args:
            sorter_config: Конфигурация сортировки
            logger: Логгер для записи операций
        """
        self.sorter_config = sorter_config
        self.logger = logger
        self.reserved_names = set(sorter_config.reserved_names)
        self.skipped_entries: List[Path] = []

    def list_files(self, incoming_dir: Path) -> List[FileEntry]:
        """
        Получает список файлов входящего каталога с временем изменения.

        Зарезервированные записи и подкаталоги пропускаются, вложенные
        каталоги не обходятся.

        Args:
            incoming_dir: Входящий каталог

        Returns:
            List[FileEntry]: Файлы в порядке имен

        Raises:
            FileOperationError: Если каталог не существует или недоступен
        """
        incoming_dir = Path(incoming_dir)
        self.skipped_entries = []

        if not incoming_dir.is_dir():
            raise FileOperationError(f"Входящий каталог не найден: {incoming_dir}")

        try:
            paths = sorted(incoming_dir.iterdir())
        except OSError as e:
            raise FileOperationError(f"Ошибка чтения каталога {incoming_dir}: {e}")

        entries = []
        for path in paths:
            if path.name in self.reserved_names:
                self.logger.log_system_info(f"Зарезервированная запись пропущена: {path}")
                continue

            try:
                st = path.stat()
            except OSError as e:
                self.skipped_entries.append(path)
                self.logger.log_file_skipped(path.name, f"ошибка чтения атрибутов: {e}")
                continue

            if not stat.S_ISREG(st.st_mode):
                self.skipped_entries.append(path)
                self.logger.log_file_skipped(path.name, "не является обычным файлом")
                continue

            entries.append(FileEntry(source_path=path, mtime_ns=st.st_mtime_ns))

        self.logger.log_system_info(f"Файлов во входящем каталоге {incoming_dir}: {len(entries)}")
        return entries

    def get_month_directory(self, processed_dir: Path, modified_at: datetime) -> Path:
        """
        Получает путь к каталогу месяца в формате YYYY/MM.

        Args:
            processed_dir: Корневой каталог назначения
            modified_at: Время изменения файла (aware datetime)

        Returns:
            Path: Путь к каталогу месяца
        """
        if self.sorter_config.use_utc:
            dt = modified_at.astimezone(timezone.utc)
        else:
            dt = modified_at.astimezone()
        return Path(processed_dir) / f"{dt.year:04d}" / f"{dt.month:02d}"

    def ensure_month_directory(self, processed_dir: Path, modified_at: datetime) -> Path:
        """
        Создает каталог месяца если он не существует.

        Returns:
            Path: Путь к каталогу месяца

        Raises:
            FileOperationError: Если каталог не удалось создать
        """
        month_dir = self.get_month_directory(processed_dir, modified_at)
        try:
            month_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileOperationError(f"Ошибка создания каталога {month_dir}: {e}")
        self.logger.log_directory_created(month_dir)
        return month_dir

    def copy_file(self, source_path: Path, target_path: Path) -> None:
        """Копирует содержимое файла, существующий файл назначения перезаписывается."""
        try:
            shutil.copyfile(source_path, target_path)
        except OSError as e:
            self.logger.log_file_operation("copy", target_path, False)
            raise FileOperationError(f"Ошибка копирования {source_path} → {target_path}: {e}")
        self.logger.log_file_operation("copy", target_path, True)

    def restore_timestamp(self, target_path: Path, mtime_ns: int) -> None:
        """
        Восстанавливает время изменения файла.

        Время доступа выставляется равным времени изменения.
        """
        try:
            os.utime(target_path, ns=(mtime_ns, mtime_ns))
        except OSError as e:
            self.logger.log_file_operation("utime", target_path, False)
            raise FileOperationError(f"Ошибка установки времени изменения {target_path}: {e}")
        self.logger.log_file_operation("utime", target_path, True)

    def remove_file(self, file_path: Path) -> None:
        """Удаляет исходный файл."""
        try:
            Path(file_path).unlink()
        except OSError as e:
            self.logger.log_file_operation("remove", file_path, False)
            raise FileOperationError(f"Ошибка удаления {file_path}: {e}")
        self.logger.log_file_operation("remove", file_path, True)

    def get_file_hash(self, file_path: Path, algorithm: Optional[str] = None) -> str:
        """
        Получает хеш файла для проверки целостности.

        Args:
            file_path: Путь к файлу
            algorithm: Алгоритм хеширования (md5, sha1, sha256), по умолчанию из конфигурации

        Returns:
            str: Хеш файла

        Raises:
            ValueError: Если алгоритм не поддерживается
            FileOperationError: Если файл не удалось прочитать
        """
        algorithm = algorithm or self.sorter_config.hash_algorithm

        if algorithm == 'md5':
            hasher = hashlib.md5()
        elif algorithm == 'sha1':
            hasher = hashlib.sha1()
        elif algorithm == 'sha256':
            hasher = hashlib.sha256()
        else:
            raise ValueError(f"Неподдерживаемый алгоритм: {algorithm}")

        try:
            with open(file_path, 'rb') as f:
                for chunk in iter(lambda: f.read(4096), b""):
                    hasher.update(chunk)
        except OSError as e:
            raise FileOperationError(f"Ошибка чтения файла {file_path}: {e}")

        return hasher.hexdigest()

    def verify_copy(self, source_path: Path, target_path: Path) -> None:
        """
        Сравнивает хеши исходного файла и копии.

        Raises:
            FileOperationError: Если хеши не совпадают
        """
        source_hash = self.get_file_hash(source_path)
        target_hash = self.get_file_hash(target_path)
        if source_hash != target_hash:
            self.logger.log_file_operation("verify", target_path, False)
            raise FileOperationError(f"Ошибка целостности копии {target_path}")
        self.logger.log_file_operation("verify", target_path, True)

    def move_file(self, entry: FileEntry, processed_dir: Path) -> Path:
        """
        Перемещает файл в каталог месяца.

        Последовательность: копирование, восстановление времени изменения,
        (при включенной проверке) сравнение хешей, удаление исходного файла.
        При ошибке на любом шаге исходный файл остается на месте, откат
        уже выполненных шагов не производится.

        Args:
            entry: Файл входящего каталога
            processed_dir: Корневой каталог назначения

        Returns:
            Path: Путь к перемещенному файлу

        Raises:
            FileOperationError: Если произошла ошибка на одном из шагов
        """
        month_dir = self.ensure_month_directory(processed_dir, entry.modified_at)
        target_path = month_dir / entry.name

        self.copy_file(entry.source_path, target_path)
        self.restore_timestamp(target_path, entry.mtime_ns)

        if self.sorter_config.verify_copy:
            self.verify_copy(entry.source_path, target_path)

        self.remove_file(entry.source_path)

        self.logger.log_file_moved(entry.name, entry.source_path, target_path)
        return target_path


def create_file_ops(sorter_config: SorterConfig, logger: FileSorterLogger) -> FileOps:
    """
    Удобная функция для создания объекта операций с файлами.

    Args:
        sorter_config: Конфигурация сортировки
        logger: Логгер

    Returns:
        FileOps: Объект операций с файлами
    """
    return FileOps(sorter_config, logger)
