"""
Тесты для модуля sorter.py
"""

import calendar
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from filesorter.sorter import Sorter, SortStats, SortError, create_sorter
from filesorter.config_loader import Config, SorterConfig
from filesorter.file_ops import FileOperationError
from filesorter.logger import FileSorterLogger


def make_file(path: Path, content: str, year: int, month: int, day: int = 15) -> Path:
    """Создает файл с временем изменения в середине указанного дня (UTC)."""
    mtime = calendar.timegm((year, month, day, 12, 0, 0))
    path.write_text(content)
    os.utime(path, (mtime, mtime))
    return path


def snapshot(root: Path) -> set:
    """Возвращает множество всех путей внутри каталога."""
    return {p.relative_to(root) for p in root.rglob('*')}


class TestSortStats:
    """Тесты для класса SortStats."""

    def test_sort_stats_initialization(self):
        """Тест инициализации статистики."""
        stats = SortStats()

        assert stats.total_files == 0
        assert stats.processed_files == 0
        assert stats.successful_files == 0
        assert stats.failed_files == 0
        assert stats.skipped_files == 0
        assert stats.start_time is None
        assert stats.end_time is None
        assert stats.errors == []

    def test_add_error(self):
        """Тест добавления ошибки."""
        stats = SortStats()
        stats.add_error("photo.jpg", Exception("Test error"))

        assert len(stats.errors) == 1
        assert stats.errors[0]['file_name'] == "photo.jpg"
        assert stats.errors[0]['error'] == "Test error"
        assert 'timestamp' in stats.errors[0]

    def test_get_duration(self):
        """Тест получения продолжительности."""
        stats = SortStats()
        assert stats.get_duration() is None

        stats.start_time = datetime(2024, 1, 1, 10, 0, 0)
        stats.end_time = datetime(2024, 1, 1, 10, 0, 30)
        assert stats.get_duration() == 30.0

    def test_get_success_rate(self):
        """Тест получения процента успешных перемещений."""
        stats = SortStats()
        assert stats.get_success_rate() == 0.0

        stats.processed_files = 4
        stats.successful_files = 3
        assert stats.get_success_rate() == 75.0

    def test_to_dict(self):
        """Тест преобразования в словарь."""
        stats = SortStats()
        stats.total_files = 10
        stats.processed_files = 10
        stats.successful_files = 9
        stats.failed_files = 1
        stats.skipped_files = 2
        stats.start_time = datetime(2024, 1, 1, 10, 0, 0)
        stats.end_time = datetime(2024, 1, 1, 10, 1, 0)

        result = stats.to_dict()

        assert result['total_files'] == 10
        assert result['successful_files'] == 9
        assert result['failed_files'] == 1
        assert result['skipped_files'] == 2
        assert result['start_time'] == '2024-01-01T10:00:00'
        assert result['duration_seconds'] == 60.0
        assert result['success_rate'] == 90.0
        assert result['error_count'] == 0


class TestSorter:
    """Тесты для класса Sorter."""

    @pytest.fixture
    def temp_dir(self):
        """Создает временную директорию для тестов."""
        temp_path = tempfile.mkdtemp()
        yield Path(temp_path)
        shutil.rmtree(temp_path, ignore_errors=True)

    @pytest.fixture
    def incoming(self, temp_dir):
        path = temp_dir / "incoming"
        path.mkdir()
        return path

    @pytest.fixture
    def processed(self, temp_dir):
        return temp_dir / "processed"

    @pytest.fixture
    def mock_logger(self):
        """Создает мок логгера."""
        return Mock(spec=FileSorterLogger)

    @pytest.fixture
    def sorter(self, mock_logger):
        """Создает сортировщик с конфигурацией по умолчанию."""
        return Sorter(Config(), mock_logger)

    def test_sorter_initialization(self, mock_logger):
        """Тест инициализации сортировщика."""
        config = Config()
        sorter = Sorter(config, mock_logger)

        assert sorter.config == config
        assert sorter.logger == mock_logger
        assert sorter.file_ops.sorter_config == config.sorter
        assert isinstance(sorter.stats, SortStats)

    def test_sort_directory_groups_by_month(self, sorter, incoming, processed):
        """Тест раскладывания файлов по каталогам YYYY/MM."""
        make_file(incoming / "jan.txt", "jan", 2023, 1)
        make_file(incoming / "mar.txt", "mar", 2023, 3)
        make_file(incoming / "mar2.txt", "mar2", 2023, 3, 28)
        make_file(incoming / "dec.txt", "dec", 2019, 12)

        stats = sorter.sort_directory(incoming, processed)

        assert stats.total_files == 4
        assert stats.successful_files == 4
        assert stats.failed_files == 0
        assert (processed / "2023" / "01" / "jan.txt").read_text() == "jan"
        assert (processed / "2023" / "03" / "mar.txt").read_text() == "mar"
        assert (processed / "2023" / "03" / "mar2.txt").read_text() == "mar2"
        assert (processed / "2019" / "12" / "dec.txt").read_text() == "dec"
        assert list(incoming.iterdir()) == []

    def test_sort_directory_preserves_mtime(self, sorter, incoming, processed):
        """Тест сохранения времени изменения перемещенных файлов."""
        source = make_file(incoming / "photo.jpg", "photo", 2022, 7)
        original_mtime_ns = source.stat().st_mtime_ns

        sorter.sort_directory(incoming, processed)

        moved = processed / "2022" / "07" / "photo.jpg"
        assert moved.stat().st_mtime_ns == original_mtime_ns
        assert not source.exists()

    def test_sort_directory_never_touches_reserved_entry(self, sorter, incoming, processed):
        """Тест: зарезервированная запись не копируется, не перемещается и не удаляется."""
        reserved = incoming / "@eaDir"
        reserved.mkdir()
        make_file(reserved / "SYNOFILE_THUMB.jpg", "thumb", 2020, 5)
        make_file(incoming / "photo.jpg", "photo", 2023, 3)

        stats = sorter.sort_directory(incoming, processed)

        assert stats.total_files == 1
        assert stats.skipped_files == 0
        assert (reserved / "SYNOFILE_THUMB.jpg").read_text() == "thumb"
        assert not any(p.name == "@eaDir" for p in processed.rglob('*'))
        assert not any(p.name == "SYNOFILE_THUMB.jpg" for p in processed.rglob('*'))

    def test_sort_empty_directory_mutates_nothing(self, sorter, incoming, processed):
        """Тест: пустой входящий каталог не изменяет файловую систему."""
        (incoming / "@eaDir").mkdir()
        before = snapshot(incoming)

        stats = sorter.sort_directory(incoming, processed)

        assert stats.total_files == 0
        assert stats.successful_files == 0
        assert not processed.exists()
        assert snapshot(incoming) == before

    def test_sort_directory_skips_subdirectories(self, sorter, incoming, processed):
        """Тест пропуска подкаталогов без рекурсивного обхода."""
        (incoming / "nested").mkdir()
        make_file(incoming / "nested" / "inner.txt", "inner", 2023, 3)
        make_file(incoming / "top.txt", "top", 2023, 3)

        stats = sorter.sort_directory(incoming, processed)

        assert stats.total_files == 1
        assert stats.skipped_files == 1
        assert (incoming / "nested" / "inner.txt").exists()
        assert (processed / "2023" / "03" / "top.txt").exists()

    def test_sort_directory_continues_after_file_error(self, sorter, incoming, processed, mock_logger):
        """Тест: ошибка по одному файлу не прерывает обработку остальных."""
        make_file(incoming / "a.txt", "a", 2023, 3)
        make_file(incoming / "b.txt", "b", 2023, 4)
        make_file(incoming / "c.txt", "c", 2023, 5)

        original_copy = sorter.file_ops.copy_file

        def failing_copy(source_path, target_path):
            if source_path.name == "b.txt":
                raise FileOperationError("disk full")
            return original_copy(source_path, target_path)

        with patch.object(sorter.file_ops, 'copy_file', side_effect=failing_copy):
            stats = sorter.sort_directory(incoming, processed)

        assert stats.processed_files == 3
        assert stats.successful_files == 2
        assert stats.failed_files == 1
        assert stats.errors[0]['file_name'] == "b.txt"
        assert (incoming / "b.txt").exists()
        assert (processed / "2023" / "03" / "a.txt").exists()
        assert (processed / "2023" / "05" / "c.txt").exists()
        mock_logger.log_file_error.assert_called_once()

    def test_sort_directory_missing_incoming(self, sorter, temp_dir, processed, mock_logger):
        """Тест ошибки при отсутствии входящего каталога."""
        with pytest.raises(SortError, match="Входящий каталог не найден"):
            sorter.sort_directory(temp_dir / "missing", processed)

        assert sorter.stats.end_time is not None
        mock_logger.log_critical_error.assert_called_once()

    def test_sort_directory_logs_start_and_end(self, sorter, incoming, processed, mock_logger):
        """Тест логирования начала и завершения сортировки."""
        make_file(incoming / "a.txt", "a", 2023, 3)

        sorter.sort_directory(incoming, processed)

        mock_logger.log_sort_start.assert_called_once_with(incoming, processed, 1)
        mock_logger.log_sort_end.assert_called_once_with(
            processed_files=1, successful_files=1, failed_files=0, skipped_files=0
        )

    def test_sort_directory_resets_stats(self, sorter, incoming, processed):
        """Тест: каждый запуск начинается с новой статистики."""
        make_file(incoming / "a.txt", "a", 2023, 3)
        sorter.sort_directory(incoming, processed)

        make_file(incoming / "b.txt", "b", 2023, 3)
        stats = sorter.sort_directory(incoming, processed)

        assert stats.total_files == 1
        assert stats.successful_files == 1

    def test_sort_directory_custom_reserved_names(self, mock_logger, incoming, processed):
        """Тест настраиваемого списка зарезервированных имен."""
        config = Config(sorter=SorterConfig(reserved_names=['@eaDir', 'Thumbs.db']))
        sorter = Sorter(config, mock_logger)
        make_file(incoming / "Thumbs.db", "thumbs", 2023, 3)
        make_file(incoming / "photo.jpg", "photo", 2023, 3)

        stats = sorter.sort_directory(incoming, processed)

        assert stats.successful_files == 1
        assert (incoming / "Thumbs.db").exists()

    def test_process_file_failure_returns_false(self, sorter, incoming, processed):
        """Тест обработки ошибки одного файла."""
        source = make_file(incoming / "a.txt", "a", 2023, 3)
        entry = sorter.file_ops.list_files(incoming)[0]
        source.unlink()

        assert sorter.process_file(entry, processed) is False
        assert len(sorter.stats.errors) == 1


class TestCreateSorter:
    """Тесты для функции create_sorter."""

    def test_create_sorter(self):
        """Тест создания сортировщика."""
        config = Config()
        mock_logger = Mock(spec=FileSorterLogger)

        with patch('filesorter.sorter.Sorter') as mock_sorter_class:
            mock_instance = Mock()
            mock_sorter_class.return_value = mock_instance

            result = create_sorter(config, mock_logger)

            assert result == mock_instance
            mock_sorter_class.assert_called_once_with(config, mock_logger)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
