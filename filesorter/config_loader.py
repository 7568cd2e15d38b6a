"""
Модуль для загрузки и валидации конфигурации приложения.

Конфигурация необязательна: без файла используются значения по умолчанию,
при указании файла параметры читаются из INI с валидацией.
"""

import configparser
from pathlib import Path
from typing import List, Optional
from dataclasses import dataclass, field


DEFAULT_RESERVED_NAMES = ['@eaDir']
SUPPORTED_HASH_ALGORITHMS = ['md5', 'sha1', 'sha256']
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


@dataclass
class SorterConfig:
    """Конфигурация параметров сортировки."""
    reserved_names: List[str] = field(default_factory=lambda: list(DEFAULT_RESERVED_NAMES))
    use_utc: bool = True
    verify_copy: bool = False
    hash_algorithm: str = 'md5'


@dataclass
class LoggingConfig:
    """Конфигурация логирования."""
    level: str = 'WARNING'
    log_file: Optional[Path] = None
    max_log_size: int = 10
    backup_count: int = 5


@dataclass
class Config:
    """Основная конфигурация приложения."""
    sorter: SorterConfig = field(default_factory=SorterConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """Класс для загрузки и валидации конфигурации."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Инициализация загрузчика конфигурации.

        Args:
            config_path: Путь к файлу конфигурации (None - значения по умолчанию)
        """
        self.config_path = Path(config_path) if config_path else None
        self._config: Optional[Config] = None

    def load_config(self) -> Config:
        """
        Загружает конфигурацию из файла или создает конфигурацию по умолчанию.

        Returns:
            Config: Объект конфигурации

        Raises:
            FileNotFoundError: Если файл конфигурации не найден
            ValueError: Если конфигурация некорректна
        """
        if self.config_path is None:
            self._config = Config()
            return self._config

        if not self.config_path.exists():
            raise FileNotFoundError(f"Файл конфигурации не найден: {self.config_path}")

        config_parser = configparser.ConfigParser(inline_comment_prefixes=(';', '#'))

        try:
            config_parser.read(self.config_path, encoding='utf-8')

            self._config = Config(
                sorter=self._load_sorter_config(config_parser),
                logging=self._load_logging_config(config_parser)
            )

            self._validate_config()

            return self._config

        except Exception as e:
            self._config = None
            raise ValueError(f"Ошибка загрузки конфигурации: {e}")

    def _load_sorter_config(self, parser: configparser.ConfigParser) -> SorterConfig:
        """Загружает конфигурацию сортировки."""
        section = 'sorter'

        if not parser.has_section(section):
            return SorterConfig()

        raw_names = parser.get(section, 'reserved_names', fallback=','.join(DEFAULT_RESERVED_NAMES))

        return SorterConfig(
            reserved_names=[name.strip() for name in raw_names.split(',')],
            use_utc=parser.getboolean(section, 'use_utc', fallback=True),
            verify_copy=parser.getboolean(section, 'verify_copy', fallback=False),
            hash_algorithm=parser.get(section, 'hash_algorithm', fallback='md5').lower()
        )

    def _load_logging_config(self, parser: configparser.ConfigParser) -> LoggingConfig:
        """Загружает конфигурацию логирования."""
        section = 'logging'

        if not parser.has_section(section):
            return LoggingConfig()

        log_file = parser.get(section, 'log_file', fallback='').strip()

        return LoggingConfig(
            level=parser.get(section, 'level', fallback='WARNING'),
            log_file=Path(log_file) if log_file else None,
            max_log_size=parser.getint(section, 'max_log_size', fallback=10),
            backup_count=parser.getint(section, 'backup_count', fallback=5)
        )

    def _validate_config(self) -> None:
        """Валидирует загруженную конфигурацию."""
        if not self._config:
            raise ValueError("Конфигурация не загружена")

        sorter = self._config.sorter

        if any(not name for name in sorter.reserved_names):
            raise ValueError("Пустое имя в списке зарезервированных записей")

        if sorter.hash_algorithm not in SUPPORTED_HASH_ALGORITHMS:
            raise ValueError(f"Неподдерживаемый алгоритм хеширования: {sorter.hash_algorithm}")

        if self._config.logging.max_log_size <= 0:
            raise ValueError("Размер файла лога должен быть больше 0")

        if self._config.logging.backup_count < 0:
            raise ValueError("Количество резервных копий лога не может быть отрицательным")

        if self._config.logging.level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Некорректный уровень логирования: {self._config.logging.level}")

    def get_config(self) -> Config:
        """
        Возвращает загруженную конфигурацию.

        Raises:
            ValueError: Если конфигурация не загружена
        """
        if self._config is None:
            raise ValueError("Конфигурация не загружена. Вызовите load_config() сначала.")
        return self._config

    def reload_config(self) -> Config:
        """Перезагружает конфигурацию из файла."""
        self._config = None
        return self.load_config()


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Удобная функция для быстрой загрузки конфигурации.

    Args:
        config_path: Путь к файлу конфигурации (None - значения по умолчанию)

    Returns:
        Config: Объект конфигурации
    """
    loader = ConfigLoader(config_path)
    return loader.load_config()
