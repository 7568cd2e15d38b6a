"""
File Sorter Utility

Утилита для раскладывания файлов входящего каталога в структуру по месяцам (YYYY/MM).
"""

__version__ = "1.0.0"
__author__ = "File Sorter Team"
__description__ = "Utility for sorting files into a year/month directory structure"
