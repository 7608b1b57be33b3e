"""Ошибки командной строки и контейнера BMP.

Каждый вид ошибки несёт собственный код завершения процесса; в код их
переводит только точка входа `bmpfilter.main`.
"""
from __future__ import annotations


class BitmapFilterError(Exception):
    exit_code: int = 1


class InvalidFilterError(BitmapFilterError):
    exit_code = 1


class MultipleFiltersError(BitmapFilterError):
    exit_code = 2


class UsageError(BitmapFilterError):
    exit_code = 3


class OpenInputError(BitmapFilterError):
    exit_code = 4


class CreateOutputError(BitmapFilterError):
    exit_code = 5


class UnsupportedFormatError(BitmapFilterError):
    exit_code = 6


class TruncatedBitmapError(UnsupportedFormatError):
    """Данных меньше, чем требуют заголовки."""
