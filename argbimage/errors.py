"""Иерархия ошибок пакета.

Принципы:
- Каждая ошибка наследует и общий `ARGBImageError`, и подходящее встроенное
  исключение, чтобы вызывающий код мог ловить `ValueError`/`OSError` как раньше.
- Сервисы бросают ошибки; в `None` их превращают только конструкторы фасада.
"""
from __future__ import annotations


class ARGBImageError(Exception):
    """Базовая ошибка пакета."""


class DecodeError(ARGBImageError, ValueError):
    """Источник не удалось декодировать в растр."""


class SurfaceError(ARGBImageError, RuntimeError):
    """Поверхность рисования не создана или не поддерживает раскладку."""


class FormatError(ARGBImageError, ValueError):
    """У растра не 4 компоненты на пиксель."""


class SizeMismatchError(ARGBImageError, ValueError):
    """Длина буфера не равна width * height * 4."""


class DataCorruptionError(ARGBImageError, ValueError):
    """Длина буфера не кратна размеру группы каналов."""


class HeaderMismatchError(ARGBImageError, ValueError):
    """Буфер не начинается с заголовка ARGB."""


class EncodeError(ARGBImageError, OSError):
    """Кодировщик не смог упаковать растр в контейнер."""
