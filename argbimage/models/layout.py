"""Описание раскладки байтов пикселя.

Принципы:
- SRP: только данные о порядке каналов и формате поверхности.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

BIG_ENDIAN_32 = "big32"
LITTLE_ENDIAN_32 = "little32"


class ChannelOrder(Enum):
    """Порядок каналов внутри группы байтов одного пикселя."""
    ARGB = "ARGB"
    RGBA = "RGBA"
    RGB = "RGB"

    @property
    def bytes_per_pixel(self) -> int:
        return len(self.value)


@dataclass(frozen=True)
class SurfaceLayout:
    """Формат поверхности, в которую рисуется исходное изображение.

    Fields:
        bits_per_component: Бит на компоненту (поддерживается только 8).
        bytes_per_pixel: Байт на пиксель (поддерживается только 4).
        byte_order: "big32" или "little32" — порядок байтов в 32-битном слове.
        alpha_first: Альфа в старшем байте слова (ARGB), иначе в младшем (RGBA).
        premultiplied: Цвет уже умножен на альфу.
    """
    bits_per_component: int = 8
    bytes_per_pixel: int = 4
    byte_order: str = BIG_ENDIAN_32
    alpha_first: bool = True
    premultiplied: bool = True

    @property
    def word_order(self) -> str:
        """Порядок каналов в слове от старшего байта к младшему."""
        return "ARGB" if self.alpha_first else "RGBA"

    @property
    def byte_sequence(self) -> str:
        """Порядок каналов так, как они лежат в памяти."""
        order = self.word_order
        if self.byte_order == LITTLE_ENDIAN_32:
            return order[::-1]
        return order

    def stride(self, width: int) -> int:
        return width * self.bytes_per_pixel


# 8 бит на компоненту, big-endian слова, альфа первой, premultiplied.
CANONICAL_LAYOUT = SurfaceLayout()
