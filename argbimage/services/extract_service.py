"""Извлечение канонического ARGB буфера из изображения.

Два пути:
- декодированный растр рисуется на поверхность с канонической раскладкой
  (8 бит/компоненту, big-endian слова, альфа первой, premultiplied) и
  байты читаются обратно;
- `RawBitmap` с 4 компонентами сэмплируется попиксельно: компонента 0.0–1.0
  умножается на 255 и отбрасывается дробная часть.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, NamedTuple, Optional

import numpy as np

from argbimage.errors import FormatError, SurfaceError
from argbimage.models.layout import CANONICAL_LAYOUT, SurfaceLayout
from argbimage.models.raw_bitmap import RawBitmap
from argbimage.services.backend import ImageBackend, default_backend
from argbimage.services.header_service import with_header

logger = logging.getLogger(__name__)

# (r, g, b, a) -> (a, r, g, b)
_ARGB_FROM_RGBA = [3, 0, 1, 2]


class Extraction(NamedTuple):
    pixels: bytes
    width: int
    height: int


def scale_components(components: np.ndarray) -> np.ndarray:
    """float 0.0–1.0 -> uint8 через умножение на 255 с отбрасыванием дробной части."""
    return np.trunc(components * 255.0).astype(np.uint8)


class ExtractService:
    def __init__(self, backend: Optional[ImageBackend] = None, layout: SurfaceLayout = CANONICAL_LAYOUT) -> None:
        self.backend = backend or default_backend()
        self.layout = layout

    def extract(self, source: Any, include_header: bool = False) -> Extraction:
        """Возвращает ARGB буфер и размеры для любого поддерживаемого источника.

        Источник: `RawBitmap`, декодированный растр бэкенда, либо
        закодированные данные (путь, `file://` URL, байты, файловый объект).

        Raises:
            DecodeError: источник не декодируется.
            SurfaceError: поверхность не создана.
            FormatError: у `RawBitmap` не 4 компоненты на пиксель.
        """
        if isinstance(source, RawBitmap):
            return self.extract_bitmap(source, include_header)
        if isinstance(source, (str, Path, bytes, bytearray, memoryview)) or hasattr(source, "read"):
            source = self.backend.decode(source)
        return self.extract_image(source, include_header)

    def extract_image(self, image: Any, include_header: bool = False) -> Extraction:
        """Рисует растр на поверхность с раскладкой `self.layout` и читает байты."""
        width, height = self.backend.size_of(image)
        surface = self.backend.create_surface(width, height, self.layout)
        surface.draw(image)
        pixels = surface.read_bytes()

        expected = self.layout.stride(width) * height
        if len(pixels) != expected:
            raise SurfaceError(f"Поверхность вернула {len(pixels)} байт вместо {expected}")
        logger.debug("Извлечено %d байт с поверхности %sx%s", len(pixels), width, height)
        return self._finish(pixels, width, height, include_header)

    def extract_bitmap(self, bitmap: RawBitmap, include_header: bool = False) -> Extraction:
        """Сэмплирует 4-компонентный растр в порядке A, R, G, B.

        Цвет растра с прямой альфой умножается на альфу до масштабирования.
        """
        if bitmap.samples_per_pixel != 4:
            raise FormatError(
                f"Растр не в формате RGBA: {bitmap.samples_per_pixel} компонент(ы) на пиксель"
            )
        bitmap.validate()
        if bitmap.bits_per_sample == 8 and not bitmap.is_planar and bitmap.has_alpha:
            components = self._components_direct(bitmap)
        else:
            components = self._components_sampled(bitmap)
        if not bitmap.premultiplied:
            components[:, 1:] *= components[:, :1]
        pixels = scale_components(components).tobytes()
        logger.debug("Сэмплировано %d байт из растра %sx%s", len(pixels), bitmap.width, bitmap.height)
        return self._finish(pixels, bitmap.width, bitmap.height, include_header)

    # ---------- Вспомогательные функции ----------
    def _components_direct(self, bitmap: RawBitmap) -> np.ndarray:
        """Прямой доступ к 8-битным компонентам, та же арифметика, что у `color_at`."""
        samples = bitmap.as_array().reshape(-1, 4).astype(np.float64) / 255.0
        return samples[:, _ARGB_FROM_RGBA]

    def _components_sampled(self, bitmap: RawBitmap) -> np.ndarray:
        """Медленный путь через `color_at` для planar и 16-битных растров."""
        width = bitmap.width
        components = np.empty((width * bitmap.height, 4), dtype=np.float64)
        for i in range(components.shape[0]):
            r, g, b, a = bitmap.color_at(i % width, i // width)
            components[i] = (a, r, g, b)
        return components

    def _finish(self, pixels: bytes, width: int, height: int, include_header: bool) -> Extraction:
        if include_header:
            pixels = with_header(pixels)
        return Extraction(pixels=pixels, width=width, height=height)
