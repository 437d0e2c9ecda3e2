"""Восстановление изображения из канонического ARGB буфера."""
from __future__ import annotations

import logging
from typing import Any, Optional

from argbimage.errors import SizeMismatchError
from argbimage.models.layout import CANONICAL_LAYOUT, SurfaceLayout
from argbimage.models.raw_bitmap import RawBitmap
from argbimage.services.backend import ImageBackend, default_backend
from argbimage.services.channel_service import BytesLike, ChannelService
from argbimage.services.header_service import HEADER_LENGTH, has_header

logger = logging.getLogger(__name__)


def canonical_pixels(buffer: BytesLike, width: int, height: int) -> bytes:
    """Снимает заголовок, если он есть, и проверяет длину width * height * 4.

    Raises:
        SizeMismatchError: длина буфера не соответствует размерам.
    """
    if width < 0 or height < 0:
        raise SizeMismatchError(f"Отрицательный размер: {width}x{height}")
    expected = width * height * 4
    if len(buffer) == expected + HEADER_LENGTH and has_header(buffer):
        buffer = buffer[HEADER_LENGTH:]
    if len(buffer) != expected:
        raise SizeMismatchError(
            f"Длина буфера {len(buffer)} не равна {width}x{height}x4 = {expected}"
        )
    return bytes(buffer)


class ReconstructService:
    def __init__(
        self,
        backend: Optional[ImageBackend] = None,
        layout: SurfaceLayout = CANONICAL_LAYOUT,
        channels: Optional[ChannelService] = None,
    ) -> None:
        self.backend = backend or default_backend()
        self.layout = layout
        self.channels = channels or ChannelService()

    def to_image(self, buffer: BytesLike, width: int, height: int) -> Any:
        """Строит отображаемый растр бэкенда поверх ARGB буфера."""
        pixels = canonical_pixels(buffer, width, height)
        image = self.backend.wrap(pixels, width, height, self.layout)
        logger.debug("Восстановлен растр %sx%s", width, height)
        return image

    def to_raw_bitmap(self, buffer: BytesLike, width: int, height: int) -> RawBitmap:
        """Копирует RGBA вид буфера в 8-битный interleaved растр с шагом width * 4."""
        pixels = canonical_pixels(buffer, width, height)
        rgba = self.channels.to_rgba(pixels)
        bitmap = RawBitmap.empty(width, height, premultiplied=self.layout.premultiplied)
        bitmap.data[:] = rgba
        return bitmap
