"""Узкий интерфейс к платформенной библиотеке изображений и его реализация на Pillow.

Принципы:
- DIP: извлечение и восстановление пикселей зависят только от `ImageBackend`/`Surface`.
- OCP: другая библиотека подключается новой реализацией интерфейса.
"""
from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, BinaryIO, Union
from urllib.parse import urlparse
from urllib.request import url2pathname

import numpy as np
from PIL import Image, UnidentifiedImageError

from argbimage.errors import DecodeError, EncodeError, SurfaceError
from argbimage.models.layout import SurfaceLayout
from argbimage.models.raw_bitmap import RawBitmap

logger = logging.getLogger(__name__)

Source = Union[str, Path, bytes, bytearray, memoryview, BinaryIO]

_MODE_BY_SAMPLES = {1: "L", 2: "LA", 3: "RGB", 4: "RGBA"}


class Surface(ABC):
    """Поверхность рисования с заданной раскладкой байтов."""

    @abstractmethod
    def draw(self, image: Any) -> None:
        """Рисует растр в начало координат без масштабирования."""

    @abstractmethod
    def read_bytes(self) -> bytes:
        """Возвращает байты поверхности в раскладке, заданной при создании."""


class ImageBackend(ABC):
    """Декодер, поставщик поверхностей и кодировщик."""

    @abstractmethod
    def decode(self, source: Source) -> Any:
        """Декодирует источник в растр или бросает `DecodeError`."""

    @abstractmethod
    def size_of(self, image: Any) -> tuple[int, int]:
        """Размер растра в пикселях (width, height)."""

    @abstractmethod
    def create_surface(self, width: int, height: int, layout: SurfaceLayout) -> Surface:
        """Создаёт поверхность или бросает `SurfaceError`."""

    @abstractmethod
    def wrap(self, buffer: bytes, width: int, height: int, layout: SurfaceLayout) -> Any:
        """Строит отображаемый растр поверх буфера в раскладке `layout`."""

    @abstractmethod
    def encode(self, bitmap: RawBitmap, format: str = "PNG", **properties: Any) -> bytes:
        """Кодирует растр в контейнер `format` или бросает `EncodeError`."""


def _check_layout(layout: SurfaceLayout) -> None:
    if layout.bits_per_component != 8 or layout.bytes_per_pixel != 4:
        raise SurfaceError(
            f"Поддерживается только 8 бит/компоненту и 4 байта/пиксель, "
            f"получено {layout.bits_per_component}/{layout.bytes_per_pixel}"
        )


def open_source(source: Source) -> Union[Path, BinaryIO]:
    """Приводит источник к тому, что понимает `Image.open`.

    Поддерживаются пути, `file://` URL, байты и файловые объекты.
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(source))
    if isinstance(source, str) and "://" in source:
        parsed = urlparse(source)
        if parsed.scheme != "file":
            raise DecodeError(f"Неподдерживаемая схема URL: {parsed.scheme}")
        return Path(url2pathname(parsed.path))
    if isinstance(source, (str, Path)):
        return Path(source)
    if hasattr(source, "read"):
        return source
    raise DecodeError(f"Неподдерживаемый источник: {type(source).__name__}")


class PILSurface(Surface):
    """Поверхность на базе изображения PIL в режиме "RGBa" (premultiplied)."""

    def __init__(self, width: int, height: int, layout: SurfaceLayout) -> None:
        _check_layout(layout)
        self.layout = layout
        try:
            self._canvas = Image.new("RGBa", (width, height), 0)
        except (ValueError, MemoryError) as exc:
            raise SurfaceError(f"Не удалось создать поверхность {width}x{height}") from exc

    def draw(self, image: Image.Image) -> None:
        if 0 in self._canvas.size:
            return
        try:
            if image.mode != "RGBa":
                if image.mode != "RGBA":
                    image = image.convert("RGBA")
                image = image.convert("RGBa")
        except ValueError as exc:
            raise SurfaceError(f"Режим {image.mode} нельзя нарисовать на поверхности") from exc
        self._canvas.paste(image, (0, 0))

    def read_bytes(self) -> bytes:
        canvas = self._canvas if self.layout.premultiplied else self._canvas.convert("RGBA")
        words = np.frombuffer(canvas.tobytes(), dtype=np.uint8).reshape(-1, 4)
        index = ["RGBA".index(channel) for channel in self.layout.byte_sequence]
        return words[:, index].tobytes()


class PILBackend(ImageBackend):
    """Реализация коллабораторов на Pillow."""

    def decode(self, source: Source) -> Image.Image:
        fp = open_source(source)
        if isinstance(fp, Path) and not fp.is_file():
            raise DecodeError(f"Файл не найден: {fp}")
        try:
            with Image.open(fp) as img:
                decoded = img.copy()
        except UnidentifiedImageError as exc:
            raise DecodeError(f"Источник не является изображением: {fp}") from exc
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise DecodeError(f"Не удалось декодировать изображение: {fp}") from exc
        logger.debug("Декодировано %s: %sx%s %s", fp, decoded.width, decoded.height, decoded.mode)
        return decoded

    def size_of(self, image: Image.Image) -> tuple[int, int]:
        if not isinstance(image, Image.Image):
            raise DecodeError(f"Ожидалось изображение PIL, получено {type(image).__name__}")
        return image.size

    def create_surface(self, width: int, height: int, layout: SurfaceLayout) -> PILSurface:
        return PILSurface(width, height, layout)

    def wrap(self, buffer: bytes, width: int, height: int, layout: SurfaceLayout) -> Image.Image:
        _check_layout(layout)
        words = np.frombuffer(buffer, dtype=np.uint8).reshape(-1, 4)
        index = [layout.byte_sequence.index(channel) for channel in "RGBA"]
        rgba = words[:, index].tobytes()
        mode = "RGBa" if layout.premultiplied else "RGBA"
        return Image.frombytes(mode, (width, height), rgba)

    def encode(self, bitmap: RawBitmap, format: str = "PNG", **properties: Any) -> bytes:
        image = self._bitmap_to_image(bitmap)
        out = io.BytesIO()
        try:
            image.save(out, format=format.upper(), **properties)
        except (KeyError, OSError, ValueError) as exc:
            raise EncodeError(f"Не удалось закодировать растр как {format}") from exc
        return out.getvalue()

    # ---- Helpers ----
    def _bitmap_to_image(self, bitmap: RawBitmap) -> Image.Image:
        if bitmap.bits_per_sample != 8 or bitmap.is_planar:
            raise EncodeError("Кодируются только 8-битные interleaved растры")
        mode = _MODE_BY_SAMPLES[bitmap.samples_per_pixel]
        raw = np.ascontiguousarray(bitmap.as_array()).tobytes()
        if mode == "RGBA" and bitmap.premultiplied:
            return Image.frombytes("RGBa", bitmap.size, raw).convert("RGBA")
        return Image.frombytes(mode, bitmap.size, raw)


_default_backend = PILBackend()


def default_backend() -> ImageBackend:
    return _default_backend
