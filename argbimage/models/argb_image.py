"""Изображение в формате ARGB с доступом к сырым байтам пикселей.

Принципы:
- SRP: хранит растр, размер и канонический буфер; вычисления делегирует сервисам.
- Чистый код: неизменяемость (`frozen=True`); производные виды не хранятся.
- Конструкторы `from_*` не бросают ошибок: при неудаче возвращают `None`.

Пример:
    image = ARGBImage.from_url("file:///tmp/icon.png", include_header=True)
    if image is not None:
        print(image.hexliterals(var_name="icon_pixels"))
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from argbimage.errors import ARGBImageError, SizeMismatchError
from argbimage.models.layout import ChannelOrder
from argbimage.models.raw_bitmap import RawBitmap
from argbimage.services.backend import ImageBackend, Source, default_backend
from argbimage.services.channel_service import BytesLike, ChannelService
from argbimage.services.extract_service import ExtractService
from argbimage.services.header_service import HEADER_LENGTH, has_header as starts_with_header
from argbimage.services.hex_service import hexliterals
from argbimage.services.image_service import Destination, ImageService
from argbimage.services.reconstruct_service import ReconstructService

logger = logging.getLogger(__name__)

_channels = ChannelService()


@dataclass(frozen=True)
class ARGBImage:
    """Неизменяемая модель изображения и его ARGB пикселей.

    Fields:
        image: Отображаемый растр бэкенда (для PIL — `Image.Image`).
        width: Ширина, px.
        height: Высота, px.
        argb_pixels: A, R, G, B на пиксель; может начинаться с заголовка "ARGB".
        backend: Бэкенд для восстановления и сохранения.
    """
    image: Any = field(compare=False, repr=False)
    width: int
    height: int
    argb_pixels: bytes = field(repr=False)
    backend: ImageBackend = field(default_factory=default_backend, compare=False, repr=False)

    def __post_init__(self) -> None:
        expected = self.width * self.height * 4
        length = len(self.argb_pixels)
        tagged = length == expected + HEADER_LENGTH and starts_with_header(self.argb_pixels)
        if length != expected and not tagged:
            raise SizeMismatchError(
                f"Длина буфера {length} не соответствует {self.width}x{self.height}x4"
            )

    # ---- Construction ----
    @classmethod
    def from_url(
        cls,
        url: Source,
        include_header: bool = False,
        backend: Optional[ImageBackend] = None,
    ) -> Optional["ARGBImage"]:
        """Загружает изображение по пути или `file://` URL; `None`, если не вышло."""
        service = ImageService(backend)
        try:
            image = service.load_image(url)
        except ARGBImageError as exc:
            logger.warning("Не удалось загрузить %s: %s", url, exc)
            return None
        return cls.from_image(image, include_header=include_header, backend=service.backend)

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        include_header: bool = False,
        backend: Optional[ImageBackend] = None,
    ) -> Optional["ARGBImage"]:
        """Декодирует закодированные данные (PNG, JPEG, ...) из памяти."""
        return cls.from_url(bytes(data), include_header=include_header, backend=backend)

    @classmethod
    def from_image(
        cls,
        image: Any,
        include_header: bool = False,
        backend: Optional[ImageBackend] = None,
    ) -> Optional["ARGBImage"]:
        """Извлекает пиксели из декодированного растра.

        Растр вызывающего не копируется и не изменяется.
        """
        extractor = ExtractService(backend)
        try:
            extraction = extractor.extract_image(image, include_header)
        except ARGBImageError as exc:
            logger.warning("Не удалось извлечь пиксели: %s", exc)
            return None
        return cls(
            image=image,
            width=extraction.width,
            height=extraction.height,
            argb_pixels=extraction.pixels,
            backend=extractor.backend,
        )

    @classmethod
    def from_bitmap(
        cls,
        bitmap: RawBitmap,
        include_header: bool = False,
        backend: Optional[ImageBackend] = None,
    ) -> Optional["ARGBImage"]:
        """Сэмплирует 4-компонентный `RawBitmap`; для других растров `None`."""
        extractor = ExtractService(backend)
        try:
            extraction = extractor.extract_bitmap(bitmap, include_header)
            image = ReconstructService(extractor.backend).to_image(
                extraction.pixels, extraction.width, extraction.height
            )
        except ARGBImageError as exc:
            logger.warning("Растр не принят: %s", exc)
            return None
        return cls(
            image=image,
            width=extraction.width,
            height=extraction.height,
            argb_pixels=extraction.pixels,
            backend=extractor.backend,
        )

    @classmethod
    def from_pixels(
        cls,
        argb: BytesLike,
        width: int,
        height: int,
        backend: Optional[ImageBackend] = None,
    ) -> Optional["ARGBImage"]:
        """Строит изображение из готового ARGB буфера (с заголовком или без)."""
        reconstructor = ReconstructService(backend)
        try:
            image = reconstructor.to_image(argb, width, height)
        except ARGBImageError as exc:
            logger.warning("Буфер не принят: %s", exc)
            return None
        return cls(
            image=image,
            width=width,
            height=height,
            argb_pixels=bytes(argb),
            backend=reconstructor.backend,
        )

    # ---- Derived views ----
    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def has_header(self) -> bool:
        return len(self.argb_pixels) == self.width * self.height * 4 + HEADER_LENGTH

    @property
    def pixel_data(self) -> bytes:
        """ARGB пиксели без заголовка."""
        if self.has_header:
            return self.argb_pixels[HEADER_LENGTH:]
        return self.argb_pixels

    @property
    def rgba_pixels(self) -> bytes:
        return _channels.to_rgba(self.pixel_data)

    @property
    def rgb_pixels(self) -> bytes:
        return _channels.to_rgb(self.pixel_data)

    def pixels(self, order: ChannelOrder = ChannelOrder.ARGB) -> bytes:
        return _channels.convert(self.pixel_data, ChannelOrder.ARGB, order)

    def hexliterals(
        self,
        var_name: Optional[str] = None,
        per_row: int = 16,
        group_count: int = 4,
        group_spacer: str = " ",
    ) -> str:
        """Буфер (включая заголовок, если он есть) в виде шестнадцатеричных литералов."""
        return hexliterals(
            self.argb_pixels,
            var_name=var_name,
            per_row=per_row,
            group_count=group_count,
            group_spacer=group_spacer,
        )

    def __str__(self) -> str:
        return self.hexliterals()

    # ---- Export ----
    def to_image(self) -> Any:
        """Новый растр бэкенда, построенный из буфера."""
        return ReconstructService(self.backend).to_image(self.argb_pixels, self.width, self.height)

    def to_bitmap(self) -> RawBitmap:
        return ReconstructService(self.backend).to_raw_bitmap(self.argb_pixels, self.width, self.height)

    def encode(self, format: str = "PNG", **properties: Any) -> bytes:
        """Кодирует изображение в `format`.

        Raises:
            EncodeError: кодировщик не справился.
        """
        return ImageService(self.backend).encode_bitmap(self.to_bitmap(), format, **properties)

    def save(self, destination: Destination, format: Optional[str] = None, **properties: Any) -> Path:
        """Сохраняет изображение; формат по умолчанию берётся из расширения.

        Raises:
            EncodeError: формат не определён или кодирование не удалось.
            OSError: запись не удалась.
        """
        return ImageService(self.backend).save_bitmap(self.to_bitmap(), destination, format, **properties)
