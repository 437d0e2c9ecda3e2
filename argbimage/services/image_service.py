"""Загрузка изображений из источника и запись закодированных растров.

Принципы:
- SRP: тонкая обёртка ввода-вывода вокруг `ImageBackend`.
- OCP: новые источники (стрим, URL) добавляются в `backend.open_source`.
- LSP/ISP: методы возвращают растр или байты и бросают ошибки пакета.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Union
from urllib.parse import urlparse
from urllib.request import url2pathname

from PIL import Image

from argbimage.errors import EncodeError
from argbimage.models.raw_bitmap import RawBitmap
from argbimage.services.backend import ImageBackend, Source, default_backend

logger = logging.getLogger(__name__)

Destination = Union[str, Path]


class ImageService:
    def __init__(self, backend: Optional[ImageBackend] = None) -> None:
        self.backend = backend or default_backend()

    def load_image(self, source: Source) -> Any:
        """Декодирует изображение из пути, `file://` URL, байтов или файлового объекта.

        Raises:
            DecodeError: если источник недоступен или не распознан как изображение.
        """
        return self.backend.decode(source)

    def encode_bitmap(self, bitmap: RawBitmap, format: str = "PNG", **properties: Any) -> bytes:
        """Кодирует растр в контейнер `format` (например, PNG) со свойствами формата."""
        return self.backend.encode(bitmap, format, **properties)

    def save_bitmap(
        self,
        bitmap: RawBitmap,
        destination: Destination,
        format: Optional[str] = None,
        **properties: Any,
    ) -> Path:
        """Кодирует растр и записывает его по пути или `file://` URL.

        Если `format` не задан, он определяется по расширению файла.

        Raises:
            EncodeError: формат не определён или кодирование не удалось.
            OSError: запись файла не удалась.
        """
        path = self._destination_path(destination)
        if format is None:
            format = self._format_for(path)
        data = self.encode_bitmap(bitmap, format, **properties)
        path.write_bytes(data)
        logger.debug("Записано %d байт в %s (%s)", len(data), path, format)
        return path

    # ---- Helpers ----
    def _destination_path(self, destination: Destination) -> Path:
        if isinstance(destination, str) and "://" in destination:
            parsed = urlparse(destination)
            if parsed.scheme != "file":
                raise EncodeError(f"Неподдерживаемая схема URL: {parsed.scheme}")
            return Path(url2pathname(parsed.path))
        return Path(destination)

    def _format_for(self, path: Path) -> str:
        extensions = Image.registered_extensions()
        format = extensions.get(path.suffix.lower())
        if format is None:
            raise EncodeError(f"Не удалось определить формат по расширению: {path}")
        return format
