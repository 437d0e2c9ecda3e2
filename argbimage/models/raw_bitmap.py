"""Растр с известной раскладкой памяти (аналог bitmap-представления).

Принципы:
- SRP: хранит байты и описание раскладки, умеет отдавать компоненты пикселя.
- Логика извлечения ARGB живёт в `services.extract_service`, не здесь.

16-битные компоненты хранятся big-endian, как в PNG.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np
from PIL import Image

from argbimage.errors import FormatError

_SAMPLES_BY_MODE = {"L": 1, "LA": 2, "RGB": 3, "RGBA": 4}


@dataclass
class RawBitmap:
    """Растр с явным числом компонент на пиксель.

    Fields:
        width: Ширина, px.
        height: Высота, px.
        samples_per_pixel: Число компонент на пиксель (1..4).
        bits_per_sample: 8 или 16.
        has_alpha: Последняя компонента — альфа.
        is_planar: Каждая компонента в своей плоскости.
        bytes_per_row: Шаг строки (внутри плоскости для planar); 0 — вычислить.
        data: Байты растра.
        premultiplied: Цвет умножен на альфу.
    """
    width: int
    height: int
    samples_per_pixel: int = 4
    bits_per_sample: int = 8
    has_alpha: bool = True
    is_planar: bool = False
    bytes_per_row: int = 0
    data: Optional[bytearray] = None
    premultiplied: bool = True
    _max_value: int = field(init=False, repr=False, default=255)

    def __post_init__(self) -> None:
        if self.bytes_per_row == 0 and self.bits_per_sample in (8, 16):
            self.bytes_per_row = self._min_row_length()
        if self.data is None and self.bytes_per_row >= 0 and self.height >= 0:
            self.data = bytearray(self.expected_length)
        self.validate()
        self._max_value = (1 << self.bits_per_sample) - 1

    def validate(self) -> None:
        """Проверяет согласованность размеров, шага строки и длины буфера.

        Raises:
            FormatError: раскладка не описывает буфер.
        """
        if self.width < 0 or self.height < 0:
            raise FormatError(f"Отрицательный размер растра: {self.width}x{self.height}")
        if self.bits_per_sample not in (8, 16):
            raise FormatError(f"Неподдерживаемая глубина: {self.bits_per_sample} бит")
        if not 1 <= self.samples_per_pixel <= 4:
            raise FormatError(f"Неподдерживаемое число компонент: {self.samples_per_pixel}")
        min_row = self._min_row_length()
        if self.bytes_per_row < min_row:
            raise FormatError(f"Шаг строки {self.bytes_per_row} меньше длины строки {min_row}")
        if self.data is None or len(self.data) < self.expected_length:
            found = 0 if self.data is None else len(self.data)
            raise FormatError(f"Буфер растра короче ожидаемого: {found} < {self.expected_length}")

    def _min_row_length(self) -> int:
        return self.width * (self.sample_size if self.is_planar else self.bytes_per_pixel)

    @property
    def sample_size(self) -> int:
        return self.bits_per_sample // 8

    @property
    def bytes_per_pixel(self) -> int:
        return self.samples_per_pixel * self.sample_size

    @property
    def expected_length(self) -> int:
        planes = self.samples_per_pixel if self.is_planar else 1
        return self.bytes_per_row * self.height * planes

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def _sample_offset(self, x: int, y: int, sample: int) -> int:
        if self.is_planar:
            plane = sample * self.bytes_per_row * self.height
            return plane + y * self.bytes_per_row + x * self.sample_size
        return y * self.bytes_per_row + (x * self.samples_per_pixel + sample) * self.sample_size

    def _sample(self, x: int, y: int, sample: int) -> float:
        offset = self._sample_offset(x, y, sample)
        raw = int.from_bytes(self.data[offset:offset + self.sample_size], "big")
        return raw / self._max_value

    def color_at(self, x: int, y: int) -> Tuple[float, float, float, float]:
        """Возвращает компоненты (r, g, b, a) пикселя в диапазоне 0.0–1.0.

        Серые растры отдают одинаковые r, g, b; без альфы a = 1.0.
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Пиксель ({x}, {y}) вне растра {self.width}x{self.height}")
        samples = [self._sample(x, y, s) for s in range(self.samples_per_pixel)]
        color_count = self.samples_per_pixel - 1 if self.has_alpha else self.samples_per_pixel
        alpha = samples[-1] if self.has_alpha else 1.0
        if color_count == 1:
            return samples[0], samples[0], samples[0], alpha
        return samples[0], samples[1], samples[2], alpha

    def as_array(self) -> np.ndarray:
        """Вид на 8-битный interleaved растр формы (height, width, samples)."""
        if self.bits_per_sample != 8 or self.is_planar:
            raise FormatError("Прямой доступ только к 8-битному interleaved растру")
        self.validate()
        rows = np.frombuffer(bytes(self.data[:self.expected_length]), dtype=np.uint8)
        rows = rows.reshape(self.height, self.bytes_per_row)
        return rows[:, :self.width * self.samples_per_pixel].reshape(
            self.height, self.width, self.samples_per_pixel
        )

    @classmethod
    def empty(cls, width: int, height: int, premultiplied: bool = True) -> "RawBitmap":
        """Пустой 8-битный RGBA растр с шагом строки width * 4."""
        return cls(width=width, height=height, premultiplied=premultiplied)

    @classmethod
    def from_image(cls, image: Image.Image) -> "RawBitmap":
        """Упаковывает изображение PIL в 8-битный interleaved растр."""
        mode = image.mode
        if mode not in _SAMPLES_BY_MODE:
            image = image.convert("RGBA")
            mode = "RGBA"
        samples = _SAMPLES_BY_MODE[mode]
        width, height = image.size
        return cls(
            width=width,
            height=height,
            samples_per_pixel=samples,
            has_alpha=mode in ("LA", "RGBA"),
            data=bytearray(image.tobytes()),
            premultiplied=False,
        )
