"""Перестановка каналов в плоском буфере пикселей.

Принципы:
- SRP: только перестановка байтов внутри групп, без знания об изображениях.
- Чистые функции: вход не мутируется, каждый вызов возвращает новый `bytes`.
"""
from __future__ import annotations

import logging
from typing import Union

import numpy as np

from argbimage.errors import DataCorruptionError
from argbimage.models.layout import ChannelOrder

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]

OPAQUE = 0xFF


class ChannelService:
    def to_rgba(self, argb: BytesLike) -> bytes:
        """[A,R,G,B] -> [R,G,B,A] для каждой группы из 4 байт."""
        return self.convert(argb, ChannelOrder.ARGB, ChannelOrder.RGBA)

    def to_rgb(self, argb: BytesLike) -> bytes:
        """[A,R,G,B] -> [R,G,B]; альфа отбрасывается, длина становится n/4*3."""
        return self.convert(argb, ChannelOrder.ARGB, ChannelOrder.RGB)

    def to_argb(self, rgba: BytesLike) -> bytes:
        """[R,G,B,A] -> [A,R,G,B]; обратная к `to_rgba`."""
        return self.convert(rgba, ChannelOrder.RGBA, ChannelOrder.ARGB)

    def convert(self, buffer: BytesLike, source: ChannelOrder, target: ChannelOrder) -> bytes:
        """Переставляет каналы из порядка `source` в порядок `target`.

        Если в `source` нет альфы, а в `target` есть, пиксели считаются
        непрозрачными (альфа = 0xFF).

        Raises:
            DataCorruptionError: длина буфера не кратна размеру группы `source`.
        """
        groups = self._as_groups(buffer, source)
        if source is target:
            return groups.tobytes()

        columns = []
        for channel in target.value:
            if channel in source.value:
                columns.append(groups[:, source.value.index(channel)])
            else:
                columns.append(np.full(groups.shape[0], OPAQUE, dtype=np.uint8))
        return np.stack(columns, axis=1).tobytes()

    # ---------- Вспомогательные функции ----------
    def _as_groups(self, buffer: BytesLike, order: ChannelOrder) -> np.ndarray:
        """Возвращает буфер как массив формы (пиксели, каналы)."""
        width = order.bytes_per_pixel
        length = len(buffer)
        if length % width != 0:
            logger.debug("Буфер %s длиной %d не кратен %d", order.value, length, width)
            raise DataCorruptionError(
                f"Длина буфера {order.value} должна быть кратна {width}, получено {length}"
            )
        arr = np.frombuffer(bytes(buffer), dtype=np.uint8)
        return arr.reshape(-1, width)
