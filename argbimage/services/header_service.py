"""Заголовок "ARGB" перед сериализованным буфером."""
from __future__ import annotations

from typing import Union

from argbimage.errors import HeaderMismatchError

ARGB_HEADER = b"ARGB"
HEADER_LENGTH = len(ARGB_HEADER)

BytesLike = Union[bytes, bytearray, memoryview]


def with_header(buffer: BytesLike) -> bytes:
    """Добавляет 4 байта 0x41 0x52 0x47 0x42 в начало буфера."""
    return ARGB_HEADER + bytes(buffer)


def has_header(buffer: BytesLike) -> bool:
    return bytes(buffer[:HEADER_LENGTH]) == ARGB_HEADER


def strip_header(buffer: BytesLike) -> bytes:
    """Снимает заголовок, предварительно проверив его.

    Raises:
        HeaderMismatchError: буфер не начинается с "ARGB".
    """
    if not has_header(buffer):
        found = bytes(buffer[:HEADER_LENGTH])
        raise HeaderMismatchError(f"Ожидался заголовок {ARGB_HEADER!r}, найдено {found!r}")
    return bytes(buffer[HEADER_LENGTH:])
