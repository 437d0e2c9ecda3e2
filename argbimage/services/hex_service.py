"""Вывод буфера в виде списка шестнадцатеричных литералов.

Принципы:
- Только представление: буфер не меняется, результат воспроизводим байт в байт.
- Параметры форматирования собраны в неизменяемом `HexFormat`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

BytesLike = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class HexFormat:
    """Параметры форматирования.

    Fields:
        per_row: Литералов в строке.
        group_count: Через сколько литералов вставлять `group_spacer`.
        group_spacer: Дополнительный разделитель групп внутри строки.
        indent: Отступ перед каждым литералом.
    """
    per_row: int = 16
    group_count: int = 4
    group_spacer: str = " "
    indent: str = "  "

    def __post_init__(self) -> None:
        if self.per_row <= 0 or self.group_count <= 0:
            raise ValueError("per_row и group_count должны быть положительными")


DEFAULT_HEX_FORMAT = HexFormat()


def render_hex(buffer: BytesLike, var_name: Optional[str] = None, fmt: HexFormat = DEFAULT_HEX_FORMAT) -> str:
    """Форматирует буфер как `[ 0xHH, ... ]` с переносами и группами.

    Если задан `var_name`, результат начинается с объявления переменной.
    """
    parts = []
    if var_name:
        parts.append(f"{var_name} = ")
    parts.append("[\n")

    last = len(buffer) - 1
    for index, byte in enumerate(bytes(buffer)):
        if index % fmt.per_row == 0 and index != 0:
            parts.append("\n")
        elif index % fmt.group_count == 0 and index % fmt.per_row != 0:
            parts.append(fmt.group_spacer)
        parts.append(f"{fmt.indent}0x{byte:02X}")
        if index != last:
            parts.append(",")
    parts.append("\n]")
    return "".join(parts)


def hexliterals(
    buffer: BytesLike,
    var_name: Optional[str] = None,
    per_row: int = 16,
    group_count: int = 4,
    group_spacer: str = " ",
) -> str:
    """То же, что `render_hex`, с параметрами в виде аргументов."""
    fmt = HexFormat(per_row=per_row, group_count=group_count, group_spacer=group_spacer)
    return render_hex(buffer, var_name=var_name, fmt=fmt)
