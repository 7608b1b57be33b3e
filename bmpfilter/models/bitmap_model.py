"""Модели данных контейнера BMP: заголовки файла и растра.

Принципы:
- SRP: только структура данных и упаковка полей, без файлового ввода-вывода.
- Поля хранятся как прочитаны, чтобы записать их обратно без изменений.
"""
from __future__ import annotations

import struct
from dataclasses import astuple, dataclass
from pathlib import Path
from typing import ClassVar, Optional

from bmpfilter.models.pixel_grid import PixelGrid

BMP_SIGNATURE = 0x4D42  # "BM" little-endian
BYTES_PER_PIXEL = 3


@dataclass(frozen=True)
class FileHeader:
    """BITMAPFILEHEADER, 14 байт."""
    FORMAT: ClassVar[str] = "<HIHHI"
    SIZE: ClassVar[int] = struct.calcsize("<HIHHI")

    type: int
    size: int
    reserved1: int
    reserved2: int
    off_bits: int

    @classmethod
    def unpack(cls, raw: bytes) -> FileHeader:
        return cls(*struct.unpack(cls.FORMAT, raw))

    def pack(self) -> bytes:
        return struct.pack(self.FORMAT, *astuple(self))


@dataclass(frozen=True)
class InfoHeader:
    """BITMAPINFOHEADER, 40 байт."""
    FORMAT: ClassVar[str] = "<IiiHHIIiiII"
    SIZE: ClassVar[int] = struct.calcsize("<IiiHHIIiiII")

    size: int
    width: int
    height: int
    planes: int
    bit_count: int
    compression: int
    size_image: int
    x_pels_per_meter: int
    y_pels_per_meter: int
    clr_used: int
    clr_important: int

    @classmethod
    def unpack(cls, raw: bytes) -> InfoHeader:
        return cls(*struct.unpack(cls.FORMAT, raw))

    def pack(self) -> bytes:
        return struct.pack(self.FORMAT, *astuple(self))

    @property
    def row_padding(self) -> int:
        """Число байт выравнивания в конце каждой строки."""
        return (4 - (self.width * BYTES_PER_PIXEL) % 4) % 4


@dataclass
class BitmapData:
    """Декодированный BMP: заголовки, пиксели и путь к источнику.

    Fields:
        file_header: Заголовок файла.
        info_header: Заголовок растра.
        grid: Пиксели в порядке хранения строк в файле.
        path: Путь к исходному файлу, если есть.
    """
    file_header: FileHeader
    info_header: InfoHeader
    grid: PixelGrid
    path: Optional[Path] = None

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    @property
    def is_bottom_up(self) -> bool:
        # positive biHeight: first stored row is the bottom scanline
        return self.info_header.height > 0

    def with_grid(self, grid: PixelGrid) -> BitmapData:
        """Копия с другими пикселями и теми же заголовками."""
        return BitmapData(
            file_header=self.file_header,
            info_header=self.info_header,
            grid=grid,
            path=self.path,
        )
