"""Чтение и запись 24-битных несжатых BMP.

Принципы:
- SRP: сервис отвечает только за контейнер (заголовки, выравнивание строк);
  пиксели отдаются как `PixelGrid`, фильтры о формате ничего не знают.
- Заголовки записываются обратно ровно в том виде, в каком прочитаны.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

import numpy as np
from PIL import Image

from bmpfilter.errors import (
    CreateOutputError,
    OpenInputError,
    TruncatedBitmapError,
    UnsupportedFormatError,
)
from bmpfilter.models.bitmap_model import (
    BMP_SIGNATURE,
    BYTES_PER_PIXEL,
    BitmapData,
    FileHeader,
    InfoHeader,
)
from bmpfilter.models.pixel_grid import PixelGrid

logger = logging.getLogger(__name__)

PIXEL_DATA_OFFSET = FileHeader.SIZE + InfoHeader.SIZE  # 54


class BitmapService:
    def load(self, file_path: str | Path) -> BitmapData:
        """Читает BMP с диска.

        Raises:
            OpenInputError: если файл не удаётся открыть.
            UnsupportedFormatError: если это не 24-битный несжатый BMP.
        """
        path = Path(file_path)
        bitmap = self.decode(self.read(path))
        bitmap.path = path
        return bitmap

    def save(self, bitmap: BitmapData, file_path: str | Path) -> None:
        """Записывает BMP на диск.

        Raises:
            CreateOutputError: если файл не удаётся создать или записать.
        """
        payload = self.encode(bitmap)
        with self.create(file_path) as stream:
            self.write(payload, stream)

    # ---- Файлы ----
    def read(self, file_path: str | Path) -> bytes:
        path = Path(file_path)
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise OpenInputError(f"Could not open {path}.") from exc
        logger.debug("Read %d bytes from %s", len(raw), path)
        return raw

    def create(self, file_path: str | Path) -> BinaryIO:
        """Создаёт (или обнуляет) выходной файл; закрывать вызывающему."""
        path = Path(file_path)
        try:
            return path.open("wb")
        except OSError as exc:
            raise CreateOutputError(f"Could not create {path}.") from exc

    def write(self, payload: bytes, stream: BinaryIO) -> None:
        try:
            stream.write(payload)
        except OSError as exc:
            raise CreateOutputError(f"Could not write {getattr(stream, 'name', 'output')}.") from exc
        logger.debug("Wrote %d bytes to %s", len(payload), getattr(stream, "name", "stream"))

    # ---- Декодирование ----
    def decode(self, raw: bytes) -> BitmapData:
        if len(raw) < PIXEL_DATA_OFFSET:
            raise TruncatedBitmapError(
                f"Unsupported file format: {len(raw)} bytes is shorter than the {PIXEL_DATA_OFFSET}-byte headers."
            )
        file_header = FileHeader.unpack(raw[:FileHeader.SIZE])
        info_header = InfoHeader.unpack(raw[FileHeader.SIZE:PIXEL_DATA_OFFSET])
        self._check_supported(file_header, info_header)

        width = info_header.width
        height = abs(info_header.height)
        stride = width * BYTES_PER_PIXEL + info_header.row_padding
        end = file_header.off_bits + stride * height
        if len(raw) < end:
            raise TruncatedBitmapError(
                f"Unsupported file format: pixel data needs {end} bytes, file has {len(raw)}."
            )

        if width == 0 or height == 0:
            grid = PixelGrid.blank(height, width)
        else:
            rows = np.frombuffer(raw, dtype=np.uint8, count=stride * height, offset=file_header.off_bits)
            rows = rows.reshape(height, stride)[:, :width * BYTES_PER_PIXEL]
            bgr = rows.reshape(height, width, BYTES_PER_PIXEL)
            grid = PixelGrid(bgr[..., ::-1].copy())  # BGR -> RGB

        logger.debug(
            "Decoded %dx%d bitmap (%s, padding %d)",
            width, height, "bottom-up" if info_header.height > 0 else "top-down", info_header.row_padding,
        )
        return BitmapData(file_header=file_header, info_header=info_header, grid=grid)

    @staticmethod
    def _check_supported(file_header: FileHeader, info_header: InfoHeader) -> None:
        """24-битный несжатый BMP 4.0 с пикселями по смещению 54."""
        if (
            file_header.type != BMP_SIGNATURE
            or file_header.off_bits != PIXEL_DATA_OFFSET
            or info_header.size != InfoHeader.SIZE
            or info_header.bit_count != 24
            or info_header.compression != 0
        ):
            raise UnsupportedFormatError("Unsupported file format.")
        if info_header.width < 0:
            raise UnsupportedFormatError(f"Unsupported file format: negative width {info_header.width}.")

    # ---- Кодирование ----
    def encode(self, bitmap: BitmapData) -> bytes:
        grid = bitmap.grid
        padding = bitmap.info_header.row_padding
        if grid.width != bitmap.info_header.width or grid.height != abs(bitmap.info_header.height):
            raise ValueError(
                f"Grid {grid.width}x{grid.height} does not match header "
                f"{bitmap.info_header.width}x{abs(bitmap.info_header.height)}"
            )

        bgr = grid.pixels[..., ::-1].reshape(grid.height, grid.width * BYTES_PER_PIXEL)
        rows = np.zeros((grid.height, grid.width * BYTES_PER_PIXEL + padding), dtype=np.uint8)
        rows[:, :grid.width * BYTES_PER_PIXEL] = bgr
        return bitmap.file_header.pack() + bitmap.info_header.pack() + rows.tobytes()

    # ---- Отображение ----
    def to_pil_image(self, bitmap: BitmapData) -> Image.Image:
        """RGB-изображение PIL в порядке «сверху вниз» для показа на экране."""
        pixels = bitmap.grid.pixels
        if bitmap.is_bottom_up:
            pixels = pixels[::-1]
        return Image.fromarray(np.ascontiguousarray(pixels))
