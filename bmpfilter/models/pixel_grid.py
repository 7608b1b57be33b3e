"""Модель пиксельной сетки: декодированное изображение в памяти.

Принципы:
- SRP: только структура данных и простые преобразования представления.
- Порядок строк сохраняется как есть; сетка не знает, где у изображения «верх».
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

RGB = Tuple[int, int, int]


@dataclass
class PixelGrid:
    """Прямоугольная сетка RGB-троек.

    Fields:
        pixels: массив `uint8` формы (height, width, 3), порядок каналов RGB.
    """
    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 3:
            raise ValueError(f"Ожидается массив (H, W, 3), получено {self.pixels.shape}")
        if self.pixels.dtype != np.uint8:
            self.pixels = self.pixels.astype(np.uint8)

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def is_empty(self) -> bool:
        return self.pixels.size == 0

    @classmethod
    def blank(cls, height: int, width: int) -> PixelGrid:
        """Чёрная сетка заданного размера."""
        return cls(np.zeros((height, width, 3), dtype=np.uint8))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[RGB]]) -> PixelGrid:
        """Собирает сетку из списка строк с RGB-тройками.

        Все строки должны быть одной длины; пустой список даёт сетку 0x0.
        """
        if len(rows) == 0:
            return cls.blank(0, 0)
        widths = {len(row) for row in rows}
        if len(widths) != 1:
            raise ValueError(f"Строки разной длины: {sorted(widths)}")
        width = widths.pop()
        arr = np.array(rows, dtype=np.uint8).reshape(len(rows), width, 3)
        return cls(arr)

    def to_rows(self) -> List[List[RGB]]:
        return [[tuple(int(c) for c in px) for px in row] for row in self.pixels]

    def pixel(self, row: int, col: int) -> RGB:
        r, g, b = self.pixels[row, col]
        return int(r), int(g), int(b)

    def copy(self) -> PixelGrid:
        return PixelGrid(self.pixels.copy())

    def replace_pixels(self, new_pixels: np.ndarray) -> None:
        """Подменяет буфер целиком (размеры должны совпадать)."""
        if new_pixels.shape != self.pixels.shape:
            raise ValueError(f"Размер {new_pixels.shape} не совпадает с {self.pixels.shape}")
        self.pixels = new_pixels.astype(np.uint8, copy=False)
