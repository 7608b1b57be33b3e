from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, Tuple

import numpy as np

from bmpfilter.models.filter_kind import FilterKind
from bmpfilter.models.pixel_grid import PixelGrid

logger = logging.getLogger(__name__)

# Смещения окна 3x3 в порядке обхода ядра: строка (dy) снаружи, столбец (dx) внутри
KERNEL_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(
    (dy, dx) for dy in (-1, 0, 1) for dx in (-1, 0, 1)
)

SOBEL_GX = np.array([[-1, 0, 1],
                     [-2, 0, 2],
                     [-1, 0, 1]], dtype=np.int64)

SOBEL_GY = np.array([[-1, -2, -1],
                     [ 0,  0,  0],
                     [ 1,  2,  1]], dtype=np.int64)

# Строки матрицы: выходной канал R', G', B'; столбцы: вклад исходных R, G, B
SEPIA_MATRIX = (
    (0.393, 0.769, 0.189),
    (0.349, 0.686, 0.168),
    (0.272, 0.534, 0.131),
)


class FilterService:
    def apply(self, kind: FilterKind, grid: PixelGrid) -> PixelGrid:
        """Применяет ровно один фильтр к сетке и возвращает её."""
        handler = self._handlers()[kind]
        logger.debug("Applying %s to %dx%d grid", kind.name.lower(), grid.width, grid.height)
        return handler(grid)

    def _handlers(self) -> Dict[FilterKind, Callable[[PixelGrid], PixelGrid]]:
        return {
            FilterKind.BLUR: self.blur,
            FilterKind.EDGES: self.edges,
            FilterKind.GRAYSCALE: self.grayscale,
            FilterKind.REFLECT: self.reflect,
            FilterKind.SEPIA: self.sepia,
        }

    # ---------- Вспомогательные функции ----------
    @staticmethod
    def _round_half_up(values: np.ndarray) -> np.ndarray:
        """
        Округление к ближайшему, половина вверх (0.5 -> 1, 2.5 -> 3).
        np.rint округляет к чётному, поэтому здесь floor(x + 0.5);
        все входные значения неотрицательны.
        """
        return np.floor(values + 0.5)

    def _to_channel(self, values: np.ndarray) -> np.ndarray:
        """Округляет и обрезает до [0, 255], возвращает uint8."""
        return np.clip(self._round_half_up(values), 0, 255).astype(np.uint8)

    @staticmethod
    def _pad_black(arr: np.ndarray) -> np.ndarray:
        """Рамка шириной 1 пиксель из нулей вокруг (H, W[, C])."""
        pad = ((1, 1), (1, 1)) + ((0, 0),) * (arr.ndim - 2)
        return np.pad(arr, pad, mode="constant", constant_values=0)

    @staticmethod
    def _windows(padded: np.ndarray, height: int, width: int) -> Iterator[Tuple[int, int, np.ndarray]]:
        """
        Для каждого смещения (dy, dx) окна 3x3 отдаёт срез дополненного
        массива, совпадающий по форме с исходным. Элемент [i, j] среза
        равен соседу пикселя (i, j) со смещением (dy, dx).
        """
        for dy, dx in KERNEL_OFFSETS:
            yield dy, dx, padded[1 + dy:1 + dy + height, 1 + dx:1 + dx + width]

    # ---------- 1) Попиксельные фильтры (на месте) ----------
    def grayscale(self, grid: PixelGrid) -> PixelGrid:
        """
        Оттенки серого: невзвешенное среднее трёх каналов,
        записанное во все три канала.
        """
        if grid.is_empty:
            return grid
        rgb = grid.pixels.astype(np.float64)
        average = (rgb[..., 0] + rgb[..., 1] + rgb[..., 2]) / 3.0
        grid.pixels[...] = self._to_channel(average)[..., np.newaxis]
        return grid

    def sepia(self, grid: PixelGrid) -> PixelGrid:
        """
        Сепия по фиксированной матрице. Все три выхода считаются
        из исходных значений пикселя до записи.
        """
        if grid.is_empty:
            return grid
        rgb = grid.pixels.astype(np.float64)
        r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
        out = np.empty_like(grid.pixels)
        for channel, (kr, kg, kb) in enumerate(SEPIA_MATRIX):
            out[..., channel] = self._to_channel(kr * r + kg * g + kb * b)
        grid.pixels[...] = out
        return grid

    def reflect(self, grid: PixelGrid) -> PixelGrid:
        """Зеркальное отражение каждой строки слева направо."""
        if grid.is_empty:
            return grid
        grid.pixels[...] = grid.pixels[:, ::-1].copy()
        return grid

    # ---------- 2) Фильтры по окрестности (снимок -> новый буфер) ----------
    def blur(self, grid: PixelGrid) -> PixelGrid:
        """
        Усредняющее размытие 3x3.
        Соседи за границей изображения не участвуют ни в сумме, ни в счётчике:
        угол усредняется по 4 пикселям, край по 6, внутренний пиксель по 9.
        """
        if grid.is_empty:
            return grid
        h, w = grid.height, grid.width
        snapshot = grid.pixels.astype(np.int64)

        padded = self._pad_black(snapshot)
        inside = self._pad_black(np.ones((h, w), dtype=np.int64))

        total = np.zeros((h, w, 3), dtype=np.int64)
        count = np.zeros((h, w), dtype=np.int64)
        for _dy, _dx, window in self._windows(padded, h, w):
            total += window
        for _dy, _dx, window in self._windows(inside, h, w):
            count += window

        mean = total / count[..., np.newaxis].astype(np.float64)
        grid.replace_pixels(self._to_channel(mean))
        return grid

    def edges(self, grid: PixelGrid) -> PixelGrid:
        """
        Края по Собелю, независимо по каждому каналу:
        value = round(sqrt(Gx^2 + Gy^2)), не больше 255.
        Соседи за границей считаются чёрными (0) и остаются в ядре.
        """
        if grid.is_empty:
            return grid
        h, w = grid.height, grid.width
        padded = self._pad_black(grid.pixels.astype(np.int64))

        gx = np.zeros((h, w, 3), dtype=np.int64)
        gy = np.zeros((h, w, 3), dtype=np.int64)
        for dy, dx, window in self._windows(padded, h, w):
            gx += SOBEL_GX[dy + 1, dx + 1] * window
            gy += SOBEL_GY[dy + 1, dx + 1] * window

        magnitude = np.sqrt((gx * gx + gy * gy).astype(np.float64))
        grid.replace_pixels(self._to_channel(magnitude))
        return grid
