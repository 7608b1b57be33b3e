"""Контроллер окна предпросмотра: связывает панель, просмотрщик и сервисы.

SOLID:
- SRP: только оркестрация; чтение BMP и фильтры живут в сервисах.
- Загруженное изображение не мутируется: фильтр применяется к копии сетки.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from tkinter import TclError, filedialog
from typing import Optional, Tuple

import customtkinter as ctk
from PIL import Image

from bmpfilter.errors import BitmapFilterError
from bmpfilter.models.bitmap_model import BitmapData
from bmpfilter.models.filter_kind import FilterKind
from bmpfilter.services.bitmap_service import BitmapService
from bmpfilter.services.filter_service import FilterService
from bmpfilter.ui.image_viewer import ImageViewer
from bmpfilter.ui.sidebar import Sidebar

logger = logging.getLogger(__name__)

BMP_FILETYPES = (("BMP 24-bit", "*.bmp"), ("All files", "*.*"))


@dataclass
class AppController:
    """Обработчики событий UI и текущее состояние (оригинал, результат, фильтр)."""
    viewer: ImageViewer
    sidebar: Sidebar
    window: ctk.CTk

    _bitmap_service: BitmapService = field(default_factory=BitmapService)
    _filter_service: FilterService = field(default_factory=FilterService)
    _original: Optional[BitmapData] = None
    _filtered: Optional[BitmapData] = None
    _filter: Optional[FilterKind] = None

    def bind_events(self) -> None:
        self.sidebar.on_open_file = self._handle_open_file
        self.sidebar.on_save_file = self._handle_save_file
        self.sidebar.on_filter_change = self._handle_filter_change
        self.sidebar.on_compare_mode_change = self.viewer.set_compare_mode
        self.sidebar.on_wipe_change = self.viewer.set_wipe_percent
        self.viewer.on_cursor_move = self._handle_cursor_move

    # ---- Handlers ----
    def _handle_open_file(self) -> None:
        try:
            file_path = filedialog.askopenfilename(title="Выберите BMP", filetypes=BMP_FILETYPES)
        except TclError:
            return
        if not file_path:
            return
        self.open_file(file_path)

    def open_file(self, file_path: str) -> None:
        try:
            bitmap = self._bitmap_service.load(file_path)
        except BitmapFilterError as exc:
            logger.warning("Cannot open %s: %s", file_path, exc)
            self.sidebar.set_status(str(exc))
            return

        self._original = bitmap
        self.sidebar.set_status("")
        self.sidebar.set_image_info(bitmap, self._file_size(bitmap))
        self.window.title(f"BMP Filter Preview - {bitmap.path.name}")
        self._apply_filter()

    def _handle_save_file(self) -> None:
        if self._original is None:
            return
        try:
            file_path = filedialog.asksaveasfilename(
                title="Сохранить BMP", defaultextension=".bmp", filetypes=BMP_FILETYPES
            )
        except TclError:
            return
        if not file_path:
            return
        result = self._filtered if self._filtered is not None else self._original
        try:
            self._bitmap_service.save(result, file_path)
        except BitmapFilterError as exc:
            logger.warning("Cannot save %s: %s", file_path, exc)
            self.sidebar.set_status(str(exc))
            return
        self.sidebar.set_status(f"Сохранено: {file_path}")

    def _handle_filter_change(self, kind: Optional[FilterKind]) -> None:
        self._filter = kind
        self._apply_filter()

    def _handle_cursor_move(self, x: Optional[int], y: Optional[int], rgb: Optional[Tuple[int, int, int]]) -> None:
        self.sidebar.update_cursor_info(x, y, rgb)

    # ---- Helpers ----
    def _apply_filter(self) -> None:
        """Фильтрует копию оригинала выбранным фильтром и обновляет просмотр."""
        if self._original is None:
            return
        self._filtered = None
        if self._filter is not None:
            grid = self._filter_service.apply(self._filter, self._original.grid.copy())
            self._filtered = self._original.with_grid(grid)

        original_img = self._preview(self._original)
        filtered_img = self._preview(self._filtered) if self._filtered is not None else None
        self.viewer.set_images(original_img, filtered_img)

    def _preview(self, bitmap: BitmapData) -> Optional[Image.Image]:
        if bitmap.grid.is_empty:
            return None
        return self._bitmap_service.to_pil_image(bitmap)

    @staticmethod
    def _file_size(bitmap: BitmapData) -> Optional[int]:
        try:
            return bitmap.path.stat().st_size if bitmap.path else None
        except OSError:
            return None
