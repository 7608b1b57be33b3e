"""Боковая панель: открытие и сохранение BMP, сведения о заголовках, выбор фильтра.

Принципы:
- SRP: управляет только элементами панели, фильтров не применяет.
- ISP: события наружу через `on_*`, состояние внутрь через `set_*`.
"""
from __future__ import annotations

from typing import Callable, Dict, Optional, Tuple

import customtkinter as ctk

from bmpfilter.models.bitmap_model import BitmapData
from bmpfilter.models.filter_kind import FilterKind

NO_FILTER = "none"

COMPARE_LABELS: Dict[str, str] = {
    "off": "Нет",
    "wipe": "Шторка",
    "side_by_side": "2-up",
}


def _rgb_to_hex(rgb: Tuple[int, int, int]) -> str:
    r, g, b = rgb[:3]
    return f"#{r:02X}{g:02X}{b:02X}"


class Sidebar(ctk.CTkFrame):
    """Панель с блоками: файл, информация, курсор, фильтр, сравнение."""
    def __init__(self, master: ctk.CTk, compare_mode: str = "wipe", **kwargs) -> None:
        super().__init__(master, width=280, **kwargs)
        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_open_file: Optional[Callable[[], None]] = None
        self.on_save_file: Optional[Callable[[], None]] = None
        self.on_filter_change: Optional[Callable[[Optional[FilterKind]], None]] = None
        self.on_compare_mode_change: Optional[Callable[[str], None]] = None
        self.on_wipe_change: Optional[Callable[[int], None]] = None

        bold = ctk.CTkFont(size=16, weight="bold")

        # File
        ctk.CTkLabel(self, text="Файл", font=bold).grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")
        self._open_btn = ctk.CTkButton(self, text="Открыть BMP…", command=self._emit_open_file)
        self._open_btn.grid(row=1, column=0, padx=8, pady=(0, 4), sticky="ew")
        self._save_btn = ctk.CTkButton(self, text="Сохранить результат…", command=self._emit_save_file, state="disabled")
        self._save_btn.grid(row=2, column=0, padx=8, pady=(0, 12), sticky="ew")

        # Info
        ctk.CTkLabel(self, text="Информация", font=bold).grid(row=3, column=0, padx=8, pady=(8, 4), sticky="w")
        self._path_val = ctk.StringVar(value="—")
        self._size_val = ctk.StringVar(value="—")
        self._dims_val = ctk.StringVar(value="—")
        self._header_val = ctk.StringVar(value="—")
        ctk.CTkLabel(self, textvariable=self._path_val, wraplength=250, anchor="w", justify="left").grid(
            row=4, column=0, padx=8, pady=(0, 2), sticky="ew"
        )
        for row, var in ((5, self._size_val), (6, self._dims_val), (7, self._header_val)):
            ctk.CTkLabel(self, textvariable=var, anchor="w", justify="left").grid(
                row=row, column=0, padx=8, pady=(0, 2), sticky="ew"
            )

        # Cursor
        ctk.CTkLabel(self, text="Курсор", font=bold).grid(row=8, column=0, padx=8, pady=(8, 4), sticky="w")
        self._cursor_xy_val = ctk.StringVar(value="—")
        self._cursor_rgb_val = ctk.StringVar(value="—")
        ctk.CTkLabel(self, textvariable=self._cursor_xy_val, anchor="w").grid(row=9, column=0, padx=8, sticky="ew")
        ctk.CTkLabel(self, textvariable=self._cursor_rgb_val, anchor="w").grid(row=10, column=0, padx=8, sticky="ew")

        # Filter
        ctk.CTkLabel(self, text="Фильтр", font=bold).grid(row=11, column=0, padx=8, pady=(8, 4), sticky="w")
        self._filter_value = ctk.StringVar(value=NO_FILTER)
        options = [(NO_FILTER, "Нет")] + [(kind.selector, kind.title) for kind in FilterKind]
        for offset, (value, text) in enumerate(options):
            ctk.CTkRadioButton(
                self, text=text, variable=self._filter_value, value=value, command=self._emit_filter_change
            ).grid(row=12 + offset, column=0, padx=14, pady=2, sticky="w")

        # Compare
        compare_row = 12 + len(options)
        ctk.CTkLabel(self, text="Сравнение", font=bold).grid(row=compare_row, column=0, padx=8, pady=(8, 4), sticky="w")
        self._compare_menu = ctk.CTkOptionMenu(
            self, values=list(COMPARE_LABELS.values()), command=self._emit_compare_mode_change
        )
        self._compare_menu.set(COMPARE_LABELS.get(compare_mode, "Шторка"))
        self._compare_menu.grid(row=compare_row + 1, column=0, padx=8, pady=(0, 4), sticky="w")
        self._wipe_row = compare_row + 2
        self._wipe_slider = ctk.CTkSlider(self, from_=0, to=100, number_of_steps=100, command=self._on_wipe_slider)
        self._wipe_slider.set(50)
        self._toggle_wipe_slider(compare_mode == "wipe")

        # filler + status line
        self.grid_rowconfigure(98, weight=1)
        self._status_val = ctk.StringVar(value="")
        ctk.CTkLabel(self, textvariable=self._status_val, wraplength=250, anchor="w", justify="left",
                     text_color="#d9534f").grid(row=99, column=0, padx=8, pady=(4, 8), sticky="ew")

    # ---- Public API ----
    def set_image_info(self, bitmap: BitmapData, size_bytes: Optional[int]) -> None:
        info = bitmap.info_header
        self._path_val.set(f"Путь: {bitmap.path}" if bitmap.path else "Путь: —")
        self._size_val.set(f"Размер файла: {self._format_size(size_bytes)}")
        order = "снизу вверх" if bitmap.is_bottom_up else "сверху вниз"
        self._dims_val.set(f"Размеры: {bitmap.width}×{bitmap.height} px, строки {order}")
        self._header_val.set(
            f"{info.bit_count} бит, сжатие {info.compression}, выравнивание {info.row_padding} Б"
        )
        self._save_btn.configure(state="normal")

    def update_cursor_info(self, x: Optional[int], y: Optional[int], rgb: Optional[Tuple[int, int, int]]) -> None:
        if x is None or y is None or rgb is None:
            self._cursor_xy_val.set("—")
            self._cursor_rgb_val.set("—")
            return
        self._cursor_xy_val.set(f"X: {x}, Y: {y}")
        self._cursor_rgb_val.set(f"RGB: {tuple(rgb[:3])}  {_rgb_to_hex(rgb)}")

    def set_status(self, message: str) -> None:
        self._status_val.set(message)

    def selected_filter(self) -> Optional[FilterKind]:
        value = self._filter_value.get()
        return None if value == NO_FILTER else FilterKind.from_selector(value)

    # ---- Events ----
    def _emit_open_file(self) -> None:
        if self.on_open_file:
            self.on_open_file()

    def _emit_save_file(self) -> None:
        if self.on_save_file:
            self.on_save_file()

    def _emit_filter_change(self) -> None:
        if self.on_filter_change:
            self.on_filter_change(self.selected_filter())

    def _emit_compare_mode_change(self, label: str) -> None:
        mode = next((k for k, v in COMPARE_LABELS.items() if v == label), "off")
        self._toggle_wipe_slider(mode == "wipe")
        if self.on_compare_mode_change:
            self.on_compare_mode_change(mode)

    def _on_wipe_slider(self, value: float) -> None:
        if self.on_wipe_change:
            self.on_wipe_change(int(round(value)))

    # ---- Helpers ----
    def _toggle_wipe_slider(self, visible: bool) -> None:
        if visible:
            self._wipe_slider.grid(row=self._wipe_row, column=0, padx=8, pady=(0, 8), sticky="ew")
        else:
            self._wipe_slider.grid_remove()

    def _format_size(self, size_bytes: Optional[int]) -> str:
        if size_bytes is None:
            return "—"
        if size_bytes < 1024:
            return f"{size_bytes} Б"
        if size_bytes < 1024**2:
            return f"{size_bytes / 1024:.1f} КБ"
        return f"{size_bytes / 1024**2:.1f} МБ"
