"""Виджет просмотра BMP «до/после»: вписывание в окно, шторка и 2-up.

Принципы:
- SRP: отвечает только за отрисовку и события мыши над изображением.
- Оригинал и результат фильтра приходят готовыми PIL-изображениями одного размера.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk

SIDE_BY_SIDE_GAP = 16


class ImageViewer(ctk.CTkFrame):
    """Канва с режимами сравнения: 'off' | 'wipe' | 'side_by_side'."""
    def __init__(self, master: ctk.CTk | tk.Misc, compare_mode: str = "wipe", **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._canvas = tk.Canvas(self, highlightthickness=0, bg=self._get_canvas_bg())
        self._canvas.grid(row=0, column=0, sticky="nsew")

        self._original: Optional[Image.Image] = None
        self._filtered: Optional[Image.Image] = None
        self._tk_left: Optional[ImageTk.PhotoImage] = None
        self._tk_right: Optional[ImageTk.PhotoImage] = None

        self._scale: float = 1.0
        self._origin: Tuple[int, int] = (0, 0)
        self._compare_mode: str = compare_mode
        self._wipe_ratio: float = 0.5
        self._hold_original: bool = False

        self.on_cursor_move: Optional[Callable[[Optional[int], Optional[int], Optional[Tuple[int, int, int]]], None]] = None

        self._canvas.bind("<Configure>", lambda _e: self._render())
        self._canvas.bind("<Motion>", self._on_mouse_move)
        self._canvas.bind("<Leave>", self._on_mouse_leave)
        self._canvas.bind("<ButtonPress-1>", lambda _e: self._canvas.focus_set())
        # Hold space to show the original
        self._canvas.bind("<KeyPress-space>", self._on_space_down)
        self._canvas.bind("<KeyRelease-space>", self._on_space_up)

    # ---- Public API ----
    def set_images(self, original: Optional[Image.Image], filtered: Optional[Image.Image] = None) -> None:
        """Устанавливает оригинал и (необязательно) результат фильтра."""
        self._original = original
        self._filtered = filtered
        self._render()

    def set_compare_mode(self, mode: str) -> None:
        self._compare_mode = mode
        self._render()

    def set_wipe_percent(self, percent: int) -> None:
        """Положение шторки 0–100%."""
        self._wipe_ratio = max(0.0, min(1.0, percent / 100.0))
        if self._compare_mode == "wipe":
            self._render()

    # ---- Internals ----
    def _side_by_side(self) -> bool:
        return self._compare_mode == "side_by_side" and self._filtered is not None

    def _render(self) -> None:
        self._canvas.delete("all")
        if self._original is None:
            return

        canvas_w = max(1, int(self._canvas.winfo_width()))
        canvas_h = max(1, int(self._canvas.winfo_height()))
        img_w, img_h = self._original.size

        slots = 2 if self._side_by_side() else 1
        avail_w = max(1, canvas_w - SIDE_BY_SIDE_GAP * (slots - 1)) / slots
        self._scale = max(0.01, min(avail_w / img_w, canvas_h / img_h))
        scaled = (max(1, int(img_w * self._scale)), max(1, int(img_h * self._scale)))

        content_w = scaled[0] * slots + SIDE_BY_SIDE_GAP * (slots - 1)
        self._origin = ((canvas_w - content_w) // 2, (canvas_h - scaled[1]) // 2)
        ox, oy = self._origin

        before = self._original.resize(scaled, Image.Resampling.NEAREST)
        after = None
        if self._filtered is not None and not self._hold_original:
            after = self._filtered.resize(scaled, Image.Resampling.NEAREST)

        if self._side_by_side():
            self._tk_left = ImageTk.PhotoImage(before)
            self._tk_right = ImageTk.PhotoImage(after if after is not None else before)
            self._canvas.create_image(ox, oy, image=self._tk_left, anchor="nw")
            self._canvas.create_image(ox + scaled[0] + SIDE_BY_SIDE_GAP, oy, image=self._tk_right, anchor="nw")
        elif self._compare_mode == "wipe" and after is not None:
            split = int(round(scaled[0] * self._wipe_ratio))
            self._tk_left = ImageTk.PhotoImage(before.crop((0, 0, max(1, split), scaled[1])))
            self._canvas.create_image(ox, oy, image=self._tk_left, anchor="nw")
            if split < scaled[0]:
                self._tk_right = ImageTk.PhotoImage(after.crop((split, 0, scaled[0], scaled[1])))
                self._canvas.create_image(ox + split, oy, image=self._tk_right, anchor="nw")
            self._canvas.create_line(ox + split, oy, ox + split, oy + scaled[1], fill="#ffcc00")
        else:
            self._tk_left = ImageTk.PhotoImage(after if after is not None else before)
            self._tk_right = None
            self._canvas.create_image(ox, oy, image=self._tk_left, anchor="nw")

    def _canvas_to_image(self, cx: int, cy: int) -> Tuple[Optional[int], Optional[int], bool]:
        """Координаты пикселя под курсором и признак «над результатом фильтра»."""
        if self._original is None:
            return None, None, False
        img_w, img_h = self._original.size
        ox, oy = self._origin
        dx, dy = cx - ox, cy - oy
        slot_w = int(img_w * self._scale)

        over_filtered = self._filtered is not None and not self._hold_original
        if self._side_by_side():
            if dx >= slot_w + SIDE_BY_SIDE_GAP:
                dx -= slot_w + SIDE_BY_SIDE_GAP
            else:
                over_filtered = False
        elif self._compare_mode == "wipe":
            over_filtered = over_filtered and dx >= int(round(slot_w * self._wipe_ratio))

        x, y = int(dx / self._scale), int(dy / self._scale)
        if dx < 0 or dy < 0 or not (0 <= x < img_w and 0 <= y < img_h):
            return None, None, False
        return x, y, over_filtered

    def _on_mouse_move(self, event: tk.Event) -> None:
        if self.on_cursor_move is None:
            return
        x, y, over_filtered = self._canvas_to_image(event.x, event.y)
        if x is None or y is None:
            self.on_cursor_move(None, None, None)
            return
        source = self._filtered if over_filtered else self._original
        self.on_cursor_move(x, y, source.getpixel((x, y)))

    def _on_mouse_leave(self, _event: tk.Event) -> None:
        if self.on_cursor_move:
            self.on_cursor_move(None, None, None)

    def _on_space_down(self, _event: tk.Event) -> None:
        if not self._hold_original:
            self._hold_original = True
            self._render()

    def _on_space_up(self, _event: tk.Event) -> None:
        if self._hold_original:
            self._hold_original = False
            self._render()

    def _get_canvas_bg(self) -> str:
        return "#1f1f1f" if ctk.get_appearance_mode().lower() == "dark" else "#f2f2f2"
