"""Виджет просмотра: масштаб под окно, колесо мыши и режимы сравнения «до/после».

Принципы:
- SRP: отвечает только за представление изображения.
- Чистый код: публичный API сверху, обработчики событий снизу.
"""
from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk

_GAP = 16
_MIN_SCALE = 0.1
_MAX_SCALE = 4.0


class ImageViewer(ctk.CTkFrame):
    """Канва с исходником и результатом: одиночный вид, шторка или 2-up."""
    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._canvas = tk.Canvas(self, highlightthickness=0, bg=self._get_canvas_bg())
        self._canvas.grid(row=0, column=0, sticky="nsew")

        self._original_image: Optional[Image.Image] = None
        self._processed_image: Optional[Image.Image] = None
        # ссылки держим, иначе Tk отдаст картинки сборщику мусора
        self._tk_images: list[ImageTk.PhotoImage] = []

        self._scale_factor: float = 1.0
        self._follow_fit: bool = True

        self.on_zoom_change: Optional[Callable[[int], None]] = None

        # "off" | "wipe" | "side_by_side"
        self._compare_mode: str = "off"
        self._wipe_ratio: float = 0.5

        self._canvas.bind("<Configure>", self._on_canvas_resize)
        self._canvas.bind("<MouseWheel>", self._on_mouse_wheel)
        self._canvas.bind("<Button-4>", self._on_mouse_wheel_linux)
        self._canvas.bind("<Button-5>", self._on_mouse_wheel_linux)

    # ---- Public API ----
    def set_image(self, image: Image.Image) -> None:
        """Устанавливает исходник, сбрасывает результат и масштаб."""
        self._original_image = image
        self._processed_image = None
        self.set_zoom_to_fit()

    def set_processed_image(self, image: Optional[Image.Image]) -> None:
        self._processed_image = image
        self._render_image()

    def set_zoom_to_fit(self) -> None:
        self._follow_fit = True
        self._scale_factor = self._fit_scale()
        self._render_image()

    def get_zoom_percent(self) -> int:
        return int(round(self._scale_factor * 100))

    def set_compare_mode(self, mode: str) -> None:
        """'Нет' | 'Шторка' | '2-up'."""
        mapping = {"Нет": "off", "Шторка": "wipe", "2-up": "side_by_side"}
        self._compare_mode = mapping.get(mode, "off")
        self._render_image()

    def set_wipe_percent(self, percent: int) -> None:
        self._wipe_ratio = max(0.0, min(1.0, percent / 100.0))
        if self._compare_mode == "wipe":
            self._render_image()

    # ---- Internals ----
    def _render_image(self) -> None:
        self._canvas.delete("all")
        self._tk_images.clear()
        if self._original_image is None:
            return

        canvas_w = int(self._canvas.winfo_width())
        canvas_h = int(self._canvas.winfo_height())
        img_w, img_h = self._original_image.size
        scaled = (max(1, int(img_w * self._scale_factor)), max(1, int(img_h * self._scale_factor)))

        # NEAREST: штрихи гравюры не размываются при увеличении
        before = self._original_image.resize(scaled, Image.Resampling.NEAREST)
        after = self._processed_image.resize(scaled, Image.Resampling.NEAREST) if self._processed_image else None

        if self._compare_mode == "side_by_side" and after is not None:
            content_w = scaled[0] * 2 + _GAP
            ox = max(0, (canvas_w - content_w) // 2)
            oy = max(0, (canvas_h - scaled[1]) // 2)
            self._draw(before, ox, oy)
            self._draw(after, ox + scaled[0] + _GAP, oy)
            return

        ox = max(0, (canvas_w - scaled[0]) // 2)
        oy = max(0, (canvas_h - scaled[1]) // 2)
        if self._compare_mode == "wipe" and after is not None:
            split = int(round(scaled[0] * self._wipe_ratio))
            self._draw(before.crop((0, 0, split, scaled[1])), ox, oy)
            self._draw(after.crop((split, 0, scaled[0], scaled[1])), ox + split, oy)
            # линия шторки
            self._canvas.create_line(ox + split, oy, ox + split, oy + scaled[1], fill="#e53935", width=2)
        else:
            self._draw(after if after is not None else before, ox, oy)

    def _draw(self, image: Image.Image, x: int, y: int) -> None:
        if image.width == 0 or image.height == 0:
            return
        photo = ImageTk.PhotoImage(image)
        self._tk_images.append(photo)
        self._canvas.create_image(x, y, image=photo, anchor="nw")

    def _fit_scale(self) -> float:
        if self._original_image is None:
            return 1.0
        img_w, img_h = self._original_image.size
        if img_w == 0 or img_h == 0:
            return 1.0
        canvas_w = max(1, int(self._canvas.winfo_width()))
        canvas_h = max(1, int(self._canvas.winfo_height()))
        if self._compare_mode == "side_by_side":
            canvas_w = max(1, (canvas_w - _GAP) // 2)
        return max(_MIN_SCALE, min(_MAX_SCALE, canvas_w / img_w, canvas_h / img_h))

    def _get_canvas_bg(self) -> str:
        return "#1f1f1f" if ctk.get_appearance_mode().lower() == "dark" else "#f2f2f2"

    def _on_canvas_resize(self, _event: tk.Event) -> None:
        if self._follow_fit:
            self._scale_factor = self._fit_scale()
        self._render_image()

    def _on_mouse_wheel(self, event: tk.Event) -> None:
        if event.delta:
            self._zoom_by(1.1 if event.delta > 0 else 1.0 / 1.1)

    def _on_mouse_wheel_linux(self, event: tk.Event) -> None:
        # X11: Button-4 вверх, Button-5 вниз
        self._zoom_by(1.1 if getattr(event, "num", None) == 4 else 1.0 / 1.1)

    def _zoom_by(self, factor: float) -> None:
        if self._original_image is None:
            return
        self._follow_fit = False
        self._scale_factor = max(_MIN_SCALE, min(_MAX_SCALE, self._scale_factor * factor))
        self._render_image()
        if self.on_zoom_change:
            self.on_zoom_change(self.get_zoom_percent())
