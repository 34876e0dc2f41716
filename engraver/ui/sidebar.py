"""Боковая панель: файл, информация об изображении, параметры гравюры.

Принципы:
- SRP: управляет только UI параметров, не содержит алгоритмов.
- ISP: выдаёт параметры через `get_params`, события через `on_*`.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

import customtkinter as ctk

from engraver import config as defaults
from engraver.models.image_model import SourceImage

# (код соседей, яркость, контраст, инверсия, без цвета)
Params = Tuple[str, float, float, bool, bool]


def _format_size(size_bytes: Optional[int]) -> str:
    if size_bytes is None:
        return "Размер: —"
    if size_bytes < 1024:
        return f"Размер: {size_bytes} Б"
    return f"Размер: {size_bytes / 1024:.1f} КБ"


class Sidebar(ctk.CTkFrame):
    """Панель инструментов с блоками: файл, информация, параметры."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=280, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_open_file: Optional[Callable[[], None]] = None
        self.on_save_file: Optional[Callable[[], None]] = None
        self.on_params_change: Optional[Callable[[], None]] = None

        bold = ctk.CTkFont(size=16, weight="bold")

        # File section
        self._title = ctk.CTkLabel(self, text="Файл", font=bold)
        self._title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")

        self._open_btn = ctk.CTkButton(self, text="Открыть изображение…", command=self._emit_open_file)
        self._open_btn.grid(row=1, column=0, padx=8, pady=(0, 4), sticky="ew")
        self._save_btn = ctk.CTkButton(self, text="Сохранить гравюру…", command=self._emit_save_file, state="disabled")
        self._save_btn.grid(row=2, column=0, padx=8, pady=(0, 12), sticky="ew")

        # Info section
        self._info_title = ctk.CTkLabel(self, text="Информация", font=bold)
        self._info_title.grid(row=3, column=0, padx=8, pady=(8, 4), sticky="w")

        self._path_val = ctk.StringVar(value="—")
        self._size_val = ctk.StringVar(value="—")
        self._dims_val = ctk.StringVar(value="—")
        self._mode_val = ctk.StringVar(value="—")
        for row, var in enumerate((self._path_val, self._size_val, self._dims_val, self._mode_val), start=4):
            label = ctk.CTkLabel(self, textvariable=var, wraplength=250, anchor="w", justify="left")
            label.grid(row=row, column=0, padx=8, pady=(0, 2), sticky="ew")

        # Params section
        self._params_title = ctk.CTkLabel(self, text="Параметры", font=bold)
        self._params_title.grid(row=10, column=0, padx=8, pady=(12, 4), sticky="w")

        self._code_label = ctk.CTkLabel(self, text="Расстояния до соседей (0/1/2 × 9):")
        self._code_label.grid(row=11, column=0, padx=8, pady=(0, 2), sticky="w")
        self._code_val = ctk.StringVar(value=defaults.DEFAULT_NEIGHBORS)
        self._code_entry = ctk.CTkEntry(self, textvariable=self._code_val)
        self._code_entry.grid(row=12, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._code_entry.bind("<Return>", self._on_code_commit)
        self._code_entry.bind("<FocusOut>", self._on_code_commit)

        self._error_val = ctk.StringVar(value="")
        self._error_label = ctk.CTkLabel(
            self, textvariable=self._error_val, text_color="#e53935", wraplength=250, anchor="w", justify="left"
        )
        self._error_label.grid(row=13, column=0, padx=8, pady=(0, 6), sticky="ew")

        self._add_val = ctk.StringVar(value=f"Яркость: {defaults.DEFAULT_ADD:.0f}")
        self._add_label = ctk.CTkLabel(self, textvariable=self._add_val)
        self._add_label.grid(row=14, column=0, padx=8, pady=(0, 2), sticky="w")
        self._add_slider = ctk.CTkSlider(self, from_=0, to=255, number_of_steps=255, command=self._on_add_change)
        self._add_slider.set(defaults.DEFAULT_ADD)
        self._add_slider.grid(row=15, column=0, padx=8, pady=(0, 6), sticky="ew")

        self._mult_val = ctk.StringVar(value=f"Контраст: {defaults.DEFAULT_MULT:.2f}")
        self._mult_label = ctk.CTkLabel(self, textvariable=self._mult_val)
        self._mult_label.grid(row=16, column=0, padx=8, pady=(0, 2), sticky="w")
        self._mult_slider = ctk.CTkSlider(self, from_=0, to=5, number_of_steps=100, command=self._on_mult_change)
        self._mult_slider.set(defaults.DEFAULT_MULT)
        self._mult_slider.grid(row=17, column=0, padx=8, pady=(0, 6), sticky="ew")

        self._invert_var = ctk.BooleanVar(value=False)
        self._invert_switch = ctk.CTkSwitch(
            self, text="Инвертировать цвета", variable=self._invert_var, command=self._emit_params_change
        )
        self._invert_switch.grid(row=18, column=0, padx=8, pady=(4, 2), sticky="w")

        self._gray_var = ctk.BooleanVar(value=False)
        self._gray_switch = ctk.CTkSwitch(
            self, text="Убрать цвета", variable=self._gray_var, command=self._emit_params_change
        )
        self._gray_switch.grid(row=19, column=0, padx=8, pady=(2, 8), sticky="w")

        # filler
        self.grid_rowconfigure(99, weight=1)

        self._reset_btn = ctk.CTkButton(self, text="Параметры по умолчанию", command=self.reset_params)
        self._reset_btn.grid(row=100, column=0, padx=8, pady=(0, 8), sticky="ew")

    # ---- Public API ----
    def get_params(self) -> Params:
        return (
            self._code_val.get().strip(),
            float(self._add_slider.get()),
            float(self._mult_slider.get()),
            bool(self._invert_var.get()),
            bool(self._gray_var.get()),
        )

    def set_image_info(self, image: SourceImage) -> None:
        self._path_val.set(f"Файл: {image.path}")
        self._size_val.set(_format_size(image.size_bytes))
        self._dims_val.set(f"Размеры: {image.width} × {image.height}")
        self._mode_val.set(f"Режим: {image.mode_label()}")

    def set_error(self, message: Optional[str]) -> None:
        self._error_val.set(message or "")

    def set_save_enabled(self, enabled: bool) -> None:
        self._save_btn.configure(state="normal" if enabled else "disabled")

    # ---- Events ----
    def _emit_open_file(self) -> None:
        if self.on_open_file:
            self.on_open_file()

    def _emit_save_file(self) -> None:
        if self.on_save_file:
            self.on_save_file()

    def _emit_params_change(self) -> None:
        if self.on_params_change:
            self.on_params_change()

    def _on_code_commit(self, _event=None) -> None:
        self._emit_params_change()

    def _on_add_change(self, value: float) -> None:
        self._add_val.set(f"Яркость: {value:.0f}")
        self._emit_params_change()

    def _on_mult_change(self, value: float) -> None:
        self._mult_val.set(f"Контраст: {value:.2f}")
        self._emit_params_change()

    def reset_params(self) -> None:
        self._code_val.set(defaults.DEFAULT_NEIGHBORS)
        self._add_slider.set(defaults.DEFAULT_ADD)
        self._mult_slider.set(defaults.DEFAULT_MULT)
        self._add_val.set(f"Яркость: {defaults.DEFAULT_ADD:.0f}")
        self._mult_val.set(f"Контраст: {defaults.DEFAULT_MULT:.2f}")
        self._invert_var.set(False)
        self._gray_var.set(False)
        self._emit_params_change()
