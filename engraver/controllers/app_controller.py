"""Контроллер приложения: оркестрация UI и сервисов.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без математики фильтра).
- DIP: зависит от сервисов как от ролей; конкретные реализации инкапсулированы.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from tkinter import filedialog, TclError
from typing import Optional

import customtkinter as ctk
from PIL import Image

from engraver.models.filter_config import FilterConfig
from engraver.models.image_model import SourceImage
from engraver.models.neighbor_weights import ParseNeighborsError
from engraver.services.engraving_filter import EngravingFilter
from engraver.services.image_service import ImageService
from engraver.ui.bottom_bar import BottomBar
from engraver.ui.image_viewer import ImageViewer
from engraver.ui.sidebar import Sidebar

logger = logging.getLogger(__name__)


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Бинд событий (UI -> контроллер).
    - Загрузка и сохранение через `ImageService`.
    - Перерасчёт гравюры через `EngravingFilter` при смене параметров.
    """
    viewer: ImageViewer
    sidebar: Sidebar
    bottom: BottomBar
    window: ctk.CTk

    _image_service: ImageService = field(default_factory=ImageService)
    _engraving_filter: EngravingFilter = field(default_factory=EngravingFilter)
    _current_image: Optional[SourceImage] = None
    _result_image: Optional[Image.Image] = None

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами."""
        self.sidebar.on_open_file = self.open_file
        self.sidebar.on_save_file = self.save_file
        self.sidebar.on_params_change = self._apply_processing

        self.viewer.on_zoom_change = self.bottom.set_zoom_percent

        self.bottom.on_zoom_fit = self._handle_zoom_fit
        self.bottom.on_compare_mode_change = self.viewer.set_compare_mode
        self.bottom.on_wipe_change = self.viewer.set_wipe_percent

    # ---- Handlers (public: also bound to window shortcuts) ----
    def open_file(self) -> None:
        try:
            file_path = filedialog.askopenfilename(
                title="Выберите изображение",
                filetypes=(
                    ("Images", "*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp"),
                    ("All files", "*.*"),
                ),
            )
        except TclError:
            return

        if not file_path:
            return

        try:
            image_data = self._image_service.load_image(file_path)
        except (FileNotFoundError, ValueError) as exc:
            logger.error("Не удалось открыть файл: %s", exc)
            self.bottom.set_status(str(exc))
            return

        self._current_image = image_data
        self.viewer.set_image(image_data.rgb)
        self.sidebar.set_image_info(image_data)
        self._apply_processing()
        self.bottom.set_zoom_percent(self.viewer.get_zoom_percent())

    def save_file(self) -> None:
        if self._result_image is None:
            return
        try:
            file_path = filedialog.asksaveasfilename(
                title="Сохранить гравюру",
                defaultextension=".png",
                filetypes=(("PNG", "*.png"), ("All files", "*.*")),
            )
        except TclError:
            return
        if not file_path:
            return

        grid = self._image_service.to_grid(self._result_image)
        try:
            path = self._image_service.save_image(grid, file_path)
        except (OSError, ValueError) as exc:
            logger.error("Не удалось сохранить результат: %s", exc)
            self.bottom.set_status(f"Ошибка сохранения: {exc}")
            return
        self.bottom.set_status(f"Сохранено: {path.name}")

    def _handle_zoom_fit(self) -> None:
        self.viewer.set_zoom_to_fit()
        self.bottom.set_zoom_percent(self.viewer.get_zoom_percent())

    # ---- Helpers ----
    def _apply_processing(self) -> None:
        """Пересчитывает гравюру по текущим параметрам сайдбара.

        Некорректный код соседей показывается в сайдбаре, результат сбрасывается.
        """
        if self._current_image is None:
            return
        code, add, mult, invert, gray = self.sidebar.get_params()
        try:
            conf = FilterConfig.from_values(code, add=add, mult=mult, invert=invert, grayscale=gray)
        except ParseNeighborsError as exc:
            self.sidebar.set_error(str(exc))
            self._set_result(None)
            return
        self.sidebar.set_error(None)

        started = time.perf_counter()
        result = self._engraving_filter.apply_to_image(self._current_image.rgb, conf)
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        self._set_result(result)
        self.bottom.set_status(f"{conf.weights.code} · {elapsed_ms:.0f} мс")

    def _set_result(self, image: Optional[Image.Image]) -> None:
        self._result_image = image
        self.viewer.set_processed_image(image)
        self.sidebar.set_save_enabled(image is not None)
