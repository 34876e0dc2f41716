"""Загрузка и сохранение изображений, перевод между PIL и `PixelGrid`.

Принципы:
- SRP: класс отвечает только за ввод-вывод и приведение к RGB.
- OCP: новые источники (стрим, URL) можно добавить отдельными методами.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from engraver.models.image_model import SourceImage
from engraver.models.pixel_grid import PixelGrid

logger = logging.getLogger(__name__)


class ImageService:
    def load_image(self, file_path: str | Path) -> SourceImage:
        """Загружает изображение с диска и возвращает его вместе с метаданными.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `SourceImage`: RGB-изображение, исходный режим файла и размер файла.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            ValueError: если файл не распознан как изображение.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        try:
            with Image.open(path) as opened:
                source_mode = opened.mode
                pil_image = self.to_rgb(opened)
        except UnidentifiedImageError as exc:
            raise ValueError(f"Файл не является изображением: {path}") from exc

        try:
            size_bytes: Optional[int] = path.stat().st_size
        except OSError:
            size_bytes = None

        logger.info("Loaded %s (%dx%d, %s)", path, pil_image.width, pil_image.height, source_mode)
        return SourceImage(path=path, rgb=pil_image, source_mode=source_mode, size_bytes=size_bytes)

    def decode_image(self, data: bytes) -> Image.Image:
        """Декодирует байты любого поддерживаемого PIL формата в RGB-изображение.

        Raises:
            ValueError: если байты не являются изображением.
        """
        try:
            with Image.open(io.BytesIO(data)) as opened:
                return self.to_rgb(opened)
        except (UnidentifiedImageError, OSError) as exc:
            raise ValueError(f"Не удалось декодировать изображение: {exc}") from exc

    @staticmethod
    def to_rgb(image: Image.Image) -> Image.Image:
        """Приводит изображение к 8-битному RGB: палитра раскрывается, альфа отбрасывается."""
        if image.mode == "RGB":
            image.load()
            return image.copy()
        if image.mode == "P":
            image = image.convert("RGBA")
        return image.convert("RGB")

    def to_grid(self, image: Image.Image) -> PixelGrid:
        rgb = image if image.mode == "RGB" else self.to_rgb(image)
        return PixelGrid.from_array(np.asarray(rgb, dtype=np.uint8))

    @staticmethod
    def to_image(grid: PixelGrid) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(grid.pixels), mode="RGB")

    def encode_png(self, grid: PixelGrid) -> bytes:
        buffer = io.BytesIO()
        self.to_image(grid).save(buffer, format="PNG")
        return buffer.getvalue()

    def save_image(self, grid: PixelGrid, file_path: str | Path) -> Path:
        """Сохраняет сетку; формат выбирается по расширению (по умолчанию PNG).

        Raises:
            OSError: если файл не удалось записать.
            ValueError: если формат не поддерживается.
        """
        path = Path(file_path)
        image = self.to_image(grid)
        if path.suffix:
            image.save(path)
        else:
            image.save(path, format="PNG")
        logger.info("Saved %s (%dx%d)", path, grid.width, grid.height)
        return path
