"""Загруженный исходник гравюры.

Фильтр работает только с RGB, поэтому изображение приводится к RGB при
загрузке, а исходный режим файла хранится отдельно для отображения.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image


@dataclass(frozen=True)
class SourceImage:
    """Исходное изображение для гравировки.

    Fields:
        path: Путь к файлу.
        rgb: Изображение PIL в режиме RGB.
        source_mode: Режим PIL в файле до приведения, например "P" или "RGBA".
        size_bytes: Размер файла, если доступен.
    """
    path: Path
    rgb: Image.Image
    source_mode: str
    size_bytes: Optional[int]

    @property
    def width(self) -> int:
        return self.rgb.width

    @property
    def height(self) -> int:
        return self.rgb.height

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def converted(self) -> bool:
        """Пришлось ли приводить файл к RGB (палитра, альфа, оттенки серого)."""
        return self.source_mode != "RGB"

    def mode_label(self) -> str:
        return f"{self.source_mode} → RGB" if self.converted else "RGB"
