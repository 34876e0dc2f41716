"""Растровая сетка RGB-пикселей (8 бит на канал).

Принципы:
- Значимый тип: сетка владеет своей копией данных, массив только для чтения.
- Инвариант width × height == число пикселей проверяется при создании.
"""
from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np

Rgb = Tuple[int, int, int]
GridSource = Union[np.ndarray, Sequence[Rgb], Iterable[Rgb]]


class PixelGrid:
    """Плотная построчная сетка троек (r, g, b)."""

    __slots__ = ("_pixels", "_width", "_height")

    def __init__(self, data: GridSource, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"Размеры не могут быть отрицательными: {width}x{height}")

        arr = np.array(data if isinstance(data, np.ndarray) else list(data), dtype=np.uint8)
        count = width * height
        if arr.size == 0 and count == 0:
            arr = np.zeros((height, width, 3), dtype=np.uint8)
        elif arr.ndim < 2 or arr.shape[-1] != 3 or arr.size != count * 3:
            raise ValueError(
                f"Ожидалось {count} RGB-пикселей для {width}x{height}, получен массив формы {arr.shape}"
            )
        arr = arr.reshape(height, width, 3)
        arr.flags.writeable = False

        self._pixels = arr
        self._width = width
        self._height = height

    # ---- Constructors ----
    @classmethod
    def zeroed(cls, width: int, height: int) -> "PixelGrid":
        return cls(np.zeros((height, width, 3), dtype=np.uint8), width, height)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "PixelGrid":
        """Создаёт сетку из массива формы (height, width, 3)."""
        if arr.ndim != 3 or arr.shape[2] != 3:
            raise ValueError(f"Ожидался массив формы (H, W, 3), получено {arr.shape}")
        height, width = arr.shape[:2]
        return cls(arr, width, height)

    # ---- Accessors ----
    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def shape(self) -> Tuple[int, int]:
        """(height, width), как у numpy."""
        return self._height, self._width

    @property
    def pixels(self) -> np.ndarray:
        """Массив (height, width, 3) uint8, только для чтения."""
        return self._pixels

    def row(self, x: int) -> np.ndarray:
        return self._pixels[x]

    def pixel(self, x: int, y: int) -> Rgb:
        """Пиксель в строке x, столбце y."""
        r, g, b = self._pixels[x, y]
        return int(r), int(g), int(b)

    def to_list(self) -> List[Rgb]:
        return [tuple(int(c) for c in px) for px in self._pixels.reshape(-1, 3)]

    def __len__(self) -> int:
        return self._width * self._height

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._pixels, other._pixels))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PixelGrid(width={self._width}, height={self._height})"
