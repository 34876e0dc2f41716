"""Гравировальный фильтр: разность взвешенного среднего соседей и самого пикселя.

Принципы:
- SRP: только математика фильтра; загрузка и сохранение — в `ImageService`.
- Чистая функция: вход не мутируется, результат — новая `PixelGrid`.
"""
from __future__ import annotations

import logging
import os
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, Tuple

import numpy as np
from PIL import Image

from engraver import config as defaults
from engraver.models.filter_config import FilterConfig
from engraver.models.pixel_grid import PixelGrid

logger = logging.getLogger(__name__)

# u64::MAX в float64 округляется до 2**64
_U64_CEIL = float(2 ** 64)


def _round_half_away(values: np.ndarray) -> np.ndarray:
    """Округление к ближайшему целому, половины — от нуля (np.rint округляет к чётному)."""
    with np.errstate(invalid="ignore"):
        whole = np.trunc(values)
        frac = values - whole
        return whole + np.where(np.abs(frac) >= 0.5, np.sign(values), 0.0)


def _wrap_to_u8(values: np.ndarray) -> np.ndarray:
    """Усечение к нулю и перенос по модулю 256, без насыщения; NaN/inf -> 0."""
    with np.errstate(invalid="ignore"):
        finite = np.isfinite(values)
        wrapped = np.mod(np.trunc(np.where(finite, values, 0.0)), 256.0)
    return wrapped.astype(np.uint8)


def _to_unsigned(values: np.ndarray) -> np.ndarray:
    """Насыщающее приведение к беззнаковому 64-битному целому: отрицательные и NaN -> 0."""
    return np.clip(np.nan_to_num(values, nan=0.0), 0.0, _U64_CEIL)


def _neighbour_span(size: int, delta: int, lo: int = 0, hi: Optional[int] = None) -> Tuple[int, int]:
    """Диапазон выходных индексов [lo, hi), для которых сосед i + delta лежит в [0, size).

    Эквивалентно беззнаковому переполнению с последующим отбрасыванием:
    индекс -1 превращается в огромное число и не проходит проверку `< size`.
    """
    hi = size if hi is None else hi
    return max(lo, -delta), min(hi, size - delta)


class EngravingFilter:
    """Применяет гравировальный фильтр к `PixelGrid`.

    Большие изображения режутся на полосы строк и считаются в пуле потоков
    (NumPy отпускает GIL на поэлементных операциях). Результат не зависит
    от числа потоков.
    """

    def __init__(self, workers: Optional[int] = None, parallel_threshold: int = defaults.PARALLEL_MIN_PIXELS) -> None:
        self.workers = max(1, workers if workers is not None else (os.cpu_count() or 1))
        self.parallel_threshold = parallel_threshold

    def apply(self, image: PixelGrid, config: FilterConfig) -> PixelGrid:
        """Возвращает новую сетку того же размера, что и `image`."""
        height, width = image.shape
        if height == 0 or width == 0:
            return PixelGrid.zeroed(width, height)

        started = time.perf_counter()
        src = image.pixels.astype(np.float64)
        out = np.empty((height, width, 3), dtype=np.uint8)

        bands = self._bands(height, width)
        if len(bands) == 1:
            self._engrave_rows(src, config, 0, height, out)
        else:
            with ThreadPoolExecutor(max_workers=len(bands)) as pool:
                futures: List[Future[None]] = [
                    pool.submit(self._engrave_rows, src, config, lo, hi, out) for lo, hi in bands
                ]
                for fut in futures:
                    fut.result()

        logger.debug(
            "Engraved %dx%d with %s in %d band(s), %.1f ms",
            width, height, config.weights.code, len(bands), (time.perf_counter() - started) * 1000.0,
        )
        return PixelGrid.from_array(out)

    def apply_to_image(self, image: Image.Image, config: FilterConfig) -> Image.Image:
        """То же для изображения PIL (приводится к RGB)."""
        rgb = image if image.mode == "RGB" else image.convert("RGB")
        result = self.apply(PixelGrid.from_array(np.asarray(rgb, dtype=np.uint8)), config)
        return Image.fromarray(np.ascontiguousarray(result.pixels), mode="RGB")

    # ---------- Вспомогательные функции ----------
    def _bands(self, height: int, width: int) -> List[Tuple[int, int]]:
        """Разбиение строк на полосы; маленькие изображения — одной полосой."""
        workers = min(self.workers, height)
        if workers <= 1 or height * width < self.parallel_threshold:
            return [(0, height)]
        chunk = (height + workers - 1) // workers
        return [(lo, min(lo + chunk, height)) for lo in range(0, height, chunk)]

    @staticmethod
    def _engrave_rows(src: np.ndarray, config: FilterConfig, lo: int, hi: int, out: np.ndarray) -> None:
        """Считает строки [lo, hi) результата. `src` — float64 (H, W, 3), только чтение."""
        height, width = src.shape[:2]
        rows = hi - lo
        acc = np.zeros((rows, width, 3), dtype=np.float64)
        ms = np.zeros((rows, width), dtype=np.float64)

        # Порядок накопления совпадает с порядком кода соседей
        for dx, dy, weight in config.weights.pairs():
            if weight == 0.0:
                continue
            r0, r1 = _neighbour_span(height, dx, lo, hi)
            c0, c1 = _neighbour_span(width, dy)
            if r0 >= r1 or c0 >= c1:
                continue
            acc[r0 - lo:r1 - lo, c0:c1] += weight * src[r0 + dx:r1 + dx, c0 + dy:c1 + dy]
            ms[r0 - lo:r1 - lo, c0:c1] += weight

        # ms == 0: суммы остаются нулевыми
        np.divide(acc, ms[..., None], out=acc, where=(ms != 0.0)[..., None])

        # NaN/inf в параметрах распространяются до конвертации в 8 бит
        with np.errstate(over="ignore", invalid="ignore"):
            diff = acc - src[lo:hi]
            res = -diff * config.mult + config.add
            if config.invert:
                res = 255.0 - res

        if config.grayscale:
            # каналы читаются как беззнаковые: отрицательная яркость даёт 0
            rounded = _to_unsigned(_round_half_away(res))
            r = rounded[..., 0]
            g = rounded[..., 1]
            b = rounded[..., 2] / 2.0
            with np.errstate(over="ignore", invalid="ignore"):
                norm = np.sqrt(r ** 2 + g ** 2 + b ** 2)
            bright = _wrap_to_u8(_round_half_away(norm) / 1.5)
            out[lo:hi] = bright[..., None]
        else:
            out[lo:hi] = _wrap_to_u8(_round_half_away(res))
