"""Параметры гравировального фильтра."""
from __future__ import annotations

from dataclasses import dataclass

from engraver.models.neighbor_weights import NeighborWeights


@dataclass(frozen=True)
class FilterConfig:
    """Неизменяемый набор параметров одного запуска фильтра.

    Fields:
        weights: Маска соседей 3×3.
        add: Сдвиг яркости (127 — середина диапазона).
        mult: Множитель контрастности.
        invert: Инвертировать результат.
        grayscale: Свести результат к одной яркости.
    """
    weights: NeighborWeights
    add: float
    mult: float
    invert: bool = False
    grayscale: bool = False

    @classmethod
    def from_values(
        cls,
        neighbor_code: str,
        add: float,
        mult: float,
        invert: bool = False,
        grayscale: bool = False,
    ) -> "FilterConfig":
        """Собирает конфигурацию из «сырых» значений фронтенда.

        Raises:
            ParseNeighborsError: если код соседей некорректен.
        """
        return cls(
            weights=NeighborWeights.parse(neighbor_code),
            add=float(add),
            mult=float(mult),
            invert=bool(invert),
            grayscale=bool(grayscale),
        )
