"""Маска соседей 3×3 и разбор её девятизначного кода.

Принципы:
- SRP: только модель весов и разбор строки, без обработки изображений.
- Неизменяемость: после разбора маска не меняется.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple


# Смещения (строка, столбец) в порядке цифр кода
OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 0), (0, 1),
    (1, -1), (1, 0), (1, 1),
)

CODE_LENGTH = len(OFFSETS)

_CODE_RE = re.compile(r"\+?[0-9]+", re.ASCII)


class ParseNeighborsError(ValueError):
    """Базовая ошибка разбора кода соседей."""


class InvalidLengthError(ParseNeighborsError):
    def __init__(self, code: str) -> None:
        super().__init__(f"Код соседей должен состоять из {CODE_LENGTH} символов, получено {len(code)}: {code!r}")
        self.code = code


class InvalidDigitError(ParseNeighborsError):
    def __init__(self, code: str) -> None:
        super().__init__(f"Код соседей может содержать только цифры 0, 1, 2: {code!r}")
        self.code = code


class Distance(Enum):
    """Расстояние до соседа; значение — цифра в коде."""
    EXCLUDED = 0
    SQRT2 = 1
    ONE = 2

    @property
    def weight(self) -> float:
        """Вес соседа при усреднении: цифра 1 — диагональный вес √2, цифра 2 — единичный."""
        return _WEIGHTS[self]


_WEIGHTS = {
    Distance.EXCLUDED: 0.0,
    Distance.SQRT2: math.sqrt(2.0),
    Distance.ONE: 1.0,
}


@dataclass(frozen=True)
class NeighborWeights:
    """Девять расстояний до соседей, по строкам: от (-1,-1) до (1,1).

    Центральная ячейка разбирается наравне с остальными.
    """
    distances: Tuple[Distance, ...]

    def __post_init__(self) -> None:
        if len(self.distances) != CODE_LENGTH:
            raise ValueError(f"Маска должна содержать {CODE_LENGTH} элементов, получено {len(self.distances)}")
        object.__setattr__(self, "distances", tuple(Distance(d) for d in self.distances))

    @classmethod
    def parse(cls, code: str) -> "NeighborWeights":
        """Разбирает код вида "121202121".

        Длина проверяется до цифр. Строка читается как неотрицательное
        десятичное число и дополняется нулями слева до девяти цифр.

        Raises:
            InvalidLengthError: строка не из девяти символов.
            InvalidDigitError: не число или цифра вне {0, 1, 2}.
        """
        if len(code) != CODE_LENGTH:
            raise InvalidLengthError(code)
        if _CODE_RE.fullmatch(code) is None:
            raise InvalidDigitError(code)

        digits = str(int(code)).zfill(CODE_LENGTH)
        try:
            distances = tuple(Distance(int(d)) for d in digits)
        except ValueError as exc:
            raise InvalidDigitError(code) from exc
        return cls(distances)

    @property
    def weights(self) -> Tuple[float, ...]:
        return tuple(d.weight for d in self.distances)

    @property
    def code(self) -> str:
        """Обратное кодирование в девять цифр."""
        return "".join(str(d.value) for d in self.distances)

    def pairs(self) -> Iterator[Tuple[int, int, float]]:
        """Тройки (dx, dy, вес) в порядке кода."""
        for (dx, dy), distance in zip(OFFSETS, self.distances):
            yield dx, dy, distance.weight

    def __str__(self) -> str:
        return self.code
