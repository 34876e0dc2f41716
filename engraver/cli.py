"""Консольный интерфейс: превращает изображение в подобие гравюры.

Пример:
    engraver photo.png engraving.png -n 121202121 -a 127 -m 0.5 --gray
"""
from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from engraver import config as defaults
from engraver.logging_config import setup_logging
from engraver.models.filter_config import FilterConfig
from engraver.models.neighbor_weights import NeighborWeights, ParseNeighborsError
from engraver.services.engraving_filter import EngravingFilter
from engraver.services.image_service import ImageService

logger = logging.getLogger(__name__)


def _neighbors_arg(value: str) -> NeighborWeights:
    try:
        return NeighborWeights.parse(value)
    except ParseNeighborsError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="engraver",
        description="Превращает изображение в подобие гравюры.",
    )
    parser.add_argument("infile", help="входной файл картинки (PNG и другие форматы Pillow)")
    parser.add_argument("outfile", help="выходной файл картинки (формат по расширению, по умолчанию PNG)")
    parser.add_argument(
        "-n", "--neighbors", "--neiboors",
        dest="neighbors",
        type=_neighbors_arg,
        default=defaults.DEFAULT_NEIGHBORS,
        help=f"расстояния до соседей, 9 цифр из 0/1/2 (по умолчанию {defaults.DEFAULT_NEIGHBORS})",
    )
    parser.add_argument(
        "-a", "--add", type=float, default=defaults.DEFAULT_ADD,
        help=f"яркость, от 0 до 255 (по умолчанию {defaults.DEFAULT_ADD})",
    )
    parser.add_argument(
        "-m", "--mult", type=float, default=defaults.DEFAULT_MULT,
        help=f"множитель контрастности (по умолчанию {defaults.DEFAULT_MULT})",
    )
    parser.add_argument("-i", "--invert", action="store_true", help="инвертировать цвета")
    parser.add_argument("-g", "--gray", action="store_true", help="убрать цвета")
    parser.add_argument(
        "-j", "--workers", type=int, default=None,
        help="число потоков (по умолчанию — по числу ядер)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="подробный лог")
    parser.add_argument("--log-file", default=None, help="дополнительно писать лог в файл")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO, log_file=args.log_file)

    conf = FilterConfig(weights=args.neighbors, add=args.add, mult=args.mult, invert=args.invert, grayscale=args.gray)

    images = ImageService()
    try:
        source = images.load_image(args.infile)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Не удалось открыть файл. Причина: %s", exc)
        return 1

    result = EngravingFilter(workers=args.workers).apply(images.to_grid(source.rgb), conf)

    try:
        images.save_image(result, args.outfile)
    except (OSError, ValueError) as exc:
        logger.error("Не удалось сохранить результат. Причина: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
