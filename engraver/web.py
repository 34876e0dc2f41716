"""HTTP-фронтенд: форма загрузки и POST-обработчик, возвращающий PNG.

POST / принимает JSON:
    {"file": [имя, base64], "neighboors": "121202121",
     "add": 127.0, "mult": 0.5, "inv": false, "gray": false}
"""
from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Dict, Tuple

from flask import Flask, Response, jsonify, request

from engraver import config as defaults
from engraver.logging_config import setup_logging
from engraver.models.filter_config import FilterConfig
from engraver.models.pixel_grid import PixelGrid
from engraver.services.engraving_filter import EngravingFilter
from engraver.services.image_service import ImageService

logger = logging.getLogger(__name__)

NOT_FOUND_PAGE = """<!doctype html>
<html lang="ru"><head><meta charset="utf-8"><title>404</title></head>
<body><h1>404</h1><p>Страница не найдена.</p></body></html>
"""


class PayloadError(ValueError):
    """Некорректное тело запроса."""


def _number(payload: Dict[str, Any], key: str) -> float:
    value = payload.get(key)
    # bool — подкласс int, но числом здесь не считается
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PayloadError(f"Поле '{key}' должно быть числом")
    return float(value)


def _flag(payload: Dict[str, Any], key: str) -> bool:
    value = payload.get(key)
    if not isinstance(value, bool):
        raise PayloadError(f"Поле '{key}' должно быть true/false")
    return value


def _decode_file(payload: Dict[str, Any]) -> Tuple[str, bytes]:
    file = payload.get("file")
    if not isinstance(file, (list, tuple)) or len(file) != 2 or not all(isinstance(p, str) for p in file):
        raise PayloadError("Поле 'file' должно быть парой [имя, base64]")
    name, data = file
    # data:image/png;base64,....
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]
    try:
        return name, base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise PayloadError(f"Файл '{name}' не в base64") from exc


def parse_request(payload: Any, images: ImageService) -> Tuple[PixelGrid, FilterConfig]:
    """Разбирает JSON-запрос в сетку пикселей и конфигурацию фильтра.

    Raises:
        PayloadError: структура запроса неверна.
        ParseNeighborsError: некорректный код соседей.
        ValueError: файл не декодируется как изображение.
    """
    if not isinstance(payload, dict):
        raise PayloadError("Ожидался JSON-объект")
    code = payload.get("neighboors")
    if not isinstance(code, str):
        raise PayloadError("Поле 'neighboors' должно быть строкой")

    conf = FilterConfig.from_values(
        code,
        add=_number(payload, "add"),
        mult=_number(payload, "mult"),
        invert=_flag(payload, "inv"),
        grayscale=_flag(payload, "gray"),
    )
    name, content = _decode_file(payload)
    grid = images.to_grid(images.decode_image(content))
    logger.info("Request for %s (%dx%d), neighbors %s", name, grid.width, grid.height, conf.weights.code)
    return grid, conf


def create_app(engraving_filter: EngravingFilter | None = None) -> Flask:
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = defaults.MAX_UPLOAD_BYTES

    images = ImageService()
    engraver = engraving_filter or EngravingFilter()

    @app.route("/", methods=["GET"])
    def index() -> Response:
        return app.send_static_file("index.html")

    @app.route("/", methods=["POST"])
    def engrave() -> Any:
        payload = request.get_json(force=True, silent=True)
        if payload is None:
            return jsonify({"error": "Тело запроса должно быть JSON"}), 400
        try:
            grid, conf = parse_request(payload, images)
        except ValueError as exc:
            logger.warning("Rejected request: %s", exc)
            return jsonify({"error": str(exc)}), 400

        png = images.encode_png(engraver.apply(grid, conf))
        return Response(png, mimetype="image/png")

    @app.route("/health", methods=["GET"])
    def health() -> Any:
        return jsonify({"status": "ok"})

    @app.errorhandler(404)
    def not_found(_error: Exception) -> Tuple[str, int, Dict[str, str]]:
        return NOT_FOUND_PAGE, 404, {"Content-Type": "text/html; charset=utf-8"}

    return app


def main() -> None:
    setup_logging()
    logger.info("Now listening on %s:%d", defaults.WEB_HOST, defaults.WEB_PORT)
    create_app().run(host=defaults.WEB_HOST, port=defaults.WEB_PORT)


if __name__ == "__main__":
    main()
