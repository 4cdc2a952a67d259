"""HTTP entrypoint for the food desert evaluator."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

import food_desert
from config import Config, Settings, get_settings
from exceptions import UpstreamError, ValidationError
from utils.logger_config import setup_logging
from utils.validation import parse_coordinate_payload, validate_coordinates

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> Flask:
    """
    Build the evaluator app.

    The server token is checked here so a missing credential stops the
    process at startup instead of failing every request.
    """
    settings = settings or get_settings()
    access_token = settings.require_server_token()

    app = Flask(__name__)

    @app.errorhandler(405)
    def method_not_allowed(_error: Any) -> Any:
        return jsonify({"message": "Method Not Allowed"}), 405

    @app.get("/healthz")
    def healthcheck() -> Any:
        return jsonify({"status": "ok"}), 200

    @app.route(
        Config.CHECK_FOOD_DESERT_PATH,
        methods=["POST"],
        provide_automatic_options=False,
    )
    def check_food_desert() -> Any:
        """
        Classify a coordinate.
        Required JSON fields: latitude, longitude
        """
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            payload = {}

        try:
            coordinate = parse_coordinate_payload(payload)
        except ValidationError as exc:
            return jsonify({"message": str(exc)}), 400

        if not validate_coordinates(coordinate.latitude, coordinate.longitude):
            logger.warning("Coordinates out of range: %s", coordinate.as_tuple())

        logger.info("Received request for coordinates: %s", coordinate.as_tuple())

        try:
            result = food_desert.check_food_desert(
                coordinate,
                access_token,
                timeout=settings.request_timeout,
            )
        except UpstreamError as exc:
            logger.error("Error checking food desert status: %s (status=%s)", exc, exc.status)
            return _internal_error(str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error checking food desert status: %s", exc)
            return _internal_error(str(exc) or "Unknown error")

        return jsonify(result.to_dict()), 200

    return app


def _internal_error(message: str) -> Any:
    body: Dict[str, Any] = {"message": "Internal Server Error", "error": message}
    return jsonify(body), 500


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)

    app = create_app(settings)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", settings.port)
    app.run(host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
