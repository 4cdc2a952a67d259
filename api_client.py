"""Client for the food desert evaluator endpoint."""

import logging

import requests

from config import Config
from exceptions import UpstreamError
from models import Coordinate, FoodDesertResult

logger = logging.getLogger(__name__)
_SESSION = requests.Session()


def request_food_desert_check(
    coordinate: Coordinate,
    base_url: str,
    timeout: float = 10
) -> FoodDesertResult:
    url = f"{base_url.rstrip('/')}{Config.CHECK_FOOD_DESERT_PATH}"

    try:
        response = _SESSION.post(url, json=coordinate.to_dict(), timeout=timeout)
    except requests.RequestException as e:
        logger.error(f"Evaluator request failed: {e}")
        raise UpstreamError("Could not reach the food desert service") from e

    if response.status_code != 200:
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}
        message = payload.get("error") or payload.get("message") or "Food desert check failed"
        logger.error(f"Evaluator responded with status {response.status_code}: {response.text}")
        raise UpstreamError(message, status=response.status_code, body=response.text)

    try:
        return FoodDesertResult.from_dict(response.json())
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        logger.error(f"Unexpected evaluator response: {e}: {response.text}")
        raise UpstreamError(
            "Unexpected response from the food desert service",
            status=response.status_code,
            body=response.text
        ) from e
