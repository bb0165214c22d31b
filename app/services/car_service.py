import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from app.config import settings
from app.schemas.car import CarCreateRequest, CarOut
from app.schemas.common import ApiErrorBody
from app.utils.exceptions import ApiError, ErrorCode

logger = logging.getLogger(__name__)

_car = TypeAdapter(CarOut)
_car_list = TypeAdapter(list[CarOut])
_car_or_none = TypeAdapter(Optional[CarOut])


def _error_message(response: httpx.Response) -> str | None:
    """Pull `message` out of an error body, None when there is none."""
    try:
        body = ApiErrorBody.model_validate(response.json())
    except (ValueError, ValidationError):
        return None
    return body.message or None


class CarService:
    """
    Client for the remote car API.

    Every method is one HTTP round trip scoped by the caller's Neptun code.
    Failures of any kind (error status, unreachable host, unreadable body)
    are raised as ApiError; nothing is retried or cached.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    # ─── Helpers ──────────────────────────────────────────────────────────────
    @staticmethod
    def _path(scope: str, car_id: int | str | None = None) -> str:
        path = f"/api/{quote(scope, safe='')}/car"
        if car_id is not None:
            path += f"/{quote(str(car_id), safe='')}"
        return path

    def _request(self, operation: str, fallback: str, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"{fallback}: {method} {path} unreachable: {e}")
            raise ApiError(fallback, operation, error_code=ErrorCode.API_UNREACHABLE) from e

        if not response.is_success:
            message = _error_message(response) or fallback
            logger.error(f"{fallback}: {method} {path} -> {response.status_code} {message}")
            raise ApiError(message, operation, status_code=response.status_code)
        return response

    @staticmethod
    def _parse(response: httpx.Response, adapter: TypeAdapter, operation: str, fallback: str) -> Any:
        try:
            return adapter.validate_json(response.content)
        except ValidationError as e:
            logger.error(f"{fallback}: unreadable response body: {e}")
            raise ApiError(fallback, operation, error_code=ErrorCode.INVALID_RESPONSE) from e

    # ─── Operations ───────────────────────────────────────────────────────────
    def list_cars(self, scope: str) -> list[CarOut]:
        fallback = "Failed to fetch cars"
        response = self._request("list_cars", fallback, "GET", self._path(scope))
        return self._parse(response, _car_list, "list_cars", fallback)

    def get_car(self, scope: str, car_id: int | str) -> CarOut | None:
        """Fetch one car. A `null` body comes back as None."""
        fallback = "Failed to fetch car"
        response = self._request("get_car", fallback, "GET", self._path(scope, car_id))
        return self._parse(response, _car_or_none, "get_car", fallback)

    def create_car(self, scope: str, car: CarCreateRequest) -> CarOut:
        fallback = "Failed to create car"
        response = self._request(
            "create_car", fallback, "POST", self._path(scope),
            json=car.model_dump(mode="json"),
        )
        created = self._parse(response, _car, "create_car", fallback)
        logger.info(f"Created car #{created.id} ({created.brand} {created.model}) for {scope}")
        return created

    def update_car(self, scope: str, car: CarOut) -> CarOut:
        fallback = "Failed to update car"
        response = self._request(
            "update_car", fallback, "PUT", self._path(scope),
            json=car.model_dump(mode="json"),
        )
        updated = self._parse(response, _car, "update_car", fallback)
        logger.info(f"Updated car #{updated.id} for {scope}")
        return updated

    def delete_car(self, scope: str, car_id: int | str) -> None:
        self._request("delete_car", "Failed to delete car", "DELETE", self._path(scope, car_id))
        logger.info(f"Deleted car #{car_id} for {scope}")


car_service = CarService(settings.API_BASE_URL, timeout=settings.API_TIMEOUT)
