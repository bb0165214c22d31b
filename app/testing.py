"""
In-memory stand-in for the remote car API, for tests.

Plugs into CarService through httpx.MockTransport, so the real client code
(URL building, status handling, JSON parsing) runs against it.

Usage:
    api = FakeCarApi()
    car_id = api.add("ABC123", brand="Toyota", model="Corolla")
    service = api.service()
    service.list_cars("ABC123")
"""

import json
from collections import defaultdict
from typing import Any, Optional

import httpx

from app.services.car_service import CarService

SAMPLE_CAR: dict[str, Any] = {
    "brand": "Toyota",
    "model": "Corolla",
    "fuelUse": 5.5,
    "owner": "John Smith",
    "dayOfCommission": "2020-05-01",
    "electric": False,
}


class FakeCarApi:

    def __init__(self):
        self.cars: dict[str, dict[int, dict]] = defaultdict(dict)
        self.requests: list[httpx.Request] = []
        self._next_id = 1
        self._failures: dict[str, httpx.Response] = {}

    # ─── Setup ────────────────────────────────────────────────────────────────
    def add(self, scope: str, **fields) -> int:
        car_id = self._next_id
        self._next_id += 1
        self.cars[scope][car_id] = {**SAMPLE_CAR, **fields, "id": car_id}
        return car_id

    def fail_next(self, method: str, status_code: int, body: Any = None, raw: Optional[bytes] = None) -> None:
        """Make the next request with `method` answer with an error."""
        if raw is not None:
            self._failures[method] = httpx.Response(status_code, content=raw)
        else:
            self._failures[method] = httpx.Response(status_code, json=body)

    def service(self) -> CarService:
        return CarService("http://car-api.test", transport=httpx.MockTransport(self))

    def count(self, method: str) -> int:
        return sum(1 for r in self.requests if r.method == method)

    # ─── Transport handler ────────────────────────────────────────────────────
    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method in self._failures:
            return self._failures.pop(request.method)

        parts = request.url.path.strip("/").split("/")
        if len(parts) < 3 or parts[0] != "api" or parts[2] != "car":
            return httpx.Response(404, json={"message": "Unknown endpoint"})
        cars = self.cars[parts[1]]
        car_id = parts[3] if len(parts) > 3 else None

        if request.method == "GET" and car_id is None:
            return httpx.Response(200, json=list(cars.values()))

        if request.method == "POST" and car_id is None:
            body = json.loads(request.content)
            new_id = self.add(parts[1], **body)
            return httpx.Response(201, json=cars[new_id])

        if request.method == "PUT" and car_id is None:
            body = json.loads(request.content)
            if body.get("id") not in cars:
                return httpx.Response(404, json={"message": f"Car with id {body.get('id')} not found"})
            cars[body["id"]] = body
            return httpx.Response(200, json=body)

        if car_id is not None and car_id.isdigit() and int(car_id) in cars:
            if request.method == "GET":
                return httpx.Response(200, json=cars[int(car_id)])
            if request.method == "DELETE":
                del cars[int(car_id)]
                return httpx.Response(204)

        if car_id is not None:
            return httpx.Response(404, json={"message": "Car not found"})
        return httpx.Response(405, json={"message": "Method not allowed"})
