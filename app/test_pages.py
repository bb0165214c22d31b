import unittest

from fastapi.testclient import TestClient

from app.dependencies import get_car_service
from app.main import create_app
from app.testing import FakeCarApi

NEW_CAR = {
    "brand": "Tesla",
    "model": "Model 3",
    "owner": "Jane Doe",
    "electric": "on",
    "dayOfCommission": "2024-01-01",
}


class PageTestCase(unittest.TestCase):

    def setUp(self):
        self.api = FakeCarApi()
        self.app = create_app()
        self.app.dependency_overrides[get_car_service] = self.api.service
        self.client = TestClient(self.app, follow_redirects=False)


class TestHomePage(PageTestCase):

    def test_scope_entry_without_neptun(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertIn("Enter Your Neptun Code", response.text)
        self.assertIn("Please enter your Neptun code", response.text)
        self.assertEqual(self.api.requests, [])

    def test_empty_list_renders_empty_state(self):
        response = self.client.get("/", params={"neptun": "ABC123"})
        self.assertEqual(response.status_code, 200)
        self.assertIn("No cars found.", response.text)
        self.assertNotIn('class="alert"', response.text)

    def test_neptun_code_is_kept_in_entry_form(self):
        response = self.client.get("/", params={"neptun": "ABC123"})
        self.assertIn('name="neptun" value="ABC123"', response.text)

    def test_list_rows(self):
        car_id = self.api.add("ABC123", brand="Mercedes-Benz", model="EQS", electric=True, fuelUse=0)
        response = self.client.get("/", params={"neptun": "ABC123"})
        self.assertIn(f'data-car-id="{car_id}"', response.text)
        self.assertIn("Mercedes-Benz", response.text)
        self.assertIn(f"/?neptun=ABC123&amp;view={car_id}", response.text)

    def test_list_error_is_shown_inline(self):
        self.api.fail_next("GET", 500, {"message": "Invalid Neptun code"})
        response = self.client.get("/", params={"neptun": "ABC123"})
        self.assertEqual(response.status_code, 200)
        self.assertIn('<div class="alert">Invalid Neptun code</div>', response.text)

    def test_view_overlay(self):
        car_id = self.api.add("ABC123", brand="Volvo", model="XC40")
        response = self.client.get("/", params={"neptun": "ABC123", "view": car_id})
        self.assertIn('class="modal open"', response.text)
        self.assertIn('aria-label="Car Details"', response.text)
        self.assertIn("Volvo", response.text)
        self.assertIn('<body class="scroll-locked">', response.text)

    def test_delete_confirmation_overlay(self):
        car_id = self.api.add("ABC123")
        response = self.client.get("/", params={"neptun": "ABC123", "delete": car_id})
        self.assertIn("Are you sure you want to delete this car?", response.text)
        self.assertIn(f'action="/cars/{car_id}/delete?neptun=ABC123"', response.text)
        self.assertEqual(self.api.count("DELETE"), 0)

    def test_create_overlay(self):
        response = self.client.get("/", params={"neptun": "ABC123", "create": 1})
        self.assertIn('aria-label="Add New Car"', response.text)
        self.assertIn('name="embedded" value="1"', response.text)

    def test_bad_overlay_param_is_422_page(self):
        response = self.client.get("/", params={"neptun": "ABC123", "view": "abc"})
        self.assertEqual(response.status_code, 422)
        self.assertIn("VALIDATION_ERROR", response.text)


class TestCarPages(PageTestCase):

    def test_missing_neptun_code(self):
        response = self.client.get("/cars/edit/1")
        self.assertEqual(response.status_code, 400)
        self.assertIn("Neptun code is missing", response.text)
        self.assertIn('href="/"', response.text)

    def test_standalone_detail(self):
        car_id = self.api.add("ABC123", brand="Audi", model="A4")
        response = self.client.get(f"/cars/{car_id}", params={"neptun": "ABC123"})
        self.assertEqual(response.status_code, 200)
        self.assertIn("Audi", response.text)
        self.assertIn("Back to List", response.text)

    def test_standalone_detail_not_found(self):
        response = self.client.get("/cars/77", params={"neptun": "ABC123"})
        self.assertIn("Car not found", response.text)

    def test_edit_page_seeds_form(self):
        car_id = self.api.add("ABC123", brand="Kia", model="Ceed", owner="John Smith")
        response = self.client.get(f"/cars/edit/{car_id}", params={"neptun": "ABC123"})
        self.assertIn("Edit Car", response.text)
        self.assertIn('<option value="Kia" selected>Kia</option>', response.text)
        self.assertIn('value="Ceed"', response.text)

    def test_new_page(self):
        response = self.client.get("/cars/new", params={"neptun": "ABC123"})
        self.assertIn("Add New Car", response.text)
        self.assertIn("Select a brand", response.text)


class TestCarMutations(PageTestCase):

    def test_create_redirects_to_list(self):
        response = self.client.post("/cars?neptun=ABC123", data=NEW_CAR)
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/?neptun=ABC123")
        car = next(iter(self.api.cars["ABC123"].values()))
        self.assertEqual(car["brand"], "Tesla")
        self.assertEqual(car["fuelUse"], 0)

    def test_invalid_create_shows_field_errors(self):
        response = self.client.post("/cars?neptun=ABC123", data={**NEW_CAR, "brand": "", "owner": "Jane"})
        self.assertEqual(response.status_code, 200)
        self.assertIn("Brand is required", response.text)
        self.assertIn("Owner name must contain at least one space", response.text)
        self.assertIn("data-focus", response.text)
        self.assertEqual(self.api.count("POST"), 0)

    def test_create_in_overlay_redirects_to_list(self):
        self.api.add("ABC123", model="Corolla")
        response = self.client.post("/cars?neptun=ABC123", data={**NEW_CAR, "embedded": "1"})
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/?neptun=ABC123")
        self.assertEqual(self.api.count("POST"), 1)
        self.assertEqual(len(self.api.cars["ABC123"]), 2)

        page = self.client.get(response.headers["location"])
        new_id = max(self.api.cars["ABC123"])
        self.assertIn(f'data-car-id="{new_id}"', page.text)
        self.assertNotIn('class="modal open"', page.text)

    def test_update_in_overlay_redirects_to_list(self):
        car_id = self.api.add("ABC123", brand="Ford", model="Focus")
        data = {"brand": "Ford", "model": "Mondeo", "fuelUse": "6.8",
                "owner": "John Smith", "dayOfCommission": "2020-05-01", "embedded": "1"}
        response = self.client.post(f"/cars/{car_id}?neptun=ABC123", data=data)
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/?neptun=ABC123")
        self.assertEqual(self.api.cars["ABC123"][car_id]["model"], "Mondeo")

    def test_cancel_in_overlay_redirects_to_list(self):
        response = self.client.post("/cars?neptun=ABC123", data={**NEW_CAR, "embedded": "1", "action": "cancel"})
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/?neptun=ABC123")
        self.assertEqual(self.api.count("POST"), 0)

    def test_invalid_create_in_overlay_stays_in_overlay(self):
        response = self.client.post("/cars?neptun=ABC123", data={**NEW_CAR, "brand": "", "embedded": "1"})
        self.assertEqual(response.status_code, 200)
        self.assertIn('class="modal open"', response.text)
        self.assertIn('aria-label="Add New Car"', response.text)
        self.assertIn("Brand is required", response.text)
        self.assertIn('name="embedded" value="1"', response.text)
        self.assertEqual(self.api.count("POST"), 0)

    def test_failed_update_in_overlay_shows_server_message(self):
        data = {"brand": "Ford", "model": "Focus", "fuelUse": "6.8",
                "owner": "John Smith", "dayOfCommission": "2020-05-01", "embedded": "1"}
        response = self.client.post("/cars/99?neptun=ABC123", data=data)
        self.assertEqual(response.status_code, 200)
        self.assertIn('aria-label="Edit Car"', response.text)
        self.assertIn("Car with id 99 not found", response.text)

    def test_cancel_does_not_save(self):
        response = self.client.post("/cars?neptun=ABC123", data={**NEW_CAR, "action": "cancel"})
        self.assertEqual(response.status_code, 303)
        self.assertEqual(self.api.count("POST"), 0)

    def test_update_redirects_to_list(self):
        car_id = self.api.add("ABC123", brand="Ford", model="Focus")
        data = {"brand": "Ford", "model": "Mondeo", "fuelUse": "6.8",
                "owner": "John Smith", "dayOfCommission": "2020-05-01"}
        response = self.client.post(f"/cars/{car_id}?neptun=ABC123", data=data)
        self.assertEqual(response.status_code, 303)
        self.assertEqual(self.api.cars["ABC123"][car_id]["model"], "Mondeo")

    def test_update_missing_car_stays_on_form(self):
        data = {"brand": "Ford", "model": "Focus", "fuelUse": "6.8",
                "owner": "John Smith", "dayOfCommission": "2020-05-01"}
        response = self.client.post("/cars/99?neptun=ABC123", data=data)
        self.assertEqual(response.status_code, 200)
        self.assertIn("Car with id 99 not found", response.text)
        self.assertIn('action="/cars/99?neptun=ABC123"', response.text)

    def test_delete_from_list_removes_row_without_refetch(self):
        keep = self.api.add("ABC123", model="Corolla")
        drop = self.api.add("ABC123", model="Yaris")
        response = self.client.post(f"/cars/{drop}/delete?neptun=ABC123", data={"origin": "list"})
        self.assertEqual(response.status_code, 200)
        self.assertIn(f'data-car-id="{keep}"', response.text)
        self.assertNotIn(f'data-car-id="{drop}"', response.text)
        # the rows are read once, before the DELETE
        self.assertEqual([r.method for r in self.api.requests], ["GET", "DELETE"])

    def test_delete_from_detail_page_redirects(self):
        car_id = self.api.add("ABC123")
        response = self.client.post(f"/cars/{car_id}/delete?neptun=ABC123", data={"origin": "detail"})
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/?neptun=ABC123")
        self.assertEqual(self.api.cars["ABC123"], {})

    def test_delete_from_detail_overlay_redirects_to_list(self):
        car_id = self.api.add("ABC123")
        response = self.client.post(
            f"/cars/{car_id}/delete?neptun=ABC123", data={"origin": "detail", "embedded": "1"},
        )
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/?neptun=ABC123")
        self.assertEqual(self.api.cars["ABC123"], {})

    def test_failed_delete_from_detail_overlay_stays_in_overlay(self):
        car_id = self.api.add("ABC123")
        self.api.fail_next("DELETE", 500, {"message": "Cannot delete"})
        response = self.client.post(
            f"/cars/{car_id}/delete?neptun=ABC123", data={"origin": "detail", "embedded": "1"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertIn('aria-label="Car Details"', response.text)
        self.assertIn("Cannot delete", response.text)
        self.assertIn(car_id, self.api.cars["ABC123"])


class TestHealth(PageTestCase):

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")


if __name__ == '__main__':
    unittest.main()
