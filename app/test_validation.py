import math
import unittest

from app.schemas.car import VALID_BRANDS, CarFormData
from app.utils.validation import as_flag, is_valid_car, validate_car


def _car(**overrides) -> dict:
    car = {
        "brand": "Toyota",
        "model": "Corolla",
        "fuelUse": 6.2,
        "owner": "Jane Doe",
        "dayOfCommission": "2024-01-15",
        "electric": False,
    }
    car.update(overrides)
    return car


class TestValidateCar(unittest.TestCase):

    def test_valid_car_has_no_errors(self):
        self.assertEqual(validate_car(_car()), {})
        self.assertTrue(is_valid_car(_car()))

    def test_valid_electric_car_has_no_errors(self):
        car = _car(brand="Tesla", model="Model 3", electric=True, fuelUse=0, dayOfCommission="2024-01-01")
        self.assertEqual(validate_car(car), {})

    def test_all_errors_are_collected_in_one_pass(self):
        errors = validate_car({"brand": "", "model": "", "fuelUse": None, "owner": "", "dayOfCommission": ""})
        self.assertEqual(errors, {
            "brand": "Brand is required",
            "model": "Model is required",
            "fuelUse": "Fuel use value is required",
            "owner": "Owner is required",
            "dayOfCommission": "Commission date is required",
        })

    # ─── brand ────────────────────────────────────────────────────────────────
    def test_unknown_brand_is_invalid(self):
        self.assertEqual(validate_car(_car(brand="Yugo"))["brand"], "Invalid car brand")

    def test_every_known_brand_is_accepted(self):
        for brand in VALID_BRANDS:
            with self.subTest(brand=brand):
                self.assertNotIn("brand", validate_car(_car(brand=brand)))

    def test_brand_match_is_case_sensitive(self):
        self.assertIn("brand", validate_car(_car(brand="toyota")))

    # ─── model ────────────────────────────────────────────────────────────────
    def test_whitespace_model_is_not_trimmed(self):
        self.assertNotIn("model", validate_car(_car(model=" ")))

    # ─── fuelUse ──────────────────────────────────────────────────────────────
    def test_electric_car_with_fuel_use_is_rejected(self):
        for fuel in (0.1, 5, -1, None, math.nan):
            with self.subTest(fuel=fuel):
                self.assertEqual(
                    validate_car(_car(electric=True, fuelUse=fuel))["fuelUse"],
                    "Fuel use must be 0 for electric cars",
                )

    def test_non_electric_car_needs_positive_fuel_use(self):
        for fuel in (0, -0.5, -10):
            with self.subTest(fuel=fuel):
                self.assertEqual(
                    validate_car(_car(fuelUse=fuel))["fuelUse"],
                    "Fuel use must be greater than 0 for non-electric cars",
                )

    def test_non_electric_car_with_missing_fuel_use(self):
        for fuel in (None, math.nan, "abc", "", True):
            with self.subTest(fuel=fuel):
                self.assertEqual(validate_car(_car(fuelUse=fuel))["fuelUse"], "Fuel use value is required")

    def test_numeric_string_fuel_use_is_accepted(self):
        self.assertNotIn("fuelUse", validate_car(_car(fuelUse="7.4")))

    # ─── owner ────────────────────────────────────────────────────────────────
    def test_owner_without_space_is_rejected(self):
        for owner in ("Jane", "Jane_Doe", "Jane ", " Jane"):
            with self.subTest(owner=owner):
                self.assertEqual(
                    validate_car(_car(owner=owner))["owner"],
                    "Owner name must contain at least one space",
                )

    def test_owner_with_inner_space_is_accepted(self):
        for owner in ("Jane Doe", "Mary Jane Watson"):
            with self.subTest(owner=owner):
                self.assertNotIn("owner", validate_car(_car(owner=owner)))

    # ─── dayOfCommission ──────────────────────────────────────────────────────
    def test_unparseable_date_is_rejected(self):
        for day in ("not-a-date", "2024-02-30", "2024-13-01", "15/01/2024"):
            with self.subTest(day=day):
                self.assertEqual(
                    validate_car(_car(dayOfCommission=day))["dayOfCommission"],
                    "Please enter a valid date",
                )

    def test_leap_day_is_a_valid_date(self):
        self.assertNotIn("dayOfCommission", validate_car(_car(dayOfCommission="2024-02-29")))

    # ─── Input kinds ──────────────────────────────────────────────────────────
    def test_form_data_model_is_accepted(self):
        form = CarFormData(**_car())
        self.assertEqual(validate_car(form), {})

    def test_new_form_defaults_report_missing_fields(self):
        errors = validate_car(CarFormData())
        self.assertEqual(set(errors), {"brand", "model", "fuelUse", "owner"})

    def test_validation_is_idempotent_and_pure(self):
        car = _car(brand="Yugo", owner="Cher", fuelUse=0)
        snapshot = dict(car)
        self.assertEqual(validate_car(car), validate_car(car))
        self.assertEqual(car, snapshot)

    def test_posted_electric_strings_are_read_as_checkbox_values(self):
        self.assertEqual(validate_car(_car(electric="false")), {})
        self.assertEqual(
            validate_car(_car(electric="on"))["fuelUse"],
            "Fuel use must be 0 for electric cars",
        )

    def test_as_flag(self):
        for value in (True, 1, "on", "true", "1", "yes", " TRUE "):
            with self.subTest(value=value):
                self.assertTrue(as_flag(value))
        for value in (False, 0, None, "", "false", "off", "0", "no"):
            with self.subTest(value=value):
                self.assertFalse(as_flag(value))


if __name__ == '__main__':
    unittest.main()
