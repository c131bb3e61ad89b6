"""
Tests for Pydantic schemas validation.
"""
from datetime import datetime

import pytest
from pydantic import ValidationError

from app.schemas.envelope import Envelope, format_validation_errors
from app.schemas.property import PropertyCreate, PropertyFilters, PropertyResponse


class TestEnvelope:
    """Tests for the response envelope."""

    def test_failure_envelope(self):
        envelope = Envelope(success=False, message="No file uploaded")
        assert envelope.model_dump() == {"success": False, "data": None, "message": "No file uploaded"}

    def test_success_envelope(self):
        envelope = Envelope(success=True, data={"url": "http://x/uploads/a.png"}, message="File uploaded")
        assert envelope.data["url"] == "http://x/uploads/a.png"

    def test_format_validation_errors(self):
        errors = [
            {"loc": ("body", "price"), "msg": "Input should be a valid integer"},
            {"loc": ("query", "minPrice"), "msg": "Input should be greater than or equal to 0"},
        ]
        assert format_validation_errors(errors) == (
            "price: Input should be a valid integer; "
            "minPrice: Input should be greater than or equal to 0"
        )

    def test_format_validation_errors_empty(self):
        assert format_validation_errors([]) == "Invalid request"


class TestPropertyFilters:
    """Tests for browsing filters."""

    @pytest.mark.parametrize("value", ["", "Any", "All", "any", "  "])
    def test_empty_values_dropped(self, value):
        filters = PropertyFilters(search=value, town=value, type=value, bedrooms=value)

        assert filters.search is None
        assert filters.town is None
        assert filters.type is None
        assert filters.bedrooms is None

    def test_prices_from_query_aliases(self):
        filters = PropertyFilters(minPrice="0", maxPrice="500000")

        assert filters.min_price == 0
        assert filters.max_price == 500000

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            PropertyFilters(minPrice="-1")

    def test_bedrooms_exact(self):
        assert PropertyFilters(bedrooms="3").bedrooms_bound() == (3, False)

    def test_bedrooms_at_least(self):
        assert PropertyFilters(bedrooms="5+").bedrooms_bound() == (5, True)

    def test_bedrooms_absent(self):
        assert PropertyFilters().bedrooms_bound() is None

    def test_bedrooms_invalid(self):
        with pytest.raises(ValidationError):
            PropertyFilters(bedrooms="many")


class TestPropertyCreate:
    """Tests for the submission form schema."""

    def test_defaults(self):
        schema = PropertyCreate(name="Cottage")

        assert schema.bedrooms == 1
        assert schema.type == "Apartment"
        assert schema.price is None
        assert schema.description == ""

    def test_name_is_stripped(self):
        assert PropertyCreate(name="  Cottage ").name == "Cottage"

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            PropertyCreate(name="   ")

    def test_empty_price_is_none(self):
        assert PropertyCreate(name="Cottage", price="").price is None

    def test_form_strings_coerced(self):
        schema = PropertyCreate(name="Cottage", price="3000", bedrooms="4")

        assert schema.price == 3000
        assert schema.bedrooms == 4


class TestPropertyResponse:
    """Tests for property response schema."""

    def test_from_attributes(self):
        class Row:
            id = "p-1"
            name = "Cottage"
            description = ""
            location = "Diani"
            price = 3000
            bedrooms = 1
            type = "Cottage"
            image_url = "http://test/uploads/a.png"
            owner_uid = "owner-1"
            created_at = datetime(2024, 1, 1, 12, 0, 0)

        schema = PropertyResponse.model_validate(Row())

        assert schema.id == "p-1"
        assert schema.location == "Diani"
