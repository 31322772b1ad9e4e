"""Tests for import validation."""

import pytest

from lending_admin.models.common import Family
from lending_admin.services.validator import validate_batch, validate_record


class TestValidateRecord:
    def test_valid_equipment(self):
        assert validate_record({"name": "Tripod", "category": "camera"}, Family.EQUIPMENT) == []

    def test_missing_and_blank_fields(self):
        errors = validate_record({"name": "   "}, Family.EQUIPMENT)
        assert errors == ["Missing required field: name", "Missing required field: category"]

    def test_equipment_fields_must_be_strings(self):
        errors = validate_record({"name": 123, "category": "camera"}, Family.EQUIPMENT)
        assert errors == ['Field "name" must be a string']

    def test_non_object(self):
        assert validate_record(["name"], Family.EQUIPMENT) == ["Record must be an object"]

    def test_loan_dates_in_order(self):
        record = {
            "equipmentId": "eq-1",
            "userId": "u-1",
            "borrowDate": "2024-01-01",
            "expectedReturnDate": "2024-01-08",
        }
        assert validate_record(record, Family.LOANS) == []

    def test_loan_return_before_borrow(self):
        record = {
            "equipmentId": "eq-1",
            "userId": "u-1",
            "borrowDate": "2024-01-08",
            "expectedReturnDate": "2024-01-01",
        }
        assert validate_record(record, Family.LOANS) == ["expectedReturnDate must be after borrowDate"]

    def test_equal_reservation_times_are_rejected(self):
        record = {
            "equipmentId": "eq-1",
            "userId": "u-1",
            "startTime": "2024-01-01T10:00:00Z",
            "endTime": "2024-01-01T10:00:00Z",
        }
        assert validate_record(record, Family.RESERVATIONS) == ["endTime must be after startTime"]

    def test_epoch_millis_are_dates(self):
        record = {
            "equipmentId": "eq-1",
            "userId": "u-1",
            "borrowDate": 1_704_067_200_000,
            "expectedReturnDate": 1_704_672_000_000,
        }
        assert validate_record(record, Family.LOANS) == []

        record["expectedReturnDate"] = 1_704_000_000_000
        assert validate_record(record, Family.LOANS) == ["expectedReturnDate must be after borrowDate"]

    def test_out_of_range_epoch_is_invalid(self):
        record = {"equipmentId": "eq-1", "userId": "u-1", "startTime": 1e20, "endTime": 0}
        assert validate_record(record, Family.RESERVATIONS) == ['Field "startTime" must be a valid date']

    def test_unparseable_dates(self):
        record = {
            "equipmentId": "eq-1",
            "userId": "u-1",
            "startTime": "soon",
            "endTime": "2024-01-01T10:00:00Z",
        }
        assert validate_record(record, Family.RESERVATIONS) == ['Field "startTime" must be a valid date']

    def test_unknown_family_only_checks_object(self):
        assert validate_record({"anything": 1}, "gadgets") == []


class TestValidateBatch:
    def test_equipment_batch(self):
        records = [
            {"name": "Tripod", "category": "camera"},
            {"name": "Lens"},
            {"name": "Mic", "category": "audio"},
        ]
        result = validate_batch(records, Family.EQUIPMENT)

        assert result.is_valid is False
        assert result.total_records == 3
        assert result.valid_count == 2
        assert result.error_count == 1
        assert result.valid_records == [records[0], records[2]]
        assert result.errors[0].index == 1
        assert result.errors[0].errors == ["Missing required field: category"]

    def test_all_valid(self):
        result = validate_batch([{"name": "A", "category": "b"}], Family.EQUIPMENT)
        assert result.is_valid is True
        assert result.errors == []

    def test_empty_list_is_valid(self):
        result = validate_batch([], Family.LOANS)
        assert result.is_valid is True
        assert result.total_records == 0

    @pytest.mark.parametrize("data", [None, {"name": "A"}, "text"])
    def test_non_array(self, data):
        result = validate_batch(data, Family.EQUIPMENT)
        assert result.is_valid is False
        assert result.error_count == 1
        assert result.errors[0].index == -1
        assert result.errors[0].errors == ["Data must be an array"]
