"""Tests for export flattening."""

from datetime import datetime, timezone

from lending_admin.models.common import Family
from lending_admin.services.projection import EXPORT_FIELDS, export_fields, flatten, is_date_field
from lending_admin.utils.instants import StoreTimestamp

from conftest import loan, ts


class TestExportFields:
    def test_order_is_fixed(self):
        assert export_fields(Family.RESERVATIONS)[:4] == ["id", "equipmentId", "equipmentName", "userId"]
        assert export_fields(Family.EQUIPMENT)[-3:] == ["isActive", "createdAt", "updatedAt"]

    def test_returns_a_copy(self):
        fields = export_fields(Family.LOANS)
        fields.append("extra")
        assert "extra" not in EXPORT_FIELDS[Family.LOANS]

    def test_unknown_family(self):
        assert export_fields("gadgets") == ["id"]

    def test_date_field_names(self):
        assert is_date_field("borrowDate")
        assert is_date_field("approvedAt")
        assert is_date_field("startTime")
        assert not is_date_field("status")


class TestFlatten:
    def test_loan_uses_snapshot_fallbacks(self):
        record = {**loan(1, ts(2024, 1, 1, 12, 0, 0)), "id": "loan-1"}
        flat = flatten(record, Family.LOANS)

        assert list(flat) == EXPORT_FIELDS[Family.LOANS]
        assert flat["equipmentName"] == "Camera 1"
        assert flat["userName"] == "User 1"
        assert flat["userEmail"] == "user1@example.com"
        assert flat["borrowDate"] == "2024-01-01T12:00:00.000Z"
        assert flat["expectedReturnDate"] == "2024-01-08T12:00:00.000Z"
        assert flat["actualReturnDate"] is None
        assert "equipmentSnapshot" not in flat

    def test_explicit_field_wins_over_snapshot(self):
        record = {
            "id": "r1",
            "equipmentName": "Direct name",
            "equipmentSnapshot": {"name": "Snapshot name"},
        }
        assert flatten(record, Family.RESERVATIONS)["equipmentName"] == "Direct name"

    def test_mixed_date_shapes_are_normalized(self):
        record = {
            "id": "r1",
            "startTime": datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc),
            "endTime": "2024-06-01T11:00:00Z",
            "createdAt": {"seconds": 0, "nanoseconds": 0},
            "updatedAt": StoreTimestamp(60),
            "approvedAt": "whenever",
        }
        flat = flatten(record, Family.RESERVATIONS)
        assert flat["startTime"] == "2024-06-01T09:00:00.000Z"
        assert flat["endTime"] == "2024-06-01T11:00:00.000Z"
        assert flat["createdAt"] == "1970-01-01T00:00:00.000Z"
        assert flat["updatedAt"] == "1970-01-01T00:01:00.000Z"
        assert flat["approvedAt"] is None

    def test_equipment_keeps_plain_values(self):
        record = {"id": "eq-1", "name": "Tripod", "category": "camera", "isActive": True, "purchasePrice": 1200}
        flat = flatten(record, Family.EQUIPMENT)
        assert flat["name"] == "Tripod"
        assert flat["isActive"] is True
        assert flat["purchasePrice"] == 1200
        assert flat["purchaseDate"] is None
