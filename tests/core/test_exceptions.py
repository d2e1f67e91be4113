"""Tests for domain exceptions."""

from src.core.exceptions import (
    CatalogInUseError,
    DatabaseError,
    DuplicateAssignmentError,
    DuplicateStockError,
    HasActiveReservationsError,
    InsufficientReservationError,
    InsufficientStockError,
    InvalidQuantityError,
    InvalidStateError,
    LedgerError,
    MaterialNotFoundError,
    NotFoundError,
    OverReleaseError,
    StockError,
    StockNotFoundError,
)


class TestLedgerError:
    def test_code_defaults_to_class_name(self):
        err = LedgerError("boom")
        assert err.code == "LedgerError"
        assert err.details == {}
        assert str(err) == "boom"

    def test_to_dict(self):
        err = LedgerError("boom", code="X", details={"a": 1})
        assert err.to_dict() == {"error": "X", "message": "boom", "details": {"a": 1}}


class TestStockErrors:
    def test_insufficient_stock_message_has_quantities(self):
        err = InsufficientStockError("MAT-1", requested=20, available=12)
        assert err.code == "INSUFFICIENT_STOCK"
        assert "only 12 available, 20 requested" in err.message
        assert err.details == {"material_id": "MAT-1", "requested": 20, "available": 12}

    def test_fractional_quantities_rendered(self):
        err = InsufficientStockError("MAT-1", requested=2.5, available=0.75)
        assert "0.75 available, 2.5 requested" in err.message

    def test_insufficient_reservation(self):
        err = InsufficientReservationError("MAT-1", requested=5, reserved=0)
        assert err.code == "INSUFFICIENT_RESERVATION"
        assert "only 0 reserved" in err.message

    def test_over_release(self):
        err = OverReleaseError("MAT-1", requested=25, reserved=20)
        assert err.code == "OVER_RELEASE"
        assert "release 25" in err.message

    def test_invalid_quantity(self):
        err = InvalidQuantityError(0, "reserve")
        assert err.code == "INVALID_QUANTITY"
        assert "reserve" in err.message

    def test_has_active_reservations(self):
        err = HasActiveReservationsError(7, 20)
        assert err.code == "HAS_ACTIVE_RESERVATIONS"
        assert "20 units reserved" in err.message

    def test_stock_errors_share_base(self):
        for err in (
            InsufficientStockError("M", 1, 0),
            OverReleaseError("M", 1, 0),
            DuplicateStockError("M", 1),
        ):
            assert isinstance(err, StockError)
            assert isinstance(err, LedgerError)


class TestAssignmentErrors:
    def test_invalid_state(self):
        err = InvalidStateError(3, "INSTALLED", "unreserve")
        assert err.code == "INVALID_STATE"
        assert "Cannot unreserve assignment 3 in status INSTALLED" == err.message

    def test_duplicate_assignment_is_invalid_state(self):
        err = DuplicateAssignmentError(1, "PRJ-1", "MAT-1", "general")
        assert isinstance(err, InvalidStateError)
        assert err.code == "DUPLICATE_ASSIGNMENT"
        assert err.details["assignment_id"] == 1


class TestLookupErrors:
    def test_material_not_found(self):
        err = MaterialNotFoundError("MAT-1")
        assert isinstance(err, NotFoundError)
        assert err.code == "MATERIAL_NOT_FOUND"

    def test_stock_not_found_by_material(self):
        err = StockNotFoundError(material_id="MAT-1")
        assert "material MAT-1" in err.message

    def test_stock_not_found_by_id(self):
        err = StockNotFoundError(stock_id=4)
        assert "id 4" in err.message


class TestOtherErrors:
    def test_catalog_in_use(self):
        err = CatalogInUseError("MAT-1", "2 active project assignment(s)")
        assert err.code == "CATALOG_IN_USE"
        assert "2 active" in err.message

    def test_database_error(self):
        err = DatabaseError("apply_mutation", "disk I/O error")
        assert err.code == "DATABASE_ERROR"
        assert err.details["operation"] == "apply_mutation"
